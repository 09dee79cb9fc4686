"""
Adaptador de entrada: Parser de estados de cuenta en hojas de cálculo.

Sirve para .xlsx y .xls: la diferencia entre formatos queda en el
SheetReader que se inyecta (openpyxl o xlrd). Aquí solo se ve un SheetGrid.

Flujo:
1. Lee la hoja configurada (sheet_index).
2. Número de cuenta: el del llamador, la celda configurada o la detección
   heurística del AccountNumberDetector, en ese orden.
3. Ubica el encabezado. Los títulos combinados se reparten entre las
   columnas que cubren.
4. Recorre las filas de datos:
   - salta encabezados repetidos (bandas del mismo tamaño que el encabezado);
   - se detiene según rowStop (fila vacía, o fila que coincide con untilRegex);
   - lee cada campo con el CellReader (celdas combinadas y columnas corridas).

Cualquier error de una fila detiene el archivo con RowExtractionError, con
el índice de la fila para poder ubicarla.
"""

import re
from collections.abc import Callable, Mapping
from datetime import date

from statement_ingest.domain.exceptions import RowExtractionError
from statement_ingest.domain.models.account_profile import AccountDetectionProfile
from statement_ingest.domain.models.bank_config import CREDIT, DEBIT, BankParsingConfig, RowStopMode
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.row_outcome import RowOutcome
from statement_ingest.domain.models.sheet_grid import SheetGrid, cell_to_text
from statement_ingest.domain.ports.process_logger import ProcessLogger
from statement_ingest.domain.ports.sheet_reader import SheetReader
from statement_ingest.domain.ports.statement_parser import StatementParser
from statement_ingest.domain.services.account_detector import (
    AccountDetection,
    AccountNumberDetector,
    cleanup_account,
    require_account,
)
from statement_ingest.domain.services.cell_reader import CellReader
from statement_ingest.domain.services.header_resolver import HeaderResolver
from statement_ingest.domain.services.row_builder import RawRow, RowBuilder


class SpreadsheetStatementParser(StatementParser):
    """Parser de libros de Excel configurados por banco.

    Args:
        sheet_reader: Lector del formato de libro (define `kind`).
        profiles: Perfiles de detección de cuenta por parser_key. Debe
                  incluir el perfil por defecto.
        logger: Bitácora opcional para encabezado y cuenta.
        today: Fecha de hoy, para bancos sin columna de fecha.
    """

    def __init__(
        self,
        sheet_reader: SheetReader,
        profiles: Mapping[str, AccountDetectionProfile],
        logger: ProcessLogger | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._reader = sheet_reader
        self._detector = AccountNumberDetector(profiles)
        self._logger = logger
        self._today = today

    @property
    def kind(self) -> FileKind:
        return self._reader.kind

    def parse(
        self,
        content: bytes,
        file_name: str,
        config: BankParsingConfig,
        parser_key: str = "",
        account_no_override: str | None = None,
    ) -> list[RowOutcome]:
        grid = self._reader.read(content, file_name, config.sheet_index)

        detection = self._account(grid, config, parser_key, account_no_override)
        account_no = require_account(
            detection.account_no if detection else None,
            config.account.required,
            file_name,
            parser_key,
        )
        if detection and self._logger:
            self._logger.log_account_detected(file_name, detection.account_no, detection.source)

        text_rows = grid.text_rows()
        resolver = HeaderResolver(config.headers, fill_forward_merged=True)
        header = resolver.resolve(text_rows, file_name)
        if self._logger:
            self._logger.log_header_resolved(file_name, dict(header.mapping.columns), header.first_data_row)

        reader = CellReader(grid, header.mapping, header.context, config.numeric, config.neighbor_scan)
        builder = RowBuilder(
            config,
            account_no,
            net_from_credit_debit=CREDIT in header.mapping or DEBIT in header.mapping,
            today=self._today,
        )
        until = re.compile(config.row_stop.until_regex) if config.row_stop.mode is RowStopMode.UNTIL else None

        outcomes: list[RowOutcome] = []
        row = header.first_data_row
        while row <= grid.last_row:
            if header.band_size and resolver.is_header_band(text_rows, row):
                row += header.band_size
                continue
            if config.row_stop.mode is RowStopMode.BLANK_ROWS and grid.is_blank_row(row):
                break
            if until is not None and until.search(grid.row_line(row)):
                break

            try:
                raw = RawRow.from_reader(row, lambda field_name: reader.read(row, field_name))
                outcomes.append(builder.build(raw))
            except Exception as e:
                raise RowExtractionError(file_name, row, str(e)) from e
            row += 1
        return outcomes

    def _account(
        self,
        grid: SheetGrid,
        config: BankParsingConfig,
        parser_key: str,
        account_no_override: str | None,
    ) -> AccountDetection | None:
        account = config.account
        if account_no_override:
            cleaned = cleanup_account(account_no_override, account.cleanup_regex)
            if cleaned:
                return AccountDetection(cleaned, "override")

        if account.cell is not None:
            row, col = account.cell.zero_based
            cleaned = cleanup_account(cell_to_text(grid.value_or_merged(row, col)), account.cleanup_regex)
            if cleaned:
                return AccountDetection(cleaned, "cell")

        return self._detector.detect(grid, parser_key)
