"""
Adaptador de entrada: Parser de estados de cuenta en texto delimitado (CSV).

Flujo:
1. Decodifica los bytes con el charset del banco (UTF-8 tolera BOM).
2. Parte en filas con el lector csv de la librería estándar y limpia cada
   celda.
3. Ubica el encabezado con HeaderResolver (mismo servicio que Excel).
4. Lee cada campo por índice de columna. En CSV no hay celdas combinadas
   ni columnas corridas, así que no hace falta el CellReader.

Una fila con un valor ilegible se descarta (EXTRACTION_FAILED) y el
archivo sigue; en hojas de cálculo, en cambio, es un error fatal.
"""

import csv
import io
from collections.abc import Callable, Sequence
from datetime import date

from statement_ingest.domain.exceptions import ExtractionError
from statement_ingest.domain.models.bank_config import CREDIT, DEBIT, BankParsingConfig
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.header_mapping import HeaderMapping
from statement_ingest.domain.models.row_outcome import RowOutcome
from statement_ingest.domain.ports.process_logger import ProcessLogger
from statement_ingest.domain.ports.statement_parser import StatementParser
from statement_ingest.domain.services.account_detector import cleanup_account, require_account
from statement_ingest.domain.services.header_resolver import HeaderResolver
from statement_ingest.domain.services.row_builder import RawRow, RowBuilder
from statement_ingest.domain.shared.text_cleaner import clean_cell


def decode_content(content: bytes, charset: str, file_name: str = "") -> str:
    """Decodifica el archivo con el charset configurado.

    "UTF-8" se lee como utf-8-sig para descartar el BOM que agregan
    muchos exportadores de bancos.

    Raises:
        ExtractionError: Si el charset no existe o los bytes no son válidos.
    """
    encoding = "utf-8-sig" if charset.replace("-", "").lower() == "utf8" else charset
    try:
        return content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise ExtractionError(file_name, f"No se pudo decodificar como {charset}: {e}") from e


def read_rows(text: str, delimiter: str, file_name: str = "") -> list[list[str]]:
    """Parte el texto en filas de celdas limpias.

    Raises:
        ExtractionError: Si el lector csv rechaza el contenido.
    """
    try:
        return [[clean_cell(cell) for cell in row] for row in csv.reader(io.StringIO(text), delimiter=delimiter)]
    except csv.Error as e:
        raise ExtractionError(file_name, f"CSV mal formado: {e}") from e


class DelimitedStatementParser(StatementParser):
    """Parser de archivos CSV configurados por banco.

    Args:
        logger: Bitácora opcional para encabezado y cuenta.
        today: Fecha de hoy, para bancos sin columna de fecha.
    """

    def __init__(self, logger: ProcessLogger | None = None, today: Callable[[], date] = date.today):
        self._logger = logger
        self._today = today

    @property
    def kind(self) -> FileKind:
        return FileKind.DELIMITED_TEXT

    def parse(
        self,
        content: bytes,
        file_name: str,
        config: BankParsingConfig,
        parser_key: str = "",
        account_no_override: str | None = None,
    ) -> list[RowOutcome]:
        options = config.csv
        rows = read_rows(decode_content(content, options.charset, file_name), options.delimiter, file_name)

        resolver = HeaderResolver(config.headers)
        header = resolver.resolve(rows, file_name)
        if self._logger:
            self._logger.log_header_resolved(file_name, dict(header.mapping.columns), header.first_data_row)

        override = cleanup_account(account_no_override, config.account.cleanup_regex)
        account_no = override or self._account_from_cell(rows, config)
        account_no = require_account(account_no, config.account.required, file_name, parser_key)
        if account_no and self._logger:
            source = "override" if override else "cell"
            self._logger.log_account_detected(file_name, account_no, source)

        builder = RowBuilder(
            config,
            account_no,
            net_from_credit_debit=CREDIT in header.mapping or DEBIT in header.mapping,
            today=self._today,
        )

        outcomes: list[RowOutcome] = []
        index = max(options.skip_rows, header.first_data_row)
        while index < len(rows):
            if header.band_size and resolver.is_header_band(rows, index):
                index += header.band_size
                continue
            row = rows[index]
            if any(row):
                raw = RawRow.from_reader(index, _index_reader(row, header.mapping))
                outcomes.append(builder.build_or_skip(raw))
            index += 1
        return outcomes

    @staticmethod
    def _account_from_cell(rows: Sequence[Sequence[str]], config: BankParsingConfig) -> str | None:
        account = config.account
        if account.cell is None:
            return None
        row, col = account.cell.zero_based
        if 0 <= row < len(rows) and 0 <= col < len(rows[row]):
            return cleanup_account(rows[row][col], account.cleanup_regex)
        return None


def _index_reader(row: Sequence[str], mapping: HeaderMapping) -> Callable[[str], str | None]:
    def read(field_name: str) -> str | None:
        col = mapping.get(field_name)
        if col is None or col >= len(row):
            return None
        return row[col] or None

    return read
