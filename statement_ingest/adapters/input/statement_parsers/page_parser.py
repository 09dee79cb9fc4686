"""
Adaptador de entrada: Parser de estados de cuenta en PDF.

Los PDF no tienen columnas: el banco describe cada movimiento con una
expresión regular sobre la línea de texto (pdfTable.linePattern), con
grupos nombrados por campo lógico:

    (?P<date>\\d{2}/\\d{2}/\\d{4})\\s+(?P<ref>\\S+)\\s+(?P<credit>[\\d,.]+)

Grupos reconocidos: date, time, reference (o ref), credit, debit, amount,
balance. La configuración original usa la sintaxis (?<name>...); se acepta
y se traduce.

Flujo:
1. Extrae el texto de todas las páginas (TextExtractor inyectado).
2. Recorta la tabla: lo que sigue a startAfterRegex y lo que precede a
   stopBeforeRegex.
3. Cada línea no vacía debe coincidir COMPLETA con el patrón. Si no,
   queda como descarte NO_LINE_MATCH (encabezados, totales, pies de página).
"""

import re
from collections.abc import Callable
from datetime import date

from statement_ingest.domain.exceptions import ConfigurationError
from statement_ingest.domain.models.bank_config import (
    AMOUNT,
    BALANCE,
    CREDIT,
    DATE,
    DEBIT,
    REFERENCE,
    TIME,
    BankParsingConfig,
    PageTableConfig,
    python_named_groups,
)
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.page_text import join_pages
from statement_ingest.domain.models.row_outcome import RowOutcome, SkipReason
from statement_ingest.domain.ports.process_logger import ProcessLogger
from statement_ingest.domain.ports.statement_parser import StatementParser
from statement_ingest.domain.ports.text_extractor import TextExtractor
from statement_ingest.domain.services.account_detector import (
    cleanup_account,
    find_account_in_text,
    require_account,
)
from statement_ingest.domain.services.row_builder import RawRow, RowBuilder
from statement_ingest.domain.shared.text_cleaner import clean_pdf_text

_GROUP_ALIASES: dict[str, tuple[str, ...]] = {
    DATE: (DATE,),
    TIME: (TIME,),
    REFERENCE: (REFERENCE, "ref"),
    CREDIT: (CREDIT,),
    DEBIT: (DEBIT,),
    AMOUNT: (AMOUNT,),
    BALANCE: (BALANCE,),
}


def compile_line_pattern(pattern: str) -> re.Pattern[str]:
    """Compila el patrón de línea aceptando grupos con sintaxis (?<name>...).

    Raises:
        ConfigurationError: Si el patrón no es una expresión regular válida.

    Ejemplos:
        >>> compile_line_pattern(r"(?<date>\\S+) (?<ref>\\S+)").groupindex.keys()
        dict_keys(['date', 'ref'])
    """
    try:
        return re.compile(python_named_groups(pattern))
    except re.error as e:
        raise ConfigurationError("pdfTable.linePattern", str(e)) from e


def slice_table(text: str, table: PageTableConfig) -> str:
    """Recorta el texto entre startAfterRegex y stopBeforeRegex.

    Un marcador ausente no recorta nada de su lado.
    """
    if table.start_after_regex:
        start = re.search(table.start_after_regex, text, re.MULTILINE)
        if start:
            text = text[start.end():]
    if table.stop_before_regex:
        stop = re.search(table.stop_before_regex, text, re.MULTILINE)
        if stop:
            text = text[: stop.start()]
    return text


class PageStatementParser(StatementParser):
    """Parser de PDF basado en un patrón de línea por banco.

    Args:
        text_extractor: Adaptador que extrae el texto de cada página.
        logger: Bitácora opcional para la cuenta detectada.
        today: Fecha de hoy, para bancos sin fecha en la línea.
    """

    def __init__(
        self,
        text_extractor: TextExtractor,
        logger: ProcessLogger | None = None,
        today: Callable[[], date] = date.today,
    ):
        if not text_extractor.can_handle(FileKind.PAGE_DOCUMENT):
            raise ValueError(f"El extractor '{text_extractor.name}' no maneja documentos por página")
        self._extractor = text_extractor
        self._logger = logger
        self._today = today

    @property
    def kind(self) -> FileKind:
        return FileKind.PAGE_DOCUMENT

    def parse(
        self,
        content: bytes,
        file_name: str,
        config: BankParsingConfig,
        parser_key: str = "",
        account_no_override: str | None = None,
    ) -> list[RowOutcome]:
        table = config.page_table
        if table is None:
            raise ConfigurationError("pdfTable", "El banco no tiene patrón de línea para PDF")
        pattern = compile_line_pattern(table.line_pattern)

        text = clean_pdf_text(join_pages(self._extractor.extract(content, file_name)))

        override = cleanup_account(account_no_override, config.account.cleanup_regex)
        account_no = override or self._account_from_text(text, config)
        account_no = require_account(account_no, config.account.required, file_name, parser_key)
        if account_no and self._logger:
            source = "override" if override else "text"
            self._logger.log_account_detected(file_name, account_no, source)

        groups = set(pattern.groupindex)
        builder = RowBuilder(
            config,
            account_no,
            net_from_credit_debit=CREDIT in groups or DEBIT in groups,
            today=self._today,
        )

        outcomes: list[RowOutcome] = []
        for index, line in enumerate(slice_table(text, table).split("\n")):
            line = line.strip()
            if not line:
                continue
            match = pattern.fullmatch(line)
            if match is None:
                outcomes.append(RowOutcome.skip(index, SkipReason.NO_LINE_MATCH, line))
                continue
            raw = RawRow.from_reader(index, _group_reader(match))
            outcomes.append(builder.build_or_skip(raw))
        return outcomes

    @staticmethod
    def _account_from_text(text: str, config: BankParsingConfig) -> str | None:
        account = config.account
        regex = account.text_regex or config.page_table.account_regex
        if not regex:
            return None
        return find_account_in_text(text, regex, account.cleanup_regex)


def _group_reader(match: re.Match[str]) -> Callable[[str], str | None]:
    found = match.groupdict()

    def read(field_name: str) -> str | None:
        for name in _GROUP_ALIASES[field_name]:
            value = found.get(name)
            if value is not None and value.strip():
                return value.strip()
        return None

    return read
