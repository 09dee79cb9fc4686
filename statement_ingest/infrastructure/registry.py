"""
Registro de parsers por formato y de perfiles de detección de cuenta.

Centraliza dos relaciones que se construyen UNA vez al arrancar:
- FileKind → StatementParser (un parser por cada formato).
- parser_key → AccountDetectionProfile (con un perfil por defecto).

¿Por qué un registro separado y no hardcodear en el orquestador?
Porque el orquestador no debe saber qué parsers existen. Solo pide
"dame el parser para CSV" y el registro se lo da.

create_default_registry() exige un parser por cada FileKind: agregar un
formato al enum sin su parser falla al arrancar, no con el primer archivo.
"""

from collections.abc import Callable, Mapping
from datetime import date
from types import MappingProxyType

from statement_ingest.domain.models.account_profile import AccountDetectionProfile
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.ports.process_logger import ProcessLogger
from statement_ingest.domain.ports.statement_parser import StatementParser
from statement_ingest.domain.services.account_detector import DEFAULT_PROFILE_KEY


class StatementParserRegistry:
    """Registro de parsers de estados de cuenta por formato."""

    def __init__(self) -> None:
        self._parsers: dict[FileKind, StatementParser] = {}

    def register(self, parser: StatementParser) -> None:
        """Registra un parser. La clave es parser.kind.

        Raises:
            ValueError: Si ya existe un parser para ese formato.
        """
        kind = parser.kind
        if kind in self._parsers:
            raise ValueError(
                f"Ya existe un parser registrado para '{kind.value}': "
                f"{type(self._parsers[kind]).__name__}. "
                f"No se puede registrar {type(parser).__name__}."
            )
        self._parsers[kind] = parser

    def get(self, kind: FileKind) -> StatementParser:
        """Obtiene el parser de un formato.

        Raises:
            KeyError: Si no hay parser para ese formato. Con un registro
                      armado por create_default_registry no ocurre.
        """
        try:
            return self._parsers[kind]
        except KeyError:
            raise KeyError(f"No hay parser registrado para '{kind.value}'") from None

    @property
    def available_kinds(self) -> list[FileKind]:
        """Formatos con parser, en el orden del enum."""
        return [kind for kind in FileKind if kind in self._parsers]

    @property
    def missing_kinds(self) -> list[FileKind]:
        return [kind for kind in FileKind if kind not in self._parsers]

    def __len__(self) -> int:
        return len(self._parsers)


def create_default_account_profiles() -> Mapping[str, AccountDetectionProfile]:
    """Perfiles de detección de cuenta conocidos, más el perfil por defecto.

    Returns:
        Mapping inmutable parser_key (minúsculas) → perfil.
    """
    default = AccountDetectionProfile(
        label_synonyms=(
            "account no",
            "account number",
            "a/c no",
            "a/c number",
            "acc no",
            "acc number",
            "number",
            "no.",
            "ac no",
            "ac number",
        ),
        header_search_rows=80,
        likely_cols=(10, 11, 12, 13, 14),
    )
    kgb = AccountDetectionProfile(
        label_synonyms=("number", "account no", "account number", "a/c no", "a/c number"),
        header_search_rows=80,
        likely_cols=(11, 12, 13),
    )
    return MappingProxyType({DEFAULT_PROFILE_KEY: default, "kgb": kgb})


def create_default_registry(
    logger: ProcessLogger | None = None,
    today: Callable[[], date] = date.today,
    profiles: Mapping[str, AccountDetectionProfile] | None = None,
) -> StatementParserRegistry:
    """Crea un registro con un parser por cada FileKind.

    Args:
        logger: Bitácora que reciben los parsers (encabezado, cuenta).
        today: Fecha de hoy, para bancos sin columna de fecha.
        profiles: Perfiles de detección de cuenta. Por defecto,
                  create_default_account_profiles().

    Raises:
        RuntimeError: Si algún FileKind quedó sin parser.
    """
    # Los adaptadores se importan aquí para que el dominio no dependa de
    # pdfplumber, openpyxl ni xlrd al importar este módulo.
    from statement_ingest.adapters.input.sheet_readers.openpyxl_reader import OpenpyxlSheetReader
    from statement_ingest.adapters.input.sheet_readers.xlrd_reader import XlrdSheetReader
    from statement_ingest.adapters.input.statement_parsers.delimited_parser import DelimitedStatementParser
    from statement_ingest.adapters.input.statement_parsers.page_parser import PageStatementParser
    from statement_ingest.adapters.input.statement_parsers.spreadsheet_parser import SpreadsheetStatementParser
    from statement_ingest.adapters.input.text_extractors.pdfplumber_extractor import PdfplumberExtractor

    if profiles is None:
        profiles = create_default_account_profiles()

    registry = StatementParserRegistry()
    registry.register(DelimitedStatementParser(logger=logger, today=today))
    registry.register(SpreadsheetStatementParser(OpenpyxlSheetReader(), profiles, logger=logger, today=today))
    registry.register(SpreadsheetStatementParser(XlrdSheetReader(), profiles, logger=logger, today=today))
    registry.register(PageStatementParser(PdfplumberExtractor(), logger=logger, today=today))

    missing = registry.missing_kinds
    if missing:
        raise RuntimeError(f"Formatos sin parser: {[kind.value for kind in missing]}")
    return registry
