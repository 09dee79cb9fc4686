"""
Modelo de dominio: Configuración de parseo por banco y por formato.

La configuración describe, sin código por banco, cómo leer un estado de
cuenta: dónde está el encabezado, qué sinónimos tiene cada columna, cómo se
escriben los números y las fechas, cómo se parte la referencia, etc.

Se carga una sola vez (ver infrastructure/config_loader.py) y se comparte
entre parseos concurrentes. Por eso todo es frozen y las colecciones son
tuplas o MappingProxyType.

Los nombres de campo lógicos ("date", "time", "reference", "credit",
"debit", "amount", "balance") son los mismos que usa la configuración
original de los bancos.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from statement_ingest.domain.exceptions import UnsupportedFormatError
from statement_ingest.domain.models.file_kind import FileKind

DATE = "date"
TIME = "time"
REFERENCE = "reference"
CREDIT = "credit"
DEBIT = "debit"
AMOUNT = "amount"
BALANCE = "balance"

LOGICAL_FIELDS: tuple[str, ...] = (DATE, TIME, REFERENCE, CREDIT, DEBIT, AMOUNT, BALANCE)
NUMERIC_FIELDS: frozenset[str] = frozenset({CREDIT, DEBIT, AMOUNT, BALANCE})

DEFAULT_NEIGHBOR_SCAN = 3

# (?<name> de la sintaxis original, sin tocar (?<= ni (?<!
_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")


def python_named_groups(pattern: str) -> str:
    """Traduce los grupos (?<name>...) a la sintaxis de Python (?P<name>...)."""
    return _NAMED_GROUP.sub("(?P<", pattern)


def check_regex(pattern: str | None, key: str) -> None:
    """Valida una expresión regular de la configuración.

    Raises:
        ValueError: Si el patrón no compila; el mensaje nombra la clave.
    """
    if pattern is None:
        return
    try:
        re.compile(pattern)
    except re.error as e:
        raise ValueError(f"{key}: expresión regular inválida ({e})") from e


class HeaderMode(Enum):
    FIXED = "fixed"
    SEARCH = "search"


class DateInput(Enum):
    STRING = "string"
    EXCEL_SERIAL = "excelSerial"


class PartsCountMode(Enum):
    EXACT = "exact"
    ONE_OF = "oneOf"


class PayInRuleType(Enum):
    AMOUNT_POSITIVE = "amountPositive"
    CREDIT_COLUMN = "creditColumn"
    ORDER_ID_NO_SPACE = "orderIdNoSpace"
    UTR_NO_SPACE = "utrNoSpace"
    NARRATION_CONTAINS = "narrationContains"


class RowStopMode(Enum):
    NONE = "none"
    BLANK_ROWS = "blankRows"
    UNTIL = "until"


# ============================================================
# ENCABEZADOS
# ============================================================


@dataclass(frozen=True)
class ColumnIndices:
    """Índices de columna (base cero) para el modo de encabezado fijo."""

    date: int | None = None
    time: int | None = None
    reference: int | None = None
    credit: int | None = None
    debit: int | None = None
    amount: int | None = None
    balance: int | None = None

    def as_mapping(self) -> dict[str, int]:
        """Devuelve solo los campos configurados: {campo: columna}."""
        return {name: getattr(self, name) for name in LOGICAL_FIELDS if getattr(self, name) is not None}


@dataclass(frozen=True)
class FixedHeaders:
    """Encabezado en posición conocida."""

    row_start: int
    """Primera fila de datos (base cero, tal cual la usa el archivo)."""

    columns: ColumnIndices = field(default_factory=ColumnIndices)

    def __post_init__(self) -> None:
        if self.row_start < 0:
            raise ValueError(f"row_start no puede ser negativo: {self.row_start}")


@dataclass(frozen=True)
class RowRange:
    """Rango de filas inclusivo en ambos extremos."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Rango de filas inválido: {self.start}..{self.end}")


@dataclass(frozen=True)
class SearchHeaders:
    """Encabezado que se busca por texto usando sinónimos."""

    expect: Mapping[str, tuple[str, ...]]
    """Sinónimos por campo lógico. Ejemplo: {"date": ("Txn Date", "Date")}."""

    scan_range: RowRange | None = None
    """Filas donde buscar el encabezado (se desliza fila por fila)."""

    fixed_header_rows: RowRange | None = None
    """Si está presente, estas filas SON el encabezado; no se busca."""

    row_start_offset: int = 1
    """Distancia entre la última fila de encabezado y la primera de datos."""

    multi_row_count: int = 1
    """Cuántas filas se fusionan para formar el encabezado."""

    one_based_rows: bool = True
    """Los rangos usan numeración de Excel (1 = primera fila)."""

    merge_separator: str = " "

    def __post_init__(self) -> None:
        if not self.expect:
            raise ValueError("headers.search.expect es obligatorio")
        if self.scan_range is None and self.fixed_header_rows is None:
            raise ValueError("Se requiere scan_range o fixed_header_rows")
        if self.multi_row_count < 1:
            raise ValueError(f"multi_row_count debe ser >= 1: {self.multi_row_count}")
        frozen = {key: tuple(values) for key, values in self.expect.items()}
        object.__setattr__(self, "expect", MappingProxyType(frozen))

    def to_zero_based(self, rows: RowRange) -> RowRange:
        if self.one_based_rows:
            return RowRange(rows.start - 1, rows.end - 1)
        return rows


@dataclass(frozen=True)
class HeaderConfig:
    mode: HeaderMode
    fixed: FixedHeaders | None = None
    search: SearchHeaders | None = None

    def __post_init__(self) -> None:
        if self.mode is HeaderMode.FIXED and self.fixed is None:
            raise ValueError("headers.mode=fixed requiere headers.fixed")
        if self.mode is HeaderMode.SEARCH and self.search is None:
            raise ValueError("headers.mode=search requiere headers.search")


# ============================================================
# VALORES
# ============================================================


@dataclass(frozen=True)
class NumericConvention:
    """Separadores numéricos del banco."""

    thousands_separator: str = ","
    decimal_separator: str = "."


@dataclass(frozen=True)
class DateParseConfig:
    """Cómo interpretar fecha y hora.

    Los patrones usan la sintaxis de la configuración original
    ("dd/MM/yyyy", "HH:mm:ss"); date_parser.py los traduce a strptime.
    """

    input: DateInput = DateInput.STRING
    format: str = "dd/MM/yyyy"
    time_format: str = "HH:mm:ss"
    with_time_in_same_field: bool = False


@dataclass(frozen=True)
class PartsCount:
    mode: PartsCountMode
    values: tuple[int, ...]

    def accepts(self, count: int) -> bool:
        if self.mode is PartsCountMode.EXACT:
            return bool(self.values) and count == self.values[0]
        return count in self.values


@dataclass(frozen=True)
class ReferenceField:
    """Posición de un token dentro de la referencia partida."""

    index: int
    digits_only: bool = False


@dataclass(frozen=True)
class ReferenceConfig:
    splitter: str | None = None
    parts_count: PartsCount | None = None
    order_id: ReferenceField | None = None
    utr: ReferenceField | None = None
    utr_fallback_regex: str | None = None
    skip_if_empty_utr: bool = False

    def __post_init__(self) -> None:
        check_regex(self.utr_fallback_regex, "utrFallback.regex")


@dataclass(frozen=True)
class PayInRule:
    type: PayInRuleType | None = None
    narration_contains_any: tuple[str, ...] = ()


@dataclass(frozen=True)
class RowStop:
    mode: RowStopMode = RowStopMode.NONE
    until_regex: str | None = None

    def __post_init__(self) -> None:
        if self.mode is RowStopMode.UNTIL and not self.until_regex:
            raise ValueError("rowStop.mode=until requiere untilRegex")
        check_regex(self.until_regex, "rowStop.untilRegex")


@dataclass(frozen=True)
class CellLocation:
    """Celda puntual (por defecto con numeración de Excel, base uno)."""

    row: int
    col: int
    one_based: bool = True

    @property
    def zero_based(self) -> tuple[int, int]:
        if self.one_based:
            return self.row - 1, self.col - 1
        return self.row, self.col


@dataclass(frozen=True)
class AccountConfig:
    required: bool = False
    cell: CellLocation | None = None
    text_regex: str | None = None
    cleanup_regex: str = r"\D"

    def __post_init__(self) -> None:
        check_regex(self.text_regex, "account.textRegex")
        check_regex(self.cleanup_regex, "account.cleanupRegex")


@dataclass(frozen=True)
class CsvOptions:
    delimiter: str = ","
    charset: str = "UTF-8"
    skip_rows: int = 0

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"El delimitador debe ser un solo carácter: '{self.delimiter}'")


@dataclass(frozen=True)
class PageTableConfig:
    """Recorte de la tabla de movimientos dentro del texto de un PDF."""

    line_pattern: str
    start_after_regex: str | None = None
    stop_before_regex: str | None = None
    account_regex: str | None = None

    def __post_init__(self) -> None:
        check_regex(python_named_groups(self.line_pattern), "pdfTable.linePattern")
        check_regex(self.start_after_regex, "pdfTable.startAfterRegex")
        check_regex(self.stop_before_regex, "pdfTable.stopBeforeRegex")
        check_regex(self.account_regex, "pdfTable.accountRegex")


# ============================================================
# CONFIGURACIÓN COMPLETA
# ============================================================


@dataclass(frozen=True)
class BankParsingConfig:
    """Configuración de un banco para un formato de archivo."""

    headers: HeaderConfig | None = None
    numeric: NumericConvention = field(default_factory=NumericConvention)
    date_parse: DateParseConfig = field(default_factory=DateParseConfig)
    reference: ReferenceConfig = field(default_factory=ReferenceConfig)
    pay_in_rule: PayInRule = field(default_factory=PayInRule)
    row_stop: RowStop = field(default_factory=RowStop)
    account: AccountConfig = field(default_factory=AccountConfig)
    csv: CsvOptions = field(default_factory=CsvOptions)
    sheet_index: int = 0
    neighbor_scan: int = DEFAULT_NEIGHBOR_SCAN
    page_table: PageTableConfig | None = None


@dataclass(frozen=True)
class BankConfig:
    """Configuración de un banco para todos sus formatos."""

    parser_key: str
    csv: BankParsingConfig | None = None
    xlsx: BankParsingConfig | None = None
    xls: BankParsingConfig | None = None
    pdf: BankParsingConfig | None = None

    def for_kind(self, kind: FileKind) -> BankParsingConfig:
        """Devuelve la configuración del formato pedido.

        Raises:
            UnsupportedFormatError: Si el banco no tiene configuración
                                    para ese formato.
        """
        config = {
            FileKind.DELIMITED_TEXT: self.csv,
            FileKind.SPREADSHEET_MODERN: self.xlsx,
            FileKind.SPREADSHEET_LEGACY: self.xls,
            FileKind.PAGE_DOCUMENT: self.pdf,
        }[kind]
        if config is None:
            raise UnsupportedFormatError(
                self.parser_key,
                f"El banco no tiene configuración para '{kind.value}'",
            )
        return config
