"""
Modelo de dominio: Resultado de procesar una fila de origen.

Cada fila de datos produce un RowOutcome: o bien un ParsedRow que se
conserva, o bien la razón por la que se descartó. El parser de cada formato
devuelve la lista completa y el StatementProcessor filtra las conservadas.
Así el descarte es un resultado que se puede inspeccionar y probar.
"""

from dataclasses import dataclass
from enum import Enum

from statement_ingest.domain.models.parsed_row import ParsedRow


class SkipReason(Enum):
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    """Monto ausente, cero o negativo (débitos, totales, líneas de resumen)."""

    EXTRACTION_FAILED = "extraction_failed"
    """Algún campo de la fila no se pudo interpretar."""

    EMPTY_UTR = "empty_utr"
    """La configuración pide descartar filas sin UTR."""

    NO_LINE_MATCH = "no_line_match"
    """Línea de PDF que no coincide con el patrón de movimiento."""


@dataclass(frozen=True)
class RowOutcome:
    """Fila conservada o descartada, con su posición de origen."""

    source_row: int
    """Índice base cero de la fila (o línea) en el archivo."""

    row: ParsedRow | None = None
    skip_reason: SkipReason | None = None
    detail: str = ""

    def __post_init__(self) -> None:
        if (self.row is None) == (self.skip_reason is None):
            raise ValueError("Un RowOutcome tiene fila o razón de descarte, no ambas")

    @property
    def kept(self) -> bool:
        return self.row is not None

    @classmethod
    def keep(cls, source_row: int, row: ParsedRow) -> "RowOutcome":
        return cls(source_row=source_row, row=row)

    @classmethod
    def skip(cls, source_row: int, reason: SkipReason, detail: str = "") -> "RowOutcome":
        return cls(source_row=source_row, skip_reason=reason, detail=detail)
