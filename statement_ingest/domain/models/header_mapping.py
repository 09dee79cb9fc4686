"""
Modelo de dominio: Mapeo de encabezado.

HeaderMapping dice en qué columna (base cero) está cada campo lógico.
Se construye una vez por archivo y no se modifica después.

HeaderContext (solo hojas de cálculo) guarda el texto de encabezado de cada
columna y la tabla de sinónimos, para que el CellReader sepa si una columna
vecina pertenece a OTRO campo (conocido o no) antes de leerla.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from statement_ingest.domain.models.bank_config import AMOUNT, CREDIT, DATE, DEBIT, REFERENCE
from statement_ingest.domain.shared.text_cleaner import normalize_header


@dataclass(frozen=True)
class HeaderMapping:
    """Campo lógico → índice de columna."""

    columns: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def get(self, field_name: str) -> int | None:
        return self.columns.get(field_name)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.columns

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def is_sufficient(self) -> bool:
        """Tiene fecha, referencia y al menos un campo de monto."""
        has_amount = AMOUNT in self.columns or CREDIT in self.columns or DEBIT in self.columns
        return DATE in self.columns and REFERENCE in self.columns and has_amount

    def other_fields(self, field_name: str) -> dict[str, int]:
        """Columnas de todos los campos excepto el indicado."""
        return {name: col for name, col in self.columns.items() if name != field_name}


@dataclass(frozen=True)
class HeaderContext:
    """Texto de encabezado por columna + tabla de sinónimos esperados."""

    header_by_col: tuple[str, ...]
    expect: Mapping[str, tuple[str, ...]]

    def header_at(self, col: int) -> str:
        """Encabezado normalizado de la columna ("" si está fuera de rango)."""
        if 0 <= col < len(self.header_by_col):
            return normalize_header(self.header_by_col[col])
        return ""

    def matches_field(self, header_text: str, field_name: str) -> bool:
        """Indica si un encabezado normalizado es sinónimo del campo."""
        synonyms = self.expect.get(field_name) or ()
        return any(header_text == normalize_header(s) for s in synonyms)
