"""
Modelo de dominio: Perfil de detección de número de cuenta.

Cada banco pone su número de cuenta en un lugar distinto del encabezado de
la hoja ("A/C No" en la fila 3, "Number" en la columna M, etc.). Un perfil
describe dónde buscar y cómo reconocer un número plausible. Los umbrales
de la heurística (ancho del barrido a la derecha, mínimo de dígitos) viven
aquí para que cada banco pueda ajustarlos.

Los perfiles se construyen una vez en infrastructure/registry.py y se pasan
explícitamente al detector.
"""

import re
from dataclasses import dataclass, field

DEFAULT_VALUE_PATTERN = r"\b\d{9,20}\b"
DEFAULT_NON_ACCOUNT_KEYS = r"(?i)\b(IFSC|CIF|Customer\s*Id|GST|PAN|MICR)\b"


@dataclass(frozen=True)
class AccountDetectionProfile:
    """Heurística de búsqueda del número de cuenta para un banco."""

    label_synonyms: tuple[str, ...]
    """Etiquetas que anteceden al número. Se comparan en minúsculas por
    contención: "a/c no" encuentra "A/C No:"."""

    header_search_rows: int = 80
    """Filas iniciales a revisar (mínimo efectivo: 20)."""

    likely_cols: tuple[int, ...] = ()
    """Columnas (base cero) donde este banco suele poner el número."""

    value_pattern: re.Pattern[str] = field(default_factory=lambda: re.compile(DEFAULT_VALUE_PATTERN))
    """Forma de un número de cuenta plausible."""

    non_account_keys: re.Pattern[str] = field(
        default_factory=lambda: re.compile(DEFAULT_NON_ACCOUNT_KEYS)
    )
    """Etiquetas vecinas que descartan un bloque de dígitos (IFSC, PAN...)."""

    right_scan_columns: int = 25
    min_digits: int = 9

    def __post_init__(self) -> None:
        if self.header_search_rows < 0:
            raise ValueError(f"header_search_rows no puede ser negativo: {self.header_search_rows}")
        if self.min_digits < 1:
            raise ValueError(f"min_digits debe ser >= 1: {self.min_digits}")
        synonyms = tuple(s.lower() for s in self.label_synonyms if s and s.strip())
        object.__setattr__(self, "label_synonyms", synonyms)
        object.__setattr__(self, "likely_cols", tuple(c for c in self.likely_cols if c >= 0))

    @property
    def rows_to_scan(self) -> int:
        return max(20, self.header_search_rows)
