"""
Modelo de dominio: Hoja de cálculo independiente de la librería.

Los lectores de hojas (openpyxl para .xlsx, xlrd para .xls) convierten el
libro a un SheetGrid. El resto del motor (encabezados, CellReader, detección
de cuenta) solo conoce este modelo.

Semántica de celdas combinadas: únicamente la celda superior izquierda de un
rango combinado tiene valor; las demás son None. Es lo que hacen ambas
librerías, y lo que el CellReader compensa.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal

CellValue = str | int | float | Decimal | datetime | date | time | None


@dataclass(frozen=True)
class MergedRange:
    """Rango combinado, base cero, inclusivo en ambos extremos."""

    first_row: int
    last_row: int
    first_col: int
    last_col: int

    def contains(self, row: int, col: int) -> bool:
        return self.first_row <= row <= self.last_row and self.first_col <= col <= self.last_col

    def spans_column(self, col: int) -> bool:
        return self.first_col <= col <= self.last_col


@dataclass(frozen=True)
class SheetGrid:
    """Valores de una hoja fila por fila, más sus rangos combinados."""

    rows: tuple[tuple[CellValue, ...], ...]
    merged: tuple[MergedRange, ...] = field(default_factory=tuple)

    @classmethod
    def from_rows(cls, rows, merged=()) -> "SheetGrid":
        """Construye el grid a partir de listas (recorta celdas vacías al final)."""
        normalized = []
        for row in rows:
            values = list(row)
            while values and _is_empty(values[-1]):
                values.pop()
            normalized.append(tuple(values))
        return cls(rows=tuple(normalized), merged=tuple(merged))

    @property
    def last_row(self) -> int:
        """Índice de la última fila (-1 si la hoja está vacía)."""
        return len(self.rows) - 1

    def width(self, row: int) -> int:
        if 0 <= row < len(self.rows):
            return len(self.rows[row])
        return 0

    def value(self, row: int, col: int) -> CellValue:
        if row < 0 or col < 0 or row >= len(self.rows):
            return None
        cells = self.rows[row]
        return cells[col] if col < len(cells) else None

    def merged_range_at(self, row: int, col: int) -> MergedRange | None:
        for region in self.merged:
            if region.contains(row, col):
                return region
        return None

    def value_or_merged(self, row: int, col: int) -> CellValue:
        """Valor directo; si está vacío, el de la esquina del rango combinado."""
        direct = self.value(row, col)
        if not _is_empty(direct):
            return direct
        region = self.merged_range_at(row, col)
        if region is not None:
            top_left = self.value(region.first_row, region.first_col)
            if not _is_empty(top_left):
                return top_left
        return None

    def text(self, row: int, col: int) -> str:
        """Texto de la celda directa (sin buscar en rangos combinados)."""
        return cell_to_text(self.value(row, col))

    def text_rows(self) -> list[list[str]]:
        """Toda la hoja como texto, para buscar encabezados."""
        return [[cell_to_text(v) for v in row] for row in self.rows]

    def row_line(self, row: int) -> str:
        """Texto de la fila completa separado por espacios."""
        return " ".join(self.text(row, c) for c in range(self.width(row))).strip()

    def is_blank_row(self, row: int) -> bool:
        return all(_is_empty(self.value(row, c)) for c in range(self.width(row)))


def cell_to_text(value: CellValue) -> str:
    """Convierte el valor de una celda a texto.

    - None → ""
    - float entero (123456789012.0) → "123456789012", sin notación científica
    - datetime → ISO ("2024-01-05T10:30:00")
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.replace("\u00a0", " ").strip()
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _is_empty(value: CellValue) -> bool:
    return value is None or (isinstance(value, str) and not value.replace("\u00a0", " ").strip())
