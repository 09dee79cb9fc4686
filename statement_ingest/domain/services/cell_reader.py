"""
Servicio de dominio: Lectura de campos en hojas de cálculo.

En los Excel de muchos bancos el valor de una columna no siempre está en
la celda del encabezado: hay celdas combinadas (solo la esquina superior
izquierda tiene valor) y montos que quedan corridos una o dos columnas.

El CellReader lee en este orden:
1. La celda de la columna mapeada, o la esquina del rango combinado que
   la contiene.
2. Si no sirve, las columnas vecinas (±1..radio, primero la derecha),
   siempre que la vecina no sea de OTRO campo.

Una vecina es de otro campo si:
- su encabezado no está vacío y no es sinónimo del campo buscado
  (protege columnas reales sin mapear, como "Instrument Id");
- es la columna mapeada de otro campo;
- está dentro de un rango combinado que cubre la columna de otro campo.
"""

from statement_ingest.domain.models.bank_config import DEFAULT_NEIGHBOR_SCAN, NUMERIC_FIELDS, NumericConvention
from statement_ingest.domain.models.header_mapping import HeaderContext, HeaderMapping
from statement_ingest.domain.models.sheet_grid import CellValue, SheetGrid
from statement_ingest.domain.shared.money import is_amount
from statement_ingest.domain.shared.text_cleaner import clean_cell


class CellReader:
    """Lee campos lógicos de una hoja con la tolerancia descrita arriba."""

    def __init__(
        self,
        grid: SheetGrid,
        mapping: HeaderMapping,
        context: HeaderContext | None = None,
        convention: NumericConvention | None = None,
        neighbor_scan: int = DEFAULT_NEIGHBOR_SCAN,
    ):
        self._grid = grid
        self._mapping = mapping
        self._context = context
        self._convention = convention or NumericConvention()
        self._neighbor_scan = max(0, neighbor_scan)

    def read(self, row: int, field_name: str) -> CellValue:
        """Valor del campo en la fila, o None si el campo no está mapeado
        o no hay ninguna celda aceptable.

        Los textos se devuelven sin espacios en los extremos; fechas y
        números tipados se devuelven tal cual.
        """
        col = self._mapping.get(field_name)
        if col is None:
            return None

        value = self._cell(row, col)
        if self._is_acceptable(value, field_name):
            return value

        for offset in range(1, self._neighbor_scan + 1):
            for probe in (col + offset, col - offset):
                if self._belongs_to_another_field(row, probe, field_name):
                    continue
                candidate = self._cell(row, probe)
                if self._is_acceptable(candidate, field_name):
                    return candidate
        return None

    def _cell(self, row: int, col: int) -> CellValue:
        value = self._grid.value_or_merged(row, col)
        if isinstance(value, str):
            return clean_cell(value)
        return value

    def _is_acceptable(self, value: CellValue, field_name: str) -> bool:
        if value is None or (isinstance(value, str) and not value):
            return False
        if field_name in NUMERIC_FIELDS:
            return is_amount(value, self._convention)
        return True

    def _belongs_to_another_field(self, row: int, probe: int, field_name: str) -> bool:
        if probe < 0:
            return True

        if self._context is not None:
            header = self._context.header_at(probe)
            if header and not self._context.matches_field(header, field_name):
                return True

        region = self._grid.merged_range_at(row, probe)
        for other_col in self._mapping.other_fields(field_name).values():
            if other_col == probe:
                return True
            if region is not None and region.spans_column(other_col):
                return True
        return False
