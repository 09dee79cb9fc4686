"""
Adaptador de entrada: Lector de .xlsx usando openpyxl.

Abre el libro con `data_only=True`: las fórmulas se leen con el último
valor que Excel calculó y guardó en el archivo. Una fórmula sin valor
guardado (libro generado por código y nunca abierto en Excel) se lee
como celda vacía. El motor no evalúa fórmulas.

No se usa `read_only=True` porque en ese modo openpyxl no expone los
rangos combinados, y el CellReader los necesita.
"""

import io

from openpyxl import load_workbook

from statement_ingest.domain.exceptions import ExtractionError
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.sheet_grid import MergedRange, SheetGrid
from statement_ingest.domain.ports.sheet_reader import SheetReader


class OpenpyxlSheetReader(SheetReader):
    """Convierte una hoja de un .xlsx a SheetGrid."""

    @property
    def kind(self) -> FileKind:
        return FileKind.SPREADSHEET_MODERN

    def read(self, content: bytes, file_name: str = "", sheet_index: int = 0) -> SheetGrid:
        try:
            workbook = load_workbook(io.BytesIO(content), data_only=True)
        except Exception as e:
            raise ExtractionError(file_name, f"No se pudo abrir el libro .xlsx: {e}")

        try:
            if not 0 <= sheet_index < len(workbook.worksheets):
                raise ExtractionError(
                    file_name,
                    f"El libro tiene {len(workbook.worksheets)} hoja(s); se pidió la {sheet_index}",
                )
            sheet = workbook.worksheets[sheet_index]

            rows = [list(values) for values in sheet.iter_rows(values_only=True)]
            # openpyxl usa coordenadas base uno
            merged = [
                MergedRange(
                    first_row=cell_range.min_row - 1,
                    last_row=cell_range.max_row - 1,
                    first_col=cell_range.min_col - 1,
                    last_col=cell_range.max_col - 1,
                )
                for cell_range in sheet.merged_cells.ranges
            ]
            return SheetGrid.from_rows(rows, merged)
        finally:
            workbook.close()
