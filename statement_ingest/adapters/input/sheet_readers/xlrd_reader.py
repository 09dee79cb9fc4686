"""
Adaptador de entrada: Lector de .xls (Excel 97-2003) usando xlrd.

openpyxl no lee el formato binario antiguo; xlrd sí. Se abre con
`formatting_info=True` porque sin eso xlrd no reporta los rangos
combinados.

xlrd guarda las fechas como números de serie con tipo XL_CELL_DATE; aquí
se convierten a datetime (o time, si el serial es solo una fracción de
día) para que el resto del motor las vea igual que las de openpyxl.
"""

from datetime import time

import xlrd
from xlrd.sheet import Cell

from statement_ingest.domain.exceptions import ExtractionError
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.sheet_grid import CellValue, MergedRange, SheetGrid
from statement_ingest.domain.ports.sheet_reader import SheetReader


class XlrdSheetReader(SheetReader):
    """Convierte una hoja de un .xls a SheetGrid."""

    @property
    def kind(self) -> FileKind:
        return FileKind.SPREADSHEET_LEGACY

    def read(self, content: bytes, file_name: str = "", sheet_index: int = 0) -> SheetGrid:
        try:
            book = xlrd.open_workbook(file_contents=content, formatting_info=True)
        except Exception as e:
            raise ExtractionError(file_name, f"No se pudo abrir el libro .xls: {e}")

        try:
            if not 0 <= sheet_index < book.nsheets:
                raise ExtractionError(
                    file_name,
                    f"El libro tiene {book.nsheets} hoja(s); se pidió la {sheet_index}",
                )
            sheet = book.sheet_by_index(sheet_index)

            rows = [
                [_cell_value(sheet.cell(r, c), book.datemode) for c in range(sheet.row_len(r))]
                for r in range(sheet.nrows)
            ]
            # xlrd da los límites superiores exclusivos
            merged = [
                MergedRange(first_row=rlo, last_row=rhi - 1, first_col=clo, last_col=chi - 1)
                for rlo, rhi, clo, chi in sheet.merged_cells
            ]
            return SheetGrid.from_rows(rows, merged)
        finally:
            book.release_resources()


def _cell_value(cell: Cell, datemode: int) -> CellValue:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        if 0 <= cell.value < 1:
            _, _, _, hour, minute, second = xlrd.xldate_as_tuple(cell.value, datemode)
            return time(hour, minute, second)
        return xlrd.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    return cell.value
