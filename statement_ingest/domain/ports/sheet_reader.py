"""
Puerto de entrada: Lector de hojas de cálculo.

Convierte un libro de Excel a un SheetGrid independiente de la librería.
Hay un adaptador por formato:

    SheetReader (interfaz)
    ├── OpenpyxlSheetReader     → .xlsx
    └── XlrdSheetReader         → .xls (formato binario antiguo)
"""

from abc import ABC, abstractmethod

from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.sheet_grid import SheetGrid


class SheetReader(ABC):
    """Interfaz para leer una hoja de un libro de Excel."""

    @property
    @abstractmethod
    def kind(self) -> FileKind:
        """Formato de libro que este lector entiende."""
        ...

    @abstractmethod
    def read(self, content: bytes, file_name: str = "", sheet_index: int = 0) -> SheetGrid:
        """Lee la hoja indicada del libro.

        Las fórmulas se leen con su último valor calculado; una fórmula sin
        valor calculado es una celda vacía.

        Args:
            content: Bytes del libro completo.
            file_name: Nombre original. Solo para mensajes de error.
            sheet_index: Índice (base cero) de la hoja a leer.

        Returns:
            SheetGrid con valores y rangos combinados.

        Raises:
            ExtractionError: Si el libro no se puede abrir o no tiene
                             la hoja pedida.
        """
        ...
