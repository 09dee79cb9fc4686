"""
Puerto de entrada: Extractor de texto.

Define el contrato para extraer el texto de un documento por páginas.
Hoy hay un solo adaptador:

    TextExtractor (interfaz)
    └── PdfplumberExtractor     → PDFs nativos (texto embebido)

¿Por qué es una Abstract Base Class (ABC)?
Porque queremos que Python lance un error si alguien crea un adaptador
que no implementa todos los métodos. Además, los tests del parser de
documentos usan un extractor falso que devuelve páginas fijas.
"""

from abc import ABC, abstractmethod

from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.page_text import PageText


class TextExtractor(ABC):
    """Interfaz para extraer texto de un documento."""

    @abstractmethod
    def can_handle(self, kind: FileKind) -> bool:
        """Determina si este extractor puede manejar el formato dado."""
        ...

    @abstractmethod
    def extract(self, content: bytes, file_name: str = "") -> list[PageText]:
        """Extrae el texto del documento, separado por páginas.

        Args:
            content: Bytes del archivo completo.
            file_name: Nombre original. Solo para mensajes de error.

        Returns:
            Lista de PageText, una por cada página del documento.

        Raises:
            ExtractionError: Si la librería no puede abrir el documento.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Nombre legible del extractor. Para logging y debugging.

        Ejemplo: 'pdfplumber'
        """
        ...
