"""
Adaptador de entrada: Extractor de texto usando pdfplumber.

pdfplumber es la librería para leer PDFs nativos (con texto embebido).

Este adaptador:
1. Abre el PDF desde memoria con pdfplumber.
2. Extrae el texto plano de cada página (extract_text).
3. Lo limpia con clean_pdf_text y lo envuelve en objetos PageText.

¿Por qué separar el extractor del parser?
Porque así el parser de documentos no sabe que existe pdfplumber. Recibe
PageText y opera sobre texto. Si mañana cambiamos de librería (por ejemplo
a PyMuPDF), solo cambiamos este archivo.
"""

import io

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError

from statement_ingest.domain.exceptions import ExtractionError
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.page_text import PageText
from statement_ingest.domain.ports.text_extractor import TextExtractor
from statement_ingest.domain.shared.text_cleaner import clean_pdf_text


class PdfplumberExtractor(TextExtractor):
    """Extrae texto de PDFs nativos usando pdfplumber."""

    @property
    def name(self) -> str:
        return "pdfplumber"

    def can_handle(self, kind: FileKind) -> bool:
        """Solo documentos por página (PDF).

        No verifica si el PDF tiene texto embebido: un PDF escaneado
        produce páginas vacías y, por lo tanto, ninguna fila.
        """
        return kind is FileKind.PAGE_DOCUMENT

    def extract(self, content: bytes, file_name: str = "") -> list[PageText]:
        """Extrae el texto de cada página del PDF.

        Returns:
            Lista de PageText, una por página. Páginas sin texto se incluyen
            con text="" para mantener la correspondencia page_num ↔ índice.

        Raises:
            ExtractionError: Si pdfplumber no puede abrir el PDF
                            (corrupto, protegido con contraseña, etc.)
        """
        pages: list[PageText] = []

        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                if len(pdf.pages) == 0:
                    raise ExtractionError(file_name, "El PDF no tiene páginas")

                for page_num, page in enumerate(pdf.pages, start=1):
                    raw_text = page.extract_text() or ""
                    pages.append(PageText(page_num=page_num, text=clean_pdf_text(raw_text)))

        except ExtractionError:
            raise
        except PDFSyntaxError as e:
            raise ExtractionError(file_name, f"PDF corrupto o inválido: {e}")
        except Exception as e:
            # Errores de pdfminer sin clase común (PDFs protegidos, encoding roto, etc.)
            if "password" in str(e).lower() or "encrypt" in str(e).lower():
                raise ExtractionError(file_name, "El PDF está protegido con contraseña")
            raise ExtractionError(file_name, str(e))

        return pages
