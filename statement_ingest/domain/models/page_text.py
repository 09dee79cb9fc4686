"""
Modelo de dominio: Texto extraído de una página.

Este modelo es el "puente" entre el adaptador de extracción de texto
(pdfplumber) y el parser de documentos por página.

¿Por qué no pasar un string crudo? Porque el número de página permite
rastrear en qué página está una línea que no coincidió con el patrón de
movimiento, útil para depurar la configuración de un banco nuevo.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PageText:
    """Texto extraído de una página individual de un documento."""

    page_num: int
    """Número de página (1-indexed). La primera página es 1, no 0."""

    text: str
    """Texto completo de la página. Puede contener saltos de línea."""


def join_pages(pages: list["PageText"]) -> str:
    """Concatena el texto de todas las páginas, separadas por salto de línea."""
    return "\n".join(page.text for page in pages)
