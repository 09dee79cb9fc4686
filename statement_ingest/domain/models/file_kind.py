"""
Modelo de dominio: Tipo de archivo de estado de cuenta.

Es un conjunto cerrado. El registro de parsers exige un parser por cada
valor, así que agregar un tipo nuevo sin su parser falla al arrancar.
"""

from enum import Enum


class FileKind(Enum):
    """Formatos de estado de cuenta que el motor sabe leer."""

    DELIMITED_TEXT = "csv"
    SPREADSHEET_MODERN = "xlsx"
    SPREADSHEET_LEGACY = "xls"
    PAGE_DOCUMENT = "pdf"
