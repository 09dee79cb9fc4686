"""
Servicio de dominio: Detección del formato de un archivo.

Primero la extensión del nombre (sin distinguir mayúsculas), después el
content-type. El resultado elige el parser en el registro.
"""

from statement_ingest.domain.exceptions import UnsupportedFormatError
from statement_ingest.domain.models.file_kind import FileKind

_EXTENSIONS: dict[str, FileKind] = {
    ".csv": FileKind.DELIMITED_TEXT,
    ".xlsx": FileKind.SPREADSHEET_MODERN,
    ".xls": FileKind.SPREADSHEET_LEGACY,
    ".pdf": FileKind.PAGE_DOCUMENT,
}

# El orden importa: "vnd.ms-excel" también contiene "excel".
_CONTENT_TYPE_MARKERS: tuple[tuple[str, FileKind], ...] = (
    ("csv", FileKind.DELIMITED_TEXT),
    ("vnd.ms-excel", FileKind.SPREADSHEET_LEGACY),
    ("spreadsheetml", FileKind.SPREADSHEET_MODERN),
    ("excel", FileKind.SPREADSHEET_MODERN),
    ("pdf", FileKind.PAGE_DOCUMENT),
)


def detect_kind(filename: str | None, content_type: str | None = None) -> FileKind:
    """Determina el formato del archivo.

    Args:
        filename: Nombre original del archivo. Puede ser None.
        content_type: Content-type recibido con el archivo. Puede ser None.

    Returns:
        FileKind detectado.

    Raises:
        UnsupportedFormatError: Si ni la extensión ni el content-type
                                corresponden a un formato conocido.

    Ejemplos:
        >>> detect_kind("ESTADO.XLSX")
        <FileKind.SPREADSHEET_MODERN: 'xlsx'>
        >>> detect_kind("upload", "application/vnd.ms-excel")
        <FileKind.SPREADSHEET_LEGACY: 'xls'>
    """
    name = (filename or "").strip().lower()
    for extension, kind in _EXTENSIONS.items():
        if name.endswith(extension):
            return kind

    if content_type:
        lowered = content_type.lower()
        for marker, kind in _CONTENT_TYPE_MARKERS:
            if marker in lowered:
                return kind

    raise UnsupportedFormatError(
        filename or "<sin nombre>",
        f"Extensión no reconocida y content-type '{content_type or ''}' sin coincidencia",
    )
