"""
Utilidades de limpieza de texto.

Funciones reutilizables para normalizar celdas, encabezados y texto
extraído de PDFs antes de que los parsers lo procesen.

Estas funciones NO tienen lógica de negocio (no saben de bancos ni montos).
Solo operan sobre strings puros.
"""

import re

NBSP = "\u00a0"


def replace_nbsp(text: str) -> str:
    """Cambia espacios duros (U+00A0) por espacios normales.

    Excel y los PDFs generados por bancos los usan mucho en encabezados
    ("Txn\\u00a0Date") y en montos ("1\\u00a0234,56").
    """
    return text.replace(NBSP, " ")


def clean_whitespace(text: str) -> str:
    """Reemplaza múltiples espacios/tabs por un solo espacio y hace strip.

    Ejemplos:
        >>> clean_whitespace("  NEFT   CR   ")
        'NEFT CR'
        >>> clean_whitespace("\\tREFERENCIA\\t123")
        'REFERENCIA 123'
    """
    return re.sub(r"\s+", " ", text).strip()


def clean_cell(text: str | None) -> str:
    """Texto de celda sin NBSP ni espacios en los extremos ("" si es None)."""
    if text is None:
        return ""
    return replace_nbsp(text).strip()


def normalize_header(text: str | None) -> str:
    """Forma canónica de un encabezado para compararlo con sinónimos.

    NBSP → espacio, strip, minúsculas (casefold) y espacios colapsados.
    Dos encabezados coinciden solo si sus formas canónicas son iguales.

    Ejemplos:
        >>> normalize_header("  Txn\\u00a0 DATE ")
        'txn date'
    """
    if not text:
        return ""
    return clean_whitespace(replace_nbsp(text)).casefold()


def remove_non_printable(text: str) -> str:
    """Elimina caracteres no imprimibles (control chars) excepto \\n, \\r, \\t.

    Algunos PDFs traen caracteres de control invisibles que rompen los
    regex de las líneas de movimiento.

    Ejemplos:
        >>> remove_non_printable("NEFT\\x00CR")
        'NEFT CR'
    """
    # Mantiene printables, newline, return, tab. Reemplaza el resto por espacio.
    cleaned = "".join(char if (char.isprintable() or char in "\n\r\t") else " " for char in text)
    return cleaned


def normalize_line_endings(text: str) -> str:
    """Normaliza todos los saltos de línea a \\n.

    Los PDFs pueden usar \\r\\n (Windows), \\r (Mac antiguo), o \\n (Unix).
    Normalizar asegura que split('\\n') funcione consistentemente.
    """
    return text.replace("\r\n", "\n").replace("\r", "\n")


def clean_pdf_text(text: str) -> str:
    """Aplica todas las limpiezas comunes en secuencia.

    Es la función que los text extractors llaman después de extraer el
    texto crudo del PDF, ANTES de pasarlo al parser.

    Secuencia:
    1. Cambiar NBSP por espacio
    2. Eliminar caracteres no imprimibles
    3. Normalizar saltos de línea
    (NO aplica clean_whitespace porque eso eliminaría los \\n que el
    parser necesita para procesar línea por línea)
    """
    text = replace_nbsp(text)
    text = remove_non_printable(text)
    text = normalize_line_endings(text)
    return text
