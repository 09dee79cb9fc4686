"""
Utilidades para manejo de montos monetarios.

CONTEXTO DEL PROBLEMA:
Cada banco escribe los números a su manera y en un mismo archivo pueden
convivir varias formas:

- "1,234.56"     → miles "," y decimal "." (convención por defecto)
- "1.234,56"     → convención europea (miles "." y decimal ",")
- "(1,234.56)"   → negativo contable entre paréntesis
- "1,234.56 Cr"  → sufijos de texto que se descartan
- "-"            → celda "sin valor" en columnas de débito/crédito
- 1234.56        → celda numérica tipada de Excel (sin separadores)

SOLUCIÓN:
Una sola función que:
1. Siempre devuelve Decimal (nunca float) y nunca redondea.
2. Recibe la convención numérica del banco en lugar de adivinarla.
3. Distingue "no hay monto" (None) de "texto basura" (ValueError).
"""

import re
from decimal import Decimal, InvalidOperation

from statement_ingest.domain.models.bank_config import NumericConvention

_DEFAULT_CONVENTION = NumericConvention()


def parse_amount(raw, convention: NumericConvention = _DEFAULT_CONVENTION) -> Decimal | None:
    """Convierte el valor de una celda o campo de texto a Decimal.

    Pasos para texto:
    1. Quitar espacios duros (NBSP) y espacios en los extremos.
    2. Si contiene "(" y ")", el resultado se niega.
    3. Quitar el separador de miles y cambiar el decimal por ".".
    4. Conservar solo dígitos, "." y "-".

    Los números nativos (int, float, Decimal) vienen de celdas tipadas y se
    convierten directamente, sin aplicar separadores.

    Args:
        raw: Texto o número tal como sale del archivo. None se acepta.
        convention: Separadores de miles y decimales del banco.

    Returns:
        Decimal con el valor, o None si el valor está vacío o es solo "-".

    Raises:
        ValueError: Si después de limpiar queda algo que no es un número.

    Ejemplos:
        >>> parse_amount("(1,234.56)")
        Decimal('-1234.56')
        >>> parse_amount("1.234,56", NumericConvention(".", ","))
        Decimal('1234.56')
        >>> parse_amount("") is None
        True
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"No se puede convertir un booleano a monto: {raw}")
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        # repr da el decimal más corto que reproduce el float (0.1 → "0.1")
        return Decimal(repr(raw))

    text = str(raw).replace("\u00a0", " ").strip()
    if not text:
        return None

    negative = "(" in text and ")" in text

    cleaned = text
    if convention.thousands_separator:
        cleaned = cleaned.replace(convention.thousands_separator, "")
    if convention.decimal_separator and convention.decimal_separator != ".":
        cleaned = cleaned.replace(convention.decimal_separator, ".")
    cleaned = re.sub(r"[^0-9.\-]", "", cleaned)

    if not cleaned or cleaned == "-":
        return None

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"No se pudo convertir a monto: '{text}' (limpio: '{cleaned}')")

    return -value if negative else value


def is_amount(raw, convention: NumericConvention = _DEFAULT_CONVENTION) -> bool:
    """Indica si el valor se puede leer como un monto presente.

    Es la prueba que usa el CellReader antes de aceptar una celda vecina:
    None, vacío, "-" y texto no numérico no son montos.

    Ejemplos:
        >>> is_amount("1,234.56")
        True
        >>> is_amount("NEFT CR")
        False
    """
    try:
        return parse_amount(raw, convention) is not None
    except ValueError:
        return False


def format_amount(amount: Decimal | None) -> str:
    """Formatea un Decimal con separador de miles y dos decimales.

    Solo para mensajes de log; las filas conservan el Decimal original.

    Ejemplos:
        >>> format_amount(Decimal("1234567.891"))
        '1,234,567.89'
        >>> format_amount(None)
        '-'
    """
    if amount is None:
        return "-"
    return f"{amount.quantize(Decimal('0.01')):,.2f}"
