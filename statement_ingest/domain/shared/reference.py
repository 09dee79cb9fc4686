"""
Descomposición de la referencia de un movimiento en order id y UTR.

Muchos bancos escriben en la narración un identificador de orden y el UTR
(Unique Transaction Reference) separados por un carácter fijo:

    "ORDER123/UTR456"       → order_id="ORDER123", utr="UTR456"
    "NEFT/ORDER9/N123456"   → depende de los índices configurados

La regla de cada banco vive en ReferenceConfig: separador, cuántas partes
se aceptan, en qué índice está cada campo y, si el UTR no aparece, un
regex de respaldo que lo busca en todo el texto.

Que la referencia no tenga la forma esperada NO es un error: simplemente
no hay order id ni UTR.
"""

import re
from dataclasses import dataclass

from statement_ingest.domain.models.bank_config import ReferenceConfig, ReferenceField
from statement_ingest.domain.shared.text_cleaner import clean_cell


@dataclass(frozen=True)
class ReferenceParts:
    """Resultado de partir una referencia."""

    order_id: str | None = None
    utr: str | None = None


def split_reference(text: str, splitter: str | None) -> list[str]:
    """Parte el texto en el separador literal.

    Las partes vacías al final se descartan ("A/B//" → ["A", "B"]). Si el
    texto no contiene el separador, el resultado es una sola parte con el
    texto completo.

    Ejemplos:
        >>> split_reference("ORDER123/UTR456", "/")
        ['ORDER123', 'UTR456']
        >>> split_reference("SIN SEPARADOR", "/")
        ['SIN SEPARADOR']
    """
    if not splitter or not splitter.strip() or splitter not in text:
        return [text]
    parts = text.split(splitter)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def decompose_reference(reference: str | None, config: ReferenceConfig | None) -> ReferenceParts:
    """Extrae order id y UTR de la referencia según la regla del banco.

    Args:
        reference: Texto de referencia / narración. None equivale a "".
        config: Regla del banco. None → sin order id ni UTR.

    Returns:
        ReferenceParts. Cada campo es None si no se pudo derivar.

    Ejemplos:
        >>> config = ReferenceConfig(splitter="/", order_id=ReferenceField(0),
        ...                          utr=ReferenceField(1))
        >>> decompose_reference("ORDER123/UTR456", config)
        ReferenceParts(order_id='ORDER123', utr='UTR456')
    """
    text = reference or ""
    if config is None:
        return ReferenceParts()

    parts = split_reference(text, config.splitter)

    order_id = None
    utr = None
    if config.parts_count is None or config.parts_count.accepts(len(parts)):
        order_id = _pick(parts, config.order_id)
        utr = _pick(parts, config.utr)

    if (utr is None or not utr.strip()) and config.utr_fallback_regex:
        match = re.search(config.utr_fallback_regex, text)
        if match:
            utr = match.group(0)

    return ReferenceParts(order_id=order_id, utr=utr)


def _pick(parts: list[str], field: ReferenceField | None) -> str | None:
    if field is None or not 0 <= field.index < len(parts):
        return None
    value = clean_cell(parts[field.index])
    if field.digits_only:
        value = re.sub(r"\D", "", value)
    return value
