"""
Clasificación de un movimiento como abono (pay-in).

Cada banco marca los abonos de forma distinta. La regla configurada
decide; sin regla, todo monto positivo es un abono.
"""

import re
from decimal import Decimal

from statement_ingest.domain.models.bank_config import PayInRule, PayInRuleType


def is_pay_in(
    amount: Decimal | None,
    order_id: str | None,
    utr: str | None,
    reference: str | None,
    rule: PayInRule | None,
) -> bool:
    """Indica si el movimiento es un abono.

    Reglas:
        - sin regla, amountPositive, creditColumn: monto > 0
        - orderIdNoSpace: monto > 0 y el order id falta o no tiene espacios
        - utrNoSpace: monto > 0 y el UTR falta o no tiene espacios
        - narrationContains: la referencia contiene alguna de las palabras
          (sin distinguir mayúsculas). Ignora el signo del monto. Sin
          palabras configuradas → False.

    Sin monto, nunca es abono.
    """
    if amount is None:
        return False

    positive = amount > 0
    rule_type = rule.type if rule is not None else None

    if rule_type is PayInRuleType.ORDER_ID_NO_SPACE:
        return positive and not _has_whitespace(order_id)
    if rule_type is PayInRuleType.UTR_NO_SPACE:
        return positive and not _has_whitespace(utr)
    if rule_type is PayInRuleType.NARRATION_CONTAINS:
        return _narration_contains(reference, rule.narration_contains_any)
    return positive


def _has_whitespace(value: str | None) -> bool:
    return value is not None and re.search(r"\s", value) is not None


def _narration_contains(reference: str | None, needles: tuple[str, ...]) -> bool:
    haystack = (reference or "").casefold()
    return any(needle and needle.strip() and needle.casefold() in haystack for needle in needles)
