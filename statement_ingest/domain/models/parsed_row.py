"""
Modelo de dominio: Fila canónica de un estado de cuenta.

Un ParsedRow es la unidad de salida del motor: un movimiento de cualquier
banco, en cualquier formato, normalizado a la misma forma.

Decisiones de diseño:
- `amount` es Decimal y siempre > 0. Las filas cuyo neto (crédito − débito)
  es cero o negativo no llegan a convertirse en ParsedRow.
- `transaction_datetime` es un datetime sin zona horaria: fecha y hora tal
  cual están escritas en el documento.
- Los campos opcionales son None cuando no existen. Una cadena vacía
  significa "presente pero vacío" (por ejemplo, un UTR en blanco dentro de
  una referencia bien formada).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class ParsedRow:
    """Un movimiento normalizado."""

    transaction_datetime: datetime
    """Fecha y hora del movimiento, sin conversión de zona horaria.
    Si el documento no trae hora, es medianoche."""

    amount: Decimal
    """Monto neto del movimiento. Siempre estrictamente positivo."""

    balance: Decimal | None
    """Saldo después del movimiento, si el banco lo reporta."""

    reference: str
    """Texto de referencia / narración tal como viene en el archivo."""

    order_id: str | None
    """Identificador de orden derivado de la referencia."""

    utr: str | None
    """Unique Transaction Reference derivado de la referencia."""

    pay_in: bool
    """True si es un abono (entrada de dinero)."""

    account_no: str | None
    """Número de cuenta detectado o recibido del llamador (solo dígitos)."""

    def __post_init__(self) -> None:
        if self.amount <= Decimal("0"):
            raise ValueError(f"amount debe ser positivo: {self.amount}")
        if self.transaction_datetime.tzinfo is not None:
            raise ValueError(
                "transaction_datetime no puede tener zona horaria: "
                f"{self.transaction_datetime.isoformat()}"
            )
