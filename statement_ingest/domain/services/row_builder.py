"""
Servicio de dominio: Armado de una fila canónica.

Los tres parsers de formato (CSV, Excel, PDF) leen los campos crudos de
una fila a su manera, pero la derivación es la misma para todos:

1. Monto neto: crédito − débito si el banco tiene columna de crédito o de
   débito; si no, el campo de monto. Sin monto o ≤ 0 → fila descartada.
2. Saldo, fecha/hora, order id / UTR y clasificación de abono.
3. Si el banco lo pide, una fila sin UTR también se descarta.

Esa derivación vive aquí para que los parsers solo se ocupen de leer.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from statement_ingest.domain.models.bank_config import LOGICAL_FIELDS, BankParsingConfig
from statement_ingest.domain.models.parsed_row import ParsedRow
from statement_ingest.domain.models.row_outcome import RowOutcome, SkipReason
from statement_ingest.domain.models.sheet_grid import CellValue, cell_to_text
from statement_ingest.domain.shared.date_parser import DateTimeResolver
from statement_ingest.domain.shared.money import format_amount, parse_amount
from statement_ingest.domain.shared.pay_in import is_pay_in
from statement_ingest.domain.shared.reference import decompose_reference


@dataclass(frozen=True)
class RawRow:
    """Valores crudos de los campos lógicos de una fila de origen."""

    source_row: int
    date: CellValue = None
    time: CellValue = None
    reference: CellValue = None
    credit: CellValue = None
    debit: CellValue = None
    amount: CellValue = None
    balance: CellValue = None

    @classmethod
    def from_reader(cls, source_row: int, read: Callable[[str], CellValue]) -> "RawRow":
        """Construye la fila pidiendo cada campo lógico a `read`."""
        return cls(source_row, **{field_name: read(field_name) for field_name in LOGICAL_FIELDS})


class RowBuilder:
    """Convierte RawRow en RowOutcome con la configuración de un banco.

    Args:
        config: Configuración del banco para el formato.
        account_no: Número de cuenta que llevan todas las filas del archivo.
        net_from_credit_debit: True si el banco tiene columna (o grupo) de
                               crédito o débito.
        today: Fecha de hoy, para configuraciones sin columna de fecha.
    """

    def __init__(
        self,
        config: BankParsingConfig,
        account_no: str | None,
        net_from_credit_debit: bool,
        today: Callable[[], date] = date.today,
    ):
        self._config = config
        self._account_no = account_no
        self._net_from_credit_debit = net_from_credit_debit
        self._dates = DateTimeResolver(config.date_parse, today=today)

    def build(self, raw: RawRow) -> RowOutcome:
        """Deriva la fila.

        Returns:
            RowOutcome conservado, o descartado por monto no positivo o por
            UTR vacío.

        Raises:
            ValueError: Si un monto, saldo, fecha u hora no se puede
                        interpretar (incluye UnparseableDateError).
        """
        amount = self._net_amount(raw)
        if amount is None or amount <= Decimal("0"):
            return RowOutcome.skip(
                raw.source_row, SkipReason.NON_POSITIVE_AMOUNT, f"monto={format_amount(amount)}"
            )

        balance = parse_amount(raw.balance, self._config.numeric)
        transaction_datetime = self._dates.resolve(raw.date, raw.time)

        reference = cell_to_text(raw.reference)
        parts = decompose_reference(reference, self._config.reference)
        if self._config.reference.skip_if_empty_utr and not (parts.utr or "").strip():
            return RowOutcome.skip(raw.source_row, SkipReason.EMPTY_UTR, reference)

        return RowOutcome.keep(
            raw.source_row,
            ParsedRow(
                transaction_datetime=transaction_datetime,
                amount=amount,
                balance=balance,
                reference=reference,
                order_id=parts.order_id,
                utr=parts.utr,
                pay_in=is_pay_in(amount, parts.order_id, parts.utr, reference, self._config.pay_in_rule),
                account_no=self._account_no,
            ),
        )

    def build_or_skip(self, raw: RawRow) -> RowOutcome:
        """Igual que build, pero cualquier fallo al armar la fila la descarta.

        Es el comportamiento de CSV y PDF: una fila mala no detiene el
        archivo.
        """
        try:
            return self.build(raw)
        except Exception as e:
            return RowOutcome.skip(raw.source_row, SkipReason.EXTRACTION_FAILED, str(e))

    def _net_amount(self, raw: RawRow) -> Decimal | None:
        convention = self._config.numeric
        if self._net_from_credit_debit:
            credit = parse_amount(raw.credit, convention) or Decimal("0")
            debit = parse_amount(raw.debit, convention) or Decimal("0")
            return credit - debit
        return parse_amount(raw.amount, convention)
