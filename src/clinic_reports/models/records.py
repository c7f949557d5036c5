"""Source record models read from the clinic data store."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from clinic_reports.utils.date_utils import parse_date
from clinic_reports.utils.decimal_utils import ZERO, to_decimal, to_quantity


class TreatmentType(Enum):
    """Treatment line, also used to split transaction revenue."""

    MEDICAL = "medical"
    AESTHETIC = "aesthetic"
    COSMETIC = "cosmetic"


class ExpenseCategory(Enum):
    """Expense classification used by the expenses table."""

    SUPPLIES = "supplies"
    EQUIPMENT = "equipment"
    RENT = "rent"
    UTILITIES = "utilities"
    MARKETING = "marketing"
    OTHER = "other"


def _optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class Treatment:
    """Treatment catalog entry.

    Attributes:
        id: Store identifier.
        name: Display name, used as the top-treatments key.
        category_id: Reference to the treatment category.
        treatment_type: Medical, aesthetic or cosmetic.
        base_price: List price before discounts.
    """

    id: str
    name: str
    category_id: Optional[str] = None
    treatment_type: TreatmentType = TreatmentType.MEDICAL
    base_price: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Treatment":
        """Create a Treatment from a store row."""
        type_str = str(data.get("type") or "medical").lower()
        try:
            treatment_type = TreatmentType(type_str)
        except ValueError:
            treatment_type = TreatmentType.MEDICAL

        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            category_id=_optional_str(data.get("category_id")),
            treatment_type=treatment_type,
            base_price=to_decimal(data.get("base_price")),
        )


@dataclass
class Transaction:
    """One patient visit's payment record.

    The payment split (cash/card/transfer) and the revenue split
    (medical/aesthetic/cosmetic) are each expected to add up to
    total_amount. Nothing here enforces that.

    Attributes:
        id: Store identifier.
        date: Visit date.
        patient_id: Reference to the patient.
        total_amount: Amount charged.
        cash_amount: Part paid in cash.
        card_amount: Part paid by card.
        transfer_amount: Part paid by bank transfer.
        medical_amount: Revenue attributed to medical treatments.
        aesthetic_amount: Revenue attributed to aesthetic treatments.
        cosmetic_amount: Revenue attributed to cosmetic products.
        notes: Free text.
    """

    id: str
    date: date
    patient_id: Optional[str] = None
    total_amount: Decimal = ZERO
    cash_amount: Decimal = ZERO
    card_amount: Decimal = ZERO
    transfer_amount: Decimal = ZERO
    medical_amount: Decimal = ZERO
    aesthetic_amount: Decimal = ZERO
    cosmetic_amount: Decimal = ZERO
    notes: Optional[str] = None

    @property
    def date_key(self) -> str:
        """Calendar date used to group revenue (YYYY-MM-DD)."""
        return self.date.isoformat()

    @property
    def payment_sum(self) -> Decimal:
        """Sum of the three payment-method amounts."""
        return self.cash_amount + self.card_amount + self.transfer_amount

    @property
    def category_sum(self) -> Decimal:
        """Sum of the three revenue-category amounts."""
        return self.medical_amount + self.aesthetic_amount + self.cosmetic_amount

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Transaction":
        """Create a Transaction from a store row.

        Raises:
            ValueError: If the date or an amount cannot be parsed.
            KeyError: If id or date is missing.
        """
        return cls(
            id=str(data["id"]),
            date=parse_date(data["date"]),
            patient_id=_optional_str(data.get("patient_id")),
            total_amount=to_decimal(data.get("total_amount")),
            cash_amount=to_decimal(data.get("cash_amount")),
            card_amount=to_decimal(data.get("card_amount")),
            transfer_amount=to_decimal(data.get("transfer_amount")),
            medical_amount=to_decimal(data.get("medical_amount")),
            aesthetic_amount=to_decimal(data.get("aesthetic_amount")),
            cosmetic_amount=to_decimal(data.get("cosmetic_amount")),
            notes=_optional_str(data.get("notes")),
        )


@dataclass
class TransactionItem:
    """A treatment line inside a transaction.

    treatment_name is the resolved name from the treatments table, or None
    when the treatment no longer exists.
    """

    id: str
    transaction_id: str
    treatment_id: Optional[str]
    quantity: int = 1
    unit_price: Decimal = ZERO
    subtotal: Decimal = ZERO
    created_at: Optional[date] = None
    treatment_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "TransactionItem":
        """Create a TransactionItem from a store row.

        A nested ``treatment`` mapping (``{"name": ...}``) is accepted as the
        resolved join, as is a flat ``treatment_name`` column.
        """
        treatment_name = _optional_str(data.get("treatment_name"))
        nested = data.get("treatment")
        if treatment_name is None and isinstance(nested, dict):
            treatment_name = _optional_str(nested.get("name"))

        created_raw = data.get("created_at")
        created_at = parse_date(created_raw) if created_raw else None

        quantity = to_quantity(data.get("quantity"))
        unit_price = to_decimal(data.get("unit_price"))
        subtotal_raw = data.get("subtotal")
        subtotal = (
            to_decimal(subtotal_raw)
            if subtotal_raw not in (None, "")
            else unit_price * quantity
        )

        return cls(
            id=str(data["id"]),
            transaction_id=str(data.get("transaction_id") or ""),
            treatment_id=_optional_str(data.get("treatment_id")),
            quantity=quantity,
            unit_price=unit_price,
            subtotal=subtotal,
            created_at=created_at,
            treatment_name=treatment_name,
        )


@dataclass
class Expense:
    """A recorded clinic expense.

    Attributes:
        id: Store identifier.
        date: Expense date.
        supplier_id: Supplier reference, if any.
        category: Expense category.
        amount: Net amount.
        iva_amount: IVA (VAT) charged on top.
        total_amount: amount + iva_amount.
        description: Free text.
    """

    id: str
    date: date
    supplier_id: Optional[str] = None
    category: ExpenseCategory = ExpenseCategory.OTHER
    amount: Decimal = ZERO
    iva_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Expense":
        """Create an Expense from a store row.

        When total_amount is absent it is derived as amount + iva_amount.
        """
        category_str = str(data.get("category") or "other").lower()
        try:
            category = ExpenseCategory(category_str)
        except ValueError:
            category = ExpenseCategory.OTHER

        amount = to_decimal(data.get("amount"))
        iva_amount = to_decimal(data.get("iva_amount"))
        total_raw = data.get("total_amount")
        total_amount = (
            to_decimal(total_raw)
            if total_raw not in (None, "")
            else amount + iva_amount
        )

        return cls(
            id=str(data["id"]),
            date=parse_date(data["date"]),
            supplier_id=_optional_str(data.get("supplier_id")),
            category=category,
            amount=amount,
            iva_amount=iva_amount,
            total_amount=total_amount,
            description=_optional_str(data.get("description")),
        )
