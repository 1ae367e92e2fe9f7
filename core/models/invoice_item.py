"""Invoice line item model."""

from decimal import Decimal

from core.models.base import Money, StoredModel


class InvoiceItem(StoredModel):
    """
    One billed line. Equality is structural.

    Quantity and price ranges are business rules checked by the invoice
    manager, not constraints of the model.
    """

    description: str
    quantity: int
    price: Money

    @property
    def total(self) -> Decimal:
        return self.quantity * self.price
