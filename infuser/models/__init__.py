# Import all record types so string association targets resolve
from infuser.models.base import Record
from infuser.models.associations import HasMany, has_many
from infuser.models.registry import registry
from infuser.models.order_item import OrderItem
from infuser.models.invoice_item import InvoiceItem

__all__ = ["Record", "HasMany", "has_many", "registry", "OrderItem", "InvoiceItem"]
