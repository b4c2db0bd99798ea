from infuser.models.associations import has_many
from infuser.models.base import Record

class OrderItem(Record):
	__tablename__ = "order_items"
	__schema__ = (
		"item_description", "item_name", "item_type", "notes", "order_id",
		"product_id", "cpu", "ppu", "qty",
	)

	invoice_items = has_many()
