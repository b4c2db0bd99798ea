from infuser.models.base import Record

class InvoiceItem(Record):
	__tablename__ = "invoice_items"
	__schema__ = (
		"invoice_id", "order_item_id", "invoice_amt", "discount",
		"date_created", "description", "commission_status",
	)
