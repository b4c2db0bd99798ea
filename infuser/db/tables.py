# In infuser/db/tables.py
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, MetaData, String, Table, Text

metadata = MetaData()

order_items = Table(
	"order_items",
	metadata,
	Column("id", Integer, primary_key=True, index=True),
	Column("item_description", Text, nullable=True),
	Column("item_name", String, nullable=True),
	Column("item_type", Integer, nullable=True),
	Column("notes", Text, nullable=True),
	Column("order_id", Integer, nullable=True, index=True),
	Column("product_id", Integer, nullable=True, index=True),
	Column("cpu", Float, nullable=True),  # cost per unit
	Column("ppu", Float, nullable=True),  # price per unit
	Column("qty", Integer, nullable=True),
)

invoice_items = Table(
	"invoice_items",
	metadata,
	Column("id", Integer, primary_key=True, index=True),
	Column("invoice_id", Integer, nullable=True, index=True),
	Column("order_item_id", Integer, ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False, index=True),
	Column("invoice_amt", Float, nullable=True),
	Column("discount", Float, nullable=True),
	Column("date_created", DateTime(timezone=True), nullable=True),
	Column("description", Text, nullable=True),
	Column("commission_status", Integer, nullable=True),
)


def create_tables(bind) -> None:
	metadata.create_all(bind=bind)
