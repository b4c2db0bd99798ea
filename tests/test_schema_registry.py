import copy
import pickle

import pytest

from infuser.models.base import Record, SchemaAttribute
from infuser.models.invoice_item import InvoiceItem
from infuser.models.order_item import OrderItem
from infuser.services.exceptions import SchemaDefinitionError, UnknownAttributeError


class Gadget(Record):
    __tablename__ = "gadgets"
    __schema__ = ("label", "weight")


class LooseGadget(Record):
    __schema__ = ("label",)
    __strict__ = False


def test_set_then_get_round_trips_every_declared_attribute():
    item = OrderItem()
    values = {
        "item_description": "Monthly plan",
        "item_name": "Plan",
        "item_type": 4,
        "notes": None,
        "order_id": 7,
        "product_id": 11,
        "cpu": 1.25,
        "ppu": 9.99,
        "qty": 3,
    }
    for name, value in values.items():
        item.set(name, value)

    for name, value in values.items():
        assert item.get(name) == value
        assert getattr(item, name) == value


def test_attribute_accessors_proxy_to_the_attribute_store():
    gadget = Gadget(label="knob")
    gadget.weight = 12

    assert gadget.get("weight") == 12
    assert gadget.to_dict() == {"id": None, "label": "knob", "weight": 12}
    assert isinstance(Gadget.label, SchemaAttribute)


def test_declared_but_unset_attribute_reads_as_none():
    gadget = Gadget()
    assert gadget.get("label") is None
    assert gadget.weight is None
    assert gadget.identity is None


def test_get_undeclared_attribute_raises_in_strict_mode():
    gadget = Gadget()
    with pytest.raises(UnknownAttributeError) as exc:
        gadget.get("colour")
    assert exc.value.details == {"record_type": "Gadget", "attribute": "colour"}


def test_set_undeclared_attribute_raises_in_strict_mode():
    gadget = Gadget()
    with pytest.raises(UnknownAttributeError):
        gadget.set("colour", "red")
    with pytest.raises(UnknownAttributeError):
        gadget.colour = "red"
    with pytest.raises(UnknownAttributeError):
        Gadget(colour="red")


def test_undeclared_attribute_access_behaves_like_attribute_error():
    gadget = Gadget()
    assert not hasattr(gadget, "colour")
    assert getattr(gadget, "colour", "fallback") == "fallback"


def test_lenient_type_extends_instance_store_but_not_schema():
    gadget = LooseGadget()
    gadget.set("colour", "red")

    assert gadget.get("colour") == "red"
    assert gadget.colour == "red"
    assert "colour" not in LooseGadget.schema()
    assert gadget.to_dict() == {"id": None, "label": None, "colour": "red"}
    with pytest.raises(UnknownAttributeError):
        gadget.get("never_set")


def test_schema_lists_primary_key_then_declared_names_in_order():
    assert OrderItem.schema() == (
        "id", "item_description", "item_name", "item_type", "notes", "order_id",
        "product_id", "cpu", "ppu", "qty",
    )


def test_define_schema_is_additive_and_idempotent():
    class Widget(Record):
        __schema__ = ("name",)

    Widget.define_schema("name", "size")
    Widget.define_schema("size")

    assert Widget.schema() == ("id", "name", "size")
    widget = Widget(name="w", size=3)
    assert widget.size == 3


def test_define_schema_rejects_malformed_declarations():
    class Sprocket(Record):
        pass

    with pytest.raises(SchemaDefinitionError):
        Sprocket.define_schema()
    with pytest.raises(SchemaDefinitionError):
        Sprocket.define_schema("teeth", "teeth")
    with pytest.raises(SchemaDefinitionError):
        Sprocket.define_schema("not an identifier")
    with pytest.raises(SchemaDefinitionError):
        Sprocket.define_schema("_hidden")
    with pytest.raises(SchemaDefinitionError):
        Sprocket.define_schema("class")
    # clashes with a Record method
    with pytest.raises(SchemaDefinitionError):
        Sprocket.define_schema("reload")

    assert Sprocket.schema() == ("id",)


def test_subclass_inherits_schema_without_changing_parent():
    class SpecialGadget(Gadget):
        __schema__ = ("rating",)

    assert SpecialGadget.schema() == ("id", "label", "weight", "rating")
    assert Gadget.schema() == ("id", "label", "weight")


def test_from_row_populates_store_directly():
    gadget = Gadget.from_row({"id": 5, "label": "dial"})
    assert gadget.identity == 5
    assert gadget.label == "dial"
    assert gadget.weight is None


def test_from_row_rejects_undeclared_names_in_strict_mode():
    with pytest.raises(UnknownAttributeError):
        Gadget.from_row({"id": 5, "colour": "red"})


def test_from_row_keeps_undeclared_names_for_lenient_type():
    gadget = LooseGadget.from_row({"id": 1, "colour": "red"})
    assert gadget.colour == "red"


def test_repr_shows_identity():
    assert repr(Gadget(id=3)) == "<Gadget id=3>"


def test_schema_given_as_plain_string_is_rejected():
    with pytest.raises(SchemaDefinitionError):
        class Tag(Record):
            __schema__ = ("name")

    with pytest.raises(SchemaDefinitionError):
        class Label(Record):
            __schema__ = {"name"}


def test_schema_may_be_a_list():
    class Badge(Record):
        __schema__ = ["name", "level"]

    assert Badge.schema() == ("id", "name", "level")


def test_records_survive_pickle_and_deepcopy(store):
    store.insert(InvoiceItem, {"id": 1, "order_item_id": 42})
    order_item = OrderItem.from_row({"id": 42, "item_name": "Plan"}, store=store)
    order_item.invoice_items

    for clone in (pickle.loads(pickle.dumps(order_item)), copy.deepcopy(order_item)):
        assert clone is not order_item
        assert clone.item_name == "Plan"
        assert clone.is_loaded("invoice_items")
        assert [item.id for item in clone.invoice_items] == [1]
        clone.id = 43
        assert not clone.is_loaded("invoice_items")

    assert order_item.is_loaded("invoice_items")
    assert store.fetch_count == 1
