"""
Tests for reorder and product-page additions
"""

from types import SimpleNamespace

from cart.models import Product
from cart.reorder import ReorderItem, add_reorder_items, add_single


def reorder_item(**overrides):
    data = {
        "productId": "p1",
        "productName": "Mug",
        "originalPrice": 5.0,
        "currentPrice": 5.0,
        "requestedQuantity": 2,
        "availableQuantity": 2,
        "imageUrl": None,
    }
    data.update(overrides)
    return ReorderItem.model_validate(data)


class TestReorderItem:
    """Tests for ReorderItem flags."""

    def test_price_change_and_stock_flags(self):
        item = reorder_item(currentPrice=6.5, availableQuantity=1)

        assert item.has_price_changed
        assert item.has_limited_stock

    def test_unchanged_item(self):
        item = reorder_item()

        assert not item.has_price_changed
        assert not item.has_limited_stock

    def test_to_product_uses_current_price_and_stock(self):
        product = reorder_item(currentPrice=6.5, availableQuantity=1).to_product()

        assert product.id == "p1"
        assert product.price == 6.5
        assert product.quantity == 1


class TestAddReorderItems:
    """Tests for adding a past order back into the cart."""

    def test_adds_available_items_only(self, store):
        items = [
            reorder_item(),
            reorder_item(productId="p2", availableQuantity=0),
            reorder_item(productId="p3", currentPrice=2.0, requestedQuantity=5, availableQuantity=3),
        ]

        added = add_reorder_items(store, items)

        assert added == 2
        assert {i.id: i.quantity for i in store.snapshot} == {"p1": 2, "p3": 3}
        assert store.total_price.value == 16.0

    def test_merges_with_existing_cart_item(self, store):
        store.add_or_update({"id": "p1", "price": 5.0, "quantity": 1})

        add_reorder_items(store, [reorder_item()])

        assert store.snapshot[0].quantity == 3


class TestAddSingle:
    """Tests for the product page add-to-cart."""

    def test_adds_one_unit_regardless_of_stock(self, store, sample_product):
        sample_product["quantity"] = 40

        add_single(store, sample_product)
        add_single(store, sample_product)

        assert len(store.snapshot) == 1
        assert store.snapshot[0].quantity == 2
        assert store.snapshot[0].seller_name == "keys-r-us"

    def test_adds_one_unit_of_product_model(self, store):
        add_single(store, Product(id="p1", name="Mug", price=2.0, quantity=9))

        assert store.snapshot[0].quantity == 1

    def test_invalid_product_is_ignored(self, store):
        """Unreadable products are dropped without raising, like every other add."""
        add_single(store, {"id": "p1", "price": "free"})
        add_single(store, SimpleNamespace(id="p2", price=-1, quantity=1))
        add_single(store, None)

        assert store.snapshot == ()
