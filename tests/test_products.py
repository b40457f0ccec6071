import pytest

from kirana_admin.data import products
from kirana_admin.data.products import ProductFilters


class TestGetProducts:

    def test_store_scoped_newest_first(self, client):
        result = products.get_products(client)
        assert [p.id for p in result] == ["prod-ghee", "prod-milk", "prod-rice"]

    def test_category_filter(self, client):
        result = products.get_products(client, ProductFilters(category="Dairy"))
        assert {p.id for p in result} == {"prod-milk", "prod-ghee"}

    def test_name_search(self, client):
        result = products.get_products(client, ProductFilters(search_query="RICE"))
        assert [p.name for p in result] == ["Basmati Rice"]

    def test_availability_filter(self, client):
        result = products.get_products(client, ProductFilters(is_available=False))
        assert [p.id for p in result] == ["prod-ghee"]

    def test_low_stock_filter(self, client):
        result = products.get_products(client, ProductFilters(low_stock=True))
        assert [p.id for p in result] == ["prod-ghee", "prod-milk"]
        assert all(p.is_low_stock() for p in result)

    def test_low_stock_threshold(self, client):
        result = products.get_products(client, ProductFilters(low_stock=True), low_stock_threshold=5)
        assert [p.id for p in result] == ["prod-ghee"]

    def test_error_is_raised(self, client):
        client.fail("products")
        with pytest.raises(RuntimeError):
            products.get_products(client)


class TestProductWrites:

    def test_create_defaults_store(self, client):
        created = products.create_product(client, {
            "name": "Atta 5kg",
            "category": "Grains",
            "price": 260,
            "stock_quantity": 12,
            "is_available": True,
            "unexpected": "dropped",
        })

        assert created.store_id == "store-1"
        assert created.name == "Atta 5kg"
        stored = client.tables["products"][-1]
        assert "unexpected" not in stored

    def test_update_sets_updated_at(self, client):
        updated = products.update_product(client, "prod-milk", {"stock_quantity": 50})

        assert updated.stock_quantity == 50
        assert updated.updated_at is not None

    def test_delete(self, client):
        products.delete_product(client, "prod-rice")
        assert products.get_product_by_id(client, "prod-rice") is None

    def test_categories_by_name(self, client):
        client.tables["categories"] = [
            {"id": "c2", "name": "Snacks"},
            {"id": "c1", "name": "Dairy"},
        ]
        assert [c.name for c in products.get_categories(client)] == ["Dairy", "Snacks"]

    def test_categories_error(self, client):
        client.fail("categories")
        assert products.get_categories(client) == []
