"""Tests for inventory queries and admin mutations."""

import uuid

import pytest

from storefront.errors import ForbiddenError, InvalidReferenceError, NotFoundError
from storefront.models.product import ProductCreate

from .conftest import run


class TestListProducts:
    def test_second_page_of_twelve(self, product_service, make_product):
        for i in range(12):
            make_product(name=f"P{i}")

        result = run(product_service.list_products("2", "5"))

        assert len(result["products"]) == 5
        assert result["pagination"] == {"page": 2, "limit": 5, "total": 12, "pages": 3}

    def test_newest_first(self, product_service, make_product):
        make_product(name="old")
        make_product(name="new")

        result = run(product_service.list_products())

        assert [p["name"] for p in result["products"]] == ["new", "old"]

    def test_non_numeric_pagination_uses_defaults(self, product_service, make_product):
        make_product()
        result = run(product_service.list_products("x", "y"))
        assert result["pagination"]["page"] == 1
        assert result["pagination"]["limit"] == 10

    def test_listing_is_cached(self, product_service, products, make_product):
        product_id = make_product(stock=7)
        run(product_service.list_products())

        # A write that bypasses the service isn't seen until invalidation
        products.rows[product_id]["stock"] = 1
        cached = run(product_service.list_products())
        assert cached["products"][0]["stock"] == 7


class TestGetProduct:
    def test_found(self, product_service, make_product):
        product_id = make_product(name="Lamp", price="19.99")
        result = run(product_service.get_product(str(product_id)))
        assert result["product"]["name"] == "Lamp"
        assert result["product"]["price"] == 19.99

    def test_missing(self, product_service):
        with pytest.raises(NotFoundError):
            run(product_service.get_product(str(uuid.uuid4())))

    def test_malformed_id(self, product_service):
        with pytest.raises(InvalidReferenceError):
            run(product_service.get_product("123"))


class TestCreateProduct:
    def test_admin_creates(self, product_service, admin, products):
        body = ProductCreate(name="Desk", description="Oak desk", price=120, stock=4, category="furniture")
        result = run(product_service.create_product(admin, body))

        assert result["product"]["name"] == "Desk"
        assert result["product"]["stock"] == 4
        assert run(products.count()) == 1

    def test_customer_forbidden(self, product_service, customer):
        body = ProductCreate(name="Desk", description="Oak desk", price=120, stock=4, category="furniture")
        with pytest.raises(ForbiddenError):
            run(product_service.create_product(customer, body))

    def test_create_invalidates_listing(self, product_service, admin, make_product):
        make_product()
        assert run(product_service.list_products())["pagination"]["total"] == 1

        body = ProductCreate(name="Desk", description="Oak desk", price=120, stock=4, category="furniture")
        run(product_service.create_product(admin, body))

        assert run(product_service.list_products())["pagination"]["total"] == 2


class TestUpdateStock:
    def test_listing_reflects_update(self, product_service, admin, make_product):
        product_id = make_product(stock=5)
        assert run(product_service.list_products())["products"][0]["stock"] == 5

        run(product_service.update_stock(admin, str(product_id), 42))

        assert run(product_service.list_products())["products"][0]["stock"] == 42
        assert run(product_service.get_product(str(product_id)))["product"]["stock"] == 42

    def test_missing_product(self, product_service, admin):
        with pytest.raises(NotFoundError):
            run(product_service.update_stock(admin, str(uuid.uuid4()), 3))

    def test_customer_forbidden(self, product_service, customer, make_product):
        product_id = make_product()
        with pytest.raises(ForbiddenError):
            run(product_service.update_stock(customer, str(product_id), 3))
