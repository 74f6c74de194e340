from decimal import Decimal

from conftest import ADMIN, employee, make_category, make_product
from services import reports as report_service
from services import stock_movements as ledger


async def _catalog(db):
    drinks = await make_category(db, "Drinks")
    cleaning = await make_category(db, "Cleaning")
    await make_product(db, drinks, name="Water", unit_price=Decimal("2.50"), quantity_in_stock=10, min_stock_quantity=5)
    await make_product(db, drinks, name="Juice", unit_price=Decimal("4.00"), quantity_in_stock=3, min_stock_quantity=5)
    await make_product(db, cleaning, name="Soap", unit_price=Decimal("1.25"), quantity_in_stock=0, min_stock_quantity=1)
    return drinks.id, cleaning.id


class TestPriceList:
    async def test_lists_name_price_and_category(self, db):
        await _catalog(db)
        rows = await report_service.price_list(db, ADMIN)
        assert rows == [
            {"name": "Juice", "unit_price": Decimal("4.00"), "category_name": "Drinks"},
            {"name": "Soap", "unit_price": Decimal("1.25"), "category_name": "Cleaning"},
            {"name": "Water", "unit_price": Decimal("2.50"), "category_name": "Drinks"},
        ]

    async def test_restricted_employee_sees_own_categories(self, db):
        drinks_id, _ = await _catalog(db)
        rows = await report_service.price_list(db, employee(drinks_id))
        assert [r["name"] for r in rows] == ["Juice", "Water"]


class TestStockBalance:
    async def test_total_value_is_price_times_quantity(self, db):
        await _catalog(db)
        rows = {r["name"]: r for r in await report_service.stock_balance(db, ADMIN)}
        assert rows["Water"]["total_value"] == Decimal("25.00")
        assert rows["Juice"]["total_value"] == Decimal("12.00")
        assert rows["Soap"]["total_value"] == Decimal("0")
        assert rows["Juice"]["quantity_in_stock"] == 3


class TestBelowMinStock:
    async def test_only_strictly_below_minimum(self, db):
        drinks = await make_category(db, "Drinks")
        await make_product(db, drinks, name="AtMin", quantity_in_stock=5, min_stock_quantity=5)
        await make_product(db, drinks, name="Below", quantity_in_stock=4, min_stock_quantity=5)
        rows = await report_service.below_min_stock(db, ADMIN)
        assert rows == [{"name": "Below", "quantity_in_stock": 4, "min_stock_quantity": 5}]

    async def test_scoped_by_category(self, db):
        drinks_id, cleaning_id = await _catalog(db)
        assert [r["name"] for r in await report_service.below_min_stock(db, ADMIN)] == ["Juice", "Soap"]
        assert [r["name"] for r in await report_service.below_min_stock(db, employee(cleaning_id))] == ["Soap"]


class TestProductCountByCategory:
    async def test_counts_sum_to_visible_products(self, db):
        drinks_id, _ = await _catalog(db)
        rows = await report_service.product_count_by_category(db, ADMIN)
        assert rows == [
            {"category_name": "Cleaning", "product_count": 1},
            {"category_name": "Drinks", "product_count": 2},
        ]
        assert sum(r["product_count"] for r in rows) == len(await report_service.price_list(db, ADMIN))

        scoped = await report_service.product_count_by_category(db, employee(drinks_id))
        assert scoped == [{"category_name": "Drinks", "product_count": 2}]

    async def test_empty_categories_are_omitted(self, db):
        await make_category(db, "Empty")
        assert await report_service.product_count_by_category(db, ADMIN) == []


class TestTopMovementProducts:
    async def test_none_without_movements(self, db):
        await _catalog(db)
        assert await report_service.top_movement_products(db) == {
            "top_entry_product": None,
            "top_exit_product": None,
        }

    async def test_counts_movements_not_quantities(self, db):
        drinks = await make_category(db, "Drinks")
        water = await make_product(db, drinks, name="Water", quantity_in_stock=100)
        juice = await make_product(db, drinks, name="Juice", quantity_in_stock=100)
        water_id, juice_id = water.id, juice.id

        await ledger.register_entry(db, ADMIN, juice_id, 500)
        await ledger.register_entry(db, ADMIN, water_id, 1)
        await ledger.register_entry(db, ADMIN, water_id, 1)
        await ledger.register_exit(db, ADMIN, juice_id, 1)

        result = await report_service.top_movement_products(db)
        assert result["top_entry_product"] == {"product_name": "Water", "movement_count": 2}
        assert result["top_exit_product"] == {"product_name": "Juice", "movement_count": 1}

    async def test_tie_goes_to_first_name(self, db):
        drinks = await make_category(db, "Drinks")
        water = await make_product(db, drinks, name="Water")
        apple = await make_product(db, drinks, name="Apple")
        water_id, apple_id = water.id, apple.id

        await ledger.register_entry(db, ADMIN, water_id, 1)
        await ledger.register_entry(db, ADMIN, apple_id, 1)

        top = await report_service.top_movement_product(db, "ENTRY")
        assert top == {"product_name": "Apple", "movement_count": 1}
