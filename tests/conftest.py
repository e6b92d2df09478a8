import pytest

from seller_report.strategies import ProfitRankBonusStrategy, SimpleRevenueStrategy


@pytest.fixture
def sellers():
    return [
        {"id": "seller_1", "first_name": "Alexey", "last_name": "Petrov"},
        {"id": "seller_2", "first_name": "Ivan", "last_name": "Smirnov"},
        {"id": "seller_3", "first_name": "Maria", "last_name": "Kuznetsova"},
        {"id": "seller_4", "first_name": "Olga", "last_name": "Sokolova"},
    ]


@pytest.fixture
def products():
    return [
        {"sku": "SKU_001", "name": "Kettle", "purchase_price": 10, "sale_price": 20},
        {"sku": "SKU_002", "name": "Toaster", "purchase_price": 30, "sale_price": 50},
        {"sku": "SKU_003", "name": "Mixer", "purchase_price": 5, "sale_price": 8},
    ]


@pytest.fixture
def purchase_records():
    return [
        {
            "receipt_id": "receipt_1",
            "seller_id": "seller_1",
            "total_amount": 90,
            "items": [
                {"sku": "SKU_001", "quantity": 2, "sale_price": 20, "discount": 0},
                {"sku": "SKU_002", "quantity": 1, "sale_price": 50, "discount": 0},
            ],
        },
        {
            "receipt_id": "receipt_2",
            "seller_id": "seller_2",
            "total_amount": 45,
            "items": [
                {"sku": "SKU_002", "quantity": 1, "sale_price": 50, "discount": 10},
            ],
        },
        {
            "receipt_id": "receipt_3",
            "seller_id": "seller_3",
            "total_amount": 24,
            "items": [
                {"sku": "SKU_003", "quantity": 3, "sale_price": 8, "discount": 0},
            ],
        },
        {
            "receipt_id": "receipt_4",
            "seller_id": "seller_unknown",
            "total_amount": 1000,
            "items": [
                {"sku": "SKU_001", "quantity": 50, "sale_price": 20, "discount": 0},
            ],
        },
    ]


@pytest.fixture
def sales_data(sellers, products, purchase_records):
    return {
        "sellers": sellers,
        "products": products,
        "purchase_records": purchase_records,
    }


@pytest.fixture
def options():
    return {
        "calculate_revenue": SimpleRevenueStrategy(),
        "calculate_bonus": ProfitRankBonusStrategy(),
    }
