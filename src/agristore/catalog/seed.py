"""Default catalogue data: the promotional codes offered at launch and a few demo products."""

import structlog
from protean.utils.globals import current_domain

from agristore.catalog.discount import DiscountCode, DiscountType
from agristore.catalog.product import Product

logger = structlog.get_logger(__name__)

DEFAULT_DISCOUNT_CODES = [
    {"code": "WELCOME10", "discount_type": DiscountType.PERCENTAGE.value, "value": 10, "minimum_amount": 50000},
    {"code": "SAVE5000", "discount_type": DiscountType.FIXED.value, "value": 5000, "minimum_amount": 25000},
    {"code": "FARMER20", "discount_type": DiscountType.PERCENTAGE.value, "value": 20, "minimum_amount": 100000},
]

DEMO_PRODUCTS = [
    {
        "name": "NPK 17-17-17 Fertilizer",
        "sku": "FRT-NPK-17",
        "price": 57500,
        "supplier": "Yara Tanzania",
        "category_id": "fertilizers",
        "variants": [
            {"name": "bag", "value": "25kg", "price_adjustment": 0},
            {"name": "bag", "value": "50kg", "price_adjustment": 52000},
        ],
    },
    {
        "name": "Hybrid Maize Seed H614",
        "sku": "SDS-MZ-614",
        "price": 18000,
        "supplier": "Kenya Seed Company",
        "category_id": "seeds",
    },
    {
        "name": "Knapsack Sprayer 16L",
        "sku": "EQP-SPR-16",
        "price": 45000,
        "supplier": "AgroTools Ltd",
        "category_id": "equipment",
    },
]


def seed_discount_codes() -> int:
    """Register the default discount codes that are not yet in the catalogue."""
    repo = current_domain.repository_for(DiscountCode)
    created = 0
    for data in DEFAULT_DISCOUNT_CODES:
        if repo.find_by_code(data["code"]) is None:
            repo.add(DiscountCode.create(**data))
            created += 1
    logger.info("Seeded discount codes", created=created)
    return created


def seed_demo_products() -> list[str]:
    """Add the demo products and return their identifiers."""
    repo = current_domain.repository_for(Product)
    product_ids = []
    for data in DEMO_PRODUCTS:
        product = Product.create(**data)
        repo.add(product)
        product_ids.append(str(product.id))
    logger.info("Seeded demo products", count=len(product_ids))
    return product_ids
