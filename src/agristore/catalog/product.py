"""Product aggregate: the read-only catalogue entry a cart line is priced from."""

from protean.fields import HasMany, Integer, String

from agristore.domain import agristore


@agristore.entity(part_of="Product")
class ProductVariant:
    """A selectable variant value (e.g. size = 50kg) and what it adds to the base price."""

    name = String(required=True, max_length=100)
    value = String(required=True, max_length=100)
    price_adjustment = Integer(default=0)


@agristore.aggregate
class Product:
    name = String(required=True, max_length=255)
    sku = String(max_length=50)
    price = Integer(required=True, min_value=0)
    supplier = String(max_length=255)
    category_id = String(max_length=100)
    image_url = String(max_length=1000)
    variants = HasMany(ProductVariant)

    @classmethod
    def create(cls, name, price, supplier=None, category_id=None, sku=None, image_url=None, variants=None):
        """Create a product. ``variants`` is a list of dicts with name, value, price_adjustment."""
        product = cls(
            name=name,
            price=price,
            supplier=supplier,
            category_id=category_id,
            sku=sku,
            image_url=image_url,
        )
        for variant in variants or []:
            product.add_variants(ProductVariant(**variant))
        return product

    def price_for(self, selected_variants=None) -> int:
        """Unit price for a variant selection: base price plus every matching adjustment."""
        selected_variants = selected_variants or {}
        price = self.price
        for variant in self.variants:
            if selected_variants.get(variant.name) == variant.value:
                price += variant.price_adjustment
        return max(0, price)
