"""Read-only product queries."""

from protean.utils.globals import current_domain

from catalogue.product.product import Product


def is_in_stock(product_id) -> bool:
    return current_domain.repository_for(Product).get(product_id).is_in_stock()
