"""Featured and bestseller flags — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class SetFeatured:
    product_id: Identifier(required=True)
    featured: Boolean(default=False)


@catalogue.command(part_of="Product")
class SetBestseller:
    product_id: Identifier(required=True)
    bestseller: Boolean(default=False)


@catalogue.command_handler(part_of=Product)
class MerchandisingHandler:
    @handle(SetFeatured)
    def set_featured(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_featured(command.featured)
        repo.add(product)

    @handle(SetBestseller)
    def set_bestseller(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_bestseller(command.bestseller)
        repo.add(product)
