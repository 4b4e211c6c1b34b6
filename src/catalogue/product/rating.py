"""Product rating — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from catalogue.domain import catalogue, logger
from catalogue.product.product import MAX_RATING, MIN_RATING, Product


@catalogue.command(part_of="Product")
class UpdateRating:
    product_id: Identifier(required=True)
    rating: Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)


@catalogue.command_handler(part_of=Product)
class RatingHandler:
    @handle(UpdateRating)
    def update_rating(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.record_rating(command.rating)
        repo.add(product)

        logger.info(
            "Product rated",
            product_id=str(product.id),
            rating=command.rating,
            rating_average=product.rating_average,
            rating_count=product.rating_count,
        )
