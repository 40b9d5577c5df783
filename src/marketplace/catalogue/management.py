"""Product listing and restocking: commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace


@marketplace.command(part_of="Product")
class ListProduct:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0)
    commission_percent = Float(default=0.0)
    category_id = Identifier()


@marketplace.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command_handler(part_of=Product)
class ProductHandler:
    @handle(ListProduct)
    def list_product(self, command):
        product = Product.create(
            seller_id=command.seller_id,
            title=command.title,
            price=command.price,
            stock=command.stock or 0,
            commission_percent=command.commission_percent or 0.0,
            category_id=command.category_id,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)
