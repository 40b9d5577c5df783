"""UpdateOrderStatus command + handler: role-checked status changes."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.order.status import ActorRole, OrderStatusMachine, normalize_role, normalize_status

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)


@marketplace.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        target = normalize_status(command.status)
        role = normalize_role(command.actor_role)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if role == ActorRole.BUYER:
            owns_order = str(order.buyer_id) == str(command.actor_id)
        elif role == ActorRole.SELLER:
            owns_order = str(order.seller_id) == str(command.actor_id)
        else:
            owns_order = True

        OrderStatusMachine().assert_allowed(role, order.current_status, target, owns_order)

        order.change_status(target, changed_by=role.value)
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            status=order.order_status,
            actor_role=role.value,
        )
        return order
