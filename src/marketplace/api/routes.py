"""FastAPI routes for the Marketplace: checkout, order lifecycle, offers, settlement and sales reports.

Thin adapters that translate HTTP requests into domain commands. The acting
party comes from the ``X-Actor-Id`` / ``X-Actor-Role`` headers set by the
auth gateway in front of this service.
"""

import json
import math

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.accounts.account import Account
from marketplace.accounts.registration import RegisterAccount
from marketplace.analytics.seller_analytics import SellerAnalytics
from marketplace.analytics.settlement import PurgeSellerAnalytics, UpdateSettlementStatus
from marketplace.api.dependencies import Actor, current_actor
from marketplace.api.presenters import admin_view, buyer_view, present_order
from marketplace.api.schemas import (
    AssignmentResponse,
    AssignPartnerRequest,
    CategorySalesEntry,
    CreateOfferRequest,
    DailySalesPoint,
    IdResponse,
    ListProductRequest,
    OfferResponse,
    OrderListResponse,
    OrderStatsResponse,
    PlaceOrderRequest,
    PlatformStatsResponse,
    ProductSalesEntry,
    RegisterAccountRequest,
    RestockRequest,
    SellerAnalyticsResponse,
    SellerRevenueEntry,
    SellerSalesResponse,
    SellerSummaryResponse,
    SettlementRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
)
from marketplace.catalogue.management import ListProduct, RestockProduct
from marketplace.catalogue.product import Product
from marketplace.checkout.placement import PlaceOrder
from marketplace.notifications.retry import RetryNotification
from marketplace.offers.management import CreateOffer, DeactivateOffer
from marketplace.offers.offer import Offer
from marketplace.order.assignment import AssignDeliveryPartner
from marketplace.order.invoice import render_invoice
from marketplace.order.order import Order
from marketplace.order.status import ActorRole, OrderStatus
from marketplace.order.status_update import UpdateOrderStatus
from marketplace.projections.category_sales import CategorySales
from marketplace.projections.seller_reports import (
    SellerCategorySales,
    SellerDailySales,
    SellerProductSales,
    for_seller,
)
from marketplace.projections.seller_sales import SellerSales
from marketplace.shared.errors import AccessDenied

BUYER, SELLER, ADMIN = ActorRole.BUYER, ActorRole.SELLER, ActorRole.ADMIN


def _load_visible_order(order_id: str, actor: Actor) -> Order:
    order = current_domain.repository_for(Order).get(order_id)
    if actor.role == BUYER and str(order.buyer_id) != actor.id:
        raise AccessDenied("Order belongs to another buyer")
    if actor.role == SELLER and str(order.seller_id) != actor.id:
        raise AccessDenied("Order belongs to another seller")
    return order


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=list[dict])
async def place_order(body: PlaceOrderRequest, actor: Actor = Depends(current_actor)) -> list[dict]:
    """Split the cart by seller and create one order per seller."""
    actor.require(BUYER)
    command = PlaceOrder(
        buyer_id=actor.id,
        items=json.dumps([{"product_id": item.product, "quantity": item.quantity} for item in body.items]),
        address=json.dumps(body.address.model_dump(exclude_none=True)),
        payment_mode=body.payment_mode,
        coupon_code=body.coupon_code,
        discount=body.discount,
    )
    order_ids = current_domain.process(command, asynchronous=False)

    repo = current_domain.repository_for(Order)
    return [buyer_view(repo.get(order_id)).model_dump(mode="json") for order_id in order_ids]


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(current_actor),
) -> OrderListResponse:
    repo = current_domain.repository_for(Order)
    if actor.role == BUYER:
        orders = repo.find_for_buyer(actor.id)
    elif actor.role == SELLER:
        orders = repo.find_for_seller(actor.id)
    else:
        orders = repo.find_all()

    start = (page - 1) * limit
    window = orders[start : start + limit]
    return OrderListResponse(
        orders=[present_order(order, actor.role).model_dump(mode="json") for order in window],
        page=page,
        limit=limit,
        total=len(orders),
        pages=math.ceil(len(orders) / limit),
    )


@order_router.get("/stats", response_model=OrderStatsResponse)
async def order_stats(actor: Actor = Depends(current_actor)) -> OrderStatsResponse:
    """Buyer's order count and spend; cancelled orders count but are not spent."""
    actor.require(BUYER)
    orders = current_domain.repository_for(Order).find_for_buyer(actor.id)
    return OrderStatsResponse(
        total_orders=len(orders),
        total_spent=sum(order.total_amount for order in orders if order.order_status != OrderStatus.CANCELLED.value),
    )


@order_router.get("/{order_id}", response_model=None)
async def get_order(order_id: str, actor: Actor = Depends(current_actor)):
    order = _load_visible_order(order_id, actor)
    return present_order(order, actor.role)


@order_router.put("/{order_id}", response_model=None)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, actor: Actor = Depends(current_actor)):
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        actor_id=actor.id,
        actor_role=actor.role.value,
    )
    order = current_domain.process(command, asynchronous=False)
    return present_order(order, actor.role)


@order_router.get("/{order_id}/invoice", response_class=PlainTextResponse)
async def download_invoice(order_id: str, actor: Actor = Depends(current_actor)) -> PlainTextResponse:
    order = _load_visible_order(order_id, actor)
    try:
        seller = current_domain.repository_for(Account).get(order.seller_id)
        seller_name = seller.display_name
    except ObjectNotFoundError:
        seller_name = None

    return PlainTextResponse(
        render_invoice(order, seller_name=seller_name),
        headers={"Content-Disposition": f'attachment; filename="invoice-{order.id}.txt"'},
    )


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/stats", response_model=PlatformStatsResponse)
async def platform_stats(actor: Actor = Depends(current_actor)) -> PlatformStatsResponse:
    """Order totals across every seller, revenue per seller and sales per category."""
    actor.require(ADMIN)
    sellers = current_domain.repository_for(SellerSales)._dao.query.all().items
    accounts = current_domain.repository_for(Account)
    categories = current_domain.repository_for(CategorySales)._dao.query.all().items

    def seller_name(seller_id):
        try:
            return accounts.get(seller_id).display_name
        except ObjectNotFoundError:
            return "Unknown Seller"

    return PlatformStatsResponse(
        total_orders=sum(record.total_orders or 0 for record in sellers),
        total_revenue=sum(record.gross_revenue or 0.0 for record in sellers),
        revenue_by_seller=[
            SellerRevenueEntry(
                seller_id=str(record.seller_id),
                seller_name=seller_name(record.seller_id),
                orders=record.total_orders or 0,
                total=record.gross_revenue or 0.0,
            )
            for record in sorted(sellers, key=lambda record: record.gross_revenue or 0.0, reverse=True)
        ],
        orders_by_category=[
            CategorySalesEntry(
                category=record.category_id, sold=record.quantity_sold or 0, revenue=record.revenue or 0.0
            )
            for record in sorted(categories, key=lambda record: record.revenue or 0.0, reverse=True)
        ],
    )


@admin_router.post("/orders/{order_id}/assign", response_model=AssignmentResponse)
async def assign_delivery_partner(
    order_id: str, body: AssignPartnerRequest, actor: Actor = Depends(current_actor)
) -> AssignmentResponse:
    actor.require(ADMIN)
    command = AssignDeliveryPartner(order_id=order_id, partner_id=body.partner_id)
    order = current_domain.process(command, asynchronous=False)

    analytics = current_domain.repository_for(SellerAnalytics).find_by_order(str(order.id))
    message = "Delivery partner assigned" if body.partner_id else "Delivery partner unassigned"
    return AssignmentResponse(message=message, order=admin_view(order, analytics))


@admin_router.put("/analytics/{analytics_id}/settlement", response_model=SellerAnalyticsResponse)
async def update_settlement(
    analytics_id: str, body: SettlementRequest, actor: Actor = Depends(current_actor)
) -> SellerAnalyticsResponse:
    actor.require(ADMIN)
    command = UpdateSettlementStatus(
        analytics_id=analytics_id,
        platform_commission_status=body.platform_commission_status,
        delivery_partner_fee_status=body.delivery_partner_fee_status,
    )
    analytics = current_domain.process(command, asynchronous=False)
    return SellerAnalyticsResponse(
        analytics_id=str(analytics.id),
        order_id=str(analytics.order_id),
        seller_id=str(analytics.seller_id),
        platform_commission=analytics.platform_commission,
        total_commission_percentage=analytics.total_commission_percentage,
        seller_earning=analytics.seller_earning,
        delivery_partner_fee=analytics.delivery_partner_fee,
        platform_commission_status=analytics.platform_commission_status,
        delivery_partner_fee_status=analytics.delivery_partner_fee_status,
    )


@admin_router.delete("/analytics/{analytics_id}", response_model=StatusResponse)
async def purge_analytics(analytics_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    actor.require(ADMIN)
    current_domain.process(PurgeSellerAnalytics(analytics_id=analytics_id), asynchronous=False)
    return StatusResponse()


@admin_router.post("/notifications/{notification_id}/retry", response_model=StatusResponse)
async def retry_notification(notification_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    actor.require(ADMIN)
    current_domain.process(RetryNotification(notification_id=notification_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------
offer_router = APIRouter(prefix="/offers", tags=["offers"])


def _offer_response(offer: Offer) -> OfferResponse:
    return OfferResponse(
        offer_id=str(offer.id),
        code=offer.code,
        tagline=offer.tagline,
        discount_type=offer.discount_type,
        discount_value=offer.discount_value,
        min_cart_amount=offer.min_cart_amount or 0.0,
        expiry_date=offer.expiry_date,
        is_active=offer.is_active,
        redemption_count=len(offer.redemptions or []),
    )


@offer_router.post("", status_code=201, response_model=OfferResponse)
async def create_offer(body: CreateOfferRequest, actor: Actor = Depends(current_actor)) -> OfferResponse:
    actor.require(ADMIN)
    command = CreateOffer(
        code=body.code,
        tagline=body.tagline,
        discount_type=body.discount_type,
        discount_value=body.discount_value,
        min_cart_amount=body.min_cart_amount,
        expiry_date=body.expiry_date,
        applicable_categories=json.dumps(body.applicable_categories),
    )
    offer_id = current_domain.process(command, asynchronous=False)
    return _offer_response(current_domain.repository_for(Offer).get(offer_id))


@offer_router.put("/{code}/deactivate", response_model=OfferResponse)
async def deactivate_offer(code: str, actor: Actor = Depends(current_actor)) -> OfferResponse:
    actor.require(ADMIN)
    current_domain.process(DeactivateOffer(code=code), asynchronous=False)
    return _offer_response(current_domain.repository_for(Offer).find_by_code(code))


# ---------------------------------------------------------------------------
# Sellers
# ---------------------------------------------------------------------------
seller_router = APIRouter(prefix="/sellers", tags=["sellers"])

TOP_PRODUCTS = 5


def _require_seller_access(seller_id: str, actor: Actor) -> None:
    actor.require(SELLER, ADMIN)
    if actor.role == SELLER and actor.id != seller_id:
        raise AccessDenied("Sellers can only view their own sales")


def _seller_sales_record(seller_id: str) -> SellerSales | None:
    try:
        return current_domain.repository_for(SellerSales).get(seller_id)
    except ObjectNotFoundError:
        return None


@seller_router.get("/{seller_id}/sales", response_model=SellerSalesResponse)
async def seller_sales(seller_id: str, actor: Actor = Depends(current_actor)) -> SellerSalesResponse:
    _require_seller_access(seller_id, actor)
    record = _seller_sales_record(seller_id)
    if record is None:
        return SellerSalesResponse(seller_id=seller_id)

    return SellerSalesResponse(
        seller_id=str(record.seller_id),
        total_orders=record.total_orders or 0,
        cancelled_orders=record.cancelled_orders or 0,
        delivered_orders=record.delivered_orders or 0,
        item_revenue=record.item_revenue or 0.0,
        gross_revenue=record.gross_revenue or 0.0,
        net_revenue=record.net_revenue or 0.0,
        total_discount=record.total_discount or 0.0,
        last_order_at=record.last_order_at,
    )


@seller_router.get("/{seller_id}/sales/summary", response_model=SellerSummaryResponse)
async def seller_sales_summary(seller_id: str, actor: Actor = Depends(current_actor)) -> SellerSummaryResponse:
    """Order count, item revenue and number of listed products."""
    _require_seller_access(seller_id, actor)
    products = current_domain.repository_for(Product)._dao.query.filter(seller_id=seller_id).all()
    summary = SellerSummaryResponse(seller_id=seller_id, products_count=products.total)

    record = _seller_sales_record(seller_id)
    if record is not None:
        summary.total_orders = record.total_orders or 0
        summary.total_revenue = record.item_revenue or 0.0
    return summary


@seller_router.get("/{seller_id}/sales/daily", response_model=list[DailySalesPoint])
async def seller_daily_sales(seller_id: str, actor: Actor = Depends(current_actor)) -> list[DailySalesPoint]:
    _require_seller_access(seller_id, actor)
    rows = sorted(for_seller(SellerDailySales, seller_id), key=lambda row: row.date)
    return [DailySalesPoint(date=row.date, orders=row.orders or 0, revenue=row.revenue or 0.0) for row in rows]


@seller_router.get("/{seller_id}/sales/top-products", response_model=list[ProductSalesEntry])
async def seller_top_products(seller_id: str, actor: Actor = Depends(current_actor)) -> list[ProductSalesEntry]:
    _require_seller_access(seller_id, actor)
    rows = sorted(for_seller(SellerProductSales, seller_id), key=lambda row: row.quantity_sold or 0, reverse=True)
    return [
        ProductSalesEntry(
            product_id=str(row.product_id), title=row.title, sold=row.quantity_sold or 0, revenue=row.revenue or 0.0
        )
        for row in rows[:TOP_PRODUCTS]
    ]


@seller_router.get("/{seller_id}/sales/categories", response_model=list[CategorySalesEntry])
async def seller_category_sales(seller_id: str, actor: Actor = Depends(current_actor)) -> list[CategorySalesEntry]:
    _require_seller_access(seller_id, actor)
    rows = sorted(for_seller(SellerCategorySales, seller_id), key=lambda row: row.quantity_sold or 0, reverse=True)
    return [
        CategorySalesEntry(category=row.category_id, sold=row.quantity_sold or 0, revenue=row.revenue or 0.0)
        for row in rows
    ]


# ---------------------------------------------------------------------------
# Accounts and products (registration stand-ins for the identity and catalogue services)
# ---------------------------------------------------------------------------
account_router = APIRouter(prefix="/accounts", tags=["accounts"])
product_router = APIRouter(prefix="/products", tags=["products"])


@account_router.post("", status_code=201, response_model=IdResponse)
async def register_account(body: RegisterAccountRequest) -> IdResponse:
    command = RegisterAccount(
        role=body.role,
        name=body.name,
        mobile=body.mobile,
        shop_name=body.shop_name,
        address=body.address,
        pincode=body.pincode,
    )
    account_id = current_domain.process(command, asynchronous=False)
    return IdResponse(id=account_id)


@product_router.post("", status_code=201, response_model=IdResponse)
async def list_product(body: ListProductRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    actor.require(SELLER, ADMIN)
    seller_id = actor.id if actor.role == SELLER else body.seller_id
    if not seller_id:
        raise AccessDenied("A seller id is required to list a product")

    command = ListProduct(
        seller_id=seller_id,
        title=body.title,
        price=body.price,
        stock=body.stock,
        commission_percent=body.commission_percent,
        category_id=body.category_id,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return IdResponse(id=product_id)


@product_router.put("/{product_id}/restock", response_model=StatusResponse)
async def restock_product(product_id: str, body: RestockRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    actor.require(SELLER, ADMIN)
    product = current_domain.repository_for(Product).get(product_id)
    if actor.role == SELLER and str(product.seller_id) != actor.id:
        raise AccessDenied("Sellers can only restock their own products")

    current_domain.process(RestockProduct(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()
