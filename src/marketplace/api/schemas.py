"""Pydantic request/response schemas for the Marketplace API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Order responses come in one shape per actor role;
only sellers and admins see commission data.
"""

from datetime import datetime

from pydantic import BaseModel, Field

_CAMEL = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    full_address: str = Field(alias="fullAddress")
    city: str
    state: str
    pincode: str
    mobile: str
    latitude: float | None = Field(default=None, alias="lat")
    longitude: float | None = Field(default=None, alias="lng")

    model_config = _CAMEL


class CartItemSchema(BaseModel):
    product: str
    quantity: int


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    items: list[CartItemSchema] = Field(min_length=1)
    address: AddressSchema
    payment_mode: str = Field(alias="paymentMode")
    coupon_code: str | None = Field(default=None, alias="couponCode")
    discount: float = Field(default=0.0, ge=0)

    model_config = {
        **_CAMEL,
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product": "prod-001", "quantity": 2}],
                    "address": {
                        "fullAddress": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                        "mobile": "9876543210",
                    },
                    "paymentMode": "COD",
                    "couponCode": "WELCOME50",
                }
            ]
        },
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class AssignPartnerRequest(BaseModel):
    partner_id: str | None = Field(default=None, alias="partnerId")

    model_config = _CAMEL


class CreateOfferRequest(BaseModel):
    code: str
    tagline: str
    discount_type: str = Field(default="FLAT", alias="discountType")
    discount_value: float = Field(ge=0, alias="discountValue")
    min_cart_amount: float = Field(default=0.0, ge=0, alias="minCartAmount")
    expiry_date: datetime | None = Field(default=None, alias="expiryDate")
    applicable_categories: list[str] = Field(default_factory=list, alias="applicableCategories")

    model_config = _CAMEL


class SettlementRequest(BaseModel):
    platform_commission_status: str | None = Field(default=None, alias="platformCommissionStatus")
    delivery_partner_fee_status: str | None = Field(default=None, alias="deliveryPartnerFeeStatus")

    model_config = _CAMEL


class RegisterAccountRequest(BaseModel):
    role: str
    name: str
    mobile: str
    shop_name: str | None = Field(default=None, alias="shopName")
    address: str | None = None
    pincode: str | None = None

    model_config = _CAMEL


class ListProductRequest(BaseModel):
    seller_id: str | None = Field(default=None, alias="sellerId")
    title: str
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    commission_percent: float = Field(default=0.0, ge=0, le=100, alias="commissionPercent")
    category_id: str | None = Field(default=None, alias="categoryId")

    model_config = _CAMEL


class RestockRequest(BaseModel):
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class IdResponse(BaseModel):
    id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    product_id: str
    title: str
    quantity: int
    unit_price: float


class SellerOrderItemResponse(OrderItemResponse):
    commission_percent: float


class DeliveryAddressResponse(BaseModel):
    full_address: str
    city: str
    state: str
    pincode: str
    mobile: str
    latitude: float | None = None
    longitude: float | None = None


class BuyerOrderResponse(BaseModel):
    order_id: str
    buyer_id: str
    seller_id: str
    delivery_partner_id: str | None = None
    items: list[OrderItemResponse]
    subtotal: float
    shipping_charge: float
    discount_amount: float
    coupon_code: str | None = None
    discount_remark: str | None = None
    total_amount: float
    order_status: str
    payment_mode: str
    payment_status: str
    address: DeliveryAddressResponse | None = None
    placed_at: datetime | None = None
    updated_at: datetime | None = None


class SellerOrderResponse(BuyerOrderResponse):
    items: list[SellerOrderItemResponse]
    platform_commission: float | None = None
    total_commission_percentage: float | None = None
    seller_earning: float | None = None
    delivery_partner_fee: float | None = None


class AdminOrderResponse(SellerOrderResponse):
    analytics_id: str | None = None
    platform_commission_status: str | None = None
    delivery_partner_fee_status: str | None = None


class OrderListResponse(BaseModel):
    orders: list[dict]  # role-specific order responses
    page: int
    limit: int
    total: int
    pages: int


class OrderStatsResponse(BaseModel):
    total_orders: int
    total_spent: float


class AssignmentResponse(BaseModel):
    message: str
    order: AdminOrderResponse


class SellerSalesResponse(BaseModel):
    seller_id: str
    total_orders: int = 0
    cancelled_orders: int = 0
    delivered_orders: int = 0
    item_revenue: float = 0.0
    gross_revenue: float = 0.0
    net_revenue: float = 0.0
    total_discount: float = 0.0
    last_order_at: datetime | None = None


class SellerSummaryResponse(BaseModel):
    seller_id: str
    total_orders: int = 0
    total_revenue: float = 0.0
    products_count: int = 0


class DailySalesPoint(BaseModel):
    date: str
    orders: int
    revenue: float


class ProductSalesEntry(BaseModel):
    product_id: str
    title: str | None = None
    sold: int
    revenue: float


class CategorySalesEntry(BaseModel):
    category: str
    sold: int
    revenue: float


class SellerRevenueEntry(BaseModel):
    seller_id: str
    seller_name: str
    orders: int
    total: float


class PlatformStatsResponse(BaseModel):
    total_orders: int = 0
    total_revenue: float = 0.0
    revenue_by_seller: list[SellerRevenueEntry] = []
    orders_by_category: list[CategorySalesEntry] = []


class SellerAnalyticsResponse(BaseModel):
    analytics_id: str
    order_id: str
    seller_id: str
    platform_commission: float
    total_commission_percentage: float
    seller_earning: float
    delivery_partner_fee: float
    platform_commission_status: str
    delivery_partner_fee_status: str


class OfferResponse(BaseModel):
    offer_id: str
    code: str
    tagline: str
    discount_type: str
    discount_value: float
    min_cart_amount: float
    expiry_date: datetime | None = None
    is_active: bool
    redemption_count: int = 0
