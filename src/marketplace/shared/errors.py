"""Marketplace error taxonomy.

Every business failure the checkout and fulfillment flows can report is a
subclass of one of Protean's exceptions, so command handlers and aggregates
raise them like any other validation failure. Each class carries the
``error_type`` and ``status_code`` the HTTP layer reports, plus optional
client-facing detail (``invalidProductId``, ``availableStock``).
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class MarketplaceError(ValidationError):
    """A request the marketplace understood but refuses to carry out."""

    error_type = "ValidationError"
    status_code = 400
    field = "order"

    def __init__(self, message, **details):
        self.message = message
        self.details = details
        super().__init__({self.field: [message]})

    def to_dict(self) -> dict:
        return {"message": self.message, "errorType": self.error_type, **self.details}


class ProductNotFound(MarketplaceError):
    error_type = "ProductNotFound"
    field = "items"

    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found", invalidProductId=str(product_id))


class InsufficientStock(MarketplaceError):
    error_type = "InsufficientStock"
    field = "items"

    def __init__(self, product_id, title, available):
        super().__init__(
            f"Insufficient stock for {title}",
            invalidProductId=str(product_id),
            availableStock=available,
        )


class CouponNotApplicable(MarketplaceError):
    error_type = "CouponNotApplicable"
    field = "coupon_code"


class InvalidPartner(MarketplaceError):
    error_type = "InvalidPartner"
    field = "partner_id"


class SellerPincodeUnknown(MarketplaceError):
    error_type = "SellerPincodeUnknown"
    field = "pincode"


class PartnerPincodeUnknown(MarketplaceError):
    error_type = "PartnerPincodeUnknown"
    field = "pincode"


class PincodeMismatch(MarketplaceError):
    error_type = "PincodeMismatch"
    field = "pincode"

    def __init__(self, seller_pincode, partner_pincode):
        super().__init__(
            f"Delivery partner pincode ({partner_pincode}) does not match seller pincode ({seller_pincode})",
        )


class UnauthorizedTransition(MarketplaceError):
    error_type = "UnauthorizedTransition"
    status_code = 403
    field = "status"


class RecordNotFound(ObjectNotFoundError):
    """An order, account or analytics record referenced by id does not exist."""

    error_type = "NotFoundError"
    status_code = 404

    def __init__(self, kind, identifier):
        self.message = f"{kind} {identifier} not found"
        super().__init__({"id": [self.message]})


class AccessDenied(MarketplaceError):
    """The acting party may not see or touch this resource."""

    error_type = "Forbidden"
    status_code = 403
    field = "actor"
