"""Account aggregate (CQRS): buyers, sellers and delivery partners.

User management and profiles belong to the identity service; the marketplace
keeps the handful of facts it needs to route orders: who the party is, how to
reach them, and where they are (free-text address plus structured pincode).
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, String, Text

from marketplace.domain import marketplace

_PINCODE_TOKEN = re.compile(r"(?<!\d)(\d{6})(?!\d)")


class AccountRole(Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"
    DELIVERY_PARTNER = "DELIVERY_PARTNER"


def extract_pincode(address):
    """Return the first standalone six-digit token in a free-text address."""
    if not address:
        return None
    match = _PINCODE_TOKEN.search(address)
    return match.group(1) if match else None


@marketplace.aggregate
class Account:
    role = String(choices=AccountRole, required=True)
    name = String(required=True, max_length=200)
    mobile = String(required=True, max_length=20)
    shop_name = String(max_length=200)
    address = Text()
    pincode = String(max_length=10)
    created_at = DateTime()

    @classmethod
    def register(cls, role, name, mobile, address=None, pincode=None, shop_name=None):
        return cls(
            role=role,
            name=name,
            mobile=mobile,
            shop_name=shop_name,
            address=address,
            pincode=str(pincode).strip() if pincode not in (None, "") else None,
            created_at=datetime.now(UTC),
        )

    @property
    def is_delivery_partner(self):
        return self.role == AccountRole.DELIVERY_PARTNER.value

    @property
    def display_name(self):
        return self.shop_name or self.name

    def resolve_pincode(self, allow_address_fallback=False):
        """Structured pincode first, then (optionally) a token from the address."""
        if self.pincode and str(self.pincode).strip():
            return str(self.pincode).strip()
        if allow_address_fallback:
            return extract_pincode(self.address)
        return None
