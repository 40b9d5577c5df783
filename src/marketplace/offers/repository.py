"""Repository for the Offer aggregate."""

from marketplace.domain import marketplace
from marketplace.offers.offer import Offer, normalize_code


@marketplace.repository(part_of=Offer)
class OfferRepository:
    def find_by_code(self, code) -> Offer | None:
        """Case-insensitive lookup of an offer by its coupon code."""
        offers = self._dao.query.filter(code=normalize_code(code)).all().items
        return offers[0] if offers else None
