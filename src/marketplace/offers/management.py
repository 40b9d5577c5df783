"""Offer publication and deactivation: commands and handler."""

import json
from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.offers.events import OfferCreated
from marketplace.offers.offer import DiscountType, Offer
from marketplace.shared.errors import RecordNotFound


@marketplace.command(part_of="Offer")
class CreateOffer:
    code = String(required=True, max_length=50)
    tagline = String(required=True, max_length=255)
    discount_type = String(max_length=20, default=DiscountType.FLAT.value)
    discount_value = Float(required=True, min_value=0.0)
    min_cart_amount = Float(default=0.0)
    expiry_date = DateTime()
    applicable_categories = Text()  # JSON list of category ids


@marketplace.command(part_of="Offer")
class DeactivateOffer:
    code = String(required=True, max_length=50)


@marketplace.command_handler(part_of=Offer)
class OfferHandler:
    @handle(CreateOffer)
    def create_offer(self, command):
        repo = current_domain.repository_for(Offer)
        if repo.find_by_code(command.code) is not None:
            raise ValidationError({"code": [f"Offer code {command.code.upper()} already exists"]})

        categories = json.loads(command.applicable_categories) if command.applicable_categories else []
        offer = Offer.create(
            code=command.code,
            tagline=command.tagline,
            discount_value=command.discount_value,
            discount_type=(command.discount_type or DiscountType.FLAT.value).upper(),
            min_cart_amount=command.min_cart_amount,
            expiry_date=command.expiry_date,
            applicable_categories=categories,
        )
        offer.raise_(
            OfferCreated(
                offer_id=str(offer.id),
                code=offer.code,
                discount_type=offer.discount_type,
                discount_value=offer.discount_value,
                created_at=offer.created_at or datetime.now(UTC),
            )
        )
        repo.add(offer)
        return str(offer.id)

    @handle(DeactivateOffer)
    def deactivate_offer(self, command):
        repo = current_domain.repository_for(Offer)
        offer = repo.find_by_code(command.code)
        if offer is None:
            raise RecordNotFound("Offer", command.code.upper())
        offer.deactivate()
        repo.add(offer)
