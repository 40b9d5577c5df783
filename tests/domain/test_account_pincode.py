import pytest

from marketplace.accounts.account import Account, AccountRole, extract_pincode


class TestExtractPincode:
    @pytest.mark.parametrize(
        "address, expected",
        [
            ("12 MG Road, Bengaluru 560001", "560001"),
            ("Flat 4, Sector 21, Gurugram - 122016, Haryana", "122016"),
            ("Door 1234567, Chennai", None),
            ("Plot 42, Pune", None),
            ("", None),
            (None, None),
        ],
    )
    def test_first_standalone_six_digit_token(self, address, expected):
        assert extract_pincode(address) == expected


class TestAccountPincode:
    def test_structured_pincode_wins(self):
        account = Account.register(
            role=AccountRole.SELLER.value,
            name="Asha",
            mobile="9000000001",
            address="Shop 3, Koramangala 560034",
            pincode="560001",
        )
        assert account.resolve_pincode(allow_address_fallback=True) == "560001"

    def test_fallback_to_address(self):
        account = Account.register(
            role=AccountRole.SELLER.value,
            name="Asha",
            mobile="9000000001",
            address="Shop 3, Koramangala 560034",
        )
        assert account.resolve_pincode(allow_address_fallback=True) == "560034"

    def test_no_fallback_by_default(self):
        account = Account.register(
            role=AccountRole.DELIVERY_PARTNER.value,
            name="Ravi",
            mobile="9000000002",
            address="Near bus stand 560034",
        )
        assert account.resolve_pincode() is None

    def test_blank_pincode_is_treated_as_missing(self):
        account = Account.register(role=AccountRole.SELLER.value, name="A", mobile="1", pincode="")
        assert account.pincode is None

    def test_display_name_prefers_shop(self):
        account = Account.register(role=AccountRole.SELLER.value, name="Asha", mobile="1", shop_name="Asha Stores")
        assert account.display_name == "Asha Stores"

    def test_is_delivery_partner(self):
        partner = Account.register(role=AccountRole.DELIVERY_PARTNER.value, name="Ravi", mobile="2")
        buyer = Account.register(role=AccountRole.BUYER.value, name="Meera", mobile="3")
        assert partner.is_delivery_partner
        assert not buyer.is_delivery_partner
