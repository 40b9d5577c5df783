"""Account registration: command and handler."""

from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from marketplace.accounts.account import Account
from marketplace.domain import marketplace


@marketplace.command(part_of="Account")
class RegisterAccount:
    role = String(required=True, max_length=20)
    name = String(required=True, max_length=200)
    mobile = String(required=True, max_length=20)
    shop_name = String(max_length=200)
    address = Text()
    pincode = String(max_length=10)


@marketplace.command_handler(part_of=Account)
class RegisterAccountHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        account = Account.register(
            role=command.role.upper(),
            name=command.name,
            mobile=command.mobile,
            address=command.address,
            pincode=command.pincode,
            shop_name=command.shop_name,
        )
        current_domain.repository_for(Account).add(account)
        return str(account.id)
