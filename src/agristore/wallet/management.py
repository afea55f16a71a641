"""Saved payment methods: commands and handler.

A customer's wallet is stored on its first change; until then the catalogue
defaults apply. A new wallet is stored before the change is applied, so its
catalogue entries exist when one of them is deleted.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from agristore.domain import agristore
from agristore.wallet.repository import wallet_for
from agristore.wallet.wallet import PaymentWallet


@agristore.command(part_of="PaymentWallet")
class SavePaymentMethod:
    customer_id = Identifier(required=True)
    method_type = String(required=True, max_length=30)
    provider = String(max_length=100)
    account_number = String(max_length=50)
    method_id = String(max_length=50)
    is_default = Boolean(default=False)


@agristore.command(part_of="PaymentWallet")
class UpdatePaymentMethod:
    customer_id = Identifier(required=True)
    saved_method_id = Identifier(required=True)
    provider = String(max_length=100)
    account_number = String(max_length=50)
    is_default = Boolean()


@agristore.command(part_of="PaymentWallet")
class DeletePaymentMethod:
    customer_id = Identifier(required=True)
    saved_method_id = Identifier(required=True)


@agristore.command(part_of="PaymentWallet")
class SetDefaultPaymentMethod:
    customer_id = Identifier(required=True)
    saved_method_id = Identifier(required=True)


@agristore.command(part_of="PaymentWallet")
class ResetPaymentWallet:
    customer_id = Identifier(required=True)


def _load_wallet(customer_id) -> PaymentWallet:
    repo = current_domain.repository_for(PaymentWallet)
    wallet = wallet_for(customer_id)
    if not wallet.state_.is_persisted:
        repo.add(wallet)
    return wallet


@agristore.command_handler(part_of=PaymentWallet)
class PaymentWalletHandler:
    @handle(SavePaymentMethod)
    def save_payment_method(self, command):
        wallet = _load_wallet(command.customer_id)
        saved_method_id = wallet.add_method(
            command.method_type,
            provider=command.provider,
            account_number=command.account_number,
            method_id=command.method_id,
            is_default=bool(command.is_default),
        )
        current_domain.repository_for(PaymentWallet).add(wallet)
        return saved_method_id

    @handle(UpdatePaymentMethod)
    def update_payment_method(self, command):
        wallet = _load_wallet(command.customer_id)
        wallet.update_method(
            command.saved_method_id,
            provider=command.provider,
            account_number=command.account_number,
            is_default=command.is_default,
        )
        current_domain.repository_for(PaymentWallet).add(wallet)

    @handle(DeletePaymentMethod)
    def delete_payment_method(self, command):
        wallet = _load_wallet(command.customer_id)
        wallet.delete_method(command.saved_method_id)
        current_domain.repository_for(PaymentWallet).add(wallet)

    @handle(SetDefaultPaymentMethod)
    def set_default_payment_method(self, command):
        wallet = _load_wallet(command.customer_id)
        wallet.set_default(command.saved_method_id)
        current_domain.repository_for(PaymentWallet).add(wallet)

    @handle(ResetPaymentWallet)
    def reset_payment_wallet(self, command):
        wallet = _load_wallet(command.customer_id)
        wallet.reset()
        current_domain.repository_for(PaymentWallet).add(wallet)
