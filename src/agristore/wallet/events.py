"""Domain events for the PaymentWallet aggregate."""

from protean.fields import Identifier, String

from agristore.domain import agristore


@agristore.event(part_of="PaymentWallet")
class PaymentMethodSaved:
    __version__ = 1

    wallet_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    saved_method_id = Identifier(required=True)
    method_type = String(required=True)
    provider = String()


@agristore.event(part_of="PaymentWallet")
class PaymentMethodUpdated:
    __version__ = 1

    wallet_id = Identifier(required=True)
    saved_method_id = Identifier(required=True)


@agristore.event(part_of="PaymentWallet")
class PaymentMethodDeleted:
    __version__ = 1

    wallet_id = Identifier(required=True)
    saved_method_id = Identifier(required=True)
    new_default_id = Identifier()


@agristore.event(part_of="PaymentWallet")
class DefaultPaymentMethodChanged:
    """Another saved method became the one pre-selected at checkout."""

    __version__ = 1

    wallet_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_default_id = Identifier()
    new_default_id = Identifier(required=True)


@agristore.event(part_of="PaymentWallet")
class PaymentWalletReset:
    __version__ = 1

    wallet_id = Identifier(required=True)
    customer_id = Identifier(required=True)
