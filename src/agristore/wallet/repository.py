"""Repository for the PaymentWallet aggregate."""

from protean.utils.globals import current_domain

from agristore.domain import agristore
from agristore.wallet.wallet import PaymentWallet


@agristore.repository(part_of=PaymentWallet)
class PaymentWalletRepository:
    def find_for_customer(self, customer_id) -> PaymentWallet | None:
        if not customer_id:
            return None
        results = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return results[0] if results else None


def wallet_for(customer_id) -> PaymentWallet:
    """The customer's stored wallet, or a new one holding the catalogue defaults."""
    wallet = current_domain.repository_for(PaymentWallet).find_for_customer(customer_id)
    return wallet if wallet is not None else PaymentWallet.open(customer_id)
