"""Payment gateway factory.

get_gateway() builds the adapter named by PAYMENT_GATEWAY ("stripe" or
"fake") on first use; set_gateway()/reset_gateway() swap it in tests.
"""

from storefront.payments.fake_adapter import FakeGateway
from storefront.payments.port import PaymentGateway
from storefront.utils import settings

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        if settings.PAYMENT_GATEWAY == "stripe":
            from storefront.payments.stripe_adapter import StripeGateway

            _current_gateway = StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_WEBHOOK_SECRET)
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
