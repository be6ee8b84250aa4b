# storefront/domain/errors.py
"""
Wyjatki domenowe. Dziedzicza po wbudowanych (LookupError, ValueError,
PermissionError, RuntimeError) tak jak serwisy rzucaly je wczesniej,
mapowanie na HTTP jest w storefront/api/errors.py.
"""


class NotFoundError(LookupError):
    pass


class InvalidRequestError(ValueError):
    pass


class InsufficientStockError(InvalidRequestError):
    def __init__(self, product_id: int, message: str = "Not enough stock available"):
        super().__init__(message)
        self.product_id = product_id


class EmptyCartError(InvalidRequestError):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InvalidAddressError(InvalidRequestError):
    def __init__(self, message: str = "Invalid shipping address"):
        super().__init__(message)


class InvalidStatusTransitionError(InvalidRequestError):
    pass


class WebhookSignatureError(InvalidRequestError):
    def __init__(self, message: str = "Webhook signature verification failed"):
        super().__init__(message)


class OwnershipError(PermissionError):
    pass


class ConcurrencyConflictError(RuntimeError):
    def __init__(self, message: str = "Cart was modified by another request, retry"):
        super().__init__(message)


class PaymentGatewayError(RuntimeError):
    pass
