"""
Storefront error taxonomy

Services raise these; the API layer catches them at the route boundary
and renders the fixed response envelopes. Every kind is answered with
HTTP 500, so `kind` exists for logs and tests only.
"""
from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """Base class for errors raised by the storefront services"""

    kind = "operational"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Raw error detail placed in the `error` field of failure envelopes"""
        source = self.cause if self.cause is not None else self
        return {
            "name": type(source).__name__,
            "message": str(source),
        }


class ProductValidationError(StorefrontError):
    """A required product field is missing or the photo breaks its constraint"""

    kind = "validation"


class ProductPersistenceError(StorefrontError):
    """The product store rejected the write, or the payload could not be stored"""

    kind = "persistence"


class ProductNotFound(ProductPersistenceError):
    """No product matches the given identity"""


class PaymentGatewayError(StorefrontError):
    """Braintree returned an error result or the SDK raised"""

    kind = "gateway"

    def __init__(self, message: str, payload: Dict[str, Any], cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.payload = payload

    def to_dict(self) -> Dict[str, Any]:
        return self.payload


class CheckoutError(StorefrontError):
    """The checkout request body could not be turned into a charge"""

    kind = "validation"


class OrderPersistenceError(StorefrontError):
    """The order could not be stored after a successful charge"""

    kind = "persistence"

    def __init__(self, message: str, receipt: Dict[str, Any], cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.receipt = receipt
