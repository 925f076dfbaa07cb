"""
Checkout Service
Charges the cart through Braintree and records the order

Sequence per request: parse body -> sum prices -> charge -> store order.
A gateway failure stops the sequence before anything is stored. A store
failure after a successful charge is reported, not compensated: the
transaction id is logged so the sale can be reconciled by hand.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from storefront.connectors.braintree_connector import BraintreeConnector, serialize_exception
from storefront.core.config import settings
from storefront.core.errors import CheckoutError, OrderPersistenceError, PaymentGatewayError
from storefront.domain.order import CheckoutRequest, Order
from storefront.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

CHECKOUT_ERROR = "Error in payment"
ORDER_SAVE_ERROR = "Error while saving order"


def default_connector() -> BraintreeConnector:
    return BraintreeConnector(settings.get_gateway_config())


class CheckoutService:
    """
    Service for Braintree checkout

    Handles:
    - Client token issuance
    - Cart total (plain sum of line-item prices)
    - Sale submission
    - Order persistence for the authenticated buyer
    """

    def __init__(
        self,
        connector: Optional[BraintreeConnector] = None,
        repository: Optional[OrderRepository] = None,
        connector_factory: Optional[Callable[[], BraintreeConnector]] = None,
    ):
        self._connector = connector
        self.connector_factory = connector_factory or default_connector
        self.repository = repository or OrderRepository()

    @property
    def connector(self) -> BraintreeConnector:
        """
        Gateway connector, built on first use

        Raises:
            PaymentGatewayError: credentials missing or environment unknown
        """
        if self._connector is None:
            try:
                self._connector = self.connector_factory()
            except ValueError as e:
                logger.error(f"[gateway] Braintree is not configured: {e}")
                raise PaymentGatewayError("Payment gateway not configured", serialize_exception(e), e)
        return self._connector

    async def issue_client_token(self) -> str:
        """Raises PaymentGatewayError untouched"""
        return await self.connector.generate_client_token()

    @staticmethod
    def parse_request(payload: Any) -> CheckoutRequest:
        try:
            return CheckoutRequest.model_validate(payload)
        except ValidationError as e:
            logger.error(f"[validation] Invalid checkout payload: {e}")
            raise CheckoutError(CHECKOUT_ERROR, e)

    async def checkout(self, payload: Dict[str, Any], buyer: str) -> Order:
        """
        Charge the cart and store the order

        Args:
            payload: Request body `{nonce, cart: [{price, ...}, ...]}`
            buyer: Authenticated requester id

        Returns:
            The stored Order

        Raises:
            CheckoutError: malformed body, before any gateway call
            PaymentGatewayError: declined or failed sale, nothing stored
            OrderPersistenceError: charge went through but the order was not stored
        """
        request = self.parse_request(payload)
        total = request.total

        receipt = await self.connector.charge(total, request.nonce)

        # Cart entries are stored exactly as the client sent them
        products: List[Dict[str, Any]] = list(payload["cart"])
        order = Order(products=products, payment=receipt, buyer=buyer)

        try:
            stored = await run_in_threadpool(self.repository.create, order)
        except Exception as e:
            transaction_id = receipt.get("transaction", {}).get("id")
            logger.error(
                f"[persistence] Order not stored after settled sale {transaction_id} "
                f"for buyer {buyer}: {e}"
            )
            raise OrderPersistenceError(ORDER_SAVE_ERROR, receipt, e)

        logger.info(f"Order {stored.id} stored for buyer {buyer} (total {total})")
        return stored
