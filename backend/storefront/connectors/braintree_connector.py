"""
Braintree Connector
Handles client-token issuance and sale submission against Braintree

The braintree SDK is blocking; each call is pushed to the threadpool and
awaited, so one request never has two gateway calls in flight. Failures
come back either as an error result (`is_success == False`) or as an
SDK exception; both are logged and raised as PaymentGatewayError with
the raw error payload attached.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Union

import braintree
from starlette.concurrency import run_in_threadpool

from storefront.core.config import GatewayConfig
from storefront.core.errors import PaymentGatewayError

logger = logging.getLogger(__name__)

ENVIRONMENTS = {
    "sandbox": braintree.Environment.Sandbox,
    "production": braintree.Environment.Production,
    "development": braintree.Environment.Development,
}


def serialize_error_result(result: Any) -> Dict[str, Any]:
    """Raw detail of a failed Braintree result object"""
    payload: Dict[str, Any] = {
        "success": False,
        "message": getattr(result, "message", None),
        "errors": [
            {"attribute": error.attribute, "code": error.code, "message": error.message}
            for error in result.errors.deep_errors
        ] if getattr(result, "errors", None) is not None else [],
    }

    transaction = getattr(result, "transaction", None)
    if transaction is not None:
        payload["transaction"] = {
            "id": transaction.id,
            "status": transaction.status,
            "processor_response_code": getattr(transaction, "processor_response_code", None),
            "processor_response_text": getattr(transaction, "processor_response_text", None),
        }

    return payload


def serialize_exception(error: BaseException) -> Dict[str, Any]:
    return {"name": type(error).__name__, "message": str(error)}


def serialize_receipt(result: Any) -> Dict[str, Any]:
    """JSON-friendly receipt stored on the order"""
    transaction = result.transaction
    created_at = getattr(transaction, "created_at", None)
    amount = getattr(transaction, "amount", None)
    return {
        "success": True,
        "transaction": {
            "id": transaction.id,
            "status": transaction.status,
            "type": getattr(transaction, "type", None),
            "amount": str(amount) if amount is not None else None,
            "currency_iso_code": getattr(transaction, "currency_iso_code", None),
            "payment_instrument_type": getattr(transaction, "payment_instrument_type", None),
            "created_at": created_at.isoformat() if created_at else None,
        },
    }


class BraintreeConnector:
    """
    Connector for the Braintree gateway

    Handles:
    - Client token generation for the drop-in UI
    - Sale submission with immediate settlement
    """

    def __init__(self, config: GatewayConfig, gateway: Optional[braintree.BraintreeGateway] = None):
        """
        Initialize Braintree connector

        Args:
            config: Merchant credentials and environment
            gateway: Pre-built gateway (tests inject a fake here)
        """
        self.config = config

        if gateway is None:
            if not all([config.merchant_id, config.public_key, config.private_key]):
                raise ValueError(
                    "Braintree credentials not configured. Set BRAINTREE_MERCHANT_ID, "
                    "BRAINTREE_PUBLIC_KEY and BRAINTREE_PRIVATE_KEY"
                )
            environment = ENVIRONMENTS.get(config.environment.lower())
            if environment is None:
                raise ValueError(f"Unknown Braintree environment: {config.environment}")

            gateway = braintree.BraintreeGateway(
                braintree.Configuration(
                    environment=environment,
                    merchant_id=config.merchant_id,
                    public_key=config.public_key,
                    private_key=config.private_key,
                )
            )

        self.gateway = gateway

    async def generate_client_token(self) -> str:
        """
        Issue a one-off client token

        Raises:
            PaymentGatewayError: if the SDK raises
        """
        try:
            token = await run_in_threadpool(self.gateway.client_token.generate)
        except Exception as e:
            logger.exception(f"[gateway] Client token generation failed: {e}")
            raise PaymentGatewayError("Client token generation failed", serialize_exception(e), e)

        return token

    async def charge(self, amount: Union[int, float, Decimal], nonce: str) -> Dict[str, Any]:
        """
        Submit a sale for settlement

        Args:
            amount: Total computed by the caller
            nonce: Payment method nonce from the client

        Returns:
            Receipt dictionary (see serialize_receipt)

        Raises:
            PaymentGatewayError: on an error result or an SDK exception
        """
        params = {
            "amount": Decimal(str(amount)),
            "payment_method_nonce": nonce,
            "options": {
                "submit_for_settlement": True,
            },
        }

        try:
            result = await run_in_threadpool(self.gateway.transaction.sale, params)
        except Exception as e:
            logger.exception(f"[gateway] Sale submission raised: {e}")
            raise PaymentGatewayError("Sale submission failed", serialize_exception(e), e)

        if not result.is_success:
            payload = serialize_error_result(result)
            logger.error(f"[gateway] Sale declined: {payload.get('message')}")
            raise PaymentGatewayError("Sale declined", payload)

        receipt = serialize_receipt(result)
        logger.info(f"Sale settled: transaction {receipt['transaction']['id']} for {amount}")
        return receipt
