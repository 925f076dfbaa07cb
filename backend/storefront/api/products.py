"""
Product API Endpoints
Catalog mutations, single-product reads and Braintree checkout

Every failure is answered with HTTP 500 and one of the fixed bodies
below; existing clients match on these strings verbatim.
"""
import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from storefront.connectors.braintree_connector import BraintreeConnector
from storefront.core.auth import TokenUser, get_current_user, require_admin
from storefront.core.config import settings
from storefront.core.errors import (
    CheckoutError,
    OrderPersistenceError,
    PaymentGatewayError,
    ProductPersistenceError,
    ProductValidationError,
)
from storefront.domain.product import PhotoUpload
from storefront.services.checkout_service import CHECKOUT_ERROR, CheckoutService
from storefront.services.product_service import (
    CREATE_SUCCESS,
    DELETE_SUCCESS,
    GET_SUCCESS,
    UPDATE_SUCCESS,
    ProductService,
)

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def get_product_service() -> ProductService:
    return ProductService()


@lru_cache()
def get_braintree_connector() -> BraintreeConnector:
    return BraintreeConnector(settings.get_gateway_config())


def get_checkout_service() -> CheckoutService:
    return CheckoutService(connector_factory=get_braintree_connector)


async def read_photo_upload(upload: UploadFile) -> PhotoUpload:
    """Oversized uploads are described by their declared size and never read"""
    if upload.size is not None and upload.size > settings.PHOTO_MAX_BYTES:
        logger.info(f"Photo upload {upload.filename!r} exceeds limit: {upload.size} bytes")
        return PhotoUpload(size=upload.size, content_type=upload.content_type, filename=upload.filename)

    content = await upload.read()
    return PhotoUpload(
        size=len(content),
        content_type=upload.content_type,
        filename=upload.filename,
        content=content,
    )


async def read_product_payload(request: Request) -> Tuple[Optional[Dict[str, Any]], Optional[PhotoUpload]]:
    """
    Split a create/update request into plain fields and the photo upload

    Multipart and urlencoded forms are the normal path; a JSON object body
    is accepted as fields without a photo. Anything else yields no fields.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        fields: Dict[str, Any] = {}
        photo = None

        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == "photo":
                    photo = await read_photo_upload(value)
                continue
            fields[key] = value

        return fields, photo

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return None, None
        return (body if isinstance(body, dict) else None), None

    return None, None


def validation_failure(error: ProductValidationError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": error.message})


def operation_failure(error: ProductPersistenceError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": error.message, "error": error.to_dict()}
    )


@router.post("/create-product")
async def create_product(
    request: Request,
    user: TokenUser = Depends(require_admin),
    service: ProductService = Depends(get_product_service)
):
    """
    Create a product from a multipart form

    Fields: name, description, price, category, quantity, shipping
    File: photo (optional, at most 1,000,000 bytes)
    """
    fields, photo = await read_product_payload(request)

    try:
        product = await service.create(fields, photo)
    except ProductValidationError as e:
        return validation_failure(e)
    except ProductPersistenceError as e:
        return operation_failure(e)

    return JSONResponse(
        status_code=201,
        content={"success": True, "message": CREATE_SUCCESS, "products": product.to_dict()}
    )


@router.put("/update-product/{pid}")
async def update_product(
    pid: str,
    request: Request,
    user: TokenUser = Depends(require_admin),
    service: ProductService = Depends(get_product_service)
):
    """Replace a product's fields (and photo, if one is uploaded)"""
    fields, photo = await read_product_payload(request)

    try:
        product = await service.update(pid, fields, photo)
    except ProductValidationError as e:
        return validation_failure(e)
    except ProductPersistenceError as e:
        return operation_failure(e)

    return JSONResponse(
        status_code=201,
        content={"success": True, "message": UPDATE_SUCCESS, "products": product.to_dict()}
    )


@router.delete("/delete-product/{pid}")
async def delete_product(
    pid: str,
    user: TokenUser = Depends(require_admin),
    service: ProductService = Depends(get_product_service)
):
    try:
        await service.remove(pid)
    except ProductPersistenceError as e:
        return operation_failure(e)

    return JSONResponse(status_code=200, content={"success": True, "message": DELETE_SUCCESS})


@router.get("/get-product/{slug}")
async def get_product(slug: str, service: ProductService = Depends(get_product_service)):
    try:
        product = await service.get_by_slug(slug)
    except ProductPersistenceError as e:
        return operation_failure(e)

    return JSONResponse(
        status_code=200,
        content={"success": True, "message": GET_SUCCESS, "product": product.to_dict()}
    )


@router.get("/product-photo/{pid}")
async def get_product_photo(pid: str, service: ProductService = Depends(get_product_service)):
    """Serve the stored photo bytes with their declared content type"""
    try:
        photo = await service.get_photo(pid)
    except ProductPersistenceError as e:
        return operation_failure(e)

    return Response(content=photo.data, media_type=photo.content_type or "application/octet-stream")


@router.get("/braintree/token")
async def braintree_token(service: CheckoutService = Depends(get_checkout_service)):
    """Issue a Braintree client token for the drop-in UI"""
    try:
        token = await service.issue_client_token()
    except PaymentGatewayError as e:
        return JSONResponse(status_code=500, content=e.to_dict())

    return JSONResponse(status_code=200, content={"clientToken": token})


@router.post("/braintree/payment")
async def braintree_payment(
    request: Request,
    user: TokenUser = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service)
):
    """
    Charge the cart and store the order

    Body: {"nonce": "...", "cart": [{"price": 10, ...}, ...]}
    """
    try:
        payload = await request.json()
    except ValueError as e:
        logger.error(f"[validation] Checkout body is not JSON: {e}")
        payload = None

    try:
        await service.checkout(payload, buyer=user.id)
    except PaymentGatewayError as e:
        return JSONResponse(status_code=500, content=e.to_dict())
    except CheckoutError as e:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": CHECKOUT_ERROR, "error": e.to_dict()}
        )
    except OrderPersistenceError as e:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": e.message,
                "error": e.to_dict(),
                "payment": e.receipt
            }
        )

    return JSONResponse(status_code=200, content={"ok": True})
