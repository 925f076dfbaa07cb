"""
Product Mutation Service
Validates and persists catalog writes (create, update, delete)

Validation always runs before anything touches the database:
required fields first, then the photo. A validation failure raises
ProductValidationError carrying exactly one message; every later failure
(bad payload, unknown or malformed id, database error) raises
ProductPersistenceError with the operation's fixed message.
"""
import logging
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional
from uuid import UUID

from starlette.concurrency import run_in_threadpool

from storefront.core.errors import (
    ProductNotFound,
    ProductPersistenceError,
    ProductValidationError,
)
from storefront.domain.product import PhotoUpload, Product, ProductPhoto, ProductWrite
from storefront.repositories.product_repository import ProductRepository
from storefront.services.product_validation import (
    FieldValidator,
    PhotoConstraintChecker,
    is_missing,
)
from storefront.services.slugs import slugify

logger = logging.getLogger(__name__)

# Response messages consumers match on verbatim (spelling included)
CREATE_SUCCESS = "Product Created Successfully"
CREATE_ERROR = "Error in crearing product"
UPDATE_SUCCESS = "Product Updated Successfully"
UPDATE_ERROR = "Error in Updte product"
DELETE_SUCCESS = "Product Deleted successfully"
DELETE_ERROR = "Error while deleting product"
GET_SUCCESS = "Single Product Fetched"
GET_ERROR = "Error while getting single product"
PHOTO_FETCH_ERROR = "Erorr while getting photo"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_shipping(value: Any) -> bool:
    """Form fields arrive as strings; JSON callers may send real booleans"""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid shipping flag: {value!r}")


def parse_product_id(product_id: Any) -> UUID:
    if is_missing(product_id):
        raise ProductNotFound("Product id is required")
    if isinstance(product_id, UUID):
        return product_id
    return UUID(str(product_id))


class ProductService:
    """
    Service for catalog mutations

    Handles:
    - Ordered required-field validation
    - Photo size constraint
    - Slug derivation (never taken from the request)
    - Photo blob storage
    - Create / update / delete through ProductRepository
    """

    def __init__(
        self,
        repository: Optional[ProductRepository] = None,
        slugifier: Callable[[str], str] = slugify,
        field_validator: Optional[FieldValidator] = None,
        photo_checker: Optional[PhotoConstraintChecker] = None,
    ):
        self.repository = repository or ProductRepository()
        self.slugifier = slugifier
        self.field_validator = field_validator or FieldValidator()
        self.photo_checker = photo_checker or PhotoConstraintChecker()

    def validate(self, fields: Mapping[str, Any], photo: Optional[PhotoUpload]) -> None:
        """Raise ProductValidationError for the first broken rule"""
        message = self.field_validator.validate(fields)
        if message is None:
            message = self.photo_checker.check(photo)
        if message is not None:
            raise ProductValidationError(message)

    def build_write(self, fields: Mapping[str, Any]) -> ProductWrite:
        """Coerce raw form values; any `slug` in the payload is ignored"""
        name = str(fields["name"])
        return ProductWrite(
            name=name,
            slug=self.slugifier(name),
            description=str(fields["description"]),
            price=Decimal(str(fields["price"])),
            category=str(fields["category"]),
            quantity=int(fields["quantity"]),
            shipping=parse_shipping(fields.get("shipping")),
        )

    @staticmethod
    def read_photo(photo: Optional[PhotoUpload]) -> Optional[ProductPhoto]:
        if photo is None or photo.is_empty:
            return None
        return ProductPhoto(data=photo.read(), content_type=photo.content_type)

    async def create(
        self,
        fields: Optional[Mapping[str, Any]],
        photo: Optional[PhotoUpload] = None
    ) -> Product:
        """
        Create a catalog entry

        Args:
            fields: Submitted product fields (None when the request carried no form)
            photo: Optional uploaded photo

        Returns:
            The stored Product

        Raises:
            ProductValidationError: missing field or photo constraint
            ProductPersistenceError: anything else, with CREATE_ERROR
        """
        if fields is None:
            raise ProductPersistenceError(CREATE_ERROR, ValueError("No product fields submitted"))

        self.validate(fields, photo)

        try:
            write = self.build_write(fields)
            stored_photo = self.read_photo(photo)
            product = await run_in_threadpool(self.repository.create, write, stored_photo)
        except Exception as e:
            logger.error(f"[persistence] Error creating product {fields.get('name')!r}: {e}")
            raise ProductPersistenceError(CREATE_ERROR, e)

        logger.info(f"Product created: {product.id} ({product.slug})")
        return product

    async def update(
        self,
        product_id: Any,
        fields: Optional[Mapping[str, Any]],
        photo: Optional[PhotoUpload] = None
    ) -> Product:
        """
        Update a catalog entry in place

        Fields are validated before the id is looked at, so a payload
        missing `name` reports the name error even without an id.

        Raises:
            ProductValidationError: missing field or photo constraint
            ProductPersistenceError: empty/malformed/unknown id or database error, with UPDATE_ERROR
        """
        if fields is None:
            raise ProductPersistenceError(UPDATE_ERROR, ValueError("No product fields submitted"))

        self.validate(fields, photo)

        try:
            pid = parse_product_id(product_id)
            write = self.build_write(fields)
            stored_photo = self.read_photo(photo)
            product = await run_in_threadpool(self.repository.update_by_id, pid, write, stored_photo)
            if product is None:
                raise ProductNotFound(f"Product {pid} not found")
        except Exception as e:
            logger.error(f"[persistence] Error updating product {product_id!r}: {e}")
            raise ProductPersistenceError(UPDATE_ERROR, e)

        logger.info(f"Product updated: {product.id} ({product.slug})")
        return product

    async def remove(self, product_id: Any) -> None:
        """
        Delete a catalog entry

        An unknown id is a failure too, not a silent success.

        Raises:
            ProductPersistenceError: with DELETE_ERROR
        """
        try:
            pid = parse_product_id(product_id)
            deleted = await run_in_threadpool(self.repository.delete_by_id, pid)
            if not deleted:
                raise ProductNotFound(f"Product {pid} not found")
        except Exception as e:
            logger.error(f"[persistence] Error deleting product {product_id!r}: {e}")
            raise ProductPersistenceError(DELETE_ERROR, e)

        logger.info(f"Product deleted: {pid}")

    async def get_by_slug(self, slug: str) -> Product:
        try:
            product = await run_in_threadpool(self.repository.find_by_slug, slug)
            if product is None:
                raise ProductNotFound(f"Product {slug!r} not found")
        except Exception as e:
            logger.error(f"[persistence] Error fetching product {slug!r}: {e}")
            raise ProductPersistenceError(GET_ERROR, e)
        return product

    async def get_photo(self, product_id: Any) -> ProductPhoto:
        try:
            pid = parse_product_id(product_id)
            product = await run_in_threadpool(self.repository.find_by_id, pid)
            if product is None or product.photo is None:
                raise ProductNotFound(f"No photo for product {pid}")
        except Exception as e:
            logger.error(f"[persistence] Error fetching photo for {product_id!r}: {e}")
            raise ProductPersistenceError(PHOTO_FETCH_ERROR, e)
        return product.photo
