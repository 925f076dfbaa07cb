"""
Product Domain Model

Represents a catalog entry and the uploaded photo that travels with a
create/update request.
"""
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProductPhoto(BaseModel):
    """Binary photo stored alongside the product row"""
    data: bytes = Field(..., description="Raw image bytes")
    content_type: Optional[str] = Field(None, description="Declared MIME type of the upload")

    @property
    def size(self) -> int:
        return len(self.data)


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Fields:
        id: Opaque product identity
        name: Product name
        slug: URL-safe name, always derived from `name`
        description: Product description
        price: Unit price (non-negative)
        category: Category reference id
        quantity: Units in stock (non-negative)
        shipping: Whether the product ships
        photo: Optional stored photo
        created_at: When product was created
        updated_at: When product was last updated
    """

    id: UUID = Field(..., description="Product ID")
    name: str = Field(..., min_length=1, description="Product name")
    slug: str = Field(..., description="URL-safe slug derived from name")
    description: str = Field(..., min_length=1, description="Product description")
    price: Decimal = Field(..., ge=0, description="Unit price")
    category: str = Field(..., min_length=1, description="Category reference id")
    quantity: int = Field(..., ge=0, description="Units in stock")
    shipping: bool = Field(False, description="Whether the product ships")
    photo: Optional[ProductPhoto] = Field(None, description="Stored product photo")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """
        Convert to a JSON-friendly dictionary

        Photo bytes are replaced by their metadata; the image itself is
        served by the product-photo endpoint.
        """
        data = self.model_dump(exclude={"photo"})
        data["id"] = str(self.id)
        data["price"] = float(self.price)
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        data["photo"] = (
            {"content_type": self.photo.content_type, "size": self.photo.size}
            if self.photo else None
        )
        return data


class ProductWrite(BaseModel):
    """Validated, coerced field set handed to the repository on create/update"""
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    shipping: bool = False


class PhotoUpload(BaseModel):
    """
    Uploaded-file descriptor for a product photo

    Either `content` (already in memory, e.g. from a multipart form) or
    `path` (a file spooled to disk) carries the bytes.
    """
    size: int = Field(..., ge=0, description="Declared size in bytes")
    content_type: Optional[str] = None
    filename: Optional[str] = None
    content: Optional[bytes] = None
    path: Optional[Path] = None

    @property
    def is_empty(self) -> bool:
        """A form field that was submitted without choosing a file"""
        return not self.filename and self.size == 0

    def read(self) -> bytes:
        if self.content is not None:
            return self.content
        if self.path is not None:
            return self.path.read_bytes()
        raise ValueError("photo upload carries neither content nor path")
