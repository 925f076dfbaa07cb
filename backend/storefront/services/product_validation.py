"""
Product payload validation

Field checks run in a fixed priority order and stop at the first missing
field, so callers always get exactly one message. The photo is checked
separately, after the fields.
"""
from typing import Any, Mapping, Optional, Tuple

from storefront.core.config import settings
from storefront.domain.product import PhotoUpload

# (field, message) in priority order
REQUIRED_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("name", "Name is Required"),
    ("description", "Description is Required"),
    ("price", "Price is Required"),
    ("category", "Category is Required"),
    ("quantity", "Quantity is Required"),
)

PHOTO_ERROR = "photo is Required and should be less then 1mb"


def is_missing(value: Any) -> bool:
    """Absent means not sent, None, or an empty string. 0 and False are present."""
    return value is None or value == ""


class FieldValidator:
    """Required-field presence check for a product payload"""

    def __init__(self, required_fields: Tuple[Tuple[str, str], ...] = REQUIRED_FIELDS):
        self.required_fields = required_fields

    def validate(self, fields: Mapping[str, Any]) -> Optional[str]:
        """
        Return the message for the first missing required field, or None

        Args:
            fields: Submitted product fields

        Returns:
            Error message or None when every required field is present
        """
        for field, message in self.required_fields:
            if is_missing(fields.get(field)):
                return message
        return None


class PhotoConstraintChecker:
    """
    Size ceiling for an uploaded product photo

    A missing photo passes unless `required` is set, in which case it gets
    the same message as an oversized one.
    """

    def __init__(self, max_bytes: Optional[int] = None, required: Optional[bool] = None):
        self.max_bytes = settings.PHOTO_MAX_BYTES if max_bytes is None else max_bytes
        self.required = settings.PHOTO_REQUIRED if required is None else required

    def check(self, photo: Optional[PhotoUpload]) -> Optional[str]:
        if photo is None or photo.is_empty:
            return PHOTO_ERROR if self.required else None
        if photo.size > self.max_bytes:
            return PHOTO_ERROR
        return None
