"""
Slug derivation for catalog entries

A product slug is a pure function of its name; callers never set it.
"""
import hashlib
import re
import unicodedata

FALLBACK_PREFIX = "product"


def slugify(value: str) -> str:
    """
    Lower-case ASCII slug: accents are folded, any run of other
    characters becomes a single hyphen. Names with nothing left after
    folding (e.g. CJK or punctuation only) get a short digest of the
    name instead, so the slug is never empty.

    >>> slugify("Test Name")
    'test-name'
    >>> slugify("  Café Crème 250g ")
    'cafe-creme-250g'
    """
    text = str(value or "")
    normalized = " ".join(text.split()).lower()
    ascii_name = (
        unicodedata.normalize("NFKD", normalized)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name).strip("-")
    if not slug:
        digest = hashlib.sha1(text.encode("utf-8")).hexdigest()[:10]
        slug = f"{FALLBACK_PREFIX}-{digest}"
    return slug
