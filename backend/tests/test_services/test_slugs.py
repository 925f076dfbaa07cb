"""
Unit tests for slug derivation
"""
from storefront.services.slugs import slugify


def test_spaces_become_hyphens():
    assert slugify("Test Name") == "test-name"


def test_accents_are_folded():
    assert slugify("Café Crème") == "cafe-creme"


def test_punctuation_runs_collapse():
    assert slugify("  Phone -- 128GB / Black!  ") == "phone-128gb-black"


def test_same_name_same_slug():
    assert slugify("Laptop Pro 14") == slugify("Laptop Pro 14")


def test_name_without_ascii_gets_digest_slug():
    slug = slugify("日本茶")

    assert slug.startswith("product-")
    assert len(slug) == len("product-") + 10
    assert slug == slugify("日本茶")
    assert slug != slugify("緑茶")


def test_punctuation_only_name_is_never_empty():
    assert slugify("!!!") != ""
    assert slugify("   ").startswith("product-")
