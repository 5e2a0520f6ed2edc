"""Slug normalization for tenant and directory path segments."""
import re

# Word characters are ASCII only, so the output alphabet is exactly [a-z0-9-].
# Whitespace stays Unicode-aware: a non-breaking or ideographic space becomes
# a separator, not a deleted character.
_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_SEPARATOR_RUNS = re.compile(r"[\s_-]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def slugify(text: str) -> str:
    """Map free text to a URL-safe path segment.

    Lowercases, trims, drops anything that is not an ASCII word character,
    whitespace or hyphen, collapses whitespace/underscore/hyphen runs into one
    hyphen and strips hyphens from both ends. Pure and idempotent; may return
    ``""``.

    Examples:
        >>> slugify("My Company!")
        'my-company'
        >>> slugify("  Product_Images  ")
        'product-images'
        >>> slugify("My\\u00a0Company")
        'my-company'
    """
    slug = text.lower().strip()
    slug = _DISALLOWED.sub("", slug)
    slug = _SEPARATOR_RUNS.sub("-", slug)
    return _EDGE_HYPHENS.sub("", slug)
