"""Validation of operator-supplied shop documents."""

from .shop import SCHEMA_PATH, validate_shop_document

__all__ = ["SCHEMA_PATH", "validate_shop_document"]
