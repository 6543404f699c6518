"""Public interface for the ERP adapter."""

from __future__ import annotations

from .client import ATTRIBUTE_NOTE_NAMES, PRODUCT_NOTE_IDS, ErpClient
from .translator import normalize_currency, round_quantity

__all__ = [
    "ATTRIBUTE_NOTE_NAMES",
    "PRODUCT_NOTE_IDS",
    "ErpClient",
    "normalize_currency",
    "round_quantity",
]
