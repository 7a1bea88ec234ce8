"""Package locator module for QTI packages.

This module handles:
- Finding the manifest and assessment files in an export folder
- Unwrapping a single wrapper subfolder
- Reading and decoding a whole package
"""

from .handler import read_package
from .locator import locate_package, read_document

__all__ = [
    "locate_package",
    "read_document",
    "read_package",
]
