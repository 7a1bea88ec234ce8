"""Document decoder module for QTI packages.

This module handles:
- QPL manifest decoding
- QTI assessment decoding
- Encoding models back to XML
"""

from .xml_decoder import decode_assessment, decode_manifest
from .xml_encoder import encode_assessment, encode_manifest

__all__ = [
    "decode_manifest",
    "decode_assessment",
    "encode_manifest",
    "encode_assessment",
]
