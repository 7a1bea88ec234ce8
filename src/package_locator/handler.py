"""Entry point for reading a whole QTI package folder.

Flow:
1. Locate the manifest and assessment files
2. Read both files
3. Decode both documents
4. Combine into a ParsedPackage

Any failure aborts the whole read; there is no partial result.
"""

import os
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from aws_lambda_powertools import Logger

from ..document_decoder import decode_assessment, decode_manifest
from ..shared.config import Settings
from ..shared.exceptions import DecodeError, QtiPackageError
from ..shared.models import ParsedPackage
from .locator import locate_package, read_document

logger = Logger(service="package-locator")

DocumentT = TypeVar("DocumentT")


def read_package(
    root_dir: str | os.PathLike[str],
    settings: Settings | None = None,
) -> ParsedPackage:
    """Locate, read and decode a package folder.

    Args:
        root_dir: Package folder (or the folder wrapping it)
        settings: File name heuristics (default from settings)

    Returns:
        Decoded manifest and assessment document

    Raises:
        LocateError: If the folder or one of its documents is missing
        DecodeError: If a document is malformed; details carry its path
        PackageReadError: If a file or folder cannot be read
    """
    try:
        located = locate_package(root_dir, settings)
        manifest = _decode_file(located.manifest_path, decode_manifest)
        assessment = _decode_file(located.assessment_path, decode_assessment)

    except QtiPackageError as e:
        logger.error(
            "Failed to read package",
            extra={"error": e.to_dict(), "root_dir": str(root_dir)},
        )
        raise

    logger.info(
        "Read package",
        extra={
            "root_dir": str(root_dir),
            "identifier": manifest.identifier.entry,
            "item_count": len(assessment.items),
        },
    )

    return ParsedPackage(manifest=manifest, assessment=assessment)


def _decode_file(path: Path, decode: Callable[[bytes], DocumentT]) -> DocumentT:
    """Read and decode one document, tagging decode errors with its path."""
    content = read_document(path)
    try:
        return decode(content)
    except DecodeError as e:
        e.details["path"] = str(path)
        raise
