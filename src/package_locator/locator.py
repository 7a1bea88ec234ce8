"""Locate the manifest and assessment documents inside a package folder.

Export tools write the two documents either directly into the folder or
into a single wrapper subfolder. The wrapper is unwrapped once, never
recursively.

Layout examples:
    pool/1234__qpl_56.xml, pool/1234__qti_56.xml
    pool/1234__qpl_56/1234__qpl_56.xml, pool/1234__qpl_56/1234__qti_56.xml
"""

import os
import stat
from pathlib import Path

from aws_lambda_powertools import Logger

from ..shared.config import Settings, get_settings
from ..shared.exceptions import (
    AssessmentNotFoundError,
    ManifestNotFoundError,
    PackageNotFoundError,
    PackageReadError,
)
from ..shared.models import LocatedPackage

logger = Logger(service="package-locator")


def locate_package(
    root_dir: str | os.PathLike[str],
    settings: Settings | None = None,
) -> LocatedPackage:
    """Find the manifest and assessment files of a package.

    Args:
        root_dir: Package folder (or the folder wrapping it)
        settings: File name heuristics (default from settings)

    Returns:
        Absolute paths of both documents

    Raises:
        PackageNotFoundError: If root_dir is missing or not a directory
        ManifestNotFoundError: If no file matches the manifest pattern
        AssessmentNotFoundError: If no file matches the assessment pattern
        PackageReadError: If root_dir cannot be inspected or a folder cannot be listed

    Example:
        >>> located = locate_package("exports/pool_56")
        >>> located.manifest_path.name
        '1234__qpl_56.xml'
    """
    if settings is None:
        settings = get_settings()

    folder = Path(root_dir).absolute()
    _check_root(folder)

    entries = _list_entries(folder)

    # Single wrapper folder: descend exactly once
    if len(entries) == 1 and entries[0].is_dir(follow_symlinks=False):
        folder = folder / entries[0].name
        logger.debug("Unwrapping single subfolder", extra={"folder": str(folder)})
        entries = _list_entries(folder)

    manifest = _find_document(entries, settings.manifest_marker, settings.document_suffix)
    if manifest is None:
        raise ManifestNotFoundError(str(folder), settings.manifest_pattern)

    assessment = _find_document(entries, settings.assessment_marker, settings.document_suffix)
    if assessment is None:
        raise AssessmentNotFoundError(str(folder), settings.assessment_pattern)

    logger.info(
        "Located package documents",
        extra={
            "folder": str(folder),
            "manifest": manifest.name,
            "assessment": assessment.name,
        },
    )

    return LocatedPackage(
        root=folder,
        manifest_path=folder / manifest.name,
        assessment_path=folder / assessment.name,
    )


def read_document(path: str | os.PathLike[str]) -> bytes:
    """Read a whole document.

    Args:
        path: File to read

    Returns:
        Raw file content

    Raises:
        PackageReadError: If the file cannot be opened or read
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise PackageReadError(str(path), e)


def _check_root(folder: Path) -> None:
    """Require folder to be an existing directory, following symlinks."""
    try:
        mode = folder.stat().st_mode
    except (FileNotFoundError, NotADirectoryError):
        raise PackageNotFoundError(str(folder))
    except OSError as e:
        raise PackageReadError(str(folder), e)

    if not stat.S_ISDIR(mode):
        raise PackageNotFoundError(str(folder))


def _list_entries(folder: Path) -> list[os.DirEntry[str]]:
    """List immediate entries of a folder, ordered by name."""
    try:
        with os.scandir(folder) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise PackageReadError(str(folder), e)


def _find_document(
    entries: list[os.DirEntry[str]],
    marker: str,
    suffix: str,
) -> os.DirEntry[str] | None:
    """Return the first non-directory entry whose name contains marker and ends with suffix."""
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            continue
        if marker in entry.name and entry.name.endswith(suffix):
            return entry
    return None
