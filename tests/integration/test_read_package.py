"""End-to-end tests reading package folders from disk."""

from pathlib import Path
from typing import Callable

import pytest

from src.package_locator.handler import read_package
from src.shared.exceptions import (
    ManifestNotFoundError,
    MalformedDocumentError,
    PackageNotFoundError,
    PackageReadError,
    TypeMismatchError,
)
from src.shared.models import NotCondition, ParsedPackage


class TestReadPackage:
    """Tests for locate + read + decode."""

    def test_read_flat_package(self, make_package: Callable[..., Path]):
        """Test reading a package without a wrapper folder."""
        package = read_package(make_package())

        assert isinstance(package, ParsedPackage)
        assert package.manifest.identifier.entry == "il_0_qpl_4521"
        assert package.assessment.idents == ["il_0_qst_101", "il_0_qst_102"]

    def test_read_wrapped_package(self, make_package: Callable[..., Path]):
        """Test reading a package exported inside a named subfolder."""
        package = read_package(make_package(wrapper="1234__qpl_56"))

        assert package.manifest.title.text == "Chemistry basics"
        item = package.assessment.get_item("il_0_qst_101")
        assert isinstance(item.response_processing.rules[1].condition, NotCondition)

    def test_scoring_walkthrough(self, make_package: Callable[..., Path]):
        """Test evaluating the decoded rules against a response."""
        item = read_package(make_package()).assessment.items[0]
        selections = {"MCSR": [1]}

        fired = [
            rule
            for rule in item.response_processing.rules
            if rule.condition.is_satisfied_by(selections)
        ]

        assert len(fired) == 1
        assert fired[0].action.value == "0"
        feedback = item.feedback_for(fired[0].feedback_link.ref_id)
        assert feedback.body.material.text.value == "Neon was the one."


class TestReadPackageErrors:
    """Tests for whole-operation failures."""

    def test_malformed_assessment(
        self,
        make_package: Callable[..., Path],
        malformed_xml: bytes,
    ):
        """Test that a malformed document aborts with its path attached."""
        root = make_package(assessment=malformed_xml)

        with pytest.raises(MalformedDocumentError) as exc_info:
            read_package(root)

        assert exc_info.value.details["path"] == str(root.absolute() / "1234__qti_56.xml")

    def test_malformed_manifest(
        self,
        make_package: Callable[..., Path],
        malformed_xml: bytes,
    ):
        """Test that a malformed manifest aborts the read."""
        root = make_package(manifest=malformed_xml)

        with pytest.raises(MalformedDocumentError) as exc_info:
            read_package(root)

        assert exc_info.value.details["path"].endswith("1234__qpl_56.xml")

    def test_type_mismatch(self, make_package: Callable[..., Path]):
        """Test that a bad integer fails the whole package."""
        root = make_package(
            assessment=b'<questestinterop><item ident="q" maxattempts="abc"/></questestinterop>',
        )

        with pytest.raises(TypeMismatchError) as exc_info:
            read_package(root)

        assert exc_info.value.details["field"] == "item[0].maxattempts"
        assert "path" in exc_info.value.details

    def test_missing_root(self, tmp_path: Path):
        """Test that a missing folder is reported as not found."""
        with pytest.raises(PackageNotFoundError):
            read_package(tmp_path / "nope")

    def test_empty_root(self, tmp_path: Path):
        """Test that an empty folder has no manifest."""
        with pytest.raises(ManifestNotFoundError):
            read_package(tmp_path)

    def test_uninspectable_root(self, tmp_path: Path):
        """Test that a root the OS rejects is reported as an IO error."""
        with pytest.raises(PackageReadError):
            read_package(tmp_path / ("x" * 300))
