"""Shared utilities for QTI package reading."""

from .config import Settings, get_settings
from .exceptions import (
    QtiPackageError,
    LocateError,
    PackageNotFoundError,
    ManifestNotFoundError,
    AssessmentNotFoundError,
    DecodeError,
    MalformedDocumentError,
    TypeMismatchError,
    EncodeError,
    PackageReadError,
)
from .models import (
    TextType,
    LocalizedText,
    Identifier,
    ManifestMetadata,
    MaterialText,
    MaterialImage,
    Material,
    Choice,
    ResponseChoice,
    Flow,
    Presentation,
    EqualsCondition,
    NotCondition,
    Condition,
    ResponseAction,
    FeedbackLink,
    ResponseRule,
    ResponseProcessing,
    MetadataField,
    ItemFeedback,
    SolutionHint,
    Item,
    AssessmentDocument,
    LocatedPackage,
    ParsedPackage,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "QtiPackageError",
    "LocateError",
    "PackageNotFoundError",
    "ManifestNotFoundError",
    "AssessmentNotFoundError",
    "DecodeError",
    "MalformedDocumentError",
    "TypeMismatchError",
    "EncodeError",
    "PackageReadError",
    # Models
    "TextType",
    "LocalizedText",
    "Identifier",
    "ManifestMetadata",
    "MaterialText",
    "MaterialImage",
    "Material",
    "Choice",
    "ResponseChoice",
    "Flow",
    "Presentation",
    "EqualsCondition",
    "NotCondition",
    "Condition",
    "ResponseAction",
    "FeedbackLink",
    "ResponseRule",
    "ResponseProcessing",
    "MetadataField",
    "ItemFeedback",
    "SolutionHint",
    "Item",
    "AssessmentDocument",
    "LocatedPackage",
    "ParsedPackage",
]
