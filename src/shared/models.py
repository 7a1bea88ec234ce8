"""Pydantic models for decoded QPL manifests and QTI assessment documents.

This module defines the core data structures produced by the decoder:
- Manifest models (identifier, localized metadata)
- Item models (presentation, response choices, materials)
- Scoring models (response processing rules and their conditions)
- Package models (located paths and the combined parsed result)

Every field defaults to its zero form so that an absent optional element
decodes to an empty container instead of an error. All models are frozen.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TextType(str, Enum):
    """Content type of a mattext element."""

    PLAIN = "text/plain"
    RICH_TEXT = "text/xhtml"


# =============================================================================
# Manifest (QPL)
# =============================================================================


class LocalizedText(BaseModel):
    """A single-language string, e.g. a title tagged 'en'."""

    model_config = ConfigDict(frozen=True)

    language: str = Field(
        default="",
        description="Language tag from the Language attribute",
    )
    text: str = Field(
        default="",
        description="Character content",
    )


class Identifier(BaseModel):
    """Composite external key of a content package."""

    model_config = ConfigDict(frozen=True)

    catalog: str = Field(default="", description="Catalog namespace (e.g., 'ILIAS')")
    entry: str = Field(default="", description="Entry within the catalog")


class ManifestMetadata(BaseModel):
    """Package-level metadata read from the QPL manifest.

    Only the first occurrence of each localized element is kept.
    """

    model_config = ConfigDict(frozen=True)

    content_type: str = Field(
        default="",
        description="Package type discriminator (root Type attribute)",
    )
    structure: str = Field(
        default="",
        description="General/@Structure (e.g., 'Hierarchical')",
    )
    identifier: Identifier = Field(default_factory=Identifier)
    title: LocalizedText = Field(default_factory=LocalizedText)
    language: LocalizedText = Field(default_factory=LocalizedText)
    description: LocalizedText = Field(default_factory=LocalizedText)
    keyword: LocalizedText = Field(default_factory=LocalizedText)


# =============================================================================
# Materials and presentation
# =============================================================================


class MaterialText(BaseModel):
    """Text slot of a material."""

    model_config = ConfigDict(frozen=True)

    text_type: TextType = Field(default=TextType.PLAIN)
    value: str = Field(default="")


class MaterialImage(BaseModel):
    """Image slot of a material."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(default="", description="Image label, often the file name")
    uri: str = Field(default="", description="Image location inside the package")


class Material(BaseModel):
    """Displayable content. Text and image are independent slots."""

    model_config = ConfigDict(frozen=True)

    text: MaterialText = Field(default_factory=MaterialText)
    image: MaterialImage = Field(default_factory=MaterialImage)

    @property
    def has_text(self) -> bool:
        """Check if the text slot carries content."""
        return self.text.value != ""

    @property
    def has_image(self) -> bool:
        """Check if the image slot points anywhere."""
        return self.image.uri != "" or self.image.label != ""


class Choice(BaseModel):
    """One selectable answer (a response_label)."""

    model_config = ConfigDict(frozen=True)

    ident: int = Field(
        default=0,
        description="Token referenced by varequal conditions",
    )
    material: Material = Field(default_factory=Material)


class ResponseChoice(BaseModel):
    """The response_lid construct with its rendered choices."""

    model_config = ConfigDict(frozen=True)

    ident: str = Field(default="", description="Response identifier (e.g., 'MCSR')")
    cardinality: str = Field(
        default="",
        description="rcardinality pass-through (e.g., 'Single', 'Multiple')",
    )
    shuffle: bool = Field(default=False)
    choices: list[Choice] = Field(default_factory=list)

    def choice(self, ident: int) -> Choice | None:
        """Return the first choice with the given ident, if any."""
        for candidate in self.choices:
            if candidate.ident == ident:
                return candidate
        return None


class Flow(BaseModel):
    """Question body: material plus the response construct."""

    model_config = ConfigDict(frozen=True)

    material: Material = Field(default_factory=Material)
    response: ResponseChoice = Field(default_factory=ResponseChoice)


class Presentation(BaseModel):
    """The presentation block of an item."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(default="")
    body: Flow = Field(default_factory=Flow)


# =============================================================================
# Response processing
# =============================================================================


class EqualsCondition(BaseModel):
    """Choice ``expected`` is selected for response ``respondent_ref``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["equals"] = "equals"
    respondent_ref: str = Field(default="", description="varequal/@respident")
    expected: int = Field(default=0, description="Choice ident compared against")

    def is_satisfied_by(self, responses: Mapping[str, Iterable[int]]) -> bool:
        """Evaluate against a mapping of response ident to selected choice idents."""
        return self.expected in set(responses.get(self.respondent_ref, ()))


class NotCondition(BaseModel):
    """Negation of a single equality comparison."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["not"] = "not"
    operand: EqualsCondition = Field(default_factory=EqualsCondition)

    def is_satisfied_by(self, responses: Mapping[str, Iterable[int]]) -> bool:
        """Evaluate against a mapping of response ident to selected choice idents."""
        return not self.operand.is_satisfied_by(responses)


Condition = Annotated[
    Union[EqualsCondition, NotCondition],
    Field(discriminator="kind"),
]


class ResponseAction(BaseModel):
    """A setvar: what to do with the outcome variable."""

    model_config = ConfigDict(frozen=True)

    verb: str = Field(default="", description="setvar/@action (e.g., 'Add')")
    value: str = Field(default="", description="setvar text (e.g., '1')")


class FeedbackLink(BaseModel):
    """A displayfeedback reference into the item's feedbacks."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(default="", description="feedbacktype (e.g., 'Response')")
    ref_id: str = Field(default="", description="linkrefid, matches ItemFeedback.ident")


class ResponseRule(BaseModel):
    """One respcondition."""

    model_config = ConfigDict(frozen=True)

    continue_evaluating: bool = Field(default=False)
    condition: Condition = Field(default_factory=EqualsCondition)
    action: ResponseAction = Field(default_factory=ResponseAction)
    feedback_link: FeedbackLink = Field(default_factory=FeedbackLink)


class ResponseProcessing(BaseModel):
    """Scoring logic of an item, rules kept in document order."""

    model_config = ConfigDict(frozen=True)

    outcome_declaration: str = Field(default="", description="outcomes/decvar text")
    rules: list[ResponseRule] = Field(default_factory=list)


# =============================================================================
# Items and documents
# =============================================================================


class MetadataField(BaseModel):
    """An opaque qtimetadatafield label/entry pair."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(default="")
    entry: str = Field(default="")


class ItemFeedback(BaseModel):
    """Feedback shown when a response rule links to it."""

    model_config = ConfigDict(frozen=True)

    ident: str = Field(default="")
    view: str = Field(default="")
    body: Flow = Field(default_factory=Flow)


class SolutionHint(BaseModel):
    """Hint index and the points it costs."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(default=0)
    points: int = Field(default=0)


class Item(BaseModel):
    """One gradable question.

    ``ident`` is expected to be unique within a document, but the decoder
    does not enforce it.
    """

    model_config = ConfigDict(frozen=True)

    ident: str = Field(default="")
    title: str = Field(default="")
    max_attempts: int = Field(default=0)
    comment: str = Field(default="", description="qticomment text")
    duration: str = Field(
        default="",
        description="Opaque duration token (e.g., 'P0Y0M0DT0H1M0S')",
    )
    metadata_fields: list[MetadataField] = Field(default_factory=list)
    presentation: Presentation = Field(default_factory=Presentation)
    response_processing: ResponseProcessing = Field(default_factory=ResponseProcessing)
    feedbacks: list[ItemFeedback] = Field(default_factory=list)
    solution_hint: SolutionHint = Field(default_factory=SolutionHint)

    def metadata_values(self, label: str) -> list[str]:
        """Return every metadata entry for a label, in document order."""
        return [f.entry for f in self.metadata_fields if f.label == label]

    def feedback_for(self, ref_id: str) -> ItemFeedback | None:
        """Return the feedback a response rule's link points at."""
        for feedback in self.feedbacks:
            if feedback.ident == ref_id:
                return feedback
        return None


class AssessmentDocument(BaseModel):
    """The QTI document: items in presentation order."""

    model_config = ConfigDict(frozen=True)

    items: list[Item] = Field(default_factory=list)

    @property
    def idents(self) -> list[str]:
        """Item idents in document order."""
        return [item.ident for item in self.items]

    def get_item(self, ident: str) -> Item | None:
        """Return the first item with the given ident, if any."""
        for item in self.items:
            if item.ident == ident:
                return item
        return None


# =============================================================================
# Package
# =============================================================================


class LocatedPackage(BaseModel):
    """Absolute paths of the two documents inside a package folder."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(description="Folder the documents were found in")
    manifest_path: Path
    assessment_path: Path


class ParsedPackage(BaseModel):
    """A fully decoded package, handed to the caller."""

    model_config = ConfigDict(frozen=True)

    manifest: ManifestMetadata
    assessment: AssessmentDocument
