"""XML decoding for QPL manifests and QTI assessment documents.

This module provides schema-agnostic decoding with:
- Tag-to-field mapping, one small builder per element
- Zero values for missing optional elements
- Strict integer fields (no silent defaults for bad text)
- Detailed error context for debugging

Decoding is a pure function of the input bytes: no I/O, no shared state.
"""

import re
from typing import Any, TypeVar

from lxml import etree
from pydantic import BaseModel, ValidationError

from ..shared.exceptions import MalformedDocumentError, TypeMismatchError
from ..shared.models import AssessmentDocument, ManifestMetadata, TextType

ModelT = TypeVar("ModelT", bound=BaseModel)

_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")

_XML_DECLARATION_RE = re.compile(r"^[\ufeff\s]*<\?xml\s[^>]*\?>")

_RICH_TEXT_TYPES = {"text/xhtml", "text/html"}


def decode_manifest(content: bytes | str) -> ManifestMetadata:
    """Decode a QPL manifest into ManifestMetadata.

    Args:
        content: Raw XML bytes, or already decoded text

    Returns:
        Decoded manifest; absent localized fields are empty strings

    Raises:
        MalformedDocumentError: If the input is not well-formed XML
        TypeMismatchError: If a field cannot be converted

    Example:
        >>> with open("1234__qpl_56.xml", "rb") as f:
        ...     manifest = decode_manifest(f.read())
        >>> print(manifest.title.text)
        'Chemistry basics'
    """
    root = _parse_xml(content)
    general = _find(_find(root, "MetaData"), "General")
    identifier = _find(general, "Identifier")

    data = {
        "content_type": _attr(root, "Type"),
        "structure": _attr(general, "Structure"),
        "identifier": {
            "catalog": _attr(identifier, "Catalog"),
            "entry": _attr(identifier, "Entry"),
        },
        "title": _parse_localized(_find(general, "Title")),
        "language": _parse_localized(_find(general, "Language")),
        "description": _parse_localized(_find(general, "Description")),
        "keyword": _parse_localized(_find(general, "Keyword")),
    }
    return _to_model(ManifestMetadata, data)


def decode_assessment(content: bytes | str) -> AssessmentDocument:
    """Decode a QTI document into an AssessmentDocument.

    Items are returned in document order.

    Args:
        content: Raw XML bytes, or already decoded text

    Returns:
        Decoded assessment document

    Raises:
        MalformedDocumentError: If the input is not well-formed XML
        TypeMismatchError: If an integer field holds non-integer text
    """
    root = _parse_xml(content)
    items = [
        _parse_item(item_elem, f"item[{index}]")
        for index, item_elem in enumerate(root.findall("item"))
    ]
    return _to_model(AssessmentDocument, {"items": items})


# =============================================================================
# Low-level helpers
# =============================================================================


def _parse_xml(content: bytes | str) -> etree._Element:
    """Parse raw XML, mapping every syntax failure to MalformedDocumentError.

    A str is already decoded text, so its encoding declaration is dropped
    rather than applied a second time.
    """
    if isinstance(content, str):
        content = _XML_DECLARATION_RE.sub("", content, count=1)

    if not content.strip():
        raise MalformedDocumentError("Invalid XML format: document is empty")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(content, parser)
    except etree.XMLSyntaxError as e:
        raise MalformedDocumentError(
            f"Invalid XML format: {e}",
            {"line": e.lineno, "column": e.offset},
        )


def _find(parent: etree._Element | None, tag: str) -> etree._Element | None:
    """Find the first child element, tolerating a missing parent."""
    if parent is None:
        return None
    return parent.find(tag)


def _findall(parent: etree._Element | None, tag: str) -> list[etree._Element]:
    """Find all child elements, tolerating a missing parent."""
    if parent is None:
        return []
    return parent.findall(tag)


def _attr(elem: etree._Element | None, name: str) -> str:
    """Get an attribute value or empty string."""
    if elem is None:
        return ""
    return elem.get(name, "")


def _chardata(elem: etree._Element | None) -> str:
    """Get the element's own character data, unstripped.

    Text of nested elements is not included; text between them is.
    """
    if elem is None:
        return ""
    parts = [elem.text or ""]
    parts.extend(child.tail or "" for child in elem)
    return "".join(parts)


def _child_text(parent: etree._Element | None, tag: str) -> str:
    """Get character data of the first child with the given tag."""
    return _chardata(_find(parent, tag))


def _attr_or_child(elem: etree._Element | None, name: str) -> str:
    """Get a value written either as attribute or as child element."""
    if elem is None:
        return ""
    value = elem.get(name)
    if value is not None:
        return value
    return _child_text(elem, name)


def _parse_int(value: str | None, field: str) -> int:
    """Parse integer text.

    Missing or blank text is zero; anything else must be an integer.

    Raises:
        TypeMismatchError: If the text is not an integer
    """
    if value is None:
        return 0
    stripped = value.strip()
    if stripped == "":
        return 0
    if not _INTEGER_RE.match(stripped):
        raise TypeMismatchError(field, value)
    return int(stripped)


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean string value."""
    if value is None:
        return default
    return value.strip().lower() in ("true", "yes", "1")


def _parse_text_type(value: str) -> TextType:
    """Map a texttype attribute onto TextType."""
    if value.strip().lower() in _RICH_TEXT_TYPES:
        return TextType.RICH_TEXT
    return TextType.PLAIN


def _to_model(model_cls: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Convert a decoded dictionary into its Pydantic model."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise TypeMismatchError(field, str(error.get("input", "")))


# =============================================================================
# Element builders
# =============================================================================


def _parse_localized(elem: etree._Element | None) -> dict[str, Any]:
    """Parse a Language-tagged text element."""
    return {
        "language": _attr(elem, "Language"),
        "text": _chardata(elem),
    }


def _parse_material(elem: etree._Element | None) -> dict[str, Any]:
    """Parse material. Text and image are read independently."""
    mattext = _find(elem, "mattext")
    matimage = _find(elem, "matimage")
    return {
        "text": {
            "text_type": _parse_text_type(_attr(mattext, "texttype")),
            "value": _chardata(mattext),
        },
        "image": {
            "label": _attr_or_child(matimage, "label"),
            "uri": _attr_or_child(matimage, "uri"),
        },
    }


def _parse_response_lid(elem: etree._Element | None, where: str) -> dict[str, Any]:
    """Parse response_lid and its render_choice."""
    render_choice = _find(elem, "render_choice")
    shuffle = render_choice.get("shuffle") if render_choice is not None else None

    choices = []
    for index, label in enumerate(_findall(render_choice, "response_label")):
        choices.append({
            "ident": _parse_int(
                label.get("ident"),
                f"{where}.response_label[{index}].ident",
            ),
            "material": _parse_material(label.find("material")),
        })

    return {
        "ident": _attr(elem, "ident"),
        "cardinality": _attr(elem, "rcardinality"),
        "shuffle": _parse_bool(shuffle),
        "choices": choices,
    }


def _parse_flow(elem: etree._Element | None, where: str) -> dict[str, Any]:
    """Parse flow: material plus response_lid."""
    return {
        "material": _parse_material(_find(elem, "material")),
        "response": _parse_response_lid(
            _find(elem, "response_lid"),
            f"{where}.response_lid",
        ),
    }


def _parse_varequal(elem: etree._Element | None, where: str) -> dict[str, Any]:
    """Parse varequal into an equality condition."""
    return {
        "kind": "equals",
        "respondent_ref": _attr(elem, "respident"),
        "expected": _parse_int(_chardata(elem), where),
    }


def _parse_condition(elem: etree._Element | None, where: str) -> dict[str, Any]:
    """Parse conditionvar.

    A ``not`` child takes precedence over a bare ``varequal``.
    """
    negated = _find(elem, "not")
    if negated is not None:
        return {
            "kind": "not",
            "operand": _parse_varequal(negated.find("varequal"), f"{where}.not.varequal"),
        }
    return _parse_varequal(_find(elem, "varequal"), f"{where}.varequal")


def _parse_respcondition(elem: etree._Element, where: str) -> dict[str, Any]:
    """Parse a single respcondition."""
    setvar = elem.find("setvar")
    displayfeedback = elem.find("displayfeedback")
    return {
        "continue_evaluating": _parse_bool(elem.get("continue")),
        "condition": _parse_condition(elem.find("conditionvar"), f"{where}.conditionvar"),
        "action": {
            "verb": _attr(setvar, "action"),
            "value": _chardata(setvar),
        },
        "feedback_link": {
            "type": _attr_or_child(displayfeedback, "feedbacktype"),
            "ref_id": _attr_or_child(displayfeedback, "linkrefid"),
        },
    }


def _parse_resprocessing(elem: etree._Element | None, where: str) -> dict[str, Any]:
    """Parse resprocessing, keeping rule order."""
    return {
        "outcome_declaration": _child_text(_find(elem, "outcomes"), "decvar"),
        "rules": [
            _parse_respcondition(rule, f"{where}.respcondition[{index}]")
            for index, rule in enumerate(_findall(elem, "respcondition"))
        ],
    }


def _parse_itemfeedback(elem: etree._Element) -> dict[str, Any]:
    """Parse itemfeedback. Its body has material only."""
    return {
        "ident": _attr_or_child(elem, "ident"),
        "view": _attr_or_child(elem, "view"),
        "body": {
            "material": _parse_material(_find(elem.find("flow_mat"), "material")),
        },
    }


def _parse_item(elem: etree._Element, where: str) -> dict[str, Any]:
    """Parse an item element.

    Extracts attributes, metadata, presentation, scoring and feedback.
    """
    presentation = elem.find("presentation")
    solutionhint = elem.find("solutionhint")

    return {
        "ident": elem.get("ident", ""),
        "title": elem.get("title", ""),
        "max_attempts": _parse_int(elem.get("maxattempts"), f"{where}.maxattempts"),
        "comment": _child_text(elem, "qticomment"),
        "duration": _child_text(elem, "duration"),
        "metadata_fields": [
            {
                "label": _child_text(field, "fieldlabel"),
                "entry": _child_text(field, "fieldentry"),
            }
            for field in elem.findall("itemmetadata/qtimetadata/qtimetadatafield")
        ],
        "presentation": {
            "label": _attr(presentation, "label"),
            "body": _parse_flow(_find(presentation, "flow"), f"{where}.presentation.flow"),
        },
        "response_processing": _parse_resprocessing(
            elem.find("resprocessing"),
            f"{where}.resprocessing",
        ),
        "feedbacks": [
            _parse_itemfeedback(feedback)
            for feedback in elem.findall("itemfeedback")
        ],
        "solution_hint": {
            "index": _parse_int(
                _child_text(solutionhint, "index"),
                f"{where}.solutionhint.index",
            ),
            "points": _parse_int(
                _child_text(solutionhint, "points"),
                f"{where}.solutionhint.points",
            ),
        },
    }
