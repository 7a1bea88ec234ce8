"""XML encoding for QPL manifests and QTI assessment documents.

The inverse of xml_decoder: models are written back with exactly the
element and attribute names the decoder reads, so that decoding an
encoded value reproduces it.
"""

from lxml import etree

from ..shared.exceptions import EncodeError
from ..shared.models import (
    AssessmentDocument,
    Flow,
    Item,
    LocalizedText,
    ManifestMetadata,
    Material,
    NotCondition,
    ResponseChoice,
    ResponseRule,
)


def encode_manifest(manifest: ManifestMetadata) -> bytes:
    """Encode ManifestMetadata as a QPL manifest.

    Args:
        manifest: Manifest to encode

    Returns:
        UTF-8 XML document with declaration

    Raises:
        EncodeError: If a string holds characters XML cannot carry

    Example:
        >>> xml = encode_manifest(ManifestMetadata(content_type="qpl"))
        >>> decode_manifest(xml).content_type
        'qpl'
    """
    try:
        root = _build_manifest(manifest)
    except ValueError as e:
        raise EncodeError("ContentObject", e)
    return _serialize(root)


def encode_assessment(document: AssessmentDocument) -> bytes:
    """Encode an AssessmentDocument as a QTI document.

    Item feedback bodies are written as flow_mat/material, so a feedback
    body's response construct is not encoded.

    Args:
        document: Assessment document to encode

    Returns:
        UTF-8 XML document with declaration

    Raises:
        EncodeError: If a string holds characters XML cannot carry
    """
    root = etree.Element("questestinterop")
    try:
        for item in document.items:
            _add_item(root, item)
    except ValueError as e:
        raise EncodeError("questestinterop", e)
    return _serialize(root)


def _build_manifest(manifest: ManifestMetadata) -> etree._Element:
    root = etree.Element("ContentObject", attrib={"Type": manifest.content_type})
    metadata = etree.SubElement(root, "MetaData")
    general = etree.SubElement(
        metadata, "General", attrib={"Structure": manifest.structure}
    )
    etree.SubElement(
        general,
        "Identifier",
        attrib={
            "Catalog": manifest.identifier.catalog,
            "Entry": manifest.identifier.entry,
        },
    )
    _add_localized(general, "Title", manifest.title)
    _add_localized(general, "Language", manifest.language)
    _add_localized(general, "Description", manifest.description)
    _add_localized(general, "Keyword", manifest.keyword)
    return root


def _serialize(root: etree._Element) -> bytes:
    """Serialize with declaration, pretty printed."""
    return etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=True,
    )


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _text_element(parent: etree._Element, tag: str, text: str) -> etree._Element:
    """Append a child element carrying only text."""
    elem = etree.SubElement(parent, tag)
    elem.text = text
    return elem


def _add_localized(parent: etree._Element, tag: str, value: LocalizedText) -> None:
    elem = etree.SubElement(parent, tag, attrib={"Language": value.language})
    elem.text = value.text


def _add_material(parent: etree._Element, material: Material) -> None:
    """Append a material; the image slot is written only when populated."""
    elem = etree.SubElement(parent, "material")
    mattext = etree.SubElement(
        elem, "mattext", attrib={"texttype": material.text.text_type.value}
    )
    mattext.text = material.text.value
    if material.has_image:
        etree.SubElement(
            elem,
            "matimage",
            attrib={"label": material.image.label, "uri": material.image.uri},
        )


def _add_response_lid(parent: etree._Element, response: ResponseChoice) -> None:
    elem = etree.SubElement(
        parent,
        "response_lid",
        attrib={"ident": response.ident, "rcardinality": response.cardinality},
    )
    render_choice = etree.SubElement(
        elem, "render_choice", attrib={"shuffle": _yes_no(response.shuffle)}
    )
    for choice in response.choices:
        label = etree.SubElement(
            render_choice, "response_label", attrib={"ident": str(choice.ident)}
        )
        _add_material(label, choice.material)


def _add_flow(parent: etree._Element, flow: Flow) -> None:
    elem = etree.SubElement(parent, "flow")
    _add_material(elem, flow.material)
    _add_response_lid(elem, flow.response)


def _add_rule(parent: etree._Element, rule: ResponseRule) -> None:
    """Append a respcondition, nesting varequal under not when negated."""
    elem = etree.SubElement(
        parent, "respcondition", attrib={"continue": _yes_no(rule.continue_evaluating)}
    )
    conditionvar = etree.SubElement(elem, "conditionvar")

    condition = rule.condition
    if isinstance(condition, NotCondition):
        conditionvar = etree.SubElement(conditionvar, "not")
        condition = condition.operand
    varequal = etree.SubElement(
        conditionvar, "varequal", attrib={"respident": condition.respondent_ref}
    )
    varequal.text = str(condition.expected)

    setvar = etree.SubElement(elem, "setvar", attrib={"action": rule.action.verb})
    setvar.text = rule.action.value

    link = rule.feedback_link
    if link.type or link.ref_id:
        etree.SubElement(
            elem,
            "displayfeedback",
            attrib={"feedbacktype": link.type, "linkrefid": link.ref_id},
        )


def _add_item(parent: etree._Element, item: Item) -> None:
    """Append an item with every block, empty blocks included."""
    elem = etree.SubElement(
        parent,
        "item",
        attrib={
            "ident": item.ident,
            "title": item.title,
            "maxattempts": str(item.max_attempts),
        },
    )
    _text_element(elem, "qticomment", item.comment)
    _text_element(elem, "duration", item.duration)

    qtimetadata = etree.SubElement(etree.SubElement(elem, "itemmetadata"), "qtimetadata")
    for field in item.metadata_fields:
        field_elem = etree.SubElement(qtimetadata, "qtimetadatafield")
        _text_element(field_elem, "fieldlabel", field.label)
        _text_element(field_elem, "fieldentry", field.entry)

    presentation = etree.SubElement(
        elem, "presentation", attrib={"label": item.presentation.label}
    )
    _add_flow(presentation, item.presentation.body)

    resprocessing = etree.SubElement(elem, "resprocessing")
    outcomes = etree.SubElement(resprocessing, "outcomes")
    _text_element(outcomes, "decvar", item.response_processing.outcome_declaration)
    for rule in item.response_processing.rules:
        _add_rule(resprocessing, rule)

    for feedback in item.feedbacks:
        feedback_elem = etree.SubElement(
            elem,
            "itemfeedback",
            attrib={"ident": feedback.ident, "view": feedback.view},
        )
        _add_material(etree.SubElement(feedback_elem, "flow_mat"), feedback.body.material)

    solutionhint = etree.SubElement(elem, "solutionhint")
    _text_element(solutionhint, "index", str(item.solution_hint.index))
    _text_element(solutionhint, "points", str(item.solution_hint.points))
