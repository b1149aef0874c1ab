"""
Extract normalized SPLDocuments from DailyMed SPL XML and listing items.

An SPL file is an HL7 v3 <document>. Its label text lives in
document/component/structuredBody/component/section, each section
carrying a <title>, a narrative <text> block and optionally nested
subsections in section/component/section.

Usage:
    from dailymed_mcp.spl.extract import extract_document, parse_spl_xml

    root = parse_spl_xml(response.content)
    document = extract_document(root, set_id, index)
    for section in document.sections:
        print(section.title)
"""

from lxml import etree

from dailymed_mcp.errors import ExtractionError
from dailymed_mcp.logging import get_logger
from dailymed_mcp.mappings.index import CrossReferenceIndex
from dailymed_mcp.mappings.models import (
    FilteredPharmacologicClassMapping,
    FilteredRxNormMapping,
)
from dailymed_mcp.spl.models import SPLDocument, SPLSection
from dailymed_mcp.spl.text import children_named, first_child, flatten, local_name

logger = get_logger(__name__, component="extract")

DEFAULT_DOCUMENT_TITLE = "No title available"
DEFAULT_SECTION_TITLE = "Untitled Section"
DEFAULT_EFFECTIVE_TIME = "Unknown"
DEFAULT_VERSION_NUMBER = "1"

MAX_HEADING_LEVEL = 6

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)


def parse_spl_xml(xml: bytes | str) -> etree._Element:
    """
    Parse raw SPL XML into an element tree.

    Raises:
        ExtractionError: If the XML is malformed
    """
    if isinstance(xml, str):
        xml = xml.encode("utf-8")
    try:
        return etree.fromstring(xml, parser=_PARSER)
    except etree.XMLSyntaxError as e:
        raise ExtractionError(f"Failed to parse XML: {e}") from e


def _attribute(element: etree._Element | None, name: str) -> str | None:
    if element is None:
        return None
    return element.get(name) or None


def cross_references(
    set_id: str, index: CrossReferenceIndex
) -> tuple[list[FilteredRxNormMapping] | None, list[FilteredPharmacologicClassMapping] | None]:
    """Projected index entries for a set id, None where there are none."""
    rxnorm = [FilteredRxNormMapping.from_mapping(m) for m in index.get_rxnorm_mappings(set_id)]
    pharma = [
        FilteredPharmacologicClassMapping.from_mapping(m)
        for m in index.get_pharmacologic_class_mappings(set_id)
    ]
    return rxnorm or None, pharma or None


def _subsections(section: etree._Element, depth: int) -> list[str]:
    """Nested subsections rendered as markdown blocks."""
    blocks = []
    for component in children_named(section, "component"):
        subsection = first_child(component, "section")
        if subsection is None:
            continue

        body = section_body(subsection, depth + 1)
        if not body:
            continue

        title = flatten(first_child(subsection, "title"))
        if title:
            heading = "#" * min(depth + 1, MAX_HEADING_LEVEL)
            blocks.append(f"{heading} {title}\n\n{body}")
        else:
            blocks.append(body)
    return blocks


def section_body(section: etree._Element, depth: int = 1) -> str:
    """
    Text of a section followed by its subsections.

    The section's own <text> comes first; each nested subsection follows
    as a "## Title" block, one heading level deeper per nesting level.
    """
    parts = [flatten(first_child(section, "text"))]
    parts.extend(_subsections(section, depth))
    return "\n\n".join(part for part in parts if part).strip()


def extract_sections(document: etree._Element) -> list[SPLSection]:
    """
    Top-level sections of the structured body.

    Sections that flatten to nothing are left out. A document without a
    structured body has no sections.
    """
    body = first_child(first_child(document, "component"), "structuredBody")

    sections = []
    for component in children_named(body, "component"):
        section = first_child(component, "section")
        if section is None:
            continue

        content = section_body(section)
        if not content:
            continue

        sections.append(SPLSection(
            id=_attribute(first_child(section, "id"), "root"),
            title=flatten(first_child(section, "title")) or DEFAULT_SECTION_TITLE,
            content=content,
        ))

    return sections


def extract_document(
    root: etree._Element | None,
    set_id: str,
    index: CrossReferenceIndex,
) -> SPLDocument:
    """
    Build an SPLDocument from a parsed SPL XML tree.

    Args:
        root: Root element returned by parse_spl_xml
        set_id: SET ID the document was requested under
        index: Cross-reference index used to attach mappings

    Returns:
        SPLDocument with sections and cross-references

    Raises:
        ExtractionError: If the root <document> element is absent
    """
    if root is None or local_name(root) != "document":
        raise ExtractionError("Invalid SPL document structure")

    rxnorm, pharma = cross_references(set_id, index)

    document = SPLDocument(
        set_id=set_id,
        title=flatten(first_child(root, "title")) or DEFAULT_DOCUMENT_TITLE,
        effective_time=_attribute(first_child(root, "effectiveTime"), "value")
        or DEFAULT_EFFECTIVE_TIME,
        version_number=_attribute(first_child(root, "versionNumber"), "value")
        or DEFAULT_VERSION_NUMBER,
        sections=extract_sections(root),
        rxnorm_mappings=rxnorm,
        pharmacologic_class_mappings=pharma,
    )

    logger.debug("extracted_document", set_id=set_id, sections=len(document.sections))

    return document


def document_from_item(item: dict, index: CrossReferenceIndex) -> SPLDocument:
    """Summary SPLDocument (no sections) from one /spls.json listing item."""
    set_id = item.get("setid")
    rxnorm, pharma = cross_references(set_id, index)

    spl_version = item.get("spl_version")

    return SPLDocument(
        set_id=set_id,
        title=item.get("title"),
        effective_time=item.get("published_date"),
        version_number=str(spl_version) if spl_version is not None else DEFAULT_VERSION_NUMBER,
        spl_medguide=item.get("spl_medguide"),
        spl_patient_package_insert=item.get("spl_patient_package_insert"),
        spl_product_data_elements=item.get("spl_product_data_elements"),
        rxnorm_mappings=rxnorm,
        pharmacologic_class_mappings=pharma,
    )
