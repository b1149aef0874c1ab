"""Tests for SPL document extraction."""

import pytest

from dailymed_mcp.errors import ExtractionError
from dailymed_mcp.mappings import CrossReferenceIndex
from dailymed_mcp.spl.extract import (
    document_from_item,
    extract_document,
    extract_sections,
    parse_spl_xml,
)


@pytest.fixture
def document(sample_spl_xml, index):
    return extract_document(parse_spl_xml(sample_spl_xml), "abc-123", index)


def test_document_header(document):
    assert document.set_id == "abc-123"
    assert document.title == "TESTDRUG (testdrugium) tablets, for oral use"
    assert document.effective_time == "20240115"
    assert document.version_number == "7"


def test_document_cross_references(document):
    assert [m.rxtty for m in document.rxnorm_mappings] == ["SCD", "SBD"]
    assert [m.pharma_set_id for m in document.pharmacologic_class_mappings] == ["class-1"]


def test_empty_sections_are_dropped(document):
    titles = [section.title for section in document.sections]

    assert "EMPTY SECTION" not in titles
    assert len(document.sections) == 5


def test_paragraph_section(document):
    section = document.sections[0]

    assert section.id == "sec-indications"
    assert section.title == "1 INDICATIONS AND USAGE"
    assert section.content == (
        "TESTDRUG is indicated for the treatment of test conditions.\n\n"
        "Limitations of use: not for acute episodes."
    )


def test_list_and_table_sections(document):
    assert document.sections[1].content == "1. Take one tablet daily.\n2. Swallow whole with water."
    assert document.sections[2].content == (
        "Reaction | Incidence\n"
        "--------------------\n"
        "Headache | 12%\n"
        "Nausea | 8%"
    )


def test_subsections_render_as_headings(document):
    section = document.sections[3]

    assert section.title == "5 WARNINGS AND PRECAUTIONS"
    assert section.content == "## 5.1 Liver Injury\n\nMonitor liver enzymes."


def test_untitled_section_defaults(document):
    section = document.sections[4]

    assert section.title == "Untitled Section"
    assert section.id is None
    assert section.content == "Store at room temperature."


def test_to_dict_wire_shape(document):
    data = document.to_dict()

    assert data["setId"] == "abc-123"
    assert data["versionNumber"] == "7"
    assert data["sections"][4] == {"title": "Untitled Section", "content": "Store at room temperature."}
    assert data["sections"][0]["id"] == "sec-indications"
    assert data["rxNormMappings"][1] == {
        "rxcui": "211874",
        "rxstring": "Bayer Low Dose 81 MG Oral Tablet",
        "rxtty": "SBD",
    }
    assert data["pharmacologicClassMappings"] == [{"pharmaSetId": "class-1", "pharmaVersion": 2}]
    assert "spl_medguide" not in data


def test_unmapped_set_id_has_no_mapping_keys(sample_spl_xml):
    document = extract_document(parse_spl_xml(sample_spl_xml), "zzz-999", CrossReferenceIndex())

    assert document.rxnorm_mappings is None
    assert document.pharmacologic_class_mappings is None
    assert "rxNormMappings" not in document.to_dict()


def test_defaults_for_missing_header_fields():
    root = parse_spl_xml("<document xmlns='urn:hl7-org:v3'/>")

    document = extract_document(root, "abc-123", CrossReferenceIndex())

    assert document.title == "No title available"
    assert document.effective_time == "Unknown"
    assert document.version_number == "1"
    assert document.sections == []


def test_missing_document_root_raises():
    root = parse_spl_xml("<notADocument/>")

    with pytest.raises(ExtractionError, match="Invalid SPL document structure"):
        extract_document(root, "abc-123", CrossReferenceIndex())


def test_malformed_xml_raises():
    with pytest.raises(ExtractionError, match="Failed to parse XML"):
        parse_spl_xml("<document><title>unclosed</document>")


def test_nested_subsection_heading_levels():
    root = parse_spl_xml(
        "<document><component><structuredBody><component><section>"
        "<title>Top</title>"
        "<component><section><title>Middle</title>"
        "<text>m</text>"
        "<component><section><title>Deep</title><text>d</text></section></component>"
        "</section></component>"
        "</section></component></structuredBody></component></document>"
    )

    sections = extract_sections(root)

    assert sections[0].content == "## Middle\n\nm\n\n### Deep\n\nd"


def test_document_from_item(index):
    item = {
        "setid": "abc-123",
        "title": "ASPIRIN tablet",
        "published_date": "Jan 15, 2024",
        "spl_version": 3,
        "spl_medguide": "N",
    }

    document = document_from_item(item, index)

    assert document.version_number == "3"
    assert document.effective_time == "Jan 15, 2024"
    assert document.sections == []
    assert document.to_dict()["spl_medguide"] == "N"
    assert len(document.rxnorm_mappings) == 2


def test_document_from_item_defaults_version():
    document = document_from_item({"setid": "x", "title": "X"}, CrossReferenceIndex())

    assert document.version_number == "1"
    assert document.rxnorm_mappings is None


def test_section_with_paragraphs_and_table_keeps_paragraphs():
    root = parse_spl_xml(
        "<document><component><structuredBody><component><section>"
        "<title>Mixed</title>"
        "<text><paragraph>P</paragraph>"
        "<table><tbody><tr><td>a</td><td>b</td></tr></tbody></table></text>"
        "</section></component></structuredBody></component></document>"
    )

    document = extract_document(root, "abc-123", CrossReferenceIndex())

    assert document.sections[0].content == "P"
