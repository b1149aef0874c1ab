"""Tests for the DailyMed client and the SPL endpoints."""

import asyncio

import httpx
import pytest

from dailymed_mcp.api import resources, spls
from dailymed_mcp.errors import UpstreamError, ValidationError


def spl_item(set_id: str, title: str = "Label") -> dict:
    return {
        "setid": set_id,
        "title": title,
        "published_date": "Jan 15, 2024",
        "spl_version": 2,
    }


def run(coro):
    return asyncio.run(coro)


# ============================================================================
# Client
# ============================================================================

def test_http_error_becomes_upstream_error(make_client):
    client = make_client(lambda request: httpx.Response(500))

    with pytest.raises(UpstreamError, match="DailyMed API Error: 500 - Internal Server Error"):
        run(client.get_json("/ndcs.json"))


def test_network_error_becomes_upstream_error(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(UpstreamError, match="No response received from server"):
        run(client.get_json("/ndcs.json"))


def test_missing_data_list_is_unexpected_structure(make_client):
    client = make_client(lambda request: httpx.Response(200, json={"metadata": {}}))

    with pytest.raises(UpstreamError, match="Unexpected response structure for NDCs"):
        run(resources.list_ndcs(client))


def test_fetch_page_caps_page_size_and_drops_empty_filters(make_client):
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "data": [{"drug_name": "ASPIRIN", "active_ingredient": "ASPIRIN"}],
                "metadata": {"total_elements": "150"},
            },
        )

    client = make_client(handler)
    page = run(resources.search_drug_names(client, drug_name="aspirin", manufacturer=""))

    assert seen == {"drug_name": "aspirin", "page": "1", "pagesize": "100"}
    assert page.total_results == 150
    assert page.total_pages == 2
    assert page.data[0].drug_name == "ASPIRIN"


def test_resource_page_size_limit(make_client):
    client = make_client(lambda request: httpx.Response(200, json={"data": []}))

    with pytest.raises(ValidationError, match="between 1 and 100"):
        run(resources.list_ndcs(client, page_size=150))


def test_require_any():
    resources.require_any(rxstring=None, rxcui="197361")

    with pytest.raises(ValidationError, match="rxstring, rxcui"):
        resources.require_any(rxstring=None, rxcui="")


# ============================================================================
# Search
# ============================================================================

def test_search_requires_query_or_filter(make_client, index):
    client = make_client(lambda request: httpx.Response(200, json={"data": []}))

    with pytest.raises(ValidationError, match="at least one advanced parameter"):
        run(spls.search_spls(client, index))


def test_search_rejects_unknown_filter(make_client, index):
    client = make_client(lambda request: httpx.Response(200, json={"data": []}))

    with pytest.raises(ValidationError, match="colour"):
        run(spls.search_spls(client, index, colour="red"))


def test_search_validates_pagination_before_requesting(index):
    with pytest.raises(ValidationError, match="Page number must be 1 or greater"):
        run(spls.search_spls(None, index, query="aspirin", page=0))
    with pytest.raises(ValidationError, match="Page size must be between 1 and 200"):
        run(spls.search_spls(None, index, query="aspirin", page_size=201))


def test_simple_search_fans_out_and_tolerates_failures(make_client, index):
    spl_queries = []

    def handler(request):
        if request.url.path.endswith("/drugnames.json"):
            return httpx.Response(200, json={
                "data": [
                    {"drug_name": "Aspirin", "active_ingredient": "ASPIRIN"},
                    {"drug_name": "Bayer", "active_ingredient": "ASPIRIN"},
                ],
                "metadata": {"total_elements": 2},
            })

        drug_name = request.url.params["drug_name"]
        spl_queries.append(drug_name)
        if drug_name == "ASPIRIN":
            return httpx.Response(500)
        if drug_name == "Aspirin":
            return httpx.Response(200, json={"data": [spl_item("abc-123"), spl_item("def-456")]})
        return httpx.Response(200, json={"data": [spl_item("abc-123"), spl_item("ghi-789")]})

    client = make_client(handler)
    page = run(spls.search_spls(client, index, query="aspirin", page=1, page_size=2))

    assert spl_queries == ["Aspirin", "ASPIRIN", "Bayer"]
    assert [document.set_id for document in page.data] == ["abc-123", "def-456"]
    assert page.total_results == 3
    assert page.total_pages == 2
    assert page.has_next_page is True
    assert len(page.data[0].rxnorm_mappings) == 2


def test_simple_search_with_no_drug_names(make_client, index):
    client = make_client(lambda request: httpx.Response(200, json={"data": []}))

    page = run(spls.search_spls(client, index, query="zzzz", page=3))

    assert page.data == []
    assert page.page == 1
    assert page.total_results == 0


def test_simple_search_drug_name_lookup_failure(make_client, index):
    client = make_client(lambda request: httpx.Response(503))

    with pytest.raises(UpstreamError, match="Failed to search SPLs: DailyMed API Error: 503"):
        run(spls.search_spls(client, index, query="aspirin"))


def test_advanced_search_uses_server_pagination(make_client, index):
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={
            "data": [spl_item("abc-123", "ASPIRIN tablet")],
            "metadata": {"total_elements": 120},
        })

    client = make_client(handler)
    page = run(spls.search_spls(
        client, index, page=2, page_size=50, manufacturer="Bayer", boxed_warning=True
    ))

    assert seen == {
        "manufacturer": "Bayer",
        "boxed_warning": "true",
        "page": "2",
        "pagesize": "50",
    }
    assert page.page == 2
    assert page.total_pages == 3
    assert page.data[0].title == "ASPIRIN tablet"


def test_search_by_pharmacologic_class_defaults_coding_system(make_client, index):
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={"data": [spl_item("def-456")]})

    client = make_client(handler)
    page = run(spls.search_spls_by_pharmacologic_class(client, index, "N0000175605"))

    assert seen["drug_class_code"] == "N0000175605"
    assert seen["drug_class_coding_system"] == "2.16.840.1.113883.6.345"
    assert page.data[0].pharmacologic_class_mappings[0].pharma_set_id == "class-1"


# ============================================================================
# Single label
# ============================================================================

def test_get_spl(make_client, index, sample_spl_xml):
    def handler(request):
        assert request.url.path.endswith("/spls/abc-123.xml")
        return httpx.Response(200, content=sample_spl_xml)

    client = make_client(handler)
    document = run(spls.get_spl(client, index, "abc-123"))

    assert document.title == "TESTDRUG (testdrugium) tablets, for oral use"
    assert len(document.sections) == 5
    assert [m.rxtty for m in document.rxnorm_mappings] == ["SCD", "SBD"]


def test_get_spl_upstream_failure(make_client, index):
    client = make_client(lambda request: httpx.Response(404))

    with pytest.raises(UpstreamError, match="Failed to fetch SPL: DailyMed API Error: 404 - Not Found"):
        run(spls.get_spl(client, index, "abc-123"))


def test_get_spl_requires_set_id(index):
    with pytest.raises(ValidationError, match="Valid SET ID is required"):
        run(spls.get_spl(None, index, "   "))


def test_get_spl_history(make_client):
    client = make_client(lambda request: httpx.Response(200, json={
        "metadata": {"title": "ASPIRIN tablet"},
        "data": [{"spl_version": 3, "published_date": "Jan 15, 2024"}],
    }))

    history = run(spls.get_spl_history(client, "abc-123"))

    assert history[0].to_dict() == {
        "setId": "abc-123",
        "splVersion": 3,
        "effectiveTime": "Jan 15, 2024",
        "title": "ASPIRIN tablet",
    }


def test_get_spl_ndcs_nested_list(make_client):
    client = make_client(lambda request: httpx.Response(200, json={
        "data": {"ndcs": [{"ndc": "0280-2000-10"}]},
    }))

    ndcs = run(spls.get_spl_ndcs(client, "abc-123"))

    assert [ndc.ndc for ndc in ndcs] == ["0280-2000-10"]


def test_get_spl_media_unexpected_structure(make_client):
    client = make_client(lambda request: httpx.Response(200, json={"data": "nope"}))

    with pytest.raises(UpstreamError, match="Unexpected response structure for SPL media"):
        run(spls.get_spl_media(client, "abc-123"))


def test_download_links(make_client):
    client = make_client(lambda request: httpx.Response(200))

    assert spls.download_links(client, "abc-123") == {
        "zipDownload": f"{client.base_url}/spls/abc-123.zip",
        "pdfDownload": f"{client.base_url}/spls/abc-123.pdf",
    }


def test_simple_search_skips_items_without_set_id(make_client, index):
    def handler(request):
        if request.url.path.endswith("/drugnames.json"):
            return httpx.Response(200, json={"data": [{"drug_name": "Aspirin"}]})
        return httpx.Response(200, json={"data": [
            {"title": "no set id"},
            spl_item("abc-123"),
            {"setid": "", "title": "blank set id"},
        ]})

    client = make_client(handler)
    page = run(spls.search_spls(client, index, query="aspirin"))

    assert [document.set_id for document in page.data] == ["abc-123"]
    assert page.total_results == 1
