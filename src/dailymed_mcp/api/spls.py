"""
SPL (drug label) endpoints.

Two search modes:
- simple: a free-text drug name. The name is first resolved through
  /drugnames.json; every distinct drug name and active ingredient found
  becomes its own /spls.json query. Results are merged by set id and
  paginated locally. A failing sub-query is logged and skipped.
- advanced: any of the /spls.json filters, paginated by the server.

Full labels come from /spls/{setid}.xml and go through the extraction
engine; per-label history, NDCs, packaging and media come from the
matching JSON endpoints.
"""

from typing import Any

from dailymed_mcp.api.client import DailyMedClient
from dailymed_mcp.api.models import NDC, SPLHistoryEntry, SPLMedia
from dailymed_mcp.api.pagination import Page, paginate, validate_pagination_params
from dailymed_mcp.api.resources import API_MAX_PAGE_SIZE, search_drug_names
from dailymed_mcp.config import settings
from dailymed_mcp.errors import DailyMedError, UpstreamError, ValidationError
from dailymed_mcp.logging import get_logger
from dailymed_mcp.mappings.index import CrossReferenceIndex
from dailymed_mcp.spl.extract import document_from_item, extract_document, parse_spl_xml
from dailymed_mcp.spl.models import SPLDocument

logger = get_logger(__name__, component="spls")

# Filters accepted by /spls.json, forwarded verbatim
ADVANCED_SPL_FILTERS = (
    "application_number",
    "boxed_warning",
    "dea_schedule_code",
    "doctype",
    "drug_class_code",
    "drug_class_coding_system",
    "drug_name",
    "name_type",
    "labeler",
    "manufacturer",
    "marketing_category_code",
    "ndc",
    "published_date",
    "published_date_comparison",
    "rxcui",
    "setid",
    "unii_code",
)


def _wrap(error: DailyMedError, prefix: str) -> DailyMedError:
    """Same error kind, message prefixed with the failing operation."""
    return type(error)(f"{prefix}: {error}")


def require_set_id(set_id: str | None) -> str:
    if not set_id or not isinstance(set_id, str) or not set_id.strip():
        raise ValidationError("Valid SET ID is required")
    return set_id.strip()


def _data_list(data: Any, key: str) -> list | None:
    """The item list of a per-label endpoint, whether bare or nested under key."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return None


# ============================================================================
# Search
# ============================================================================

async def search_spls(
    client: DailyMedClient,
    index: CrossReferenceIndex,
    query: str | None = None,
    page: int = 1,
    page_size: int = 25,
    **filters: Any,
) -> Page[SPLDocument]:
    """
    Search labels by free-text drug name or by advanced filters.

    Args:
        query: Drug name or active ingredient (simple mode)
        **filters: Any of ADVANCED_SPL_FILTERS (advanced mode)

    Raises:
        ValidationError: Bad pagination, unknown filter, or nothing to search for
        UpstreamError: If the advanced search or the drug-name lookup fails
    """
    validate_pagination_params(page, page_size)

    unknown = set(filters) - set(ADVANCED_SPL_FILTERS)
    if unknown:
        raise ValidationError(f"Unknown SPL search parameter(s): {', '.join(sorted(unknown))}")

    has_advanced = any(value is not None for value in filters.values())
    if not query and not has_advanced:
        raise ValidationError("Either 'query' or at least one advanced parameter is required")

    try:
        if query and not has_advanced:
            return await _search_spls_by_drug_name(client, index, query, page, page_size)
        return await _search_spls_advanced(client, index, page, page_size, filters)
    except DailyMedError as e:
        raise _wrap(e, "Failed to search SPLs") from e


async def _search_spls_by_drug_name(
    client: DailyMedClient,
    index: CrossReferenceIndex,
    query: str,
    page: int,
    page_size: int,
) -> Page[SPLDocument]:
    drugs = await search_drug_names(client, drug_name=query)
    if not drugs.data:
        return Page(data=[], page=1, page_size=page_size)

    # dict keeps insertion order and drops duplicates
    drug_queries: dict[str, None] = {}
    for drug in drugs.data:
        if drug.drug_name:
            drug_queries[drug.drug_name] = None
        if drug.active_ingredient:
            drug_queries[drug.active_ingredient] = None

    logger.info("fanout_started", query=query, sub_queries=len(drug_queries))

    documents: dict[str, SPLDocument] = {}
    for drug_query in drug_queries:
        try:
            items, _ = await client.get_data(
                "/spls.json", {"drug_name": drug_query}, "SPL search"
            )
        except DailyMedError as e:
            logger.warning("fanout_query_failed", drug_query=drug_query, error=str(e))
            continue

        for item in items:
            set_id = item.get("setid")
            if not set_id:
                continue
            if set_id not in documents:
                documents[set_id] = document_from_item(item, index)

    logger.info("fanout_complete", query=query, documents=len(documents))

    return paginate(list(documents.values()), page, page_size)


async def _search_spls_advanced(
    client: DailyMedClient,
    index: CrossReferenceIndex,
    page: int,
    page_size: int,
    filters: dict[str, Any],
) -> Page[SPLDocument]:
    return await client.fetch_page(
        "/spls.json",
        filters,
        page,
        page_size,
        lambda item: document_from_item(item, index),
        "advanced SPL search",
    )


async def search_spls_by_pharmacologic_class(
    client: DailyMedClient,
    index: CrossReferenceIndex,
    drug_class_code: str,
    coding_system: str | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[SPLDocument]:
    """Labels belonging to a drug class code (NDF-RT/MED-RT by default)."""
    if not drug_class_code or not isinstance(drug_class_code, str):
        raise ValidationError("Valid drug class code is required")

    validate_pagination_params(page, page_size, API_MAX_PAGE_SIZE)

    try:
        return await client.fetch_page(
            "/spls.json",
            {
                "drug_class_code": drug_class_code,
                "drug_class_coding_system": (
                    coding_system or settings.default_pharmacologic_class_coding_system
                ),
            },
            page,
            page_size,
            lambda item: document_from_item(item, index),
            "drug class search",
        )
    except DailyMedError as e:
        raise _wrap(e, "Failed to search drugs by pharmacologic class") from e


# ============================================================================
# Single label
# ============================================================================

async def get_spl(
    client: DailyMedClient, index: CrossReferenceIndex, set_id: str
) -> SPLDocument:
    """
    Fetch and extract the full label for a SET ID.

    Raises:
        ValidationError: If set_id is blank
        UpstreamError: If the XML cannot be fetched
        ExtractionError: If the XML is malformed or has no <document> root
    """
    set_id = require_set_id(set_id)
    logger.info("fetching_spl", set_id=set_id)

    try:
        xml = await client.get_bytes(f"/spls/{set_id}.xml")
        return extract_document(parse_spl_xml(xml), set_id, index)
    except DailyMedError as e:
        raise _wrap(e, "Failed to fetch SPL") from e


async def get_spl_history(client: DailyMedClient, set_id: str) -> list[SPLHistoryEntry]:
    """Published versions of a label."""
    set_id = require_set_id(set_id)
    try:
        payload = await client.get_json(f"/spls/{set_id}/history.json")
        items = _data_list(payload.get("data") if isinstance(payload, dict) else None, "history")
        if items is None:
            raise UpstreamError("Unexpected response structure for SPL history")
    except DailyMedError as e:
        raise _wrap(e, "Failed to fetch SPL history") from e

    title = (payload.get("metadata") or {}).get("title")
    return [SPLHistoryEntry.from_api({"setid": set_id, "title": title, **item}) for item in items]


async def get_spl_ndcs(client: DailyMedClient, set_id: str) -> list[NDC]:
    """NDC codes listed on a label."""
    set_id = require_set_id(set_id)
    try:
        payload = await client.get_json(f"/spls/{set_id}/ndcs.json")
        items = _data_list(payload.get("data") if isinstance(payload, dict) else None, "ndcs")
        if items is None:
            raise UpstreamError("Unexpected response structure for SPL NDCs")
    except DailyMedError as e:
        raise _wrap(e, "Failed to fetch SPL NDCs") from e

    return [NDC.from_api(item) for item in items]


async def get_spl_packaging(client: DailyMedClient, set_id: str) -> Any:
    """Packaging description of a label, passed through as returned."""
    set_id = require_set_id(set_id)
    try:
        payload = await client.get_json(f"/spls/{set_id}/packaging.json")
        if not isinstance(payload, dict) or not payload.get("data"):
            raise UpstreamError("Unexpected response structure for SPL packaging")
    except DailyMedError as e:
        raise _wrap(e, "Failed to fetch SPL packaging") from e

    return payload["data"]


async def get_spl_media(client: DailyMedClient, set_id: str) -> list[SPLMedia]:
    """Images and other media attached to a label."""
    set_id = require_set_id(set_id)
    try:
        payload = await client.get_json(f"/spls/{set_id}/media.json")
        items = _data_list(payload.get("data") if isinstance(payload, dict) else None, "media")
        if items is None:
            raise UpstreamError("Unexpected response structure for SPL media")
    except DailyMedError as e:
        raise _wrap(e, "Failed to fetch SPL media") from e

    return [SPLMedia.from_api(item) for item in items]


def download_links(client: DailyMedClient, set_id: str) -> dict[str, str]:
    """ZIP and PDF download URLs for a label. Nothing is fetched."""
    set_id = require_set_id(set_id)
    return {
        "zipDownload": f"{client.base_url}/spls/{set_id}.zip",
        "pdfDownload": f"{client.base_url}/spls/{set_id}.pdf",
    }
