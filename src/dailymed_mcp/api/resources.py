"""
Paginated searches over the DailyMed listing endpoints.

Each function forwards its filters verbatim to one endpoint and relies on
server-side pagination. Default page sizes follow the endpoint: 100 for
drug names, drug classes and application numbers, 25 for the rest. The
API never returns more than 100 items per page.

Usage:
    async with DailyMedClient() as client:
        page = await search_drug_names(client, drug_name="aspirin")
        print(page.to_dict()["pagination"])
"""

from dailymed_mcp.api.client import DailyMedClient
from dailymed_mcp.api.models import (
    NDC,
    UNII,
    ApplicationNumber,
    DrugClass,
    DrugName,
    RxCUI,
)
from dailymed_mcp.api.pagination import Page, validate_pagination_params
from dailymed_mcp.errors import ValidationError

API_MAX_PAGE_SIZE = 100


async def search_drug_names(
    client: DailyMedClient,
    drug_name: str | None = None,
    name_type: str | None = None,
    manufacturer: str | None = None,
    page: int = 1,
    page_size: int = 100,
) -> Page[DrugName]:
    """
    Search /drugnames.json.

    Args:
        drug_name: Generic or brand name
        name_type: g, generic, b, brand or both
        manufacturer: Manufacturer name
    """
    validate_pagination_params(page, page_size, API_MAX_PAGE_SIZE)
    return await client.fetch_page(
        "/drugnames.json",
        {"drug_name": drug_name, "name_type": name_type, "manufacturer": manufacturer},
        page,
        page_size,
        DrugName.from_api,
        "drug name search",
    )


async def search_drug_classes(
    client: DailyMedClient,
    drug_class_code: str | None = None,
    drug_class_coding_system: str | None = None,
    class_code_type: str | None = None,
    class_name: str | None = None,
    unii_code: str | None = None,
    page: int = 1,
    page_size: int = 100,
) -> Page[DrugClass]:
    """Search /drugclasses.json. class_code_type is one of all, epc, moa, pe, ci."""
    validate_pagination_params(page, page_size, API_MAX_PAGE_SIZE)
    return await client.fetch_page(
        "/drugclasses.json",
        {
            "drug_class_code": drug_class_code,
            "drug_class_coding_system": drug_class_coding_system,
            "class_code_type": class_code_type,
            "class_name": class_name,
            "unii_code": unii_code,
        },
        page,
        page_size,
        DrugClass.from_api,
        "drug class search",
    )


async def list_ndcs(client: DailyMedClient, page: int = 1, page_size: int = 25) -> Page[NDC]:
    """Page through /ndcs.json."""
    validate_pagination_params(page, page_size, API_MAX_PAGE_SIZE)
    return await client.fetch_page("/ndcs.json", {}, page, page_size, NDC.from_api, "NDCs")


async def search_rxcuis(
    client: DailyMedClient,
    rxstring: str | None = None,
    rxcui: str | None = None,
    rxtty: str | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[RxCUI]:
    """Search /rxcuis.json. rxtty is one of PSN, SBD, SCD, BPCK, GPCK, SY."""
    validate_pagination_params(page, page_size, API_MAX_PAGE_SIZE)
    return await client.fetch_page(
        "/rxcuis.json",
        {"rxstring": rxstring, "rxcui": rxcui, "rxtty": rxtty},
        page,
        page_size,
        RxCUI.from_api,
        "RxCUI search",
    )


async def search_uniis(
    client: DailyMedClient,
    active_moiety: str | None = None,
    drug_class_code: str | None = None,
    drug_class_coding_system: str | None = None,
    rxcui: str | None = None,
    unii_code: str | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[UNII]:
    """Search /uniis.json."""
    validate_pagination_params(page, page_size, API_MAX_PAGE_SIZE)
    return await client.fetch_page(
        "/uniis.json",
        {
            "active_moiety": active_moiety,
            "drug_class_code": drug_class_code,
            "drug_class_coding_system": drug_class_coding_system,
            "rxcui": rxcui,
            "unii_code": unii_code,
        },
        page,
        page_size,
        UNII.from_api,
        "UNII search",
    )


async def search_application_numbers(
    client: DailyMedClient,
    application_number: str | None = None,
    marketing_category_code: str | None = None,
    setid: str | None = None,
    page: int = 1,
    page_size: int = 100,
) -> Page[ApplicationNumber]:
    """Search /applicationnumbers.json."""
    validate_pagination_params(page, page_size, API_MAX_PAGE_SIZE)
    return await client.fetch_page(
        "/applicationnumbers.json",
        {
            "application_number": application_number,
            "marketing_category_code": marketing_category_code,
            "setid": setid,
        },
        page,
        page_size,
        ApplicationNumber.from_api,
        "application number search",
    )


def require_any(**filters: str | None) -> None:
    """
    Reject a search with no filter at all.

    Raises:
        ValidationError: If every filter is empty
    """
    if not any(filters.values()):
        names = ", ".join(filters)
        raise ValidationError(f"At least one search parameter ({names}) is required")
