"""
FastMCP server exposing DailyMed as agent tools.

Tool input schemas are derived from the typed signatures below. Every
tool returns a pretty-printed JSON string; a DailyMedError raised inside
a tool comes back to the host as an error-flagged result carrying the
error message.

Run with:
    dailymed-mcp serve
"""

import json
from typing import Annotated, Any, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from dailymed_mcp.api.resources import require_any
from dailymed_mcp.logging import configure_logging, get_logger
from dailymed_mcp.service import DailyMedService

logger = get_logger(__name__, component="server")

SERVER_NAME = "dailymed"

SetId = Annotated[str, Field(description="The SET ID of the drug label")]
PageNumber = Annotated[int, Field(ge=1, description="Page number for pagination (1-based, default: 1)")]
PageSize100 = Annotated[int, Field(ge=1, le=100, description="Results per page (max: 100)")]
PageSize200 = Annotated[
    int,
    Field(
        ge=1,
        le=200,
        description=(
            "Results per page (default: 25, max: 100 for advanced queries, "
            "max: 200 for simple queries)"
        ),
    ),
]


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2)


def create_server(service: DailyMedService) -> FastMCP:
    """Build the MCP app with every tool bound to the given service."""
    mcp = FastMCP(SERVER_NAME)

    # -----------------
    # Context
    # -----------------

    @mcp.tool()
    def get_dailymed_context() -> str:
        """Get comprehensive information about DailyMed database, its purpose, content types, and when to use it."""
        return _dump(service.dailymed_context())

    # -----------------
    # Single label
    # -----------------

    @mcp.tool()
    async def get_drug_details(set_id: SetId) -> str:
        """Get detailed information about a specific drug by its SET ID, with label sections and RxNorm / pharmacologic class cross-references."""
        return _dump(await service.get_drug_details(set_id))

    @mcp.tool()
    async def get_drug_history(set_id: SetId) -> str:
        """Get version history for a specific drug by its SET ID."""
        return _dump(await service.get_drug_history(set_id))

    @mcp.tool()
    async def get_drug_ndcs(set_id: SetId) -> str:
        """Get NDC codes for a specific drug by its SET ID."""
        return _dump(await service.get_drug_ndcs(set_id))

    @mcp.tool()
    async def get_drug_packaging(set_id: SetId) -> str:
        """Get packaging information for a specific drug by its SET ID."""
        return _dump(await service.get_drug_packaging(set_id))

    @mcp.tool()
    async def get_drug_media(set_id: SetId) -> str:
        """Get media links (images, documents) for a specific drug by its SET ID."""
        return _dump(await service.get_drug_media(set_id))

    @mcp.tool()
    def get_download_links(set_id: SetId) -> str:
        """Get ZIP and PDF download links for a specific drug by its SET ID."""
        return _dump(service.get_download_links(set_id))

    # -----------------
    # Listings
    # -----------------

    @mcp.tool()
    async def get_all_drug_names(page: PageNumber = 1, page_size: PageSize100 = 100) -> str:
        """Get all available drug names in the DailyMed database with pagination support."""
        return _dump(await service.search_drug_names(page=page, page_size=page_size))

    @mcp.tool()
    async def get_all_drug_classes(page: PageNumber = 1, page_size: PageSize100 = 100) -> str:
        """Get all available drug classes in the DailyMed database with pagination support."""
        return _dump(await service.search_drug_classes(page=page, page_size=page_size))

    @mcp.tool()
    async def get_all_ndcs(page: PageNumber = 1, page_size: PageSize100 = 25) -> str:
        """Get all available NDC codes in the DailyMed database with pagination support."""
        return _dump(await service.get_all_ndcs(page=page, page_size=page_size))

    @mcp.tool()
    async def get_all_rxcuis(page: PageNumber = 1, page_size: PageSize100 = 25) -> str:
        """Get all available RxCUI codes in the DailyMed database with pagination support."""
        return _dump(await service.search_rxcuis(page=page, page_size=page_size))

    @mcp.tool()
    async def get_all_uniis(page: PageNumber = 1, page_size: PageSize100 = 25) -> str:
        """Get all available UNII codes in the DailyMed database with pagination support."""
        return _dump(await service.search_uniis(page=page, page_size=page_size))

    @mcp.tool()
    async def get_all_application_numbers(page: PageNumber = 1, page_size: PageSize100 = 100) -> str:
        """Get all available FDA application numbers in the DailyMed database with pagination support."""
        return _dump(await service.search_application_numbers(page=page, page_size=page_size))

    # -----------------
    # Searches
    # -----------------

    @mcp.tool()
    async def search_spls(
        query: Annotated[str | None, Field(description="Drug name or active ingredient")] = None,
        application_number: str | None = None,
        boxed_warning: bool | None = None,
        dea_schedule_code: str | None = None,
        doctype: str | None = None,
        drug_class_code: str | None = None,
        drug_class_coding_system: str | None = None,
        drug_name: str | None = None,
        name_type: Literal["g", "generic", "b", "brand", "both"] | None = None,
        labeler: str | None = None,
        manufacturer: str | None = None,
        marketing_category_code: str | None = None,
        ndc: str | None = None,
        published_date: Annotated[
            str | None, Field(description="Published date in YYYY-MM-DD format")
        ] = None,
        published_date_comparison: Literal["lt", "lte", "gt", "gte", "eq"] | None = None,
        rxcui: str | None = None,
        setid: str | None = None,
        unii_code: str | None = None,
        page: PageNumber = 1,
        page_size: PageSize200 = 25,
    ) -> str:
        """Search Structured Product Labels by free-text drug name (query alone) or by any combination of advanced filters, with pagination support."""
        return _dump(await service.search_spls(
            query=query,
            page=page,
            page_size=page_size,
            application_number=application_number,
            boxed_warning=boxed_warning,
            dea_schedule_code=dea_schedule_code,
            doctype=doctype,
            drug_class_code=drug_class_code,
            drug_class_coding_system=drug_class_coding_system,
            drug_name=drug_name,
            name_type=name_type,
            labeler=labeler,
            manufacturer=manufacturer,
            marketing_category_code=marketing_category_code,
            ndc=ndc,
            published_date=published_date,
            published_date_comparison=published_date_comparison,
            rxcui=rxcui,
            setid=setid,
            unii_code=unii_code,
        ))

    @mcp.tool()
    async def search_rxcuis(
        rxstring: Annotated[
            str | None, Field(description="RxString value of an RxConcept (drug name/description)")
        ] = None,
        rxcui: str | None = None,
        rxtty: Literal["PSN", "SBD", "SCD", "BPCK", "GPCK", "SY"] | None = None,
        page: PageNumber = 1,
        page_size: PageSize100 = 25,
    ) -> str:
        """Search for RxCUI codes using various parameters with pagination support."""
        require_any(rxstring=rxstring, rxcui=rxcui, rxtty=rxtty)
        return _dump(await service.search_rxcuis(
            page=page, page_size=page_size, rxstring=rxstring, rxcui=rxcui, rxtty=rxtty
        ))

    @mcp.tool()
    async def search_drug_names(
        drug_name: Annotated[str | None, Field(description="Generic or brand name of drug")] = None,
        name_type: Literal["g", "generic", "b", "brand", "both"] | None = None,
        manufacturer: str | None = None,
        page: PageNumber = 1,
        page_size: PageSize100 = 100,
    ) -> str:
        """Search for drug names using various parameters with pagination support."""
        return _dump(await service.search_drug_names(
            page=page,
            page_size=page_size,
            drug_name=drug_name,
            name_type=name_type,
            manufacturer=manufacturer,
        ))

    @mcp.tool()
    async def search_uniis(
        active_moiety: str | None = None,
        drug_class_code: str | None = None,
        drug_class_coding_system: str | None = None,
        rxcui: str | None = None,
        unii_code: str | None = None,
        page: PageNumber = 1,
        page_size: PageSize100 = 25,
    ) -> str:
        """Search for UNII codes using various parameters with pagination support."""
        require_any(
            active_moiety=active_moiety,
            drug_class_code=drug_class_code,
            drug_class_coding_system=drug_class_coding_system,
            rxcui=rxcui,
            unii_code=unii_code,
        )
        return _dump(await service.search_uniis(
            page=page,
            page_size=page_size,
            active_moiety=active_moiety,
            drug_class_code=drug_class_code,
            drug_class_coding_system=drug_class_coding_system,
            rxcui=rxcui,
            unii_code=unii_code,
        ))

    @mcp.tool()
    async def search_application_numbers(
        application_number: str | None = None,
        marketing_category_code: str | None = None,
        setid: str | None = None,
        page: PageNumber = 1,
        page_size: PageSize100 = 100,
    ) -> str:
        """Search for FDA application numbers using various parameters with pagination support."""
        require_any(
            application_number=application_number,
            marketing_category_code=marketing_category_code,
            setid=setid,
        )
        return _dump(await service.search_application_numbers(
            page=page,
            page_size=page_size,
            application_number=application_number,
            marketing_category_code=marketing_category_code,
            setid=setid,
        ))

    @mcp.tool()
    async def search_drug_classes(
        drug_class_code: str | None = None,
        drug_class_coding_system: str | None = None,
        class_code_type: Literal["all", "epc", "moa", "pe", "ci"] | None = None,
        class_name: str | None = None,
        unii_code: str | None = None,
        page: PageNumber = 1,
        page_size: PageSize100 = 100,
    ) -> str:
        """Search for drug classes using various parameters with pagination support."""
        require_any(
            drug_class_code=drug_class_code,
            drug_class_coding_system=drug_class_coding_system,
            class_code_type=class_code_type,
            class_name=class_name,
            unii_code=unii_code,
        )
        return _dump(await service.search_drug_classes(
            page=page,
            page_size=page_size,
            drug_class_code=drug_class_code,
            drug_class_coding_system=drug_class_coding_system,
            class_code_type=class_code_type,
            class_name=class_name,
            unii_code=unii_code,
        ))

    @mcp.tool()
    async def search_drugs_by_pharmacologic_class(
        drug_class_code: Annotated[str, Field(description="Pharmacologic class code, e.g. N0000175605")],
        coding_system: Annotated[
            str | None, Field(description="Coding system OID (default: 2.16.840.1.113883.6.345)")
        ] = None,
        page: PageNumber = 1,
        page_size: PageSize100 = 25,
    ) -> str:
        """Search for drug labels belonging to a pharmacologic class code."""
        return _dump(await service.search_drugs_by_pharmacologic_class(
            drug_class_code, coding_system, page, page_size
        ))

    # -----------------
    # Mapping index
    # -----------------

    @mcp.tool()
    def get_mapping_statistics() -> str:
        """Get statistics about the loaded RxNorm and pharmacologic class mapping files."""
        return _dump(service.get_mapping_statistics())

    @mcp.tool()
    def search_by_rxnorm_mapping(
        drug_name: Annotated[str, Field(description="Drug name to search for in RxNorm strings")],
    ) -> str:
        """Search the local RxNorm mappings by drug name (case-insensitive substring)."""
        return _dump(service.search_by_rxnorm_mapping(drug_name))

    @mcp.tool()
    def get_rxnorm_mappings_for_setid(set_id: SetId) -> str:
        """Get RxNorm mappings for a specific SET ID."""
        return _dump(service.get_rxnorm_mappings_for_set_id(set_id))

    @mcp.tool()
    def get_pharmacologic_class_mappings_for_setid(set_id: SetId) -> str:
        """Get pharmacologic class mappings for a specific SET ID."""
        return _dump(service.get_pharmacologic_class_mappings_for_set_id(set_id))

    @mcp.tool()
    def get_mappings_by_rxcui(
        rxcui: Annotated[str, Field(description="RxNorm Concept Unique Identifier")],
    ) -> str:
        """Get every label mapped to an RxCUI."""
        return _dump(service.get_mappings_by_rxcui(rxcui))

    @mcp.tool()
    def get_rxnorm_mappings_by_pharmacologic_class(
        pharma_set_id: Annotated[str, Field(description="Pharmacologic class SET ID")],
    ) -> str:
        """Get the RxNorm concepts of every label in a pharmacologic class."""
        return _dump(service.get_rxnorm_mappings_by_pharmacologic_class(pharma_set_id))

    @mcp.tool()
    def get_all_pharmacologic_class_setids() -> str:
        """Get all pharmacologic class SET IDs that have SPL mappings."""
        return _dump(service.get_all_pharmacologic_class_set_ids())

    @mcp.tool()
    def get_pharmacologic_class_details(
        pharma_set_id: Annotated[str, Field(description="Pharmacologic class SET ID")],
    ) -> str:
        """Get details about a pharmacologic class from the local mappings, with FDA context."""
        return _dump(service.get_pharmacologic_class_details(pharma_set_id))

    return mcp


def run_stdio(service: DailyMedService) -> None:
    """Serve the tools over stdio until the host disconnects."""
    # stdout carries the protocol, so logging must be pointed at stderr first
    configure_logging()
    mcp = create_server(service)
    logger.info("server_starting", name=SERVER_NAME, transport="stdio")
    mcp.run(transport="stdio")
