"""
Facade combining the DailyMed API client and the cross-reference index.

Every method returns a JSON-ready payload (dicts, lists, strings) so the
tool layer only has to serialize it. The index is passed in explicitly;
DailyMedService.from_settings() is the one place that loads it from disk.

Usage:
    service = DailyMedService.from_settings()
    details = await service.get_drug_details("0b0b2e5b-...")
    await service.close()
"""

from typing import Any

from dailymed_mcp.api import resources, spls
from dailymed_mcp.api.client import DailyMedClient
from dailymed_mcp.config import Settings, settings as default_settings
from dailymed_mcp.logging import get_logger
from dailymed_mcp.mappings.index import CrossReferenceIndex

logger = get_logger(__name__, component="service")

DAILYMED_CONTEXT = {
    "service": "DailyMed",
    "version": "2.0",
    "description": (
        "DailyMed is the official provider of FDA label information "
        "(package inserts) for approved drug products"
    ),
    "baseUrl": "https://dailymed.nlm.nih.gov/dailymed/services/v2",
    "purpose": "Provide comprehensive, up-to-date drug labeling information",
    "contentTypes": [
        "Structured Product Labels (SPLs)",
        "Drug names and active ingredients",
        "NDC codes",
        "FDA application numbers",
        "Drug classification information",
        "RxNorm mappings",
        "Pharmacologic class mappings",
    ],
    "keyFeatures": [
        "Official FDA-submitted drug labeling information",
        "Cross-references with RxNorm and pharmacologic classifications",
        "Multiple data formats (JSON, XML, PDF)",
        "Free public access with regular updates",
        "Comprehensive search and filtering capabilities",
    ],
    "dataFreshness": "Updated daily with new FDA submissions",
    "apiCapabilities": [
        "Search SPLs by drug name, manufacturer, NDC, RxCUI, etc.",
        "Advanced filtering with multiple parameters",
        "Pagination support for large result sets",
        "Full SPL document retrieval with structured sections",
        "Mapping data linking SPLs to external terminologies",
    ],
    "useCases": [
        "Healthcare professionals researching drug information",
        "Patients seeking official drug labeling information",
        "Researchers conducting pharmaceutical studies",
        "AI systems providing drug information and recommendations",
        "Regulatory compliance and drug safety monitoring",
    ],
}


def _dicts(items: list) -> list[dict]:
    return [item.to_dict() for item in items]


class DailyMedService:
    """
    All tool operations behind one object.

    Example:
        index = CrossReferenceIndex.load(pharma_path, rxnorm_path)
        async with DailyMedService(DailyMedClient(), index) as service:
            page = await service.search_spls(query="aspirin")
    """

    def __init__(self, client: DailyMedClient, index: CrossReferenceIndex):
        self.client = client
        self.index = index

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "DailyMedService":
        """
        Load the mapping files and build a client from settings.

        Raises:
            ConfigurationError: If a mapping file is missing or unreadable
        """
        config = config or default_settings
        index = CrossReferenceIndex.load(config.pharmacologic_class_path, config.rxnorm_path)
        client = DailyMedClient(base_url=config.base_url, timeout=config.request_timeout)
        logger.info("service_ready", base_url=client.base_url)
        return cls(client, index)

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def dailymed_context(self) -> dict:
        return DAILYMED_CONTEXT

    # ------------------------------------------------------------------
    # SPLs
    # ------------------------------------------------------------------

    async def get_drug_details(self, set_id: str) -> dict:
        document = await spls.get_spl(self.client, self.index, set_id)
        return document.to_dict()

    async def get_drug_history(self, set_id: str) -> list[dict]:
        return _dicts(await spls.get_spl_history(self.client, set_id))

    async def get_drug_ndcs(self, set_id: str) -> list[dict]:
        return _dicts(await spls.get_spl_ndcs(self.client, set_id))

    async def get_drug_packaging(self, set_id: str) -> Any:
        return await spls.get_spl_packaging(self.client, set_id)

    async def get_drug_media(self, set_id: str) -> list[dict]:
        return _dicts(await spls.get_spl_media(self.client, set_id))

    def get_download_links(self, set_id: str) -> dict:
        return spls.download_links(self.client, set_id)

    async def search_spls(
        self, query: str | None = None, page: int = 1, page_size: int = 25, **filters: Any
    ) -> dict:
        result = await spls.search_spls(
            self.client, self.index, query=query, page=page, page_size=page_size, **filters
        )
        return result.to_dict()

    async def search_drugs_by_pharmacologic_class(
        self,
        drug_class_code: str,
        coding_system: str | None = None,
        page: int = 1,
        page_size: int = 25,
    ) -> dict:
        result = await spls.search_spls_by_pharmacologic_class(
            self.client, self.index, drug_class_code, coding_system, page, page_size
        )
        return result.to_dict()

    # ------------------------------------------------------------------
    # Listing resources
    # ------------------------------------------------------------------

    async def search_drug_names(self, page: int = 1, page_size: int = 100, **filters) -> dict:
        result = await resources.search_drug_names(
            self.client, page=page, page_size=page_size, **filters
        )
        return result.to_dict()

    async def search_drug_classes(self, page: int = 1, page_size: int = 100, **filters) -> dict:
        result = await resources.search_drug_classes(
            self.client, page=page, page_size=page_size, **filters
        )
        return result.to_dict()

    async def get_all_ndcs(self, page: int = 1, page_size: int = 25) -> dict:
        result = await resources.list_ndcs(self.client, page=page, page_size=page_size)
        return result.to_dict()

    async def search_rxcuis(self, page: int = 1, page_size: int = 25, **filters) -> dict:
        result = await resources.search_rxcuis(
            self.client, page=page, page_size=page_size, **filters
        )
        return result.to_dict()

    async def search_uniis(self, page: int = 1, page_size: int = 25, **filters) -> dict:
        result = await resources.search_uniis(
            self.client, page=page, page_size=page_size, **filters
        )
        return result.to_dict()

    async def search_application_numbers(
        self, page: int = 1, page_size: int = 100, **filters
    ) -> dict:
        result = await resources.search_application_numbers(
            self.client, page=page, page_size=page_size, **filters
        )
        return result.to_dict()

    # ------------------------------------------------------------------
    # Mapping index
    # ------------------------------------------------------------------

    def get_mapping_statistics(self) -> dict:
        return self.index.get_statistics()

    def search_by_rxnorm_mapping(self, drug_name: str) -> list[dict]:
        return _dicts(self.index.search_rxnorm_mappings_by_name(drug_name))

    def get_rxnorm_mappings_for_set_id(self, set_id: str) -> list[dict]:
        return _dicts(self.index.get_rxnorm_mappings(set_id))

    def get_pharmacologic_class_mappings_for_set_id(self, set_id: str) -> list[dict]:
        return _dicts(self.index.get_pharmacologic_class_mappings(set_id))

    def get_mappings_by_rxcui(self, rxcui: str) -> list[dict]:
        return _dicts(self.index.get_mappings_by_rxcui(rxcui))

    def get_rxnorm_mappings_by_pharmacologic_class(self, pharma_set_id: str) -> dict:
        result = self.index.get_rxnorm_mappings_by_pharmacologic_class(pharma_set_id)
        return {**result, "rxNormMappings": _dicts(result["rxNormMappings"])}

    def get_all_pharmacologic_class_set_ids(self) -> list[str]:
        return self.index.get_all_pharmacologic_class_set_ids()

    def get_pharmacologic_class_details(self, pharma_set_id: str) -> dict:
        """
        What the local mappings know about one pharmacologic class.

        The classification lists stay empty: the mapping files carry no
        MOA/PE/CS attributes, only membership.
        """
        result = self.index.get_rxnorm_mappings_by_pharmacologic_class(pharma_set_id)
        return {
            "setId": pharma_set_id,
            "title": f"Pharmacologic Class {pharma_set_id}",
            "relatedDrugs": len(result["rxNormMappings"]),
            "splSetIds": result["splSetIds"],
            "classificationInfo": {
                "mechanismOfAction": [],
                "physiologicEffect": [],
                "chemicalStructure": [],
                "establishedPharmacologicClass": [],
            },
            "fdaContext": result["fdaContext"],
        }
