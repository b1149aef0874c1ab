"""
In-memory cross-reference index over the DailyMed mapping files.

The index is built once at startup and only read afterwards. It keeps
four collections that are always updated together:

- set id -> RxNorm mappings
- rxcui -> RxNorm mappings
- SPL set id -> pharmacologic class mappings
- pharmacologic class set id -> SPL set ids (deduplicated, insertion order)

Usage:
    from dailymed_mcp.mappings import CrossReferenceIndex

    index = CrossReferenceIndex.load(
        Path("data/pharmacologic_class_mappings.txt"),
        Path("data/rxnorm_mappings.txt"),
    )
    index.get_rxnorm_mappings("0b0b2e5b-...")
"""

from pathlib import Path
from typing import Iterable

from dailymed_mcp.errors import ConfigurationError
from dailymed_mcp.logging import get_logger
from dailymed_mcp.mappings.models import PharmacologicClassMapping, RxNormMapping

logger = get_logger(__name__, component="mappings")

PHARMA_FIELD_COUNT = 4
RXNORM_FIELD_COUNT = 5

# Static description attached to pharmacologic class lookups
FDA_PHARMACOLOGIC_CLASS_CONTEXT = {
    "definition": (
        "A pharmacologic class is a group of active moieties that share "
        "scientifically documented properties"
    ),
    "explanation": (
        "According to FDA guidelines, pharmacologic classes provide clinically "
        "meaningful and scientifically valid drug classifications based on three "
        "key attributes: Mechanism of Action (MOA), Physiologic Effect (PE), and "
        "Chemical Structure (CS)"
    ),
    "classification": [
        "Mechanism of Action (MOA): How the drug works at the molecular level",
        "Physiologic Effect (PE): The body's response to the drug",
        "Chemical Structure (CS): Structural characteristics of the active moiety",
        "Source: National Drug File Reference Terminology (NDF-RT)",
    ],
}


def _read_data_lines(path: Path) -> list[str]:
    """Read a mapping file and return its lines after the header."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read mapping file {path}: {e}") from e
    return content.splitlines()[1:]


def _split_fields(line: str, count: int) -> list[str] | None:
    """Split a data line, or return None when a required field is missing."""
    fields = line.split("|")
    if len(fields) < count:
        return None
    fields = fields[:count]
    if not all(fields):
        return None
    return fields


def parse_pharmacologic_class_line(line: str) -> PharmacologicClassMapping | None:
    """Parse one pharmacologic class line, or None if it is malformed."""
    fields = _split_fields(line.strip(), PHARMA_FIELD_COUNT)
    if fields is None:
        return None
    spl_set_id, spl_version, pharma_set_id, pharma_version = fields
    try:
        return PharmacologicClassMapping(
            spl_set_id=spl_set_id,
            spl_version=int(spl_version, 10),
            pharma_set_id=pharma_set_id,
            pharma_version=int(pharma_version, 10),
        )
    except ValueError:
        return None


def parse_rxnorm_line(line: str) -> RxNormMapping | None:
    """Parse one RxNorm line, or None if it is malformed."""
    fields = _split_fields(line.strip(), RXNORM_FIELD_COUNT)
    if fields is None:
        return None
    set_id, spl_version, rxcui, rxstring, rxtty = fields
    try:
        version = int(spl_version, 10)
    except ValueError:
        return None
    return RxNormMapping(
        set_id=set_id,
        spl_version=version,
        rxcui=rxcui,
        rxstring=rxstring,
        rxtty=rxtty,
    )


class CrossReferenceIndex:
    """
    Forward and reverse lookups over RxNorm and pharmacologic class mappings.

    Records enter the index only through add_rxnorm_mapping() and
    add_pharmacologic_class_mapping(), which keep the forward and reverse
    collections in step. Lookups never raise: unknown keys give an empty
    list.

    Example:
        index = CrossReferenceIndex(
            rxnorm_mappings=[RxNormMapping("abc-123", 1, "197361", "aspirin 81 MG", "SCD")],
        )
        index.get_mappings_by_rxcui("197361")
    """

    def __init__(
        self,
        pharmacologic_class_mappings: Iterable[PharmacologicClassMapping] = (),
        rxnorm_mappings: Iterable[RxNormMapping] = (),
    ):
        self._pharma_by_spl_set_id: dict[str, list[PharmacologicClassMapping]] = {}
        # dict keys keep insertion order and act as an ordered set
        self._spl_set_ids_by_pharma_set_id: dict[str, dict[str, None]] = {}
        self._rxnorm_by_set_id: dict[str, list[RxNormMapping]] = {}
        self._rxnorm_by_rxcui: dict[str, list[RxNormMapping]] = {}

        # Malformed lines seen while loading from files
        self.skipped_pharmacologic_class_lines = 0
        self.skipped_rxnorm_lines = 0

        for mapping in pharmacologic_class_mappings:
            self.add_pharmacologic_class_mapping(mapping)
        for mapping in rxnorm_mappings:
            self.add_rxnorm_mapping(mapping)

    @classmethod
    def load(cls, pharmacologic_class_path: Path, rxnorm_path: Path) -> "CrossReferenceIndex":
        """
        Build the index from the two mapping files.

        Malformed lines (missing fields, non-numeric versions) are skipped
        and counted; a missing or unreadable file is fatal.

        Raises:
            ConfigurationError: If either file cannot be read
        """
        index = cls()

        for line in _read_data_lines(pharmacologic_class_path):
            if not line.strip():
                continue
            mapping = parse_pharmacologic_class_line(line)
            if mapping is None:
                index.skipped_pharmacologic_class_lines += 1
                continue
            index.add_pharmacologic_class_mapping(mapping)

        for line in _read_data_lines(rxnorm_path):
            if not line.strip():
                continue
            mapping = parse_rxnorm_line(line)
            if mapping is None:
                index.skipped_rxnorm_lines += 1
                continue
            index.add_rxnorm_mapping(mapping)

        if index.skipped_pharmacologic_class_lines or index.skipped_rxnorm_lines:
            logger.warning(
                "mapping_lines_skipped",
                pharmacologic_class=index.skipped_pharmacologic_class_lines,
                rxnorm=index.skipped_rxnorm_lines,
            )

        stats = index.get_statistics()
        logger.info(
            "mappings_loaded",
            pharmacologic_class_mappings=stats["pharmacologicClassMappings"],
            rxnorm_mappings=stats["rxNormMappings"],
        )
        return index

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def add_pharmacologic_class_mapping(self, mapping: PharmacologicClassMapping) -> None:
        self._pharma_by_spl_set_id.setdefault(mapping.spl_set_id, []).append(mapping)

        spl_set_ids = self._spl_set_ids_by_pharma_set_id.setdefault(mapping.pharma_set_id, {})
        spl_set_ids.setdefault(mapping.spl_set_id, None)

    def add_rxnorm_mapping(self, mapping: RxNormMapping) -> None:
        self._rxnorm_by_set_id.setdefault(mapping.set_id, []).append(mapping)
        self._rxnorm_by_rxcui.setdefault(mapping.rxcui, []).append(mapping)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_pharmacologic_class_mappings(self, spl_set_id: str) -> list[PharmacologicClassMapping]:
        """Pharmacologic class mappings for an SPL set id."""
        return list(self._pharma_by_spl_set_id.get(spl_set_id, []))

    def get_rxnorm_mappings(self, set_id: str) -> list[RxNormMapping]:
        """RxNorm mappings for an SPL set id."""
        return list(self._rxnorm_by_set_id.get(set_id, []))

    def get_mappings_by_rxcui(self, rxcui: str) -> list[RxNormMapping]:
        """RxNorm mappings (one per labeled product) sharing an RxCUI."""
        return list(self._rxnorm_by_rxcui.get(rxcui, []))

    def search_rxnorm_mappings_by_name(self, drug_name: str) -> list[RxNormMapping]:
        """Case-insensitive substring search over every mapping's rxstring."""
        search_term = drug_name.lower()
        return [
            mapping
            for mappings in self._rxnorm_by_set_id.values()
            for mapping in mappings
            if search_term in mapping.rxstring.lower()
        ]

    def get_all_set_ids_with_rxnorm_mappings(self) -> list[str]:
        return list(self._rxnorm_by_set_id)

    def get_all_set_ids_with_pharmacologic_class_mappings(self) -> list[str]:
        return list(self._pharma_by_spl_set_id)

    def get_all_pharmacologic_class_set_ids(self) -> list[str]:
        return list(self._spl_set_ids_by_pharma_set_id)

    def get_rxnorm_mappings_by_pharmacologic_class(self, pharma_set_id: str) -> dict:
        """
        Join both mapping files to list the drugs in a pharmacologic class.

        The RxNorm mappings of every SPL in the class are concatenated in
        SPL order; a mapping reachable through two SPLs appears twice.

        Returns:
            Dict with pharmaSetId, splSetIds, rxNormMappings and fdaContext
        """
        spl_set_ids = list(self._spl_set_ids_by_pharma_set_id.get(pharma_set_id, {}))

        rxnorm_mappings: list[RxNormMapping] = []
        for spl_set_id in spl_set_ids:
            rxnorm_mappings.extend(self.get_rxnorm_mappings(spl_set_id))

        return {
            "pharmaSetId": pharma_set_id,
            "splSetIds": spl_set_ids,
            "rxNormMappings": rxnorm_mappings,
            "fdaContext": FDA_PHARMACOLOGIC_CLASS_CONTEXT,
        }

    def get_statistics(self) -> dict:
        """Record and distinct key counts for every collection."""
        return {
            "pharmacologicClassMappings": sum(
                len(mappings) for mappings in self._pharma_by_spl_set_id.values()
            ),
            "rxNormMappings": sum(len(mappings) for mappings in self._rxnorm_by_set_id.values()),
            "uniqueSetIds": len(self._rxnorm_by_set_id),
            "uniqueRxCUIs": len(self._rxnorm_by_rxcui),
            "uniquePharmacologicClasses": len(self._spl_set_ids_by_pharma_set_id),
            "uniqueSplSetIdsWithPharmacologicClasses": len(self._pharma_by_spl_set_id),
            "skippedLines": {
                "pharmacologicClass": self.skipped_pharmacologic_class_lines,
                "rxNorm": self.skipped_rxnorm_lines,
            },
        }
