"""
Records loaded from the DailyMed mapping files.

Both files are pipe-delimited with a header row:

- pharmacologic_class_mappings.txt: SPL_SETID|SPL_VERSION|PHARMA_SETID|PHARMA_VERSION
- rxnorm_mappings.txt: SETID|SPL_VERSION|RXCUI|RXSTR|RXTTY
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RxNormMapping:
    """One SPL set id to RxNorm concept link."""
    set_id: str
    spl_version: int
    rxcui: str
    rxstring: str
    rxtty: str  # PSN, SBD, SCD, BPCK, GPCK or SY

    def to_dict(self) -> dict:
        return {
            "setId": self.set_id,
            "splVersion": self.spl_version,
            "rxcui": self.rxcui,
            "rxstring": self.rxstring,
            "rxtty": self.rxtty,
        }


@dataclass(frozen=True)
class PharmacologicClassMapping:
    """One SPL set id to pharmacologic class (indexing SPL) link."""
    spl_set_id: str
    spl_version: int
    pharma_set_id: str
    pharma_version: int

    def to_dict(self) -> dict:
        return {
            "splSetId": self.spl_set_id,
            "splVersion": self.spl_version,
            "pharmaSetId": self.pharma_set_id,
            "pharmaVersion": self.pharma_version,
        }


@dataclass(frozen=True)
class FilteredRxNormMapping:
    """RxNorm mapping as attached to an SPL document (set id is implied)."""
    rxcui: str
    rxstring: str
    rxtty: str

    @classmethod
    def from_mapping(cls, mapping: RxNormMapping) -> "FilteredRxNormMapping":
        return cls(rxcui=mapping.rxcui, rxstring=mapping.rxstring, rxtty=mapping.rxtty)

    def to_dict(self) -> dict:
        return {"rxcui": self.rxcui, "rxstring": self.rxstring, "rxtty": self.rxtty}


@dataclass(frozen=True)
class FilteredPharmacologicClassMapping:
    """Pharmacologic class mapping as attached to an SPL document."""
    pharma_set_id: str
    pharma_version: int

    @classmethod
    def from_mapping(
        cls, mapping: PharmacologicClassMapping
    ) -> "FilteredPharmacologicClassMapping":
        return cls(pharma_set_id=mapping.pharma_set_id, pharma_version=mapping.pharma_version)

    def to_dict(self) -> dict:
        return {"pharmaSetId": self.pharma_set_id, "pharmaVersion": self.pharma_version}
