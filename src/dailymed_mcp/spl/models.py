"""
Normalized SPL document model.

An SPLDocument is built fresh for every request, either from a listing
item of /spls.json (no sections) or from a full XML document.
"""

from dataclasses import dataclass, field

from dailymed_mcp.mappings.models import (
    FilteredPharmacologicClassMapping,
    FilteredRxNormMapping,
)


@dataclass
class SPLSection:
    """A top-level label section flattened to text."""
    title: str
    content: str
    id: str | None = None

    def to_dict(self) -> dict:
        data = {"title": self.title, "content": self.content}
        if self.id is not None:
            data = {"id": self.id, **data}
        return data


@dataclass
class SPLDocument:
    """
    A drug label with its cross-references.

    The mapping lists are None, never empty, when the index knows
    nothing about the set id.
    """
    set_id: str
    title: str
    effective_time: str
    version_number: str
    sections: list[SPLSection] = field(default_factory=list)
    spl_medguide: str | None = None
    spl_patient_package_insert: str | None = None
    spl_product_data_elements: str | None = None
    rxnorm_mappings: list[FilteredRxNormMapping] | None = None
    pharmacologic_class_mappings: list[FilteredPharmacologicClassMapping] | None = None

    def to_dict(self) -> dict:
        data = {
            "setId": self.set_id,
            "title": self.title,
            "effectiveTime": self.effective_time,
            "versionNumber": self.version_number,
            "sections": [section.to_dict() for section in self.sections],
            "spl_medguide": self.spl_medguide,
            "spl_patient_package_insert": self.spl_patient_package_insert,
            "spl_product_data_elements": self.spl_product_data_elements,
        }
        if self.rxnorm_mappings is not None:
            data["rxNormMappings"] = [m.to_dict() for m in self.rxnorm_mappings]
        if self.pharmacologic_class_mappings is not None:
            data["pharmacologicClassMappings"] = [
                m.to_dict() for m in self.pharmacologic_class_mappings
            ]
        return {key: value for key, value in data.items() if value is not None}
