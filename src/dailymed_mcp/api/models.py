"""
Records returned by the DailyMed listing endpoints.

DailyMed is not consistent about key casing across endpoints, so each
from_api() accepts both the snake_case and the camelCase spelling.
to_dict() gives the camelCase tool payload with unset fields left out.
"""

from dataclasses import dataclass


def _compact(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class DrugName:
    drug_name: str
    route_of_administration: str | None = None
    active_ingredient: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "DrugName":
        return cls(
            drug_name=item.get("drug_name"),
            route_of_administration=item.get("route_of_administration"),
            active_ingredient=item.get("active_ingredient"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "drugName": self.drug_name,
            "routeOfAdministration": self.route_of_administration,
            "activeIngredient": self.active_ingredient,
        })


@dataclass
class NDC:
    ndc: str
    package_ndc: str | None = None
    product_ndc: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "NDC":
        return cls(
            ndc=item.get("ndc"),
            package_ndc=item.get("package_ndc") or item.get("packageNdc"),
            product_ndc=item.get("product_ndc") or item.get("productNdc"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "ndc": self.ndc,
            "packageNdc": self.package_ndc,
            "productNdc": self.product_ndc,
        })


@dataclass
class ApplicationNumber:
    application_number: str
    application_number_type: str | None = None
    marketing_category_code: str | None = None
    set_id: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "ApplicationNumber":
        return cls(
            application_number=item.get("application_number") or item.get("applicationNumber"),
            application_number_type=(
                item.get("application_number_type") or item.get("applicationNumberType")
            ),
            marketing_category_code=(
                item.get("marketing_category_code") or item.get("marketingCategoryCode")
            ),
            set_id=item.get("setid"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "applicationNumber": self.application_number,
            "applicationNumberType": self.application_number_type,
            "marketingCategoryCode": self.marketing_category_code,
            "setId": self.set_id,
        })


@dataclass
class DrugClass:
    drug_class_name: str
    drug_class_code: str | None = None
    drug_class_coding_system: str | None = None
    class_code_type: str | None = None
    unii_code: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "DrugClass":
        return cls(
            drug_class_name=item.get("name"),
            drug_class_code=item.get("code"),
            drug_class_coding_system=item.get("codingSystem"),
            class_code_type=item.get("type"),
            unii_code=item.get("unii_code"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "drugClassName": self.drug_class_name,
            "drugClassCode": self.drug_class_code,
            "drugClassCodingSystem": self.drug_class_coding_system,
            "classCodeType": self.class_code_type,
            "uniiCode": self.unii_code,
        })


@dataclass
class RxCUI:
    rxcui: str
    drug_name: str | None = None
    term_type: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "RxCUI":
        return cls(
            rxcui=item.get("rxcui"),
            drug_name=item.get("rxstring") or item.get("drug_name") or item.get("drugName"),
            term_type=item.get("rxtty"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "rxcui": self.rxcui,
            "drugName": self.drug_name,
            "termType": self.term_type,
        })


@dataclass
class UNII:
    unii: str
    substance_name: str | None = None
    unii_type: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "UNII":
        return cls(
            unii=item.get("unii"),
            substance_name=item.get("substance_name") or item.get("substanceName"),
            unii_type=item.get("unii_type") or item.get("uniiType"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "unii": self.unii,
            "substanceName": self.substance_name,
            "uniiType": self.unii_type,
        })


@dataclass
class SPLHistoryEntry:
    """One published version of a label."""
    set_id: str
    spl_version: int | None = None
    effective_time: str | None = None
    title: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "SPLHistoryEntry":
        return cls(
            set_id=item.get("setid"),
            spl_version=item.get("spl_version"),
            effective_time=item.get("effective_time") or item.get("published_date"),
            title=item.get("title"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "setId": self.set_id,
            "splVersion": self.spl_version,
            "effectiveTime": self.effective_time,
            "title": self.title,
        })


@dataclass
class SPLMedia:
    url: str
    type: str | None = None
    name: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "SPLMedia":
        return cls(
            url=item.get("url"),
            type=item.get("mime_type") or item.get("type"),
            name=item.get("name"),
        )

    def to_dict(self) -> dict:
        return _compact({"url": self.url, "type": self.type, "name": self.name})
