"""Static reference tables: structure baselines, regional profiles, templates.

Loaded once at import and never mutated. ``ReferenceData`` bundles the
tables so alternative data sets (tests, future regions) can be passed to
``build_catalog`` without touching module state.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from hazardguide.core.types import (
    CityProfile,
    GuidanceTemplate,
    Hazard,
    Province,
    ProvinceProfile,
    StructureProfile,
    StructureType,
)

# Used when a city is unknown and its province has no known cities either.
FALLBACK_CITY_INDICES = {"labor_index": 0.66, "material_index": 0.72, "exposure_bias": 0.58}


@dataclass(frozen=True)
class ReferenceData:
    """Read-only lookup tables consumed by the corpus builder and scorer."""

    structures: Mapping[StructureType, StructureProfile]
    provinces: Mapping[Province, ProvinceProfile]
    cities: Mapping[str, CityProfile]
    templates: Mapping[Hazard, tuple[GuidanceTemplate, ...]]

    def resolve_city(self, province: Province, city: str) -> CityProfile:
        """Look up a city, averaging its province's cities when unknown."""
        direct = self.cities.get(city)
        if direct is not None:
            return direct

        siblings = [p for p in self.cities.values() if p.province == province]
        if not siblings:
            return CityProfile(province=province, **FALLBACK_CITY_INDICES)

        n = len(siblings)
        return CityProfile(
            province=province,
            labor_index=sum(p.labor_index for p in siblings) / n,
            material_index=sum(p.material_index for p in siblings) / n,
            exposure_bias=sum(p.exposure_bias for p in siblings) / n,
        )

    def cities_in(self, province: Province) -> list[str]:
        return [name for name, p in self.cities.items() if p.province == province]


# ---------------------------------------------------------------------------
# Structure baselines
# ---------------------------------------------------------------------------

_STRUCTURES = {
    StructureType.MASONRY_HOUSE: StructureProfile(
        materials=(
            "PCC 1:2:4 mix for plinth works",
            "10-12mm deformed steel bars",
            "Cement-sand plaster with waterproof additive",
            "Flood-resistant door/window frames",
            "Bitumen damp-proof course",
            "Grade-40 brick masonry with vertical ties",
        ),
        baseline_safety=(
            "Use PPE: helmet, gloves, and safety boots at all times.",
            "Isolate occupancy during structural intervention windows.",
            "Verify curing and inspection checkpoints before load application.",
        ),
        tags=frozenset({"masonry"}),
    ),
    StructureType.RC_FRAME: StructureProfile(
        materials=(
            "M25 concrete with controlled water-cement ratio",
            "Fe500 reinforcement with proper laps and hooks",
            "Column jacketing mortar (polymer modified)",
            "Expansion/construction joint sealant",
            "Anti-corrosion coating for exposed steel",
            "Non-shrink grout for base and bearing interfaces",
        ),
        baseline_safety=(
            "Provide temporary shoring and staged load transfer.",
            "Do not remove structural members without engineer sign-off.",
            "Use calibrated torque and rebar spacing checks.",
        ),
        tags=frozenset({"rc"}),
    ),
    StructureType.SCHOOL_BLOCK: StructureProfile(
        materials=(
            "Ductile detailing reinforcement kit",
            "Masonry confinement bands and ties",
            "Anchor bolts for non-structural elements",
            "Impact-resistant glazing film",
            "Emergency route and assembly signage package",
            "Lightweight but anchored ceiling systems",
        ),
        baseline_safety=(
            "Isolate student-use areas during structural works.",
            "Maintain two clear evacuation paths throughout construction.",
            "Execute school-hour/noise-safe work sequencing.",
        ),
        tags=frozenset({"school", "rc"}),
    ),
    StructureType.BRIDGE_APPROACH: StructureProfile(
        materials=(
            "Riprap/gabion toe protection",
            "Geotextile and geogrid reinforcement layers",
            "Subsurface drainage pipe with graded filter media",
            "Joint restrainer hardware",
            "Slope protection concrete blocks",
            "Asphalt transition slab retrofit package",
        ),
        baseline_safety=(
            "Implement traffic diversion and night reflectors.",
            "Stabilize embankment before heavy equipment entry.",
            "Monitor settlement and differential movement at each stage.",
        ),
        tags=frozenset({"bridge"}),
    ),
}


# ---------------------------------------------------------------------------
# Regional profiles
# ---------------------------------------------------------------------------

_PROVINCES = {
    Province.PUNJAB: ProvinceProfile(seismic_zone=2.3, flood_risk=0.72, monsoon_index=0.64, soil_instability=0.43, logistics=0.28),
    Province.SINDH: ProvinceProfile(seismic_zone=2.1, flood_risk=0.9, monsoon_index=0.76, soil_instability=0.51, logistics=0.34),
    Province.BALOCHISTAN: ProvinceProfile(seismic_zone=4.4, flood_risk=0.38, monsoon_index=0.33, soil_instability=0.56, logistics=0.57),
    Province.KP: ProvinceProfile(seismic_zone=4.1, flood_risk=0.67, monsoon_index=0.58, soil_instability=0.54, logistics=0.46),
    Province.GB: ProvinceProfile(seismic_zone=4.8, flood_risk=0.42, monsoon_index=0.4, soil_instability=0.62, logistics=0.63),
}

_CITIES = {
    "Lahore": CityProfile(Province.PUNJAB, labor_index=0.78, material_index=0.84, exposure_bias=0.52),
    "Rawalpindi": CityProfile(Province.PUNJAB, labor_index=0.74, material_index=0.8, exposure_bias=0.57),
    "Faisalabad": CityProfile(Province.PUNJAB, labor_index=0.67, material_index=0.74, exposure_bias=0.49),
    "Multan": CityProfile(Province.PUNJAB, labor_index=0.66, material_index=0.73, exposure_bias=0.56),
    "Karachi": CityProfile(Province.SINDH, labor_index=0.86, material_index=0.89, exposure_bias=0.74),
    "Hyderabad": CityProfile(Province.SINDH, labor_index=0.69, material_index=0.75, exposure_bias=0.7),
    "Sukkur": CityProfile(Province.SINDH, labor_index=0.67, material_index=0.72, exposure_bias=0.66),
    "Quetta": CityProfile(Province.BALOCHISTAN, labor_index=0.71, material_index=0.76, exposure_bias=0.61),
    "Gwadar": CityProfile(Province.BALOCHISTAN, labor_index=0.74, material_index=0.79, exposure_bias=0.58),
    "Turbat": CityProfile(Province.BALOCHISTAN, labor_index=0.63, material_index=0.69, exposure_bias=0.54),
    "Peshawar": CityProfile(Province.KP, labor_index=0.72, material_index=0.77, exposure_bias=0.67),
    "Mardan": CityProfile(Province.KP, labor_index=0.65, material_index=0.71, exposure_bias=0.61),
    "Swat": CityProfile(Province.KP, labor_index=0.67, material_index=0.73, exposure_bias=0.64),
    "Gilgit": CityProfile(Province.GB, labor_index=0.75, material_index=0.8, exposure_bias=0.62),
    "Skardu": CityProfile(Province.GB, labor_index=0.78, material_index=0.84, exposure_bias=0.66),
    "Hunza": CityProfile(Province.GB, labor_index=0.76, material_index=0.82, exposure_bias=0.64),
}


# ---------------------------------------------------------------------------
# Guidance template library
# ---------------------------------------------------------------------------

def _template(id, title, description, key_checks, tags, base_score):
    return GuidanceTemplate(
        id=id,
        title=title,
        description=description,
        key_checks=tuple(key_checks),
        tags=frozenset(tags),
        base_score=base_score,
    )


_FLOOD_TEMPLATES = (
    _template(
        "flood-base-level",
        "Set Flood Design Level and Drainage Geometry",
        "Establish design flood level from local historical high-water marks, then set finished "
        "floor/plinth above this benchmark and force positive drainage away from structural elements.",
        ["Flood benchmark marked at all corners", "Drainage slope verified with level",
         "No trapped water pocket near footing"],
        ["all", "flood", "drainage"],
        0.95,
    ),
    _template(
        "flood-plinth",
        "Raise Plinth and Protect Foundation Edge",
        "Construct raised plinth with layered compaction and provide toe/edge erosion protection to "
        "avoid undermining during prolonged monsoon saturation.",
        ["Compaction in controlled layers", "DPC continuity on full perimeter",
         "Erosion protection completed before monsoon"],
        ["all", "flood", "masonry", "rc"],
        0.92,
    ),
    _template(
        "flood-moisture",
        "Seal Moisture and Backflow Entry Paths",
        "Apply damp-proofing, wall-junction sealing, and backflow-prevention at service nodes so "
        "recurrent inundation does not convert into long-term structural deterioration.",
        ["Wall-floor junctions sealed", "Service penetrations sealed", "Backflow valve tested under flow"],
        ["all", "flood", "moisture", "utilities"],
        0.9,
    ),
    _template(
        "flood-utilities",
        "Elevate Critical Utilities and Recovery Access",
        "Relocate panels, pumps, and communication nodes above expected inundation depth and maintain "
        "safe access route so post-flood restart time is reduced.",
        ["Electrical and communication panel elevation validated", "Pump and backup isolation checked",
         "Safe access route remains usable"],
        ["all", "flood", "utilities", "ops"],
        0.91,
    ),
    _template(
        "flood-protocol",
        "Deploy Monsoon Readiness and Post-Flood QA Protocol",
        "Prepare pre-event inspection sheets and post-event rapid structural screening to prevent "
        "hidden damage from accumulating between flood cycles.",
        ["Pre-monsoon checklist approved", "Emergency material kit stocked", "Post-flood screening team assigned"],
        ["all", "flood", "ops"],
        0.86,
    ),
)

_EARTHQUAKE_TEMPLATES = (
    _template(
        "eq-loadpath",
        "Establish Continuous Lateral Load Path",
        "Strengthen continuity from diaphragm to foundation so seismic forces are transmitted through "
        "ductile members rather than brittle local failure points.",
        ["Critical joints detailed and mapped", "Collector and transfer zones strengthened",
         "No unresolved soft-storey mechanism"],
        ["all", "earthquake", "rc", "school"],
        0.96,
    ),
    _template(
        "eq-jacketing",
        "Confinement and Jacketing at Critical Members",
        "Target highly stressed columns, wall piers, and short columns with confinement and jacketing "
        "to increase ductility and delay brittle collapse.",
        ["Confinement spacing as designed", "Surface prep and bond quality passed",
         "Jacketing alignment and section verified"],
        ["all", "earthquake", "rc", "school", "bridge"],
        0.94,
    ),
    _template(
        "eq-nonstruct",
        "Anchor Non-Structural and Lifeline Components",
        "Restrain parapets, ceilings, utility lines, and equipment to reduce life-safety injuries and "
        "maintain emergency functionality after shaking.",
        ["Parapets and ceilings anchored", "Utility restraints installed", "Critical equipment anchors pull-tested"],
        ["all", "earthquake", "safety", "utilities"],
        0.9,
    ),
    _template(
        "eq-foundation",
        "Improve Foundation-Soil Interaction",
        "Address weak soil pockets and connection detailing to control settlement and differential "
        "movement under cyclic seismic loading.",
        ["Weak pockets treated and logged", "Foundation tie details complete", "No active widening crack at base"],
        ["all", "earthquake", "foundation"],
        0.89,
    ),
    _template(
        "eq-protocol",
        "Implement Seismic QA and Occupancy Decision Protocol",
        "Run stage-wise QA and define post-event occupancy criteria so asset reopening is "
        "evidence-based and not judgment-only.",
        ["Stage QA sheets signed", "Inspection responsibility matrix published",
         "Occupancy criteria documented and briefed"],
        ["all", "earthquake", "ops"],
        0.85,
    ),
)


DEFAULT_REFERENCE = ReferenceData(
    structures=MappingProxyType(_STRUCTURES),
    provinces=MappingProxyType(_PROVINCES),
    cities=MappingProxyType(_CITIES),
    templates=MappingProxyType({
        Hazard.FLOOD: _FLOOD_TEMPLATES,
        Hazard.EARTHQUAKE: _EARTHQUAKE_TEMPLATES,
    }),
)
