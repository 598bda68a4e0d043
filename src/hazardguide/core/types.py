"""Domain types for the hazardguide construction guidance engine.

All shared enums and dataclasses live here to prevent circular imports
and establish a single source of truth for the domain model. Every other
module imports from here.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Categorical inputs. parse() never raises; unknown input maps to a default
# ---------------------------------------------------------------------------

class Hazard(str, Enum):
    """Disaster type the guidance is planned for."""

    FLOOD = "flood"
    EARTHQUAKE = "earthquake"

    @classmethod
    def parse(cls, value: object) -> "Hazard":
        """Return the matching hazard, or FLOOD for anything unrecognised."""
        return _parse_enum(cls, value, cls.FLOOD)


class Province(str, Enum):
    """Pakistani provinces and regions covered by the reference tables."""

    PUNJAB = "Punjab"
    SINDH = "Sindh"
    BALOCHISTAN = "Balochistan"
    KP = "KP"
    GB = "GB"

    @classmethod
    def parse(cls, value: object) -> "Province":
        """Return the matching province, or PUNJAB for anything unrecognised."""
        return _parse_enum(cls, value, cls.PUNJAB)


class StructureType(str, Enum):
    """Asset classes with their own materials and safety baselines."""

    MASONRY_HOUSE = "Masonry House"
    RC_FRAME = "RC Frame"
    SCHOOL_BLOCK = "School Block"
    BRIDGE_APPROACH = "Bridge Approach"

    @classmethod
    def parse(cls, value: object) -> "StructureType":
        """Return the matching structure type, or MASONRY_HOUSE otherwise."""
        return _parse_enum(cls, value, cls.MASONRY_HOUSE)


def _parse_enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return default


# Integer codes used as the first two feature dimensions.
STRUCTURE_CODES: dict[StructureType, int] = {
    StructureType.MASONRY_HOUSE: 0,
    StructureType.RC_FRAME: 1,
    StructureType.SCHOOL_BLOCK: 2,
    StructureType.BRIDGE_APPROACH: 3,
}
HAZARD_CODES: dict[Hazard, int] = {Hazard.FLOOD: 0, Hazard.EARTHQUAKE: 1}


# ---------------------------------------------------------------------------
# Predicted classes
# ---------------------------------------------------------------------------

class Scope(str, Enum):
    """Recommended intervention intensity."""

    BASIC = "basic"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"


class Damage(str, Enum):
    """Assessed risk / damage concentration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ---------------------------------------------------------------------------
# Reference profiles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StructureProfile:
    """Recommended materials and baseline safety instructions for a structure type."""

    materials: tuple[str, ...]
    baseline_safety: tuple[str, ...]
    tags: frozenset[str]


@dataclass(frozen=True)
class ProvinceProfile:
    """Regional hazard indices. All in [0, 1] except seismic_zone."""

    seismic_zone: float
    flood_risk: float
    monsoon_index: float
    soil_instability: float
    logistics: float


@dataclass(frozen=True)
class CityProfile:
    """City-level cost and exposure indices."""

    province: Province
    labor_index: float
    material_index: float
    exposure_bias: float


@dataclass(frozen=True)
class GuidanceTemplate:
    """A reusable mitigation step, scored against each query."""

    id: str
    title: str
    description: str
    key_checks: tuple[str, ...]
    tags: frozenset[str]
    base_score: float


# ---------------------------------------------------------------------------
# Corpus and inference
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QuerySample:
    """The feature tuple shared by training cases and live queries."""

    structure_type: StructureType
    hazard: Hazard
    severity: float
    affected_area: float
    seismic_zone: float
    flood_risk: float
    monsoon_index: float
    soil_instability: float
    logistics: float
    labor_index: float
    material_index: float
    exposure_bias: float

    def feature_vector(self) -> list[float]:
        """12-dimension feature vector in the fixed corpus order."""
        return [
            float(STRUCTURE_CODES[self.structure_type]),
            float(HAZARD_CODES[self.hazard]),
            self.severity,
            self.affected_area,
            self.seismic_zone,
            self.flood_risk,
            self.monsoon_index,
            self.soil_instability,
            self.logistics,
            self.labor_index,
            self.material_index,
            self.exposure_bias,
        ]


@dataclass(frozen=True)
class TrainingCase:
    """One labelled synthetic sample."""

    index: int
    city: str
    province: Province
    sample: QuerySample
    predicted_scope: Scope
    predicted_damage: Damage
    depth_score: float


@dataclass(frozen=True)
class InferenceResult:
    """Nearest-neighbour prediction for a single query."""

    sample: QuerySample
    predicted_scope: Scope
    predicted_damage: Damage
    depth_score: float
    evidence_strength: float


# ---------------------------------------------------------------------------
# Engine output
# ---------------------------------------------------------------------------

@dataclass
class GuidanceStep:
    """A ranked, location-enriched guidance step."""

    title: str
    description: str
    key_checks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"title": self.title, "description": self.description, "keyChecks": list(self.key_checks)}


@dataclass
class GuidanceResult:
    """Full guidance package: the primary output of generate_guidance()."""

    summary: str
    materials: list[str] = field(default_factory=list)
    safety: list[str] = field(default_factory=list)
    steps: list[GuidanceStep] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "materials": list(self.materials),
            "safety": list(self.safety),
            "steps": [step.to_dict() for step in self.steps],
        }


@dataclass
class StepDiagram:
    """An annotated SVG illustration for one guidance step."""

    step_title: str
    prompt: str
    image_data_url: str

    def to_dict(self) -> dict:
        data = asdict(self)
        return {"stepTitle": data["step_title"], "prompt": data["prompt"], "imageDataUrl": data["image_data_url"]}
