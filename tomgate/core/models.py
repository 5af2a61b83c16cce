"""
tomgate/core/models.py - TOM configuration and work-item models

Pydantic models for the persisted TOM configuration aggregate and the
work-item fields the engine reads. Attribute names are snake_case; the
serialized (alias) names are the camelCase keys used by storage, so a
stored record validates and dumps back to the same shape.

All models are frozen. The engine never mutates its inputs; derived
configurations are produced with model_copy().
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel


class TomModel(BaseModel):
    """Base for all TOM models: camelCase aliases, immutable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted camelCase shape."""
        return self.model_dump(by_alias=True, mode="json")


def check_unique_phase_ids(phases: Optional[List["TomPhase"]]) -> Optional[List["TomPhase"]]:
    """Raise ValueError if a phase list repeats an id."""
    if phases is None:
        return phases
    seen = set()
    duplicates = []
    for phase in phases:
        if phase.id in seen:
            duplicates.append(phase.id)
        seen.add(phase.id)
    if duplicates:
        raise ValueError(f"Duplicate phase ids: {', '.join(sorted(set(duplicates)))}")
    return phases


# =============================================================================
# PHASE DEFINITION
# =============================================================================

class DataRequirements(TomModel):
    """Named requirements checked on entry to and exit from a phase."""

    entry: List[str] = Field(default_factory=list)
    exit: List[str] = Field(default_factory=list)


class StaffingRatio(TomModel):
    """Vendor/client staffing split as fractions."""

    vendor: float = Field(default=0.5, ge=0.0, le=1.0)
    client: float = Field(default=0.5, ge=0.0, le=1.0)


class CapabilityTransitionDefaults(TomModel):
    vendor_fts: Optional[float] = Field(default=None, alias="hexawareFts")
    client_fts: Optional[float] = None
    independence_fts: Optional[float] = None
    target_independence: Optional[float] = None
    current_independence: Optional[float] = None


class ValueRealizationDefaults(TomModel):
    expected_value_range_min: Optional[float] = None
    expected_value_range_max: Optional[float] = None
    default_kpi_categories: List[str] = Field(default_factory=list)


class ResponsibleAIDefaults(TomModel):
    risk_tier: Optional[str] = None
    assessment_required: bool = False
    recommended_checkpoints: List[str] = Field(default_factory=list)


class PhaseDefaults(TomModel):
    """
    Values copied into a work item when it enters a phase.

    Not used by derivation; see transitions.apply_phase_defaults().
    """

    capability_transition: CapabilityTransitionDefaults = Field(
        default_factory=CapabilityTransitionDefaults
    )
    value_realization: ValueRealizationDefaults = Field(
        default_factory=ValueRealizationDefaults
    )
    responsible_ai: ResponsibleAIDefaults = Field(
        default_factory=ResponsibleAIDefaults, alias="responsibleAI"
    )


class TomPhase(TomModel):
    """
    A named lifecycle stage.

    order defines the canonical sequence (next phase, entry phase);
    priority breaks ties when several phases map the same status, lower
    wins. A manual_only phase is reachable only through an override.
    """

    id: str
    name: str
    description: str = ""
    order: int
    priority: int
    color: str = "#6B7280"
    mapped_statuses: List[str] = Field(default_factory=list)
    mapped_deployments: List[str] = Field(default_factory=list)
    manual_only: bool = False
    governance_gate: str = "none"
    expected_duration_weeks: Optional[int] = None
    data_requirements: DataRequirements = Field(default_factory=DataRequirements)
    phase_defaults: Optional[PhaseDefaults] = None
    staffing_ratio: Optional[StaffingRatio] = None


# =============================================================================
# PRESETS
# =============================================================================

class PhaseOverride(TomModel):
    """
    Per-phase preset override.

    An explicit expectedDurationWeeks of null clears the duration; an
    absent key leaves it alone. governanceGate only applies when set to
    a value. Unset keys are left out when serialized so the distinction
    survives a round trip.
    """

    governance_gate: Optional[str] = None
    expected_duration_weeks: Optional[int] = None

    @property
    def overrides_duration(self) -> bool:
        return "expected_duration_weeks" in self.model_fields_set

    @model_serializer(mode="wrap")
    def drop_unset_keys(self, handler):
        data = handler(self)
        for name in type(self).model_fields:
            if name not in self.model_fields_set:
                data.pop(name, None)
                data.pop(to_camel(name), None)
        return data


class TomPreset(TomModel):
    """Preset display metadata."""

    name: str
    description: str = ""


class DeliveryTrack(TomModel):
    id: str
    name: str
    description: str = ""


class TomPresetProfile(TomModel):
    """
    Configuration variant selected by activePreset.

    When phases is present it replaces the base phase list entirely.
    """

    phase_overrides: Dict[str, PhaseOverride] = Field(default_factory=dict)
    staffing_ratios: Dict[str, StaffingRatio] = Field(default_factory=dict)
    delivery_tracks: List[DeliveryTrack] = Field(default_factory=list)
    phases: Optional[List[TomPhase]] = None

    @field_validator("phases")
    @classmethod
    def check_phase_ids(cls, phases):
        return check_unique_phase_ids(phases)


class TomGovernanceBody(TomModel):
    id: str
    name: str
    role: str = ""
    cadence: str = ""


class TomDerivationRules(TomModel):
    """Declared rules. Informational; derivation follows a fixed sequence."""

    match_order: List[str] = Field(
        default_factory=lambda: ["useCaseStatus", "deploymentStatus"]
    )
    fallback_behavior: str = "lowestPriority"
    null_deployment_handling: str = "ignoreInMatching"


# =============================================================================
# ROOT AGGREGATE
# =============================================================================

class TomConfig(TomModel):
    """
    Root TOM configuration.

    Storage keeps enabled as the string "true"/"false"; both that and a
    bool are accepted, and it serializes back to the string form.

    The order of phases is significant: status matching and deployment
    tie-breaking walk the list in declared order.
    """

    enabled: bool = False
    active_preset: str = ""
    presets: Dict[str, TomPreset] = Field(default_factory=dict)
    preset_profiles: Dict[str, TomPresetProfile] = Field(default_factory=dict)
    phases: List[TomPhase] = Field(default_factory=list)
    governance_bodies: List[TomGovernanceBody] = Field(default_factory=list)
    derivation_rules: TomDerivationRules = Field(default_factory=TomDerivationRules)

    @field_validator("phases")
    @classmethod
    def check_phase_ids(cls, phases):
        return check_unique_phase_ids(phases)

    @field_validator("enabled", mode="before")
    @classmethod
    def parse_enabled(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @field_serializer("enabled")
    def serialize_enabled(self, value: bool) -> str:
        return "true" if value else "false"

    def get_phase(self, phase_id: Optional[str]) -> Optional[TomPhase]:
        """Find a phase by id, or None."""
        if not phase_id:
            return None
        for phase in self.phases:
            if phase.id == phase_id:
                return phase
        return None

    def get_phase_by_order(self, order: int) -> Optional[TomPhase]:
        for phase in self.phases:
            if phase.order == order:
                return phase
        return None

    def phase_ids(self) -> List[str]:
        return [phase.id for phase in self.phases]


# =============================================================================
# WORK-ITEM INPUTS
# =============================================================================

class GovernanceGateInput(TomModel):
    """
    Governance gate outcomes for a work item.

    Only operating_model_passed gates phase entry. The intake and
    responsible-AI flags are carried for callers and audit.
    """

    operating_model_passed: bool
    intake_passed: Optional[bool] = None
    rai_passed: Optional[bool] = None


class PhaseSignals(TomModel):
    """The status/deployment/override triple a phase is derived from."""

    use_case_status: Optional[str] = None
    deployment_status: Optional[str] = None
    tom_phase_override: Optional[str] = None


class WorkItemSnapshot(TomModel):
    """Work-item fields read by the data requirement checks."""

    title: Optional[str] = None
    description: Optional[str] = None
    primary_business_owner: Optional[str] = None
    processes: List[str] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)

    # Value scores
    revenue_impact: Optional[float] = None
    cost_savings: Optional[float] = None
    risk_reduction: Optional[float] = None
    broker_partner_experience: Optional[float] = None
    strategic_fit: Optional[float] = None

    # Feasibility scores
    data_readiness: Optional[float] = None
    technical_complexity: Optional[float] = None
    adoption_readiness: Optional[float] = None

    rai_questionnaire_complete: Optional[bool] = None
    investment_cost_gbp: Optional[float] = None
    selected_kpis: List[str] = Field(default_factory=list)
    target_independence: Optional[float] = None
    current_independence: Optional[float] = None

    @field_validator("processes", "activities", "selected_kpis", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_work_item(cls, record: Mapping[str, Any]) -> "WorkItemSnapshot":
        """
        Build a snapshot from a full stored work-item record.

        KPIs and independence figures live in nested blocks on the record.
        """
        value_realization = record.get("valueRealization") or {}
        capability = record.get("capabilityTransition") or {}
        target = capability.get("selfSufficiencyTarget") or {}

        data = {
            key: record.get(key)
            for key in (
                "title",
                "description",
                "primaryBusinessOwner",
                "processes",
                "activities",
                "revenueImpact",
                "costSavings",
                "riskReduction",
                "brokerPartnerExperience",
                "strategicFit",
                "dataReadiness",
                "technicalComplexity",
                "adoptionReadiness",
                "raiQuestionnaireComplete",
                "investmentCostGbp",
            )
        }
        data["selectedKpis"] = value_realization.get("selectedKpis")
        data["targetIndependence"] = target.get("targetIndependence")
        data["currentIndependence"] = capability.get("independencePercentage")
        return cls.model_validate(data)
