"""
tomgate Core Module

Contains the derivation engine:
- Models: TOM configuration aggregate and work-item inputs
- Config resolution: defaults, engagement pinning, preset merging
- Phase derivation: status/deployment/override/gate -> phase
- Readiness: entry/exit data requirements per phase
- Transitions: before/after comparison, summaries, update helpers
"""

from tomgate.core.enums import (
    BYPASS_PHASE_IDS,
    BypassPhase,
    MatchedBy,
    is_bypass_phase,
)
from tomgate.core.models import (
    DataRequirements,
    DeliveryTrack,
    GovernanceGateInput,
    PhaseDefaults,
    PhaseOverride,
    PhaseSignals,
    StaffingRatio,
    TomConfig,
    TomDerivationRules,
    TomGovernanceBody,
    TomPhase,
    TomPreset,
    TomPresetProfile,
    WorkItemSnapshot,
)
from tomgate.core.defaults import DEFAULT_TOM_CONFIG
from tomgate.core.config_resolver import (
    apply_engagement_context,
    ensure_tom_config,
    get_active_preset_profile,
    merge_preset_profile,
    resolve_effective_config,
)
from tomgate.core.phase_deriver import (
    DerivedPhaseResult,
    derive_phase,
    derive_phase_for,
    get_entry_phase,
)
from tomgate.core.readiness import (
    DATA_REQUIREMENTS,
    DataRequirement,
    PhaseReadinessResult,
    calculate_phase_readiness,
    check_data_requirement,
    get_requirement_label,
)
from tomgate.core.transitions import (
    PhaseTransitionDecision,
    PhaseTransitionInfo,
    apply_phase_defaults,
    calculate_phase_summary,
    check_phase_transition_requirements,
    detect_phase_transition,
    should_show_phase_transition_warning,
    should_trigger_phase_derivation,
)

__all__ = [
    # Enums
    "BYPASS_PHASE_IDS",
    "BypassPhase",
    "MatchedBy",
    "is_bypass_phase",
    # Models
    "DataRequirements",
    "DeliveryTrack",
    "GovernanceGateInput",
    "PhaseDefaults",
    "PhaseOverride",
    "PhaseSignals",
    "StaffingRatio",
    "TomConfig",
    "TomDerivationRules",
    "TomGovernanceBody",
    "TomPhase",
    "TomPreset",
    "TomPresetProfile",
    "WorkItemSnapshot",
    "DEFAULT_TOM_CONFIG",
    # Config resolution
    "apply_engagement_context",
    "ensure_tom_config",
    "get_active_preset_profile",
    "merge_preset_profile",
    "resolve_effective_config",
    # Derivation
    "DerivedPhaseResult",
    "derive_phase",
    "derive_phase_for",
    "get_entry_phase",
    # Readiness
    "DATA_REQUIREMENTS",
    "DataRequirement",
    "PhaseReadinessResult",
    "calculate_phase_readiness",
    "check_data_requirement",
    "get_requirement_label",
    # Transitions
    "PhaseTransitionDecision",
    "PhaseTransitionInfo",
    "apply_phase_defaults",
    "calculate_phase_summary",
    "check_phase_transition_requirements",
    "detect_phase_transition",
    "should_show_phase_transition_warning",
    "should_trigger_phase_derivation",
]
