"""
tomgate/core/defaults.py - Canonical default TOM configuration

The one default configuration. Stored configurations that omit a section
are completed from here by config_resolver.ensure_tom_config().
"""

from typing import Any, Dict

from tomgate.core.models import TomConfig


# ==================== Display values for bypass results ====================

DISABLED_PHASE_NAME = "TOM Disabled"
DISABLED_PHASE_COLOR = "#6B7280"
UNPHASED_PHASE_NAME = "Unphased"
UNPHASED_PHASE_COLOR = "#D1D5DB"
UNMAPPED_PHASE_NAME = "Unmapped"
UNMAPPED_PHASE_COLOR = "#9CA3AF"


# ==================== Four-stage base taxonomy ====================

_BASE_PHASES = [
    {
        "id": "foundation",
        "name": "Foundation",
        "description": "Initial setup, governance alignment, and backlog grooming",
        "order": 1,
        "priority": 1,
        "color": "#3C2CDA",
        "mappedStatuses": ["Discovery", "Backlog", "On Hold"],
        "mappedDeployments": [],
        "manualOnly": False,
        "governanceGate": "ai_steerco",
        "expectedDurationWeeks": 8,
        "dataRequirements": {
            "entry": ["title", "description"],
            "exit": ["businessOwner", "processMapping", "scoringComplete"],
        },
        "phaseDefaults": {
            "responsibleAI": {
                "assessmentRequired": True,
                "recommendedCheckpoints": ["rai_screening"],
            },
        },
    },
    {
        "id": "strategic",
        "name": "Strategic",
        "description": "Active development, pilots, and value validation",
        "order": 2,
        "priority": 2,
        "color": "#1D86FF",
        "mappedStatuses": ["In-flight"],
        "mappedDeployments": ["PoC", "Pilot"],
        "manualOnly": False,
        "governanceGate": "working_group",
        "expectedDurationWeeks": 16,
        "dataRequirements": {
            "entry": ["scoringComplete"],
            "exit": ["raiAssessment", "investmentCost", "kpisSelected"],
        },
        "phaseDefaults": {
            "valueRealization": {"defaultKpiCategories": ["efficiency", "cost"]},
        },
    },
    {
        "id": "transition",
        "name": "Transition",
        "description": "Production deployment and capability transfer in progress",
        "order": 3,
        "priority": 3,
        "color": "#14CBDE",
        "mappedStatuses": ["Implemented"],
        "mappedDeployments": ["Production"],
        "manualOnly": False,
        "governanceGate": "business_owner",
        "expectedDurationWeeks": 12,
        "dataRequirements": {
            "entry": ["kpisSelected"],
            "exit": ["capabilityData"],
        },
        "phaseDefaults": {
            "capabilityTransition": {"targetIndependence": 50},
        },
    },
    {
        "id": "steady_state",
        "name": "Steady State",
        "description": "Full client ownership, optimization mode",
        "order": 4,
        "priority": 4,
        "color": "#07125E",
        "mappedStatuses": [],
        "mappedDeployments": [],
        "manualOnly": True,
        "governanceGate": "none",
        "expectedDurationWeeks": None,
        "dataRequirements": {
            "entry": ["capabilityData"],
            "exit": [],
        },
        "phaseDefaults": {
            "capabilityTransition": {"targetIndependence": 90},
        },
    },
]


# ==================== Six-stage enterprise taxonomy ====================

_ENTERPRISE_PHASES = [
    {
        "id": "ideation",
        "name": "Ideation",
        "description": "Early discovery, opportunity identification, and initial concept validation",
        "order": 1,
        "priority": 1,
        "color": "#9333EA",
        "mappedStatuses": ["Discovery"],
        "mappedDeployments": [],
        "manualOnly": False,
        "governanceGate": "innovation_board",
        "expectedDurationWeeks": 4,
        "dataRequirements": {
            "entry": ["title"],
            "exit": ["description", "businessOwner"],
        },
    },
    {
        "id": "assessment",
        "name": "Assessment",
        "description": "Detailed feasibility analysis, business case development, and resource planning",
        "order": 2,
        "priority": 2,
        "color": "#3C2CDA",
        "mappedStatuses": ["Backlog", "On Hold"],
        "mappedDeployments": [],
        "manualOnly": False,
        "governanceGate": "ai_steerco",
        "expectedDurationWeeks": 6,
        "dataRequirements": {
            "entry": ["businessOwner"],
            "exit": ["processMapping", "scoringComplete"],
        },
    },
    {
        "id": "foundation",
        "name": "Foundation",
        "description": "Technical infrastructure setup, team onboarding, and governance alignment",
        "order": 3,
        "priority": 3,
        "color": "#1D86FF",
        "mappedStatuses": ["In-flight"],
        "mappedDeployments": [],
        "manualOnly": False,
        "governanceGate": "ai_steerco",
        "expectedDurationWeeks": 8,
        "dataRequirements": {
            "entry": ["scoringComplete"],
            "exit": ["raiAssessment", "investmentCost"],
        },
    },
    {
        "id": "build",
        "name": "Build",
        "description": "Active development, integration, and pilot testing with controlled user groups",
        "order": 4,
        "priority": 4,
        "color": "#14CBDE",
        "mappedStatuses": [],
        "mappedDeployments": ["PoC", "Pilot"],
        "manualOnly": False,
        "governanceGate": "working_group",
        "expectedDurationWeeks": 12,
        "dataRequirements": {
            "entry": ["investmentCost"],
            "exit": ["kpisSelected"],
        },
    },
    {
        "id": "scale",
        "name": "Scale",
        "description": "Production deployment, user adoption, and capability transfer to client teams",
        "order": 5,
        "priority": 5,
        "color": "#10B981",
        "mappedStatuses": ["Implemented"],
        "mappedDeployments": ["Production"],
        "manualOnly": False,
        "governanceGate": "business_owner",
        "expectedDurationWeeks": 10,
        "dataRequirements": {
            "entry": ["kpisSelected"],
            "exit": ["capabilityData"],
        },
        "phaseDefaults": {
            "capabilityTransition": {"targetIndependence": 60},
        },
    },
    {
        "id": "operate",
        "name": "Operate",
        "description": "Full client ownership, continuous optimization, and value realization tracking",
        "order": 6,
        "priority": 6,
        "color": "#07125E",
        "mappedStatuses": [],
        "mappedDeployments": [],
        "manualOnly": True,
        "governanceGate": "none",
        "expectedDurationWeeks": None,
        "dataRequirements": {
            "entry": ["capabilityData"],
            "exit": [],
        },
    },
]


def _four_stage_profile(
    gates: Dict[str, Any],
    durations: Dict[str, Any],
    ratios: Dict[str, Any],
    tracks: list,
) -> Dict[str, Any]:
    phase_ids = ("foundation", "strategic", "transition", "steady_state")
    return {
        "phaseOverrides": {
            pid: {"governanceGate": gates[pid], "expectedDurationWeeks": durations[pid]}
            for pid in phase_ids
        },
        "staffingRatios": {
            pid: {"vendor": ratios[pid][0], "client": ratios[pid][1]}
            for pid in phase_ids
        },
        "deliveryTracks": tracks,
    }


DEFAULT_TOM_CONFIG_DATA: Dict[str, Any] = {
    "enabled": "false",
    "activePreset": "coe_led",
    "presets": {
        "centralized": {"name": "Centralized CoE", "description": "Single AI team owns all delivery"},
        "federated": {"name": "Federated Model", "description": "Business units own AI with central standards"},
        "hybrid": {"name": "Hybrid Model", "description": "Central platform, distributed execution"},
        "coe_led": {"name": "CoE-Led with Business Pods", "description": "CoE leads with embedded business pods"},
        "rsa_tom": {"name": "RSA Enterprise TOM", "description": "Six-phase enterprise model with extended governance"},
    },
    "presetProfiles": {
        "centralized": _four_stage_profile(
            gates={"foundation": "ai_steerco", "strategic": "ai_steerco",
                   "transition": "ai_steerco", "steady_state": "ai_steerco"},
            durations={"foundation": 12, "strategic": 20, "transition": 16, "steady_state": None},
            ratios={"foundation": (0.9, 0.1), "strategic": (0.8, 0.2),
                    "transition": (0.6, 0.4), "steady_state": (0.2, 0.8)},
            tracks=[
                {"id": "single_track", "name": "Unified Delivery",
                 "description": "All initiatives through central CoE pipeline"},
            ],
        ),
        "federated": _four_stage_profile(
            gates={"foundation": "working_group", "strategic": "business_owner",
                   "transition": "business_owner", "steady_state": "none"},
            durations={"foundation": 6, "strategic": 12, "transition": 8, "steady_state": None},
            ratios={"foundation": (0.4, 0.6), "strategic": (0.3, 0.7),
                    "transition": (0.2, 0.8), "steady_state": (0.1, 0.9)},
            tracks=[
                {"id": "bu_owned", "name": "Business Unit Owned",
                 "description": "Each business unit manages own AI initiatives"},
            ],
        ),
        "hybrid": _four_stage_profile(
            gates={"foundation": "working_group", "strategic": "working_group",
                   "transition": "business_owner", "steady_state": "none"},
            durations={"foundation": 6, "strategic": 14, "transition": 10, "steady_state": None},
            ratios={"foundation": (0.6, 0.4), "strategic": (0.5, 0.5),
                    "transition": (0.35, 0.65), "steady_state": (0.15, 0.85)},
            tracks=[
                {"id": "quick_wins", "name": "Quick Wins",
                 "description": "Fast-track high-impact, low-effort initiatives"},
                {"id": "strategic", "name": "Strategic Initiatives",
                 "description": "Long-term capability building and complex projects"},
            ],
        ),
        "coe_led": _four_stage_profile(
            gates={"foundation": "ai_steerco", "strategic": "working_group",
                   "transition": "business_owner", "steady_state": "none"},
            durations={"foundation": 8, "strategic": 16, "transition": 12, "steady_state": None},
            ratios={"foundation": (0.7, 0.3), "strategic": (0.55, 0.45),
                    "transition": (0.4, 0.6), "steady_state": (0.2, 0.8)},
            tracks=[
                {"id": "coe_track", "name": "CoE Pipeline",
                 "description": "Primary delivery through CoE with business pod support"},
                {"id": "pod_track", "name": "Business Pods",
                 "description": "Embedded teams handling domain-specific initiatives"},
            ],
        ),
        "rsa_tom": {
            "phaseOverrides": {
                "ideation": {"governanceGate": "innovation_board", "expectedDurationWeeks": 4},
                "assessment": {"governanceGate": "ai_steerco", "expectedDurationWeeks": 6},
                "foundation": {"governanceGate": "ai_steerco", "expectedDurationWeeks": 8},
                "build": {"governanceGate": "working_group", "expectedDurationWeeks": 12},
                "scale": {"governanceGate": "business_owner", "expectedDurationWeeks": 10},
                "operate": {"governanceGate": "none", "expectedDurationWeeks": None},
            },
            "staffingRatios": {
                "ideation": {"vendor": 0.3, "client": 0.7},
                "assessment": {"vendor": 0.5, "client": 0.5},
                "foundation": {"vendor": 0.75, "client": 0.25},
                "build": {"vendor": 0.8, "client": 0.2},
                "scale": {"vendor": 0.5, "client": 0.5},
                "operate": {"vendor": 0.15, "client": 0.85},
            },
            "deliveryTracks": [
                {"id": "innovation", "name": "Innovation Track",
                 "description": "Exploratory initiatives and proof of concepts"},
                {"id": "transformation", "name": "Transformation Track",
                 "description": "Large-scale enterprise transformation programs"},
                {"id": "enhancement", "name": "Enhancement Track",
                 "description": "Incremental improvements to existing capabilities"},
            ],
            "phases": _ENTERPRISE_PHASES,
        },
    },
    "phases": _BASE_PHASES,
    "governanceBodies": [
        {"id": "innovation_board", "name": "Innovation Board",
         "role": "Early-stage opportunity assessment and ideation approval", "cadence": "Weekly"},
        {"id": "ai_steerco", "name": "AI Steering Committee",
         "role": "Strategic oversight and investment decisions", "cadence": "Monthly"},
        {"id": "working_group", "name": "AI Working Group",
         "role": "Tactical execution and prioritization", "cadence": "Bi-weekly"},
        {"id": "business_owner", "name": "Business Owner Review",
         "role": "Value validation and adoption sign-off", "cadence": "Weekly"},
    ],
    "derivationRules": {
        "matchOrder": ["useCaseStatus", "deploymentStatus"],
        "fallbackBehavior": "lowestPriority",
        "nullDeploymentHandling": "ignoreInMatching",
    },
}


DEFAULT_TOM_CONFIG: TomConfig = TomConfig.model_validate(DEFAULT_TOM_CONFIG_DATA)
