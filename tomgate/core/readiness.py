"""
tomgate/core/readiness.py - Phase data readiness

Checks a work item's data against the entry and exit requirements a
phase declares. Requirements are referenced by name from configuration
and resolved against the fixed DATA_REQUIREMENTS table below. A name
missing from the table is never satisfied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging
import math

from tomgate.core.models import TomConfig, TomPhase, WorkItemSnapshot

logger = logging.getLogger(__name__)


# ==================== Requirement checks ====================

VALUE_SCORE_FIELDS: Tuple[str, ...] = (
    "revenue_impact",
    "cost_savings",
    "risk_reduction",
    "broker_partner_experience",
    "strategic_fit",
)

FEASIBILITY_SCORE_FIELDS: Tuple[str, ...] = (
    "data_readiness",
    "technical_complexity",
    "adoption_readiness",
)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_positive(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def _any_score(item: WorkItemSnapshot, fields: Tuple[str, ...]) -> bool:
    return any(_is_positive(getattr(item, name)) for name in fields)


def _check_scoring(item: WorkItemSnapshot) -> bool:
    """At least one value score and one feasibility score."""
    return _any_score(item, VALUE_SCORE_FIELDS) and _any_score(item, FEASIBILITY_SCORE_FIELDS)


def _check_process_mapping(item: WorkItemSnapshot) -> bool:
    return bool(item.processes) or bool(item.activities)


def _check_capability_data(item: WorkItemSnapshot) -> bool:
    return item.target_independence is not None and item.current_independence is not None


@dataclass(frozen=True)
class DataRequirement:
    """
    A named data-completeness check.

    tab is the work-item form section where the missing data is entered.
    """
    name: str
    label: str
    tab: str
    check_fn: Callable[[WorkItemSnapshot], bool]

    def evaluate(self, item: WorkItemSnapshot) -> bool:
        return bool(self.check_fn(item))


DATA_REQUIREMENTS: Dict[str, DataRequirement] = {
    req.name: req
    for req in (
        DataRequirement(
            name="title",
            label="Title",
            tab="basic",
            check_fn=lambda item: _has_text(item.title),
        ),
        DataRequirement(
            name="description",
            label="Description",
            tab="basic",
            check_fn=lambda item: _has_text(item.description),
        ),
        DataRequirement(
            name="businessOwner",
            label="Primary business owner",
            tab="business",
            check_fn=lambda item: _has_text(item.primary_business_owner),
        ),
        DataRequirement(
            name="processMapping",
            label="Process mapping",
            tab="business",
            check_fn=_check_process_mapping,
        ),
        DataRequirement(
            name="scoringComplete",
            label="Value and feasibility scoring",
            tab="assessment",
            check_fn=_check_scoring,
        ),
        DataRequirement(
            name="raiAssessment",
            label="Responsible AI assessment",
            tab="implementation",
            check_fn=lambda item: item.rai_questionnaire_complete is True,
        ),
        DataRequirement(
            name="investmentCost",
            label="Investment cost estimate",
            tab="implementation",
            check_fn=lambda item: _is_positive(item.investment_cost_gbp),
        ),
        DataRequirement(
            name="kpisSelected",
            label="Value KPIs selected",
            tab="implementation",
            check_fn=lambda item: bool(item.selected_kpis),
        ),
        DataRequirement(
            name="capabilityData",
            label="Capability transition data",
            tab="implementation",
            check_fn=_check_capability_data,
        ),
    )
}


def check_data_requirement(requirement: str, item: WorkItemSnapshot) -> bool:
    """
    Evaluate one named requirement against an item.

    Unknown names are unsatisfied.
    """
    definition = DATA_REQUIREMENTS.get(requirement)
    if definition is None:
        logger.warning(f"Unknown data requirement '{requirement}' treated as unmet")
        return False
    return definition.evaluate(item)


def get_requirement_label(requirement: str) -> str:
    """Human-readable label, or the name itself when unknown."""
    definition = DATA_REQUIREMENTS.get(requirement)
    return definition.label if definition is not None else requirement


def get_requirement_tab(requirement: str) -> Optional[str]:
    definition = DATA_REQUIREMENTS.get(requirement)
    return definition.tab if definition is not None else None


def partition_requirements(
    requirements: List[str],
    item: WorkItemSnapshot,
) -> Tuple[List[str], List[str]]:
    """Split requirement names into (met, pending), keeping order."""
    met: List[str] = []
    pending: List[str] = []
    for requirement in requirements:
        if check_data_requirement(requirement, item):
            met.append(requirement)
        else:
            pending.append(requirement)
    return met, pending


def readiness_percent(met_count: int, total_count: int) -> int:
    """Percentage met, rounded half up. 100 when there is nothing to meet."""
    if total_count == 0:
        return 100
    return int(math.floor(100 * met_count / total_count + 0.5))


# ==================== Phase readiness ====================

@dataclass
class PhaseReadinessResult:
    """Readiness of an item for its current phase."""

    current_phase: Optional[TomPhase] = None
    next_phase: Optional[TomPhase] = None
    entry_requirements_met: List[str] = field(default_factory=list)
    entry_requirements_pending: List[str] = field(default_factory=list)
    exit_requirements_met: List[str] = field(default_factory=list)
    exit_requirements_pending: List[str] = field(default_factory=list)
    readiness_percent: int = 0
    can_progress: bool = False
    recommended_tab: Optional[str] = None

    @property
    def pending_requirements(self) -> List[str]:
        return self.entry_requirements_pending + self.exit_requirements_pending

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentPhase": self.current_phase.to_dict() if self.current_phase else None,
            "nextPhase": self.next_phase.to_dict() if self.next_phase else None,
            "entryRequirementsMet": list(self.entry_requirements_met),
            "entryRequirementsPending": list(self.entry_requirements_pending),
            "exitRequirementsMet": list(self.exit_requirements_met),
            "exitRequirementsPending": list(self.exit_requirements_pending),
            "readinessPercent": self.readiness_percent,
            "canProgress": self.can_progress,
            "recommendedTab": self.recommended_tab,
        }


def calculate_phase_readiness(
    item: WorkItemSnapshot,
    current_phase_id: Optional[str],
    config: TomConfig,
) -> PhaseReadinessResult:
    """
    Evaluate an item against its current phase's requirements.

    Args:
        item: Work item data snapshot
        current_phase_id: Derived phase id (may be a bypass state)
        config: Effective configuration

    Returns:
        PhaseReadinessResult. With no configured current phase the
        result is empty and cannot progress.
    """
    current = config.get_phase(current_phase_id)
    if current is None:
        return PhaseReadinessResult()

    next_phase = config.get_phase_by_order(current.order + 1)

    entry_met, entry_pending = partition_requirements(current.data_requirements.entry, item)
    exit_met, exit_pending = partition_requirements(current.data_requirements.exit, item)

    met_count = len(entry_met) + len(exit_met)
    total_count = met_count + len(entry_pending) + len(exit_pending)

    recommended_tab = None
    for requirement in entry_pending + exit_pending:
        recommended_tab = get_requirement_tab(requirement)
        if recommended_tab is not None:
            break

    return PhaseReadinessResult(
        current_phase=current,
        next_phase=next_phase,
        entry_requirements_met=entry_met,
        entry_requirements_pending=entry_pending,
        exit_requirements_met=exit_met,
        exit_requirements_pending=exit_pending,
        readiness_percent=readiness_percent(met_count, total_count),
        can_progress=not exit_pending,
        recommended_tab=recommended_tab,
    )
