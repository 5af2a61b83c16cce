"""
tomgate/core/transitions.py - Phase transition detection

Compares the phase an item occupies before and after a proposed change
and reports whether leaving the current phase skips required data.
Also holds the portfolio summary and the helpers a persistence layer
uses around a status update (justification check, phase defaults,
derivation triggers). None of these apply a change; they only report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union
import logging

from tomgate.core.enums import BYPASS_PHASE_IDS, is_bypass_phase
from tomgate.core.models import (
    GovernanceGateInput,
    PhaseSignals,
    TomConfig,
    WorkItemSnapshot,
)
from tomgate.core.phase_deriver import DerivedPhaseResult, derive_phase_for
from tomgate.core.readiness import get_requirement_label, partition_requirements

logger = logging.getLogger(__name__)


# Work-item fields whose change can move an item to another phase
PHASE_SIGNAL_FIELDS = ("useCaseStatus", "deploymentStatus", "tomPhaseOverride")

# Work-item blocks that receive phase defaults
PHASE_DEFAULT_BLOCKS = ("capabilityTransition", "valueRealization", "responsibleAI")


# ==================== Transition detection ====================

@dataclass
class PhaseTransitionInfo:
    """Outcome of comparing the before and after phase of a change."""

    has_transition: bool = False
    from_phase: Optional[DerivedPhaseResult] = None
    to_phase: Optional[DerivedPhaseResult] = None
    from_phase_id: Optional[str] = None
    to_phase_id: Optional[str] = None
    exit_requirements_met: List[str] = field(default_factory=list)
    exit_requirements_pending: List[str] = field(default_factory=list)
    can_progress_without_warning: bool = True
    is_exiting_unphased_or_disabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasTransition": self.has_transition,
            "fromPhase": self.from_phase.to_dict() if self.from_phase else None,
            "toPhase": self.to_phase.to_dict() if self.to_phase else None,
            "fromPhaseId": self.from_phase_id,
            "toPhaseId": self.to_phase_id,
            "exitRequirementsMet": list(self.exit_requirements_met),
            "exitRequirementsPending": list(self.exit_requirements_pending),
            "canProgressWithoutWarning": self.can_progress_without_warning,
            "isExitingUnphasedOrDisabled": self.is_exiting_unphased_or_disabled,
        }


def detect_phase_transition(
    before: PhaseSignals,
    after: PhaseSignals,
    item: WorkItemSnapshot,
    governance_gates: Optional[GovernanceGateInput],
    config: TomConfig,
) -> PhaseTransitionInfo:
    """
    Detect whether a proposed change moves an item to another phase.

    Both sides are derived with the same configuration and gate state.
    When the phase changes and the item is leaving a real phase, that
    phase's exit requirements are checked against the item.

    Args:
        before: Current status/deployment/override
        after: Proposed status/deployment/override
        item: Work item data snapshot
        governance_gates: Gate outcomes, or None
        config: Effective configuration
    """
    from_result = derive_phase_for(before, governance_gates, config)
    to_result = derive_phase_for(after, governance_gates, config)

    info = PhaseTransitionInfo(
        from_phase=from_result,
        to_phase=to_result,
        from_phase_id=from_result.id,
        to_phase_id=to_result.id,
    )

    if from_result.id == to_result.id:
        return info

    info.has_transition = True

    if from_result.is_bypass:
        info.is_exiting_unphased_or_disabled = True
        info.can_progress_without_warning = True
        return info

    departing = config.get_phase(from_result.id)
    exit_requirements = departing.data_requirements.exit if departing is not None else []
    met, pending = partition_requirements(exit_requirements, item)

    info.exit_requirements_met = met
    info.exit_requirements_pending = pending
    info.can_progress_without_warning = not pending

    logger.debug(
        f"Phase transition {from_result.id} -> {to_result.id}: "
        f"{len(pending)} exit requirement(s) pending"
    )
    return info


def should_show_phase_transition_warning(info: PhaseTransitionInfo) -> bool:
    """True when a change leaves a real phase with exit requirements pending."""
    return (
        info.has_transition
        and not info.is_exiting_unphased_or_disabled
        and not info.can_progress_without_warning
    )


# ==================== Portfolio summary ====================

def _as_signals(item: Union[PhaseSignals, Mapping[str, Any]]) -> PhaseSignals:
    if isinstance(item, PhaseSignals):
        return item
    return PhaseSignals.model_validate(item)


def calculate_phase_summary(
    items: Iterable[Union[PhaseSignals, Mapping[str, Any]]],
    config: TomConfig,
    governance_gates: Optional[Sequence[Optional[GovernanceGateInput]]] = None,
) -> Dict[str, int]:
    """
    Count items per derived phase.

    Every configured phase and every bypass state starts at zero, so the
    counts always sum to the number of items.

    Args:
        items: PhaseSignals, or stored records with useCaseStatus,
            deploymentStatus and tomPhaseOverride keys
        config: Effective configuration
        governance_gates: Optional gate state per item, aligned with items

    Raises:
        ValueError: governance_gates is given and its length differs
            from the number of items
    """
    items = list(items)
    if governance_gates is not None and len(governance_gates) != len(items):
        raise ValueError(
            f"governance_gates has {len(governance_gates)} entries for {len(items)} items"
        )

    summary: Dict[str, int] = {phase_id: 0 for phase_id in config.phase_ids()}
    for bypass_id in sorted(BYPASS_PHASE_IDS):
        summary.setdefault(bypass_id, 0)

    for index, item in enumerate(items):
        gates = governance_gates[index] if governance_gates is not None else None
        derived = derive_phase_for(_as_signals(item), gates, config)
        summary[derived.id] = summary.get(derived.id, 0) + 1

    return summary


# ==================== Status update helpers ====================

@dataclass
class PhaseTransitionDecision:
    """Whether a status change may proceed as submitted."""

    allowed: bool = True
    requires_justification: bool = False
    current_phase: str = "unknown"
    target_phase: str = "unknown"
    pending_exit_requirements: List[str] = field(default_factory=list)
    is_exiting_unphased_or_disabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "requiresJustification": self.requires_justification,
            "currentPhase": self.current_phase,
            "targetPhase": self.target_phase,
            "pendingExitRequirements": list(self.pending_exit_requirements),
            "isExitingUnphasedOrDisabled": self.is_exiting_unphased_or_disabled,
        }


def check_phase_transition_requirements(
    work_item: Mapping[str, Any],
    current_status: Optional[str],
    target_status: Optional[str],
    config: TomConfig,
    justification: Optional[str] = None,
    governance_gates: Optional[GovernanceGateInput] = None,
) -> PhaseTransitionDecision:
    """
    Decide whether a status change needs a justification.

    Deployment and override are taken from the stored record and kept
    the same on both sides. A change that leaves a real phase with exit
    requirements pending is refused unless a non-blank justification is
    supplied; with one it is allowed but still flagged.

    Args:
        work_item: Stored work-item record (camelCase keys)
        current_status: Status before the change
        target_status: Requested status
        config: Effective configuration
        justification: Reason given for skipping requirements
        governance_gates: Gate outcomes for the proposed state, or None

    Returns:
        PhaseTransitionDecision with pending requirements as labels
    """
    deployment = work_item.get("deploymentStatus") or None
    override = work_item.get("tomPhaseOverride") or None

    info = detect_phase_transition(
        PhaseSignals(
            use_case_status=current_status,
            deployment_status=deployment,
            tom_phase_override=override,
        ),
        PhaseSignals(
            use_case_status=target_status,
            deployment_status=deployment,
            tom_phase_override=override,
        ),
        WorkItemSnapshot.from_work_item(work_item),
        governance_gates,
        config,
    )

    if not info.has_transition:
        return PhaseTransitionDecision(
            current_phase=info.from_phase_id or "unknown",
            target_phase=info.to_phase_id or "unknown",
        )

    if info.is_exiting_unphased_or_disabled:
        return PhaseTransitionDecision(
            current_phase=info.from_phase_id or "unphased",
            target_phase=info.to_phase_id or "unknown",
            is_exiting_unphased_or_disabled=True,
        )

    pending_labels = [get_requirement_label(r) for r in info.exit_requirements_pending]
    current_name = info.from_phase.name if info.from_phase else (info.from_phase_id or "unknown")
    target_name = info.to_phase.name if info.to_phase else (info.to_phase_id or "unknown")
    has_justification = bool(justification and justification.strip())

    if pending_labels and not has_justification:
        logger.info(
            f"Phase transition {current_name} -> {target_name} needs justification: "
            f"{', '.join(pending_labels)}"
        )
        return PhaseTransitionDecision(
            allowed=False,
            requires_justification=True,
            current_phase=current_name,
            target_phase=target_name,
            pending_exit_requirements=pending_labels,
        )

    return PhaseTransitionDecision(
        allowed=True,
        requires_justification=bool(pending_labels),
        current_phase=current_name,
        target_phase=target_name,
        pending_exit_requirements=pending_labels,
    )


def _has_default(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, dict)) and not value:
        return False
    return True


def apply_phase_defaults(
    work_item: Mapping[str, Any],
    old_phase_id: Optional[str],
    new_phase_id: Optional[str],
    config: TomConfig,
) -> Dict[str, Any]:
    """
    Field updates that seed an item with its new phase's defaults.

    Only keys the item has not set are filled, and only from defaults
    the phase declares with a value. The phase's staffing ratio is always copied.
    The input record is left untouched.

    Returns:
        Mapping of work-item field -> new value; empty when the phase
        did not change or the new phase is not a configured phase.
    """
    if not new_phase_id or new_phase_id == old_phase_id or is_bypass_phase(new_phase_id):
        return {}

    phase = config.get_phase(new_phase_id)
    if phase is None:
        return {}

    updates: Dict[str, Any] = {}

    if phase.phase_defaults is not None:
        defaults = phase.phase_defaults.model_dump(
            by_alias=True, mode="json", exclude_unset=True
        )
        for block in PHASE_DEFAULT_BLOCKS:
            existing = dict(work_item.get(block) or {})
            filled = {
                key: value
                for key, value in (defaults.get(block) or {}).items()
                if _has_default(value) and existing.get(key) is None
            }
            if filled:
                existing.update(filled)
                updates[block] = existing

    if phase.staffing_ratio is not None:
        updates["staffingRatio"] = phase.staffing_ratio.to_dict()

    if updates:
        logger.debug(f"Phase defaults for '{new_phase_id}': {sorted(updates)}")
    return updates


def should_trigger_phase_derivation(changed_fields: Iterable[str]) -> bool:
    """True when a change touches status, deployment or the override."""
    return any(name in PHASE_SIGNAL_FIELDS for name in changed_fields)
