"""
tomgate/core/phase_deriver.py - Lifecycle phase derivation

Maps a work item's status, deployment, override and governance gate
state onto exactly one phase of an effective configuration.

Rule sequence (first rule that applies wins):

    1. TOM disabled                          -> disabled
    2. Operating model gate supplied, failed -> unphased
    3. Override names a configured phase     -> that phase (manual)
    4. No phase maps the status:
         gate supplied and passed            -> entry phase (governance_entry)
         otherwise                           -> unmapped
    5. One phase maps the status             -> it (status)
    6. Several map it, deployment given and
       one of them maps the deployment       -> first such phase (deployment)
    7. Otherwise                             -> lowest priority (priority)

The gate check runs before the override: an item cannot be forced into
any phase, manual-only ones included, until its operating model gate has
passed.

Phase list order matters. Status matches keep declared order, the
deployment rule takes the first match in that order, and priority ties
resolve to the earlier phase.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from tomgate.core.defaults import (
    DISABLED_PHASE_COLOR,
    DISABLED_PHASE_NAME,
    UNMAPPED_PHASE_COLOR,
    UNMAPPED_PHASE_NAME,
    UNPHASED_PHASE_COLOR,
    UNPHASED_PHASE_NAME,
)
from tomgate.core.enums import BypassPhase, MatchedBy, is_bypass_phase
from tomgate.core.models import GovernanceGateInput, PhaseSignals, TomConfig, TomPhase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedPhaseResult:
    """The phase an item occupies and why it was chosen."""

    id: str
    name: str
    color: str
    is_override: bool
    matched_by: MatchedBy

    @property
    def is_bypass(self) -> bool:
        """True for the disabled, unphased and unmapped results."""
        return is_bypass_phase(self.id)

    @classmethod
    def from_phase(cls, phase: TomPhase, matched_by: MatchedBy) -> "DerivedPhaseResult":
        return cls(
            id=phase.id,
            name=phase.name,
            color=phase.color,
            is_override=matched_by == MatchedBy.MANUAL,
            matched_by=matched_by,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "isOverride": self.is_override,
            "matchedBy": self.matched_by.value,
        }


DISABLED_RESULT = DerivedPhaseResult(
    id=BypassPhase.DISABLED.value,
    name=DISABLED_PHASE_NAME,
    color=DISABLED_PHASE_COLOR,
    is_override=False,
    matched_by=MatchedBy.DISABLED,
)

UNPHASED_RESULT = DerivedPhaseResult(
    id=BypassPhase.UNPHASED.value,
    name=UNPHASED_PHASE_NAME,
    color=UNPHASED_PHASE_COLOR,
    is_override=False,
    matched_by=MatchedBy.UNPHASED,
)

UNMAPPED_RESULT = DerivedPhaseResult(
    id=BypassPhase.UNMAPPED.value,
    name=UNMAPPED_PHASE_NAME,
    color=UNMAPPED_PHASE_COLOR,
    is_override=False,
    matched_by=MatchedBy.UNMAPPED,
)


def get_entry_phase(config: TomConfig) -> Optional[TomPhase]:
    """
    Lowest-order phase that can be entered automatically.

    Ties on order keep list order. None when every phase is manual-only.
    """
    candidates = [phase for phase in config.phases if not phase.manual_only]
    if not candidates:
        return None
    return min(candidates, key=lambda phase: phase.order)


def _status_matches(status: Optional[str], config: TomConfig) -> List[TomPhase]:
    if not status:
        return []
    return [
        phase for phase in config.phases
        if not phase.manual_only and status in phase.mapped_statuses
    ]


def derive_phase(
    status: Optional[str],
    deployment: Optional[str],
    override: Optional[str],
    governance_gates: Optional[GovernanceGateInput],
    config: TomConfig,
) -> DerivedPhaseResult:
    """
    Derive the phase for one item.

    Args:
        status: Work item status (useCaseStatus)
        deployment: Deployment status, used only to break status ties
        override: Manual phase override id (tomPhaseOverride)
        governance_gates: Gate outcomes, or None when gating is not in play
        config: Effective (preset-merged) configuration

    Returns:
        DerivedPhaseResult. Never raises; unknown inputs end in one of
        the bypass results.
    """
    result = _derive(status, deployment, override, governance_gates, config)
    logger.debug(
        f"Derived phase '{result.id}' via {result.matched_by.value} "
        f"(status={status!r}, deployment={deployment!r}, override={override!r})"
    )
    return result


def _derive(
    status: Optional[str],
    deployment: Optional[str],
    override: Optional[str],
    governance_gates: Optional[GovernanceGateInput],
    config: TomConfig,
) -> DerivedPhaseResult:
    if not config.enabled:
        return DISABLED_RESULT

    if governance_gates is not None and not governance_gates.operating_model_passed:
        return UNPHASED_RESULT

    override_phase = config.get_phase(override)
    if override_phase is not None:
        return DerivedPhaseResult.from_phase(override_phase, MatchedBy.MANUAL)

    matching = _status_matches(status, config)

    if not matching:
        if governance_gates is not None:
            entry = get_entry_phase(config)
            if entry is not None:
                return DerivedPhaseResult.from_phase(entry, MatchedBy.GOVERNANCE_ENTRY)
        return UNMAPPED_RESULT

    if len(matching) == 1:
        return DerivedPhaseResult.from_phase(matching[0], MatchedBy.STATUS)

    if deployment:
        for phase in matching:
            if deployment in phase.mapped_deployments:
                return DerivedPhaseResult.from_phase(phase, MatchedBy.DEPLOYMENT)

    # min() keeps the first of equal priorities
    best = min(matching, key=lambda phase: phase.priority)
    return DerivedPhaseResult.from_phase(best, MatchedBy.PRIORITY)


def derive_phase_for(
    signals: PhaseSignals,
    governance_gates: Optional[GovernanceGateInput],
    config: TomConfig,
) -> DerivedPhaseResult:
    """derive_phase() for a PhaseSignals triple."""
    return derive_phase(
        signals.use_case_status,
        signals.deployment_status,
        signals.tom_phase_override,
        governance_gates,
        config,
    )
