"""
tomgate Core Enumerations

Closed value sets used by phase derivation and transition checks.
"""

from enum import Enum
from typing import FrozenSet


class MatchedBy(str, Enum):
    """
    Why a phase was chosen by derivation.

    The value is the audit trail reported to callers and stored alongside
    the derived phase, so the string values are part of the wire shape.
    """
    STATUS = "status"                        # Exactly one phase mapped the status
    DEPLOYMENT = "deployment"                # Deployment broke a status tie
    PRIORITY = "priority"                    # Lowest priority broke a status tie
    MANUAL = "manual"                        # Explicit override
    DISABLED = "disabled"                    # TOM switched off
    UNMAPPED = "unmapped"                    # Nothing matched
    GOVERNANCE_ENTRY = "governance_entry"    # Gate passed, landed in entry phase
    UNPHASED = "unphased"                    # Operating model gate not passed


class BypassPhase(str, Enum):
    """
    Non-substantive derivation results.

    Leaving one of these carries no exit requirements.
    """
    UNPHASED = "unphased"
    DISABLED = "disabled"
    UNMAPPED = "unmapped"


BYPASS_PHASE_IDS: FrozenSet[str] = frozenset(p.value for p in BypassPhase)


def is_bypass_phase(phase_id: str) -> bool:
    """True when phase_id is one of the bypass states."""
    return phase_id in BYPASS_PHASE_IDS
