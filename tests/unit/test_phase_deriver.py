"""
Unit tests for core/phase_deriver.py.

Tests every derivation rule, its ordering, and the entry phase.
"""

from tomgate.core.config_resolver import resolve_effective_config
from tomgate.core.defaults import DEFAULT_TOM_CONFIG
from tomgate.core.enums import MatchedBy
from tomgate.core.models import PhaseSignals, TomConfig
from tomgate.core.phase_deriver import (
    DISABLED_RESULT,
    DerivedPhaseResult,
    derive_phase,
    derive_phase_for,
    get_entry_phase,
)


class TestBypassResults:
    """Test disabled, unphased and unmapped results."""

    def test_disabled(self):
        """Test a switched-off configuration always yields disabled."""
        result = derive_phase("Backlog", None, "strategic", None, DEFAULT_TOM_CONFIG)
        assert result == DISABLED_RESULT
        assert result.id == "disabled"
        assert result.name == "TOM Disabled"
        assert result.matched_by == MatchedBy.DISABLED
        assert result.is_bypass

    def test_failed_gate_unphased(self, enabled_config, failed_gate):
        """Test a failed operating model gate yields unphased."""
        result = derive_phase("Backlog", None, None, failed_gate, enabled_config)
        assert result.id == "unphased"
        assert result.matched_by == MatchedBy.UNPHASED
        assert result.is_override is False

    def test_failed_gate_beats_override(self, enabled_config, failed_gate):
        """Test an override cannot bypass a failed gate."""
        result = derive_phase(None, None, "steady_state", failed_gate, enabled_config)
        assert result.id == "unphased"

    def test_unmapped_status(self, enabled_config):
        """Test an unknown status without gating yields unmapped."""
        result = derive_phase("Cancelled", None, None, None, enabled_config)
        assert result.id == "unmapped"
        assert result.name == "Unmapped"
        assert result.matched_by == MatchedBy.UNMAPPED

    def test_missing_status_unmapped(self, enabled_config):
        """Test a missing status without gating yields unmapped."""
        assert derive_phase(None, None, None, None, enabled_config).id == "unmapped"
        assert derive_phase("", None, None, None, enabled_config).id == "unmapped"


class TestOverride:
    """Test manual overrides."""

    def test_override_wins(self, enabled_config):
        """Test an override beats status matching."""
        result = derive_phase("Backlog", None, "transition", None, enabled_config)
        assert result.id == "transition"
        assert result.matched_by == MatchedBy.MANUAL
        assert result.is_override is True

    def test_override_reaches_manual_only(self, enabled_config, passed_gate):
        """Test a manual-only phase is reachable by override."""
        result = derive_phase("Backlog", None, "steady_state", passed_gate, enabled_config)
        assert result.id == "steady_state"
        assert result.name == "Steady State"

    def test_unknown_override_ignored(self, enabled_config):
        """Test an override naming no phase falls through to status."""
        result = derive_phase("Backlog", None, "nope", None, enabled_config)
        assert result.id == "foundation"
        assert result.matched_by == MatchedBy.STATUS
        assert result.is_override is False


class TestStatusMatching:
    """Test status, deployment and priority rules."""

    def test_single_status_match(self, enabled_config):
        """Test a status mapped by one phase."""
        result = derive_phase("In-flight", None, None, None, enabled_config)
        assert result.id == "strategic"
        assert result.matched_by == MatchedBy.STATUS
        assert result.color == "#1D86FF"

    def test_deployment_breaks_tie(self, tie_config):
        """Test deployment picks among phases sharing the status."""
        result = derive_phase("In-flight", "Pilot", None, None, tie_config)
        assert result.id == "pilot"
        assert result.matched_by == MatchedBy.DEPLOYMENT

        result = derive_phase("In-flight", "Production", None, None, tie_config)
        assert result.id == "build"
        assert result.matched_by == MatchedBy.DEPLOYMENT

    def test_priority_without_deployment(self, tie_config):
        """Test the lowest priority wins when deployment is missing."""
        result = derive_phase("In-flight", None, None, None, tie_config)
        assert result.id == "build"
        assert result.matched_by == MatchedBy.PRIORITY

    def test_priority_when_deployment_unmatched(self, tie_config):
        """Test an unmatched deployment falls back to priority."""
        result = derive_phase("In-flight", "Decommissioned", None, None, tie_config)
        assert result.id == "build"
        assert result.matched_by == MatchedBy.PRIORITY

    def test_deployment_ignored_for_single_match(self, tie_config):
        """Test deployment does not matter when only one phase matches."""
        result = derive_phase("Implemented", "Pilot", None, None, tie_config)
        assert result.id == "prod"
        assert result.matched_by == MatchedBy.STATUS

    def test_equal_priority_keeps_list_order(self):
        """Test equal priorities resolve to the earlier phase."""
        config = TomConfig.model_validate({
            "enabled": "true",
            "phases": [
                {"id": "first", "name": "First", "order": 1, "priority": 1,
                 "mappedStatuses": ["Backlog"]},
                {"id": "second", "name": "Second", "order": 2, "priority": 1,
                 "mappedStatuses": ["Backlog"]},
            ],
        })
        assert derive_phase("Backlog", None, None, None, config).id == "first"

    def test_manual_only_not_matched(self, tie_config):
        """Test manual-only phases are never reached by status."""
        result = derive_phase("Retired", None, None, None, tie_config)
        assert result.id == "unmapped"

    def test_status_match_is_exact(self, enabled_config):
        """Test status comparison is case sensitive."""
        assert derive_phase("backlog", None, None, None, enabled_config).id == "unmapped"


class TestGovernanceEntry:
    """Test the governance entry rule."""

    def test_passed_gate_enters_entry_phase(self, enabled_config, passed_gate):
        """Test an unmatched item with a passed gate lands in the entry phase."""
        result = derive_phase("Cancelled", None, None, passed_gate, enabled_config)
        assert result.id == "foundation"
        assert result.matched_by == MatchedBy.GOVERNANCE_ENTRY

    def test_passed_gate_without_status(self, enabled_config, passed_gate):
        """Test a missing status with a passed gate lands in the entry phase."""
        result = derive_phase(None, None, None, passed_gate, enabled_config)
        assert result.id == "foundation"

    def test_passed_gate_does_not_change_matches(self, enabled_config, passed_gate):
        """Test a passed gate leaves status matches alone."""
        result = derive_phase("In-flight", None, None, passed_gate, enabled_config)
        assert result.id == "strategic"
        assert result.matched_by == MatchedBy.STATUS

    def test_no_entry_phase_unmapped(self, passed_gate):
        """Test all-manual phases leave an unmatched item unmapped."""
        config = TomConfig.model_validate({
            "enabled": "true",
            "phases": [
                {"id": "only", "name": "Only", "order": 1, "priority": 1, "manualOnly": True},
            ],
        })
        assert get_entry_phase(config) is None
        assert derive_phase(None, None, None, passed_gate, config).id == "unmapped"

    def test_entry_phase_skips_manual(self):
        """Test the entry phase is the lowest-order automatic phase."""
        config = TomConfig.model_validate({
            "enabled": "true",
            "phases": [
                {"id": "late", "name": "Late", "order": 3, "priority": 1},
                {"id": "manual", "name": "Manual", "order": 1, "priority": 1, "manualOnly": True},
                {"id": "early", "name": "Early", "order": 2, "priority": 1},
            ],
        })
        assert get_entry_phase(config).id == "early"

    def test_rsa_entry_phase(self, passed_gate):
        """Test the entry phase follows the preset taxonomy."""
        config = resolve_effective_config({"enabled": "true"}, preset_id="rsa_tom")
        assert derive_phase(None, None, None, passed_gate, config).id == "ideation"


class TestResultShape:
    """Test DerivedPhaseResult."""

    def test_deterministic(self, tie_config):
        """Test identical inputs give identical results."""
        first = derive_phase("In-flight", "Pilot", None, None, tie_config)
        second = derive_phase("In-flight", "Pilot", None, None, tie_config)
        assert first == second

    def test_to_dict(self, enabled_config):
        """Test the camelCase result shape."""
        result = derive_phase("Backlog", None, None, None, enabled_config)
        assert result.to_dict() == {
            "id": "foundation",
            "name": "Foundation",
            "color": "#3C2CDA",
            "isOverride": False,
            "matchedBy": "status",
        }

    def test_result_is_configured_or_bypass(self, enabled_config, passed_gate, failed_gate):
        """Test every result is a configured phase or a bypass state."""
        ids = set(enabled_config.phase_ids())
        for status in ("Discovery", "Backlog", "In-flight", "Implemented", "Other", None):
            for gates in (None, passed_gate, failed_gate):
                result = derive_phase(status, None, None, gates, enabled_config)
                assert result.id in ids or result.is_bypass

    def test_derive_phase_for(self, enabled_config):
        """Test deriving from a PhaseSignals triple."""
        signals = PhaseSignals(use_case_status="Implemented", deployment_status="Production")
        result = derive_phase_for(signals, None, enabled_config)
        assert result.id == "transition"

    def test_from_phase(self, enabled_config):
        """Test only manual results are marked as overrides."""
        phase = enabled_config.get_phase("strategic")
        assert DerivedPhaseResult.from_phase(phase, MatchedBy.MANUAL).is_override
        assert not DerivedPhaseResult.from_phase(phase, MatchedBy.PRIORITY).is_override
