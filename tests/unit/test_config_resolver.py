"""
Unit tests for core/config_resolver.py.

Tests default completion, engagement pinning and preset profile merging.
"""

import pytest

from tomgate.core.config_resolver import (
    apply_engagement_context,
    ensure_tom_config,
    get_active_preset_profile,
    merge_preset_profile,
    resolve_effective_config,
)
from tomgate.core.defaults import DEFAULT_TOM_CONFIG
from tomgate.core.models import TomConfig


def _config_with_profile(override):
    return TomConfig.model_validate({
        "enabled": "true",
        "activePreset": "p",
        "phases": [
            {"id": "a", "name": "A", "order": 1, "priority": 1,
             "governanceGate": "ai_steerco", "expectedDurationWeeks": 10},
        ],
        "presetProfiles": {"p": {"phaseOverrides": {"a": override}}},
    })


class TestEnsureTomConfig:
    """Test ensure_tom_config."""

    def test_none_gives_default(self):
        """Test a missing configuration is the default."""
        assert ensure_tom_config(None) is DEFAULT_TOM_CONFIG

    def test_model_passes_through(self):
        """Test a TomConfig is returned unchanged."""
        config = TomConfig(enabled=True)
        assert ensure_tom_config(config) is config

    def test_missing_sections_filled(self):
        """Test sections absent from storage come from the default."""
        config = ensure_tom_config({"enabled": "true"})
        assert config.enabled is True
        assert config.active_preset == DEFAULT_TOM_CONFIG.active_preset
        assert config.phases == DEFAULT_TOM_CONFIG.phases
        assert config.governance_bodies == DEFAULT_TOM_CONFIG.governance_bodies

    def test_null_sections_filled(self):
        """Test null sections are treated as missing."""
        config = ensure_tom_config({"phases": None, "activePreset": None})
        assert config.phases == DEFAULT_TOM_CONFIG.phases
        assert config.active_preset == "coe_led"

    def test_supplied_empty_sections_kept(self):
        """Test an explicitly empty phase list stays empty."""
        config = ensure_tom_config({"phases": []})
        assert config.phases == []


class TestMergePresetProfile:
    """Test merge_preset_profile."""

    def test_coe_led_overrides(self, enabled_config):
        """Test the default preset's gates, durations and ratios."""
        foundation = enabled_config.get_phase("foundation")
        assert foundation.governance_gate == "ai_steerco"
        assert foundation.expected_duration_weeks == 8
        assert foundation.staffing_ratio.vendor == 0.7
        assert foundation.staffing_ratio.client == 0.3
        assert enabled_config.get_phase("strategic").governance_gate == "working_group"

    def test_federated_overrides(self):
        """Test another four-stage preset."""
        config = resolve_effective_config(DEFAULT_TOM_CONFIG, preset_id="federated")
        foundation = config.get_phase("foundation")
        assert foundation.governance_gate == "working_group"
        assert foundation.expected_duration_weeks == 6
        assert foundation.staffing_ratio.client == 0.6

    def test_other_fields_untouched(self, enabled_config):
        """Test merging only changes gate, duration and ratio."""
        base = DEFAULT_TOM_CONFIG.get_phase("strategic")
        merged = enabled_config.get_phase("strategic")
        assert merged.mapped_statuses == base.mapped_statuses
        assert merged.data_requirements == base.data_requirements
        assert merged.priority == base.priority

    def test_preset_taxonomy_replaces_phases(self):
        """Test a preset with its own phases replaces the base list."""
        config = resolve_effective_config(DEFAULT_TOM_CONFIG, preset_id="rsa_tom")
        assert config.phase_ids() == [
            "ideation", "assessment", "foundation", "build", "scale", "operate",
        ]
        assert config.get_phase("build").staffing_ratio.vendor == 0.8
        assert config.get_phase("foundation").expected_duration_weeks == 8

    def test_idempotent(self, enabled_config):
        """Test merging an effective config again changes nothing."""
        assert merge_preset_profile(enabled_config).phases == enabled_config.phases

    def test_no_profile_is_noop(self):
        """Test an active preset without a profile leaves phases alone."""
        config = DEFAULT_TOM_CONFIG.model_copy(update={"active_preset": "custom"})
        assert get_active_preset_profile(config) is None
        assert merge_preset_profile(config) is config

    def test_input_not_mutated(self, enabled_config):
        """Test the stored configuration keeps its base phases."""
        assert enabled_config.get_phase("foundation").staffing_ratio is not None
        assert DEFAULT_TOM_CONFIG.get_phase("foundation").staffing_ratio is None

    def test_explicit_null_duration_clears(self):
        """Test an explicit null duration override clears the duration."""
        config = merge_preset_profile(_config_with_profile({"expectedDurationWeeks": None}))
        assert config.get_phase("a").expected_duration_weeks is None
        assert config.get_phase("a").governance_gate == "ai_steerco"

    def test_absent_duration_kept(self):
        """Test a gate-only override leaves the duration alone."""
        config = merge_preset_profile(_config_with_profile({"governanceGate": "working_group"}))
        assert config.get_phase("a").expected_duration_weeks == 10
        assert config.get_phase("a").governance_gate == "working_group"


class TestEngagementContext:
    """Test apply_engagement_context and resolve_effective_config."""

    def test_nothing_pinned(self):
        """Test the config is returned as-is when nothing is pinned."""
        assert apply_engagement_context(DEFAULT_TOM_CONFIG) is DEFAULT_TOM_CONFIG

    def test_preset_pinned(self):
        """Test the engagement preset replaces activePreset."""
        config = apply_engagement_context(DEFAULT_TOM_CONFIG, preset_id="hybrid")
        assert config.active_preset == "hybrid"
        assert DEFAULT_TOM_CONFIG.active_preset == "coe_led"

    def test_custom_phases(self):
        """Test engagement phases replace the base list before merging."""
        config = resolve_effective_config(
            {"enabled": "true", "activePreset": "custom"},
            custom_phases=[
                {"id": "one", "name": "One", "order": 1, "priority": 1,
                 "mappedStatuses": ["Backlog"]},
            ],
        )
        assert config.phase_ids() == ["one"]
        assert config.get_phase("one").mapped_statuses == ["Backlog"]

    def test_custom_phases_duplicate_ids(self):
        """Test repeated engagement phase ids are rejected."""
        phase = {"id": "one", "name": "One", "order": 1, "priority": 1}
        with pytest.raises(ValueError):
            apply_engagement_context(DEFAULT_TOM_CONFIG, custom_phases=[phase, phase])


class TestEveryPreset:
    """Test the default configuration under each preset."""

    @pytest.mark.parametrize("preset_id", sorted(DEFAULT_TOM_CONFIG.presets))
    def test_phases_non_empty_and_unique(self, preset_id):
        """Test each preset yields a usable phase list."""
        config = resolve_effective_config(DEFAULT_TOM_CONFIG, preset_id=preset_id)
        ids = config.phase_ids()
        assert ids
        assert len(ids) == len(set(ids))
        assert all(phase.staffing_ratio is not None for phase in config.phases)
