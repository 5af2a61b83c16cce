"""
tomgate/core/config_resolver.py - Effective configuration resolution

Builds the configuration that derivation runs against:

    stored config -> ensure_tom_config() -> apply_engagement_context()
                  -> merge_preset_profile() -> effective config

Every step returns a new TomConfig; nothing here mutates its input. The
effective config is never persisted, it is recomputed when needed.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union
import logging

from tomgate.core.defaults import DEFAULT_TOM_CONFIG
from tomgate.core.models import (
    TomConfig,
    TomPhase,
    TomPresetProfile,
    check_unique_phase_ids,
)

logger = logging.getLogger(__name__)


def ensure_tom_config(raw: Union[TomConfig, Mapping[str, Any], None]) -> TomConfig:
    """
    Complete a stored configuration from the default.

    Any top-level section that is missing or null is taken from
    DEFAULT_TOM_CONFIG. Supplied sections are kept as they are, so an
    empty phase list stays empty.

    Args:
        raw: A TomConfig, a (possibly partial) stored mapping, or None

    Returns:
        A complete TomConfig
    """
    if raw is None:
        return DEFAULT_TOM_CONFIG
    if isinstance(raw, TomConfig):
        return raw

    supplied = {key: value for key, value in raw.items() if value is not None}
    partial = TomConfig.model_validate(supplied)

    missing = {
        name: getattr(DEFAULT_TOM_CONFIG, name)
        for name in TomConfig.model_fields
        if name not in partial.model_fields_set
    }
    if missing:
        logger.debug(f"Filled TOM config sections from defaults: {sorted(missing)}")
        return partial.model_copy(update=missing)
    return partial


def get_active_preset_profile(config: TomConfig) -> Optional[TomPresetProfile]:
    """Profile for the active preset, or None if it has none."""
    return config.preset_profiles.get(config.active_preset)


def _apply_profile_to_phase(phase: TomPhase, profile: TomPresetProfile) -> TomPhase:
    update = {}

    override = profile.phase_overrides.get(phase.id)
    if override is not None:
        if override.governance_gate is not None:
            update["governance_gate"] = override.governance_gate
        if override.overrides_duration:
            update["expected_duration_weeks"] = override.expected_duration_weeks

    ratio = profile.staffing_ratios.get(phase.id)
    if ratio is not None:
        update["staffing_ratio"] = ratio

    if not update:
        return phase
    return phase.model_copy(update=update)


def merge_preset_profile(config: TomConfig) -> TomConfig:
    """
    Apply the active preset's profile to the phase list.

    The preset's own phase list replaces the base list when it defines
    one. Per-phase overrides then apply by id: governance gate, expected
    duration and staffing ratio. All other phase fields are untouched.

    An active preset without a profile is a no-op. The merge is
    idempotent: merging an effective config again yields the same phases.
    """
    profile = get_active_preset_profile(config)
    if profile is None:
        logger.debug(f"No preset profile for '{config.active_preset}', using base phases")
        return config

    base_phases = profile.phases if profile.phases is not None else config.phases
    merged = [_apply_profile_to_phase(phase, profile) for phase in base_phases]

    logger.debug(
        f"Merged preset '{config.active_preset}': {len(merged)} phases"
        f"{' (preset taxonomy)' if profile.phases is not None else ''}"
    )
    return config.model_copy(update={"phases": merged})


def apply_engagement_context(
    config: TomConfig,
    preset_id: Optional[str] = None,
    custom_phases: Optional[Iterable[Union[TomPhase, Mapping[str, Any]]]] = None,
) -> TomConfig:
    """
    Pin an engagement's preset and phase list onto a configuration.

    Args:
        config: Complete configuration
        preset_id: Preset locked for the engagement, if any
        custom_phases: Engagement-specific base phases, if any. Mappings
            are validated as TomPhase; repeated ids raise ValueError.

    Returns:
        New configuration (the input when nothing is pinned)
    """
    update = {}

    if preset_id:
        update["active_preset"] = preset_id

    if custom_phases is not None:
        phases = [
            phase if isinstance(phase, TomPhase) else TomPhase.model_validate(phase)
            for phase in custom_phases
        ]
        check_unique_phase_ids(phases)
        update["phases"] = phases

    if not update:
        return config
    return config.model_copy(update=update)


def resolve_effective_config(
    raw: Union[TomConfig, Mapping[str, Any], None],
    preset_id: Optional[str] = None,
    custom_phases: Optional[Iterable[Union[TomPhase, Mapping[str, Any]]]] = None,
) -> TomConfig:
    """Stored configuration to effective configuration in one call."""
    config = ensure_tom_config(raw)
    config = apply_engagement_context(config, preset_id, custom_phases)
    return merge_preset_profile(config)
