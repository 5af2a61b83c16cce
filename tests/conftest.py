"""
tomgate Test Configuration and Fixtures

Shared configurations, work-item records and gate states.
"""

import logging

import pytest

from tomgate.core.config_resolver import resolve_effective_config
from tomgate.core.defaults import DEFAULT_TOM_CONFIG
from tomgate.core.models import GovernanceGateInput, TomConfig


@pytest.fixture
def enabled_config() -> TomConfig:
    """Default configuration switched on and merged with its active preset (coe_led)."""
    return resolve_effective_config(DEFAULT_TOM_CONFIG.model_copy(update={"enabled": True}))


@pytest.fixture
def tie_config() -> TomConfig:
    """
    Small configuration where two phases share a status.

    pilot and build both map "In-flight"; build has the lower priority.
    run is manual-only and maps "Retired", which derivation must ignore.
    """
    return TomConfig.model_validate({
        "enabled": "true",
        "activePreset": "none",
        "phases": [
            {
                "id": "pilot", "name": "Pilot", "order": 1, "priority": 3,
                "mappedStatuses": ["In-flight"], "mappedDeployments": ["Pilot"],
                "dataRequirements": {"entry": [], "exit": ["title"]},
            },
            {
                "id": "build", "name": "Build", "order": 2, "priority": 1,
                "mappedStatuses": ["In-flight"], "mappedDeployments": ["Production"],
            },
            {
                "id": "prod", "name": "Production", "order": 3, "priority": 2,
                "mappedStatuses": ["Implemented"],
            },
            {
                "id": "run", "name": "Run", "order": 4, "priority": 4,
                "mappedStatuses": ["Retired"], "manualOnly": True,
            },
        ],
    })


@pytest.fixture
def passed_gate() -> GovernanceGateInput:
    return GovernanceGateInput(operating_model_passed=True)


@pytest.fixture
def failed_gate() -> GovernanceGateInput:
    return GovernanceGateInput(operating_model_passed=False)


@pytest.fixture
def complete_item() -> dict:
    """Stored work-item record that satisfies every data requirement."""
    return {
        "title": "Claims triage assistant",
        "description": "Routes inbound claims to the right handler",
        "primaryBusinessOwner": "Head of Claims",
        "processes": ["Claims intake"],
        "activities": [],
        "revenueImpact": 3,
        "costSavings": 4,
        "dataReadiness": 2,
        "raiQuestionnaireComplete": True,
        "investmentCostGbp": 120000,
        "valueRealization": {"selectedKpis": ["handling_time"]},
        "capabilityTransition": {
            "independencePercentage": 20,
            "selfSufficiencyTarget": {"targetIndependence": 80},
        },
        "useCaseStatus": "Backlog",
        "deploymentStatus": None,
        "tomPhaseOverride": None,
    }


@pytest.fixture
def sparse_item() -> dict:
    """Stored work-item record with only a title and description."""
    return {
        "title": "Underwriting copilot",
        "description": "Drafts underwriting notes",
        "useCaseStatus": "Backlog",
    }


@pytest.fixture
def clean_logging():
    """Remove handlers installed by setup_logging() after the test."""
    yield
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in list(root_logger.handlers):
        if getattr(handler, "_tomgate", False):
            root_logger.removeHandler(handler)
            handler.close()
