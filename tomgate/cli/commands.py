"""
cli/commands.py - CLI command implementations
"""

from __future__ import annotations
from typing import Any
import argparse
import json
from pathlib import Path

from pydantic import ValidationError

from .core import (
    CLICommand,
    CLIContext,
    CommandRegistry,
    CommandResult,
    add_gate_argument,
    parse_gate,
)
from tomgate.core.models import PhaseSignals, WorkItemSnapshot
from tomgate.core.phase_deriver import derive_phase, derive_phase_for
from tomgate.core.readiness import calculate_phase_readiness
from tomgate.core.transitions import (
    calculate_phase_summary,
    check_phase_transition_requirements,
)

# Exit code when a transition is refused pending a justification
EXIT_JUSTIFICATION_REQUIRED = 2


def _read_json(path_arg: str) -> Any:
    path = Path(path_arg)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r") as f:
        return json.load(f)


def _invalid_item(error: ValidationError) -> CommandResult:
    fields = ", ".join(".".join(str(p) for p in err["loc"]) or "item" for err in error.errors())
    return CommandResult(
        success=False,
        error=f"Invalid work item ({error.error_count()} error(s)): {fields}",
        exit_code=1,
    )


class DeriveCommand(CLICommand):
    """Derive the phase for a status/deployment/override."""

    name = "derive"
    description = "Derive the lifecycle phase for a work item state"
    aliases = ["phase"]

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--status", "-s", default=None, help="Work item status")
        parser.add_argument("--deployment", "-d", default=None, help="Deployment status")
        parser.add_argument("--override", "-o", default=None, help="Manual phase override id")
        add_gate_argument(parser)

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        result = derive_phase(
            args.status,
            args.deployment,
            args.override,
            parse_gate(args.gate),
            ctx.config,
        )
        return CommandResult(
            success=True,
            message=f"Phase: {result.name} ({result.id}) via {result.matched_by.value}",
            data=result.to_dict(),
        )


class ReadinessCommand(CLICommand):
    """Report entry/exit readiness for an item's phase."""

    name = "readiness"
    description = "Check a work item's data against its phase requirements"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--item", "-i", required=True, help="Work item JSON file")
        parser.add_argument(
            "--phase", "-p", default=None,
            help="Phase id (default: derived from the item)",
        )
        add_gate_argument(parser)

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        try:
            record = _read_json(args.item)
        except (OSError, ValueError) as e:
            return CommandResult(success=False, error=str(e), exit_code=1)

        if not isinstance(record, dict):
            return CommandResult(success=False, error="Item file must contain a JSON object", exit_code=1)

        phase_id = args.phase
        try:
            if phase_id is None:
                derived = derive_phase_for(
                    PhaseSignals.model_validate(record), parse_gate(args.gate), ctx.config
                )
                phase_id = derived.id

            readiness = calculate_phase_readiness(
                WorkItemSnapshot.from_work_item(record), phase_id, ctx.config
            )
        except ValidationError as e:
            return _invalid_item(e)

        if readiness.current_phase is None:
            message = f"No readiness for '{phase_id}': not a configured phase"
        else:
            message = (
                f"{readiness.current_phase.name}: {readiness.readiness_percent}% ready, "
                f"{'can' if readiness.can_progress else 'cannot'} progress"
            )
        return CommandResult(success=True, message=message, data=readiness.to_dict())


class TransitionCommand(CLICommand):
    """Check whether a status change needs a justification."""

    name = "transition"
    description = "Check a proposed status change against exit requirements"
    aliases = ["check"]

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--item", "-i", required=True, help="Work item JSON file")
        parser.add_argument("--to-status", "-t", required=True, help="Requested status")
        parser.add_argument("--justification", "-j", default=None, help="Reason for skipping requirements")
        add_gate_argument(parser)

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        try:
            record = _read_json(args.item)
        except (OSError, ValueError) as e:
            return CommandResult(success=False, error=str(e), exit_code=1)

        if not isinstance(record, dict):
            return CommandResult(success=False, error="Item file must contain a JSON object", exit_code=1)

        try:
            decision = check_phase_transition_requirements(
                record,
                record.get("useCaseStatus"),
                args.to_status,
                ctx.config,
                justification=args.justification,
                governance_gates=parse_gate(args.gate),
            )
        except ValidationError as e:
            return _invalid_item(e)

        if not decision.allowed:
            return CommandResult(
                success=True,
                message=(
                    f"Justification required to move {decision.current_phase} -> "
                    f"{decision.target_phase}"
                ),
                data=decision.to_dict(),
                exit_code=EXIT_JUSTIFICATION_REQUIRED,
            )

        return CommandResult(
            success=True,
            message=f"Transition allowed: {decision.current_phase} -> {decision.target_phase}",
            data=decision.to_dict(),
        )


class SummaryCommand(CLICommand):
    """Count work items per phase."""

    name = "summary"
    description = "Count work items per derived phase"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--items", "-i", required=True, help="JSON file with a list of work items")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        try:
            records = _read_json(args.items)
        except (OSError, ValueError) as e:
            return CommandResult(success=False, error=str(e), exit_code=1)

        if not isinstance(records, list):
            return CommandResult(success=False, error="Items file must contain a JSON list", exit_code=1)

        try:
            summary = calculate_phase_summary(records, ctx.config)
        except ValidationError as e:
            return _invalid_item(e)
        return CommandResult(
            success=True,
            message=f"{len(records)} work item(s)",
            data=summary,
        )


class PhasesCommand(CLICommand):
    """List the effective phases."""

    name = "phases"
    description = "List phases of the effective configuration"
    aliases = ["list"]

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        rows = [
            {
                "order": phase.order,
                "id": phase.id,
                "name": phase.name,
                "priority": phase.priority,
                "gate": phase.governance_gate,
                "statuses": ",".join(phase.mapped_statuses),
                "manual": phase.manual_only,
            }
            for phase in ctx.config.phases
        ]
        return CommandResult(
            success=True,
            message=(
                f"Preset '{ctx.config.active_preset}' "
                f"({'enabled' if ctx.config.enabled else 'disabled'}): {len(rows)} phase(s)"
            ),
            data=rows,
        )


def build_registry() -> CommandRegistry:
    """Registry with every built-in command."""
    registry = CommandRegistry()
    for command in (
        DeriveCommand(),
        ReadinessCommand(),
        TransitionCommand(),
        SummaryCommand(),
        PhasesCommand(),
    ):
        registry.register(command)
    return registry
