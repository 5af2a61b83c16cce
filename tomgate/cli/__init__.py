"""
cli/ - Command Line Interface

Command-line access to phase derivation:
- derive: phase for a status/deployment/override
- readiness: entry/exit data requirements for an item
- transition: justification check for a status change
- summary: item counts per phase
- phases: effective phase list
"""

from .core import (
    CLIContext,
    OutputFormat,
    CommandResult,
    CommandRegistry,
    CLICommand,
    format_output,
)

from .commands import (
    DeriveCommand,
    ReadinessCommand,
    TransitionCommand,
    SummaryCommand,
    PhasesCommand,
    build_registry,
)


__all__ = [
    # Core
    "CLIContext",
    "OutputFormat",
    "CommandResult",
    "CommandRegistry",
    "CLICommand",
    "format_output",
    # Commands
    "DeriveCommand",
    "ReadinessCommand",
    "TransitionCommand",
    "SummaryCommand",
    "PhasesCommand",
    "build_registry",
]
