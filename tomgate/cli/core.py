"""
cli/core.py - Core CLI infrastructure

Command base class, registry, context and output formatting.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from dataclasses import dataclass
from enum import Enum
from abc import ABC, abstractmethod
import argparse
import json
import logging

from tomgate.core.defaults import DEFAULT_TOM_CONFIG
from tomgate.core.models import GovernanceGateInput, TomConfig

logger = logging.getLogger("cli")


class OutputFormat(Enum):
    """Output format options."""
    TEXT = "text"
    JSON = "json"
    TABLE = "table"


@dataclass
class CLIContext:
    """Context for CLI operations."""

    config: TomConfig = DEFAULT_TOM_CONFIG  # Effective configuration
    output_format: OutputFormat = OutputFormat.TEXT


@dataclass
class CommandResult:
    """Result of a CLI command execution."""

    success: bool = True
    message: str = ""
    data: Any = None
    error: Optional[str] = None
    exit_code: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "data": self.data,
            "error": self.error,
        }


class CLICommand(ABC):
    """Base class for CLI commands."""

    name: str = "command"
    description: str = "Base command"
    aliases: List[str] = []

    @abstractmethod
    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        """Execute the command."""
        pass

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        """Configure argument parser for this command."""
        pass


class CommandRegistry:
    """Registry for CLI commands."""

    def __init__(self):
        self._commands: Dict[str, CLICommand] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, command: CLICommand) -> None:
        """Register a command."""
        self._commands[command.name] = command
        for alias in command.aliases:
            self._aliases[alias] = command.name

    def get(self, name: str) -> Optional[CLICommand]:
        """Get command by name or alias."""
        if name in self._commands:
            return self._commands[name]
        if name in self._aliases:
            return self._commands[self._aliases[name]]
        return None

    def list_commands(self) -> List[str]:
        """List all command names."""
        return list(self._commands.keys())

    def get_all(self) -> Dict[str, CLICommand]:
        """Get all commands."""
        return dict(self._commands)


def add_gate_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--gate",
        choices=["pass", "fail"],
        default=None,
        help="Operating model gate outcome (omit when gating is not in play)",
    )


def parse_gate(value: Optional[str]) -> Optional[GovernanceGateInput]:
    """--gate value to gate input; None when not given."""
    if value is None:
        return None
    return GovernanceGateInput(operating_model_passed=value == "pass")


def format_output(result: CommandResult, format: OutputFormat) -> str:
    """Format command result for display."""
    if format == OutputFormat.JSON:
        return json.dumps(result.to_dict(), indent=2, default=str)

    elif format == OutputFormat.TABLE:
        if isinstance(result.data, list) and result.data and isinstance(result.data[0], dict):
            keys = list(result.data[0].keys())
            lines = [" | ".join(keys), "-" * (len(keys) * 15)]
            for row in result.data:
                lines.append(" | ".join(str(row.get(k, "")) for k in keys))
            return "\n".join(lines)
        return format_output(result, OutputFormat.TEXT)

    else:  # TEXT
        if result.success:
            output = result.message
            if result.data:
                if isinstance(result.data, dict):
                    for k, v in result.data.items():
                        output += f"\n  {k}: {v}"
                elif isinstance(result.data, list):
                    for row in result.data:
                        output += f"\n  {row}"
                else:
                    output += f"\n{result.data}"
            return output
        return f"Error: {result.error}"
