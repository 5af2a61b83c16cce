"""
bootstrap/ - Bootstrap Layer

Application settings, TOM configuration files, logging and the CLI
entry point.
"""

from .config import (
    TomGateConfig,
    EngineConfig,
    LoggingConfig,
    load_config,
    get_config,
    reset_config,
)

from .loader import (
    load_tom_config,
    dump_tom_config,
    load_effective_config,
)

from .entrypoints import (
    setup_logging,
    cli_main,
)


__all__ = [
    # Config
    "TomGateConfig",
    "EngineConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reset_config",
    # Loader
    "load_tom_config",
    "dump_tom_config",
    "load_effective_config",
    # Entrypoints
    "setup_logging",
    "cli_main",
]
