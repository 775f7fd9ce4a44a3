"""CLI module for patchwindow.

This package provides the command-line interface, configuration loading and
the run driver that applies a Patch Tuesday cycle to a platform.
"""

from .runner import (
    # Exit codes
    ExitCode,

    # Run driver
    RescheduleRunner,
    RunOutcome,
    run_reschedule,
)

from .config import (
    PatchWindowConfiguration,
    load_configuration,
)

__all__ = [
    # Exit codes
    'ExitCode',

    # Run driver
    'RescheduleRunner',
    'RunOutcome',
    'run_reschedule',

    # Configuration
    'PatchWindowConfiguration',
    'load_configuration',
]
