"""Patch Tuesday schedule calculation.

This package provides:
- Patch Tuesday resolution for a run date
- Day-offset mapping of existing windows onto the current cycle
- Collection name filtering for discovery
"""

from .models import (
    DayOfWeek,
    CollectionRef,
    MaintenanceWindowSpec,
    ScheduledWindow,
    ExistingWindow,
)

from .calculator import (
    day_of_week,
    compute_patch_tuesday,
    resolve_current_cycle,
    compute_new_window,
    offset_from_patch_tuesday,
    precedes_patch_tuesday,
)

from .filters import (
    CollectionFilter,
    CollectionFilterError,
    DEFAULT_EXCLUDE_PATTERNS,
)

__all__ = [
    # Models
    'DayOfWeek',
    'CollectionRef',
    'MaintenanceWindowSpec',
    'ScheduledWindow',
    'ExistingWindow',

    # Calculation
    'day_of_week',
    'compute_patch_tuesday',
    'resolve_current_cycle',
    'compute_new_window',
    'offset_from_patch_tuesday',
    'precedes_patch_tuesday',

    # Discovery
    'CollectionFilter',
    'CollectionFilterError',
    'DEFAULT_EXCLUDE_PATTERNS',
]
