"""
Foreman Services.

Business logic that doesn't belong in models:
- steps: step graph validation (pure, used by Recipe.clean)
- snapshots: immutable Recipe/Product copies
- activation: project lifecycle and initial task fan-out

Only the pure step functions are exported here; the snapshot and
activation mixins import models and are composed in foreman.service.
"""

from foreman.services.steps import entry_step, max_order, normalize_steps, validate_steps

__all__ = [
    "validate_steps",
    "normalize_steps",
    "entry_step",
    "max_order",
]
