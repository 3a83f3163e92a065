"""
Foreman Result Types.

Structured results for project lifecycle operations.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from foreman.models import Project, Task


@dataclass
class ActivationResult:
    """
    Outcome of a project activation.

    tasks holds the initial tasks created (one per execution).
    """

    project: Project
    tasks: list[Task] = field(default_factory=list)

    @property
    def tasks_created(self) -> int:
        return len(self.tasks)

    @property
    def tasks_by_device_type(self) -> dict[int, int]:
        """Task count per device type id."""
        return dict(Counter(task.device_type_id for task in self.tasks))
