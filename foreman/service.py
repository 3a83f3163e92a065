"""
Foreman Service - Thin wrapper over models and services.

Business logic lives in the models (Recipe.clean, Project.activate) and in
the snapshot/activation mixins. This class only composes them.

Usage:
    from foreman import foreman, ForemanError

    # Recipes
    total = foreman.validate_steps(recipe.steps)

    # Snapshots
    snapshot = foreman.get_or_create_recipe_snapshot(recipe)

    # Projects
    result = foreman.activate_project(project, user=request.user)
    print(result.tasks_created, result.tasks_by_device_type)

    foreman.hold_project(project)
    foreman.resume_project(project)
    foreman.deactivate_project(project)
"""

import logging

from foreman.exceptions import ForemanError
from foreman.models import Project, Task, TaskStatus
from foreman.services.activation import ForemanActivation
from foreman.services.snapshots import ForemanSnapshots
from foreman.services.steps import normalize_steps, validate_steps

logger = logging.getLogger(__name__)


class Foreman(ForemanSnapshots, ForemanActivation):
    """
    Main API for Foreman (thin wrapper).

    Composes:
        ForemanSnapshots: get_or_create_*_snapshot, latest_*, batch_*
        ForemanActivation: activate/deactivate/hold/resume/complete/cancel
    """

    # ══════════════════════════════════════════════════════════════
    # RECIPES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def validate_steps(cls, steps) -> int:
        """
        Validate a step list and return its total estimated duration.

        Raises:
            ForemanError VALIDATION_ERROR on malformed steps, dangling
            dependencies or cycles
        """
        return validate_steps(normalize_steps(steps, require_device_type=False))

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get_project(cls, code: str) -> Project:
        """Get project by code."""
        try:
            return Project.objects.get(code=code)
        except Project.DoesNotExist:
            raise ForemanError("NOT_FOUND", entity="project", project=code)

    @classmethod
    def get_tasks(cls, project, status: str = None) -> list[Task]:
        """Tasks of a project, optionally filtered by status."""
        qs = Task.objects.filter(project=project)
        if status:
            qs = qs.filter(status=status)
        return list(qs.select_related("device_type"))

    @classmethod
    def get_pending_tasks(cls, device_type=None) -> list[Task]:
        """PENDING tasks, optionally for one device type (routing queue)."""
        qs = Task.objects.filter(status=TaskStatus.PENDING)
        if device_type is not None:
            qs = qs.filter(device_type=device_type)
        return list(qs.order_by("created_at", "recipe_execution_number"))
