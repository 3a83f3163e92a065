"""
Activation service -- project lifecycle and initial task fan-out.

activate_project() runs as one transaction:

    lock project → snapshot every line → build Task objects →
    bulk insert (batched) → status ACTIVE

Any error rolls all of it back, snapshots created on the way included, so
a project is never left ACTIVE with only part of its tasks.
"""

import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from simple_history.utils import bulk_create_with_history

from foreman.conf import get_task_batch_size
from foreman.exceptions import ForemanError
from foreman.models import (
    DeviceType,
    Project,
    ProjectStatus,
    RecipeSnapshot,
    Task,
    TaskStatus,
)
from foreman.results import ActivationResult
from foreman.services.snapshots import ForemanSnapshots
from foreman.services.steps import entry_step, max_order

logger = logging.getLogger(__name__)


TERMINAL_STATUSES = (ProjectStatus.COMPLETED, ProjectStatus.CANCELLED)


class ForemanActivation:
    """
    Project lifecycle operations.

    All methods are @classmethod so the mixin can be composed into Foreman
    without instantiation.
    """

    @classmethod
    def activate_project(cls, project, user=None) -> ActivationResult:
        """
        PLANNING → ACTIVE.

        For every product line, each recipe entry of the product snapshot
        yields target_quantity × quantity executions; every recipe line
        yields target_quantity executions. One PENDING task is created per
        execution, on the entry step (order 1) of the recipe snapshot.

        Raises:
            ForemanError NOT_FOUND: project does not exist
            ForemanError INVALID_STATUS: project is not in PLANNING
            ForemanError VALIDATION_ERROR: no lines, or an entry step
                without a (valid) device type
            ForemanError CONFLICT: tasks for this fan-out already exist
            ForemanError INTERNAL_ERROR: persistence failure
        """
        pk = getattr(project, "pk", project)

        try:
            with transaction.atomic():
                project = cls._lock(pk)

                if project.status != ProjectStatus.PLANNING:
                    raise ForemanError(
                        "INVALID_STATUS",
                        project=project.code,
                        current=project.status,
                        expected=ProjectStatus.PLANNING,
                    )

                product_lines = list(project.product_lines.order_by("id"))
                recipe_lines = list(project.recipe_lines.order_by("id"))

                if not product_lines and not recipe_lines:
                    raise ForemanError(
                        "VALIDATION_ERROR",
                        project=project.code,
                        message="Cannot activate project without product or recipe lines",
                    )

                tasks = []

                for line in product_lines:
                    snapshot = ForemanSnapshots.get_or_create_product_snapshot(
                        line.product_id
                    )
                    line.product_snapshot = snapshot
                    line.save(update_fields=["product_snapshot"])

                    entries = snapshot.lines.select_related("recipe_snapshot").order_by("id")
                    for entry in entries:
                        tasks.extend(
                            cls._fan_out(
                                project,
                                entry.recipe_snapshot,
                                line.target_quantity * entry.quantity,
                                label=snapshot.name,
                                project_product=line,
                                product_snapshot=snapshot,
                                product_id=line.product_id,
                            )
                        )

                for line in recipe_lines:
                    snapshot = ForemanSnapshots.get_or_create_recipe_snapshot(
                        line.recipe_id
                    )
                    line.recipe_snapshot = snapshot
                    line.save(update_fields=["recipe_snapshot"])

                    tasks.extend(
                        cls._fan_out(
                            project,
                            snapshot,
                            line.target_quantity,
                            label=project.name,
                            project_recipe=line,
                        )
                    )

                cls._check_device_types(project, tasks)

                tasks = bulk_create_with_history(
                    tasks,
                    Task,
                    batch_size=get_task_batch_size(),
                    default_user=user if getattr(user, "pk", None) else None,
                )

                now = timezone.now()
                project.status = ProjectStatus.ACTIVE
                project.activated_at = now
                if not project.start_date:
                    project.start_date = now
                project.save(
                    update_fields=["status", "activated_at", "start_date", "updated_at"]
                )

                transaction.on_commit(
                    lambda: cls._emit_activated(project, tasks, user)
                )

        except IntegrityError as e:
            logger.warning(f"Activation conflict for project {pk}: {e}")
            raise ForemanError(
                "CONFLICT",
                project=pk,
                message="Tasks for this project already exist",
            ) from e
        except DatabaseError as e:
            logger.exception(f"Activation of project {pk} failed")
            raise ForemanError("INTERNAL_ERROR", project=pk) from e

        logger.info(
            f"Project {project.code} activated with {len(tasks)} tasks",
            extra={
                "project": project.code,
                "tasks": len(tasks),
                "product_lines": len(product_lines),
                "recipe_lines": len(recipe_lines),
            },
        )

        return ActivationResult(project=project, tasks=tasks)

    @classmethod
    def deactivate_project(cls, project, user=None) -> int:
        """
        ACTIVE/ON_HOLD → PLANNING.

        Deletes all tasks, clears the frozen snapshot references and resets
        produced quantities so the project can be edited again.
        Snapshots themselves are kept.

        Returns:
            Number of tasks deleted
        """
        pk = getattr(project, "pk", project)

        with transaction.atomic():
            project = cls._lock(pk)

            if project.status not in (ProjectStatus.ACTIVE, ProjectStatus.ON_HOLD):
                raise ForemanError(
                    "INVALID_STATUS",
                    project=project.code,
                    current=project.status,
                    expected=[ProjectStatus.ACTIVE, ProjectStatus.ON_HOLD],
                )

            deleted = project.tasks.count()
            project.tasks.all().delete()

            project.product_lines.update(product_snapshot=None, produced_quantity=0)
            project.recipe_lines.update(recipe_snapshot=None, produced_quantity=0)

            project.status = ProjectStatus.PLANNING
            project.activated_at = None
            project.save(update_fields=["status", "activated_at", "updated_at"])

            transaction.on_commit(lambda: cls._emit_deactivated(project, deleted, user))

        logger.info(
            f"Project {project.code} deactivated, {deleted} tasks deleted",
            extra={"project": project.code, "tasks_deleted": deleted},
        )

        return deleted

    @classmethod
    def hold_project(cls, project, user=None) -> Project:
        """ACTIVE → ON_HOLD."""
        return cls._transition(project, [ProjectStatus.ACTIVE], ProjectStatus.ON_HOLD)

    @classmethod
    def resume_project(cls, project, user=None) -> Project:
        """ON_HOLD → ACTIVE. Tasks already exist, nothing is fanned out."""
        return cls._transition(project, [ProjectStatus.ON_HOLD], ProjectStatus.ACTIVE)

    @classmethod
    def complete_project(cls, project, user=None) -> Project:
        """ACTIVE → COMPLETED."""
        return cls._transition(project, [ProjectStatus.ACTIVE], ProjectStatus.COMPLETED)

    @classmethod
    def cancel_project(cls, project, user=None) -> Project:
        """Any non-terminal status → CANCELLED."""
        allowed = [s for s in ProjectStatus.values if s not in TERMINAL_STATUSES]
        return cls._transition(project, allowed, ProjectStatus.CANCELLED)

    @classmethod
    def change_status(cls, project, status: str, user=None):
        """
        Move a project to ``status`` through the matching operation.

        Returns the ActivationResult for activations, otherwise the project.
        """
        current = project.status
        if status == current:
            return project

        if status == ProjectStatus.ACTIVE and current == ProjectStatus.PLANNING:
            return cls.activate_project(project, user=user)
        if status == ProjectStatus.ACTIVE:
            return cls.resume_project(project, user=user)
        if status == ProjectStatus.PLANNING:
            cls.deactivate_project(project, user=user)
            project.refresh_from_db()
            return project
        if status == ProjectStatus.ON_HOLD:
            return cls.hold_project(project, user=user)
        if status == ProjectStatus.COMPLETED:
            return cls.complete_project(project, user=user)
        if status == ProjectStatus.CANCELLED:
            return cls.cancel_project(project, user=user)

        raise ForemanError("VALIDATION_ERROR", status=status, message="Unknown status")

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _lock(cls, pk) -> Project:
        try:
            return Project.objects.select_for_update().get(pk=pk)
        except Project.DoesNotExist:
            raise ForemanError("NOT_FOUND", entity="project", id=pk)

    @classmethod
    def _fan_out(
        cls,
        project: Project,
        recipe_snapshot: RecipeSnapshot,
        total_executions: int,
        label: str,
        project_product=None,
        project_recipe=None,
        product_snapshot=None,
        product_id=None,
    ) -> list[Task]:
        """Unsaved Task objects for executions 1..total_executions."""
        step = entry_step(recipe_snapshot.steps or [])
        if step is None or total_executions < 1:
            return []

        try:
            device_type_id = int(step.get("device_type"))
        except (TypeError, ValueError):
            raise ForemanError(
                "VALIDATION_ERROR",
                project=project.code,
                recipe=recipe_snapshot.name,
                step=step.get("id"),
                message=(
                    f"Step {step.get('order')} of recipe '{recipe_snapshot.name}' "
                    f"does not have a device type"
                ),
            )

        is_last = step.get("order") == max_order(recipe_snapshot.steps)

        return [
            Task(
                title=f"{step.get('name')} - Exec {n}/{total_executions} - {label}",
                description=step.get("description") or "",
                project=project,
                project_product=project_product,
                project_recipe=project_recipe,
                product_snapshot=product_snapshot,
                recipe_snapshot=recipe_snapshot,
                product_id=product_id,
                recipe_id=recipe_snapshot.original_recipe_id,
                step_id=str(step.get("id")),
                step_order=step.get("order"),
                is_last_step_in_recipe=is_last,
                recipe_execution_number=n,
                total_recipe_executions=total_executions,
                device_type_id=device_type_id,
                status=TaskStatus.PENDING,
                priority=project.priority,
                estimated_duration=int(step.get("estimated_duration") or 0),
            )
            for n in range(1, total_executions + 1)
        ]

    @classmethod
    def _check_device_types(cls, project: Project, tasks: list[Task]) -> None:
        """Every referenced device type must still exist."""
        wanted = {task.device_type_id for task in tasks}
        if not wanted:
            return

        existing = set(
            DeviceType.objects.filter(pk__in=wanted).values_list("pk", flat=True)
        )
        missing = sorted(wanted - existing)
        if missing:
            raise ForemanError(
                "VALIDATION_ERROR",
                project=project.code,
                device_types=missing,
                message="Entry step references a device type that does not exist",
            )

    @classmethod
    def _transition(cls, project, allowed_from, to) -> Project:
        pk = getattr(project, "pk", project)

        with transaction.atomic():
            locked = cls._lock(pk)
            if locked.status not in allowed_from:
                raise ForemanError(
                    "INVALID_STATUS",
                    project=locked.code,
                    current=locked.status,
                    expected=list(allowed_from),
                )
            previous = locked.status
            locked.status = to
            locked.save(update_fields=["status", "updated_at"])

        logger.info(f"Project {locked.code}: {previous} → {to}")

        if isinstance(project, Project):
            project.refresh_from_db()
            return project
        return locked

    @classmethod
    def _emit_activated(cls, project, tasks, user=None):
        from foreman.signals import project_activated, tasks_generated

        tasks_generated.send(sender=cls, project=project, tasks=tasks)
        project_activated.send(sender=cls, project=project, user=user)

    @classmethod
    def _emit_deactivated(cls, project, tasks_deleted, user=None):
        from foreman.signals import project_deactivated

        project_deactivated.send(
            sender=cls, project=project, tasks_deleted=tasks_deleted, user=user
        )
