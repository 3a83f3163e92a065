"""
Task model.

Task = one trackable execution of one recipe step.

Tasks are created in bulk when a project is activated (one per execution,
on the entry step) and are advanced afterwards by the execution engine of
the host system, which foreman does not implement.
"""

import uuid

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from foreman.models.project import Priority


class TaskStatus(models.TextChoices):
    """Task lifecycle status."""

    PENDING = "PENDING", _("Pending")
    ONGOING = "ONGOING", _("Ongoing")
    PAUSED = "PAUSED", _("Paused")
    PAUSED_EMERGENCY = "PAUSED_EMERGENCY", _("Paused (emergency)")
    COMPLETED = "COMPLETED", _("Completed")
    FAILED = "FAILED", _("Failed")


class Task(models.Model):
    """
    Execution of a recipe step, routed by device type.

    References the frozen snapshots (recipe_snapshot, product_snapshot) and
    keeps the live ids (recipe, product) for reporting only.
    """

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )

    title = models.CharField(
        max_length=255,
        verbose_name=_("Title"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )

    project = models.ForeignKey(
        "foreman.Project",
        on_delete=models.CASCADE,
        related_name="tasks",
        verbose_name=_("Project"),
    )
    # The line that produced this task (exactly one is set)
    project_product = models.ForeignKey(
        "foreman.ProjectProduct",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="tasks",
        verbose_name=_("Project Product"),
    )
    project_recipe = models.ForeignKey(
        "foreman.ProjectRecipe",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="tasks",
        verbose_name=_("Project Recipe"),
    )

    # Frozen definitions
    product_snapshot = models.ForeignKey(
        "foreman.ProductSnapshot",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="tasks",
        verbose_name=_("Product Snapshot"),
    )
    recipe_snapshot = models.ForeignKey(
        "foreman.RecipeSnapshot",
        on_delete=models.PROTECT,
        related_name="tasks",
        verbose_name=_("Recipe Snapshot"),
    )

    # Live references (reporting only)
    product = models.ForeignKey(
        "foreman.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tasks",
        verbose_name=_("Product"),
    )
    recipe = models.ForeignKey(
        "foreman.Recipe",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tasks",
        verbose_name=_("Recipe"),
    )

    # Position within the execution
    step_id = models.CharField(
        max_length=64,
        verbose_name=_("Step"),
        help_text=_("Step id inside the recipe snapshot"),
    )
    step_order = models.PositiveIntegerField(
        verbose_name=_("Step Order"),
    )
    is_last_step_in_recipe = models.BooleanField(
        default=False,
        verbose_name=_("Last Step"),
    )
    recipe_execution_number = models.PositiveIntegerField(
        verbose_name=_("Execution"),
        help_text=_("1..total_recipe_executions"),
    )
    total_recipe_executions = models.PositiveIntegerField(
        verbose_name=_("Total Executions"),
    )

    device_type = models.ForeignKey(
        "foreman.DeviceType",
        on_delete=models.PROTECT,
        related_name="tasks",
        verbose_name=_("Device Type"),
    )

    status = models.CharField(
        max_length=20,
        choices=TaskStatus.choices,
        default=TaskStatus.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        verbose_name=_("Priority"),
    )
    estimated_duration = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Estimated Duration (minutes)"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "foreman_task"
        verbose_name = _("Task")
        verbose_name_plural = _("Tasks")
        ordering = ["project", "recipe_snapshot", "recipe_execution_number", "step_order"]
        indexes = [
            models.Index(fields=["project", "status"], name="foreman_task_project_idx"),
            models.Index(fields=["device_type", "status"], name="foreman_task_device_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=[
                    "project_product",
                    "recipe_snapshot",
                    "recipe_execution_number",
                    "step_order",
                ],
                condition=Q(project_product__isnull=False),
                name="foreman_task_unique_product_execution",
            ),
            models.UniqueConstraint(
                fields=["project_recipe", "recipe_execution_number", "step_order"],
                condition=Q(project_recipe__isnull=False),
                name="foreman_task_unique_recipe_execution",
            ),
        ]

    def __str__(self) -> str:
        return self.title
