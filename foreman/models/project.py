"""
Project, ProjectProduct and ProjectRecipe models.

Project = work order aggregating target quantities of products and/or
recipes. Moving a project from PLANNING to ACTIVE freezes its process
definitions as snapshots and fans out the initial tasks.
"""

import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class ProjectStatus(models.TextChoices):
    """Project lifecycle status."""

    PLANNING = "PLANNING", _("Planning")
    ACTIVE = "ACTIVE", _("Active")
    ON_HOLD = "ON_HOLD", _("On Hold")
    COMPLETED = "COMPLETED", _("Completed")
    CANCELLED = "CANCELLED", _("Cancelled")


class Priority(models.TextChoices):
    """Priority shared by projects and the tasks they generate."""

    LOW = "LOW", _("Low")
    MEDIUM = "MEDIUM", _("Medium")
    HIGH = "HIGH", _("High")
    URGENT = "URGENT", _("Urgent")


class Project(models.Model):
    """
    Work order.

    Status: PLANNING → ACTIVE ⇄ ON_HOLD → COMPLETED
            any non-terminal → CANCELLED
            ACTIVE/ON_HOLD → PLANNING (deactivation: tasks are deleted)
    """

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )

    # Identification
    code = models.CharField(
        unique=True,
        max_length=50,
        blank=True,
        verbose_name=_("Code"),
        help_text=_("Unique identifier (auto-generated if empty)"),
    )
    name = models.CharField(
        max_length=255,
        verbose_name=_("Name"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )

    status = models.CharField(
        max_length=20,
        choices=ProjectStatus.choices,
        default=ProjectStatus.PLANNING,
        db_index=True,
        verbose_name=_("Status"),
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        db_index=True,
        verbose_name=_("Priority"),
    )

    start_date = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Start Date"),
    )
    deadline = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Deadline"),
    )
    activated_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Activated at"),
    )

    created_by = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Created by"),
        help_text=_("Ex: 'user:jane', 'api:erp-sync'"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "foreman_project"
        verbose_name = _("Project")
        verbose_name_plural = _("Projects")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "priority"], name="foreman_project_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}" if self.code else self.name

    def save(self, *args, **kwargs):
        """Override save to auto-generate code."""
        if not self.code:
            from foreman.conf import get_setting
            from foreman.models.sequence import CodeSequence

            self.code = CodeSequence.next_code(
                get_setting("PROJECT_CODE_PREFIX"), timezone.now().year
            )
        super().save(*args, **kwargs)

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE (delegates to foreman.services.activation)
    # ══════════════════════════════════════════════════════════════

    def activate(self, user=None):
        """
        PLANNING → ACTIVE: freeze snapshots and fan out initial tasks.

        Returns an ActivationResult. All-or-nothing: on error the project
        stays in PLANNING and no task is written.
        """
        from foreman.services.activation import ForemanActivation

        result = ForemanActivation.activate_project(self, user=user)
        self.refresh_from_db()
        return result

    def deactivate(self, user=None) -> int:
        """ACTIVE/ON_HOLD → PLANNING. Returns how many tasks were deleted."""
        from foreman.services.activation import ForemanActivation

        deleted = ForemanActivation.deactivate_project(self, user=user)
        self.refresh_from_db()
        return deleted

    @property
    def is_editable(self) -> bool:
        """Lines can only change while planning."""
        return self.status == ProjectStatus.PLANNING

    @property
    def target_total(self) -> int:
        """Sum of target quantities over all lines."""
        products = self.product_lines.aggregate(t=models.Sum("target_quantity"))["t"]
        recipes = self.recipe_lines.aggregate(t=models.Sum("target_quantity"))["t"]
        return (products or 0) + (recipes or 0)


class ProjectProduct(models.Model):
    """Product line of a project."""

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="product_lines",
        verbose_name=_("Project"),
    )
    product = models.ForeignKey(
        "foreman.Product",
        on_delete=models.PROTECT,
        related_name="project_lines",
        verbose_name=_("Product"),
    )
    target_quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_("Target Quantity"),
    )
    produced_quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Produced Quantity"),
    )
    # Frozen on activation, cleared on deactivation
    product_snapshot = models.ForeignKey(
        "foreman.ProductSnapshot",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="project_lines",
        verbose_name=_("Product Snapshot"),
    )

    class Meta:
        db_table = "foreman_project_product"
        verbose_name = _("Project Product")
        verbose_name_plural = _("Project Products")
        ordering = ["project", "id"]

    def __str__(self) -> str:
        return f"{self.product} x{self.target_quantity}"


class ProjectRecipe(models.Model):
    """Standalone recipe line of a project (no product context)."""

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="recipe_lines",
        verbose_name=_("Project"),
    )
    recipe = models.ForeignKey(
        "foreman.Recipe",
        on_delete=models.PROTECT,
        related_name="project_lines",
        verbose_name=_("Recipe"),
    )
    target_quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_("Target Quantity"),
    )
    produced_quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Produced Quantity"),
    )
    recipe_snapshot = models.ForeignKey(
        "foreman.RecipeSnapshot",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="project_lines",
        verbose_name=_("Recipe Snapshot"),
    )

    class Meta:
        db_table = "foreman_project_recipe"
        verbose_name = _("Project Recipe")
        verbose_name_plural = _("Project Recipes")
        ordering = ["project", "id"]

    def __str__(self) -> str:
        return f"{self.recipe} x{self.target_quantity}"
