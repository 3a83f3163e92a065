"""
Recipe and RecipeMaterial models.

Recipe = versioned production process - defines HOW to make something.
RecipeMaterial = raw material consumed by one execution of the recipe.

Steps are stored as a JSON list on the recipe and validated as a
dependency graph on every save (see foreman.services.steps).
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from foreman.exceptions import ForemanError
from foreman.services.steps import normalize_steps, validate_steps


class Recipe(models.Model):
    """
    Production recipe.

    Defines:
    - Steps with dependencies and the device type each one runs on
    - Estimated duration (sum of step durations, always derived)
    - Raw materials (RecipeMaterial)
    - Version, incremented on every update
    """

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )

    # Identification
    recipe_number = models.CharField(
        max_length=50,
        blank=True,
        db_index=True,
        verbose_name=_("Recipe Number"),
    )
    name = models.CharField(
        max_length=255,
        verbose_name=_("Name"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )

    version = models.PositiveIntegerField(
        default=1,
        editable=False,
        verbose_name=_("Version"),
        help_text=_("Incremented on every update"),
    )

    # Production steps
    steps = models.JSONField(
        default=list,
        verbose_name=_("Steps"),
        help_text=_(
            "List of steps: {id, order, name, estimated_duration, "
            "device_type, depends_on}"
        ),
    )

    # Derived: sum of step durations (minutes)
    estimated_duration = models.PositiveIntegerField(
        default=0,
        editable=False,
        verbose_name=_("Estimated Duration (minutes)"),
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name=_("Active"),
        help_text=_("Recipe can be used for new projects"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "foreman_recipe"
        verbose_name = _("Recipe")
        verbose_name_plural = _("Recipes")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="foreman_recipe_active_idx"),
        ]

    def clean(self):
        super().clean()
        if not self.steps:
            raise ValidationError({"steps": _("Recipe must have at least one step.")})
        try:
            steps = normalize_steps(self.steps)
            duration = validate_steps(steps)
        except ForemanError as e:
            raise ValidationError({"steps": e.details.get("message", e.code)})

        self.steps = steps
        self.estimated_duration = int(duration)

    def save(self, *args, **kwargs):
        self.full_clean()
        if not self._state.adding:
            self.version = (
                Recipe.objects.filter(pk=self.pk)
                .values_list("version", flat=True)
                .first()
                or 0
            ) + 1
            update_fields = kwargs.get("update_fields")
            if update_fields is not None:
                kwargs["update_fields"] = {
                    *update_fields, "version", "estimated_duration", "steps", "updated_at"
                }
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} (v{self.version})"

    def get_step(self, step_id: str) -> dict | None:
        """Get step configuration by id."""
        for step in self.steps or []:
            if step.get("id") == step_id:
                return step
        return None

    @property
    def entry_step(self) -> dict | None:
        """Step with order 1."""
        for step in self.steps or []:
            if step.get("order") == 1:
                return step
        return None


class RecipeMaterial(models.Model):
    """Raw material required per execution of a recipe."""

    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="materials",
        verbose_name=_("Recipe"),
    )
    material = models.ForeignKey(
        "foreman.RawMaterial",
        on_delete=models.PROTECT,
        related_name="recipe_lines",
        verbose_name=_("Raw Material"),
    )
    quantity_required = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        default=Decimal("1"),
        verbose_name=_("Quantity Required"),
        help_text=_("Quantity needed per unit produced"),
    )

    class Meta:
        db_table = "foreman_recipe_material"
        verbose_name = _("Recipe Material")
        verbose_name_plural = _("Recipe Materials")
        ordering = ["recipe", "id"]
        unique_together = [["recipe", "material"]]

    def __str__(self) -> str:
        return f"{self.material} x {self.quantity_required}"
