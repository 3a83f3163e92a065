"""
RecipeSnapshot and ProductSnapshot models.

A snapshot is an immutable, versioned copy of a live Recipe or Product.
Projects and tasks reference snapshots, so editing a recipe never changes
work that is already in progress.

Snapshots are created lazily by foreman.services.snapshots and are
permanent: save() on an existing row and delete() both raise, and a
Recipe or Product that has snapshots cannot be deleted (PROTECT).
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from foreman.exceptions import ForemanError


class ImmutableSnapshot(models.Model):
    """Fields and write guards shared by every snapshot kind."""

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )
    version = models.PositiveIntegerField(
        verbose_name=_("Version"),
        help_text=_("1, 2, 3... per original entity"),
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name=_("created at"),
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ForemanError(
                "CONFLICT",
                message="Snapshots are immutable",
                snapshot=str(self.uuid),
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ForemanError(
            "CONFLICT",
            message="Snapshots are permanent",
            snapshot=str(self.uuid),
        )


class RecipeSnapshot(ImmutableSnapshot):
    """
    Frozen copy of a Recipe.

    steps keep their ids, so Task.step_id and depends_on still resolve
    inside the snapshot. raw_materials is denormalized:

        [{"material": 3, "code": "steel-rod", "name": "Steel Rod",
          "unit": "m", "unit_price": "4.50", "quantity_required": "2.000"}]
    """

    original_recipe = models.ForeignKey(
        "foreman.Recipe",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="snapshots",
        verbose_name=_("Original Recipe"),
    )
    recipe_number = models.CharField(
        max_length=50,
        blank=True,
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
    steps = models.JSONField(
        default=list,
        verbose_name=_("Steps"),
    )
    raw_materials = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_("Raw Materials"),
    )
    estimated_duration = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Estimated Duration (minutes)"),
    )

    class Meta:
        db_table = "foreman_recipe_snapshot"
        verbose_name = _("Recipe Snapshot")
        verbose_name_plural = _("Recipe Snapshots")
        ordering = ["original_recipe", "-version"]
        constraints = [
            models.UniqueConstraint(
                fields=["original_recipe", "version"],
                name="foreman_recipe_snapshot_unique_version",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} (snapshot v{self.version})"

    @property
    def entry_step(self) -> dict | None:
        """Step with order 1 (where every execution starts)."""
        for step in self.steps or []:
            if step.get("order") == 1:
                return step
        return None

    @property
    def max_step_order(self) -> int:
        return max((step.get("order") or 0 for step in self.steps or []), default=0)


class ProductSnapshot(ImmutableSnapshot):
    """Frozen copy of a Product; its lines point at RecipeSnapshots."""

    original_product = models.ForeignKey(
        "foreman.Product",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="snapshots",
        verbose_name=_("Original Product"),
    )
    design_number = models.CharField(
        max_length=100,
        verbose_name=_("Design Number"),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_("Name"),
    )
    customer_name = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_("Customer"),
    )

    class Meta:
        db_table = "foreman_product_snapshot"
        verbose_name = _("Product Snapshot")
        verbose_name_plural = _("Product Snapshots")
        ordering = ["original_product", "-version"]
        constraints = [
            models.UniqueConstraint(
                fields=["original_product", "version"],
                name="foreman_product_snapshot_unique_version",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.design_number} - {self.name} (snapshot v{self.version})"


class ProductSnapshotLine(models.Model):
    """Recipe entry of a ProductSnapshot, bound to a RecipeSnapshot."""

    snapshot = models.ForeignKey(
        ProductSnapshot,
        on_delete=models.PROTECT,
        related_name="lines",
        verbose_name=_("Product Snapshot"),
    )
    recipe_snapshot = models.ForeignKey(
        RecipeSnapshot,
        on_delete=models.PROTECT,
        related_name="product_lines",
        verbose_name=_("Recipe Snapshot"),
    )
    quantity = models.PositiveIntegerField(
        verbose_name=_("Quantity"),
        help_text=_("Recipe executions per unit of product"),
    )

    class Meta:
        db_table = "foreman_product_snapshot_line"
        verbose_name = _("Product Snapshot Line")
        verbose_name_plural = _("Product Snapshot Lines")
        ordering = ["snapshot", "id"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ForemanError("CONFLICT", message="Snapshots are immutable")
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.recipe_snapshot} x{self.quantity}"
