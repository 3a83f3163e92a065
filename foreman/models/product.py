"""
Product and ProductRecipe models.

Product = physical good, made by executing one or more recipes.
ProductRecipe = how many executions of a recipe one unit of product needs.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class Product(models.Model):
    """Manufactured good, identified by its design number."""

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )

    design_number = models.CharField(
        unique=True,
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
    quantity_unit = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_("Quantity Unit"),
    )

    recipes = models.ManyToManyField(
        "foreman.Recipe",
        through="foreman.ProductRecipe",
        related_name="products",
        verbose_name=_("Recipes"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "foreman_product"
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["design_number"]
        indexes = [
            models.Index(fields=["name"], name="foreman_product_name_idx"),
            models.Index(fields=["customer_name"], name="foreman_product_customer_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.design_number} - {self.name}"


class ProductRecipe(models.Model):
    """Recipe entry of a product: executions per unit of product."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="recipe_lines",
        verbose_name=_("Product"),
    )
    recipe = models.ForeignKey(
        "foreman.Recipe",
        on_delete=models.PROTECT,
        related_name="product_lines",
        verbose_name=_("Recipe"),
    )
    quantity = models.PositiveIntegerField(
        default=1,
        verbose_name=_("Quantity"),
        help_text=_("Recipe executions per unit of product"),
    )

    class Meta:
        db_table = "foreman_product_recipe"
        verbose_name = _("Product Recipe")
        verbose_name_plural = _("Product Recipes")
        ordering = ["product", "id"]
        unique_together = [["product", "recipe"]]

    def clean(self):
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": _("Must be at least 1.")})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product} ← {self.recipe} x{self.quantity}"
