"""
DeviceType and RawMaterial models.

Reference data used by recipes. Devices themselves and stock levels live
outside foreman; a step only names the *type* of device it needs.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class DeviceType(models.Model):
    """
    Kind of equipment a recipe step must run on.

    Examples: CNC Lathe, Welding Station, Paint Booth...
    """

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_("Code"),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_("Name"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_("Active"),
    )

    class Meta:
        db_table = "foreman_device_type"
        verbose_name = _("Device Type")
        verbose_name_plural = _("Device Types")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class RawMaterial(models.Model):
    """Raw material referenced by recipes (copied into snapshots)."""

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_("Code"),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_("Name"),
    )
    unit = models.CharField(
        max_length=10,
        default="EA",
        verbose_name=_("Unit"),
        help_text=_("EA, kg, m, L..."),
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        verbose_name=_("Unit Price"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )

    class Meta:
        db_table = "foreman_raw_material"
        verbose_name = _("Raw Material")
        verbose_name_plural = _("Raw Materials")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.unit})"
