"""
Code sequence for atomic Project code generation.

One counter row per prefix, incremented under SELECT FOR UPDATE, so two
projects created at the same time never receive the same code.
"""

from django.db import models, transaction
from django.utils.translation import gettext_lazy as _


class CodeSequence(models.Model):
    """
    Atomic counter for generating sequential codes.

    One row per (prefix), e.g. "PRJ-2026" → last_value = 42.

    Usage (internal to Project.save):
        seq_val = CodeSequence.next_value("PRJ-2026")
        # Returns 1, 2, 3... atomically
    """

    prefix = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_("Prefix"),
    )
    last_value = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Last value"),
    )

    class Meta:
        db_table = "foreman_code_sequence"
        verbose_name = _("Code Sequence")
        verbose_name_plural = _("Code Sequences")

    def __str__(self) -> str:
        return f"{self.prefix} → {self.last_value}"

    @classmethod
    def next_value(cls, prefix: str) -> int:
        """Atomically increment and return the next value for a prefix."""
        with transaction.atomic():
            seq, _created = cls.objects.select_for_update().get_or_create(
                prefix=prefix, defaults={"last_value": 0}
            )
            seq.last_value += 1
            seq.save(update_fields=["last_value"])
            return seq.last_value

    @classmethod
    def next_code(cls, prefix: str, year: int) -> str:
        """Formatted code, e.g. PRJ-2026-00042."""
        return f"{prefix}-{year}-{cls.next_value(f'{prefix}-{year}'):05d}"
