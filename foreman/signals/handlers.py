"""
Foreman Signal Handlers.

Keeps snapshot staleness correct: a product snapshot embeds recipe
snapshots, so any change to a recipe (or its materials) must also make
the products that use it newer than their latest snapshot.

This module is imported in apps.py to register handlers.
"""

import logging
from collections import Counter

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from django.utils import timezone

from foreman.models import Product, ProductRecipe, Recipe, RecipeMaterial
from foreman.signals import tasks_generated

logger = logging.getLogger(__name__)


def _touch_products_of(recipe_id) -> int:
    return Product.objects.filter(recipe_lines__recipe_id=recipe_id).update(
        updated_at=timezone.now()
    )


@receiver(post_save, sender=Recipe)
def touch_products_on_recipe_save(sender, instance, created, raw=False, **kwargs):
    """A saved recipe makes the products that use it stale."""
    if created or raw:
        return

    touched = _touch_products_of(instance.pk)
    if touched:
        logger.debug(f"Recipe {instance.recipe_number} changed, {touched} products touched")


@receiver(post_save, sender=RecipeMaterial)
@receiver(post_delete, sender=RecipeMaterial)
def touch_recipe_on_material_change(sender, instance, raw=False, **kwargs):
    """Material lines are part of the recipe snapshot."""
    if raw:
        return

    Recipe.objects.filter(pk=instance.recipe_id).update(updated_at=timezone.now())
    _touch_products_of(instance.recipe_id)


@receiver(post_save, sender=ProductRecipe)
@receiver(post_delete, sender=ProductRecipe)
def touch_product_on_line_change(sender, instance, raw=False, **kwargs):
    """Recipe lines are part of the product snapshot."""
    if raw:
        return

    Product.objects.filter(pk=instance.product_id).update(updated_at=timezone.now())


@receiver(tasks_generated)
def log_tasks_by_device_type(sender, project, tasks, **kwargs):
    """
    Summarise the generated tasks per device type.

    Hosts that push work to device queues connect their own receiver to
    tasks_generated; this one only logs.
    """
    counts = Counter(task.device_type_id for task in tasks)
    for device_type_id, count in sorted(counts.items()):
        logger.info(
            f"Project {project.code}: {count} tasks for device type {device_type_id}",
            extra={
                "project": project.code,
                "device_type": device_type_id,
                "tasks": count,
            },
        )
