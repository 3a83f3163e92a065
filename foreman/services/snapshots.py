"""
Snapshot service -- read-through cache of immutable Recipe/Product copies.

get_or_create_*_snapshot(entity_id):
    1. Lock the live row (SELECT FOR UPDATE: one writer per entity)
    2. Latest snapshot by version, if any
    3. Reuse it when snapshot.created_at >= live.updated_at
    4. Otherwise copy the live entity as version latest + 1 (or 1)

The (original, version) unique constraint backs up the lock on databases
where SELECT FOR UPDATE is a no-op (SQLite): a losing writer gets an
IntegrityError inside its savepoint and retries against the new latest.
"""

import copy
import logging

from django.db import IntegrityError, transaction

from foreman.conf import get_snapshot_max_retries
from foreman.exceptions import ForemanError
from foreman.models import (
    Product,
    ProductSnapshot,
    ProductSnapshotLine,
    Recipe,
    RecipeSnapshot,
)

logger = logging.getLogger(__name__)


class ForemanSnapshots:
    """
    Snapshot operations.

    All methods are @classmethod so the mixin can be composed into Foreman
    without instantiation.
    """

    @classmethod
    def get_or_create_recipe_snapshot(cls, recipe) -> RecipeSnapshot:
        """
        Snapshot of the recipe as it is now.

        Args:
            recipe: Recipe instance or pk

        Raises:
            ForemanError NOT_FOUND if the recipe does not exist
            ForemanError CONFLICT if the version race could not be resolved
        """
        return cls._get_or_create(
            Recipe,
            RecipeSnapshot,
            "original_recipe",
            getattr(recipe, "pk", recipe),
            cls._copy_recipe,
        )

    @classmethod
    def get_or_create_product_snapshot(cls, product) -> ProductSnapshot:
        """
        Snapshot of the product as it is now.

        Every recipe of the product is snapshotted first, so the lines of a
        new ProductSnapshot point at RecipeSnapshots, never at live recipes.
        """
        return cls._get_or_create(
            Product,
            ProductSnapshot,
            "original_product",
            getattr(product, "pk", product),
            cls._copy_product,
        )

    @classmethod
    def latest_recipe_snapshot(cls, recipe) -> RecipeSnapshot | None:
        """Latest existing snapshot, without creating one."""
        return (
            RecipeSnapshot.objects.filter(original_recipe=getattr(recipe, "pk", recipe))
            .order_by("-version")
            .first()
        )

    @classmethod
    def latest_product_snapshot(cls, product) -> ProductSnapshot | None:
        """Latest existing snapshot, without creating one."""
        return (
            ProductSnapshot.objects.filter(
                original_product=getattr(product, "pk", product)
            )
            .order_by("-version")
            .first()
        )

    @classmethod
    def batch_recipe_snapshots(cls, recipes) -> list[RecipeSnapshot]:
        return [cls.get_or_create_recipe_snapshot(recipe) for recipe in recipes]

    @classmethod
    def batch_product_snapshots(cls, products) -> list[ProductSnapshot]:
        return [cls.get_or_create_product_snapshot(product) for product in products]

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _get_or_create(cls, live_model, snapshot_model, original_field, pk, copy_fn):
        label = live_model._meta.model_name
        attempts = get_snapshot_max_retries()

        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    try:
                        live = live_model.objects.select_for_update().get(pk=pk)
                    except live_model.DoesNotExist:
                        raise ForemanError("NOT_FOUND", entity=label, id=pk)

                    latest = cls._latest(snapshot_model, original_field, live)

                    if latest is not None and latest.created_at >= live.updated_at:
                        logger.debug(
                            f"Snapshot cache hit for {label} {pk} (v{latest.version})"
                        )
                        return latest

                    version = latest.version + 1 if latest else 1
                    snapshot = copy_fn(live, version)

            except IntegrityError:
                logger.warning(
                    f"Snapshot version conflict for {label} {pk}, "
                    f"attempt {attempt}/{attempts}",
                    extra={"entity": label, "id": pk, "attempt": attempt},
                )
                continue

            logger.info(
                f"Created {label} snapshot v{snapshot.version} for {pk}",
                extra={"entity": label, "id": pk, "version": snapshot.version},
            )
            return snapshot

        raise ForemanError("CONFLICT", entity=label, id=pk, attempts=attempts)

    @classmethod
    def _latest(cls, snapshot_model, original_field, live):
        return (
            snapshot_model.objects.filter(**{original_field: live})
            .order_by("-version")
            .first()
        )

    @classmethod
    def _copy_recipe(cls, recipe: Recipe, version: int) -> RecipeSnapshot:
        raw_materials = [
            {
                "material": line.material_id,
                "code": line.material.code,
                "name": line.material.name,
                "unit": line.material.unit,
                "unit_price": str(line.material.unit_price),
                "quantity_required": str(line.quantity_required),
            }
            for line in recipe.materials.select_related("material").order_by("id")
        ]

        return RecipeSnapshot.objects.create(
            original_recipe=recipe,
            version=version,
            recipe_number=recipe.recipe_number,
            name=recipe.name,
            description=recipe.description,
            steps=copy.deepcopy(recipe.steps),
            raw_materials=raw_materials,
            estimated_duration=recipe.estimated_duration,
        )

    @classmethod
    def _copy_product(cls, product: Product, version: int) -> ProductSnapshot:
        lines = [
            (cls.get_or_create_recipe_snapshot(line.recipe_id), line.quantity)
            for line in product.recipe_lines.order_by("id")
        ]

        snapshot = ProductSnapshot.objects.create(
            original_product=product,
            version=version,
            design_number=product.design_number,
            name=product.name,
            customer_name=product.customer_name,
        )
        ProductSnapshotLine.objects.bulk_create(
            [
                ProductSnapshotLine(
                    snapshot=snapshot, recipe_snapshot=recipe_snapshot, quantity=quantity
                )
                for recipe_snapshot, quantity in lines
            ]
        )
        return snapshot
