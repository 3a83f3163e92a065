"""
Foreman Models.

Core models for work order management:
- DeviceType: kind of equipment a step runs on
- RawMaterial: material referenced by recipes
- Recipe: versioned production process with a step dependency graph
- RecipeMaterial: raw material required by a recipe
- Product: manufactured good made of recipes
- ProductRecipe: recipe entry of a product (executions per unit)
- RecipeSnapshot / ProductSnapshot: immutable, versioned copies
- Project: work order with product and recipe lines
- Task: one execution of one recipe step
- CodeSequence: atomic counter for project codes
"""

from foreman.models.catalog import DeviceType, RawMaterial
from foreman.models.product import Product, ProductRecipe
from foreman.models.project import (
    Priority,
    Project,
    ProjectProduct,
    ProjectRecipe,
    ProjectStatus,
)
from foreman.models.recipe import Recipe, RecipeMaterial
from foreman.models.sequence import CodeSequence
from foreman.models.snapshot import ProductSnapshot, ProductSnapshotLine, RecipeSnapshot
from foreman.models.task import Task, TaskStatus

__all__ = [
    "DeviceType",
    "RawMaterial",
    "Recipe",
    "RecipeMaterial",
    "Product",
    "ProductRecipe",
    "RecipeSnapshot",
    "ProductSnapshot",
    "ProductSnapshotLine",
    "Project",
    "ProjectProduct",
    "ProjectRecipe",
    "ProjectStatus",
    "Priority",
    "Task",
    "TaskStatus",
    "CodeSequence",
]
