"""
Foreman Admin - Basic Django admin for catalog, recipes, products,
projects and tasks.

Snapshots are listed read-only: they cannot be added, changed or deleted.
"""

from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from foreman.models import (
    DeviceType,
    Product,
    ProductRecipe,
    ProductSnapshot,
    ProductSnapshotLine,
    Project,
    ProjectProduct,
    ProjectRecipe,
    RawMaterial,
    Recipe,
    RecipeMaterial,
    RecipeSnapshot,
    Task,
)


# ── Catalog ──


@admin.register(DeviceType)
class DeviceTypeAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name")


@admin.register(RawMaterial)
class RawMaterialAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "unit", "unit_price")
    search_fields = ("code", "name")


# ── Recipe ──


class RecipeMaterialInline(admin.TabularInline):
    """Inline for recipe raw materials."""

    model = RecipeMaterial
    extra = 1
    raw_id_fields = ("material",)


@admin.register(Recipe)
class RecipeAdmin(SimpleHistoryAdmin):
    """Admin for production recipes."""

    list_display = ("recipe_number", "name", "version", "estimated_duration", "is_active")
    list_filter = ("is_active",)
    search_fields = ("recipe_number", "name")
    inlines = [RecipeMaterialInline]
    readonly_fields = ("uuid", "version", "estimated_duration", "created_at", "updated_at")


# ── Product ──


class ProductRecipeInline(admin.TabularInline):
    model = ProductRecipe
    extra = 1
    raw_id_fields = ("recipe",)


@admin.register(Product)
class ProductAdmin(SimpleHistoryAdmin):
    list_display = ("design_number", "name", "customer_name", "updated_at")
    search_fields = ("design_number", "name", "customer_name")
    inlines = [ProductRecipeInline]
    readonly_fields = ("uuid", "created_at", "updated_at")


# ── Project ──


class ProjectProductInline(admin.TabularInline):
    model = ProjectProduct
    extra = 1
    raw_id_fields = ("product",)
    readonly_fields = ("produced_quantity", "product_snapshot")


class ProjectRecipeInline(admin.TabularInline):
    model = ProjectRecipe
    extra = 0
    raw_id_fields = ("recipe",)
    readonly_fields = ("produced_quantity", "recipe_snapshot")


@admin.register(Project)
class ProjectAdmin(SimpleHistoryAdmin):
    """Status changes go through the API or Project.activate()/deactivate()."""

    list_display = ("code", "name", "status", "priority", "deadline", "activated_at")
    list_filter = ("status", "priority")
    search_fields = ("code", "name")
    inlines = [ProjectProductInline, ProjectRecipeInline]
    readonly_fields = ("uuid", "code", "status", "activated_at", "created_at", "updated_at")


# ── Task ──


@admin.register(Task)
class TaskAdmin(SimpleHistoryAdmin):
    list_display = (
        "title",
        "project",
        "device_type",
        "status",
        "recipe_execution_number",
        "total_recipe_executions",
    )
    list_filter = ("status", "device_type", "priority")
    search_fields = ("title", "project__code")
    raw_id_fields = (
        "project",
        "project_product",
        "project_recipe",
        "product_snapshot",
        "recipe_snapshot",
        "product",
        "recipe",
    )


# ── Snapshots ──


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ProductSnapshotLineInline(admin.TabularInline):
    model = ProductSnapshotLine
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(RecipeSnapshot)
class RecipeSnapshotAdmin(ReadOnlyAdmin):
    list_display = ("recipe_number", "name", "version", "created_at")
    search_fields = ("recipe_number", "name")


@admin.register(ProductSnapshot)
class ProductSnapshotAdmin(ReadOnlyAdmin):
    list_display = ("design_number", "name", "version", "created_at")
    search_fields = ("design_number", "name")
    inlines = [ProductSnapshotLineInline]
