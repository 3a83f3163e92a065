"""
Initial Foreman schema.

- Catalog: DeviceType, RawMaterial
- Recipe (+ RecipeMaterial), Product (+ ProductRecipe)
- Immutable snapshots: RecipeSnapshot, ProductSnapshot (+ lines)
- Project (+ product/recipe lines), Task, CodeSequence
- History tracking for Recipe, Product, Project and Task
"""

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


def _id():
    return (
        "id",
        models.BigAutoField(
            auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
        ),
    )


def _history_fields():
    return [
        ("history_id", models.AutoField(primary_key=True, serialize=False)),
        ("history_date", models.DateTimeField(db_index=True)),
        ("history_change_reason", models.CharField(max_length=100, null=True)),
        (
            "history_type",
            models.CharField(
                choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                max_length=1,
            ),
        ),
        (
            "history_user",
            models.ForeignKey(
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


def _history_fk(to, verbose_name):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name="+",
        to=to,
        verbose_name=verbose_name,
    )


def _history_options(name, plural):
    return {
        "verbose_name": f"historical {name}",
        "verbose_name_plural": f"historical {plural}",
        "ordering": ("-history_date", "-history_id"),
        "get_latest_by": ("history_date", "history_id"),
    }


PROJECT_STATUS = [
    ("PLANNING", "Planning"),
    ("ACTIVE", "Active"),
    ("ON_HOLD", "On Hold"),
    ("COMPLETED", "Completed"),
    ("CANCELLED", "Cancelled"),
]

PRIORITY = [
    ("LOW", "Low"),
    ("MEDIUM", "Medium"),
    ("HIGH", "High"),
    ("URGENT", "Urgent"),
]

TASK_STATUS = [
    ("PENDING", "Pending"),
    ("ONGOING", "Ongoing"),
    ("PAUSED", "Paused"),
    ("PAUSED_EMERGENCY", "Paused (emergency)"),
    ("COMPLETED", "Completed"),
    ("FAILED", "Failed"),
]

STEPS_HELP = "List of steps: {id, order, name, estimated_duration, device_type, depends_on}"


def _recipe_fields(history=False):
    return [
        (
            "uuid",
            models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID")
            if history
            else models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"),
        ),
        (
            "recipe_number",
            models.CharField(blank=True, db_index=True, max_length=50, verbose_name="Recipe Number"),
        ),
        ("name", models.CharField(max_length=255, verbose_name="Name")),
        ("description", models.TextField(blank=True, verbose_name="Description")),
        (
            "version",
            models.PositiveIntegerField(
                default=1,
                editable=False,
                help_text="Incremented on every update",
                verbose_name="Version",
            ),
        ),
        ("steps", models.JSONField(default=list, help_text=STEPS_HELP, verbose_name="Steps")),
        (
            "estimated_duration",
            models.PositiveIntegerField(
                default=0, editable=False, verbose_name="Estimated Duration (minutes)"
            ),
        ),
        (
            "is_active",
            models.BooleanField(
                default=True,
                help_text="Recipe can be used for new projects",
                verbose_name="Active",
            ),
        ),
    ]


def _product_fields(history=False):
    return [
        (
            "uuid",
            models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID")
            if history
            else models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"),
        ),
        (
            "design_number",
            models.CharField(db_index=True, max_length=100, verbose_name="Design Number")
            if history
            else models.CharField(max_length=100, unique=True, verbose_name="Design Number"),
        ),
        ("name", models.CharField(max_length=200, verbose_name="Name")),
        ("customer_name", models.CharField(blank=True, max_length=200, verbose_name="Customer")),
        ("quantity_unit", models.CharField(blank=True, max_length=50, verbose_name="Quantity Unit")),
    ]


def _project_fields(history=False):
    return [
        (
            "uuid",
            models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID")
            if history
            else models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"),
        ),
        (
            "code",
            models.CharField(
                blank=True,
                db_index=history,
                help_text="Unique identifier (auto-generated if empty)",
                max_length=50,
                unique=not history,
                verbose_name="Code",
            ),
        ),
        ("name", models.CharField(max_length=255, verbose_name="Name")),
        ("description", models.TextField(blank=True, verbose_name="Description")),
        (
            "status",
            models.CharField(
                choices=PROJECT_STATUS,
                db_index=True,
                default="PLANNING",
                max_length=20,
                verbose_name="Status",
            ),
        ),
        (
            "priority",
            models.CharField(
                choices=PRIORITY,
                db_index=True,
                default="MEDIUM",
                max_length=10,
                verbose_name="Priority",
            ),
        ),
        ("start_date", models.DateTimeField(blank=True, null=True, verbose_name="Start Date")),
        ("deadline", models.DateTimeField(blank=True, null=True, verbose_name="Deadline")),
        ("activated_at", models.DateTimeField(blank=True, null=True, verbose_name="Activated at")),
        (
            "created_by",
            models.CharField(
                blank=True,
                help_text="Ex: 'user:jane', 'api:erp-sync'",
                max_length=255,
                verbose_name="Created by",
            ),
        ),
    ]


def _task_fields(history=False):
    return [
        (
            "uuid",
            models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID")
            if history
            else models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"),
        ),
        ("title", models.CharField(max_length=255, verbose_name="Title")),
        ("description", models.TextField(blank=True, verbose_name="Description")),
        (
            "step_id",
            models.CharField(
                help_text="Step id inside the recipe snapshot", max_length=64, verbose_name="Step"
            ),
        ),
        ("step_order", models.PositiveIntegerField(verbose_name="Step Order")),
        ("is_last_step_in_recipe", models.BooleanField(default=False, verbose_name="Last Step")),
        (
            "recipe_execution_number",
            models.PositiveIntegerField(help_text="1..total_recipe_executions", verbose_name="Execution"),
        ),
        ("total_recipe_executions", models.PositiveIntegerField(verbose_name="Total Executions")),
        (
            "status",
            models.CharField(
                choices=TASK_STATUS,
                db_index=True,
                default="PENDING",
                max_length=20,
                verbose_name="Status",
            ),
        ),
        (
            "priority",
            models.CharField(choices=PRIORITY, default="MEDIUM", max_length=10, verbose_name="Priority"),
        ),
        (
            "estimated_duration",
            models.PositiveIntegerField(default=0, verbose_name="Estimated Duration (minutes)"),
        ),
    ]


def _timestamps(history=False):
    if history:
        return [
            ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
            ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
        ]
    return [
        ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
        ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
    ]


def _history_id():
    return (
        "id",
        models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID"),
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # ── Catalog ──
        migrations.CreateModel(
            name="DeviceType",
            fields=[
                _id(),
                ("code", models.SlugField(unique=True, verbose_name="Code")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Device Type",
                "verbose_name_plural": "Device Types",
                "db_table": "foreman_device_type",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="RawMaterial",
            fields=[
                _id(),
                ("code", models.SlugField(unique=True, verbose_name="Code")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                (
                    "unit",
                    models.CharField(
                        default="EA", help_text="EA, kg, m, L...", max_length=10, verbose_name="Unit"
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0"), max_digits=12, verbose_name="Unit Price"
                    ),
                ),
                ("description", models.TextField(blank=True, verbose_name="Description")),
            ],
            options={
                "verbose_name": "Raw Material",
                "verbose_name_plural": "Raw Materials",
                "db_table": "foreman_raw_material",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                _id(),
                ("prefix", models.CharField(max_length=50, unique=True, verbose_name="Prefix")),
                ("last_value", models.PositiveIntegerField(default=0, verbose_name="Last value")),
            ],
            options={
                "verbose_name": "Code Sequence",
                "verbose_name_plural": "Code Sequences",
                "db_table": "foreman_code_sequence",
            },
        ),
        # ── Recipe ──
        migrations.CreateModel(
            name="Recipe",
            fields=[_id(), *_recipe_fields(), *_timestamps()],
            options={
                "verbose_name": "Recipe",
                "verbose_name_plural": "Recipes",
                "db_table": "foreman_recipe",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["is_active"], name="foreman_recipe_active_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="RecipeMaterial",
            fields=[
                _id(),
                (
                    "quantity_required",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("1"),
                        help_text="Quantity needed per unit produced",
                        max_digits=10,
                        verbose_name="Quantity Required",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="recipe_lines",
                        to="foreman.rawmaterial",
                        verbose_name="Raw Material",
                    ),
                ),
                (
                    "recipe",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="materials",
                        to="foreman.recipe",
                        verbose_name="Recipe",
                    ),
                ),
            ],
            options={
                "verbose_name": "Recipe Material",
                "verbose_name_plural": "Recipe Materials",
                "db_table": "foreman_recipe_material",
                "ordering": ["recipe", "id"],
                "unique_together": {("recipe", "material")},
            },
        ),
        # ── Product ──
        migrations.CreateModel(
            name="Product",
            fields=[_id(), *_product_fields(), *_timestamps()],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "foreman_product",
                "ordering": ["design_number"],
                "indexes": [
                    models.Index(fields=["name"], name="foreman_product_name_idx"),
                    models.Index(fields=["customer_name"], name="foreman_product_customer_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductRecipe",
            fields=[
                _id(),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Recipe executions per unit of product",
                        verbose_name="Quantity",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="recipe_lines",
                        to="foreman.product",
                        verbose_name="Product",
                    ),
                ),
                (
                    "recipe",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="product_lines",
                        to="foreman.recipe",
                        verbose_name="Recipe",
                    ),
                ),
            ],
            options={
                "verbose_name": "Product Recipe",
                "verbose_name_plural": "Product Recipes",
                "db_table": "foreman_product_recipe",
                "ordering": ["product", "id"],
                "unique_together": {("product", "recipe")},
            },
        ),
        migrations.AddField(
            model_name="product",
            name="recipes",
            field=models.ManyToManyField(
                related_name="products",
                through="foreman.ProductRecipe",
                to="foreman.recipe",
                verbose_name="Recipes",
            ),
        ),
        # ── Snapshots ──
        migrations.CreateModel(
            name="RecipeSnapshot",
            fields=[
                _id(),
                (
                    "uuid",
                    models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"),
                ),
                (
                    "version",
                    models.PositiveIntegerField(
                        help_text="1, 2, 3... per original entity", verbose_name="Version"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                (
                    "recipe_number",
                    models.CharField(blank=True, max_length=50, verbose_name="Recipe Number"),
                ),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("steps", models.JSONField(default=list, verbose_name="Steps")),
                (
                    "raw_materials",
                    models.JSONField(blank=True, default=list, verbose_name="Raw Materials"),
                ),
                (
                    "estimated_duration",
                    models.PositiveIntegerField(default=0, verbose_name="Estimated Duration (minutes)"),
                ),
                (
                    "original_recipe",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="snapshots",
                        to="foreman.recipe",
                        verbose_name="Original Recipe",
                    ),
                ),
            ],
            options={
                "verbose_name": "Recipe Snapshot",
                "verbose_name_plural": "Recipe Snapshots",
                "db_table": "foreman_recipe_snapshot",
                "ordering": ["original_recipe", "-version"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("original_recipe", "version"),
                        name="foreman_recipe_snapshot_unique_version",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductSnapshot",
            fields=[
                _id(),
                (
                    "uuid",
                    models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"),
                ),
                (
                    "version",
                    models.PositiveIntegerField(
                        help_text="1, 2, 3... per original entity", verbose_name="Version"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                ("design_number", models.CharField(max_length=100, verbose_name="Design Number")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("customer_name", models.CharField(blank=True, max_length=200, verbose_name="Customer")),
                (
                    "original_product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="snapshots",
                        to="foreman.product",
                        verbose_name="Original Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Product Snapshot",
                "verbose_name_plural": "Product Snapshots",
                "db_table": "foreman_product_snapshot",
                "ordering": ["original_product", "-version"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("original_product", "version"),
                        name="foreman_product_snapshot_unique_version",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductSnapshotLine",
            fields=[
                _id(),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        help_text="Recipe executions per unit of product", verbose_name="Quantity"
                    ),
                ),
                (
                    "recipe_snapshot",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="product_lines",
                        to="foreman.recipesnapshot",
                        verbose_name="Recipe Snapshot",
                    ),
                ),
                (
                    "snapshot",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="lines",
                        to="foreman.productsnapshot",
                        verbose_name="Product Snapshot",
                    ),
                ),
            ],
            options={
                "verbose_name": "Product Snapshot Line",
                "verbose_name_plural": "Product Snapshot Lines",
                "db_table": "foreman_product_snapshot_line",
                "ordering": ["snapshot", "id"],
            },
        ),
        # ── Project ──
        migrations.CreateModel(
            name="Project",
            fields=[_id(), *_project_fields(), *_timestamps()],
            options={
                "verbose_name": "Project",
                "verbose_name_plural": "Projects",
                "db_table": "foreman_project",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "priority"], name="foreman_project_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProjectProduct",
            fields=[
                _id(),
                (
                    "target_quantity",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Target Quantity",
                    ),
                ),
                ("produced_quantity", models.PositiveIntegerField(default=0, verbose_name="Produced Quantity")),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="project_lines",
                        to="foreman.product",
                        verbose_name="Product",
                    ),
                ),
                (
                    "product_snapshot",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="project_lines",
                        to="foreman.productsnapshot",
                        verbose_name="Product Snapshot",
                    ),
                ),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_lines",
                        to="foreman.project",
                        verbose_name="Project",
                    ),
                ),
            ],
            options={
                "verbose_name": "Project Product",
                "verbose_name_plural": "Project Products",
                "db_table": "foreman_project_product",
                "ordering": ["project", "id"],
            },
        ),
        migrations.CreateModel(
            name="ProjectRecipe",
            fields=[
                _id(),
                (
                    "target_quantity",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Target Quantity",
                    ),
                ),
                ("produced_quantity", models.PositiveIntegerField(default=0, verbose_name="Produced Quantity")),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="recipe_lines",
                        to="foreman.project",
                        verbose_name="Project",
                    ),
                ),
                (
                    "recipe",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="project_lines",
                        to="foreman.recipe",
                        verbose_name="Recipe",
                    ),
                ),
                (
                    "recipe_snapshot",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="project_lines",
                        to="foreman.recipesnapshot",
                        verbose_name="Recipe Snapshot",
                    ),
                ),
            ],
            options={
                "verbose_name": "Project Recipe",
                "verbose_name_plural": "Project Recipes",
                "db_table": "foreman_project_recipe",
                "ordering": ["project", "id"],
            },
        ),
        # ── Task ──
        migrations.CreateModel(
            name="Task",
            fields=[
                _id(),
                *_task_fields(),
                *_timestamps(),
                (
                    "device_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tasks",
                        to="foreman.devicetype",
                        verbose_name="Device Type",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="tasks",
                        to="foreman.product",
                        verbose_name="Product",
                    ),
                ),
                (
                    "product_snapshot",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tasks",
                        to="foreman.productsnapshot",
                        verbose_name="Product Snapshot",
                    ),
                ),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tasks",
                        to="foreman.project",
                        verbose_name="Project",
                    ),
                ),
                (
                    "project_product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tasks",
                        to="foreman.projectproduct",
                        verbose_name="Project Product",
                    ),
                ),
                (
                    "project_recipe",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tasks",
                        to="foreman.projectrecipe",
                        verbose_name="Project Recipe",
                    ),
                ),
                (
                    "recipe",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="tasks",
                        to="foreman.recipe",
                        verbose_name="Recipe",
                    ),
                ),
                (
                    "recipe_snapshot",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tasks",
                        to="foreman.recipesnapshot",
                        verbose_name="Recipe Snapshot",
                    ),
                ),
            ],
            options={
                "verbose_name": "Task",
                "verbose_name_plural": "Tasks",
                "db_table": "foreman_task",
                "ordering": ["project", "recipe_snapshot", "recipe_execution_number", "step_order"],
                "indexes": [
                    models.Index(fields=["project", "status"], name="foreman_task_project_idx"),
                    models.Index(fields=["device_type", "status"], name="foreman_task_device_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(project_product__isnull=False),
                        fields=(
                            "project_product",
                            "recipe_snapshot",
                            "recipe_execution_number",
                            "step_order",
                        ),
                        name="foreman_task_unique_product_execution",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(project_recipe__isnull=False),
                        fields=("project_recipe", "recipe_execution_number", "step_order"),
                        name="foreman_task_unique_recipe_execution",
                    ),
                ],
            },
        ),
        # ── History ──
        migrations.CreateModel(
            name="HistoricalRecipe",
            fields=[
                _history_id(),
                *_recipe_fields(history=True),
                *_timestamps(history=True),
                *_history_fields(),
            ],
            options=_history_options("Recipe", "Recipes"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalProduct",
            fields=[
                _history_id(),
                *_product_fields(history=True),
                *_timestamps(history=True),
                *_history_fields(),
            ],
            options=_history_options("Product", "Products"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalProject",
            fields=[
                _history_id(),
                *_project_fields(history=True),
                *_timestamps(history=True),
                *_history_fields(),
            ],
            options=_history_options("Project", "Projects"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalTask",
            fields=[
                _history_id(),
                *_task_fields(history=True),
                *_timestamps(history=True),
                *_history_fields(),
                ("device_type", _history_fk("foreman.devicetype", "Device Type")),
                ("product", _history_fk("foreman.product", "Product")),
                ("product_snapshot", _history_fk("foreman.productsnapshot", "Product Snapshot")),
                ("project", _history_fk("foreman.project", "Project")),
                ("project_product", _history_fk("foreman.projectproduct", "Project Product")),
                ("project_recipe", _history_fk("foreman.projectrecipe", "Project Recipe")),
                ("recipe", _history_fk("foreman.recipe", "Recipe")),
                ("recipe_snapshot", _history_fk("foreman.recipesnapshot", "Recipe Snapshot")),
            ],
            options=_history_options("Task", "Tasks"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
