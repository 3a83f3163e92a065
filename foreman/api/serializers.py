"""
Foreman API Serializers.
"""

from django.db import transaction
from rest_framework import serializers

from foreman.exceptions import ForemanError
from foreman.models import (
    Product,
    ProductRecipe,
    ProductSnapshot,
    ProductSnapshotLine,
    Project,
    ProjectProduct,
    ProjectRecipe,
    Recipe,
    RecipeSnapshot,
    Task,
)


class RecipeSerializer(serializers.ModelSerializer):
    """Serializer for Recipe model."""

    class Meta:
        model = Recipe
        fields = [
            "id",
            "uuid",
            "recipe_number",
            "name",
            "description",
            "version",
            "steps",
            "estimated_duration",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ValidateStepsSerializer(serializers.Serializer):
    """Input for the validate-steps action."""

    steps = serializers.ListField(child=serializers.DictField(), allow_empty=True)


class ProductRecipeSerializer(serializers.ModelSerializer):
    recipe_name = serializers.CharField(source="recipe.name", read_only=True)

    class Meta:
        model = ProductRecipe
        fields = ["recipe", "recipe_name", "quantity"]


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model."""

    recipe_lines = ProductRecipeSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "uuid",
            "design_number",
            "name",
            "customer_name",
            "quantity_unit",
            "recipe_lines",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProjectProductSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = ProjectProduct
        fields = [
            "id",
            "product",
            "product_name",
            "target_quantity",
            "produced_quantity",
            "product_snapshot",
        ]
        read_only_fields = ["id", "product_name", "produced_quantity", "product_snapshot"]


class ProjectRecipeSerializer(serializers.ModelSerializer):
    recipe_name = serializers.CharField(source="recipe.name", read_only=True)

    class Meta:
        model = ProjectRecipe
        fields = [
            "id",
            "recipe",
            "recipe_name",
            "target_quantity",
            "produced_quantity",
            "recipe_snapshot",
        ]
        read_only_fields = ["id", "recipe_name", "produced_quantity", "recipe_snapshot"]


class ProjectSerializer(serializers.ModelSerializer):
    """
    Serializer for Project model.

    Lines are written together with the project and replaced as a whole
    on update. Status only changes through the lifecycle actions.
    """

    product_lines = ProjectProductSerializer(many=True, required=False)
    recipe_lines = ProjectRecipeSerializer(many=True, required=False)

    class Meta:
        model = Project
        fields = [
            "id",
            "uuid",
            "code",
            "name",
            "description",
            "status",
            "priority",
            "start_date",
            "deadline",
            "activated_at",
            "created_by",
            "product_lines",
            "recipe_lines",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "uuid",
            "code",
            "status",
            "activated_at",
            "created_by",
            "created_at",
            "updated_at",
        ]

    @transaction.atomic
    def create(self, validated_data):
        product_lines = validated_data.pop("product_lines", [])
        recipe_lines = validated_data.pop("recipe_lines", [])

        project = Project.objects.create(**validated_data)
        self._write_lines(project, product_lines, recipe_lines)
        return project

    @transaction.atomic
    def update(self, instance, validated_data):
        if not instance.is_editable:
            raise ForemanError(
                "INVALID_STATUS",
                project=instance.code,
                current=instance.status,
                expected="PLANNING",
            )

        product_lines = validated_data.pop("product_lines", None)
        recipe_lines = validated_data.pop("recipe_lines", None)

        instance = super().update(instance, validated_data)

        if product_lines is not None:
            instance.product_lines.all().delete()
            self._write_lines(instance, product_lines, [])
        if recipe_lines is not None:
            instance.recipe_lines.all().delete()
            self._write_lines(instance, [], recipe_lines)
        return instance

    def _write_lines(self, project, product_lines, recipe_lines):
        ProjectProduct.objects.bulk_create(
            [ProjectProduct(project=project, **line) for line in product_lines]
        )
        ProjectRecipe.objects.bulk_create(
            [ProjectRecipe(project=project, **line) for line in recipe_lines]
        )


class TaskSerializer(serializers.ModelSerializer):
    """Serializer for Task model."""

    project_code = serializers.CharField(source="project.code", read_only=True)
    device_type_code = serializers.CharField(source="device_type.code", read_only=True)

    class Meta:
        model = Task
        fields = [
            "id",
            "uuid",
            "title",
            "description",
            "project",
            "project_code",
            "project_product",
            "project_recipe",
            "product_snapshot",
            "recipe_snapshot",
            "step_id",
            "step_order",
            "is_last_step_in_recipe",
            "recipe_execution_number",
            "total_recipe_executions",
            "device_type",
            "device_type_code",
            "status",
            "priority",
            "estimated_duration",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RecipeSnapshotSerializer(serializers.ModelSerializer):
    """Serializer for RecipeSnapshot model."""

    class Meta:
        model = RecipeSnapshot
        fields = [
            "id",
            "uuid",
            "original_recipe",
            "version",
            "recipe_number",
            "name",
            "description",
            "steps",
            "raw_materials",
            "estimated_duration",
            "created_at",
        ]
        read_only_fields = fields


class ProductSnapshotLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductSnapshotLine
        fields = ["recipe_snapshot", "quantity"]
        read_only_fields = fields


class ProductSnapshotSerializer(serializers.ModelSerializer):
    """Serializer for ProductSnapshot model."""

    lines = ProductSnapshotLineSerializer(many=True, read_only=True)

    class Meta:
        model = ProductSnapshot
        fields = [
            "id",
            "uuid",
            "original_product",
            "version",
            "design_number",
            "name",
            "customer_name",
            "lines",
            "created_at",
        ]
        read_only_fields = fields
