"""
Tests for Foreman API ViewSets (foreman.api.views).
"""

import pytest
from django.contrib import admin
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from foreman import ForemanError
from foreman.api.views import error_response
from foreman.models import (
    DeviceType,
    Product,
    ProductRecipe,
    ProductSnapshot,
    Project,
    ProjectProduct,
    ProjectRecipe,
    ProjectStatus,
    Recipe,
    RecipeSnapshot,
    Task,
)

pytestmark = pytest.mark.urls("foreman.tests.test_api_urls")

User = get_user_model()

BASE = "/api/foreman"


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def api_client(db):
    user = User.objects.create_user(username="api_user", password="test123")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def lathe(db):
    return DeviceType.objects.create(code="lathe", name="CNC Lathe")


@pytest.fixture
def recipe(lathe):
    return Recipe.objects.create(
        recipe_number="R-1",
        name="Shaft",
        steps=[
            {
                "id": "turn",
                "order": 1,
                "name": "Turn",
                "estimated_duration": 20,
                "device_type": lathe.pk,
            },
        ],
    )


@pytest.fixture
def product(recipe):
    p = Product.objects.create(design_number="D-100", name="Pump")
    ProductRecipe.objects.create(product=p, recipe=recipe, quantity=2)
    return p


@pytest.fixture
def project(product):
    p = Project.objects.create(name="API Project")
    ProjectProduct.objects.create(project=p, product=product, target_quantity=3)
    return p


# ═══════════════════════════════════════════════════════════════════
# Recipes
# ═══════════════════════════════════════════════════════════════════


class TestRecipeAPI:
    """Tests for Recipe read-only endpoints."""

    def test_list_recipes(self, api_client, recipe):
        response = api_client.get(f"{BASE}/recipes/")

        assert response.status_code == 200
        assert [r["name"] for r in response.data] == ["Shaft"]

    def test_retrieve_recipe(self, api_client, recipe):
        response = api_client.get(f"{BASE}/recipes/{recipe.uuid}/")

        assert response.status_code == 200
        assert response.data["recipe_number"] == "R-1"
        assert response.data["estimated_duration"] == 20
        assert response.data["version"] == 1

    def test_unauthenticated_is_refused(self, recipe):
        response = APIClient().get(f"{BASE}/recipes/")

        assert response.status_code in (401, 403)

    def test_validate_steps_ok(self, api_client):
        response = api_client.post(
            f"{BASE}/recipes/validate-steps/",
            {
                "steps": [
                    {"id": "a", "order": 1, "name": "A", "estimated_duration": 10},
                    {"id": "b", "order": 2, "name": "B", "estimated_duration": 5, "depends_on": ["a"]},
                ]
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data == {"valid": True, "estimated_duration": 15}

    def test_validate_steps_cycle(self, api_client):
        response = api_client.post(
            f"{BASE}/recipes/validate-steps/",
            {
                "steps": [
                    {"id": "a", "order": 1, "name": "A", "depends_on": ["b"]},
                    {"id": "b", "order": 2, "name": "B", "depends_on": ["a"]},
                ]
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error"] == "VALIDATION_ERROR"
        assert response.data["reason"] == "CYCLIC_DEPENDENCY"

    def test_validate_steps_dangling(self, api_client):
        response = api_client.post(
            f"{BASE}/recipes/validate-steps/",
            {"steps": [{"id": "a", "order": 1, "name": "A", "depends_on": ["zzz"]}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["reason"] == "DANGLING_DEPENDENCY"
        assert response.data["dependency"] == "zzz"

    def test_validate_steps_requires_list(self, api_client):
        response = api_client.post(f"{BASE}/recipes/validate-steps/", {}, format="json")

        assert response.status_code == 400


# ═══════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════


class TestProductAPI:
    """Tests for Product endpoints."""

    def test_retrieve_product(self, api_client, product, recipe):
        response = api_client.get(f"{BASE}/products/{product.uuid}/")

        assert response.status_code == 200
        assert response.data["recipe_lines"] == [
            {"recipe": recipe.pk, "recipe_name": "Shaft", "quantity": 2}
        ]

    def test_snapshot_action(self, api_client, product):
        first = api_client.post(f"{BASE}/products/{product.uuid}/snapshot/")
        second = api_client.post(f"{BASE}/products/{product.uuid}/snapshot/")

        assert first.status_code == 200
        assert first.data["version"] == 1
        assert second.data["uuid"] == first.data["uuid"]
        assert len(first.data["lines"]) == 1


# ═══════════════════════════════════════════════════════════════════
# Projects
# ═══════════════════════════════════════════════════════════════════


class TestProjectAPI:
    """Tests for Project CRUD and lifecycle actions."""

    def test_create_with_lines(self, api_client, product, recipe):
        response = api_client.post(
            f"{BASE}/projects/",
            {
                "name": "New Order",
                "priority": "URGENT",
                "product_lines": [{"product": product.pk, "target_quantity": 3}],
                "recipe_lines": [{"recipe": recipe.pk, "target_quantity": 1}],
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["status"] == ProjectStatus.PLANNING
        assert response.data["code"].startswith("PRJ-")
        assert response.data["created_by"] == "user:api_user"

        project = Project.objects.get(uuid=response.data["uuid"])
        assert project.product_lines.get().target_quantity == 3
        assert project.recipe_lines.count() == 1

    def test_create_rejects_zero_target(self, api_client, product):
        response = api_client.post(
            f"{BASE}/projects/",
            {"name": "Bad", "product_lines": [{"product": product.pk, "target_quantity": 0}]},
            format="json",
        )

        assert response.status_code == 400
        assert not Project.objects.filter(name="Bad").exists()

    def test_status_is_read_only(self, api_client, project):
        response = api_client.patch(
            f"{BASE}/projects/{project.uuid}/", {"status": "ACTIVE"}, format="json"
        )

        assert response.status_code == 200
        project.refresh_from_db()
        assert project.status == ProjectStatus.PLANNING

    def test_update_replaces_lines(self, api_client, project, recipe):
        response = api_client.patch(
            f"{BASE}/projects/{project.uuid}/",
            {"product_lines": [], "recipe_lines": [{"recipe": recipe.pk, "target_quantity": 5}]},
            format="json",
        )

        assert response.status_code == 200
        assert project.product_lines.count() == 0
        assert project.recipe_lines.get().target_quantity == 5

    def test_activate(self, api_client, project, lathe):
        response = api_client.post(f"{BASE}/projects/{project.uuid}/activate/")

        assert response.status_code == 200
        assert response.data["status"] == ProjectStatus.ACTIVE
        assert response.data["tasks_created"] == 6
        assert response.data["tasks_by_device_type"] == {lathe.pk: 6}
        assert Task.objects.filter(project=project).count() == 6

    def test_activate_twice_is_invalid_status(self, api_client, project):
        api_client.post(f"{BASE}/projects/{project.uuid}/activate/")

        response = api_client.post(f"{BASE}/projects/{project.uuid}/activate/")

        assert response.status_code == 400
        assert response.data["error"] == "INVALID_STATUS"

    def test_activate_empty_project(self, api_client, db):
        empty = Project.objects.create(name="Empty")

        response = api_client.post(f"{BASE}/projects/{empty.uuid}/activate/")

        assert response.status_code == 400
        assert response.data["error"] == "VALIDATION_ERROR"

    def test_active_project_cannot_be_edited(self, api_client, project):
        project.activate()

        response = api_client.patch(
            f"{BASE}/projects/{project.uuid}/", {"name": "Renamed"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error"] == "INVALID_STATUS"
        project.refresh_from_db()
        assert project.name == "API Project"

    def test_deactivate(self, api_client, project):
        project.activate()

        response = api_client.post(f"{BASE}/projects/{project.uuid}/deactivate/")

        assert response.status_code == 200
        assert response.data == {"status": "PLANNING", "tasks_deleted": 6}

    def test_hold_and_resume(self, api_client, project):
        project.activate()

        hold = api_client.post(f"{BASE}/projects/{project.uuid}/hold/")
        resume = api_client.post(f"{BASE}/projects/{project.uuid}/resume/")

        assert hold.data["status"] == ProjectStatus.ON_HOLD
        assert resume.data["status"] == ProjectStatus.ACTIVE
        assert Task.objects.filter(project=project).count() == 6

    def test_resume_from_planning_fails(self, api_client, project):
        response = api_client.post(f"{BASE}/projects/{project.uuid}/resume/")

        assert response.status_code == 400
        assert response.data["error"] == "INVALID_STATUS"

    def test_complete_and_cancel(self, api_client, project, db):
        project.activate()
        other = Project.objects.create(name="Other")

        complete = api_client.post(f"{BASE}/projects/{project.uuid}/complete/")
        cancel = api_client.post(f"{BASE}/projects/{other.uuid}/cancel/")

        assert complete.data["status"] == ProjectStatus.COMPLETED
        assert cancel.data["status"] == ProjectStatus.CANCELLED

    def test_unknown_project_is_404(self, api_client, db):
        response = api_client.post(
            f"{BASE}/projects/00000000-0000-0000-0000-000000000000/activate/"
        )

        assert response.status_code == 404


# ═══════════════════════════════════════════════════════════════════
# Tasks and snapshots
# ═══════════════════════════════════════════════════════════════════


class TestTaskAPI:
    """Tests for Task and snapshot read endpoints."""

    def test_filter_by_project(self, api_client, project, recipe):
        project.activate()
        other = Project.objects.create(name="Other")
        ProjectRecipe.objects.create(project=other, recipe=recipe, target_quantity=2)
        other.activate()

        response = api_client.get(f"{BASE}/tasks/", {"project": str(project.uuid)})

        assert response.status_code == 200
        assert len(response.data) == 6
        assert {t["project_code"] for t in response.data} == {project.code}

    def test_filter_by_device_type_and_status(self, api_client, project, lathe):
        project.activate()

        response = api_client.get(
            f"{BASE}/tasks/", {"device_type": lathe.pk, "status": "PENDING"}
        )

        assert len(response.data) == 6
        assert response.data[0]["device_type_code"] == "lathe"

    def test_snapshots_listed(self, api_client, project):
        project.activate()

        recipes = api_client.get(f"{BASE}/recipe-snapshots/")
        products = api_client.get(f"{BASE}/product-snapshots/")

        assert len(recipes.data) == 1
        assert len(products.data) == 1
        assert products.data[0]["lines"][0]["quantity"] == 2

    def test_snapshots_are_read_only(self, api_client, project):
        project.activate()
        snapshot_uuid = project.product_lines.get().product_snapshot.uuid

        response = api_client.delete(f"{BASE}/product-snapshots/{snapshot_uuid}/")

        assert response.status_code == 405


class TestErrorResponse:
    """ForemanError → HTTP status."""

    @pytest.mark.parametrize(
        "code,status",
        [
            ("VALIDATION_ERROR", 400),
            ("INVALID_STATUS", 400),
            ("NOT_FOUND", 404),
            ("CONFLICT", 409),
            ("INTERNAL_ERROR", 500),
        ],
    )
    def test_status_codes(self, code, status):
        response = error_response(ForemanError(code, id=7))

        assert response.status_code == status
        assert response.data == {"error": code, "id": 7}


class TestAdmin:
    """Admin registrations."""

    def test_all_models_registered(self):
        for model in (DeviceType, Recipe, Product, Project, Task, RecipeSnapshot, ProductSnapshot):
            assert admin.site.is_registered(model)

    def test_snapshots_are_read_only_in_admin(self, rf):
        model_admin = admin.site._registry[RecipeSnapshot]
        request = rf.get("/")

        assert not model_admin.has_add_permission(request)
        assert not model_admin.has_delete_permission(request)
