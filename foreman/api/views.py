"""
Foreman API ViewSets.
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from foreman.exceptions import ForemanError
from foreman.models import Product, ProductSnapshot, Project, Recipe, RecipeSnapshot, Task
from foreman.service import Foreman

from .serializers import (
    ProductSerializer,
    ProductSnapshotSerializer,
    ProjectSerializer,
    RecipeSerializer,
    RecipeSnapshotSerializer,
    TaskSerializer,
    ValidateStepsSerializer,
)

ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_STATUS": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: ForemanError) -> Response:
    """ForemanError → {"error": code, ...details} with the matching status."""
    return Response(
        error.as_dict(),
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


class RecipeViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Recipe (read-only).

    list: List all active recipes
    retrieve: Get a specific recipe by UUID
    validate_steps: Check a step list without saving anything
    """

    permission_classes = [IsAuthenticated]
    queryset = Recipe.objects.filter(is_active=True)
    serializer_class = RecipeSerializer
    lookup_field = "uuid"

    @action(detail=False, methods=["post"], url_path="validate-steps")
    def validate_steps(self, request):
        """
        Validate a step dependency graph.

        POST /api/foreman/recipes/validate-steps/
        {
            "steps": [{"id": "cut", "order": 1, "name": "Cut", "depends_on": []}]
        }
        """
        serializer = ValidateStepsSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            total = Foreman.validate_steps(serializer.validated_data["steps"])
        except ForemanError as e:
            return error_response(e)

        return Response({"valid": True, "estimated_duration": total})


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Product (read-only).

    snapshot: Get (or create) the current snapshot of the product
    """

    permission_classes = [IsAuthenticated]
    queryset = Product.objects.prefetch_related("recipe_lines__recipe")
    serializer_class = ProductSerializer
    lookup_field = "uuid"

    @action(detail=True, methods=["post"])
    def snapshot(self, request, uuid=None):
        """
        POST /api/foreman/products/{uuid}/snapshot/
        """
        product = self.get_object()

        try:
            snapshot = Foreman.get_or_create_product_snapshot(product)
        except ForemanError as e:
            return error_response(e)

        return Response(ProductSnapshotSerializer(snapshot).data)


class ProjectViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Project.

    list: List all projects
    create: Create a project with its lines
    retrieve: Get a specific project by UUID
    update: Update a project (PLANNING only)
    destroy: Delete a project and its tasks
    activate / deactivate / hold / resume / complete / cancel: lifecycle
    """

    permission_classes = [IsAuthenticated]
    queryset = Project.objects.prefetch_related("product_lines", "recipe_lines")
    serializer_class = ProjectSerializer
    lookup_field = "uuid"

    def perform_create(self, serializer):
        serializer.save(created_by=f"user:{self.request.user.get_username()}")

    def update(self, request, *args, **kwargs):
        try:
            return super().update(request, *args, **kwargs)
        except ForemanError as e:
            return error_response(e)

    @action(detail=True, methods=["post"])
    def activate(self, request, uuid=None):
        """
        Activate a planning project (creates the initial tasks).

        POST /api/foreman/projects/{uuid}/activate/
        """
        project = self.get_object()

        try:
            result = Foreman.activate_project(project, user=request.user)
        except ForemanError as e:
            return error_response(e)

        return Response(
            {
                "status": result.project.status,
                "tasks_created": result.tasks_created,
                "tasks_by_device_type": result.tasks_by_device_type,
            }
        )

    @action(detail=True, methods=["post"])
    def deactivate(self, request, uuid=None):
        """
        Move the project back to planning (deletes its tasks).

        POST /api/foreman/projects/{uuid}/deactivate/
        """
        project = self.get_object()

        try:
            deleted = Foreman.deactivate_project(project, user=request.user)
        except ForemanError as e:
            return error_response(e)

        return Response({"status": "PLANNING", "tasks_deleted": deleted})

    @action(detail=True, methods=["post"])
    def hold(self, request, uuid=None):
        """POST /api/foreman/projects/{uuid}/hold/"""
        return self._transition(Foreman.hold_project, request)

    @action(detail=True, methods=["post"])
    def resume(self, request, uuid=None):
        """POST /api/foreman/projects/{uuid}/resume/"""
        return self._transition(Foreman.resume_project, request)

    @action(detail=True, methods=["post"])
    def complete(self, request, uuid=None):
        """POST /api/foreman/projects/{uuid}/complete/"""
        return self._transition(Foreman.complete_project, request)

    @action(detail=True, methods=["post"])
    def cancel(self, request, uuid=None):
        """POST /api/foreman/projects/{uuid}/cancel/"""
        return self._transition(Foreman.cancel_project, request)

    def _transition(self, operation, request):
        project = self.get_object()

        try:
            project = operation(project, user=request.user)
        except ForemanError as e:
            return error_response(e)

        return Response({"status": project.status})


class TaskViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Task (read-only).

    Filters: ?project=<uuid>, ?device_type=<id>, ?status=<status>
    """

    permission_classes = [IsAuthenticated]
    queryset = Task.objects.select_related("project", "device_type")
    serializer_class = TaskSerializer
    lookup_field = "uuid"

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        if params.get("project"):
            qs = qs.filter(project__uuid=params["project"])
        if params.get("device_type"):
            qs = qs.filter(device_type_id=params["device_type"])
        if params.get("status"):
            qs = qs.filter(status=params["status"])

        return qs


class RecipeSnapshotViewSet(viewsets.ReadOnlyModelViewSet):
    """ViewSet for RecipeSnapshot (read-only)."""

    permission_classes = [IsAuthenticated]
    queryset = RecipeSnapshot.objects.all()
    serializer_class = RecipeSnapshotSerializer
    lookup_field = "uuid"


class ProductSnapshotViewSet(viewsets.ReadOnlyModelViewSet):
    """ViewSet for ProductSnapshot (read-only)."""

    permission_classes = [IsAuthenticated]
    queryset = ProductSnapshot.objects.prefetch_related("lines")
    serializer_class = ProductSnapshotSerializer
    lookup_field = "uuid"
