"""
Tests for project activation and lifecycle (foreman.services.activation).
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone
from simple_history.utils import bulk_create_with_history

from foreman import ActivationResult, ForemanError
from foreman.models import (
    DeviceType,
    Priority,
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
    TaskStatus,
)
from foreman.service import Foreman
from foreman.signals import project_activated, project_deactivated, tasks_generated


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def lathe(db):
    return DeviceType.objects.create(code="lathe", name="CNC Lathe")


@pytest.fixture
def welder(db):
    return DeviceType.objects.create(code="welder", name="Welding Station")


@pytest.fixture
def shaft(lathe):
    """Single-step recipe."""
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
def bracket(lathe, welder):
    """Two-step recipe: cut (lathe) → weld (welder)."""
    return Recipe.objects.create(
        recipe_number="R-2",
        name="Bracket",
        steps=[
            {
                "id": "cut",
                "order": 1,
                "name": "Cut",
                "estimated_duration": 30,
                "device_type": lathe.pk,
            },
            {
                "id": "weld",
                "order": 2,
                "name": "Weld",
                "estimated_duration": 45,
                "device_type": welder.pk,
                "depends_on": ["cut"],
            },
        ],
    )


@pytest.fixture
def pump(shaft):
    """Product needing 2 shaft executions per unit."""
    p = Product.objects.create(design_number="D-100", name="Pump")
    ProductRecipe.objects.create(product=p, recipe=shaft, quantity=2)
    return p


@pytest.fixture
def project(db):
    return Project.objects.create(name="Order 42", priority=Priority.HIGH)


# ═══════════════════════════════════════════════════════════════════
# Fan-out
# ═══════════════════════════════════════════════════════════════════


class TestActivationFanOut:
    """Initial task generation."""

    def test_product_line_multiplies_quantities(self, project, pump):
        """target 3 × quantity 2 → 6 tasks numbered 1..6."""
        ProjectProduct.objects.create(project=project, product=pump, target_quantity=3)

        result = Foreman.activate_project(project)

        tasks = list(Task.objects.filter(project=project).order_by("recipe_execution_number"))
        assert isinstance(result, ActivationResult)
        assert result.tasks_created == 6
        assert len(tasks) == 6
        assert [t.recipe_execution_number for t in tasks] == [1, 2, 3, 4, 5, 6]
        assert {t.step_order for t in tasks} == {1}
        assert {t.total_recipe_executions for t in tasks} == {6}
        assert tasks[0].title == "Turn - Exec 1/6 - Pump"

    def test_standalone_single_step_recipe(self, project, shaft):
        """target 4 on a single-step recipe → 4 tasks, all last step."""
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=4)

        result = Foreman.activate_project(project)

        tasks = list(Task.objects.filter(project=project))
        assert result.tasks_created == 4
        assert len(tasks) == 4
        assert all(t.is_last_step_in_recipe for t in tasks)
        assert tasks[0].title == "Turn - Exec 1/4 - Order 42"

    def test_multi_step_recipe_starts_on_entry_step(self, project, bracket, lathe):
        ProjectRecipe.objects.create(project=project, recipe=bracket, target_quantity=2)

        Foreman.activate_project(project)

        tasks = list(Task.objects.filter(project=project))
        assert len(tasks) == 2
        assert {t.step_id for t in tasks} == {"cut"}
        assert {t.device_type_id for t in tasks} == {lathe.pk}
        assert not any(t.is_last_step_in_recipe for t in tasks)

    def test_task_fields(self, project, pump, shaft, lathe):
        line = ProjectProduct.objects.create(project=project, product=pump, target_quantity=1)

        Foreman.activate_project(project)

        task = Task.objects.filter(project=project).first()
        line.refresh_from_db()
        assert task.status == TaskStatus.PENDING
        assert task.priority == Priority.HIGH
        assert task.estimated_duration == 20
        assert task.project_product == line
        assert task.project_recipe is None
        assert task.product_snapshot == line.product_snapshot
        assert task.recipe_snapshot.original_recipe == shaft
        assert task.product == pump
        assert task.recipe == shaft

    def test_mixed_lines(self, project, pump, bracket, lathe):
        ProjectProduct.objects.create(project=project, product=pump, target_quantity=2)
        ProjectRecipe.objects.create(project=project, recipe=bracket, target_quantity=3)

        result = Foreman.activate_project(project)

        assert result.tasks_created == 7
        assert result.tasks_by_device_type == {lathe.pk: 7}
        assert Task.objects.filter(project_product__isnull=False).count() == 4
        assert Task.objects.filter(project_recipe__isnull=False).count() == 3

    def test_status_and_dates(self, project, shaft):
        ProjectRecipe.objects.create(project=project, recipe=shaft)

        before = timezone.now()
        Foreman.activate_project(project)

        project.refresh_from_db()
        assert project.status == ProjectStatus.ACTIVE
        assert project.activated_at >= before
        assert project.start_date == project.activated_at

    def test_keeps_existing_start_date(self, project, shaft):
        start = timezone.now() - timedelta(days=3)
        project.start_date = start
        project.save()
        ProjectRecipe.objects.create(project=project, recipe=shaft)

        Foreman.activate_project(project)

        project.refresh_from_db()
        assert project.start_date == start

    def test_lines_are_frozen_on_snapshots(self, project, pump, shaft):
        product_line = ProjectProduct.objects.create(project=project, product=pump)
        recipe_line = ProjectRecipe.objects.create(project=project, recipe=shaft)

        Foreman.activate_project(project)

        product_line.refresh_from_db()
        recipe_line.refresh_from_db()
        assert product_line.product_snapshot.original_product == pump
        assert recipe_line.recipe_snapshot.original_recipe == shaft

    def test_later_recipe_edit_does_not_touch_tasks(self, project, shaft):
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=2)
        Foreman.activate_project(project)

        shaft.name = "Shaft v2"
        shaft.save()

        task = Task.objects.filter(project=project).first()
        assert task.recipe_snapshot.name == "Shaft"
        assert task.recipe_snapshot.version == 1

    def test_uses_configured_batch_size(self, project, shaft, settings):
        settings.FOREMAN = {"TASK_BATCH_SIZE": 2}
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=5)

        with patch(
            "foreman.services.activation.bulk_create_with_history",
            wraps=bulk_create_with_history,
        ) as spy:
            Foreman.activate_project(project)

        assert spy.call_args.kwargs["batch_size"] == 2
        assert Task.objects.filter(project=project).count() == 5

    def test_history_written_for_tasks(self, project, shaft):
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=3)

        Foreman.activate_project(project)

        assert Task.history.filter(project_id=project.pk).count() == 3

    def test_model_method(self, project, shaft):
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=2)

        result = project.activate()

        assert result.tasks_created == 2
        assert project.status == ProjectStatus.ACTIVE


# ═══════════════════════════════════════════════════════════════════
# Failures (all-or-nothing)
# ═══════════════════════════════════════════════════════════════════


class TestActivationFailures:
    """A failed activation leaves no trace."""

    def _assert_untouched(self, project):
        project.refresh_from_db()
        assert project.status == ProjectStatus.PLANNING
        assert project.activated_at is None
        assert Task.objects.filter(project=project).count() == 0
        assert not project.product_lines.filter(product_snapshot__isnull=False).exists()
        assert not project.recipe_lines.filter(recipe_snapshot__isnull=False).exists()

    def test_entry_step_without_device_type(self, project, shaft):
        Recipe.objects.filter(pk=shaft.pk).update(
            steps=[{"id": "turn", "order": 1, "name": "Turn", "depends_on": []}]
        )
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=4)

        with pytest.raises(ForemanError) as exc:
            Foreman.activate_project(project)

        assert exc.value.code == "VALIDATION_ERROR"
        assert exc.value.details["step"] == "turn"
        self._assert_untouched(project)
        assert not RecipeSnapshot.objects.exists()

    def test_later_line_failure_rolls_back_earlier_lines(self, project, pump, shaft, bracket):
        ProjectProduct.objects.create(project=project, product=pump, target_quantity=2)
        Recipe.objects.filter(pk=bracket.pk).update(
            steps=[{"id": "cut", "order": 1, "name": "Cut", "device_type": None}]
        )
        ProjectRecipe.objects.create(project=project, recipe=bracket)

        with pytest.raises(ForemanError):
            Foreman.activate_project(project)

        self._assert_untouched(project)
        assert not ProductSnapshot.objects.exists()

    def test_unknown_device_type(self, project, shaft):
        Recipe.objects.filter(pk=shaft.pk).update(
            steps=[{"id": "turn", "order": 1, "name": "Turn", "device_type": 987654}]
        )
        ProjectRecipe.objects.create(project=project, recipe=shaft)

        with pytest.raises(ForemanError) as exc:
            Foreman.activate_project(project)

        assert exc.value.code == "VALIDATION_ERROR"
        assert exc.value.details["device_types"] == [987654]
        self._assert_untouched(project)

    def test_empty_project(self, project):
        with pytest.raises(ForemanError) as exc:
            Foreman.activate_project(project)

        assert exc.value.code == "VALIDATION_ERROR"
        self._assert_untouched(project)

    @pytest.mark.parametrize(
        "status",
        [ProjectStatus.ACTIVE, ProjectStatus.ON_HOLD, ProjectStatus.COMPLETED, ProjectStatus.CANCELLED],
    )
    def test_only_planning_projects_activate(self, project, shaft, status):
        ProjectRecipe.objects.create(project=project, recipe=shaft)
        Project.objects.filter(pk=project.pk).update(status=status)

        with pytest.raises(ForemanError) as exc:
            Foreman.activate_project(project)

        assert exc.value.code == "INVALID_STATUS"
        assert exc.value.details["current"] == status
        assert Task.objects.filter(project=project).count() == 0

    def test_missing_project(self, db):
        with pytest.raises(ForemanError) as exc:
            Foreman.activate_project(123456)

        assert exc.value.code == "NOT_FOUND"

    def test_duplicate_tasks_raise_conflict(self, project, shaft, lathe):
        line = ProjectRecipe.objects.create(project=project, recipe=shaft)
        snapshot = Foreman.get_or_create_recipe_snapshot(shaft)
        Task.objects.create(
            title="stray",
            project=project,
            project_recipe=line,
            recipe_snapshot=snapshot,
            step_id="turn",
            step_order=1,
            recipe_execution_number=1,
            total_recipe_executions=1,
            device_type=lathe,
        )

        with pytest.raises(ForemanError) as exc:
            Foreman.activate_project(project)

        assert exc.value.code == "CONFLICT"
        project.refresh_from_db()
        assert project.status == ProjectStatus.PLANNING
        assert Task.objects.filter(project=project).count() == 1


# ═══════════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def active_project(project, pump):
    ProjectProduct.objects.create(project=project, product=pump, target_quantity=3)
    Foreman.activate_project(project)
    project.refresh_from_db()
    return project


class TestDeactivation:
    """ACTIVE/ON_HOLD → PLANNING."""

    def test_deletes_tasks_and_resets_lines(self, active_project):
        line = active_project.product_lines.get()
        ProjectProduct.objects.filter(pk=line.pk).update(produced_quantity=2)

        deleted = Foreman.deactivate_project(active_project)

        active_project.refresh_from_db()
        line.refresh_from_db()
        assert deleted == 6
        assert active_project.status == ProjectStatus.PLANNING
        assert active_project.activated_at is None
        assert Task.objects.filter(project=active_project).count() == 0
        assert line.product_snapshot is None
        assert line.produced_quantity == 0

    def test_snapshots_are_kept(self, active_project):
        Foreman.deactivate_project(active_project)

        assert ProductSnapshot.objects.count() == 1

    def test_from_on_hold(self, active_project):
        Foreman.hold_project(active_project)

        assert active_project.deactivate() == 6
        assert active_project.status == ProjectStatus.PLANNING

    def test_reactivation_reuses_unchanged_snapshots(self, active_project):
        first = active_project.product_lines.get().product_snapshot_id

        Foreman.deactivate_project(active_project)
        result = Foreman.activate_project(active_project)

        assert result.tasks_created == 6
        assert active_project.product_lines.get().product_snapshot_id == first

    def test_planning_project_cannot_deactivate(self, project):
        with pytest.raises(ForemanError) as exc:
            Foreman.deactivate_project(project)

        assert exc.value.code == "INVALID_STATUS"


class TestTransitions:
    """hold / resume / complete / cancel."""

    def test_hold_and_resume_keep_tasks(self, active_project):
        Foreman.hold_project(active_project)
        assert active_project.status == ProjectStatus.ON_HOLD

        Foreman.resume_project(active_project)
        assert active_project.status == ProjectStatus.ACTIVE
        assert Task.objects.filter(project=active_project).count() == 6

    def test_resume_requires_on_hold(self, active_project):
        with pytest.raises(ForemanError) as exc:
            Foreman.resume_project(active_project)

        assert exc.value.code == "INVALID_STATUS"

    def test_complete(self, active_project):
        project = Foreman.complete_project(active_project)

        assert project.status == ProjectStatus.COMPLETED

    def test_cancel_from_planning(self, project):
        assert Foreman.cancel_project(project).status == ProjectStatus.CANCELLED

    def test_cancelled_project_is_terminal(self, project):
        Foreman.cancel_project(project)

        with pytest.raises(ForemanError):
            Foreman.cancel_project(project)
        with pytest.raises(ForemanError):
            Foreman.hold_project(project)

    def test_transition_by_pk(self, active_project):
        project = Foreman.hold_project(active_project.pk)

        assert project.status == ProjectStatus.ON_HOLD

    def test_change_status_dispatches(self, project, shaft):
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=2)

        result = Foreman.change_status(project, ProjectStatus.ACTIVE)
        assert result.tasks_created == 2

        project.refresh_from_db()
        assert Foreman.change_status(project, ProjectStatus.ON_HOLD).status == ProjectStatus.ON_HOLD
        assert Foreman.change_status(project, ProjectStatus.ACTIVE).status == ProjectStatus.ACTIVE
        assert Task.objects.filter(project=project).count() == 2

        assert Foreman.change_status(project, ProjectStatus.PLANNING).status == ProjectStatus.PLANNING
        assert Task.objects.filter(project=project).count() == 0


# ═══════════════════════════════════════════════════════════════════
# Signals
# ═══════════════════════════════════════════════════════════════════


class TestSignals:
    """Signals are sent once the transaction commits."""

    @pytest.fixture
    def received(self):
        calls = []

        def receiver(sender, signal, **kwargs):
            calls.append((signal, kwargs))

        for sig in (tasks_generated, project_activated, project_deactivated):
            sig.connect(receiver)
        yield calls
        for sig in (tasks_generated, project_activated, project_deactivated):
            sig.disconnect(receiver)

    def test_activation_signals(self, project, shaft, received, django_capture_on_commit_callbacks):
        ProjectRecipe.objects.create(project=project, recipe=shaft, target_quantity=3)

        with django_capture_on_commit_callbacks(execute=True):
            Foreman.activate_project(project)

        signals = [sig for sig, _ in received]
        assert signals == [tasks_generated, project_activated]
        kwargs = received[0][1]
        assert len(kwargs["tasks"]) == 3
        assert kwargs["project"].pk == project.pk

    def test_nothing_sent_before_commit(self, project, shaft, received):
        ProjectRecipe.objects.create(project=project, recipe=shaft)

        Foreman.activate_project(project)

        assert received == []

    def test_failed_activation_sends_nothing(self, project, received, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(ForemanError):
                Foreman.activate_project(project)

        assert callbacks == []
        assert received == []

    def test_deactivation_signal(self, active_project, received, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            Foreman.deactivate_project(active_project)

        assert [sig for sig, _ in received] == [project_deactivated]
        assert received[0][1]["tasks_deleted"] == 6


# ═══════════════════════════════════════════════════════════════════
# Queries
# ═══════════════════════════════════════════════════════════════════


class TestQueries:
    """Lookup helpers on the facade."""

    def test_get_project_by_code(self, active_project):
        assert Foreman.get_project(active_project.code) == active_project

    def test_get_project_missing(self, db):
        with pytest.raises(ForemanError) as exc:
            Foreman.get_project("PRJ-1999-99999")

        assert exc.value.code == "NOT_FOUND"
        assert exc.value.as_dict() == {
            "error": "NOT_FOUND",
            "entity": "project",
            "project": "PRJ-1999-99999",
        }

    def test_get_tasks_by_status(self, active_project):
        assert len(Foreman.get_tasks(active_project)) == 6
        assert len(Foreman.get_tasks(active_project, status=TaskStatus.PENDING)) == 6
        assert Foreman.get_tasks(active_project, status=TaskStatus.COMPLETED) == []

    def test_pending_tasks_per_device_type(self, active_project, lathe, welder):
        assert len(Foreman.get_pending_tasks(device_type=lathe)) == 6
        assert Foreman.get_pending_tasks(device_type=welder) == []
