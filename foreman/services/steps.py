"""
Step graph validation -- pure functions, no I/O.

A recipe's steps live as a JSON list on Recipe.steps:

    [
        {
            "id": "cut",
            "order": 1,
            "name": "Cut",
            "estimated_duration": 30,
            "device_type": 4,
            "depends_on": [],
        },
        {
            "id": "weld",
            "order": 2,
            "name": "Weld",
            "estimated_duration": 45,
            "device_type": 7,
            "depends_on": ["cut"],
        },
    ]

validate_steps() checks that depends_on is closed and acyclic and returns
the total duration. normalize_steps() does the structural checks that
Recipe.clean() needs before the graph can even be built.
"""

import uuid
from collections.abc import Iterable, Mapping

from foreman.exceptions import CyclicDependency, DanglingDependency, ForemanError

UNVISITED, IN_PROGRESS, DONE = 0, 1, 2


def _sort_key(step: Mapping) -> tuple:
    return (step.get("order") or 0, str(step["id"]))


def _step_id(step: Mapping) -> str:
    try:
        return str(step["id"])
    except KeyError:
        raise ForemanError(
            "VALIDATION_ERROR", message=f"Step at order {step.get('order')} has no id"
        )


def validate_steps(steps: Iterable[Mapping]) -> int:
    """
    Validate a step dependency graph and return its total duration.

    Raises:
        DanglingDependency: depends_on references an id outside the set
        CyclicDependency: a step is its own ancestor (self-dependency included)

    The result does not depend on the order of ``steps``: steps are always
    walked by ascending (order, id).
    """
    ordered = sorted(steps, key=lambda s: (s.get("order") or 0, _step_id(s)))
    by_id = {_step_id(step): step for step in ordered}

    # Build dependency map, rejecting references outside the recipe
    dependencies: dict[str, list[str]] = {}
    for step in ordered:
        step_id = _step_id(step)
        depends_on = sorted(
            {str(dep) for dep in (step.get("depends_on") or [])},
            key=lambda dep: _sort_key(by_id[dep]) if dep in by_id else (0, dep),
        )
        for dep in depends_on:
            if dep not in by_id:
                raise DanglingDependency(
                    step_id,
                    f"Step at order {step.get('order')} depends on "
                    f"non-existent step '{dep}'",
                    dependency=dep,
                )
        dependencies[step_id] = depends_on

    _check_acyclic(list(by_id), dependencies)

    return sum(step.get("estimated_duration") or 0 for step in ordered)


def _check_acyclic(nodes: list[str], dependencies: dict[str, list[str]]) -> None:
    """Three-state depth-first search with an explicit stack."""
    state = dict.fromkeys(nodes, UNVISITED)
    path: list[str] = []

    for start in nodes:
        if state[start] != UNVISITED:
            continue

        state[start] = IN_PROGRESS
        path.append(start)
        frames = [(start, iter(dependencies[start]))]

        while frames:
            node, deps = frames[-1]
            dep = next(deps, None)

            if dep is None:
                frames.pop()
                path.pop()
                state[node] = DONE
                continue

            if state[dep] == IN_PROGRESS:
                cycle = path[path.index(dep):] + [dep]
                raise CyclicDependency(
                    dep,
                    f"Circular dependency detected involving step '{dep}'",
                    cycle=cycle,
                )

            if state[dep] == UNVISITED:
                state[dep] = IN_PROGRESS
                path.append(dep)
                frames.append((dep, iter(dependencies[dep])))


def normalize_steps(steps, require_device_type: bool = True) -> list[dict]:
    """
    Structural validation of Recipe.steps.

    Returns a new list of step dicts sorted by order, with ids assigned
    where missing and optional keys defaulted. Raises ForemanError
    (VALIDATION_ERROR) on the first malformed step.
    """
    if not isinstance(steps, (list, tuple)):
        raise ForemanError("VALIDATION_ERROR", message="Steps must be a list of objects")

    normalized = []
    seen_ids: set[str] = set()
    seen_orders: set[int] = set()

    for index, raw in enumerate(steps, start=1):
        if not isinstance(raw, Mapping):
            raise ForemanError(
                "VALIDATION_ERROR", message=f"Step {index} must be an object"
            )

        step = dict(raw)
        step_id = step.get("id")
        if step_id is None or step_id == "":
            step_id = uuid.uuid4().hex
        step["id"] = str(step_id)

        order = step.get("order")
        if isinstance(order, bool) or not isinstance(order, int) or order < 1:
            raise ForemanError(
                "VALIDATION_ERROR",
                message=f"Step {index} order must be a positive integer",
            )
        if order in seen_orders:
            raise ForemanError(
                "VALIDATION_ERROR", message=f"Duplicate step order {order}"
            )
        if step["id"] in seen_ids:
            raise ForemanError(
                "VALIDATION_ERROR", message=f"Duplicate step id '{step['id']}'"
            )

        name = step.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ForemanError(
                "VALIDATION_ERROR", message=f"Step {index} must have a name"
            )

        duration = step.get("estimated_duration", 0)
        if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration < 0:
            raise ForemanError(
                "VALIDATION_ERROR",
                message=f"Step {index} estimated_duration must be a non-negative number",
            )

        device_type = step.get("device_type")
        if isinstance(device_type, str) and device_type.strip().isdigit():
            device_type = int(device_type)
        if require_device_type and not device_type:
            raise ForemanError(
                "VALIDATION_ERROR", message=f"Step {index} requires a device_type"
            )
        step["device_type"] = device_type

        depends_on = step.get("depends_on") or []
        if not isinstance(depends_on, (list, tuple)):
            raise ForemanError(
                "VALIDATION_ERROR", message=f"Step {index} depends_on must be a list"
            )

        step["name"] = name.strip()
        step["estimated_duration"] = duration
        step["depends_on"] = [str(dep) for dep in depends_on]
        step.setdefault("description", "")
        step.setdefault("quality_checks", [])

        seen_ids.add(step["id"])
        seen_orders.add(order)
        normalized.append(step)

    return sorted(normalized, key=lambda s: s["order"])


def entry_step(steps: Iterable[Mapping]) -> Mapping | None:
    """The step with order 1, or None."""
    for step in steps:
        if step.get("order") == 1:
            return step
    return None


def max_order(steps: Iterable[Mapping]) -> int:
    """Highest step order (0 for an empty recipe)."""
    return max((step.get("order") or 0 for step in steps), default=0)
