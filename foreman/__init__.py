"""
Django Foreman - Production project planning and task fan-out.

Recipes are ordered step graphs, products are made of recipes, and a
project turns product/recipe quantities into device-routed tasks against
immutable snapshots of those definitions.

Usage:
    from foreman import foreman, ForemanError

    try:
        result = foreman.activate_project(project, user=request.user)
    except ForemanError as e:
        print(e.code, e.details)
    else:
        print(f"{result.tasks_created} tasks created")
"""

from foreman.exceptions import ForemanError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("foreman", "Foreman"):
        from foreman.service import Foreman

        return Foreman
    if name == "ActivationResult":
        from foreman.results import ActivationResult

        return ActivationResult
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["foreman", "Foreman", "ForemanError", "ActivationResult"]
__version__ = "0.1.0"
