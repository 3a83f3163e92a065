"""
Foreman Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    FOREMAN = {
        "TASK_BATCH_SIZE": 1000,
        "SNAPSHOT_MAX_RETRIES": 5,
    }

    # Option 2: Flat
    FOREMAN_TASK_BATCH_SIZE = 1000
    FOREMAN_SNAPSHOT_MAX_RETRIES = 5

Every setting has a default, so no configuration is required.
"""

from django.conf import settings


# ── Defaults ──

DEFAULTS = {
    "TASK_BATCH_SIZE": 500,
    "SNAPSHOT_MAX_RETRIES": 3,
    "PROJECT_CODE_PREFIX": "PRJ",
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a foreman setting.

    Looks up in order:
    1. FOREMAN dict (e.g. FOREMAN = {"TASK_BATCH_SIZE": 1000})
    2. Flat setting (e.g. FOREMAN_TASK_BATCH_SIZE = 1000)
    3. DEFAULTS
    """
    foreman_dict = getattr(settings, "FOREMAN", {})
    if name in foreman_dict:
        return foreman_dict[name]

    flat_value = getattr(settings, f"FOREMAN_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def get_task_batch_size() -> int:
    """Rows written per bulk insert when fanning out tasks."""
    return int(get_setting("TASK_BATCH_SIZE"))


def get_snapshot_max_retries() -> int:
    """How many times snapshot creation retries after a version conflict."""
    return max(1, int(get_setting("SNAPSHOT_MAX_RETRIES")))
