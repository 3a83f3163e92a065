"""
Foreman Signals.

Communication with the host system (execution engine, realtime
broadcasts) happens via signals, sent after the transaction commits.

Signals:
    tasks_generated: initial tasks of a project were created
    project_activated: project moved PLANNING → ACTIVE
    project_deactivated: project moved back to PLANNING, tasks deleted
"""

from django.dispatch import Signal

# Initial tasks created on activation
# Args: project, tasks (list of Task)
tasks_generated = Signal()

# Project activated
# Args: project, user
project_activated = Signal()

# Project deactivated
# Args: project, tasks_deleted, user
project_deactivated = Signal()

__all__ = ["tasks_generated", "project_activated", "project_deactivated"]
