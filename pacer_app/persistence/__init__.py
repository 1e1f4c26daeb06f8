"""
Plan storage module.

Stores validated plans and the first-launch flag in SQLite.
"""

from .launch_state import LaunchStateStore
from .plan_store import InMemoryPlanStore, PlanRepository, SqlitePlanStore

__all__ = [
    "PlanRepository",
    "SqlitePlanStore",
    "InMemoryPlanStore",
    "LaunchStateStore",
]
