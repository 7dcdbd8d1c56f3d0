"""MailPilot task stages: ordered, mergeable stage lists for delegated tasks."""

from .exceptions import StageNotFoundError
from .scheduler import StageScheduler, TaskStore
from .stages import (
    DEFAULT_STAGE_NAMES,
    apply_stage_order,
    create_default_stages,
    normalize_stages,
)

__all__ = [
    "DEFAULT_STAGE_NAMES",
    "StageNotFoundError",
    "StageScheduler",
    "TaskStore",
    "apply_stage_order",
    "create_default_stages",
    "normalize_stages",
]
