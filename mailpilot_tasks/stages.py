"""Pure helpers that keep a task's stage list ordered.

Every function returns new :class:`TaskStage` objects; inputs are never
mutated.  After any of them, ``order`` values are ``0..n-1`` and match
list position.
"""

from __future__ import annotations

from collections.abc import Sequence

from mailpilot_schema import TaskStage

DEFAULT_STAGE_NAMES = ("Planned", "In progress", "Review", "Complete")


def create_default_stages() -> list[TaskStage]:
    """The four-stage template every new task starts with."""
    return [TaskStage(name=name, order=i) for i, name in enumerate(DEFAULT_STAGE_NAMES)]


def normalize_stages(stages: Sequence[TaskStage] | None) -> list[TaskStage]:
    """Sort by ``order`` and renumber contiguously from zero.

    A stage without an order takes its list position.  Ties keep their
    list order.  Normalizing a normalized list returns an equal list.
    """
    if not stages:
        return []
    with_order = [
        stage.model_copy(update={"order": i if stage.order is None else stage.order})
        for i, stage in enumerate(stages)
    ]
    with_order.sort(key=lambda stage: stage.order)
    return [stage.model_copy(update={"order": i}) for i, stage in enumerate(with_order)]


def apply_stage_order(
    existing: Sequence[TaskStage] | None,
    incoming: Sequence[TaskStage],
) -> list[TaskStage]:
    """Merge a resubmitted stage list, keeping prior positions by name.

    Each incoming stage takes, in priority: its own explicit ``order``,
    the order of the existing stage with the same name, or its position
    in *incoming*.  Existing stages absent from *incoming* are dropped.
    """
    known_orders = {stage.name: stage.order for stage in normalize_stages(existing)}
    with_order = [
        stage.model_copy(
            update={
                "order": stage.order
                if stage.order is not None
                else known_orders.get(stage.name, i)
            }
        )
        for i, stage in enumerate(incoming)
    ]
    return normalize_stages(with_order)
