"""Task stage errors."""

from __future__ import annotations

from mailpilot_connector.exceptions import MailPilotError


class StageNotFoundError(MailPilotError):
    """No stage with the requested name exists on the task."""

    user_message = "stage not found"

    def __init__(self, task_id: int, name: str) -> None:
        super().__init__(f"task {task_id} has no stage named {name!r}")
        self.task_id = task_id
        self.name = name
