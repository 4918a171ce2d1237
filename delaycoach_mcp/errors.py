"""Exception types raised by the Delaycoach storage layer."""


class DelaycoachError(Exception):
    """Base class for Delaycoach errors."""


class StorageError(DelaycoachError):
    """The data file could not be read or written."""


class InvalidRecordError(DelaycoachError):
    """A stored or submitted record failed validation."""

    def __init__(self, key: str, detail: str):
        self.key = key
        self.detail = detail
        super().__init__(f"Invalid record in '{key}': {detail}")


class TaskNotFoundError(DelaycoachError):
    """No task exists with the requested ID."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' not found")
