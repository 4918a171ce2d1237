"""Parser helpers for stored Delaycoach records."""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from delaycoach_mcp.errors import InvalidRecordError
from delaycoach_mcp.models.task import CheckInModel, TaskModel

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(p) for p in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "invalid value")


def _parse_record(model: type[ModelT], record: Any, key: str) -> ModelT:
    """
    Validate one stored record.

    Raises:
        InvalidRecordError: if the record does not match the model, e.g. an
            unparseable due date
    """
    try:
        return model.model_validate(record)
    except ValidationError as e:
        detail = _describe(e)
        logger.warning("Rejected %s record: %s", key, detail)
        raise InvalidRecordError(key, detail) from e


def _parse_task(task_dict: dict[str, Any]) -> TaskModel:
    return _parse_record(TaskModel, task_dict, "task")


def _parse_tasks(tasks: list[dict[str, Any]]) -> list[TaskModel]:
    return [_parse_record(TaskModel, t, "task") for t in tasks]


def _parse_check_in(check_in: dict[str, Any]) -> CheckInModel:
    return _parse_record(CheckInModel, check_in, "check-in")


def _parse_check_ins(check_ins: list[dict[str, Any]]) -> list[CheckInModel]:
    return [_parse_record(CheckInModel, c, "check-in") for c in check_ins]
