"""
Error types raised by the task and category services.

Routes translate these into HTTP responses: NotFoundError -> 404,
ValidationFailedError -> 400, StorageError -> 500.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass
class FieldError:
    """A single validation problem tied to an input field."""
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class TaskAppError(Exception):
    """Base exception for task manager errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': False,
            'message': self.message,
        }


class NotFoundError(TaskAppError):
    """Referenced task or category id does not exist."""
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} with id {entity_id} does not exist")
        self.entity = entity
        self.entity_id = entity_id


class ValidationFailedError(TaskAppError):
    """Input rejected before (or by) the service layer."""
    status_code = 400

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        super().__init__(message or "Validation failed")
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['errors'] = [error.to_dict() for error in self.errors]
        return data


class StorageError(TaskAppError):
    """Lower-level persistence failure."""
    status_code = 500
