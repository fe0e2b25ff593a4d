from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class OperationType(str, Enum):
    READ = "read"
    UPDATE = "update"
    VALIDATION = "validation"


@dataclass
class OperationResult:
    success: bool
    message: str
    operation: OperationType
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str, operation: OperationType, **data: Any) -> OperationResult:
        return cls(True, message, operation, dict(data))

    @classmethod
    def failure(cls, message: str, operation: OperationType, error: Optional[str] = None, **data: Any) -> OperationResult:
        return cls(False, message, operation, dict(data), error)

    def __bool__(self) -> bool:
        return self.success
