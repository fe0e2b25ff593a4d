from .dto import OperationResult, OperationType

__all__ = ["OperationResult", "OperationType"]
