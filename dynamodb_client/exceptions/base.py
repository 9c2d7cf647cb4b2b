from typing import Any, Dict, Optional


class DynamoDBClientError(Exception):
    """Base exception for all DynamoDB client errors.

    Attributes:
        message: Human-readable error message
        operation: Wire operation name (e.g. "Scan") the error belongs to, if known
        original_error: The original exception that caused this error (if any)
        context: Additional context information about the error
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        operation: Optional[str] = None,
    ):
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        self.operation = operation
        super().__init__(message)

    def __str__(self) -> str:
        error_str = f"[{self.operation}] {self.message}" if self.operation else self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            error_str += f" (Context: {context_str})"
        return error_str

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, operation={self.operation!r}, "
            f"original_error={self.original_error!r}, context={self.context!r})"
        )
