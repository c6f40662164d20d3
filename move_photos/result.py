"""
Result values for operations that can fail without it being exceptional.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value (success) or an error message (failure)."""
    succeeded: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> 'Result[T]':
        return cls(succeeded=True, value=value)

    @classmethod
    def failure(cls, error: str) -> 'Result[T]':
        return cls(succeeded=False, error=error)

    @property
    def failed(self) -> bool:
        return not self.succeeded
