"""
Two-branch result type returned by the transport, parsers and API client
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .errors import NemligError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: NemligError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]
