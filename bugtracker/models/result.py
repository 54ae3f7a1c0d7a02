"""
Collaborator Result Types
=========================
Blob-store and datastore adapters never hand back loosely shaped
`{data, error}` pairs. Every call returns exactly one of:

    Ok(value)     — the call succeeded; `value` is the typed payload
    Err(error)    — the call failed; `error` is an UpstreamError

Callers either branch on `result.ok` or call `unwrap()`, which raises the
carried UpstreamError (optionally prefixed with context).
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from bugtracker.core.errors import UpstreamError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok = True

    def unwrap(self, context: Optional[str] = None, stage: Optional[str] = None) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: UpstreamError
    ok = False

    def unwrap(self, context: Optional[str] = None, stage: Optional[str] = None):
        if context:
            raise self.error.with_context(context, stage)
        if stage and not self.error.stage:
            self.error.stage = stage
        raise self.error


Result = Union[Ok[T], Err]
