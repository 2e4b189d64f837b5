"""Terminal outcome of a long-running operation.

An operation's outcome is exactly one of:

- ``Pending``: no terminal status observed yet
- ``Succeeded(value)``: the service reported success; *value* is the
  materialized result
- ``Failed(error)``: the service reported failure; *error* is the
  structured failure built once from the service's error list

Holding the outcome in one attribute lets a poller publish the value (or
error) and the completed flag with a single reference assignment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from doc_analysis.core.exceptions import AnalysisError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Pending:
    """No terminal status observed yet."""


@dataclass(frozen=True, slots=True)
class Succeeded(Generic[T]):
    """The operation finished and produced *value*."""

    value: T


@dataclass(frozen=True, slots=True)
class Failed:
    """The operation finished with a service-reported failure."""

    error: AnalysisError


PENDING = Pending()

Outcome = Pending | Succeeded[T] | Failed
