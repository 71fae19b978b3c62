"""Values that know how to check themselves.

Any value exposing ``validate_self()`` is asked to check itself before
its rules run::

    @dataclass
    class Range:
        low: int
        high: int

        def validate_self(self) -> Exception | None:
            if self.low > self.high:
                return ValueError("low must not exceed high")
            return None

A returned exception is raised as-is; an exception raised inside the
hook propagates as-is. Neither is wrapped, so callers may use any error
type they like.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

HOOK_NAME = "validate_self"


@runtime_checkable
class SelfValidating(Protocol):
    """Capability: a zero-argument self-check returning an optional error."""

    def validate_self(self) -> BaseException | None:
        """Return an exception describing what is wrong, or None."""
        ...


def _exposes_hook(value: Any) -> bool:
    return not isinstance(value, type) and isinstance(value, SelfValidating)


def _owned_copy(value: Any, declared: Any) -> SelfValidating | None:
    """Coerce *value* into its declared type so the hook can be attempted.

    Only two conversions count as a copy: ``model_validate`` for pydantic
    models (``child: Child`` assigned a dict) and the constructor of a
    declared subclass of the value's own type (``age: Age`` with
    ``class Age(int)`` assigned ``5``). Any other declared class is never
    instantiated. Returns None when no copy can be made.

    The hook then runs on the copy, so its errors propagate exactly as if
    the value itself carried the hook.
    """
    if value is None or not isinstance(declared, type):
        return None
    if not hasattr(declared, HOOK_NAME) or isinstance(value, declared):
        return None
    try:
        if issubclass(declared, BaseModel):
            copy = declared.model_validate(value)
        elif issubclass(declared, type(value)):
            copy = declared(value)
        else:
            return None
    except (TypeError, ValueError):
        logger.debug("No owned copy of %r as %s; skipping self-check", value, declared.__name__)
        return None
    return copy if _exposes_hook(copy) else None


def run_self_check(value: Any, declared: Any = None) -> None:
    """Invoke the value's self-check, if it has one.

    Raises:
        BaseException: whatever the hook returned or raised.
    """
    target = value if _exposes_hook(value) else _owned_copy(value, declared)
    if target is None:
        return
    error = target.validate_self()
    if error is not None:
        raise error
