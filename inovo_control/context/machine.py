"""Context machine -- a LIFO stack of reversible operations.

A *context* is a paired enter/exit action applied to a host object (the
*machine*).  The machine keeps every successfully entered context on an
ordered stack and always exits the most recent one first, however deeply
contexts are nested.

Rules
-----
``enter(ctx)``
    Runs ``ctx.enter(machine)``.  The context is pushed only if that
    succeeds; a failing enter leaves the stack untouched.
``exit()``
    Pops the top context, then runs its ``exit(machine)``.  The entry is
    removed even when its teardown raises (fail-forward); the teardown
    error still propagates.
``scoped(ctx)``
    Enters and returns a :class:`ContextGuard` that exits exactly once,
    on ``close()`` or when its ``with`` block ends.

Usage::

    with robot.scoped(ParamContext(slow)):
        with robot.scoped(MotionContext(MotionMode.LINEAR_RELATIVE, up)):
            robot.linear(station)
    # motion reverted first, then parameters restored

The machine holds no locks; a single caller must drive it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from inovo_control.errors import NoContextToExit

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="ContextMachine")


# ---------------------------------------------------------------------------
# Operation contract
# ---------------------------------------------------------------------------


class Context(ABC):
    """A reversible operation over a context machine."""

    @abstractmethod
    def enter(self, machine: Any) -> None:
        """Apply the change.  Raise to refuse entry."""

    @abstractmethod
    def exit(self, machine: Any) -> None:
        """Revert the change applied by :meth:`enter`."""

    def label(self) -> str:
        """Human-readable description used in logs."""
        return type(self).__name__


# ---------------------------------------------------------------------------
# Machine
# ---------------------------------------------------------------------------


class ContextMachine:
    """Base class giving a host object an ordered stack of contexts."""

    def __init__(self) -> None:
        self._contexts: list[Context] = []

    @property
    def context_depth(self) -> int:
        """Number of contexts currently entered."""
        return len(self._contexts)

    @property
    def contexts(self) -> list[str]:
        """Labels of the active contexts, outermost first."""
        return [ctx.label() for ctx in self._contexts]

    def enter(self, context: Context) -> None:
        """Enter *context* and push it on success.

        Raises
        ------
        Exception
            Whatever ``context.enter`` raised; nothing is pushed.
        """
        logger.debug("Entering context %s", context.label())
        context.enter(self)
        self._contexts.append(context)
        logger.debug("Context depth now %d", len(self._contexts))

    def exit(self) -> None:
        """Pop the most recent context and run its teardown.

        Raises
        ------
        NoContextToExit
            If no context is active.
        Exception
            Whatever the context's ``exit`` raised, after it was popped.
        """
        if not self._contexts:
            raise NoContextToExit()
        context = self._contexts.pop()
        logger.debug("Exiting context %s", context.label())
        try:
            context.exit(self)
        except Exception:
            logger.error(
                "Teardown of %s failed; context discarded", context.label(),
            )
            raise

    def scoped(self: M, context: Context) -> ContextGuard[M]:
        """Enter *context* and return a guard that exits it once."""
        self.enter(context)
        return ContextGuard(self, context)

    def _is_top(self, context: Context) -> bool:
        return bool(self._contexts) and self._contexts[-1] is context


# ---------------------------------------------------------------------------
# Guard
# ---------------------------------------------------------------------------


class ContextGuard(Generic[M]):
    """Scope handle returned by :meth:`ContextMachine.scoped`.

    The context is already entered when the guard exists.  Use it as a
    ``with`` statement (``as`` binds the machine) or call :meth:`close`.
    """

    def __init__(self, machine: M, context: Context) -> None:
        self._machine = machine
        self._context = context
        self._closed = False

    @property
    def machine(self) -> M:
        return self._machine

    @property
    def closed(self) -> bool:
        return self._closed

    def label(self) -> str:
        return self._context.label()

    def close(self) -> None:
        """Exit the guarded context.  Further calls do nothing."""
        if self._closed:
            return
        self._closed = True
        if not self._machine._is_top(self._context):
            logger.warning(
                "Closing guard for %s out of order; exiting the top context",
                self._context.label(),
            )
        self._machine.exit()

    def __enter__(self) -> M:
        return self._machine

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<ContextGuard {self._context.label()} ({state})>"
