"""
Context module.

Generic LIFO context machine with scope guards, plus the built-in
reversible operations for temporary poses, motion parameters and
controller-side contexts.
"""

from inovo_control.context.builtin import ControllerContext, MotionContext, ParamContext
from inovo_control.context.machine import Context, ContextGuard, ContextMachine

__all__ = [
    "Context",
    "ControllerContext",
    "ContextGuard",
    "ContextMachine",
    "MotionContext",
    "ParamContext",
]
