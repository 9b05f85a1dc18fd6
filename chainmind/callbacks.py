"""Callback helpers shared by sessions."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


async def invoke(callback: Callable[[T], Any] | None, arg: T) -> None:
    """Call a sync or async callback, awaiting it when it returns an awaitable."""
    if callback is None:
        return
    result = callback(arg)
    if inspect.isawaitable(result):
        await result
