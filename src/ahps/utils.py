"""
Internal utility functions for pyahps.
"""

from typing import Any, Awaitable, Callable, TypeVar

R = TypeVar("R")


def add_sync_version(
    async_fn: Callable[..., Awaitable[R]],
) -> Callable[..., Awaitable[R]]:
    """
    Attach a blocking ``.sync`` variant to an async function.

    When the function takes a ``client`` argument and the caller supplies
    none, positionally or by keyword, ``.sync`` opens a client of the
    annotated type for the duration of the call.

    Example:
        >>> site = await get_site("btrl1")
        >>> site = get_site.sync("btrl1")
    """
    # Deferred to keep sync.py free to import the models package-wide
    from .sync import AsyncSyncBridge

    client_class = AsyncSyncBridge.client_class_for(async_fn)

    def run_blocking(*args: Any, **kwargs: Any) -> R:
        return AsyncSyncBridge.run_async(
            async_fn, args=args, kwargs=kwargs, client_class=client_class
        )

    async_fn.sync = run_blocking  # type: ignore
    return async_fn
