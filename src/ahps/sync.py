"""
Synchronous wrappers for pyahps.

The client and convenience functions are async. This module runs them on a
private event loop for callers that cannot use async/await.

Usage:
    # Instead of this async code:
    async with AHPSClient() as client:
        site = await client.get_site("btrl1")

    # Use this sync code:
    from ahps.sync import get_site_sync
    site = get_site_sync("btrl1")
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union, get_args, get_origin

from .models import RiverPoint, SiteRecord

R = TypeVar("R")


class AsyncSyncBridge:
    """Runs async functions synchronously, creating a client when needed."""

    @staticmethod
    def run_async(
        async_fn: Callable[..., Awaitable[R]],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        client_class: Optional[type] = None,
    ) -> R:
        """Run an async function synchronously.

        Args:
            async_fn: Async function to run
            args: Positional arguments for the function
            kwargs: Keyword arguments for the function
            client_class: Client class to open when the call supplies no client

        Returns:
            Result of running the async function

        Raises:
            RuntimeError: If called from within an existing event loop
        """
        kwargs = dict(kwargs or {})

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "Cannot use sync version from within an existing asyncio event loop. "
                "Use the async version instead."
            )

        needs_client = client_class is not None and not AsyncSyncBridge.has_client(
            async_fn, args, kwargs
        )

        async def _call_and_cleanup() -> R:
            if not needs_client:
                return await async_fn(*args, **kwargs)
            temp_client = client_class()  # type: ignore[misc]
            bound = inspect.signature(async_fn).bind_partial(*args, **kwargs)
            bound.arguments["client"] = temp_client
            try:
                return await async_fn(*bound.args, **bound.kwargs)
            finally:
                await temp_client.close()

        return asyncio.run(_call_and_cleanup())

    @staticmethod
    def has_client(async_fn: Callable[..., Any], args: tuple, kwargs: dict) -> bool:
        """Whether the call binds a non-None ``client``, positionally or by keyword."""
        try:
            bound = inspect.signature(async_fn).bind_partial(*args, **kwargs)
        except TypeError:
            # Let the call itself report the bad arguments
            return True
        return bound.arguments.get("client") is not None

    @staticmethod
    def client_class_for(async_fn: Callable[..., Any]) -> Optional[type]:
        """Client class from the ``client`` parameter's annotation, if any."""
        param = inspect.signature(async_fn).parameters.get("client")
        if param is None:
            return None
        return AsyncSyncBridge.extract_client_class(param.annotation)

    @staticmethod
    def extract_client_class(annotation: Any) -> Optional[type]:
        """Extract client class from type annotation.

        Handles Optional, Union, and direct type annotations.
        """
        if annotation is None or annotation is inspect.Parameter.empty:
            return None

        origin = get_origin(annotation)
        if origin is Union:
            non_none_args = [arg for arg in get_args(annotation) if arg is not type(None)]
            if non_none_args and isinstance(non_none_args[0], type):
                return non_none_args[0]
        elif isinstance(annotation, type):
            return annotation

        return None


def get_site_sync(gauge: str, client: Optional[Any] = None) -> SiteRecord:
    """Synchronous version of get_site."""
    from .convenience import get_site

    return get_site.sync(gauge, client=client)  # type: ignore[attr-defined]


def get_current_stage_sync(gauge: str, client: Optional[Any] = None) -> str:
    """Synchronous version of get_current_stage."""
    from .convenience import get_current_stage

    return get_current_stage.sync(gauge, client=client)  # type: ignore[attr-defined]


def get_current_level_sync(gauge: str, client: Optional[Any] = None) -> RiverPoint:
    """Synchronous version of get_current_level."""
    from .convenience import get_current_level

    return get_current_level.sync(gauge, client=client)  # type: ignore[attr-defined]


def get_projected_crest_sync(gauge: str, client: Optional[Any] = None) -> RiverPoint:
    """Synchronous version of get_projected_crest."""
    from .convenience import get_projected_crest

    return get_projected_crest.sync(gauge, client=client)  # type: ignore[attr-defined]
