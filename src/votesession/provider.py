"""Provider discovery: injected provider first, configured endpoint second."""

from __future__ import annotations

import weakref
from typing import Any
from urllib.parse import urlparse

from aiohttp import ClientTimeout
from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3

from votesession.config import Settings
from votesession.errors import ConfigurationError, NoProviderAvailable

type ProviderHandle = Any

HTTP_SCHEMES = frozenset({"http", "https"})
_OWNED_HANDLES: weakref.WeakSet[Any] = weakref.WeakSet()


def wrap_provider(candidate: Any) -> ProviderHandle:
    """Return a web3 handle for a raw provider; handles pass through untouched."""

    if hasattr(candidate, "eth"):
        return candidate
    return AsyncWeb3(candidate)


def fallback_provider(settings: Settings) -> ProviderHandle | None:
    """Build a handle for the configured JSON-RPC endpoint, if any."""

    if not settings.rpc_url:
        return None
    scheme = urlparse(settings.rpc_url).scheme.lower()
    if scheme not in HTTP_SCHEMES:
        raise ConfigurationError(f"unsupported rpc_url scheme: {scheme or '<none>'}")
    provider = AsyncHTTPProvider(
        settings.rpc_url,
        request_kwargs={"timeout": ClientTimeout(total=settings.request_timeout)},
    )
    return AsyncWeb3(provider)


def owns_provider(handle: ProviderHandle) -> bool:
    """Tell whether ``handle`` was opened here rather than handed in by the host."""

    return handle in _OWNED_HANDLES


async def release_provider(handle: ProviderHandle) -> None:
    """Disconnect a handle this layer opened; host-owned handles are left alone."""

    if not owns_provider(handle):
        return
    _OWNED_HANDLES.discard(handle)
    await handle.provider.disconnect()
    logger.debug("provider.released")


async def locate_provider(settings: Settings, injected: Any = None) -> ProviderHandle:
    """Return the first connected provider, or raise ``NoProviderAvailable``."""

    last_error: BaseException | None = None
    candidates: list[tuple[str, Any]] = []
    if injected is not None:
        candidates.append(("injected", lambda: wrap_provider(injected)))
    if settings.rpc_url:
        candidates.append(("fallback", lambda: fallback_provider(settings)))

    for source, build in candidates:
        handle = None
        try:
            handle = build()
            if source == "fallback":
                _OWNED_HANDLES.add(handle)
            connected = await handle.is_connected()
        except Exception as exc:
            last_error = exc
            logger.opt(exception=exc).warning("provider.probe_failed source={}", source)
        else:
            if connected:
                logger.debug("provider.located source={}", source)
                return handle
            logger.warning("provider.unreachable source={}", source)
        if handle is not None:
            await release_provider(handle)

    if not candidates:
        raise NoProviderAvailable("no injected provider and no fallback rpc_url configured")
    raise NoProviderAvailable("no provider is reachable", cause=last_error) from last_error
