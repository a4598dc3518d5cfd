import pytest
from fakes import FakeWeb3

import votesession.provider as provider_module
from votesession.config import Settings
from votesession.errors import ConfigurationError, NoProviderAvailable
from votesession.provider import fallback_provider, locate_provider, owns_provider, release_provider

RPC_URL = "http://127.0.0.1:8545"


@pytest.mark.asyncio
async def test_injected_provider_is_preferred() -> None:
    web3 = FakeWeb3()

    handle = await locate_provider(Settings(rpc_url=None), web3)

    assert handle is web3
    assert web3.log == ["is_connected"]


@pytest.mark.asyncio
async def test_missing_provider_fails_without_fallback() -> None:
    with pytest.raises(NoProviderAvailable) as exc_info:
        await locate_provider(Settings(rpc_url=None))

    assert exc_info.value.kind == "NoProviderAvailable"


@pytest.mark.asyncio
async def test_disconnected_injected_provider_fails() -> None:
    with pytest.raises(NoProviderAvailable):
        await locate_provider(Settings(rpc_url=None), FakeWeb3(connected=False))


@pytest.mark.asyncio
async def test_unsupported_fallback_scheme_is_reported_as_cause() -> None:
    with pytest.raises(NoProviderAvailable) as exc_info:
        await locate_provider(Settings(rpc_url="ws://127.0.0.1:8546"))

    assert isinstance(exc_info.value.cause, ConfigurationError)


def test_fallback_provider_targets_configured_endpoint() -> None:
    handle = fallback_provider(Settings(rpc_url=RPC_URL))

    assert handle is not None
    assert handle.provider.endpoint_uri == RPC_URL
    assert fallback_provider(Settings(rpc_url=None)) is None


@pytest.mark.asyncio
async def test_disconnected_injected_provider_falls_back_to_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    injected = FakeWeb3(connected=False)
    fallback = FakeWeb3()
    monkeypatch.setattr(provider_module, "fallback_provider", lambda _settings: fallback)

    handle = await locate_provider(Settings(rpc_url=RPC_URL), injected)

    assert handle is fallback
    assert injected.log == ["is_connected"]
    assert injected.provider.disconnected is False
    assert owns_provider(fallback)
    assert not owns_provider(injected)


@pytest.mark.asyncio
async def test_failing_injected_provider_falls_back_to_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    fallback = FakeWeb3()
    monkeypatch.setattr(provider_module, "fallback_provider", lambda _settings: fallback)

    handle = await locate_provider(Settings(rpc_url=RPC_URL), FakeWeb3(connect_error=OSError("extension crashed")))

    assert handle is fallback


@pytest.mark.asyncio
async def test_last_probe_error_is_chained_when_every_candidate_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    fallback_error = OSError("connection refused")
    fallback = FakeWeb3(connect_error=fallback_error)
    monkeypatch.setattr(provider_module, "fallback_provider", lambda _settings: fallback)

    with pytest.raises(NoProviderAvailable) as exc_info:
        await locate_provider(Settings(rpc_url=RPC_URL), FakeWeb3(connect_error=RuntimeError("locked")))

    assert exc_info.value.cause is fallback_error
    assert exc_info.value.__cause__ is fallback_error
    assert fallback.provider.disconnected is True


@pytest.mark.asyncio
async def test_unreachable_fallback_is_disconnected(monkeypatch: pytest.MonkeyPatch) -> None:
    fallback = FakeWeb3(connected=False)
    monkeypatch.setattr(provider_module, "fallback_provider", lambda _settings: fallback)

    with pytest.raises(NoProviderAvailable):
        await locate_provider(Settings(rpc_url=RPC_URL))

    assert fallback.provider.disconnected is True
    assert not owns_provider(fallback)


@pytest.mark.asyncio
async def test_release_leaves_host_provider_connected() -> None:
    injected = FakeWeb3()

    handle = await locate_provider(Settings(rpc_url=None), injected)
    await release_provider(handle)

    assert injected.provider.disconnected is False
