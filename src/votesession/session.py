"""Session establishment: provider, accounts, contract, role."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from loguru import logger

from votesession.accounts import active_account_of, resolve_accounts
from votesession.artifacts import Interface, load_interface
from votesession.config import Settings
from votesession.contract import ContractHandle, bind_contract
from votesession.display import display_address
from votesession.errors import ConfigurationError, InvalidContractBinding, SessionFailure
from votesession.logging_utils import run_context
from votesession.provider import ProviderHandle, locate_provider, release_provider
from votesession.role import resolve_role


class SessionState(StrEnum):
    IDLE = "idle"
    LOCATING_PROVIDER = "locating_provider"
    RESOLVING_ACCOUNTS = "resolving_accounts"
    BINDING_CONTRACT = "binding_contract"
    RESOLVING_ROLE = "resolving_role"
    ESTABLISHED = "established"
    FAILED = "failed"


class Role(StrEnum):
    OWNER = "owner"
    VOTER = "voter"


@dataclass(frozen=True)
class SessionResult:
    """Everything the presentation layer needs once the protocol succeeded."""

    provider: ProviderHandle
    accounts: tuple[str, ...]
    contract: ContractHandle
    active_account: str
    owner_address: str
    is_owner: bool
    display_address: str

    @property
    def role(self) -> Role:
        return Role.OWNER if self.is_owner else Role.VOTER


type SessionOutcome = SessionResult | SessionFailure
type OutcomeListener = Callable[[SessionOutcome], None]


class SessionAssembler:
    """Run the binding protocol and keep the latest outcome.

    Every call to :meth:`establish` re-runs all stages from scratch. An
    outcome becomes :attr:`current` only when no newer run started in the
    meantime; stale runs still return their own outcome to their caller.
    """

    def __init__(self, settings: Settings, *, injected: Any = None, interface: Interface | None = None) -> None:
        self.settings = settings
        self._injected = injected
        self._interface = interface
        self._state = SessionState.IDLE
        self._current: SessionOutcome | None = None
        self._started = 0
        self._listeners: list[OutcomeListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current(self) -> SessionOutcome | None:
        return self._current

    def subscribe(self, listener: OutcomeListener) -> Callable[[], None]:
        """Register a consumer of published outcomes; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def establish(self) -> SessionOutcome:
        self._started += 1
        generation = self._started
        with run_context(f"run-{generation}"):
            try:
                outcome: SessionOutcome = await self._run(generation)
            except SessionFailure as failure:
                self._transition(generation, SessionState.FAILED)
                logger.opt(exception=failure).error("session.failed kind={}", failure.kind.value)
                outcome = failure
            else:
                self._transition(generation, SessionState.ESTABLISHED)
                logger.info("session.established account={} role={}", outcome.display_address, outcome.role.value)
            self._publish(generation, outcome)
        return outcome

    async def _run(self, generation: int) -> SessionResult:
        self._transition(generation, SessionState.LOCATING_PROVIDER)
        provider = await locate_provider(self.settings, self._injected)
        try:
            self._transition(generation, SessionState.RESOLVING_ACCOUNTS)
            accounts = await resolve_accounts(provider)
            active_account = active_account_of(accounts)

            self._transition(generation, SessionState.BINDING_CONTRACT)
            contract = bind_contract(
                provider,
                self.settings.contract_address,
                self._resolve_interface(),
                owner_method=self.settings.owner_method,
            )

            self._transition(generation, SessionState.RESOLVING_ROLE)
            check = await resolve_role(contract, active_account, method=self.settings.owner_method)
        except SessionFailure:
            await release_provider(provider)
            raise

        return SessionResult(
            provider=provider,
            accounts=accounts,
            contract=contract,
            active_account=active_account,
            owner_address=check.owner_address,
            is_owner=check.is_owner,
            display_address=display_address(active_account),
        )

    def _resolve_interface(self) -> Interface:
        if self._interface is not None:
            return self._interface
        try:
            return load_interface(self.settings.artifact_path)
        except ConfigurationError as exc:
            raise InvalidContractBinding(str(exc), cause=exc) from exc

    def _transition(self, generation: int, state: SessionState) -> None:
        if generation != self._started:
            return
        logger.debug("session.transition from={} to={}", self._state.value, state.value)
        self._state = state

    def _publish(self, generation: int, outcome: SessionOutcome) -> None:
        if generation != self._started:
            logger.info("session.stale_outcome_dropped generation={} latest={}", generation, self._started)
            return
        self._current = outcome
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception as exc:
                logger.opt(exception=exc).error("session.listener_failed listener={!r}", listener)


async def establish_session(settings: Settings, *, injected: Any = None, interface: Interface | None = None) -> SessionOutcome:
    """Run the protocol once with a throwaway assembler."""

    return await SessionAssembler(settings, injected=injected, interface=interface).establish()
