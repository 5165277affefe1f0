# markethub/storefront/auth_state.py
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx


@dataclass(frozen=True)
class AuthState:
    account_id: uuid.UUID
    access_token: str


AuthListener = Callable[[AuthState | None], Awaitable[None]]


class AuthError(Exception):
    """The access token was rejected or the profile could not be read."""


class AuthStateProvider:
    """
    Current login status of the storefront session.

    Holds the account id and bearer token after login, None for guests.
    Listeners are awaited, in subscription order, on every transition;
    re-announcing the current state is not a transition.
    """

    def __init__(self) -> None:
        self._state: AuthState | None = None
        self._listeners: list[AuthListener] = []

    @property
    def state(self) -> AuthState | None:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state is not None

    @property
    def account_id(self) -> uuid.UUID | None:
        return self._state.account_id if self._state else None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register `listener`; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def login(self, account_id: uuid.UUID, access_token: str) -> None:
        state = AuthState(account_id=account_id, access_token=access_token)
        if state == self._state:
            return
        self._state = state
        await self._notify()

    async def login_with_token(self, client: httpx.AsyncClient, access_token: str) -> uuid.UUID:
        """
        Resolve the account behind `access_token` via GET /users/me, then log in.

        Raises:
            AuthError: token rejected, service unreachable or profile unreadable.
        """
        try:
            response = await client.get(
                "/users/me",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Could not reach the account service: {e}") from e
        if response.is_error:
            raise AuthError(f"Login rejected ({response.status_code})")

        try:
            account_id = uuid.UUID(response.json()["id"])
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError("Account service sent an unreadable profile") from e
        await self.login(account_id, access_token)
        return account_id

    async def logout(self) -> None:
        if self._state is None:
            return
        self._state = None
        await self._notify()

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            await listener(self._state)
