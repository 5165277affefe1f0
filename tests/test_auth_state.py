import uuid

import httpx
import pytest

from markethub.storefront.auth_state import AuthError, AuthState, AuthStateProvider


class Recorder:
    def __init__(self, name: str, log: list):
        self.name = name
        self.log = log

    async def __call__(self, state):
        self.log.append((self.name, state))


class TestAuthStateProvider:
    async def test_starts_as_guest(self):
        auth = AuthStateProvider()

        assert auth.state is None
        assert not auth.is_authenticated
        assert auth.account_id is None

    async def test_listeners_run_in_subscription_order(self):
        auth = AuthStateProvider()
        log: list = []
        auth.subscribe(Recorder("first", log))
        auth.subscribe(Recorder("second", log))
        account = uuid.uuid4()

        await auth.login(account, "tok")

        expected = AuthState(account_id=account, access_token="tok")
        assert log == [("first", expected), ("second", expected)]

    async def test_repeat_login_is_not_a_transition(self):
        auth = AuthStateProvider()
        log: list = []
        auth.subscribe(Recorder("cart", log))
        account = uuid.uuid4()

        await auth.login(account, "tok")
        await auth.login(account, "tok")

        assert len(log) == 1

    async def test_logout_notifies_once(self):
        auth = AuthStateProvider()
        log: list = []
        auth.subscribe(Recorder("cart", log))

        await auth.logout()
        await auth.login(uuid.uuid4(), "tok")
        await auth.logout()
        await auth.logout()

        assert [state for _, state in log][-1] is None
        assert len(log) == 2

    async def test_unsubscribe(self):
        auth = AuthStateProvider()
        log: list = []
        unsubscribe = auth.subscribe(Recorder("cart", log))

        unsubscribe()
        await auth.login(uuid.uuid4(), "tok")

        assert log == []


class TestLoginWithTokenResponses:
    @pytest.mark.parametrize(
        "body",
        [b'{"email": "shopper@markethub.io"}', b'{"id": "not-a-uuid"}', b"[]", b"<html>"],
    )
    async def test_unreadable_profile_raises_auth_error(self, body):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=body))
        auth = AuthStateProvider()

        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            with pytest.raises(AuthError, match="unreadable profile"):
                await auth.login_with_token(client, "tok")

        assert not auth.is_authenticated
