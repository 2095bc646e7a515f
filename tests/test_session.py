"""Tests for authentication and transparent re-authentication."""

import asyncio

import httpx
import pytest

from conftest import ADMIN_ID

from mediabrowser import MediaBrowser, UnauthorizedError, UnknownStatusError


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_authenticate_sets_token(self, jellyfin: MediaBrowser, server):
        assert 'Token=' not in jellyfin.req.auth
        user = await jellyfin.authenticate("admin", server.password)
        assert user.id == ADMIN_ID
        assert jellyfin.authenticated is True
        assert jellyfin.access_token == "token-1"
        assert jellyfin.session.user_id == ADMIN_ID
        assert jellyfin.req.auth == ('MediaBrowser Client="pytest", Device="pytest-device", '
                                     'DeviceId="device-1", Version="1.0.0", Token="token-1"')

    @pytest.mark.asyncio
    async def test_login_body(self, jellyfin: MediaBrowser, server):
        await jellyfin.authenticate("admin", server.password)
        login = server.requests[0]
        assert login.url.path == "/Users/AuthenticateByName"
        assert login.headers["User-Agent"] == "pytest/1.0.0"
        assert jellyfin.session.login_params == {"Username": "admin", "Pw": "hunter2", "Password": "hunter2"}

    @pytest.mark.asyncio
    async def test_wrong_password(self, jellyfin: MediaBrowser):
        with pytest.raises(UnauthorizedError):
            await jellyfin.authenticate("admin", "wrong")
        assert jellyfin.authenticated is False
        assert jellyfin.access_token == ""

    @pytest.mark.asyncio
    async def test_400_is_unauthorized(self, jellyfin: MediaBrowser, server):
        server.route("POST", "/Users/AuthenticateByName")(lambda request: httpx.Response(400))
        with pytest.raises(UnauthorizedError):
            await jellyfin.authenticate("admin", server.password)

    @pytest.mark.asyncio
    async def test_ensure_authenticated_uses_stored_credentials(self, admin: MediaBrowser, server):
        admin.session.authenticated = False
        await admin.session.ensure_authenticated()
        assert server.count("POST", "/Users/AuthenticateByName") == 2
        await admin.session.ensure_authenticated()
        assert server.count("POST", "/Users/AuthenticateByName") == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_log_in_once(self, admin: MediaBrowser, server):
        @server.route("POST", "/Users/AuthenticateByName")
        async def slow_login(request):
            await asyncio.sleep(0.01)
            return server.login(request)

        admin.session.authenticated = False
        results = await asyncio.gather(*(admin.get_users() for _ in range(10)))
        assert all(len(users) == 2 for users in results)
        assert server.count("POST", "/Users/AuthenticateByName") == 2
        assert server.count("GET", "/Users") == 1


class TestReauthentication:

    @pytest.mark.asyncio
    async def test_expired_token_reauthenticates_once(self, admin: MediaBrowser, server):
        server.token = "token-2"
        data, status = await admin.session.authenticated_request("GET", "/Users")
        assert status == 200
        assert server.count("POST", "/Users/AuthenticateByName") == 2
        assert server.count("GET", "/Users") == 2
        assert admin.access_token == "token-2"
        assert admin.authenticated is True

    @pytest.mark.asyncio
    async def test_second_401_is_not_retried(self, admin: MediaBrowser, server):
        server.route("GET", "/Users")(lambda request: httpx.Response(401))
        with pytest.raises(UnauthorizedError):
            await admin.get_users()
        assert server.count("POST", "/Users/AuthenticateByName") == 2
        assert server.count("GET", "/Users") == 2

    @pytest.mark.asyncio
    async def test_401_without_session_is_returned(self, jellyfin: MediaBrowser, server):
        data, status = await jellyfin.session.authenticated_request("GET", "/Users")
        assert status == 401
        assert server.count("POST", "/Users/AuthenticateByName") == 0

    @pytest.mark.asyncio
    async def test_failed_reauthentication_raises(self, admin: MediaBrowser, server):
        server.token = "token-2"
        server.password = "changed"
        with pytest.raises(UnauthorizedError):
            await admin.session.authenticated_request("GET", "/Users")
        assert admin.authenticated is False
        assert server.count("GET", "/Users") == 1


class TestMustAuthenticate:

    @pytest.mark.asyncio
    async def test_retries_until_success(self, jellyfin: MediaBrowser, server):
        server.login_failures = 2
        user = await jellyfin.must_authenticate("admin", server.password, 5, 0, log_failures=True)
        assert user.name == "admin"
        assert server.count("POST", "/Users/AuthenticateByName") == 3

    @pytest.mark.asyncio
    async def test_returns_last_error(self, jellyfin: MediaBrowser, server):
        server.login_failures = 10
        with pytest.raises(UnknownStatusError):
            await jellyfin.must_authenticate("admin", server.password, 3, 0)
        assert server.count("POST", "/Users/AuthenticateByName") == 3

    @pytest.mark.asyncio
    async def test_retry_count_must_be_positive(self, jellyfin: MediaBrowser, server):
        with pytest.raises(ValueError):
            await jellyfin.must_authenticate("admin", server.password, 0, 0)
