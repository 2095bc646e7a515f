"""Pytest configuration and fixtures."""

import asyncio
import json
from collections import Counter
from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from mediabrowser import MediaBrowser, ServerType

ADMIN_ID = "e8b0d2e4-1a2b-4c3d-9e8f-0123456789ab"
ALICE_ID = "5d1c7a90-6f3e-4b21-8c4d-9a0b1c2d3e4f"


def make_user(user_id: str, name: str, **extra) -> dict:
    user = {
        "Name": name,
        "ServerId": "server-1",
        "Id": user_id,
        "HasPassword": True,
        "LastLoginDate": "2021-01-27T03:16:36.28538Z",
        "LastActivityDate": "2021-01-09T20:58:41.5907920+00:00",
        "Policy": {"IsAdministrator": name == "admin", "EnabledFolders": []},
        "Configuration": {"SubtitleMode": "Default"},
    }
    user.update(extra)
    return user


class FakeServer:
    """
    Minimal Jellyfin/Emby server for httpx.MockTransport.
    Routes are keyed by (method, path); unknown routes answer 404.
    """

    def __init__(self):
        self.users = [make_user(ADMIN_ID, "admin"), make_user(ALICE_ID, "Alice")]
        self.password = "hunter2"
        self.token = "token-1"
        self.login_failures = 0
        self.delay = 0.0
        self.calls: Counter = Counter()
        self.requests: list[httpx.Request] = []
        self.routes = {
            ("POST", "/Users/AuthenticateByName"): self.login,
            ("GET", "/Users"): self.list_users,
            ("GET", "/Users/Public"): self.list_users,
            ("GET", "/System/Info/Public"): self.info,
        }

    def route(self, method: str, path: str):
        def register(func):
            self.routes[(method, path)] = func
            return func

        return register

    def count(self, method: str, path: str) -> int:
        return self.calls[(method, path)]

    def authorized(self, request: httpx.Request) -> bool:
        return f'Token="{self.token}"' in request.headers.get("X-Emby-Authorization", "")

    async def handle(self, request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        self.calls[key] += 1
        self.requests.append(request)
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, text="Not found")
        response = handler(request)
        if asyncio.iscoroutine(response):
            response = await response
        return response

    def login(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if self.login_failures > 0:
            self.login_failures -= 1
            return httpx.Response(500)
        if body.get("Pw") != self.password:
            return httpx.Response(401, json={"title": "Unauthorized", "detail": "Invalid username or password"})
        user = next((u for u in self.users if u["Name"] == body.get("Username")), self.users[0])
        return httpx.Response(200, json={"AccessToken": self.token, "User": user, "ServerId": "server-1"})

    async def list_users(self, request: httpx.Request) -> httpx.Response:
        if self.delay:
            await asyncio.sleep(self.delay)
        if request.url.path == "/Users" and not self.authorized(request):
            return httpx.Response(401)
        return httpx.Response(200, json=self.users)

    def info(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "LocalAddress": "http://10.0.0.2:8096",
            "ServerName": "media",
            "Version": "10.8.13",
            "OperatingSystem": "Linux",
            "Id": "server-1",
        })


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


def make_client(server: FakeServer, server_type: ServerType, **kwargs) -> MediaBrowser:
    return MediaBrowser(server_type, "http://media.local:8096/", "pytest", "1.0.0", "pytest-device", "device-1",
                        transport=httpx.MockTransport(server.handle), **kwargs)


@pytest_asyncio.fixture
async def jellyfin(server: FakeServer) -> AsyncGenerator[MediaBrowser, None]:
    mb = make_client(server, ServerType.JELLYFIN)
    yield mb
    await mb.close()


@pytest_asyncio.fixture
async def emby(server: FakeServer) -> AsyncGenerator[MediaBrowser, None]:
    mb = make_client(server, ServerType.EMBY)
    yield mb
    await mb.close()


@pytest_asyncio.fixture
async def admin(jellyfin: MediaBrowser, server: FakeServer) -> MediaBrowser:
    """Jellyfin client already logged in as admin."""
    await jellyfin.authenticate("admin", server.password)
    return jellyfin
