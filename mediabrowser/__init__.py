"""Jellyfin & Emby user and library administration client.

Usage:
    from mediabrowser import ServerType, new_server

    mb = await new_server(ServerType.EMBY, "http://emby.local:8096",
                          "my-app", "1.0.0", "my-app", "device-id")
    await mb.authenticate("admin", "password")
    users = await mb.get_users()
"""

from mediabrowser.client import MediaBrowser, ServerType, new_server, new_server_from_config
from mediabrowser.errors import (
    DetailedError,
    ForbiddenError,
    MediaBrowserError,
    NoPolicySuppliedError,
    NotFoundError,
    ServerConnectionError,
    UnauthorizedError,
    UnknownStatusError,
    UserNotFoundError,
    classify,
)
from mediabrowser.model import (
    AddMedia,
    Configuration,
    LibraryOptions,
    PasswordResetResponse,
    PathInfo,
    Policy,
    ServerInfo,
    User,
    VirtualFolder,
)
from mediabrowser.req import TimeoutHandler, new_named_timeout_handler
from mediabrowser.times import parse_time

__all__ = [
    # Client
    "MediaBrowser",
    "ServerType",
    "new_server",
    "new_server_from_config",
    "TimeoutHandler",
    "new_named_timeout_handler",
    # Errors
    "MediaBrowserError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "UserNotFoundError",
    "NoPolicySuppliedError",
    "UnknownStatusError",
    "ServerConnectionError",
    "DetailedError",
    "classify",
    # Models
    "User",
    "Policy",
    "Configuration",
    "ServerInfo",
    "PasswordResetResponse",
    "VirtualFolder",
    "LibraryOptions",
    "PathInfo",
    "AddMedia",
    "parse_time",
]
