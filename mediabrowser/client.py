from enum import Enum
from typing import Any, Optional

import httpx

from mediabrowser.api import BackendAPI
from mediabrowser.cache import SnapshotCache, UserCache
from mediabrowser.config import ClientConfig, Config, EmbyConfig, JellyfinConfig
from mediabrowser.emby.api import EmbyAPI
from mediabrowser.errors import MediaBrowserError, UserNotFoundError
from mediabrowser.jellyfin.api import JellyfinAPI
from mediabrowser.logger import mb_logger
from mediabrowser.model import (AddMedia, Configuration, LibraryOptions, PasswordResetResponse, Policy, ServerInfo,
                                User, VirtualFolder)
from mediabrowser.req import MediaBrowserRequest, TimeoutHandler, new_named_timeout_handler
from mediabrowser.session import Session


class ServerType(Enum):
    JELLYFIN = 0
    EMBY = 1


BACKENDS: dict[ServerType, type[BackendAPI]] = {
    ServerType.JELLYFIN: JellyfinAPI,
    ServerType.EMBY: EmbyAPI,
}


class MediaBrowser:
    """
    Jellyfin / Emby 统一客户端

    Usage:
        mb = await new_server(ServerType.JELLYFIN, "http://jellyfin.local:8096",
                              "my-app", "1.0.0", "my-app", "my-app-device")
        await mb.authenticate("admin", "password")
        user = await mb.user_by_name("someone")
    """

    def __init__(self, server_type: ServerType, server: str, client: str, version: str, device: str,
                 device_id: str, timeout_handler: Optional[TimeoutHandler] = None, cache_timeout: float = 30,
                 verbose: bool = False, timeout: float = 10, transport: Optional[httpx.AsyncBaseTransport] = None,
                 proxy: Optional[str] = None):
        """
        :param server_type: 服务器类型
        :param server: 服务器地址
        :param client: 客户端名称
        :param version: 客户端版本
        :param device: 设备名称
        :param device_id: 设备ID
        :param timeout_handler: 超时/网络错误时调用
        :param cache_timeout: 用户/媒体库缓存时长(分钟)
        :param verbose: 错误信息中附带服务器返回内容
        :param timeout: 单个请求超时时间(秒)
        :param transport: 自定义 httpx transport
        :param proxy: 代理
        """
        self.server_type = server_type
        self.req = MediaBrowserRequest(server, client, version, device, device_id, timeout_handler, timeout,
                                       transport, proxy)
        self.session = Session(self.req, verbose)
        self.api = BACKENDS[server_type](self.session)
        self.user_cache = UserCache(cache_timeout)
        self.library_cache: SnapshotCache[VirtualFolder] = SnapshotCache(cache_timeout)
        self.server_info = ServerInfo()

    @property
    def server(self) -> str:
        return self.req.server

    @property
    def authenticated(self) -> bool:
        return self.session.authenticated

    @property
    def access_token(self) -> str:
        return self.session.access_token

    @property
    def username(self) -> str:
        return self.session.username

    @property
    def hyphens(self) -> bool:
        """用户ID是否带连字符，在每次刷新用户缓存时检测"""
        return self.user_cache.hyphens

    @property
    def verbose(self) -> bool:
        return self.session.verbose

    @verbose.setter
    def verbose(self, value: bool):
        self.session.verbose = value

    async def fetch_server_info(self) -> ServerInfo:
        """
        获取服务器信息，失败时记录日志并保留空信息
        """
        try:
            self.server_info = await self.api.System.info()
        except (MediaBrowserError, ValueError) as err:
            mb_logger.warning(f"Failed to get server info from {self.server}: {err}")
        return self.server_info

    # ==================== Authentication ====================

    async def authenticate(self, username: str, password: str) -> User:
        return await self.session.authenticate(username, password)

    async def must_authenticate(self, username: str, password: str, retry_count: int, retry_gap: float,
                                log_failures: bool = False) -> User:
        return await self.session.must_authenticate(username, password, retry_count, retry_gap, log_failures)

    # ==================== Users ====================

    async def _sync_users(self, public: bool, force: bool = False) -> bool:
        async def fetch() -> list[User]:
            users = await self.api.Users.fetch_users(public)
            self.user_cache.public = public
            return users

        # 公开列表不含隐藏用户，快照来源不一致时视为过期
        return await self.user_cache.sync(fetch, force or self.user_cache.public != public)

    async def get_users(self, public: bool = False) -> list[User]:
        """
        获取所有(可见)用户
        :param public: 为 True 时无需登录，但隐藏用户不可见
        :return:
        """
        if not public:
            await self.session.ensure_authenticated()
        await self._sync_users(public)
        return list(self.user_cache.entries)

    async def user_by_id(self, user_id: str, public: bool = False) -> User:
        """
        按ID获取用户，优先使用缓存
        :param user_id: 用户ID
        :param public: 为 True 时只查询公开用户列表
        :return:
        """
        if not user_id:
            raise UserNotFoundError()
        if not public:
            await self.session.ensure_authenticated()
        refreshed = await self._sync_users(public)
        if user := self.user_cache.lookup_id(user_id):
            return user
        if public:
            if not refreshed:
                await self._sync_users(public, force=True)
                if user := self.user_cache.lookup_id(user_id):
                    return user
            raise UserNotFoundError(user_id=user_id)
        return await self.api.Users.fetch_user(user_id)

    async def user_by_id_from_cache(self, user_id: str) -> User:
        """
        只在缓存中查找(过期时刷新)，不单独请求该用户
        """
        if not user_id:
            raise UserNotFoundError()
        await self.session.ensure_authenticated()
        await self._sync_users(False)
        if user := self.user_cache.lookup_id(user_id):
            return user
        raise UserNotFoundError(user_id=user_id)

    async def user_by_name(self, username: str, public: bool = False) -> User:
        """
        按用户名获取用户(不区分大小写)，缓存中找不到时强制刷新一次
        :param username: 用户名
        :param public: 为 True 时只查询公开用户列表
        :return:
        """
        if not username:
            raise UserNotFoundError()
        if not public:
            await self.session.ensure_authenticated()
        refreshed = await self._sync_users(public)
        if user := self.user_cache.lookup_name(username):
            return user
        # 刚创建的用户不必等缓存过期
        if not refreshed:
            await self._sync_users(public, force=True)
            if user := self.user_cache.lookup_name(username):
                return user
        raise UserNotFoundError(user=username)

    async def user_by_name_from_cache(self, username: str) -> User:
        if not username:
            raise UserNotFoundError()
        await self.session.ensure_authenticated()
        await self._sync_users(False)
        if user := self.user_cache.lookup_name(username):
            return user
        raise UserNotFoundError(user=username)

    async def new_user(self, username: str, password: str) -> User:
        user = await self.api.Users.new_user(username, password)
        self.user_cache.invalidate()
        return user

    async def delete_user(self, user_id: str):
        try:
            await self.api.Users.delete_user(user_id)
        finally:
            self.user_cache.invalidate()

    async def set_policy(self, user_id: str, policy: Policy):
        await self.api.Users.set_policy(user_id, policy)

    async def set_configuration(self, user_id: str, configuration: Configuration):
        await self.api.Users.set_configuration(user_id, configuration)

    async def get_display_preferences(self, user_id: str) -> dict[str, Any]:
        return await self.api.Users.get_display_preferences(user_id)

    async def set_display_preferences(self, user_id: str, display_prefs: dict[str, Any]):
        await self.api.Users.set_display_preferences(user_id, display_prefs)

    async def set_password(self, user_id: str, current_pw: str, new_pw: str):
        await self.api.Users.set_password(user_id, current_pw, new_pw)

    async def reset_password(self, pin: str) -> PasswordResetResponse:
        """
        使用 PIN 重置密码，仅 Jellyfin 支持，Emby 返回空结果
        """
        return await self.api.Users.reset_password(pin)

    async def reset_password_admin(self, user_id: str):
        await self.api.Users.reset_password_admin(user_id)

    # ==================== Libraries ====================

    async def get_libraries(self) -> list[VirtualFolder]:
        """
        获取媒体库列表(带缓存)
        """
        await self.library_cache.sync(self.api.Library.get_virtual_folders)
        return list(self.library_cache.entries)

    async def add_library(self, name: str, collection_type: str, paths: list[str], refresh_library: bool = False,
                          options: Optional[LibraryOptions] = None):
        try:
            await self.api.Library.add_virtual_folder(name, collection_type, paths, refresh_library, options)
        finally:
            self.library_cache.invalidate()

    async def delete_library(self, name: str):
        try:
            await self.api.Library.delete_virtual_folder(name)
        finally:
            self.library_cache.invalidate()

    async def add_folder(self, refresh_library: bool, add_media: AddMedia):
        try:
            await self.api.Library.add_folder(refresh_library, add_media)
        finally:
            self.library_cache.invalidate()

    async def delete_folder(self, name: str, path: str, refresh_library: bool = False):
        try:
            await self.api.Library.delete_folder(name, path, refresh_library)
        finally:
            self.library_cache.invalidate()

    async def scan_libs(self):
        await self.api.Library.scan()

    async def close(self):
        await self.req.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()


async def new_server(server_type: ServerType, server: str, client: str, version: str, device: str, device_id: str,
                     timeout_handler: Optional[TimeoutHandler] = None, cache_timeout: float = 30,
                     **kwargs) -> MediaBrowser:
    """
    创建客户端并获取一次服务器信息
    :return: MediaBrowser
    """
    mb = MediaBrowser(server_type, server, client, version, device, device_id, timeout_handler, cache_timeout,
                      **kwargs)
    await mb.fetch_server_info()
    return mb


async def new_server_from_config(server_type: ServerType, **kwargs) -> MediaBrowser:
    """
    按 toml 配置创建客户端，配置了账户时顺带登录
    """
    section = JellyfinConfig if server_type == ServerType.JELLYFIN else EmbyConfig
    handler = new_named_timeout_handler(BACKENDS[server_type].name, section.BASE_URL, Config.NO_FAIL)
    mb = await new_server(server_type, section.BASE_URL, ClientConfig.CLIENT, ClientConfig.VERSION,
                          ClientConfig.DEVICE, ClientConfig.DEVICE_ID, handler, section.CACHE_TIMEOUT,
                          verbose=Config.VERBOSE, timeout=Config.TIMEOUT, proxy=Config.PROXY, **kwargs)
    if section.USERNAME:
        await mb.must_authenticate(section.USERNAME, section.PASSWORD, Config.MAX_RETRY, Config.RETRY_GAP,
                                   log_failures=True)
    return mb
