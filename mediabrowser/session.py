import asyncio
import json
from typing import Any, Dict, Optional

from mediabrowser.errors import UnauthorizedError, raise_for_status
from mediabrowser.logger import mb_logger
from mediabrowser.model import User
from mediabrowser.req import MediaBrowserRequest

LOGIN_PATH = "/Users/AuthenticateByName"


class Session:
    """
    登录状态与令牌管理，令牌失效(401)时自动重新登录一次
    """

    def __init__(self, req: MediaBrowserRequest, verbose: bool = False):
        self.req = req
        self.verbose = verbose
        self.username = ""
        self._password = ""
        self.login_params: Dict[str, str] = {}
        self.access_token = ""
        self.user_id = ""
        self.authenticated = False
        self._auth_lock = asyncio.Lock()

    async def authenticate(self, username: str, password: str) -> User:
        """
        使用账户密码登录，成功后替换令牌
        :param username: 用户名
        :param password: 密码
        :return: 登录的用户
        """
        async with self._auth_lock:
            return await self._authenticate(username, password)

    async def _authenticate(self, username: str, password: str) -> User:
        self.username = username
        self._password = password
        self.login_params = {
            'Username': username,
            'Pw': password,
            'Password': password,
        }
        data, status = await self.req.request("POST", LOGIN_PATH, json=self.login_params)
        # Jellyfin 对很多错误都返回 400
        if status == 400:
            raise UnauthorizedError()
        raise_for_status(status, data, self.verbose)
        json_response = json.loads(data)
        if not (token := json_response.get('AccessToken')):
            raise UnauthorizedError()
        user = User.from_dict(json_response.get('User'))
        self.access_token = token
        self.user_id = user.id
        self.req.set_token(token)
        self.authenticated = True
        mb_logger.info(f"Login {username} @ {self.req.server} {status}")
        return user

    async def ensure_authenticated(self):
        async with self._auth_lock:
            # 并发调用者等待第一次登录完成，不重复登录
            if not self.authenticated:
                await self._authenticate(self.username, self._password)

    async def authenticated_request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                                    json: Optional[Any] = None) -> tuple[str, int]:
        """
        发送请求，若登录状态下收到 401 则重新登录并重试一次
        :return: 响应内容, 状态码
        """
        token, was_authenticated = self.access_token, self.authenticated
        data, status = await self.req.request(method, path, params=params, json=json)
        if status != 401 or not was_authenticated:
            return data, status
        async with self._auth_lock:
            # 其他请求可能已经完成了重新登录
            if self.access_token == token:
                mb_logger.info(f"{method} {path} returned 401, re-authenticating as {self.username}")
                self.authenticated = False
                await self._authenticate(self.username, self._password)
        return await self.req.request(method, path, params=params, json=json)

    async def must_authenticate(self, username: str, password: str, retry_count: int, retry_gap: float,
                                log_failures: bool = False) -> User:
        """
        登录失败时重试
        :param retry_count: 最多尝试次数
        :param retry_gap: 每次重试间隔(秒)
        :param log_failures: 是否记录失败日志
        :return: 登录的用户，全部失败时抛出最后一次的异常
        """
        if retry_count < 1:
            raise ValueError("retry_count must be at least 1")
        for attempt in range(1, retry_count + 1):
            try:
                return await self.authenticate(username, password)
            except Exception as err:
                if attempt == retry_count:
                    raise
                if log_failures:
                    mb_logger.warning(f"Failed to authenticate on attempt {attempt} ({err}), "
                                      f"retrying in {retry_gap}s...")
                await asyncio.sleep(retry_gap)
