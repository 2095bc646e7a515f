import json
from functools import wraps
from typing import Any, Callable, Dict, Optional

import httpx

from mediabrowser.errors import ServerConnectionError, raise_for_status
from mediabrowser.logger import mb_logger

TimeoutHandler = Callable[[BaseException], None]


def new_named_timeout_handler(name: str, addr: str, no_fail: bool) -> TimeoutHandler:
    """
    生成记录日志的超时处理函数
    :param name: 服务器名称(Jellyfin/Emby)
    :param addr: 服务器地址
    :param no_fail: 为 False 时超时直接退出进程
    :return:
    """
    def handler(err: BaseException):
        out = f"Failed to authenticate with {name} @ {addr}: {err}"
        if no_fail:
            mb_logger.error(out)
        else:
            mb_logger.critical(out)
            raise SystemExit(1)

    return handler


def json_response(func):
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        data, status = await func(self, *args, **kwargs)
        raise_for_status(status, data, self.session.verbose)
        if not data:
            return None
        return json.loads(data)

    return wrapper


def status_response(func):
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        data, status = await func(self, *args, **kwargs)
        raise_for_status(status, data, self.session.verbose)

    return wrapper


class MediaBrowserRequest:

    def __init__(self, server: str, client: str, version: str, device: str, device_id: str,
                 timeout_handler: Optional[TimeoutHandler] = None, timeout: float = 10,
                 transport: Optional[httpx.AsyncBaseTransport] = None, proxy: Optional[str] = None):
        self.server = server.rstrip("/")
        self.client_name = client
        self.version = version
        self.device = device
        self.device_id = device_id
        self.timeout_handler = timeout_handler or new_named_timeout_handler("server", self.server, True)
        self.useragent = f"{client}/{version}"
        self.client = httpx.AsyncClient(base_url=self.server, timeout=timeout, transport=transport, proxy=proxy)
        self.client.headers = {
            'Accept': 'application/json',
            'Content-Type': 'application/json; charset=UTF-8',
            'X-Application': self.useragent,
            'Accept-Charset': 'UTF-8,*',
            'Accept-Encoding': 'gzip',
            'User-Agent': self.useragent,
        }
        self.set_token(None)

    @property
    def auth(self) -> str:
        return self.client.headers['X-Emby-Authorization']

    def set_token(self, token: Optional[str]):
        auth = (f'MediaBrowser Client="{self.client_name}", Device="{self.device}", '
                f'DeviceId="{self.device_id}", Version="{self.version}"')
        if token:
            auth = auth + f', Token="{token}"'
        self.client.headers['X-Emby-Authorization'] = auth
        self.client.headers['Authorization'] = auth

    async def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                      json: Optional[Any] = None) -> tuple[str, int]:
        """
        发送请求，gzip 内容由 httpx 自动解压
        :return: 响应内容, 状态码
        """
        try:
            response = await self.client.request(method, path, params=params, json=json)
        except httpx.RequestError as err:
            self.timeout_handler(err)
            raise ServerConnectionError(str(err) or type(err).__name__) from err
        mb_logger.debug(f"{method} {path} {response.status_code}")
        return response.text, response.status_code

    async def close(self):
        await self.client.aclose()
