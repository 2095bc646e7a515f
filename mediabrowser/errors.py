import json
from dataclasses import dataclass
from typing import Optional

OK_STATUS = (200, 201, 204)


@dataclass
class DetailedError:
    """Jellyfin 有时返回的错误详情，仅在 verbose 模式下填充"""
    type: str = ""
    title: str = ""
    detail: str = ""
    instance: str = ""

    @classmethod
    def from_body(cls, data: str) -> "DetailedError":
        try:
            body = json.loads(data)
        except ValueError:
            return cls(detail=data)
        if not isinstance(body, dict):
            return cls(detail=data)
        return cls(type=str(body.get("type") or ""),
                   title=str(body.get("title") or ""),
                   detail=str(body.get("detail") or ""),
                   instance=str(body.get("instance") or ""))

    def __str__(self):
        lines = []
        if self.type:
            lines.append(f"Type: {self.type}")
        if self.title:
            lines.append(f"Title: {self.title}")
        if self.detail:
            lines.append(f"Detail: {self.detail}")
        if self.instance:
            lines.append(f"Instance: {self.instance}")
        return "\n".join(lines)


class MediaBrowserError(Exception):
    """Base exception for Jellyfin/Emby errors."""
    message = "request failed"

    def __init__(self, details: Optional[DetailedError] = None):
        self.details = details
        super().__init__(self._render())

    def _render(self) -> str:
        if self.details:
            return f"{self.message}\n{self.details}"
        return self.message


class UnauthorizedError(MediaBrowserError):
    message = "Unauthorized, check credentials."


class ForbiddenError(MediaBrowserError):
    message = "Forbidden, the user may not have the correct permissions."


class NotFoundError(MediaBrowserError):
    message = "Resource not found."


class UserNotFoundError(NotFoundError):
    """找不到用户，携带用户名或 ID 之一"""

    def __init__(self, user: Optional[str] = None, user_id: Optional[str] = None,
                 details: Optional[DetailedError] = None):
        if user and user_id:
            raise ValueError("UserNotFoundError takes a username or an ID, not both")
        self.user = user
        self.user_id = user_id
        super().__init__(details)

    @property
    def message(self) -> str:
        if self.user:
            return f'User "{self.user}" not found.'
        if self.user_id:
            return f'User with ID "{self.user_id}" not found.'
        return "User not found."


class NoPolicySuppliedError(MediaBrowserError):
    message = "No (valid) policy was given."


class UnknownStatusError(MediaBrowserError):

    def __init__(self, code: int, details: Optional[DetailedError] = None):
        self.code = code
        super().__init__(details)

    @property
    def message(self) -> str:
        return f"failed (code {self.code})"


class ServerConnectionError(MediaBrowserError):
    """网络错误或超时"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__()

    @property
    def message(self) -> str:
        return f"Cannot connect to server: {self.reason}"


def details_for(data: str, verbose: bool) -> Optional[DetailedError]:
    if verbose and data:
        return DetailedError.from_body(data)
    return None


def classify(status: int, data: str = "", verbose: bool = False) -> Optional[MediaBrowserError]:
    """
    根据状态码生成对应的异常
    :param status: HTTP 状态码
    :param data: 响应内容
    :param verbose: 是否附带响应内容
    :return: 异常，成功时为 None
    """
    if status in OK_STATUS:
        return None
    if status in (400, 401):
        return UnauthorizedError(details_for(data, verbose))
    if status == 403:
        return ForbiddenError(details_for(data, verbose))
    if status == 404:
        # 多数 404 来自用户查询，由调用方升级为 UserNotFoundError
        return NotFoundError()
    return UnknownStatusError(status, details_for(data, verbose))


def raise_for_status(status: int, data: str = "", verbose: bool = False):
    if err := classify(status, data, verbose):
        raise err
