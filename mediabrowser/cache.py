import asyncio
import time
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from mediabrowser.logger import mb_logger
from mediabrowser.model import User

T = TypeVar("T")


class SnapshotCache(Generic[T]):
    """
    带过期时间的列表缓存，同一时间只允许一个刷新请求，
    刷新期间到达的调用者等待同一个结果(成功或异常)
    """

    def __init__(self, ttl_minutes: float):
        self.ttl = ttl_minutes * 60
        self.entries: list[T] = []
        self.expiry = time.monotonic()
        self._lock = asyncio.Lock()
        self._pending: Optional[asyncio.Future] = None

    def expired(self) -> bool:
        return time.monotonic() >= self.expiry

    def invalidate(self):
        self.expiry = time.monotonic()

    @property
    def syncing(self) -> bool:
        return self._pending is not None

    async def sync(self, fetch: Callable[[], Awaitable[list[T]]], force: bool = False) -> bool:
        """
        缓存过期(或 force)时刷新
        :param fetch: 从服务器获取完整列表
        :param force: 忽略过期时间
        :return: 本次调用是否经历了一次刷新
        """
        async with self._lock:
            if not force and not self.expired() and self._pending is None:
                return False
            pending = self._pending
            owner = pending is None
            if owner:
                pending = asyncio.get_running_loop().create_future()
                self._pending = pending
        if owner:
            await self._populate(pending, fetch)
        # 刷新失败时所有等待者收到同一个异常
        await asyncio.shield(pending)
        return True

    async def _populate(self, pending: asyncio.Future, fetch: Callable[[], Awaitable[list[T]]]):
        # 网络请求在锁外执行
        try:
            entries = await fetch()
        except Exception as err:
            mb_logger.debug(f"Cache refresh failed: {err}")
            async with self._lock:
                self._pending = None
            pending.set_exception(err)
            return
        except BaseException:
            # 取消或进程退出，等待者收到 CancelledError
            self._pending = None
            pending.cancel()
            raise
        async with self._lock:
            self._publish(entries)
            self.expiry = time.monotonic() + self.ttl
            self._pending = None
        pending.set_result(None)

    def _publish(self, entries: list[T]):
        self.entries = entries


class UserCache(SnapshotCache[User]):
    """
    用户列表缓存，按 ID 和小写用户名建立索引
    """

    def __init__(self, ttl_minutes: float):
        super().__init__(ttl_minutes)
        self.by_id: dict[str, int] = {}
        self.by_name: dict[str, int] = {}
        self.hyphens = False
        # 当前快照来自公开列表还是完整列表
        self.public: Optional[bool] = None

    def _publish(self, entries: list[User]):
        by_id, by_name = {}, {}
        for i, user in enumerate(entries):
            by_id[user.id] = i
            # Jellyfin 认为只有大小写不同的用户名是同一个
            by_name[user.name.lower()] = i
        self.entries, self.by_id, self.by_name = entries, by_id, by_name
        if entries:
            first_id = entries[0].id
            self.hyphens = len(first_id) > 8 and first_id[8] == '-'

    def lookup_id(self, user_id: str) -> Optional[User]:
        if (i := self.by_id.get(user_id)) is not None:
            return self.entries[i]
        return None

    def lookup_name(self, username: str) -> Optional[User]:
        if (i := self.by_name.get(username.lower())) is not None:
            return self.entries[i]
        return None
