from mediabrowser.model import ServerInfo
from mediabrowser.req import json_response
from mediabrowser.session import Session


class System:
    def __init__(self, session: Session):
        self.session = session

    @json_response
    async def _info(self):
        return await self.session.req.request("GET", "/System/Info/Public")

    async def info(self) -> ServerInfo:
        """
        获取系统信息(无需登录)
        :return:
        """
        return ServerInfo.from_dict(await self._info())
