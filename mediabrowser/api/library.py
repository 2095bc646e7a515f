import json
from typing import Optional

from mediabrowser.errors import raise_for_status
from mediabrowser.model import AddMedia, LibraryOptions, VirtualFolder, denull_library_options
from mediabrowser.req import status_response
from mediabrowser.session import Session


def _flag(value: bool) -> str:
    return "true" if value else "false"


class Library:
    """
    媒体库(VirtualFolder)接口
    """

    def __init__(self, session: Session):
        self.session = session

    async def get_virtual_folders(self) -> list[VirtualFolder]:
        data, status = await self.session.authenticated_request("GET", "/Library/VirtualFolders")
        raise_for_status(status, data, self.session.verbose)
        return [VirtualFolder.from_dict(f) for f in json.loads(data)]

    @status_response
    async def add_virtual_folder(self, name: str, collection_type: str, paths: list[str],
                                 refresh_library: bool = False, options: Optional[LibraryOptions] = None):
        """
        创建媒体库
        :param name: 媒体库名称
        :param collection_type: 类型(movies, tvshows...)
        :param paths: 媒体路径
        :param refresh_library: 创建后是否扫描
        :param options: 媒体库选项
        """
        params = [("client", "emby"), ("name", name), ("collectionType", collection_type),
                  ("refreshLibrary", _flag(refresh_library))]
        params += [("paths[]", path) for path in paths]
        options = denull_library_options(options or LibraryOptions())
        return await self.session.authenticated_request("POST", "/Library/VirtualFolders", params=params,
                                                        json=options.to_dict())

    @status_response
    async def delete_virtual_folder(self, name: str):
        return await self.session.authenticated_request("DELETE", "/Library/VirtualFolders",
                                                        params={"name": name})

    @status_response
    async def add_folder(self, refresh_library: bool, add_media: AddMedia):
        """
        向媒体库添加文件夹
        :param refresh_library: 添加后是否扫描
        :param add_media: 媒体库名称与路径
        """
        return await self.session.authenticated_request("POST", "/Library/VirtualFolders/Paths",
                                                        params={"client": "emby",
                                                                "refreshLibrary": _flag(refresh_library)},
                                                        json=add_media.to_dict())

    @status_response
    async def delete_folder(self, name: str, path: str, refresh_library: bool = False):
        return await self.session.authenticated_request("DELETE", "/Library/VirtualFolders/Paths",
                                                        params={"name": name, "path": path,
                                                                "refreshLibrary": _flag(refresh_library)})

    @status_response
    async def scan(self):
        """
        扫描全部媒体库
        """
        return await self.session.authenticated_request("POST", "/Library/Refresh", params={"client": "emby"})
