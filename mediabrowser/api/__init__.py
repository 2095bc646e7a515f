from mediabrowser.api.library import Library
from mediabrowser.api.system import System
from mediabrowser.api.user import Users
from mediabrowser.session import Session


class BackendAPI:
    """
    服务器接口集合，Jellyfin/Emby 子类替换 Users 中不同的部分
    """
    name = "MediaBrowser"
    users_class = Users

    def __init__(self, session: Session):
        super().__init__()
        self.session = session
        self.Users = self.users_class(session)
        self.Library = Library(session)
        self.System = System(session)
