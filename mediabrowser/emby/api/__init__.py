from mediabrowser.api import BackendAPI
from mediabrowser.emby.api.user import EmbyUsers


class EmbyAPI(BackendAPI):
    name = "Emby"
    users_class = EmbyUsers
