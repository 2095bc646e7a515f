from mediabrowser.api import BackendAPI
from mediabrowser.jellyfin.api.user import JellyfinUsers


class JellyfinAPI(BackendAPI):
    name = "Jellyfin"
    users_class = JellyfinUsers
