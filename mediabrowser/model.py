import json
import typing
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, Optional

from mediabrowser.times import format_time, parse_time


def _key(name: str) -> str:
    """snake_case -> API 使用的 PascalCase"""
    return "".join(part.capitalize() for part in name.split("_"))


def api_key(name: str):
    """字段对应的 JSON key 与默认规则不一致时使用"""
    return {"key": name}


@lru_cache(maxsize=None)
def _hints(cls) -> dict[str, Any]:
    return typing.get_type_hints(cls)


def _decode(tp, value):
    if value is None:
        return None
    origin = typing.get_origin(tp)
    if origin is typing.Union:
        tp = next(arg for arg in typing.get_args(tp) if arg is not type(None))
        origin = typing.get_origin(tp)
    if origin is list:
        (item_tp,) = typing.get_args(tp) or (Any,)
        return [_decode(item_tp, v) for v in value]
    if is_dataclass(tp):
        return tp.from_dict(value)
    if tp is datetime:
        return parse_time(value) if value else None
    return value


def _encode(value):
    if is_dataclass(value):
        return value.to_dict()
    if isinstance(value, list):
        return [_encode(v) for v in value]
    if isinstance(value, datetime):
        return format_time(value)
    return value


@dataclass
class BaseModel:

    @classmethod
    def from_dict(cls, data: Optional[dict]):
        """未知字段忽略，缺失字段使用默认值"""
        data = data or {}
        hints = _hints(cls)
        kwargs = {}
        for f in fields(cls):
            key = f.metadata.get("key", _key(f.name))
            if key in data and data[key] is not None:
                kwargs[f.name] = _decode(hints[f.name], data[key])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.metadata.get("omit_none"):
                continue
            out[f.metadata.get("key", _key(f.name))] = _encode(value)
        return out

    def to_json(self):
        return json.dumps(self.to_dict(), sort_keys=True, indent=4)


@dataclass
class ServerInfo(BaseModel):
    local_address: str = ""
    name: str = field(default="", metadata=api_key("ServerName"))
    version: str = ""
    os: str = field(default="", metadata=api_key("OperatingSystem"))
    id: str = ""


@dataclass
class Configuration(BaseModel):
    """用户配置(首页布局的一部分)"""
    audio_language_preference: str = ""
    play_default_audio_track: bool = False
    subtitle_language_preference: str = ""
    display_missing_episodes: bool = False
    grouped_folders: Optional[list[Any]] = None
    subtitle_mode: str = ""
    display_collections_view: bool = False
    enable_local_password: bool = False
    ordered_views: Optional[list[Any]] = None
    latest_items_excludes: Optional[list[Any]] = None
    my_media_excludes: Optional[list[Any]] = None
    hide_played_in_latest: bool = False
    remember_audio_selections: bool = False
    remember_subtitle_selections: bool = False
    enable_next_episode_auto_play: bool = False
    cast_receiver_id: str = ""


@dataclass
class Policy(BaseModel):
    """用户权限"""
    is_administrator: bool = False
    is_hidden: bool = False
    is_disabled: bool = False
    blocked_tags: Optional[list[Any]] = None
    allowed_tags: Optional[list[Any]] = None
    enable_user_preference_access: bool = False
    access_schedules: Optional[list[Any]] = None
    block_unrated_items: Optional[list[Any]] = None
    enable_remote_control_of_other_users: bool = False
    enable_shared_device_control: bool = False
    enable_remote_access: bool = False
    enable_live_tv_management: bool = False
    enable_live_tv_access: bool = False
    enable_media_playback: bool = False
    enable_audio_playback_transcoding: bool = False
    enable_video_playback_transcoding: bool = False
    enable_playback_remuxing: bool = False
    enable_content_deletion: bool = False
    enable_content_deletion_from_folders: Optional[list[Any]] = None
    enable_content_downloading: bool = False
    enable_sync_transcoding: bool = False
    enable_media_conversion: bool = False
    enabled_devices: Optional[list[Any]] = None
    enable_all_devices: bool = False
    enabled_channels: Optional[list[Any]] = None
    enable_all_channels: bool = False
    enabled_folders: Optional[list[str]] = None
    enable_all_folders: bool = False
    invalid_login_attempt_count: int = 0
    enable_public_sharing: bool = False
    remote_client_bitrate_limit: int = 0
    authentication_provider_id: str = ""
    enable_collection_management: bool = False
    enable_subtitle_management: bool = False
    enable_lyric_management: bool = False
    # Jellyfin only
    force_remote_source_transcoding: bool = False
    login_attempts_before_lockout: int = 0
    max_active_sessions: int = 0
    max_parental_rating: Optional[int] = field(default=None, metadata={"omit_none": True})
    blocked_media_folders: Optional[list[Any]] = None
    blocked_channels: Optional[list[Any]] = None
    password_reset_provider_id: str = ""
    sync_play_access: str = ""
    # Emby only
    is_hidden_remotely: bool = False
    is_hidden_from_unused_devices: bool = False
    is_tag_blocking_mode_inclusive: bool = False
    enable_subtitle_downloading: bool = False
    excluded_sub_folders: Optional[list[Any]] = None
    simultaneous_stream_limit: int = 0


@dataclass
class User(BaseModel):
    name: str = ""
    server_id: str = ""
    id: str = ""
    has_password: bool = False
    has_configured_password: bool = False
    has_configured_easy_password: bool = False
    enable_auto_login: bool = False
    last_login_date: Optional[datetime] = None
    last_activity_date: Optional[datetime] = None
    configuration: Configuration = field(default_factory=Configuration)
    policy: Policy = field(default_factory=Policy)


@dataclass
class SessionInfo(BaseModel):
    remote_endpoint: str = field(default="", metadata=api_key("RemoteEndPoint"))
    user_id: str = ""


@dataclass
class AuthenticationResult(BaseModel):
    user: User = field(default_factory=User)
    access_token: str = ""
    server_id: str = ""
    session_info: SessionInfo = field(default_factory=SessionInfo)


@dataclass
class PasswordResetResponse(BaseModel):
    success: bool = False
    users_reset: list[str] = field(default_factory=list)


@dataclass
class PathInfo(BaseModel):
    path: str = ""
    network_path: str = ""


@dataclass
class ImageOptions(BaseModel):
    type: str = ""
    limit: int = 0
    min_width: int = 0


@dataclass
class TypeOptions(BaseModel):
    type: str = ""
    metadata_fetchers: Optional[list[str]] = None
    metadata_fetcher_order: Optional[list[str]] = None
    image_fetchers: Optional[list[str]] = None
    image_fetcher_order: Optional[list[str]] = None
    image_options: Optional[list[ImageOptions]] = None


@dataclass
class LibraryOptions(BaseModel):
    enable_photos: bool = False
    enable_realtime_monitor: bool = False
    enable_chapter_image_extraction: bool = False
    extract_chapter_images_during_library_scan: bool = False
    path_infos: Optional[list[PathInfo]] = None
    save_local_metadata: bool = False
    enable_internet_providers: bool = False
    enable_automatic_series_grouping: bool = False
    enable_embedded_titles: bool = False
    enable_embedded_episode_infos: bool = False
    automatic_refresh_interval_days: int = 0
    preferred_metadata_language: str = ""
    metadata_country_code: str = ""
    season_zero_display_name: str = ""
    metadata_savers: Optional[list[str]] = None
    disabled_local_metadata_readers: Optional[list[str]] = None
    local_metadata_reader_order: Optional[list[str]] = None
    disabled_subtitle_fetchers: Optional[list[str]] = None
    subtitle_fetcher_order: Optional[list[str]] = None
    skip_subtitles_if_embedded_subtitles_present: bool = False
    skip_subtitles_if_audio_track_matches: bool = False
    subtitle_download_languages: Optional[list[str]] = None
    require_perfect_subtitle_match: bool = False
    save_subtitles_with_media: bool = False
    type_options: Optional[list[TypeOptions]] = None
    collapse_single_item_folders: bool = False
    min_resume_pct: int = 0
    max_resume_pct: int = 0
    min_resume_duration_seconds: int = 0
    thumbnail_images_interval_seconds: int = 0


@dataclass
class VirtualFolder(BaseModel):
    """媒体库"""
    name: str = ""
    locations: Optional[list[str]] = None
    collection_type: str = ""
    library_options: LibraryOptions = field(default_factory=LibraryOptions)
    item_id: str = ""
    primary_image_item_id: str = ""
    refresh_progress: float = 0.0
    refresh_status: str = ""


@dataclass
class SubFolder(BaseModel):
    name: str = ""
    id: str = ""
    path: str = ""


@dataclass
class AddMedia(BaseModel):
    name: str = ""
    path: str = ""
    path_info: PathInfo = field(default_factory=PathInfo)


def _denull_lists(obj: BaseModel):
    """将所有值为 None 的列表字段替换为空列表，Jellyfin 不接受 null"""
    hints = _hints(type(obj))
    for f in fields(obj):
        tp = hints[f.name]
        if typing.get_origin(tp) is typing.Union:
            args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
            tp = args[0] if len(args) == 1 else tp
        if typing.get_origin(tp) is list and getattr(obj, f.name) is None:
            setattr(obj, f.name, [])


def denull_policy(policy: Policy) -> Policy:
    _denull_lists(policy)
    return policy


def denull_configuration(configuration: Configuration) -> Configuration:
    _denull_lists(configuration)
    return configuration


def denull_library_options(options: LibraryOptions) -> LibraryOptions:
    _denull_lists(options)
    for type_options in options.type_options:
        _denull_lists(type_options)
    return options


def denull_virtual_folder(folder: VirtualFolder) -> VirtualFolder:
    _denull_lists(folder)
    denull_library_options(folder.library_options)
    return folder
