"""Tests for API model conversion."""

import json
from datetime import datetime

from conftest import ALICE_ID, make_user

from mediabrowser.model import (
    AddMedia,
    Configuration,
    LibraryOptions,
    PathInfo,
    Policy,
    ServerInfo,
    TypeOptions,
    User,
    VirtualFolder,
    denull_configuration,
    denull_library_options,
    denull_policy,
    denull_virtual_folder,
)


def test_user_from_dict():
    user = User.from_dict(make_user(ALICE_ID, "Alice", UnknownField=1))
    assert user.id == ALICE_ID
    assert user.name == "Alice"
    assert user.has_password is True
    assert user.last_login_date == datetime(2021, 1, 27, 3, 16, 36)
    assert user.last_activity_date == datetime(2021, 1, 9, 20, 58, 41)
    assert user.policy.enabled_folders == []
    assert user.policy.is_administrator is False
    assert user.configuration.subtitle_mode == "Default"


def test_user_missing_fields_use_defaults():
    user = User.from_dict({"Id": "1", "LastLoginDate": None})
    assert user.name == ""
    assert user.last_login_date is None
    assert isinstance(user.policy, Policy)


def test_server_info_keys():
    info = ServerInfo.from_dict({"ServerName": "media", "OperatingSystem": "Linux", "LocalAddress": "x"})
    assert info.name == "media"
    assert info.os == "Linux"
    assert info.to_dict()["ServerName"] == "media"


def test_denull_policy_emits_empty_arrays():
    payload = denull_policy(Policy(is_hidden=True)).to_dict()
    assert payload["IsHidden"] is True
    assert payload["BlockedTags"] == []
    assert payload["EnabledFolders"] == []
    assert payload["ExcludedSubFolders"] == []
    assert None not in payload.values()
    assert "MaxParentalRating" not in payload


def test_denull_policy_keeps_values():
    policy = denull_policy(Policy(enabled_folders=["a"], max_parental_rating=12))
    assert policy.enabled_folders == ["a"]
    assert policy.to_dict()["MaxParentalRating"] == 12


def test_denull_configuration():
    payload = denull_configuration(Configuration()).to_dict()
    for key in ("GroupedFolders", "OrderedViews", "LatestItemsExcludes", "MyMediaExcludes"):
        assert payload[key] == []


def test_denull_library_options_nested():
    options = denull_library_options(LibraryOptions(type_options=[TypeOptions(type="Movie")]))
    assert options.path_infos == []
    assert options.type_options[0].image_options == []
    assert "null" not in json.dumps(options.to_dict())


def test_virtual_folder_round_trip():
    folder = VirtualFolder.from_dict({
        "Name": "Movies",
        "Locations": ["/media/movies"],
        "CollectionType": "movies",
        "LibraryOptions": {"PathInfos": [{"Path": "/media/movies"}]},
        "ItemId": "f1",
    })
    assert folder.library_options.path_infos == [PathInfo(path="/media/movies")]
    assert denull_virtual_folder(VirtualFolder()).locations == []


def test_add_media_to_dict():
    media = AddMedia(name="Movies", path="/media/more", path_info=PathInfo(path="/media/more"))
    assert media.to_dict() == {
        "Name": "Movies",
        "Path": "/media/more",
        "PathInfo": {"Path": "/media/more", "NetworkPath": ""},
    }
