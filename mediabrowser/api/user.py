import json
from typing import Any, Optional

from mediabrowser.errors import NoPolicySuppliedError, UserNotFoundError, details_for, raise_for_status
from mediabrowser.model import (Configuration, PasswordResetResponse, Policy, User, denull_configuration,
                                denull_policy)
from mediabrowser.req import json_response, status_response
from mediabrowser.session import Session


def display_preferences_params(user_id: str) -> dict[str, str]:
    return {"userId": user_id, "client": "emby"}


class Users:
    """
    Jellyfin 与 Emby 通用的用户接口，不同部分由子类实现
    """

    def __init__(self, session: Session):
        self.session = session

    async def fetch_users(self, public: bool = False) -> list[User]:
        """
        获取所有用户
        :param public: 为 True 时使用无需登录的公开列表(不含隐藏用户)
        :return:
        """
        if public:
            data, status = await self.session.authenticated_request("GET", "/Users/Public")
        else:
            data, status = await self.session.authenticated_request("GET", "/Users")
        raise_for_status(status, data, self.session.verbose)
        return [User.from_dict(u) for u in json.loads(data)]

    async def fetch_user(self, user_id: str) -> User:
        """
        获取单个用户
        :param user_id: 用户ID
        :return:
        """
        data, status = await self.session.authenticated_request("GET", f"/Users/{user_id}")
        # 400 实际上是 ID 格式错误
        if status in (400, 404):
            raise UserNotFoundError(user_id=user_id, details=details_for(data, self.session.verbose))
        raise_for_status(status, data, self.session.verbose)
        return User.from_dict(json.loads(data))

    async def set_policy(self, user_id: str, policy: Policy):
        """
        设置用户权限
        :param user_id: 用户ID
        :param policy: 权限
        """
        data, status = await self.session.authenticated_request("POST", f"/Users/{user_id}/Policy",
                                                                json=denull_policy(policy).to_dict())
        if status == 400:
            raise NoPolicySuppliedError(details_for(data, self.session.verbose))
        raise_for_status(status, data, self.session.verbose)

    @status_response
    async def set_configuration(self, user_id: str, configuration: Configuration):
        return await self.session.authenticated_request("POST", f"/Users/{user_id}/Configuration",
                                                        json=denull_configuration(configuration).to_dict())

    @json_response
    async def get_display_preferences(self, user_id: str):
        """
        获取用户显示设置
        :param user_id: 用户ID
        :return:
        """
        return await self.session.authenticated_request("GET", "/DisplayPreferences/usersettings",
                                                        params=display_preferences_params(user_id))

    @status_response
    async def set_display_preferences(self, user_id: str, display_prefs: dict[str, Any]):
        return await self.session.authenticated_request("POST", "/DisplayPreferences/usersettings",
                                                        params=display_preferences_params(user_id),
                                                        json=display_prefs)

    @status_response
    async def set_password(self, user_id: str, current_pw: str, new_pw: str):
        """
        修改密码，需要管理员或该用户本人登录
        :param user_id: 用户ID
        :param current_pw: 旧密码
        :param new_pw: 新密码
        """
        return await self.session.authenticated_request("POST", f"/Users/{user_id}/Password", json={
            "CurrentPassword": current_pw,
            "CurrentPw": current_pw,
            "NewPw": new_pw,
            "ResetPassword": False,
        })

    @status_response
    async def reset_password_admin(self, user_id: str):
        """
        重置密码，之后无需旧密码即可设置新密码
        :param user_id: 用户ID
        """
        return await self.session.authenticated_request("POST", f"/Users/{user_id}/Password",
                                                        json={"ResetPassword": True})

    async def new_user(self, name: str, password: str) -> User:
        raise NotImplementedError

    async def delete_user(self, user_id: str):
        raise NotImplementedError

    async def reset_password(self, pin: str) -> Optional[PasswordResetResponse]:
        raise NotImplementedError
