import json

from mediabrowser.api.user import Users
from mediabrowser.errors import UserNotFoundError, details_for, raise_for_status
from mediabrowser.logger import je_logger
from mediabrowser.model import PasswordResetResponse, User


class JellyfinUsers(Users):

    async def new_user(self, name: str, password: str) -> User:
        """
        创建新用户
        :param name: 用户名
        :param password: 密码
        :return:
        """
        data, status = await self.session.authenticated_request("POST", "/Users/New", json={
            "Name": name,
            "Password": password
        })
        raise_for_status(status, data, self.session.verbose)
        user = User.from_dict(json.loads(data)) if data else User(name=name)
        je_logger.info(f"Created user {name} ({user.id})")
        return user

    async def delete_user(self, user_id: str):
        """
        删除用户
        :param user_id: 用户ID
        """
        data, status = await self.session.authenticated_request("DELETE", f"/Users/{user_id}")
        # 应为 404，但 Jellyfin 有时返回 500
        if status in (404, 500):
            raise UserNotFoundError(user_id=user_id, details=details_for(data, self.session.verbose))
        raise_for_status(status, data, self.session.verbose)
        je_logger.info(f"Deleted user {user_id}")

    async def reset_password(self, pin: str) -> PasswordResetResponse:
        """
        使用登录页"忘记密码"生成的 PIN 重置密码，密码会被设置为该 PIN
        :param pin: PIN
        :return:
        """
        data, status = await self.session.authenticated_request("POST", "/Users/ForgotPassword/Pin",
                                                                json={"Pin": pin})
        raise_for_status(status, data, self.session.verbose)
        if not data:
            return PasswordResetResponse()
        return PasswordResetResponse.from_dict(json.loads(data))
