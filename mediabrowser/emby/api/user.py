import json

from mediabrowser.api.user import Users
from mediabrowser.errors import MediaBrowserError, UserNotFoundError, raise_for_status
from mediabrowser.logger import emby_logger
from mediabrowser.model import PasswordResetResponse, User


class EmbyUsers(Users):

    async def new_user(self, name: str, password: str) -> User:
        """
        Emby 创建用户时无法指定密码:
        先创建账户，再设置密码，设置失败时删除刚创建的账户，避免留下无密码账户
        :param name: 用户名
        :param password: 密码
        :return:
        """
        data, status = await self.session.authenticated_request("POST", "/Users/New", json={"Name": name})
        raise_for_status(status, data, self.session.verbose)
        user = User.from_dict(json.loads(data))
        try:
            data, status = await self.session.authenticated_request("POST", f"/Users/{user.id}/Password", json={
                "Id": user.id,
                "CurrentPw": "",
                "NewPw": password,
            })
            raise_for_status(status, data, self.session.verbose)
        except MediaBrowserError as err:
            emby_logger.warning(f"Setting password for new user {name} failed ({err}), deleting {user.id}")
            try:
                await self.delete_user(user.id)
            except MediaBrowserError as delete_err:
                emby_logger.error(f"Failed to delete user {user.id} without password: {delete_err}")
            raise
        emby_logger.info(f"Created user {name} ({user.id})")
        return user

    async def delete_user(self, user_id: str):
        """
        删除用户
        :param user_id: 用户ID
        """
        data, status = await self.session.authenticated_request("DELETE", f"/Users/{user_id}")
        if status == 404:
            raise UserNotFoundError(user_id=user_id)
        raise_for_status(status, data, self.session.verbose)
        emby_logger.info(f"Deleted user {user_id}")

    async def reset_password(self, pin: str) -> PasswordResetResponse:
        """
        Emby 不支持 PIN 重置密码，直接返回空结果
        """
        return PasswordResetResponse()
