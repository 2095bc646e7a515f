import logging
import os
from pathlib import Path
from typing import Optional

import toml

ROOT_PATH: Path = Path.cwd()


class BaseConfig:
    """
    配置管理的基类。
    """
    toml_file_path = os.path.join(ROOT_PATH, 'config.toml')
    section = None

    @classmethod
    def update_from_toml(cls, section: str = None, path: Optional[str | Path] = None):
        try:
            cls.section = section
            config = toml.load(path or cls.toml_file_path)
            items = config.get(section, {}) if section else config
            for key, value in items.items():
                if hasattr(cls, key.upper()):
                    setattr(cls, key.upper(), value)
        except Exception as err:
            logging.error(f'Error occurred while loading config file: {err}')


class Config(BaseConfig):
    """
    全局配置
    """
    LOGGING: bool = False  # 是否开启日志输出本地
    LOG_LEVEL: int = 20  # 日志等级
    LOG_FILE: str = 'mediabrowser.log'  # 日志文件
    VERBOSE: bool = False  # 错误信息中附带服务器返回内容
    NO_FAIL: bool = True  # 超时/网络错误时不退出进程
    TIMEOUT: int = 10  # 请求超时时间(秒)
    PROXY: str = None  # 代理
    MAX_RETRY: int = 3  # 登录重试次数
    RETRY_GAP: int = 5  # 登录重试间隔(秒)


class ClientConfig(BaseConfig):
    """
    客户端标识
    """
    CLIENT: str = 'mediabrowser-py'
    VERSION: str = '0.1.0'
    DEVICE: str = 'mediabrowser-py'
    DEVICE_ID: str = 'mediabrowser-py'


class JellyfinConfig(BaseConfig):
    """
    Jellyfin配置
    """
    BASE_URL: str = ""  # Jellyfin URL
    USERNAME: str = ""  # 管理员账户
    PASSWORD: str = ""  # 管理员密码
    CACHE_TIMEOUT: int = 30  # 用户缓存时长(分钟)


class EmbyConfig(BaseConfig):
    """
    Emby配置
    """
    BASE_URL: str = ""  # Emby URL
    USERNAME: str = ""
    PASSWORD: str = ""
    CACHE_TIMEOUT: int = 30


def load_config(path: Optional[str | Path] = None):
    """
    从 toml 文件读取全部配置
    :param path: 配置文件路径，默认为当前目录下的 config.toml
    """
    if path:
        BaseConfig.toml_file_path = str(path)
    Config.update_from_toml()
    ClientConfig.update_from_toml('Client')
    JellyfinConfig.update_from_toml('Jellyfin')
    EmbyConfig.update_from_toml('Emby')
