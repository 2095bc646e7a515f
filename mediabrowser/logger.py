import logging
import sys
from logging.handlers import RotatingFileHandler

from mediabrowser.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

mb_logger = logging.getLogger('mediabrowser')
je_logger = logging.getLogger('mediabrowser.jellyfin')
emby_logger = logging.getLogger('mediabrowser.emby')


def setup_logging():
    """
    按 Config 初始化日志，库本身在导入时不会修改日志配置
    """
    logging.basicConfig(level=Config.LOG_LEVEL, stream=sys.stdout, format=LOG_FORMAT)
    if Config.LOGGING:
        handler = RotatingFileHandler(Config.LOG_FILE, maxBytes=10*1024*1024, backupCount=5)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)
