from datetime import datetime

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def parse_time(value: str | bytes) -> datetime:
    """
    解析 Jellyfin/Emby 的时间字符串，丢弃小数秒和时区后缀，按 UTC 原样返回 naive datetime
    例: "2021-01-27T03:16:36.28538Z" / "2021-01-09T20:58:41.5907920+00:00"
    :param value: 时间字符串(可带引号)
    :return: datetime
    """
    if isinstance(value, bytes):
        value = value.decode()
    value = value.lstrip('"').rstrip('"Z')
    if (dot := value.rfind('.')) > 0:
        value = value[:dot]
    # 没有小数秒但带有时区偏移，如 2021-01-09T20:58:41+00:00
    if len(value) > 19 and value[19] in "+-":
        value = value[:19]
    return datetime.strptime(value, TIME_FORMAT)


def format_time(value: datetime) -> str:
    return value.replace(tzinfo=None).isoformat(timespec="seconds") + ".0000000Z"
