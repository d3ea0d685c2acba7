"""日志配置：统一格式输出；应用日志级别由 Settings.log_level（LOG_LEVEL）控制。"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _level, logging.INFO),
    format=LOG_FORMAT,
)
log = logging.getLogger("publicconnect")


def configure_logging(level: str) -> None:
    """启动时按配置调整应用日志级别；密码与 Token 一律不写入日志。"""
    log.setLevel(getattr(logging, level.upper(), logging.INFO))
