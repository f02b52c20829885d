"""
GSA 客户端 - 内部日志系统
提供统一配置的标准库 logger，以及一个可选的原始响应滚动日志。
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# 原始响应日志相关的全局变量
response_logger: Optional[logging.Logger] = None
response_logging_enabled = False

# 单条记录中保留的响应体最大字符数
MAX_LOGGED_BODY_CHARS = 4000


def setup_response_logger(config: dict = None):
    """根据配置设置原始响应专用 logger"""
    global response_logger, response_logging_enabled

    log_config = (config or {}).get("log", {})
    response_logging_enabled = log_config.get("response_log_enabled", False)
    max_size_mb = log_config.get("response_log_max_size_mb", 1)

    response_logger = logging.getLogger("gsa_client.responses")
    response_logger.setLevel(logging.INFO)
    # 防止日志向上传播到root logger，避免重复输出
    response_logger.propagate = False

    # 清除现有的处理器
    for handler in response_logger.handlers:
        handler.close()
    response_logger.handlers.clear()

    # 如果日志记录已禁用，直接返回
    if not response_logging_enabled:
        response_logger = None
        return

    log_dir = Path(log_config.get("response_log_dir") or "logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "gsa_responses.log"

    # maxBytes根据配置设置, backupCount固定为1
    handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=1,
        encoding='utf-8'
    )
    handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    response_logger.addHandler(handler)


def log_search_interaction(url: str, body: bytes):
    """记录一次完整的搜索请求与原始响应。"""
    if not response_logging_enabled or response_logger is None:
        return

    text = body.decode("utf-8", errors="replace")
    if len(text) > MAX_LOGGED_BODY_CHARS:
        text = text[:MAX_LOGGED_BODY_CHARS] + "..."

    log_message = (
        f"--- GSA Request ---\n"
        f"{url}\n"
        f"--- GSA Response ---\n"
        f"{text}\n"
        f"---------------------\n"
    )
    response_logger.info(log_message)


def get_logger(name: str) -> logging.Logger:
    """
    获取一个日志记录器实例。

    首次获取时为其挂载一个格式统一的 StreamHandler，之后重复获取不会再添加。

    Args:
        name (str): Logger 的名称，通常传入 __name__。

    Returns:
        logging.Logger: 配置好的 logger 实例。
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        # 避免重复添加 handler
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    return logger
