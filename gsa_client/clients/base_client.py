"""
传输委托
GSAClient 通过委托对象获取响应体，调用方可以替换为自定义的抓取或认证逻辑。
"""
import httpx
from typing import Dict, Optional
from abc import ABC, abstractmethod

from ..core.log import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "gsa-client/1.0 (+https://pypi.org/project/gsa-client/)"
DEFAULT_TIMEOUT_SECONDS = 10


class ClientDelegate(ABC):
    """
    传输委托接口，子类必须实现 get_response_stream
    """

    @abstractmethod
    async def get_response_stream(self, url: str) -> bytes:
        """
        请求完整的 URL 并返回响应体

        :param url: 已拼接好的完整请求 URL
        :return: 响应体原始字节
        """
        pass


class HttpxDelegate(ClientDelegate):
    """
    基于 httpx 的默认委托，封装通用的 HTTP 请求和错误日志
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        :param config: 客户端配置字典，读取 timeout_seconds 与 user_agent
        """
        self.config = config or {}

        self.HEADERS = {
            "User-Agent": self.config.get("user_agent", DEFAULT_USER_AGENT)
        }

        timeout_seconds = self.config.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        self.timeout = httpx.Timeout(timeout_seconds)

    async def get_response_stream(self, url: str) -> bytes:
        """
        统一的HTTP请求处理方法；传输错误记录日志后原样抛出

        :param url: 请求 URL
        :return: 响应体原始字节
        """
        try:
            async with httpx.AsyncClient(headers=self.HEADERS, timeout=self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            logger.error(f"GSA[HttpxDelegate]: 请求失败: {e}")
            raise
        except httpx.TimeoutException as e:
            logger.error(f"GSA[HttpxDelegate]: 请求超时: {e}")
            raise
        except httpx.HTTPError as e:
            logger.error(f"GSA[HttpxDelegate]: 发生传输错误: {e}", exc_info=True)
            raise
