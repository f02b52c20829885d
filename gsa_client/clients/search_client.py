"""
GSA 检索客户端
负责拼接请求 URL、通过传输委托获取响应，并把响应交给 ResponseParser 解析。
"""
import io
from typing import Dict, Optional, Union

from .base_client import ClientDelegate, HttpxDelegate
from ..core import cache_manager
from ..core.exceptions import ClientError, ConfigError
from ..core.log import get_logger, log_search_interaction, setup_response_logger
from ..core.query import GSAQuery
from ..core.response_parser import ResponseParser
from ..models.response import Response

logger = get_logger(__name__)

DEFAULT_PROTOCOL = "http"
DEFAULT_PORT = 80
DEFAULT_PATH = "/search"

SUPPORTED_PROTOCOLS = ("http", "https")


class GSAClient:
    """
    面向一台检索设备的客户端。

    一个实例可以被多个协程共用：每次解析都会创建新的 ResponseParser，
    客户端本身只保存只读配置。
    """

    def __init__(self, host: str, port: int = DEFAULT_PORT, path: str = DEFAULT_PATH,
                 protocol: str = DEFAULT_PROTOCOL, config: Optional[Dict] = None,
                 delegate: Optional[ClientDelegate] = None):
        """
        :param host: 设备主机名
        :param port: 端口
        :param path: 检索路径，默认 /search
        :param protocol: http 或 https
        :param config: 客户端配置字典
        :param delegate: 自定义传输委托，默认使用 HttpxDelegate
        """
        if protocol not in SUPPORTED_PROTOCOLS:
            raise ConfigError(f"Unsupported protocol: {protocol!r}")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigError(f"Invalid port: {port!r}")
        if not host:
            raise ConfigError("Host must not be empty")

        self.protocol = protocol
        self.host = host
        self.port = port
        self.path = path
        self.config = config or {}

        self.xml_system_id = (
            self.config.get("xml_system_id") or f"{protocol}://{host}:{port}/"
        )
        self.delegate = delegate or HttpxDelegate(self.config)

        cache_config = self.config.get("cache", {})
        self.cache_enabled = cache_config.get("enabled", False)
        self.cache_expire_seconds = cache_config.get("expire_seconds", cache_manager.CACHE_EXPIRATION)
        if self.cache_enabled:
            cache_dir = cache_config.get("dir")
            if not cache_dir:
                raise ConfigError("cache.dir is required when the response cache is enabled")
            cache_manager.init_cache(cache_dir, cache_config.get("size_limit_mb", 64))

        setup_response_logger(self.config)
        logger.debug(f"GSA[Client]: 客户端初始化完成: {self.xml_system_id}")

    def set_client_delegate(self, delegate: ClientDelegate):
        self.delegate = delegate

    def build_url(self, raw_query: str) -> str:
        """
        拼接完整的请求 URL。
        已经包含协议头 (://) 的字符串视为完整 URL 原样返回。
        """
        if "://" in raw_query:
            return raw_query
        path = self.path if self.path.startswith("/") else "/" + self.path
        query = raw_query if raw_query.startswith("?") else "?" + raw_query
        return f"{self.protocol}://{self.host}:{self.port}{path}{query}"

    async def search(self, query: Union[GSAQuery, str]) -> bytes:
        """
        执行检索并返回原始响应体。

        :param query: GSAQuery，或已编码的查询串 / 完整 URL
        :return: 响应体原始字节
        """
        raw_query = query.to_query_string() if isinstance(query, GSAQuery) else query
        url = self.build_url(raw_query)

        cache_key = cache_manager.build_response_key(url) if self.cache_enabled else None
        if cache_key is not None:
            cached = await cache_manager.get(cache_key)
            if cached is not None:
                return cached

        logger.debug(f"GSA[Client]: 请求 {url}")
        body = await self.delegate.get_response_stream(url)
        if not isinstance(body, (bytes, bytearray)):
            raise ClientError(f"Delegate returned no response body for {url}")
        body = bytes(body)

        log_search_interaction(url, body)
        if cache_key is not None:
            await cache_manager.set(cache_key, body, expire=self.cache_expire_seconds)
        return body

    async def get_response(self, query: Union[GSAQuery, str]) -> Response:
        """
        执行检索并解析响应。

        :raises ParsingError: 响应不是合法的 XML，或数字字段内容非法
        """
        body = await self.search(query)
        with io.BytesIO(body) as stream:
            return ResponseParser(self.xml_system_id).parse(stream)
