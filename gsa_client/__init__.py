"""
GSA 客户端
面向检索设备 HTTP/XML 协议的异步客户端：编码查询参数、获取响应并解析为结构化结果。
"""
from .clients import ClientDelegate, GSAClient, HttpxDelegate
from .core.cache_query import CacheQueryBuilder
from .core.exceptions import ClientError, ConfigError, GSAClientError, ParsingError
from .core.query import GSAQuery, QueryTerm
from .core.response_parser import ResponseParser, parse_response
from .models import *  # noqa: F401,F403
from .models import __all__ as _models_all

__version__ = "1.0.0"

__all__ = [
    "ClientDelegate",
    "GSAClient",
    "HttpxDelegate",
    "CacheQueryBuilder",
    "ClientError",
    "ConfigError",
    "GSAClientError",
    "ParsingError",
    "GSAQuery",
    "QueryTerm",
    "ResponseParser",
    "parse_response",
] + list(_models_all)
