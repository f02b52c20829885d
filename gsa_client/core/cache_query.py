"""
GSA 客户端 - 缓存文档链接
根据检索结果拼接设备上“网页快照”的访问地址。
"""
from typing import Optional

from .query import GSAQuery
from .response_parser import DEFAULT_CACHE_ENCODING
from .url_utils import QueryStringFilter, encode
from ..models.results import Result

# 设备默认样式表生成快照链接时保留的参数
RETAINED_PARAMS = (
    "client",
    "size",
    "num",
    "output",
    "proxystylesheet",
    "access",
    "restrict",
    "lr",
    "ie",
)

_FILTER = QueryStringFilter(RETAINED_PARAMS)


class CacheQueryBuilder:
    """
    为某次检索的结果生成快照链接。

    用法:
        builder = CacheQueryBuilder(client, query)
        builder.set_proxystylesheet("default_frontend")
        url = builder.get_cache_doc_url(result, highlighted=True)
    """

    def __init__(self, client, query: GSAQuery):
        """
        :param client: GSAClient，提供协议、主机、端口与路径
        :param query: 产生这些结果的 GSAQuery
        """
        self.protocol = client.protocol
        self.host = client.host
        self.port = client.port
        self.path = client.path
        self.base_query_string = _FILTER.filter(query.to_query_string())
        self.query_term = query.get_query_string()
        self.proxystylesheet: Optional[str] = None

    def set_proxystylesheet(self, name: Optional[str]):
        """设置后，链接中会带上 proxystylesheet=<name>"""
        self.proxystylesheet = name

    def get_cache_doc_url(self, result: Result, highlighted: bool = False) -> Optional[str]:
        """
        返回结果对应的快照链接；结果没有缓存文档时返回 None。

        :param result: 检索结果
        :param highlighted: 为 True 时在链接中附带检索式，快照页会高亮检索词
        """
        if not result.cache_doc_id:
            return None

        url = (
            f"{self.protocol}://{self.host}:{self.port}{self.path}"
            f"?q=cache:{result.cache_doc_id}:{result.escaped_url or ''}"
        )
        if highlighted:
            url += "+" + encode(self.query_term)
        if self.proxystylesheet is not None:
            url += f"&proxystylesheet={self.proxystylesheet}"
        url += f"&oe={result.cache_doc_encoding or DEFAULT_CACHE_ENCODING}"
        url += "&" + self.base_query_string
        return url
