"""
GSA 客户端 - 查询编码
把结构化的检索条件编码为设备可接受的 GET 查询串。

- QueryTerm 负责拼装 q 参数中的检索式 (intitle:、site:、filetype: 等)；
- GSAQuery 是面向调用方的接口，内部委托给 _QueryParameters 按固定顺序输出参数。
"""
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .url_utils import (
    append_mapped_query_params, append_query_param, string_separated, to_julian
)
from ..models.constants import (
    Access, Filter, OutputFormat, ProxyCustom, SearchScope, SortDirection, SortMode
)

# 单次检索可请求的结果数上限
MAX_RESULTS = 1000

OR_DELIMITER = "|"
AND_DELIMITER = "."

_ALL_IN_TITLE = "allintitle:"
_ALL_IN_URL = "allinurl:"
_INFO = "info:"
_CACHE = "cache:"
_LINK = "link:"
_IN_TITLE = "intitle:"
_NOT_IN_TITLE = "-intitle:"
_IN_URL = "inurl:"
_NOT_IN_URL = "-inurl:"
_INCLUDE_SITE = "site:"
_EXCLUDE_SITE = "-site:"
_INCLUDE_FILETYPE = "filetype:"
_EXCLUDE_FILETYPE = "-filetype:"
_DATERANGE = "daterange:"
_OR = " OR "
_SP = " "


class QueryTerm:
    """
    q 参数中的检索式。

    各子句按固定顺序输出，每个子句之后跟一个空格，最后追加原始检索词:
    allintitle、allinurl、info、cache、link、intitle/-intitle、inurl/-inurl、
    site/-site、filetype (以 " OR " 连接) / -filetype、daterange、检索词。

    allintitle / allinurl / info / cache 按协议应单独使用，这里不做强制检查。
    """

    def __init__(self, query_string: Optional[str] = None):
        self.query_string = query_string
        self.in_title: List[str] = []
        self.not_in_title: List[str] = []
        self.in_url: List[str] = []
        self.not_in_url: List[str] = []
        self.all_in_title: List[str] = []
        self.all_in_url: List[str] = []
        self.include_filetype: List[str] = []
        self.exclude_filetype: List[str] = []
        self.site: Optional[str] = None
        self.include_site = True
        self.date_range: Optional[str] = None
        self.web_doc_location: Optional[str] = None
        self.cache_doc_location: Optional[str] = None
        self.link: Optional[str] = None

    def add_in_title(self, term: str, include: bool = True) -> "QueryTerm":
        (self.in_title if include else self.not_in_title).append(term)
        return self

    def add_in_url(self, term: str, include: bool = True) -> "QueryTerm":
        (self.in_url if include else self.not_in_url).append(term)
        return self

    def add_file_type(self, term: str, include: bool = True) -> "QueryTerm":
        (self.include_filetype if include else self.exclude_filetype).append(term)
        return self

    def set_all_in_title(self, terms: Sequence[str]):
        self.all_in_title = list(terms)

    def set_all_in_url(self, terms: Sequence[str]):
        self.all_in_url = list(terms)

    def set_site(self, site: Optional[str], include: bool = True):
        """限定或排除站点；只保留最后一次设置，传入 None 取消限定"""
        self.site = site
        self.include_site = include

    def set_web_document(self, doc_location: str):
        """info: 查询，返回指定文档的信息"""
        self.web_doc_location = doc_location

    def set_cached_document(self, doc_location: str):
        """cache: 查询，返回指定文档的缓存版本"""
        self.cache_doc_location = doc_location

    def set_with_links_to(self, link: str):
        """link: 查询，返回链接到指定 URL 的文档"""
        self.link = link

    def set_date_range(self, from_day: Union[int, date], to_day: Union[int, date]):
        """
        限定文档日期范围。

        :param from_day: 起始日，儒略日数字或 date
        :param to_day: 结束日，儒略日数字或 date
        """
        if isinstance(from_day, date):
            from_day = to_julian(from_day)
        if isinstance(to_day, date):
            to_day = to_julian(to_day)
        self.date_range = f"{from_day}-{to_day}"

    def build(self) -> str:
        """生成 q 参数的取值 (未编码)"""
        clauses = []
        if self.all_in_title:
            clauses.append(_ALL_IN_TITLE + string_separated(self.all_in_title, None, _SP))
        if self.all_in_url:
            clauses.append(_ALL_IN_URL + string_separated(self.all_in_url, None, _SP))
        if self.web_doc_location:
            clauses.append(_INFO + self.web_doc_location)
        if self.cache_doc_location:
            clauses.append(_CACHE + self.cache_doc_location)
        if self.link:
            clauses.append(_LINK + self.link)
        if self.in_title:
            clauses.append(string_separated(self.in_title, _IN_TITLE, _SP))
        if self.not_in_title:
            clauses.append(string_separated(self.not_in_title, _NOT_IN_TITLE, _SP))
        if self.in_url:
            clauses.append(string_separated(self.in_url, _IN_URL, _SP))
        if self.not_in_url:
            clauses.append(string_separated(self.not_in_url, _NOT_IN_URL, _SP))
        if self.site:
            clauses.append((_INCLUDE_SITE if self.include_site else _EXCLUDE_SITE) + self.site)
        if self.include_filetype:
            clauses.append(string_separated(self.include_filetype, _INCLUDE_FILETYPE, _OR))
        if self.exclude_filetype:
            clauses.append(string_separated(self.exclude_filetype, _EXCLUDE_FILETYPE, _SP))
        if self.date_range is not None:
            clauses.append(_DATERANGE + self.date_range)

        value = "".join(clause + _SP for clause in clauses)
        if self.query_string is not None:
            value += self.query_string
        return value


class _QueryParameters:
    """设备协议的底层参数，按协议规定的顺序输出"""

    def __init__(self):
        self.access: str = Access.PUBLIC.value
        self.output: Optional[str] = OutputFormat.XML.value
        self.sort: Optional[str] = None
        self.ie: Optional[str] = None
        self.oe: Optional[str] = None
        self.client: Optional[str] = None
        self.start = 0
        self.as_dt: Optional[str] = None
        self.as_epq: Optional[str] = None
        self.as_eq: Optional[List[str]] = None
        self.as_lq: Optional[str] = None
        self.as_occt: Optional[str] = None
        self.as_oq: Optional[List[str]] = None
        self.as_q: Optional[List[str]] = None
        self.as_sitesearch: Optional[str] = None
        self.filter: Optional[str] = None
        self.lr: Optional[str] = None
        self.num = 0
        self.numgm = 0
        self.proxycustom: Optional[str] = None
        self.proxyreload = False
        self.proxystylesheet: Optional[str] = None
        self.requiredfields: Dict[str, Optional[str]] = {}
        self.required_fields_or = True
        self.partialfields: Dict[str, Optional[str]] = {}
        self.partial_fields_or = True
        self.getfields: Optional[List[str]] = None
        self.sites: Optional[List[str]] = None

    def encode(self, q: Optional[str] = None) -> str:
        parts: List[str] = []
        append_query_param(parts, "access", self.access)
        if self.output is not None:
            append_query_param(parts, "output", self.output)
        if self.sort is not None:
            append_query_param(parts, "sort", self.sort)
        if self.ie is not None:
            append_query_param(parts, "ie", self.ie)
        if self.oe is not None:
            append_query_param(parts, "oe", self.oe)
        # client 是必填参数，未设置时也输出空值
        append_query_param(parts, "client", self.client)
        if self.start > 0:
            append_query_param(parts, "start", str(self.start))
        if q is not None:
            append_query_param(parts, "q", q)
        if self.as_dt in ("i", "e"):
            append_query_param(parts, "as_dt", self.as_dt)
        if self.as_epq is not None:
            append_query_param(parts, "as_epq", self.as_epq)
        if self.as_eq is not None:
            append_query_param(parts, "as_eq", string_separated(self.as_eq, None, _SP))
        if self.as_lq is not None:
            append_query_param(parts, "as_lq", self.as_lq)
        if self.as_occt is not None:
            append_query_param(parts, "as_occt", self.as_occt)
        if self.as_oq is not None:
            append_query_param(parts, "as_oq", string_separated(self.as_oq, None, _SP))
        if self.as_q is not None:
            append_query_param(parts, "as_q", string_separated(self.as_q, None, _SP))
        if self.as_sitesearch is not None:
            append_query_param(parts, "as_sitesearch", self.as_sitesearch)
        if self.filter is not None:
            append_query_param(parts, "filter", self.filter)
        if self.lr is not None:
            append_query_param(parts, "lr", self.lr)
        if self.num > 0:
            append_query_param(parts, "num", str(self.num))
        if self.numgm > 0:
            append_query_param(parts, "numgm", str(self.numgm))
        if self.proxycustom is not None:
            append_query_param(parts, "proxycustom", self.proxycustom)
        if self.proxyreload:
            append_query_param(parts, "proxyreload", "1")
        if self.proxystylesheet is not None:
            append_query_param(parts, "proxystylesheet", self.proxystylesheet)
        if self.requiredfields:
            append_mapped_query_params(
                parts,
                "requiredfields",
                self.requiredfields,
                OR_DELIMITER if self.required_fields_or else AND_DELIMITER,
            )
        if self.partialfields:
            append_mapped_query_params(
                parts,
                "partialfields",
                self.partialfields,
                OR_DELIMITER if self.partial_fields_or else AND_DELIMITER,
            )
        if self.getfields:
            append_query_param(parts, "getfields", string_separated(self.getfields, "", AND_DELIMITER))
        if self.sites:
            append_query_param(parts, "site", string_separated(self.sites, "", OR_DELIMITER))
        return "&".join(parts)


class GSAQuery:
    """
    一次检索请求的全部条件。

    每个 setter 都覆盖同名参数的旧值 (字段映射类参数除外，它们会合并键)，
    to_query_string() 的输出只取决于当前状态，可重复调用。
    """

    def __init__(self):
        self._params = _QueryParameters()
        self._query_term: Optional[QueryTerm] = None

    def set_site_collections(self, site_collections: Sequence[str]):
        """检索的集合 (site 参数)，多个集合以 | 连接表示“或”"""
        self._params.sites = list(site_collections)

    def set_frontend(self, frontend: str):
        self._params.client = frontend

    def set_output_format(self, output_format: OutputFormat):
        self._params.output = OutputFormat(output_format).value

    def set_max_results(self, max_results: int):
        """请求的结果数，超过 MAX_RESULTS 时按上限截断"""
        self._params.num = min(max_results, MAX_RESULTS)

    def set_num_key_matches(self, key_matches: int):
        self._params.numgm = key_matches

    def set_search_scope(self, search_scope: SearchScope):
        self._params.as_occt = SearchScope(search_scope).value

    def set_filter(self, filter_: Filter):
        self._params.filter = Filter(filter_).value

    def set_query_term(self, query_term: QueryTerm):
        self._query_term = query_term

    def set_or_query_terms(self, or_terms: Sequence[str]):
        self._params.as_oq = list(or_terms)

    def set_and_query_terms(self, and_terms: Sequence[str]):
        self._params.as_q = list(and_terms)

    def set_not_query_terms(self, not_terms: Sequence[str]):
        self._params.as_eq = list(not_terms)

    def set_exact_phrase_query_term(self, phrase: str):
        self._params.as_epq = phrase

    def set_input_encoding(self, input_encoding: str):
        self._params.ie = input_encoding

    def set_output_encoding(self, output_encoding: str):
        self._params.oe = output_encoding

    def set_language(self, language: str):
        self._params.lr = language

    def set_fetch_meta_fields(self, fields: Sequence[str]):
        """需要在结果中返回的 meta 字段 (getfields 参数)"""
        self._params.getfields = list(fields)

    def set_required_meta_fields(self, required_fields: Mapping[str, Optional[str]], use_or: bool = True):
        """
        要求结果的 meta 字段完全匹配 (requiredfields 参数)。

        :param required_fields: 字段名到取值的映射，取值为 None 时只要求字段存在
        :param use_or: True 时各条件以“或”连接，False 时以“与”连接
        """
        self._params.requiredfields.update(required_fields)
        self._params.required_fields_or = use_or

    def set_partial_meta_fields(self, partial_fields: Mapping[str, Optional[str]], use_or: bool = True):
        """与 set_required_meta_fields 相同，但取值按部分匹配 (partialfields 参数)"""
        self._params.partialfields.update(partial_fields)
        self._params.partial_fields_or = use_or

    def set_sort_by_date(self, ascending: bool, mode: SortMode):
        direction = SortDirection.ASC if ascending else SortDirection.DESC
        self._params.sort = f"date:{direction.value}:{SortMode(mode).value}:d1"

    def unset_sort_by_date(self):
        self._params.sort = None

    def set_scroll_ahead(self, start: int):
        """跳过前 start 条结果，用于翻页"""
        self._params.start = start

    def set_access(self, access: Access):
        self._params.access = Access(access).value

    def set_proxycustom(self, proxycustom: Union[ProxyCustom, str]):
        if isinstance(proxycustom, ProxyCustom):
            proxycustom = proxycustom.value
        self._params.proxycustom = proxycustom

    def set_proxystylesheet(self, proxystylesheet: str):
        self._params.proxystylesheet = proxystylesheet

    def set_proxy_reload(self, force: bool):
        self._params.proxyreload = force

    def set_site_search(self, site: str, include: bool = True):
        """在指定站点内检索 (include=True) 或排除该站点"""
        self._params.as_sitesearch = site
        self._params.as_dt = "i" if include else "e"

    def set_links_to(self, url: str):
        """只返回链接到 url 的页面 (as_lq 参数)"""
        self._params.as_lq = url

    def get_query_string(self) -> Optional[str]:
        """返回检索式 (未编码)，未设置 QueryTerm 时返回 None"""
        if self._query_term is None:
            return None
        return self._query_term.build()

    def to_query_string(self) -> str:
        return self._params.encode(q=self.get_query_string())
