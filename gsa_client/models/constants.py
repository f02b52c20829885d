"""
GSA 客户端 - 协议常量
查询参数中使用的枚举取值。
"""
from enum import Enum


class Access(str, Enum):
    """检索的访问级别 (access 参数)"""
    PUBLIC = "p"
    SECURE = "s"
    ALL = "a"


class Filter(str, Enum):
    """结果去重过滤方式 (filter 参数)"""
    NO_FILTER = "0"
    FULL_FILTER = "1"
    DUPLICATE_SNIPPET_FILTER = "s"
    DUPLICATE_DIRECTORY_FILTER = "p"


class OutputFormat(str, Enum):
    """响应的输出格式 (output 参数)"""
    XML = "xml"
    XML_NO_DTD = "xml_no_dtd"


class SearchScope(str, Enum):
    """关键词出现的位置 (as_occt 参数)"""
    ENTIRE_PAGE = "any"
    TITLE = "title"
    URL = "url"


class SortDirection(str, Enum):
    ASC = "A"
    DESC = "D"


class SortMode(str, Enum):
    """按日期排序时的模式"""
    RELEVANT_RESULTS = "S"
    ALL_RESULTS = "R"
    NO_SORT_DATE_LOOKUP = "L"


class ProxyCustom(str, Enum):
    """proxycustom 参数可用的内置页面"""
    HOME = "<HOME/>"
    ADVANCED = "<ADVANCED/>"
    TEST = "<TEST/>"
