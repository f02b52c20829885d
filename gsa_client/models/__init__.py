"""
GSA 客户端 - 数据模型包
"""

from .constants import (
    Access, Filter, OutputFormat, ProxyCustom, SearchScope, SortDirection, SortMode
)
from .results import Result, Keymatch, Suggestion, Spelling
from .onebox import FieldEntry, OneBoxResult, OneBoxResponse
from .navigation import (
    DynamicNavigationAttribute, DynamicNavigationAttributeResult, NavigationResponse
)
from .response import Response

__all__ = [
    "Access",
    "Filter",
    "OutputFormat",
    "ProxyCustom",
    "SearchScope",
    "SortDirection",
    "SortMode",
    "Result",
    "Keymatch",
    "Suggestion",
    "Spelling",
    "FieldEntry",
    "OneBoxResult",
    "OneBoxResponse",
    "DynamicNavigationAttribute",
    "DynamicNavigationAttributeResult",
    "NavigationResponse",
    "Response",
]
