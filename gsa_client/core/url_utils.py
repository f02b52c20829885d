"""
GSA 客户端 - 查询串工具
负责参数编码、多值参数拼接、查询串过滤以及儒略日换算。
"""
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote_plus

# date.toordinal() 的第 1 天 (公元 1 年 1 月 1 日) 对应的儒略日
JULIAN_DAY_ORDINAL_OFFSET = 1721425


def encode(value: Optional[str]) -> str:
    """按 application/x-www-form-urlencoded 规则编码，None 编码为空字符串"""
    if value is None:
        return ""
    return quote_plus(value)


def string_separated(tokens: Optional[Iterable], prefix: Optional[str], delimiter: str) -> str:
    """
    为每个 token 加上前缀后用分隔符连接。

    :param tokens: 待连接的值，None 视为空
    :param prefix: 每个值的前缀，None 表示不加前缀
    :param delimiter: 分隔符
    """
    if not tokens:
        return ""
    prefix = prefix or ""
    return delimiter.join(f"{prefix}{token}" for token in tokens)


def append_query_param(parts: List[str], name: str, value: Union[None, str, Sequence[str]]) -> None:
    """
    追加一个 name=value 参数。

    value 为列表或元组时，每个元素各输出一对 name=value，保持原有顺序。
    """
    if isinstance(value, (list, tuple)):
        for item in value:
            parts.append(f"{name}={encode(item)}")
        return
    parts.append(f"{name}={encode(value)}")


def append_mapped_query_params(parts: List[str], name: str,
                               fields: Mapping[str, Optional[str]], delimiter: str) -> None:
    """
    把字段映射序列化为 key:value 并用分隔符连接。

    协议要求对每个 key:value 整体再做一次编码，分隔符本身也被编码，
    因此输出中的 ':' 与 '|' 分别为 %3A 与 %7C。
    """
    tokens = []
    for key, value in fields.items():
        tokens.append(encode(key if value is None else f"{key}:{value}"))
    parts.append(f"{name}={encode(delimiter).join(tokens)}")


def extract_query_param_value(query: str, name: str) -> Optional[str]:
    """
    从查询串 (或完整 URL) 中取出参数的原始值 (不解码)。

    参数存在但没有值时返回空字符串，参数不存在时返回 None。
    """
    _, _, query_part = query.rpartition("?")
    for pair in query_part.split("&"):
        key, sep, value = pair.partition("=")
        if key == name and sep:
            return value
    return None


def to_julian(day: Union[date, datetime]) -> int:
    """返回日期对应的儒略日 (daterange: 查询使用的日期表示)"""
    if isinstance(day, datetime):
        day = day.date()
    return day.toordinal() + JULIAN_DAY_ORDINAL_OFFSET


def to_html_code(char: str) -> str:
    return f"&#{ord(char)};"


class QueryStringFilter:
    """只保留指定参数的查询串过滤器"""

    def __init__(self, retained_params: Iterable[str]):
        self.retained_params = frozenset(retained_params)

    def filter(self, query_string: str) -> str:
        """
        过滤查询串。

        被保留的参数按原顺序输出，重复出现的参数全部保留，空值参数原样保留。
        """
        kept = []
        for pair in query_string.split("&"):
            if not pair:
                continue
            key, _, _ = pair.partition("=")
            if key in self.retained_params:
                kept.append(pair)
        return "&".join(kept)
