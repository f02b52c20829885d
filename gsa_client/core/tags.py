"""
GSA 客户端 - 标签分类
把原始元素名映射到一个封闭的已知标签集合，未知元素统一归为 UNKNOWN。
"""
from enum import Enum
from types import MappingProxyType


class Tag(Enum):
    """响应 XML 中有意义的元素，值为元素在文档中的原始名称 (区分大小写)"""
    UNKNOWN = None

    GSP = "GSP"
    TM = "TM"
    Q = "Q"
    PARAM = "PARAM"

    # 结果列表及其兄弟元素
    RES = "RES"
    M = "M"
    FI = "FI"
    NB = "NB"
    PU = "PU"
    NU = "NU"

    # 单条自然结果
    R = "R"
    U = "U"
    UE = "UE"
    T = "T"
    RK = "RK"
    FS = "FS"
    MT = "MT"
    S = "S"
    LANG = "LANG"
    C = "C"

    # OneBox 模块
    OBRES = "OBRES"
    PROVIDER = "provider"
    URL_TEXT = "urlText"
    URL_LINK = "urlLink"
    IMAGE_SOURCE = "IMAGE_SOURCE"
    MODULE_RESULT = "MODULE_RESULT"
    FIELD = "Field"

    # 拼写建议与同义词
    SPELLING = "Spelling"
    SUGGESTION = "Suggestion"
    SYNONYMS = "Synonyms"
    ONE_SYNONYM = "OneSynonym"

    # 推荐链接
    GM = "GM"
    GL = "GL"
    GD = "GD"

    # 动态导航
    PARM = "PARM"
    PC = "PC"
    PMT = "PMT"
    PV = "PV"


# 只读的名称索引，可在多个解析器之间共享
_TAG_INDEX = MappingProxyType({tag.value: tag for tag in Tag if tag is not Tag.UNKNOWN})


def classify(name: str) -> Tag:
    """返回元素名对应的 Tag，未识别的名称返回 Tag.UNKNOWN"""
    return _TAG_INDEX.get(name, Tag.UNKNOWN)
