"""
GSA 客户端 - 数据模型 (Results)
定义自然检索结果、推荐链接与拼写建议。
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Result(BaseModel):
    """
    一条自然检索结果 (<R> 元素)。
    """
    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    escaped_url: Optional[str] = Field(
        default=None,
        description="设备返回的二次转义 URL，用于拼接缓存文档链接"
    )
    title: Optional[str] = None
    summary: Optional[str] = None
    rating: int = Field(default=0, description="相关度评分，0-10")
    mime_type: Optional[str] = None
    indentation: int = Field(
        default=1,
        description="缩进层级，大于 1 表示与上一条结果同域聚合"
    )
    language: Optional[str] = None
    cache_doc_id: Optional[str] = None
    cache_doc_encoding: Optional[str] = None
    cache_doc_size: Optional[str] = Field(
        default=None,
        description="缓存文档的大致大小；空字符串与 None 含义不同"
    )
    metas: Dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="文档的 meta 标签，键区分大小写"
    )
    fields: Dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="设备额外计算的字段，例如按日期排序时的 date"
    )

    def get_meta(self, name: str) -> Optional[str]:
        return self.metas.get(name)

    def get_field(self, name: str) -> Optional[str]:
        return self.fields.get(name)


class Keymatch(BaseModel):
    """管理员配置的推荐链接 (<GM> 元素)"""
    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    url: Optional[str] = None


class Suggestion(BaseModel):
    """
    单条拼写建议。
    text 为纯文本，text_with_markup 保留设备返回的 <b>/<i> 标记。
    """
    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    text_with_markup: Optional[str] = None


class Spelling(BaseModel):
    model_config = ConfigDict(frozen=True)

    suggestions: List[Suggestion] = Field(default_factory=list)
