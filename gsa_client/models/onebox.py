"""
GSA 客户端 - 数据模型 (OneBox)
OneBox 模块返回的结构化结果。
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class FieldEntry(BaseModel):
    """OneBox 结果中的一个键值对，同一个键可以重复出现"""
    model_config = ConfigDict(frozen=True)

    key: Optional[str] = None
    value: str = ""


class OneBoxResult(BaseModel):
    """<MODULE_RESULT> 元素"""
    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    field_entries: List[FieldEntry] = Field(
        default_factory=list,
        description="按文档顺序排列的字段，允许重复的键"
    )

    def get_field_values(self, key: str) -> List[str]:
        """按文档顺序返回某个键对应的全部取值"""
        return [entry.value for entry in self.field_entries if entry.key == key]


class OneBoxResponse(BaseModel):
    """
    一个 OneBox 模块的整体响应 (<OBRES> 元素)。
    """
    model_config = ConfigDict(frozen=True)

    title_text: Optional[str] = None
    title_link: Optional[str] = None
    image_source: Optional[str] = None
    provider_name: Optional[str] = None
    module_results: List[OneBoxResult] = Field(default_factory=list)
