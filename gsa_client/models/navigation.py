"""
GSA 客户端 - 数据模型 (动态导航)
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DynamicNavigationAttributeResult(BaseModel):
    """
    导航属性下的一个取值 (<PV> 元素)。
    非区间属性的 low_range / high_range 为空字符串。
    """
    model_config = ConfigDict(frozen=True)

    value: Optional[str] = None
    count: int = 0
    low_range: Optional[str] = None
    high_range: Optional[str] = None


class DynamicNavigationAttribute(BaseModel):
    """一个可用于分面筛选的属性 (<PMT> 元素)"""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    label: Optional[str] = None
    type: int = Field(default=0, description="设备定义的属性类型代码")
    is_range: bool = False
    results: List[DynamicNavigationAttributeResult] = Field(default_factory=list)


class NavigationResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: List[DynamicNavigationAttribute] = Field(default_factory=list)
