"""
GSA 客户端 - 数据模型 (Response)
一次检索的完整响应，是解析结果的聚合根。
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .navigation import NavigationResponse
from .onebox import OneBoxResponse
from .results import Keymatch, Result, Spelling


class Response(BaseModel):
    """
    对应 <GSP> 根元素。所有列表都保持文档中的出现顺序。
    """
    model_config = ConfigDict(frozen=True)

    search_time: float = Field(default=0.0, description="检索耗时 (秒)")
    query: Optional[str] = Field(default=None, description="设备回显的规范化查询串")
    params: Dict[str, Optional[str]] = Field(default_factory=dict)
    start_index: int = Field(default=0, description="结果起始序号，从 1 开始")
    end_index: int = 0
    num_results: int = Field(default=0, description="估计的总结果数")
    is_filtered: bool = False
    previous_response_url: Optional[str] = None
    next_response_url: Optional[str] = None
    results: List[Result] = Field(default_factory=list)
    one_box_responses: List[OneBoxResponse] = Field(default_factory=list)
    keymatch_results: List[Keymatch] = Field(default_factory=list)
    spelling: Optional[Spelling] = None
    synonyms_with_markup: List[str] = Field(default_factory=list)
    navigation_response: NavigationResponse = Field(default_factory=NavigationResponse)
