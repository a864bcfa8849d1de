"""数字窗口领域模型。

定义数字类别和窗口状态的 Pydantic 数据模型。
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# 上游返回的数值，保留整数原样输出
Number = int | float


class NumberCategory(str, Enum):
    """数字类别枚举。

    值为路由中使用的单字母类别代码。
    """

    prime = "p"
    fibonacci = "f"
    even = "e"
    random = "r"

    @classmethod
    def from_code(cls, code: str) -> "NumberCategory | None":
        """根据类别代码查找类别，无效代码返回 None。"""
        try:
            return cls(code)
        except ValueError:
            return None


class WindowState(BaseModel):
    """窗口状态快照。

    previous_state 为最近一次更新前的窗口内容，current_state 为更新后的内容。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    previous_state: list[Number] = Field(default_factory=list, description="更新前的窗口")
    current_state: list[Number] = Field(default_factory=list, description="当前窗口")
    average: float = Field(0.0, description="当前窗口平均值（保留两位小数）")


class NumbersResponse(WindowState):
    """数字查询响应模型。"""

    numbers: list[Number] = Field(default_factory=list, description="本次从上游获取的数字")
    error: str | None = Field(None, description="抓取失败或超时时的错误说明")
