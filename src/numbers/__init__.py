"""数字窗口包。

提供按类别抓取数字并维护滑动窗口平均值的功能。
"""

from src.numbers.client import (
    FetchFailedError,
    FetchTimeoutError,
    InvalidCategoryError,
    NumberClient,
    NumberClientError,
)
from src.numbers.domain.models import NumberCategory, NumbersResponse, WindowState
from src.numbers.services.numbers_service import NumbersService
from src.numbers.window import SlidingWindowStore

__all__ = [
    "NumberClient",
    "NumberClientError",
    "InvalidCategoryError",
    "FetchTimeoutError",
    "FetchFailedError",
    "NumberCategory",
    "NumbersResponse",
    "WindowState",
    "NumbersService",
    "SlidingWindowStore",
]
