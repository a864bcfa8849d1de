"""数字窗口服务。

串联“抓取 → 更新窗口 → 组装响应”流程。
上游失败或超时时尽力而为：返回未改变的窗口状态并附带错误说明。
"""

import logging

from returns.result import Failure

from src.numbers.client import InvalidCategoryError, NumberClient
from src.numbers.domain.models import NumbersResponse
from src.numbers.window import SlidingWindowStore

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch numbers or response took too long"


class NumbersService:
    """数字窗口服务。

    持有一个窗口存储和一个数字客户端，窗口在服务对象生命周期内常驻内存。
    """

    def __init__(self, client: NumberClient, store: SlidingWindowStore) -> None:
        self._client = client
        self._store = store

    @property
    def store(self) -> SlidingWindowStore:
        return self._store

    async def get_numbers(self, code: str) -> NumbersResponse:
        """抓取指定类别的数字并更新窗口。

        Args:
            code: 类别代码（p, f, e, r）

        Returns:
            NumbersResponse: 窗口状态与本次获取的数字

        Raises:
            InvalidCategoryError: 类别代码无效
        """
        result = await self._client.fetch_numbers(code)

        if isinstance(result, Failure):
            error = result.failure()
            if isinstance(error, InvalidCategoryError):
                raise error
            logger.warning(f"类别 {code} 抓取失败，返回当前窗口状态: {error.message}")
            state = self._store.state()
            return NumbersResponse(
                **state.model_dump(),
                numbers=[],
                error=FETCH_ERROR_MESSAGE,
            )

        numbers = result.unwrap()
        state = self._store.update(numbers)
        return NumbersResponse(**state.model_dump(), numbers=numbers)

    async def close(self) -> None:
        """释放底层 HTTP 资源。"""
        await self._client.close()
