"""滑动窗口存储。

维护固定容量、去重、按到达顺序淘汰的数字窗口。
"""

import logging
import threading
from collections.abc import Sequence

from src.numbers.domain.models import Number, WindowState

logger = logging.getLogger(__name__)


class SlidingWindowStore:
    """固定容量的滑动窗口。

    不变量：
    - 窗口长度不超过容量
    - 窗口内不存在重复值
    - 保持插入顺序，超出容量时最旧的值先被淘汰

    使用线程锁保证“先快照、后修改”在并发更新下依然成立。
    """

    def __init__(self, window_size: int) -> None:
        """初始化窗口。

        Args:
            window_size: 窗口容量，必须大于 0

        Raises:
            ValueError: 容量小于 1
        """
        if window_size < 1:
            raise ValueError(f"window_size 必须大于 0，实际为 {window_size}")
        self._window_size = window_size
        self._previous: list[Number] = []
        self._current: list[Number] = []
        self._lock = threading.Lock()

    @property
    def window_size(self) -> int:
        return self._window_size

    def update(self, new_values: Sequence[Number]) -> WindowState:
        """将新数值合入窗口。

        只过滤掉窗口中已存在的值，new_values 内部的重复值不会互相去重。

        Args:
            new_values: 按到达顺序排列的新数值

        Returns:
            WindowState: 本次更新完成时在同一把锁内取得的快照
        """
        if not new_values:
            return self.state()

        with self._lock:
            self._previous = list(self._current)

            unique_new = [v for v in new_values if v not in self._current]
            merged = self._current + unique_new

            # 从头部淘汰最旧的值
            overflow = len(merged) - self._window_size
            if overflow > 0:
                merged = merged[overflow:]

            self._current = merged
            snapshot = self._snapshot()

        logger.debug(
            "窗口已更新: 新增 %d 个值, 当前长度 %d/%d",
            len(unique_new),
            len(merged),
            self._window_size,
        )
        return snapshot

    def average(self) -> float:
        """计算当前窗口平均值，空窗口返回 0。"""
        with self._lock:
            return self._average(self._current)

    def state(self) -> WindowState:
        """返回窗口状态的只读快照。"""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> WindowState:
        # 调用方须持有 self._lock
        return WindowState(
            previous_state=list(self._previous),
            current_state=list(self._current),
            average=self._average(self._current),
        )

    @staticmethod
    def _average(values: list[Number]) -> float:
        if not values:
            return 0.0
        return round(sum(values) / len(values), 2)
