"""数字窗口 API 路由。

提供按类别抓取数字并返回滑动窗口平均值的 HTTP 端点。
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.container import get_numbers_service
from src.numbers.client import InvalidCategoryError
from src.numbers.domain.models import NumberCategory, NumbersResponse
from src.numbers.services.numbers_service import NumbersService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/numbers", tags=["numbers"])

INVALID_ID_MESSAGE = (
    "Invalid number ID. Valid IDs are: p (prime), f (fibonacci), e (even), r (random)"
)


@router.get(
    "/{number_id}",
    response_model=NumbersResponse,
    response_model_exclude_none=True,
    summary="获取窗口平均值",
    description="从上游获取指定类别的数字，合入滑动窗口并返回更新前后的窗口和平均值。",
)
async def get_numbers(
    number_id: str,
    service: NumbersService = Depends(get_numbers_service),
) -> NumbersResponse:
    """获取指定类别的数字与窗口状态。

    上游失败或超时不会返回 5xx，而是返回未改变的窗口与 error 字段。
    """
    if NumberCategory.from_code(number_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_ID_MESSAGE,
        )

    try:
        return await service.get_numbers(number_id)
    except InvalidCategoryError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_ID_MESSAGE,
        ) from e
