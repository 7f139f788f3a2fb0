"""响应封装：构建系统统一的返回结构。"""

from typing import Any

from refdata.core.constants import HTTP_STATUS_OK
from refdata.core.logger import get_correlation_id


def create_response(msg: str, data: Any = None, code: int = HTTP_STATUS_OK) -> dict[str, Any]:
    """按照 ``msg``、``data``、``code`` 组合出统一响应体。"""
    payload: dict[str, Any] = {"msg": msg, "data": data, "code": code}
    correlation_id = get_correlation_id()
    if correlation_id:
        payload["meta"] = {"correlation_id": correlation_id}
    return payload
