"""异常处理模块：定义统一的业务异常与响应格式。

存储层抛出的所有业务异常都继承自 ``AppException``，由调用方（HTTP 层）
统一转换为 ``{"msg", "data", "code"}`` 结构；``register_exception_handlers``
可直接挂载到 FastAPI 应用上完成这一转换。
"""

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from refdata.core.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_CONFLICT,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_INTERNAL_SERVER_ERROR,
    HTTP_STATUS_NOT_FOUND,
)
from refdata.core.logger import logger
from refdata.core.responses import create_response


class AppException(HTTPException):
    """携带统一响应结构的业务异常，方便在全局处理中转换响应体。"""

    default_code = HTTP_STATUS_BAD_REQUEST

    def __init__(self, msg: str, code: int | None = None, data: Any = None) -> None:
        super().__init__(status_code=code or self.default_code, detail=msg)
        self.msg = msg
        self.data = data

    def __str__(self) -> str:
        return self.msg


class NotFoundError(AppException):
    """引用的 ID 或键不存在。"""

    default_code = HTTP_STATUS_NOT_FOUND


class ConflictError(AppException):
    """违反唯一约束。"""

    default_code = HTTP_STATUS_CONFLICT


class InvalidStateError(AppException):
    """非法的生命周期状态迁移。"""

    default_code = HTTP_STATUS_CONFLICT


class ValidationError(AppException):
    """参数或配置值无法按声明类型解析。"""

    default_code = HTTP_STATUS_BAD_REQUEST


class DisabledError(AppException):
    """记录存在但已被停用。"""

    default_code = HTTP_STATUS_FORBIDDEN


class StoreError(AppException):
    """底层存储不可用或执行失败，原样上抛，不做重试。"""

    default_code = HTTP_STATUS_INTERNAL_SERVER_ERROR


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """将 ``HTTPException``（含全部业务异常）转换为统一响应格式。"""
    payload = create_response(exc.detail, getattr(exc, "data", None), exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=payload)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """兜底处理：将未捕获异常转换为标准的 500 响应结构。"""
    logger.error("Unhandled error while serving %s", request.url.path, exc_info=exc)
    payload = create_response("服务器内部错误", None, HTTP_STATUS_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=HTTP_STATUS_INTERNAL_SERVER_ERROR, content=payload)


def register_exception_handlers(app: FastAPI) -> None:
    """在调用方的 FastAPI 应用上注册统一的异常转换。"""
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
