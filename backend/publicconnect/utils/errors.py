"""
错误分类与全局异常处理
---------------------------------
功能：
- ErrorKind：业务错误类型及其对应的 HTTP 状态码
- AppError：路由层抛出的业务异常，由全局处理器统一渲染为 `{"message", "errors"}`
- register_exception_handlers：挂载到 FastAPI 应用

约定：
- 校验错误一次性列出所有字段（path + message）；路由可用 validation_message 指定提示语
- 未预期的异常只在服务端记录详情，客户端只收到通用提示
"""

from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from .logger import log


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"

    @property
    def status(self) -> HTTPStatus:
        return _STATUS_BY_KIND[self]


_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.AUTHENTICATION: HTTPStatus.UNAUTHORIZED,
    ErrorKind.AUTHORIZATION: HTTPStatus.FORBIDDEN,
    # 重复邮箱沿用 400，而不是 409
    ErrorKind.CONFLICT: HTTPStatus.BAD_REQUEST,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.UNEXPECTED: HTTPStatus.INTERNAL_SERVER_ERROR,
}

# 各类错误的默认提示
DEFAULT_MESSAGES = {
    ErrorKind.VALIDATION: "Validation error",
    ErrorKind.AUTHENTICATION: "Unauthorized",
    ErrorKind.AUTHORIZATION: "Forbidden: Admin access required",
    ErrorKind.CONFLICT: "Conflict",
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.UNEXPECTED: "Internal server error",
}


class AppError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.errors = errors
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return int(self.kind.status)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


def format_validation_errors(raw_errors) -> List[Dict[str, Any]]:
    """把 pydantic 的错误列表转为 `[{path, message}]`，去掉 body/query 等位置前缀。"""
    formatted = []
    for err in raw_errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] in ("body", "query", "path", "form", "cookie", "header"):
            loc = loc[1:]
        formatted.append({"path": loc, "message": err.get("msg", "Invalid value")})
    return formatted


def validation_message(message: str):
    """为路由指定请求体校验失败时的提示语（默认 "Validation error"）"""
    def decorator(endpoint):
        endpoint.validation_message = message
        return endpoint
    return decorator


def validation_error(exc: PydanticValidationError, message: str = "Validation error") -> AppError:
    return AppError(ErrorKind.VALIDATION, message, format_validation_errors(exc.errors()))


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind in (ErrorKind.AUTHENTICATION, ErrorKind.AUTHORIZATION):
        log.warning(f"{request.method} {request.url.path} 拒绝访问：{exc.kind.value}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = getattr(request.scope.get("endpoint"), "validation_message", None)
    error = AppError(ErrorKind.VALIDATION, message, format_validation_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception(f"{request.method} {request.url.path} 未处理的异常：{exc}")
    error = AppError(ErrorKind.UNEXPECTED)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
