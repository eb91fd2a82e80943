"""全局异常处理器与统一错误响应结构"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from proxynode.services.node.errors import (
    NodeNotFoundError,
    NodeRegistrationError,
    NodeServiceError,
    NodeValidationError,
)

logger = logging.getLogger(__name__)


def build_error_response(
    status_code: int,
    detail: str,
    *,
    error_type: str,
    meta: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    payload: Dict[str, Any] = {
        "detail": str(detail or ""),
        "error": {
            "type": str(error_type or "unknown_error"),
        },
    }
    if meta:
        payload["error"]["meta"] = jsonable_encoder(meta)
    return JSONResponse(status_code=int(status_code), content=payload, headers=headers)


def _prefix_http_detail(status_code: int, detail: str) -> str:
    text = str(detail or "").strip()
    if status_code == 404:
        return f"未找到：{text}" if text else "未找到"
    return f"请求失败：{text}" if text else "请求失败"


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NodeValidationError)
    async def _handle_node_validation(request: Request, exc: NodeValidationError):  # noqa: ARG001
        return build_error_response(
            400,
            exc.data.message,
            error_type=exc.data.error,
        )

    @app.exception_handler(NodeNotFoundError)
    async def _handle_node_not_found(request: Request, exc: NodeNotFoundError):  # noqa: ARG001
        return build_error_response(
            404,
            f"节点不存在：{exc}",
            error_type="node_not_found",
        )

    @app.exception_handler(NodeRegistrationError)
    async def _handle_node_registration(request: Request, exc: NodeRegistrationError):  # noqa: ARG001
        return build_error_response(
            503,
            f"节点注册失败：{exc}",
            error_type="node_registration_error",
        )

    @app.exception_handler(NodeServiceError)
    async def _handle_node_service_error(request: Request, exc: NodeServiceError):  # noqa: ARG001
        return build_error_response(
            400,
            f"请求错误：{exc}",
            error_type="node_service_error",
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):  # noqa: ARG001
        encoded_errors = jsonable_encoder(exc.errors())
        return build_error_response(
            422,
            "参数校验失败",
            error_type="validation_error",
            meta={"errors": encoded_errors},
        )

    @app.exception_handler(HTTPException)
    async def _handle_http_exception(request: Request, exc: HTTPException):  # noqa: ARG001
        raw_detail = exc.detail
        if isinstance(raw_detail, str):
            detail = _prefix_http_detail(int(exc.status_code), raw_detail)
            meta = {"status_code": int(exc.status_code)}
        else:
            detail = _prefix_http_detail(int(exc.status_code), "请求失败")
            meta = {"status_code": int(exc.status_code), "raw_detail": raw_detail}
        return build_error_response(
            int(exc.status_code),
            detail,
            error_type="http_error",
            meta=meta,
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error: %s %s", request.method, request.url.path)
        return build_error_response(
            500,
            "服务异常，请稍后再试",
            error_type="internal_error",
            meta={"exception": str(exc)},
        )
