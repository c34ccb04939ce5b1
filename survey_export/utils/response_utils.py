"""统一响应构造工具."""

from __future__ import annotations

from typing import Any

from survey_export.errors import map_exception_to_status
from survey_export.utils.structlog_config import ErrorContext, enhanced_error_handler


def unified_error_response(
    error: BaseException,
    *,
    status_code: int | None = None,
    context: ErrorContext | None = None,
) -> tuple[dict[str, Any], int]:
    """生成统一的错误响应载荷.

    Args:
        error: 异常对象.
        status_code: HTTP 状态码,可选,默认根据异常类型自动映射.
        context: 错误上下文,可选.

    Returns:
        错误响应载荷字典与 HTTP 状态码.

    """
    safe_error = error if isinstance(error, Exception) else Exception(str(error))
    payload = enhanced_error_handler(safe_error, context or ErrorContext(safe_error))
    final_status = status_code or map_exception_to_status(safe_error)
    payload.setdefault("success", False)
    return payload, final_status
