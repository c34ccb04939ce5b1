"""路由安全执行与结构化日志助手.

提供 `log_with_context` 与 `safe_route_call` 两个 helper,用于复用结构化日志字段,
并集中处理视图层的异常捕获,杜绝裸 `Exception` 与分散的 try/except 模板.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, TypeVar

from werkzeug.exceptions import HTTPException

from survey_export.errors import AppError, SystemError
from survey_export.utils.structlog_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

R = TypeVar("R")
LogLevel = Literal["debug", "info", "warning", "error", "critical"]
DEFAULT_EXPECTED_EXCEPTIONS: tuple[type[BaseException], ...] = (AppError, HTTPException)


def log_with_context(
    level: LogLevel,
    event: str,
    *,
    module: str,
    action: str,
    context: dict[str, Any] | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """记录带有统一上下文字段的结构化日志.

    Args:
        level: 日志级别,使用 structlog 的方法名,例如 "info"、"error".
        event: 日志事件描述,建议使用动词短语.
        module: 所属模块或领域,用于快速过滤.
        action: 当前操作名称,通常对应视图或命令名.
        context: 业务上下文字段.
        extra: 附加诊断字段.

    """
    logger = get_logger("app")
    payload: dict[str, Any] = {"module": module, "action": action}
    if context:
        payload.update(context)
    if extra:
        payload.update(extra)

    log_method = getattr(logger, level, logger.error)
    log_method(event, **payload)


def safe_route_call(
    func: Callable[[], R],
    *,
    module: str,
    action: str,
    public_error: str,
    context: dict[str, Any] | None = None,
) -> R:
    """安全执行视图逻辑,集中处理日志与异常转换.

    已知异常(AppError/HTTPException)记录 warning 后原样抛出;
    其余异常记录 error 后包装为 SystemError,对外只暴露 ``public_error``.

    Args:
        func: 真实的业务函数,建议为局部闭包以捕获参数.
        module: 记录日志用的模块名称.
        action: 业务动作名称,例如 "export_survey_tags".
        public_error: 暴露给客户端的统一错误文案.
        context: 日志上下文字段.

    Returns:
        业务函数的执行结果,通常是 Flask 的响应对象.

    Raises:
        AppError: 当业务逻辑主动抛出或包装未知异常时.

    """
    event = f"{action}执行失败"
    context_payload = dict(context or {})
    try:
        return func()
    except DEFAULT_EXPECTED_EXCEPTIONS as exc:
        log_with_context(
            "warning",
            event,
            module=module,
            action=action,
            context=context_payload,
            extra={"error_type": exc.__class__.__name__, "error_message": str(exc)},
        )
        raise
    except Exception as exc:
        log_with_context(
            "error",
            event,
            module=module,
            action=action,
            context=context_payload,
            extra={"error_type": exc.__class__.__name__, "error_message": str(exc), "unexpected": True},
        )
        raise SystemError(public_error) from exc
