"""问卷标签导出的结构化日志配置与辅助函数."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any, cast

import structlog
from flask import Flask, current_app

from survey_export.constants.system_constants import ErrorSeverity
from survey_export.settings import APP_NAME, APP_VERSION
from survey_export.utils.logging.error_adapter import (
    ErrorContext,
    ErrorMetadata,
    build_public_context,
    derive_error_metadata,
)

if TYPE_CHECKING:
    from structlog.typing import BindableLogger, EventDict, Processor

ErrorPayload = dict[str, Any]


class StructlogConfig:
    """structlog 配置核心类.

    负责配置处理器链与日志工厂,多次调用只会配置一次.

    Example:
        >>> config = StructlogConfig()
        >>> config.configure(app)
        >>> logger = get_logger('files')

    """

    def __init__(self) -> None:
        self.configured = False

    def configure(self, app: Flask | None = None) -> None:
        """初始化 structlog 处理器(幂等).

        Args:
            app: Flask 应用实例,可选.

        """
        if not self.configured:
            processors = [
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                self._add_global_context,
                self._get_renderer(),
            ]
            structlog.configure(
                processors=cast("list[Processor]", processors),
                context_class=dict,
                logger_factory=structlog.stdlib.LoggerFactory(),
                wrapper_class=structlog.stdlib.BoundLogger,
                cache_logger_on_first_use=True,
            )
            self.configured = True

        if app is not None:
            app.extensions["structlog_config"] = self

    @staticmethod
    def _add_global_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        """附加应用名称、版本与 logger 名称."""
        try:
            event_dict["app_name"] = current_app.config["APP_NAME"]
            event_dict["app_version"] = current_app.config["APP_VERSION"]
            event_dict["environment"] = current_app.config.get("ENV", "development")
        except RuntimeError:
            event_dict["app_name"] = APP_NAME
            event_dict["app_version"] = APP_VERSION

        event_dict["logger_name"] = getattr(_logger, "name", "unknown")
        return event_dict

    @staticmethod
    def _get_renderer() -> Processor:
        """终端下使用彩色控制台输出,其余情况输出 JSON."""
        if sys.stdout.isatty():
            return structlog.dev.ConsoleRenderer(colors=True)
        return structlog.processors.JSONRenderer(ensure_ascii=False)


structlog_config = StructlogConfig()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """获取结构化日志记录器.

    Args:
        name: 日志记录器名称,通常使用模块名.

    Returns:
        绑定的 structlog 日志记录器实例.

    Example:
        >>> logger = get_logger('files')
        >>> logger.info('导出完成', survey_group_id=42)

    """
    structlog_config.configure()
    return structlog.get_logger(name)


def configure_structlog(app: Flask) -> None:
    """配置 structlog 并注册 Flask 钩子."""
    structlog_config.configure(app)

    @app.teardown_appcontext
    def log_teardown_error(exception: BaseException | None) -> None:
        if exception:
            get_logger("app").error("应用请求处理异常", module="system", exception=str(exception))


def log_info(message: str, module: str = "app", **kwargs: Any) -> None:
    """记录信息级别日志.

    Example:
        >>> log_info('开始导出 CSV', module='files', survey_group_id=42)

    """
    get_logger("app").info(message, module=module, **kwargs)


def log_warning(message: str, module: str = "app", exception: Exception | None = None, **kwargs: Any) -> None:
    """记录警告级别日志."""
    if exception is not None:
        kwargs["error_type"] = exception.__class__.__name__
        kwargs["error_message"] = str(exception)
    get_logger("app").warning(message, module=module, **kwargs)


def log_error(message: str, module: str = "app", exception: Exception | None = None, **kwargs: Any) -> None:
    """记录错误级别日志,附带异常堆栈."""
    if exception is not None:
        kwargs["error_type"] = exception.__class__.__name__
        kwargs["error_message"] = str(exception)
        kwargs["exc_info"] = exception
    get_logger("app").error(message, module=module, **kwargs)


def get_system_logger() -> structlog.stdlib.BoundLogger:
    """获取系统日志记录器."""
    return get_logger("system")


def enhanced_error_handler(error: Exception, context: ErrorContext | None = None) -> ErrorPayload:
    """将异常转换为结构化的错误响应并按严重度记录日志.

    Args:
        error: 异常对象.
        context: 错误上下文,可选.如果未提供会自动创建.

    Returns:
        结构化的错误响应字典.

    """
    context = context or ErrorContext(error)
    context.ensure_request()

    metadata = derive_error_metadata(error)
    payload: ErrorPayload = {
        "error": True,
        "error_id": context.error_id,
        "category": metadata.category.value,
        "severity": metadata.severity.value,
        "message_code": metadata.message_key,
        "message": metadata.message,
        "timestamp": context.timestamp.isoformat(),
        "recoverable": metadata.recoverable,
        "context": build_public_context(context),
    }

    _log_enhanced_error(error, metadata, payload)
    return payload


def _log_enhanced_error(error: Exception, metadata: ErrorMetadata, payload: ErrorPayload) -> None:
    log_kwargs = {
        "error_id": payload["error_id"],
        "category": payload["category"],
        "severity": payload["severity"],
        "context": payload.get("context"),
    }
    if metadata.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
        log_error(str(payload["message"]), module="error_handler", exception=error, **log_kwargs)
    else:
        log_warning(str(payload["message"]), module="error_handler", exception=error, **log_kwargs)


__all__ = [
    "ErrorContext",
    "configure_structlog",
    "enhanced_error_handler",
    "get_logger",
    "get_system_logger",
    "log_error",
    "log_info",
    "log_warning",
]
