"""问卷标签导出 - Flask 应用初始化.

基于 PostgreSQL COPY 的问卷标签 CSV 导出服务.
"""

import logging
from importlib import import_module

from flask import Flask, jsonify, request
from flask.typing import ResponseReturnValue
from flask_sqlalchemy import SQLAlchemy

from survey_export.settings import Settings
from survey_export.utils.response_utils import unified_error_response
from survey_export.utils.structlog_config import ErrorContext, configure_structlog, get_system_logger

# 初始化扩展
db = SQLAlchemy()


def create_app(*, settings: Settings | None = None) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    app.config.from_mapping(resolved_settings.to_flask_config())

    # 初始化扩展
    db.init_app(app)

    # 注册蓝图
    configure_blueprints(app)

    # 注册命令行
    configure_cli(app)

    # 配置统一日志系统
    configure_structlog(app)

    # 设置全局日志级别
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error, context=ErrorContext(error, request))
        return jsonify(payload), status_code

    get_system_logger().info("应用初始化完成", module="system", environment=resolved_settings.environment)
    return app


def configure_blueprints(app: Flask) -> None:
    """注册所有蓝图以暴露路由.

    Args:
        app: Flask 应用实例.

    """
    blueprint_specs: list[tuple[str, str, str | None]] = [
        ("survey_export.routes.files", "files_bp", "/files"),
    ]

    for module_path, attr_name, url_prefix in blueprint_specs:
        module = import_module(module_path)
        blueprint = getattr(module, attr_name)
        app.register_blueprint(blueprint, url_prefix=url_prefix)


def configure_cli(app: Flask) -> None:
    """注册 Flask 命令行命令."""
    from survey_export.cli import register_cli

    register_cli(app)


__all__ = ["create_app", "db"]
