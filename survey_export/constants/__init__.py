"""常量模块。

集中管理系统常量，包括错误分类、错误消息、HTTP 相关常量等。

主要常量：
- ErrorCategory / ErrorSeverity: 错误分类与严重程度
- ErrorMessages: 错误消息常量
- HttpStatus: HTTP 状态码常量
- HttpHeaders: HTTP 头常量
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

from .http_headers import HttpHeaders
from .system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "HttpHeaders",
    "HttpStatus",
]
