"""工具模块.

提供结构化日志、路由安全执行、响应构造、时间与 slug 等通用工具.
"""
