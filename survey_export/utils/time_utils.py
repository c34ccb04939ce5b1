"""统一时间处理工具模块.

基于 zoneinfo 提供一致的时间处理功能,应用时区取自 `APP_TIMEZONE` 配置.
"""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

# 时区配置
CHINA_TZ = ZoneInfo("Asia/Shanghai")
UTC_TZ = ZoneInfo("UTC")


class TimeUtils:
    """统一时间处理工具类."""

    @staticmethod
    def now() -> datetime:
        """获取当前 UTC 时间."""
        return datetime.now(UTC)

    @staticmethod
    def app_timezone() -> ZoneInfo:
        """获取应用时区.

        Returns:
            应用上下文中 `APP_TIMEZONE` 对应的时区,无应用上下文时回退中国时区.

        """
        if has_app_context():
            name = current_app.config.get("APP_TIMEZONE")
            if name:
                return ZoneInfo(str(name))
        return CHINA_TZ

    @staticmethod
    def now_in_app_timezone() -> datetime:
        """获取应用时区下的当前时间."""
        return datetime.now(TimeUtils.app_timezone())

    @staticmethod
    def today() -> date:
        """获取应用时区下的当前日期."""
        return TimeUtils.now_in_app_timezone().date()


time_utils = TimeUtils()
