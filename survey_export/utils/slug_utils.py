"""文件名/URL 安全的 slug 生成工具."""

from __future__ import annotations

import re
import unicodedata

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\-_]+")
_REPEATED_SEPARATORS = re.compile(r"-{2,}")


def parameterize(value: str | None) -> str:
    """将可读名称转换为小写 slug.

    先做 NFKD 分解并去除无法转写为 ASCII 的字符,再把连续的非字母数字字符
    替换为单个连字符,去掉首尾连字符.

    Args:
        value: 原始名称.

    Returns:
        str: slug,输入无可用字符时返回空字符串.

    Example:
        >>> parameterize("Q3 Survey: Café & Co.")
        'q3-survey-cafe-co'

    """
    if not value:
        return ""
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG_CHARS.sub("-", ascii_value.lower())
    slug = _REPEATED_SEPARATORS.sub("-", slug).strip("-")
    return slug
