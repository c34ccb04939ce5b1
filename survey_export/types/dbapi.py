"""COPY 导出所需的最小 DB-API 协议定义(以 psycopg 3 为准)."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Protocol


class PGResultHandle(Protocol):
    """libpq PGresult 句柄协议."""

    def clear(self) -> None:  # pragma: no cover - protocol
        """释放句柄关联的内存."""
        ...


class CopyOutStream(Protocol):
    """COPY TO STDOUT 数据流协议,迭代结束即数据流结束."""

    def __iter__(self) -> Iterator[bytes | memoryview]:  # pragma: no cover - protocol
        """逐块返回原始字节."""
        ...


class CopyCursor(Protocol):
    """支持 COPY 的游标协议."""

    @property
    def pgresult(self) -> PGResultHandle | None:  # pragma: no cover - protocol
        """最近一次执行的结果句柄."""
        ...

    def copy(self, statement: str) -> AbstractContextManager[CopyOutStream]:  # pragma: no cover - protocol
        """开启 COPY 操作."""
        ...

    def close(self) -> None:  # pragma: no cover - protocol
        """关闭游标."""
        ...


class CopyConnection(Protocol):
    """可创建 COPY 游标的连接协议."""

    def cursor(self) -> CopyCursor:  # pragma: no cover - protocol
        """获取游标."""
        ...


__all__ = ["CopyConnection", "CopyCursor", "CopyOutStream", "PGResultHandle"]
