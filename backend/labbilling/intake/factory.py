"""
工厂函数：根据来源字符串返回对应 Adapter。

新增来源只需：
  1. 在 adapters.py 新建 Adapter 类
  2. 在下面的注册表加一行
  不需要修改任何业务代码。
"""

from ..exceptions import ValidationError
from .base import BaseIntakeAdapter

DEFAULT_SOURCE = "clinic_record"


# key: source 字符串（来自 HTTP Header X-Prescription-Source）
# value: Adapter 类（未实例化）
def _build_registry() -> dict[str, type[BaseIntakeAdapter]]:
    # 延迟导入，避免循环依赖
    from .adapters import ClinicRecordAdapter, StructuredAdapter

    return {
        "clinic_record": ClinicRecordAdapter,
        "structured":    StructuredAdapter,
    }


def get_adapter(source: str, raw_body: bytes | str | dict) -> BaseIntakeAdapter:
    """
    Return an instantiated adapter for the given source.

    Args:
        source:       source identifier, e.g. "clinic_record", "structured"
        raw_body:     raw request body (bytes / str) or an already-decoded dict

    Raises:
        ValidationError: unknown source
    """
    registry = _build_registry()
    adapter_cls = registry.get(source or DEFAULT_SOURCE)

    if adapter_cls is None:
        raise ValidationError(
            message=f"Unknown prescription source: {source!r}.",
            code="UNKNOWN_SOURCE",
            detail={"known_sources": list(registry.keys())},
        )

    return adapter_cls(raw_body=raw_body)
