"""通用模型：分页结构与读模型基类。"""

from datetime import datetime
from enum import Enum
from typing import Any, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic import ValidationError as PydanticValidationError

from refdata.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from refdata.core.exceptions import ValidationError
from refdata.core.timezone import format_datetime

T = TypeVar("T")


class PageData(BaseModel, Generic[T]):
    """分页列表数据。"""

    total: int
    page: int
    size: int
    list: List[T]


class DetailModel(BaseModel):
    """从 ORM 实体构建的读模型，时间字段序列化为本地时区字符串。"""

    model_config = ConfigDict(from_attributes=True)

    create_time: Optional[datetime] = None

    @field_serializer("create_time", "update_time", "publish_time", "send_time", check_fields=False)
    def _serialize_time(self, value: Optional[datetime]) -> Optional[str]:
        return format_datetime(value)


def normalize_page(page: int = 1, size: int = DEFAULT_PAGE_SIZE) -> Tuple[int, int, int]:
    """返回 ``(page, size, skip)``，页码至少为 1，每页数量限制在 1~200。"""
    normalized_page = max(int(page or 1), 1)
    normalized_size = max(min(int(size or DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE), 1)
    return normalized_page, normalized_size, (normalized_page - 1) * normalized_size


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_payload(model_cls: Type[ModelT], **data: Any) -> ModelT:
    """构建请求模型，校验失败时转换为业务层的 ``ValidationError``。"""
    try:
        return model_cls(**data)
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in err.get("loc", ())), "msg": err.get("msg")}
            for err in exc.errors()
        ]
        first = errors[0] if errors else {"field": "", "msg": ""}
        field, message = first["field"], first["msg"]
        raise ValidationError(f"参数校验失败：{field} {message}".strip(), data=errors) from exc


EnumT = TypeVar("EnumT", bound=Enum)


def enum_value(enum_cls: Type[EnumT], value: Any) -> Optional[str]:
    """将可选的过滤参数规范为枚举值字符串，非法取值抛出 ``ValidationError``。"""
    if value is None:
        return None
    try:
        return enum_cls(value).value
    except ValueError as exc:
        allowed = "/".join(member.value for member in enum_cls)
        raise ValidationError(f"取值 {value!r} 不合法，可选：{allowed}") from exc
