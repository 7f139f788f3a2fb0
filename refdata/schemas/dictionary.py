"""系统字典相关的请求与读模型。"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from refdata.core.enums import EnabledStatusEnum
from refdata.schemas.common import DetailModel

_TYPE_CODE_PATTERN = re.compile(r"^[a-z0-9_]+$")


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _require_text(value: Optional[str], message: str) -> Optional[str]:
    """更新时未传入保持 ``None``；传入则去除首尾空白且不能为空。"""
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(message)
    return trimmed


# ---------------------------------------------------------------------------
# 字典类型
# ---------------------------------------------------------------------------


class DictTypeCreate(BaseModel):
    """新建字典类型。"""

    name: str = Field(..., min_length=1, max_length=32, description="字典名称")
    code: str = Field(..., min_length=1, max_length=32, description="字典编码，需唯一")
    status: EnabledStatusEnum = EnabledStatusEnum.ENABLED
    remark: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("字典名称不能为空")
        return value

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        value = value.strip()
        if not _TYPE_CODE_PATTERN.fullmatch(value):
            raise ValueError("字典编码仅支持小写字母、数字与下划线")
        return value

    @field_validator("remark")
    @classmethod
    def _normalize_remark(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value)


class DictTypeUpdate(BaseModel):
    """更新字典类型，未传入的字段保持不变。"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=32)
    code: Optional[str] = Field(default=None, min_length=1, max_length=32)
    status: Optional[EnabledStatusEnum] = None
    remark: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value, "字典名称不能为空")

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not _TYPE_CODE_PATTERN.fullmatch(value):
            raise ValueError("字典编码仅支持小写字母、数字与下划线")
        return value


class DictTypeDetail(DetailModel):
    id: int
    name: str
    code: str
    status: EnabledStatusEnum
    remark: Optional[str] = None
    update_time: Optional[datetime] = None


# ---------------------------------------------------------------------------
# 字典项
# ---------------------------------------------------------------------------


class DictDataCreate(BaseModel):
    """新增字典项；``type_code`` 由服务端根据 ``type_id`` 派生，不接受传入。"""

    label: str = Field(..., min_length=1, max_length=64, description="显示标签")
    value: str = Field(..., min_length=1, max_length=64, description="数据值")
    sort_order: int = Field(default=0, ge=0, description="排序值，越小越靠前")
    type_id: int
    is_default: bool = False
    status: EnabledStatusEnum = EnabledStatusEnum.ENABLED
    remark: Optional[str] = None

    @model_validator(mode="after")
    def _normalize_texts(self) -> "DictDataCreate":
        self.label = self.label.strip()
        self.value = self.value.strip()
        if not self.label:
            raise ValueError("显示标签不能为空")
        if not self.value:
            raise ValueError("数据值不能为空")
        self.remark = _strip_optional(self.remark)
        return self


class DictDataUpdate(BaseModel):
    label: Optional[str] = Field(default=None, min_length=1, max_length=64)
    value: Optional[str] = Field(default=None, min_length=1, max_length=64)
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_default: Optional[bool] = None
    status: Optional[EnabledStatusEnum] = None
    remark: Optional[str] = None

    @field_validator("label")
    @classmethod
    def _normalize_label(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value, "显示标签不能为空")

    @field_validator("value")
    @classmethod
    def _normalize_value(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value, "数据值不能为空")


class DictDataDetail(DetailModel):
    id: int
    label: str
    value: str
    sort_order: int
    type_id: int
    type_code: str
    is_default: bool
    status: EnabledStatusEnum
    remark: Optional[str] = None
    update_time: Optional[datetime] = None
