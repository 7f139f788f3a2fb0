"""配置值编解码：按 ``config_type`` 校验并解析以文本存储的配置值。"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, Dict

from refdata.core.enums import ConfigTypeEnum
from refdata.core.exceptions import ValidationError

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}


def _decode_text(raw: str) -> str:
    return raw


def _decode_number(raw: str) -> int | float:
    trimmed = raw.strip()
    if _INTEGER_PATTERN.fullmatch(trimmed):
        return int(trimmed)
    try:
        number = float(trimmed)
    except ValueError as exc:
        raise ValueError(f"'{raw}' 不是合法数字") from exc
    if not math.isfinite(number):
        raise ValueError(f"'{raw}' 不是有限数字")
    return number


def _decode_boolean(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"'{raw}' 不是合法布尔值（true/false/1/0）")


def _decode_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"不是合法 JSON：{exc.msg}") from exc


def _decode_array(raw: str) -> list:
    decoded = _decode_json(raw)
    if not isinstance(decoded, list):
        raise ValueError("不是 JSON 数组")
    return decoded


_DECODERS: Dict[ConfigTypeEnum, Callable[[str], Any]] = {
    ConfigTypeEnum.TEXT: _decode_text,
    ConfigTypeEnum.NUMBER: _decode_number,
    ConfigTypeEnum.BOOLEAN: _decode_boolean,
    ConfigTypeEnum.JSON: _decode_json,
    ConfigTypeEnum.ARRAY: _decode_array,
}


def decode_config_value(raw: str, config_type: ConfigTypeEnum | str) -> Any:
    """将文本值解析为 ``config_type`` 声明的类型，失败抛出 ``ValidationError``。"""
    try:
        kind = ConfigTypeEnum(config_type)
    except ValueError as exc:
        raise ValidationError(f"不支持的配置类型：{config_type}") from exc
    if raw is None:
        raise ValidationError("配置值不能为空")
    try:
        return _DECODERS[kind](raw)
    except ValueError as exc:
        raise ValidationError(f"配置值无法按 {kind.value} 类型解析：{exc}") from exc
