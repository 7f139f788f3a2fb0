from __future__ import annotations

import pytest

from refdata.core.enums import ConfigTypeEnum
from refdata.core.exceptions import ValidationError
from refdata.services.config_codec import decode_config_value


def test_numbers_keep_integer_type():
    assert decode_config_value("3600", ConfigTypeEnum.NUMBER) == 3600
    assert isinstance(decode_config_value(" -42 ", "number"), int)
    assert decode_config_value("1e3", "number") == 1000.0


@pytest.mark.parametrize("raw", ["abc", "", "nan", "inf", "1,000"])
def test_non_finite_or_malformed_numbers_are_rejected(raw):
    with pytest.raises(ValidationError):
        decode_config_value(raw, "number")


def test_boolean_is_case_insensitive():
    assert decode_config_value("True", "boolean") is True
    assert decode_config_value("FALSE", "boolean") is False
    assert decode_config_value("1", "boolean") is True
    with pytest.raises(ValidationError):
        decode_config_value("on", "boolean")


def test_json_accepts_any_document_but_array_requires_a_list():
    assert decode_config_value("42", "json") == 42
    assert decode_config_value("null", "json") is None
    assert decode_config_value("[]", "array") == []
    with pytest.raises(ValidationError):
        decode_config_value('"jpg"', "array")


def test_text_is_returned_verbatim():
    assert decode_config_value("  spaced  ", "text") == "  spaced  "


def test_unknown_type_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        decode_config_value("x", "yaml")
    assert "yaml" in exc_info.value.msg
