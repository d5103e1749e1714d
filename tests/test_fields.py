import pytest

from pacesim.fields import (
    ConfigField,
    get_bool_field,
    get_field,
    set_bool_field,
    set_field,
)


def test_bit_ranges_from_layout():
    assert ConfigField.OP_CODE.bit_range() == (30, 35)
    assert ConfigField.ROUTER_SWITCH_CONFIG.bit_range() == (0, 21)
    assert ConfigField.IMMEDIATE.bit_range() == (35, 51)


def test_predicate_bit_is_top_bit():
    assert set_field(0, ConfigField.PREDICATE_BIT, 1) == 1 << 63


@pytest.mark.parametrize("field", list(ConfigField))
def test_round_trip_max_value(field):
    start, end = field.bit_range()
    top = (1 << (end - start)) - 1
    code = set_field(0, field, top)
    assert get_field(code, field) == top
    assert code == top << start


def test_set_field_preserves_other_fields():
    code = set_field(0, ConfigField.ROUTER_SWITCH_CONFIG, 123456)
    code = set_field(code, ConfigField.OP_CODE, 30)
    code = set_field(code, ConfigField.ROUTER_BYPASS, 9)
    assert get_field(code, ConfigField.ROUTER_SWITCH_CONFIG) == 123456
    assert get_field(code, ConfigField.OP_CODE) == 30
    assert get_field(code, ConfigField.ROUTER_BYPASS) == 9


def test_set_field_overwrites_previous_value():
    code = set_field(0, ConfigField.OP_CODE, 31)
    code = set_field(code, ConfigField.OP_CODE, 1)
    assert get_field(code, ConfigField.OP_CODE) == 1


def test_set_field_value_too_large():
    with pytest.raises(ValueError):
        set_field(0, ConfigField.OP_CODE, 32)


def test_set_field_negative_value():
    with pytest.raises(ValueError):
        set_field(0, ConfigField.OP_CODE, -1)


def test_bool_field_round_trip():
    code = set_bool_field(0, ConfigField.ALU_UPDATE_RES_BIT, True)
    assert get_bool_field(code, ConfigField.ALU_UPDATE_RES_BIT) is True
    code = set_bool_field(code, ConfigField.ALU_UPDATE_RES_BIT, False)
    assert get_bool_field(code, ConfigField.ALU_UPDATE_RES_BIT) is False
    assert code == 0


def test_bool_field_rejects_multi_bit_field():
    with pytest.raises(ValueError, match="single bit"):
        get_bool_field(0, ConfigField.OP_CODE)
    with pytest.raises(ValueError, match="single bit"):
        set_bool_field(0, ConfigField.IMMEDIATE, True)