import pytest

from ume.ds_types import DSType, default_value
from ume.ragged import RaggedRight
from ume.vecn import Vec3


def test_element_lengths():
    assert DSType.VEC3V.element_length() == 3
    assert DSType.VEC3.element_length() == 3
    assert DSType.INTV.element_length() == 1
    assert DSType.DBLV.element_length() == 1


def test_none_has_no_element_length():
    with pytest.raises(ValueError):
        DSType.NONE.element_length()


def test_vector_defaults_are_fresh_empty_lists():
    first = default_value(DSType.INTV)
    second = default_value(DSType.INTV)
    assert first == []
    first.append(1)
    assert second == []


def test_scalar_defaults():
    assert default_value(DSType.INT) == 0
    assert default_value(DSType.DBL) == 0.0
    assert default_value(DSType.VEC3) == Vec3.filled(0.0)


def test_ragged_defaults_are_empty():
    for kind in (DSType.INTRR, DSType.DBLRR, DSType.VEC3RR):
        value = default_value(kind)
        assert value == RaggedRight()
        assert len(value) == 0


def test_none_default():
    assert default_value(DSType.NONE) is None