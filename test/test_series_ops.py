import math

import pyarrow as pa
import pytest

from colframe import Series
from colframe.errors import CastError, DivisionByZero, ShapeError, TypeMismatch

LEFT_VALUES = [1, None, 3, -4, None, 6]
RIGHT_VALUES = [10, 20, None, 40, None, -60]


@pytest.mark.parametrize(
    "op,expected",
    [
        (lambda a, b: a + b, [11, None, None, 36, None, -54]),
        (lambda a, b: a - b, [-9, None, None, -44, None, 66]),
        (lambda a, b: a * b, [10, None, None, -160, None, -360]),
    ],
)
def test_arithmetic_null_propagation(op, expected):
    left = Series("left", LEFT_VALUES)
    right = Series("right", RIGHT_VALUES)
    result = op(left, right)
    assert result.to_pylist() == expected
    for idx in range(len(left)):
        both_valid = left.get(idx) is not None and right.get(idx) is not None
        assert (result.get(idx) is not None) == both_valid


def test_arithmetic_with_all_null_column():
    nulls = Series("nulls", [None, None])
    numbers = Series("numbers", [1, 2])
    result = nulls + numbers
    assert result.dtype == pa.int64()
    assert result.to_pylist() == [None, None]
    assert (numbers * nulls).to_pylist() == [None, None]
    assert (numbers / nulls).to_pylist() == [None, None]
    assert (nulls - 1).to_pylist() == [None, None]
    assert (nulls + nulls).to_pylist() == [None, None]


def test_arithmetic_all_null_column_with_strings():
    with pytest.raises(TypeMismatch):
        Series("nulls", [None, None]) + Series("names", ["a", "b"])


def test_arithmetic_keeps_result_name():
    result = Series("left", [1, 2]) + Series("right", [3, 4])
    assert result.name == "left"


def test_arithmetic_scalar_keeps_dtype():
    series = Series("values", [1, 2, None], "int8")
    result = series + 1
    assert result.dtype == pa.int8()
    assert result.to_pylist() == [2, 3, None]


def test_arithmetic_numeric_promotion():
    assert (Series("values", [1, 2]) + 0.5).to_pylist() == [1.5, 2.5]
    assert (Series("values", [1, 2]) + 0.5).dtype == pa.float64()
    result = Series("a", [1, 2], "int32") + Series("b", [1, 2], "int64")
    assert result.dtype == pa.int64()


def test_arithmetic_reflected():
    series = Series("values", [1, 2, None])
    assert (10 - series).to_pylist() == [9, 8, None]
    assert (2 * series).to_pylist() == [2, 4, None]
    assert (3 + series).to_pylist() == [4, 5, None]


def test_arithmetic_length_mismatch():
    with pytest.raises(ShapeError):
        Series("a", [1, 2, 3]) + Series("b", [1, 2])


@pytest.mark.parametrize(
    "left,right",
    [
        (Series("a", ["x", "y"]), 1),
        (Series("a", [1, 2]), "x"),
        (Series("a", [1, 2]), Series("b", ["x", "y"])),
        (Series("a", [True, False]), 1),
    ],
)
def test_arithmetic_requires_numbers(left, right):
    with pytest.raises(TypeMismatch):
        left + right


def test_integer_division_truncates():
    series = Series("values", [7, -7, None])
    assert (series / 2).to_pylist() == [3, -3, None]
    assert (series / 2).dtype == pa.int64()


def test_integer_division_by_zero():
    with pytest.raises(DivisionByZero):
        Series("values", [1, 2]) / 0
    with pytest.raises(DivisionByZero):
        Series("values", [1, 2]) / Series("divisor", [1, 0])
    with pytest.raises(ZeroDivisionError):
        10 / Series("values", [1, 0])


def test_integer_division_by_zero_on_null_dividend():
    result = Series("values", [None, 8]) / Series("divisor", [0, 2])
    assert result.to_pylist() == [None, 4]


def test_float_division_follows_ieee():
    result = Series("values", [1.0, -1.0, 0.0]) / 0.0
    values = result.to_pylist()
    assert values[0] == math.inf
    assert values[1] == -math.inf
    assert math.isnan(values[2])


def test_comparison_with_scalar():
    series = Series("values", [1, None, 3])
    assert (series > 1).to_pylist() == [False, False, True]
    assert (series >= 1).to_pylist() == [True, False, True]
    assert (series < 3).to_pylist() == [True, False, False]
    assert (series <= 3).to_pylist() == [True, False, True]
    assert (series == 3).to_pylist() == [False, False, True]
    assert (series != 3).to_pylist() == [True, False, False]


def test_comparison_with_null_is_false():
    series = Series("values", [1, None, 3])
    assert (series == None).to_pylist() == [False, False, False]  # noqa: E711
    assert (series != None).to_pylist() == [False, False, False]  # noqa: E711


def test_comparison_between_series():
    left = Series("left", [1, 5, None, 2])
    right = Series("right", [2, 5, 1, None])
    assert left.lt(right).to_pylist() == [True, False, False, False]
    assert left.eq(right).to_pylist() == [False, True, False, False]
    assert left.ge(right).to_pylist() == [False, True, False, False]


def test_comparison_mixed_numbers():
    assert (Series("values", [1, 2]) < 1.5).to_pylist() == [True, False]


def test_comparison_strings():
    assert (Series("values", ["a", "b", None]) == "b").to_pylist() == [False, True, False]
    assert (Series("values", ["a", "b"]) > "a").to_pylist() == [False, True]


def test_comparison_incompatible_types():
    with pytest.raises(TypeMismatch):
        Series("values", ["a", "b"]) > 1
    with pytest.raises(TypeMismatch):
        Series("values", [1, 2]) == Series("other", ["a", "b"])


def test_masks_combine():
    series = Series("values", [1, 2, 3, None])
    between = (series > 1) & (series < 3)
    assert between.to_pylist() == [False, True, False, False]
    outside = (series < 2) | (series > 2)
    assert outside.to_pylist() == [True, False, True, False]
    assert (~between).to_pylist() == [True, False, True, True]


def test_masks_require_booleans():
    with pytest.raises(TypeMismatch):
        Series("values", [1, 2]) & Series("mask", [True, False])
    with pytest.raises(TypeMismatch):
        ~Series("values", [1, 2])


def test_series_is_not_hashable():
    with pytest.raises(TypeError):
        hash(Series("values", [1]))


@pytest.mark.parametrize(
    "values,source,target",
    [
        ([1, 2, None, 127], "int64", "int8"),
        ([0, 255, None], "int64", "uint8"),
        ([1, 2, None], "int32", "float32"),
        ([1.0, -2.0, None], "float64", "int16"),
        ([0.5, 1.25, None], "float64", "float32"),
        ([True, False, None], "bool", "int8"),
    ],
)
def test_cast_round_trip(values, source, target):
    series = Series("values", values, source)
    converted = series.cast(target)
    assert converted.dtype == pa.type_for_alias(target)
    restored = converted.cast(source)
    assert restored.equals(series)


@pytest.mark.parametrize(
    "values,source,target",
    [
        ([300], "int64", "uint8"),
        ([-1], "int64", "uint32"),
        ([2.5], "float64", "int64"),
        ([math.nan], "float64", "int64"),
        ([0.1], "float64", "float32"),
        ([2**53 + 1], "int64", "float64"),
        (["abc"], "string", "int64"),
        ([2, 0], "int64", "bool"),
        ([0.5], "float64", "bool"),
        ([math.nan], "float64", "bool"),
    ],
)
def test_cast_not_representable(values, source, target):
    with pytest.raises(CastError):
        Series("values", values, source).cast(target)


def test_cast_numbers_to_bool():
    assert Series("values", [1, 0, None]).cast("bool").to_pylist() == [True, False, None]
    assert Series("values", [0.0, 1.0]).cast("bool").to_pylist() == [False, True]


def test_cast_strings():
    series = Series("values", ["12", None, "-3"])
    assert series.cast("int64").to_pylist() == [12, None, -3]
    assert Series("values", [1, None]).cast("string").to_pylist() == ["1", None]


def test_cast_same_type_is_a_copy():
    series = Series("values", [1, 2])
    converted = series.cast("int64")
    assert converted is not series
    assert converted.equals(series)


@pytest.mark.parametrize(
    "descending,expected",
    [(False, [1, 1, 3, 4, 5]), (True, [5, 4, 3, 1, 1])],
)
def test_series_sort(descending, expected):
    series = Series("values", [3, 1, 4, 1, 5])
    series.sort(descending=descending)
    assert series.to_pylist() == expected
    assert series.is_sorted(descending=descending)


@pytest.mark.parametrize("descending", [False, True])
def test_series_sort_nulls_last(descending):
    series = Series("values", [None, 2, None, 1, 3])
    series.sort(descending=descending)
    expected = [3, 2, 1] if descending else [1, 2, 3]
    assert series.to_pylist() == expected + [None, None]
    assert series.is_sorted(descending=descending)


def test_series_sort_nan_before_nulls():
    series = Series("values", [None, math.nan, 2.0, 1.0])
    series.sort()
    values = series.to_pylist()
    assert values[:2] == [1.0, 2.0]
    assert math.isnan(values[2])
    assert values[3] is None
    assert series.is_sorted()


def test_series_argsort_is_stable():
    series = Series("values", ["b", "a", "b", "a"])
    assert series.argsort().to_pylist() == [1, 3, 0, 2]
    assert series.argsort(descending=True).to_pylist() == [0, 2, 1, 3]


@pytest.mark.parametrize(
    "values,descending,expected",
    [
        ([1, 2, 2, 3], False, True),
        ([1, 3, 2], False, False),
        ([3, 2, 2, 1], True, True),
        ([3, 2, 2, 1], False, False),
        ([1, None, 2], False, False),
        ([1, 2, None], False, True),
        ([], False, True),
        ([None, None], False, True),
    ],
)
def test_series_is_sorted(values, descending, expected):
    series = Series("values", values, "int64")
    assert series.is_sorted(descending=descending) is expected
