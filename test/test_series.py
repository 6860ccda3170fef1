import math

import pyarrow as pa
import pytest

from colframe import Series, dtypes
from colframe.errors import (
    IndexOutOfRange,
    LengthMismatch,
    TypeMismatch,
    UnsupportedAggregation,
)


@pytest.mark.parametrize(
    "values,dtype,expected_dtype",
    [
        ([1, 2, 3], None, pa.int64()),
        ([1.5, None], None, pa.float64()),
        (["a", None, "c"], None, pa.string()),
        ([True, False], None, pa.bool_()),
        ([None, None], None, pa.null()),
        ([1, 2, 3], "int8", pa.int8()),
        ([1, 2, 3], pa.uint16(), pa.uint16()),
        ([1, None], "float32", pa.float32()),
    ],
)
def test_series_dtype(values, dtype, expected_dtype):
    series = Series("values", values, dtype)
    assert series.dtype == expected_dtype
    assert series.to_pylist() == values


def test_series_from_arrow_array():
    array = pa.array([1, None, 3], type=pa.int32())
    series = Series("values", array)
    assert series.dtype == pa.int32()
    assert series.to_arrow() is array


def test_series_from_large_string():
    series = Series("values", pa.array(["a", "b"], type=pa.large_string()))
    assert series.dtype == dtypes.string


def test_series_explicit_dtype_of_array_mismatch():
    with pytest.raises(TypeMismatch):
        Series("values", pa.array([1, 2]), "int8")


@pytest.mark.parametrize("values", [[1, "a"], [[1, 2], [3]], [2**70]])
def test_series_invalid_values(values):
    with pytest.raises(TypeMismatch):
        Series("values", values)


def test_series_value_out_of_dtype_range():
    with pytest.raises(TypeMismatch):
        Series("values", [1, 300], "uint8")


def test_series_unknown_dtype():
    with pytest.raises(TypeMismatch):
        Series("values", [1], "not_a_type")


def test_series_from_options():
    series = Series.from_options("values", [1, None, 3], "int16")
    assert series.dtype == pa.int16()
    assert series.null_count == 1
    assert series.to_pylist() == [1, None, 3]


def test_series_new_empty_and_append():
    series = Series.new_empty("values", "int32")
    assert len(series) == 0
    assert series.dtype == pa.int32()

    series.append(1)
    series.append(None)
    series.append(3)
    assert series.to_pylist() == [1, None, 3]
    assert series.dtype == pa.int32()


def test_series_append_wrong_type():
    series = Series.new_empty("values", "int32")
    with pytest.raises(TypeMismatch):
        series.append("hello")


def test_series_get():
    series = Series("values", [10, None, 30])
    assert series.get(0) == 10
    assert series.get(1) is None
    assert series[2] == 30


@pytest.mark.parametrize("index", [-1, 3, 100])
def test_series_get_out_of_range(index):
    series = Series("values", [10, None, 30])
    with pytest.raises(IndexOutOfRange):
        series.get(index)
    with pytest.raises(IndexError):
        series[index]


def test_series_iteration():
    series = Series("values", [1, None, 3])
    assert list(series) == [1, None, 3]


def test_series_iter_valid_is_restartable():
    series = Series("values", [None, 1, None, 3])
    assert list(series.iter_valid()) == [1, 3]
    assert list(series.iter_valid()) == [1, 3]


def test_series_rename_and_with_name():
    series = Series("values", [1, 2])
    renamed = series.with_name("other")
    assert renamed.name == "other"
    assert series.name == "values"

    series.rename("changed")
    assert series.name == "changed"
    assert renamed.name == "other"


def test_series_equals():
    assert Series("a", [1, None]).equals(Series("a", [1, None]))
    assert not Series("a", [1, None]).equals(Series("b", [1, None]))
    assert not Series("a", [1, None]).equals(Series("a", [1, 2]))
    assert not Series("a", [1, 2]).equals(Series("a", [1, 2], "int8"))
    assert not Series("a", [1, 2]).equals([1, 2])


def test_series_head_tail_slice():
    series = Series("values", [1, 2, 3, 4, 5])
    assert series.head(2).to_pylist() == [1, 2]
    assert series.tail(2).to_pylist() == [4, 5]
    assert series.head(10).to_pylist() == [1, 2, 3, 4, 5]
    assert series.tail(0).to_pylist() == []
    assert series.slice(1, 3).to_pylist() == [2, 3, 4]
    assert series.slice(3).to_pylist() == [4, 5]


def test_series_take():
    series = Series("values", ["a", "b", "c"])
    assert series.take([2, 0, None]).to_pylist() == ["c", "a", None]


def test_series_take_out_of_range():
    series = Series("values", ["a", "b", "c"])
    with pytest.raises(IndexOutOfRange) as excinfo:
        series.take([0, 5])
    assert excinfo.value.index == 5


def test_series_filter():
    series = Series("values", [1, 2, 3, 4])
    assert series.filter([True, None, False, True]).to_pylist() == [1, 4]
    assert series.filter(series > 2).to_pylist() == [3, 4]


def test_series_filter_invalid_mask():
    series = Series("values", [1, 2, 3])
    with pytest.raises(LengthMismatch):
        series.filter([True, False])
    with pytest.raises(TypeMismatch):
        series.filter(Series("mask", [1, 0, 1]))


def test_series_null_masks():
    series = Series("values", [1, None, 3])
    assert series.is_null().to_pylist() == [False, True, False]
    assert series.is_not_null().to_pylist() == [True, False, True]
    assert series.null_count == 1


def test_series_fill_null_leaves_source_unchanged():
    series = Series("values", [1, None, 3])
    filled = series.fill_null(0)
    assert filled.to_pylist() == [1, 0, 3]
    assert series.to_pylist() == [1, None, 3]


def test_series_fill_null_inplace():
    series = Series("values", ["a", None])
    assert series.fill_null("z", inplace=True) is None
    assert series.to_pylist() == ["a", "z"]


def test_series_fill_null_wrong_type():
    series = Series("values", [1, None, 3])
    with pytest.raises(TypeMismatch):
        series.fill_null("zero")


def test_series_float_helpers():
    series = Series("values", [1.0, math.nan, math.inf, None])
    assert series.is_nan().to_pylist() == [False, True, False, False]
    assert series.is_infinite().to_pylist() == [False, False, True, False]


@pytest.mark.parametrize("method", ["is_nan", "is_infinite"])
def test_series_float_helpers_require_floats(method):
    with pytest.raises(TypeMismatch):
        getattr(Series("values", [1, 2]), method)()


def test_series_reductions():
    series = Series("values", [4, None, 1, 7])
    assert series.sum() == 12
    assert series.min() == 1
    assert series.max() == 7
    assert series.mean() == 4.0
    assert series.count() == 3


def test_series_reductions_all_null():
    series = Series("values", [None, None], "int64")
    assert series.sum() is None
    assert series.min() is None
    assert series.mean() is None
    assert series.count() == 0


def test_series_reductions_null_dtype():
    series = Series("values", [None, None])
    assert series.dtype == pa.null()
    assert series.sum() is None
    assert series.mean() is None
    assert series.min() is None
    assert series.max() is None


def test_series_string_min_max():
    series = Series("values", ["pear", None, "apple"])
    assert series.min() == "apple"
    assert series.max() == "pear"


@pytest.mark.parametrize("method", ["sum", "mean"])
def test_series_unsupported_reduction(method):
    with pytest.raises(UnsupportedAggregation):
        getattr(Series("values", ["a", "b"]), method)()


def test_series_all_any():
    assert Series("mask", [True, None, True]).all()
    assert not Series("mask", [True, False]).all()
    assert Series("mask", [False, True]).any()
    assert not Series("mask", [False, None]).any()
    with pytest.raises(TypeMismatch):
        Series("values", [1, 2]).all()


def test_series_apply():
    series = Series("values", [1, None, 3])
    result = series.apply(lambda v: None if v is None else v * 10)
    assert result.to_pylist() == [10, None, 30]
    assert result.name == "values"


def test_series_apply_with_dtype():
    series = Series("values", [1, 2])
    result = series.apply(str, dtype="string")
    assert result.dtype == pa.string()
    assert result.to_pylist() == ["1", "2"]


@pytest.mark.parametrize("max_workers", [1, 2, 3, 8, 64])
def test_series_par_apply_equals_apply(max_workers):
    series = Series("values", [v if v % 7 else None for v in range(100)])

    def double(v):
        return None if v is None else v * 2

    expected = series.apply(double)
    result = series.par_apply(double, max_workers=max_workers)
    assert result.equals(expected)


def test_series_par_apply_propagates_errors():
    series = Series("values", [1, 0, 2, 3])
    with pytest.raises(ZeroDivisionError):
        series.par_apply(lambda v: 1 / v, max_workers=2)


def test_series_str_and_repr():
    series = Series("values", [1.5, None])
    assert str(series) == "values\n------\n1.50\nnull"
    assert repr(series) == "Series(name='values', dtype=double, length=2)"
