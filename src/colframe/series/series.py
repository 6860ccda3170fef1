"""The Series object itself."""

from typing import Any, Callable, Iterator, Self, Sequence

import pyarrow as pa
import pyarrow.compute as pc

from .. import dtypes
from ..compute.aggregate import (
    CountAggregation,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    SumAggregation,
    aggregate_array,
)
from ..compute.filtering import mask_array
from ..compute.parallel import parallel_map
from ..compute.sorting import sort_indices
from ..errors import (
    CastError,
    DivisionByZero,
    IndexOutOfRange,
    ShapeError,
    TypeMismatch,
)
from ..utils.tabulate import tabulate
from .strings import StringAccessor

ARROW_ERRORS = (pa.ArrowInvalid, pa.ArrowTypeError, pa.ArrowNotImplementedError)


def _to_arrow_array(
    values: "Series | pa.Array | pa.ChunkedArray | Sequence[Any]",
    dtype: pa.DataType | str | None,
) -> pa.Array:
    """Convert the values provided to a Series into the Arrow array storing them."""
    if dtype is not None:
        dtype = dtypes.resolve(dtype)
    if isinstance(values, Series):
        values = values.to_arrow()
    if isinstance(values, pa.ChunkedArray):
        values = values.combine_chunks()

    if isinstance(values, pa.Array):
        try:
            values.validate()
        except pa.ArrowInvalid as e:
            raise ShapeError(f"Invalid column data: {e}") from e
        if dtype is not None and values.type != dtype:
            raise TypeMismatch(f"Data is {values.type}, not {dtype}, use cast() to convert it")
        array = values
    else:
        try:
            array = pa.array(list(values), type=dtype)
        except (*ARROW_ERRORS, TypeError, ValueError, OverflowError) as e:
            raise TypeMismatch(
                f"Unable to store values as {dtype or 'a single data type'}: {e}"
            ) from e

    if array.type == pa.large_string():
        array = array.cast(dtypes.string)
    dtypes.resolve(array.type)
    return array


def _arithmetic_type(dtype: pa.DataType) -> bool:
    return dtypes.is_numeric(dtype) or dtypes.is_null(dtype)


def _out_of_range_index(indices: pa.Array, length: int) -> int | None:
    for idx in indices.to_pylist():
        if idx is not None and not 0 <= idx < length:
            return idx
    return None


class Series:
    """A named column of values all of the same data type.

    Values are stored in a :class:`pyarrow.Array`, which keeps
    a contiguous buffer with the values and a parallel validity
    bitmap telling which values are null. The data type of the
    column is known at runtime through :attr:`dtype`.

    >>> s = Series("values", [3, None, 1])
    >>> s.dtype
    DataType(int64)
    >>> s.get(1) is None
    True
    >>> (s + 1).to_pylist()
    [4, None, 2]
    >>> (s > 2).to_pylist()
    [True, False, False]
    """

    def __init__(
        self,
        name: str,
        values: "Series | pa.Array | Sequence[Any] | None" = None,
        dtype: pa.DataType | str | None = None,
    ) -> None:
        """
        :param name: The name of the column.
        :param values: The values of the column, ``None`` entries are nulls.
                       Can also be a :class:`pyarrow.Array`.
        :param dtype: The data type of the column, inferred from the
                      values when not provided.
        """
        self.name = name
        self._array = _to_arrow_array([] if values is None else values, dtype)

    @classmethod
    def from_options(
        cls, name: str, values: Sequence[Any], dtype: pa.DataType | str | None = None
    ) -> Self:
        """Create a Series from values where ``None`` stands for null."""
        return cls(name, values, dtype)

    @classmethod
    def new_empty(cls, name: str, dtype: pa.DataType | str) -> Self:
        """Create an empty Series of the given type.

        Values can later be added with :meth:`append`.
        """
        return cls(name, [], dtype)

    @property
    def dtype(self) -> pa.DataType:
        """The data type of the values."""
        return self._array.type

    @property
    def null_count(self) -> int:
        return self._array.null_count

    def __len__(self) -> int:
        return len(self._array)

    def __iter__(self) -> Iterator[Any]:
        for scalar in self._array:
            yield scalar.as_py()

    def __getitem__(self, index: int) -> Any:
        return self.get(index)

    def __str__(self) -> str:
        return tabulate(pa.record_batch([self._array], names=[self.name]))

    def __repr__(self) -> str:
        return f"Series(name={self.name!r}, dtype={self.dtype}, length={len(self)})"

    def get(self, index: int) -> Any:
        """Get the value at ``index``, ``None`` if it's null."""
        if not 0 <= index < len(self._array):
            raise IndexOutOfRange(index, len(self._array))
        return self._array[index].as_py()

    def iter_valid(self) -> Iterator[Any]:
        """Iterate over the non-null values, in order."""
        for scalar in self._array:
            if scalar.is_valid:
                yield scalar.as_py()

    def to_pylist(self) -> list[Any]:
        return self._array.to_pylist()

    def to_arrow(self) -> pa.Array:
        """The Arrow array storing the values.

        Arrow arrays are immutable, so the returned array
        can't be used to modify the Series.
        """
        return self._array

    def append(self, value: Any) -> None:
        """Add a value at the end of the Series, ``None`` adds a null."""
        try:
            new_value = pa.array([value], type=self.dtype)
        except (*ARROW_ERRORS, TypeError, ValueError, OverflowError) as e:
            raise TypeMismatch(f"Unable to append {value!r} to a {self.dtype} column") from e
        self._array = pa.concat_arrays([self._array, new_value])

    def rename(self, name: str) -> None:
        self.name = name

    def with_name(self, name: str) -> Self:
        """Copy of the Series with a different name."""
        return self.__class__(name, self._array)

    def copy(self) -> Self:
        return self.__class__(self.name, self._array)

    def equals(self, other: "Series") -> bool:
        """If the two Series have the same name, type and values."""
        if not isinstance(other, Series):
            return False
        return self.name == other.name and self._array.equals(other._array)

    def slice(self, offset: int = 0, length: int | None = None) -> Self:
        """A Series with ``length`` values starting at ``offset``."""
        offset = min(max(offset, 0), len(self))
        return self.__class__(self.name, self._array.slice(offset, length))

    def head(self, n: int = 5) -> Self:
        return self.slice(0, max(n, 0))

    def tail(self, n: int = 5) -> Self:
        n = min(max(n, 0), len(self))
        return self.slice(len(self) - n, n)

    def take(self, indices: pa.Array | Sequence[int | None]) -> Self:
        """A Series made of the values at the provided indices.

        ``None`` indices produce a null value.
        """
        if not isinstance(indices, pa.Array):
            indices = pa.array(list(indices), type=pa.int64())
        try:
            taken = self._array.take(indices)
        except IndexError as e:
            raise IndexOutOfRange(_out_of_range_index(indices, len(self)), len(self)) from e
        return self.__class__(self.name, taken)

    def filter(self, mask: "Series | Sequence[bool | None]") -> Self:
        """Keep only the values where ``mask`` is true."""
        mask = mask_array(mask, len(self))
        return self.__class__(self.name, self._array.filter(mask, null_selection_behavior="drop"))

    # Null handling

    def is_null(self) -> Self:
        """A mask that is true where values are null."""
        return self.__class__(self.name, pc.is_null(self._array))

    def is_not_null(self) -> Self:
        return self.__class__(self.name, pc.is_valid(self._array))

    def fill_null(self, value: Any, inplace: bool = False) -> Self | None:
        """Replace nulls with ``value``.

        Returns a new Series, unless ``inplace`` is true,
        in which case the Series itself is modified.
        """
        try:
            filled = pc.fill_null(self._array, value)
        except (*ARROW_ERRORS, TypeError, ValueError, OverflowError) as e:
            raise TypeMismatch(f"Unable to fill a {self.dtype} column with {value!r}") from e
        if inplace:
            self._array = filled
            return None
        return self.__class__(self.name, filled)

    def is_nan(self) -> Self:
        """A mask that is true where values are NaN, only for floating columns."""
        self._require_float("is_nan")
        return self.__class__(self.name, pc.fill_null(pc.is_nan(self._array), False))

    def is_infinite(self) -> Self:
        self._require_float("is_infinite")
        return self.__class__(self.name, pc.fill_null(pc.is_inf(self._array), False))

    def _require_float(self, opname: str) -> None:
        if not dtypes.is_float(self.dtype):
            raise TypeMismatch(f"{opname} requires a floating point column, got {self.dtype}")

    # Reductions

    def sum(self) -> Any:
        return aggregate_array(SumAggregation(self.name), self._array)

    def mean(self) -> float | None:
        return aggregate_array(MeanAggregation(self.name), self._array)

    def min(self) -> Any:
        return aggregate_array(MinAggregation(self.name), self._array)

    def max(self) -> Any:
        return aggregate_array(MaxAggregation(self.name), self._array)

    def count(self) -> int:
        """Number of non-null values."""
        return aggregate_array(CountAggregation(self.name), self._array)

    def all(self) -> bool:
        """If all non-null values of a boolean column are true."""
        self._require_bool("all")
        return pc.all(self._array).as_py() is not False

    def any(self) -> bool:
        self._require_bool("any")
        return pc.any(self._array).as_py() is True

    def _require_bool(self, opname: str) -> None:
        if not dtypes.is_bool(self.dtype):
            raise TypeMismatch(f"{opname} requires a boolean column, got {self.dtype}")

    # Arithmetic

    def _operand(self, other: Any, opname: str) -> pa.Array | pa.Scalar:
        """Convert the other operand of a binary operation to Arrow."""
        if isinstance(other, Series):
            other = other._array
        if isinstance(other, pa.Array):
            if len(other) != len(self):
                raise ShapeError(
                    f"Cannot {opname} columns of different length: "
                    f"{len(self)} and {len(other)}"
                )
            return other
        if isinstance(other, pa.Scalar):
            return other

        # Python scalars are converted to the type of the column
        # when they are of the same kind and fit in it,
        # so that adding 1 to an int8 column keeps it int8.
        same_kind = (
            other is None
            or (isinstance(other, bool) and dtypes.is_bool(self.dtype))
            or (
                isinstance(other, int)
                and not isinstance(other, bool)
                and dtypes.is_integer(self.dtype)
            )
            or (isinstance(other, float) and dtypes.is_float(self.dtype))
            or (isinstance(other, str) and dtypes.is_string(self.dtype))
        )
        if same_kind:
            try:
                return pa.scalar(other, type=self.dtype)
            except (*ARROW_ERRORS, OverflowError):
                pass
        try:
            return pa.scalar(other)
        except (*ARROW_ERRORS, TypeError, ValueError, OverflowError) as e:
            raise TypeMismatch(f"Unsupported operand {other!r} for {opname}") from e

    def _arithmetic(
        self, other: Any, func: Callable, opname: str, reflected: bool = False
    ) -> Self:
        operand = self._operand(other, opname)
        array = self._array
        if not _arithmetic_type(array.type) or not _arithmetic_type(operand.type):
            raise TypeMismatch(f"Cannot {opname} {self.dtype} and {operand.type}")
        if dtypes.is_null(array.type) and dtypes.is_null(operand.type):
            return self.__class__(self.name, pa.nulls(len(self)))
        # A column of only nulls takes the type of the other operand.
        if dtypes.is_null(array.type):
            array = array.cast(operand.type)
        elif dtypes.is_null(operand.type):
            operand = operand.cast(array.type)
        args = (operand, array) if reflected else (array, operand)
        try:
            result = func(*args)
        except ARROW_ERRORS as e:
            if "divide by zero" in str(e):
                raise DivisionByZero(f"Integer division by zero in column '{self.name}'") from e
            raise TypeMismatch(f"Cannot {opname} {self.dtype} and {operand.type}: {e}") from e
        return self.__class__(self.name, result)

    def _check_integer_division(
        self, dividend: pa.Array | pa.Scalar, divisor: pa.Array | pa.Scalar
    ) -> None:
        """Integer division by zero is an error, unless the result is null anyway."""
        if not (pa.types.is_integer(dividend.type) and pa.types.is_integer(divisor.type)):
            return
        if isinstance(divisor, pa.Scalar):
            if divisor.as_py() != 0:
                return
            has_zero = (
                dividend.is_valid
                if isinstance(dividend, pa.Scalar)
                else dividend.null_count < len(dividend)
            )
        else:
            dividend_valid = (
                pa.scalar(dividend.is_valid)
                if isinstance(dividend, pa.Scalar)
                else pc.is_valid(dividend)
            )
            has_zero = pc.any(pc.and_(dividend_valid, pc.equal(divisor, 0))).as_py()
        if has_zero:
            raise DivisionByZero(f"Integer division by zero in column '{self.name}'")

    def __add__(self, other: Any) -> Self:
        return self._arithmetic(other, pc.add, "add")

    def __radd__(self, other: Any) -> Self:
        return self._arithmetic(other, pc.add, "add", reflected=True)

    def __sub__(self, other: Any) -> Self:
        return self._arithmetic(other, pc.subtract, "subtract")

    def __rsub__(self, other: Any) -> Self:
        return self._arithmetic(other, pc.subtract, "subtract", reflected=True)

    def __mul__(self, other: Any) -> Self:
        return self._arithmetic(other, pc.multiply, "multiply")

    def __rmul__(self, other: Any) -> Self:
        return self._arithmetic(other, pc.multiply, "multiply", reflected=True)

    def __truediv__(self, other: Any) -> Self:
        operand = self._operand(other, "divide")
        if dtypes.is_numeric(self.dtype) and dtypes.is_numeric(operand.type):
            self._check_integer_division(self._array, operand)
        return self._arithmetic(operand, pc.divide, "divide")

    def __rtruediv__(self, other: Any) -> Self:
        operand = self._operand(other, "divide")
        if dtypes.is_numeric(self.dtype) and dtypes.is_numeric(operand.type):
            self._check_integer_division(operand, self._array)
        return self._arithmetic(operand, pc.divide, "divide", reflected=True)

    # Comparisons

    def _compare(self, other: Any, func: Callable, opname: str) -> Self:
        """Compare with a scalar or a Series producing a mask.

        Where either side is null the comparison is false.
        """
        operand = self._operand(other, opname)
        left_type, right_type = self.dtype, operand.type
        if dtypes.null in (left_type, right_type):
            return self.__class__(self.name, pa.array([False] * len(self), type=dtypes.bool_))
        comparable = (
            dtypes.is_numeric(left_type) and dtypes.is_numeric(right_type)
        ) or left_type == right_type
        if not comparable:
            raise TypeMismatch(f"Cannot compare {left_type} with {right_type}")
        return self.__class__(self.name, pc.fill_null(func(self._array, operand), False))

    def gt(self, other: Any) -> Self:
        return self._compare(other, pc.greater, "compare")

    def lt(self, other: Any) -> Self:
        return self._compare(other, pc.less, "compare")

    def ge(self, other: Any) -> Self:
        return self._compare(other, pc.greater_equal, "compare")

    def le(self, other: Any) -> Self:
        return self._compare(other, pc.less_equal, "compare")

    def eq(self, other: Any) -> Self:
        return self._compare(other, pc.equal, "compare")

    def ne(self, other: Any) -> Self:
        return self._compare(other, pc.not_equal, "compare")

    __gt__ = gt
    __lt__ = lt
    __ge__ = ge
    __le__ = le
    __eq__ = eq  # type: ignore[assignment]
    __ne__ = ne  # type: ignore[assignment]
    __hash__ = None  # type: ignore[assignment]

    # Boolean logic on masks

    def _logical(self, other: Any, func: Callable, opname: str) -> Self:
        operand = self._operand(other, opname)
        if not dtypes.is_bool(self.dtype) or not dtypes.is_bool(operand.type):
            raise TypeMismatch(f"Cannot {opname} {self.dtype} and {operand.type}")
        return self.__class__(self.name, func(self._array, operand))

    def __and__(self, other: Any) -> Self:
        return self._logical(other, pc.and_, "and")

    def __or__(self, other: Any) -> Self:
        return self._logical(other, pc.or_, "or")

    def __invert__(self) -> Self:
        self._require_bool("invert")
        return self.__class__(self.name, pc.invert(self._array))

    # Conversion

    def cast(self, dtype: pa.DataType | str) -> Self:
        """Convert the values to another data type.

        Fails with :class:`colframe.errors.CastError` if any value
        can't be represented exactly in the target type.
        Nulls remain null.

        >>> Series("a", [1, 2, None]).cast("float32").to_pylist()
        [1.0, 2.0, None]
        >>> Series("a", [300]).cast("uint8")
        Traceback (most recent call last):
            ...
        colframe.errors.CastError: Cannot cast 'a' from int64 to uint8: ...
        """
        target = dtypes.resolve(dtype)
        if target == self.dtype:
            return self.copy()
        try:
            converted = pc.cast(self._array, target, safe=True)
        except ARROW_ERRORS as e:
            raise CastError(f"Cannot cast '{self.name}' from {self.dtype} to {target}: {e}") from e

        if dtypes.is_numeric(self.dtype) and (dtypes.is_numeric(target) or dtypes.is_bool(target)):
            # Arrow allows some conversions that lose precision,
            # like large integers to floating point or any non zero
            # number to true. Convert values back to make sure
            # they were represented exactly.
            restored = pc.cast(converted, self.dtype, safe=False)
            unchanged = pc.equal(restored, self._array)
            if dtypes.is_float(self.dtype) and dtypes.is_float(target):
                unchanged = pc.or_(unchanged, pc.is_nan(self._array))
            if pc.all(unchanged).as_py() is False:
                raise CastError(
                    f"Cannot cast '{self.name}' from {self.dtype} to {target}: "
                    "values are not exactly representable"
                )
        return self.__class__(self.name, converted)

    # Sorting

    def argsort(self, descending: bool = False) -> pa.Array:
        """The stable permutation that would sort the Series, nulls last."""
        return sort_indices([self._array], [descending])

    def sort(self, descending: bool = False) -> None:
        """Sort the values in place, nulls are placed last."""
        self._array = self._array.take(self.argsort(descending))

    def is_sorted(self, descending: bool = False) -> bool:
        """Check if the values are currently sorted.

        Nulls are expected to follow all the non-null values,
        and NaN values to follow all the numbers.
        """
        valid_count = len(self) - self.null_count
        values = self._array.slice(0, valid_count)
        if values.null_count:
            return False
        if dtypes.is_float(self.dtype):
            nan_count = pc.sum(pc.is_nan(values)).as_py() or 0
            valid_count -= nan_count
            if not pc.all(pc.is_nan(values.slice(valid_count))).as_py():
                return False
            values = values.slice(0, valid_count)
        if valid_count < 2:
            return True
        compare = pc.greater_equal if descending else pc.less_equal
        return pc.all(compare(values.slice(0, valid_count - 1), values.slice(1))).as_py()

    # Mapping

    def apply(
        self, func: Callable[[Any], Any], dtype: pa.DataType | str | None = None
    ) -> "Series":
        """Map each value (``None`` for nulls) through ``func``.

        :param func: Function receiving a value and returning the new value.
        :param dtype: Data type of the result, inferred when not provided.
        """
        return self.__class__(self.name, [func(v) for v in self.to_pylist()], dtype)

    def par_apply(
        self,
        func: Callable[[Any], Any],
        dtype: pa.DataType | str | None = None,
        max_workers: int | None = None,
    ) -> "Series":
        """Same as :meth:`apply` but computed by a pool of workers.

        The result is identical to :meth:`apply`, values are
        split in contiguous ranges each processed by a different
        worker and then concatenated back in order.
        """
        return self.__class__(
            self.name, parallel_map(func, self.to_pylist(), max_workers), dtype
        )

    @property
    def str(self) -> StringAccessor:
        """Access string functions, only for string columns."""
        return StringAccessor(self)
