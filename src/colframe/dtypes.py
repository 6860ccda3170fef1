"""Data types supported by colframe columns.

Columns are stored as Apache Arrow arrays, so data types
are :class:`pyarrow.DataType` instances. Arrow supports
many more types than the engine knows how to handle, thus
this module defines the closed set of types a column can have
and the helpers to check what kind of data a type holds.

Data types can be provided both as pyarrow types
or as their alias name:

>>> resolve("uint8")
DataType(uint8)
>>> resolve(pa.float64())
DataType(double)
>>> is_numeric(resolve("int32"))
True
"""

import pyarrow as pa

from .errors import TypeMismatch

null = pa.null()
bool_ = pa.bool_()
int8 = pa.int8()
int16 = pa.int16()
int32 = pa.int32()
int64 = pa.int64()
uint8 = pa.uint8()
uint16 = pa.uint16()
uint32 = pa.uint32()
uint64 = pa.uint64()
float32 = pa.float32()
float64 = pa.float64()
string = pa.string()

SIGNED_INTEGER_TYPES = (int8, int16, int32, int64)
UNSIGNED_INTEGER_TYPES = (uint8, uint16, uint32, uint64)
INTEGER_TYPES = SIGNED_INTEGER_TYPES + UNSIGNED_INTEGER_TYPES
FLOAT_TYPES = (float32, float64)
NUMERIC_TYPES = INTEGER_TYPES + FLOAT_TYPES
SUPPORTED_TYPES = (null, bool_) + NUMERIC_TYPES + (string,)


def resolve(dtype: pa.DataType | str) -> pa.DataType:
    """Get the supported pyarrow type for a type or alias.

    :param dtype: A :class:`pyarrow.DataType` or an alias like ``"int64"``.
    """
    if isinstance(dtype, str):
        try:
            dtype = pa.type_for_alias(dtype)
        except ValueError as e:
            raise TypeMismatch(f"Unknown data type: {dtype!r}") from e
    if not isinstance(dtype, pa.DataType):
        raise TypeMismatch(f"Invalid data type: {dtype!r}")
    if dtype == pa.large_string():
        # Arrow readers may produce large strings, we only store one string type.
        return string
    if dtype not in SUPPORTED_TYPES:
        raise TypeMismatch(f"Unsupported data type: {dtype}")
    return dtype


def is_integer(dtype: pa.DataType) -> bool:
    return dtype in INTEGER_TYPES


def is_float(dtype: pa.DataType) -> bool:
    return dtype in FLOAT_TYPES


def is_numeric(dtype: pa.DataType) -> bool:
    return dtype in NUMERIC_TYPES


def is_string(dtype: pa.DataType) -> bool:
    return dtype == string


def is_bool(dtype: pa.DataType) -> bool:
    return dtype == bool_


def is_null(dtype: pa.DataType) -> bool:
    """If the column has no values at all, only nulls."""
    return dtype == null
