import pytest

from colframe import errors


@pytest.mark.parametrize(
    "error,builtin",
    [
        (errors.ShapeError("bad"), ValueError),
        (errors.LengthMismatch("a", 3, 2), ValueError),
        (errors.DuplicateColumn("a"), ValueError),
        (errors.ColumnNotFound("a"), KeyError),
        (errors.TypeMismatch("bad"), TypeError),
        (errors.CastError("bad"), ValueError),
        (errors.UnsupportedAggregation("bad"), TypeError),
        (errors.DivisionByZero("bad"), ZeroDivisionError),
        (errors.IndexOutOfRange(5, 3), IndexError),
        (errors.ParseError("bad"), ValueError),
    ],
)
def test_errors_hierarchy(error, builtin):
    assert isinstance(error, errors.ColframeError)
    assert isinstance(error, builtin)


def test_errors_messages():
    assert str(errors.ColumnNotFound("age")) == "Column not found: 'age'"
    assert str(errors.DuplicateColumn("age")) == "Duplicate column name: 'age'"
    assert str(errors.IndexOutOfRange(5, 3)) == "Index 5 out of range for length 3"
    assert str(errors.LengthMismatch("mask", 3, 2)) == (
        "Length mismatch for 'mask': expected 3 rows, found 2"
    )
