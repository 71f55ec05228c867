import io

import numpy as np
import pytest

from kmeans import InvalidParameter, MalformedInput, read_points, write_centers


def test_read_with_header_and_id_column():
    text = "id,x,y\n0,1.5,2\n1,3,-4e-1\n"
    X = read_points(io.StringIO(text))
    np.testing.assert_array_equal(X, [[1.5, 2.0], [3.0, -0.4]])
    assert X.dtype == np.float64


def test_read_plain_rows():
    X = read_points(io.StringIO("1;2;3\n4;5;6\n"), delimiter=';', skip_header=False, skip_columns=0)
    np.testing.assert_array_equal(X, [[1, 2, 3], [4, 5, 6]])


def test_blank_lines_are_ignored():
    X = read_points(io.StringIO("a,b\n\n1,2\n\n3,4\n"), skip_columns=0)
    np.testing.assert_array_equal(X, [[1, 2], [3, 4]])


def test_ragged_rows():
    with pytest.raises(MalformedInput) as excinfo:
        read_points(io.StringIO("id,x,y\n0,1,2\n1,3\n"))
    assert excinfo.value.line == 3
    assert "line 3" in str(excinfo.value)


def test_non_numeric_value():
    with pytest.raises(MalformedInput, match="non-numeric"):
        read_points(io.StringIO("id,x\n0,1\n1,abc\n"))


def test_non_finite_value():
    with pytest.raises(MalformedInput, match="non-finite"):
        read_points(io.StringIO("id,x\n0,nan\n"))


def test_row_with_only_id():
    with pytest.raises(MalformedInput):
        read_points(io.StringIO("id,x\n0\n"))


def test_no_data_rows():
    with pytest.raises(MalformedInput, match="no data rows") as excinfo:
        read_points(io.StringIO("id,x,y\n"))
    assert excinfo.value.line is None
    assert str(excinfo.value) == "no data rows"


@pytest.mark.parametrize('skip_columns', [-1, 1.5, None])
def test_bad_skip_columns(skip_columns):
    with pytest.raises(InvalidParameter, match="skip_columns"):
        read_points(io.StringIO("id,x\n0,1\n"), skip_columns=skip_columns)


def test_write_centers():
    out = io.StringIO()
    write_centers(np.array([[0.0, 0.5], [10.0, 1.0 / 3.0]]), out)
    assert out.getvalue() == "0.0,0.5\n10.0,0.3333333333333333\n"


def test_written_centers_read_back():
    centers = np.random.default_rng(0).normal(size=(3, 4))
    out = io.StringIO()
    write_centers(centers, out, delimiter='\t')
    back = read_points(io.StringIO(out.getvalue()), delimiter='\t', skip_header=False, skip_columns=0)
    np.testing.assert_array_equal(back, centers)
