"""
  Tests of the grid text format
"""

import tempfile
import unittest
from pathlib import Path

import numpy as np

from mandelbrot.codec import deserialize, load_grid, save_grid, serialize
from mandelbrot.errors import DimensionMismatch, MalformedGrid
from mandelbrot.renderer import GridParameters, generate

GOLDEN_TEXT = "3\n3\n1 1 1\n1 100 1\n1 1 1\n"


class TestSerialize(unittest.TestCase):

    def test_exact_layout(self):
        A = np.array([[1, 1, 1], [1, 100, 1], [1, 1, 1]], dtype=np.int32)
        assert serialize(A) == GOLDEN_TEXT

    def test_rectangular_grid(self):
        A = np.array([[1, 2, 3], [4, 5, 6]])
        assert serialize(A) == "2\n3\n1 2 3\n4 5 6\n"

    def test_dimension_checks(self):
        with self.assertRaises(DimensionMismatch):
            serialize(np.arange(4))
        with self.assertRaises(DimensionMismatch):
            serialize(np.ones((2, 3), dtype=np.int32), shape=(3, 2))

    def test_rejects_non_integer_grid(self):
        with self.assertRaises(MalformedGrid):
            serialize(np.array([[1.7, 2.2]]))
        with self.assertRaises(MalformedGrid):
            serialize(np.array([[True, False]]))

    def test_rejects_counts_the_reader_cannot_parse(self):
        with self.assertRaises(MalformedGrid):
            serialize(np.array([[1, -1]], dtype=np.int32))
        with self.assertRaises(MalformedGrid):
            serialize(np.array([[1, 2**31]], dtype=np.int64))
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "grid.txt"
            with self.assertRaises(MalformedGrid):
                save_grid(np.array([[3, -2]]), path)
            assert not path.exists()


class TestDeserialize(unittest.TestCase):

    def test_golden(self):
        A = deserialize(GOLDEN_TEXT)
        assert A.shape == (3, 3)
        assert np.array_equal(A, [[1, 1, 1], [1, 100, 1], [1, 1, 1]])

    def test_legacy_trailing_spaces_and_crlf(self):
        text = "2\r\n3\r\n1 2 3 \r\n4  5 6 \r\n\r\n"
        assert np.array_equal(deserialize(text), [[1, 2, 3], [4, 5, 6]])

    def test_round_trip_of_generated_grid(self):
        params = GridParameters(x_start=-2.0, y_start=-1.5, width=3.0, height=3.0,
                                rows=9, cols=7, max_iterations=30, max_modulus=2.0)
        A = generate(params)
        assert np.array_equal(deserialize(serialize(A)), A)

    def assertMalformed(self, text, line, field):
        with self.assertRaises(MalformedGrid) as context:
            deserialize(text)
        assert context.exception.line == line, context.exception
        assert context.exception.field == field, context.exception

    def test_bad_headers(self):
        self.assertMalformed("", 1, "rows")
        self.assertMalformed("abc\n2\n", 1, "rows")
        self.assertMalformed("0\n2\n", 1, "rows")
        self.assertMalformed("-2\n2\n", 1, "rows")
        self.assertMalformed("2\n", 2, "cols")
        self.assertMalformed("2\n2.5\n", 2, "cols")

    def test_bad_value_lines(self):
        self.assertMalformed("2\n2\n1 2\n", 4, "values")
        self.assertMalformed("2\n2\n1 2\n3\n", 4, "row 1")
        self.assertMalformed("2\n2\n1 2 3\n3 4\n", 3, "row 0")
        self.assertMalformed("2\n2\n1 x\n3 4\n", 3, "row 0, column 1")
        self.assertMalformed("2\n2\n1 2\n3 -4\n", 4, "row 1, column 1")
        self.assertMalformed("1\n1\n99999999999\n", 3, "row 0, column 0")

    def test_extra_rows_rejected(self):
        self.assertMalformed("1\n2\n1 2\n3 4\n", 4, "values")

    def test_huge_header_without_data(self):
        self.assertMalformed("2000000000\n2000000000\n", 3, "values")
        self.assertMalformed("100000\n100000\n1 2\n", 4, "values")


class TestFiles(unittest.TestCase):

    def test_save_and_load(self):
        A = np.array([[1, 7], [100, 3]], dtype=np.int32)
        with tempfile.TemporaryDirectory() as tmp:
            path = save_grid(A, Path(tmp) / "nested" / "grid.txt")
            assert path.read_text() == "2\n2\n1 7\n100 3\n"
            assert np.array_equal(load_grid(path), A)

    def test_load_binary_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "grid.txt"
            path.write_bytes(b"\xff\xfe\x00")
            with self.assertRaises(MalformedGrid):
                load_grid(path)


#-------------------------------------------------------------
if __name__ == "__main__":
    unittest.main()
