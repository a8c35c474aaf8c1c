"""
  Tests of the Complex value type
"""

import math
import unittest

from mandelbrot.complex import ZERO, Complex, equals
from mandelbrot.errors import ComplexDivisionByZero


class TestCase(unittest.TestCase):

    def test_field_operations(self):
        a = Complex(1.0, 2.0)
        b = Complex(3.0, -4.0)

        assert equals(a + b, Complex(4.0, -2.0))
        assert equals(a - b, Complex(-2.0, 6.0))
        assert equals(a * b, Complex(11.0, 2.0))
        assert equals((a * b) / b, a)
        assert equals(a.add(b), a + b)
        assert equals(a.mul(b), a * b)

    def test_division_by_known_value(self):
        quotient = Complex(1.0, 0.0) / Complex(0.0, 1.0)
        assert equals(quotient, Complex(0.0, -1.0))

    def test_scalar_operations(self):
        a = Complex(1.5, -2.0)
        assert equals(a * 2, Complex(3.0, -4.0))
        assert equals(2 * a, Complex(3.0, -4.0))
        assert equals(a / 2, Complex(0.75, -1.0))
        assert equals(-a, Complex(-1.5, 2.0))

    def test_negation_leaves_operand_untouched(self):
        a = Complex(1.0, 1.0)
        b = a.negate()
        assert equals(a, Complex(1.0, 1.0))
        assert equals(b, Complex(-1.0, -1.0))

    def test_modulus(self):
        assert Complex(3.0, 4.0).modulus == 5.0
        assert ZERO.modulus == 0.0
        assert math.isnan(Complex(float("nan"), 0.0).modulus)

    def test_division_by_zero(self):
        with self.assertRaises(ComplexDivisionByZero):
            Complex(1.0, 1.0) / ZERO
        with self.assertRaises(ComplexDivisionByZero):
            Complex(1.0, 1.0) / 0
        with self.assertRaises(ZeroDivisionError):
            Complex(1.0, 1.0).div(Complex(0.0, -0.0))

    def test_equality_is_exact(self):
        a = Complex(0.1 + 0.2, 0.0)
        assert not equals(a, Complex(0.3, 0.0))
        assert equals(Complex(0.0, 0.0), Complex(-0.0, 0.0))

    def test_builtin_conversion_and_display(self):
        value = Complex.from_builtin(2 - 3j)
        assert equals(value, Complex(2.0, -3.0))
        assert value.to_builtin() == 2 - 3j
        assert str(value) == "2.0 + -3.0i"


#-------------------------------------------------------------
if __name__ == "__main__":
    unittest.main()
