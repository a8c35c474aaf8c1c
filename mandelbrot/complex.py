"""Immutable complex numbers with explicit double-precision arithmetic."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from .errors import ComplexDivisionByZero

Real = Union[int, float]


@dataclass(frozen=True, eq=False)
class Complex:
    """A complex value ``real + imaginary*i``.

    Every operation returns a new value. Arithmetic is written out
    component by component so the rounding of each step is the one of
    plain IEEE doubles, independent of how the builtin ``complex`` type
    is implemented.
    """

    real: float
    imaginary: float

    @classmethod
    def from_builtin(cls, value: complex) -> "Complex":
        return cls(float(value.real), float(value.imag))

    def to_builtin(self) -> complex:
        return complex(self.real, self.imaginary)

    @property
    def modulus(self) -> float:
        return math.sqrt(self.real * self.real + self.imaginary * self.imaginary)

    def add(self, other: "Complex") -> "Complex":
        return Complex(self.real + other.real, self.imaginary + other.imaginary)

    def sub(self, other: "Complex") -> "Complex":
        return Complex(self.real - other.real, self.imaginary - other.imaginary)

    def mul(self, other: "Complex") -> "Complex":
        return Complex(
            self.real * other.real - self.imaginary * other.imaginary,
            self.real * other.imaginary + self.imaginary * other.real,
        )

    def div(self, other: "Complex") -> "Complex":
        denominator = other.real * other.real + other.imaginary * other.imaginary
        if denominator == 0.0:
            raise ComplexDivisionByZero(f"cannot divide {self} by {other}")
        return Complex(
            (self.real * other.real + self.imaginary * other.imaginary) / denominator,
            (self.imaginary * other.real - self.real * other.imaginary) / denominator,
        )

    def scale(self, factor: Real) -> "Complex":
        return Complex(self.real * factor, self.imaginary * factor)

    def divide_scalar(self, divisor: Real) -> "Complex":
        if divisor == 0:
            raise ComplexDivisionByZero(f"cannot divide {self} by zero")
        return Complex(self.real / divisor, self.imaginary / divisor)

    def negate(self) -> "Complex":
        return Complex(-self.real, -self.imaginary)

    def __add__(self, other: "Complex") -> "Complex":
        return self.add(other)

    def __sub__(self, other: "Complex") -> "Complex":
        return self.sub(other)

    def __mul__(self, other: Union["Complex", Real]) -> "Complex":
        if isinstance(other, Complex):
            return self.mul(other)
        return self.scale(other)

    def __rmul__(self, other: Real) -> "Complex":
        return self.scale(other)

    def __truediv__(self, other: Union["Complex", Real]) -> "Complex":
        if isinstance(other, Complex):
            return self.div(other)
        return self.divide_scalar(other)

    def __neg__(self) -> "Complex":
        return self.negate()

    def __str__(self) -> str:
        return f"{self.real} + {self.imaginary}i"


def equals(a: Complex, b: Complex) -> bool:
    """Exact component-wise comparison; no tolerance is applied."""

    return a.real == b.real and a.imaginary == b.imaginary


ZERO = Complex(0.0, 0.0)
