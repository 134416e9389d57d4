#!/usr/bin/env python3
"""
complex_arith.py

Minimal complex-number value type used by the escape-time iteration.

A value is the pair (re, im) representing re + im*i. All operations return new
values; nothing is mutated. Multiplication and the squared magnitude use a fused
multiply-add (math.fma) so the rounding matches the reference renders bit for bit.

    x + y = (a + c) + (b + d)i
    x * y = (ac - bd) + (ad + bc)i
    |x|^2 = a^2 + b^2
"""
import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Complex:
    re: float = 0.0
    im: float = 0.0

    def __add__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return add(self, other)

    def __mul__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return multiply(self, other)

    def mag(self) -> float:
        """Squared magnitude (no square root)."""
        return squared_magnitude(self)


def add(x: Complex, y: Complex) -> Complex:
    return Complex(x.re + y.re, x.im + y.im)


def multiply(x: Complex, y: Complex) -> Complex:
    return Complex(
        math.fma(x.re, y.re, -(x.im * y.im)),
        math.fma(x.re, y.im, x.im * y.re),
    )


def squared_magnitude(x: Complex) -> float:
    return math.fma(x.re, x.re, x.im * x.im)
