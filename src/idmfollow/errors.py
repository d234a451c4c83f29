from __future__ import annotations


class IDMError(Exception):
    """Base class for car-following simulation errors."""


class InvalidParameter(IDMError, ValueError):
    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid parameter {field}={value!r}: {reason}")
        self.field = field
        self.value = value


class InvalidTrajectory(IDMError, ValueError):
    pass


class NumericDegeneracy(IDMError, ArithmeticError):
    def __init__(self, index: int, gap: float, floor: float) -> None:
        super().__init__(f"Gap frsn[{index}]={gap!r} is at or below the floor {floor!r}")
        self.index = index
        self.gap = gap
        self.floor = floor
