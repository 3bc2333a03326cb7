"""Wire value types used by generated protocol code."""

from dataclasses import dataclass
from typing import NewType, Self

U32_MAX = 0xFFFF_FFFF
I32_MIN = -0x8000_0000
I32_MAX = 0x7FFF_FFFF

Id = NewType("Id", int)
Fd = NewType("Fd", int)


@dataclass(frozen=True, slots=True)
class Fixed:
    """Signed 24.8 fixed-point number, stored as its raw 32-bit wire value."""

    raw: int

    def __post_init__(self) -> None:
        if not I32_MIN <= self.raw <= I32_MAX:
            raise ValueError(f"fixed-point raw value {self.raw} does not fit in 32 bits")

    @classmethod
    def from_float(cls, value: float) -> Self:
        return cls(round(value * 256))

    @classmethod
    def from_int(cls, value: int) -> Self:
        return cls(value << 8)

    def __float__(self) -> float:
        return self.raw / 256

    def __int__(self) -> int:
        # Truncates toward zero like a C cast
        return int(self.raw / 256)


@dataclass(frozen=True, slots=True)
class NewId:
    """Descriptor of an object created with a dynamically chosen interface."""

    interface: str
    version: int
    id: Id


class WireEnum(int):
    """Base class for generated enum types.

    A wire enum wraps any unsigned 32-bit value, not only the declared ones,
    since peers may speak a newer protocol version. Subclasses declare their
    entries as plain integer class attributes; they are converted into
    instances of the subclass when the class is created.

    Example:
        class Transform(WireEnum):
            NORMAL = 0
            TRANSFORM_90 = 1
    """

    def __new__(cls, value: int = 0) -> Self:
        if not 0 <= value <= U32_MAX:
            raise ValueError(f"{cls.__name__} value {value} does not fit in 32 unsigned bits")
        return super().__new__(cls, value)

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        for name, value in list(vars(cls).items()):
            if not name.startswith("_") and type(value) is int:
                setattr(cls, name, cls(value))

    def __str__(self) -> str:
        return repr(self)
