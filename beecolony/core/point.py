import math

import numpy as np

from .errors import DimensionMismatch, InvalidConfiguration


class Point:
    """
    Immutable fixed-dimension vector. Equality and hash are structural so a
    Point can be used as a trail key.
    """

    __slots__ = ("_coords", "_hash")

    def __init__(self, coords):
        values = tuple(float(c) for c in coords)
        if not values:
            raise InvalidConfiguration("point dimension must be >= 1")
        object.__setattr__(self, "_coords", values)
        object.__setattr__(self, "_hash", hash(values))

    @classmethod
    def zeros(cls, dimension: int) -> "Point":
        return cls([0.0] * dimension)

    @classmethod
    def ones(cls, dimension: int) -> "Point":
        return cls([1.0] * dimension)

    def __setattr__(self, name, value):
        raise AttributeError("Point is immutable")

    @property
    def coords(self) -> tuple[float, ...]:
        return self._coords

    @property
    def dimension(self) -> int:
        return len(self._coords)

    def __len__(self):
        return len(self._coords)

    def __getitem__(self, i):
        return self._coords[i]

    def __iter__(self):
        return iter(self._coords)

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self._coords == other._coords

    def __hash__(self):
        return self._hash

    def __repr__(self):
        return f"Point({list(self._coords)})"

    def as_array(self) -> np.ndarray:
        return np.array(self._coords, dtype=float)

    def distance_to(self, other: "Point") -> float:
        if other.dimension != self.dimension:
            raise DimensionMismatch(self.dimension, other.dimension)
        return math.sqrt(sum((a - b) ** 2 for a, b in zip(self._coords, other._coords)))
