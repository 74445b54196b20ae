"""Sampling domains for curves and fields.

Purpose
-------
A domain is the numeric range plus sampling resolution over which a function
is evaluated. This module validates domain parameters and produces the
evenly spaced sample vectors consumed by :mod:`fieldplot.sampling`.

Important gotchas
-----------------
- ``stop`` is included: ``build_domain(0, 1, 3)`` is ``[0.0, 0.5, 1.0]``.
- Bounds accept SymPy-parsable strings, so ``build_domain(0, "2*pi", 200)``
  works as expected.
- An even sample count over a symmetric range does not contain ``0.0``.

Examples
--------
>>> from fieldplot.domain import build_domain
>>> build_domain(-1, 1, 5)
array([-1. , -0.5,  0. ,  0.5,  1. ])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

import numpy as np

from .InputConvert import InputConvert

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

NumberLike = Union[int, float]
NumberLikeOrStr = Union[int, float, str]

MIN_SAMPLES = 2


class InvalidDomainError(ValueError):
    """Raised when domain parameters are degenerate (too few samples, empty range)."""


def _coerce_bound(value: Any, role: str) -> float:
    try:
        return InputConvert(value, float)
    except ValueError as e:
        raise InvalidDomainError(f"Domain {role} must be a finite real number, got {value!r}.") from e


def _coerce_count(value: Any) -> int:
    try:
        return InputConvert(value, int, truncate=False)
    except ValueError as e:
        raise InvalidDomainError(f"Domain sample count must be an integer, got {value!r}.") from e


@dataclass(frozen=True)
class Domain:
    """Validated ``(start, stop, count)`` triple describing one sampled axis.

    Parameters
    ----------
    start : float
        First sample (inclusive).
    stop : float
        Last sample (inclusive). Must be strictly greater than ``start``.
    count : int
        Number of samples, at least ``2``.

    Raises
    ------
    InvalidDomainError
        If ``count < 2``, ``start >= stop`` or a bound is not finite.
    """

    start: float
    stop: float
    count: int

    def __post_init__(self) -> None:
        start = _coerce_bound(self.start, "start")
        stop = _coerce_bound(self.stop, "stop")
        count = _coerce_count(self.count)
        if count < MIN_SAMPLES:
            raise InvalidDomainError(
                f"Domain needs at least {MIN_SAMPLES} samples, got count={count}."
            )
        if not start < stop:
            raise InvalidDomainError(
                f"Domain range is empty: start={start!r} must be less than stop={stop!r}."
            )
        # Frozen dataclass: normalized values are written through object.__setattr__.
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "stop", stop)
        object.__setattr__(self, "count", count)

    @property
    def step(self) -> float:
        """Spacing between consecutive samples."""
        span = self.stop - self.start
        if np.isfinite(span):
            return span / (self.count - 1)
        return self.stop / (self.count - 1) - self.start / (self.count - 1)

    @property
    def values(self) -> np.ndarray:
        """Return the ``count`` evenly spaced samples as a fresh float array.

        Bounds whose difference overflows float64 (``-1e308`` to ``1e308``)
        are interpolated as ``start*(1 - t) + stop*t`` so every sample stays
        finite; the endpoints are still exactly ``start`` and ``stop``.
        """
        if np.isfinite(self.stop - self.start):
            return np.linspace(self.start, self.stop, self.count, dtype=float)
        t = np.linspace(0.0, 1.0, self.count, dtype=float)
        values = self.start * (1.0 - t) + self.stop * t
        values[0] = self.start
        values[-1] = self.stop
        return values

    def __len__(self) -> int:
        return self.count


def build_domain(start: NumberLikeOrStr, stop: NumberLikeOrStr, count: Union[int, str]) -> np.ndarray:
    """Return ``count`` evenly spaced values from ``start`` to ``stop`` inclusive.

    Parameters
    ----------
    start, stop : int, float or str
        Range bounds. Strings are parsed by SymPy (``"2*pi"``).
    count : int or str
        Number of samples (``>= 2``). Must be an exact integer.

    Returns
    -------
    numpy.ndarray
        One-dimensional float array with ``values[0] == start`` and
        ``values[-1] == stop``.

    Raises
    ------
    InvalidDomainError
        If ``count < 2`` or ``start >= stop``.
    """
    domain = Domain(start, stop, count)
    logger.debug("build_domain start=%r stop=%r count=%d", domain.start, domain.stop, domain.count)
    return domain.values


__all__ = ["Domain", "InvalidDomainError", "build_domain", "MIN_SAMPLES"]
