"""
Random-number source shared by the decay generators.

A :class:`RandomSource` is borrowed by decay instances, never owned. It is
not thread-safe: give every worker thread its own source.
"""

from __future__ import annotations
import math
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class ExcitationDistribution(ABC):
    """Distribution of the excitation energy handed to the decay (MeV)."""

    @abstractmethod
    def sample(self, rng: "RandomSource") -> float:
        """Draw one excitation energy."""


class ExcitationFixed(ExcitationDistribution):
    def __init__(self, value: float):
        self.value = float(value)

    def sample(self, rng: "RandomSource") -> float:
        return self.value


class ExcitationUniform(ExcitationDistribution):
    def __init__(self, low: float, high: float):
        if high < low:
            raise ValueError(f"Empty excitation range [{low}, {high}]")
        self.low = float(low)
        self.high = float(high)

    def sample(self, rng: "RandomSource") -> float:
        return rng.uniform(self.low, self.high)


class ExcitationGaussian(ExcitationDistribution):
    def __init__(self, mean: float, sigma: float):
        if sigma < 0.0:
            raise ValueError(f"sigma must be non-negative, got {sigma}")
        self.mean = float(mean)
        self.sigma = float(sigma)

    def sample(self, rng: "RandomSource") -> float:
        if self.sigma == 0.0:
            return self.mean
        return float(rng.generator.normal(self.mean, self.sigma))


class ExcitationBreitWigner(ExcitationDistribution):
    def __init__(self, centroid: float, width: float):
        if width < 0.0:
            raise ValueError(f"width must be non-negative, got {width}")
        self.centroid = float(centroid)
        self.width = float(width)

    def sample(self, rng: "RandomSource") -> float:
        return rng.breit_wigner(self.centroid, self.width)


class RandomSource:
    """
    Uniform and Breit-Wigner deviates plus excitation-energy sampling.

    Parameters
    ----------
    seed : int, optional
        Seed for a fresh ``numpy.random.Generator``.
    excitation : ExcitationDistribution, optional
        Distribution used by :meth:`excitation`.
    generator : numpy.random.Generator, optional
        Use an existing generator instead of seeding a new one.
    """

    def __init__(self, seed: Optional[int] = None,
                 excitation: Optional[ExcitationDistribution] = None,
                 generator: Optional[np.random.Generator] = None):
        self.generator = generator if generator is not None else np.random.default_rng(seed)
        self.excitation_distribution = excitation

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        return float(self.generator.uniform(low, high))

    def breit_wigner(self, centroid: float, width: float) -> float:
        """Cauchy deviate with full width at half maximum ``width``.

        A zero width is a spike: ``centroid`` is returned and no deviate drawn.
        """
        if width == 0.0:
            return centroid
        u = self.uniform()
        return centroid + 0.5 * width * math.tan(math.pi * (u - 0.5))

    def truncated_breit_wigner(self, centroid: float, width: float, low: float, high: float) -> float:
        """Cauchy deviate restricted to ``[low, high]`` (inverse CDF, no rejection)."""
        if width <= 0.0:
            raise ValueError(f"width must be positive, got {width}")
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        cdf_low = math.atan(2.0 * (low - centroid) / width) / math.pi
        cdf_high = math.atan(2.0 * (high - centroid) / width) / math.pi
        u = self.uniform(cdf_low, cdf_high)
        return min(max(centroid + 0.5 * width * math.tan(math.pi * u), low), high)

    def excitation(self) -> float:
        if self.excitation_distribution is None:
            raise RuntimeError("RandomSource has no excitation distribution configured")
        return self.excitation_distribution.sample(self)
