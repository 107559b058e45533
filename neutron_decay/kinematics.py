"""
Relativistic kinematics used by the neutron decay generators.

Units: MeV (natural units c = 1).
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Tuple, Optional
import numpy as np

# -----------------------------
# FourVector
# -----------------------------
@dataclass
class FourVector:
    """Four-momentum ``(E, px, py, pz)`` of a fragment, neutron or decaying state."""
    E: float
    px: float
    py: float
    pz: float

    @classmethod
    def from_array(cls, p4) -> "FourVector":
        return cls(float(p4[0]), float(p4[1]), float(p4[2]), float(p4[3]))

    @classmethod
    def from_momentum(cls, mass: float, p: np.ndarray) -> "FourVector":
        """On-shell four-vector for the given rest mass and three-momentum."""
        p = np.asarray(p, dtype=float)
        return cls.from_array([math.sqrt(mass * mass + float(np.dot(p, p))), *p])

    def as_array(self) -> np.ndarray:
        return np.array([self.E, self.px, self.py, self.pz], dtype=float)

    @property
    def p(self) -> np.ndarray:
        return np.array([self.px, self.py, self.pz], dtype=float)

    @property
    def p2(self) -> float:
        return self.px * self.px + self.py * self.py + self.pz * self.pz

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.p2)

    @property
    def mass(self) -> float:
        """Invariant mass; 0 for space-like rounding residue."""
        return math.sqrt(max(self.E * self.E - self.p2, 0.0))

    @property
    def kinetic_energy(self) -> float:
        return self.E - self.mass

    def beta(self) -> np.ndarray:
        """Velocity of the frame in which this four-vector is at rest."""
        if self.E == 0.0:
            return np.zeros(3, dtype=float)
        return self.p / self.E

    def boost(self, beta: np.ndarray) -> "FourVector":
        return FourVector.from_array(lorentz_boost_array(self.as_array(), beta))

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.E, self.px, self.py, self.pz)

    def __add__(self, other: "FourVector") -> "FourVector":
        return FourVector.from_array(self.as_array() + other.as_array())

    def __sub__(self, other: "FourVector") -> "FourVector":
        return FourVector.from_array(self.as_array() - other.as_array())

    def __repr__(self) -> str:
        return f"FourVector(E={self.E:.6f}, p=({self.px:.6f}, {self.py:.6f}, {self.pz:.6f}), m={self.mass:.6f})"


# -----------------------------
# Lorentz boost
# -----------------------------
def lorentz_boost_array(p4: np.ndarray, beta: np.ndarray) -> np.ndarray:
    """
    Boost ``p4`` from a frame moving with velocity ``beta`` into the frame
    in which that velocity was measured.

    A daughter generated in its parent's rest frame is taken to the lab with
    ``lorentz_boost_array(p4, parent.beta())``; ``-beta`` goes the other way.
    """
    p4 = np.asarray(p4, dtype=float)
    beta = np.asarray(beta, dtype=float)
    beta2 = float(beta @ beta)
    if beta2 >= 1.0:
        raise ValueError(f"Boost velocity must satisfy |beta| < 1, got |beta|^2 = {beta2}")
    if beta2 <= 1e-18:
        return p4.copy()

    gamma = 1.0 / math.sqrt(1.0 - beta2)
    energy, momentum = p4[0], p4[1:]
    b_dot_p = float(beta @ momentum)
    boosted_energy = gamma * (energy + b_dot_p)
    boosted_momentum = momentum + beta * (gamma * energy + (gamma - 1.0) * b_dot_p / beta2)
    return np.concatenate(([boosted_energy], boosted_momentum))


# -----------------------------
# Isotropic direction
# -----------------------------
def isotropic_direction(rng=None) -> np.ndarray:
    """Unit vector uniform in solid angle.

    ``rng`` is anything with a numpy-style ``uniform(low, high)``: a
    ``numpy.random.Generator`` or a :class:`neutron_decay.rng.RandomSource`.
    """
    rng = rng or np.random.default_rng()
    cos_theta = rng.uniform(-1.0, 1.0)
    phi = rng.uniform(0.0, 2.0 * math.pi)
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    return np.array([sin_theta * math.cos(phi), sin_theta * math.sin(phi), cos_theta], dtype=float)


# -----------------------------
# Two-body break-up momentum
# -----------------------------
def breakup_momentum(m0: float, m1: float, m2: float) -> float:
    """Momentum of either daughter in the rest frame of ``m0 -> m1 + m2``.

    Returns 0 below threshold; callers decide whether that is allowed.
    """
    if m0 <= 0.0:
        return 0.0
    # Kallen function lambda(m0^2, m1^2, m2^2) in factored form, which keeps
    # precision when m0 is just above m1 + m2
    lam = (m0 - m1 - m2) * (m0 + m1 + m2) * (m0 - m1 + m2) * (m0 + m1 - m2)
    return math.sqrt(max(lam, 0.0)) / (2.0 * m0)


# -----------------------------
# Pair observables
# -----------------------------
def invariant_mass(*vectors: FourVector) -> float:
    total = vectors[0]
    for v in vectors[1:]:
        total = total + v
    return total.mass


def opening_angle(a: FourVector, b: FourVector) -> Optional[float]:
    """Cosine of the angle between two three-momenta (None if either is zero)."""
    na, nb = a.magnitude, b.magnitude
    if na == 0.0 or nb == 0.0:
        return None
    return float(np.dot(a.p, b.p) / (na * nb))
