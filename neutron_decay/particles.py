from __future__ import annotations
import math
from .kinematics import FourVector


class Particle:
    """
    Input state of a decaying (unbound) nucleus.

    ``mass`` is the rest mass of the system at its neutron-emission
    threshold: final fragment ground-state mass plus the emitted neutron
    masses. ``excitation`` is measured from that threshold, so a negative
    value is a state that cannot emit. The four-vector is built from
    ``mass + excitation`` and the three-momentum.
    """

    def __init__(self, mass: float, excitation: float = 0.0,
                 px: float = 0.0, py: float = 0.0, pz: float = 0.0, name: str = ""):
        if mass <= 0.0:
            raise ValueError(f"Particle mass must be positive, got {mass}")
        self.name = name
        self.mass = float(mass)
        self.excitation = float(excitation)
        self.px, self.py, self.pz = float(px), float(py), float(pz)
        self.fourvec = self.make_fourvector(self.px, self.py, self.pz)

    @classmethod
    def from_fourvector(cls, mass: float, fourvec: FourVector, name: str = "") -> "Particle":
        """Build from a four-momentum; the excitation is its invariant mass above ``mass``."""
        return cls(mass, fourvec.mass - mass, fourvec.px, fourvec.py, fourvec.pz, name=name)

    @property
    def total_mass(self) -> float:
        """Rest mass including excitation."""
        return self.mass + self.excitation

    def make_fourvector(self, px, py, pz) -> FourVector:
        """Construct a FourVector using the excited rest mass and momentum components."""
        m = max(self.total_mass, 0.0)
        E = math.sqrt(m**2 + px**2 + py**2 + pz**2)
        return FourVector(E, px, py, pz)

    def with_excitation(self, excitation: float) -> "Particle":
        """Same nucleus and three-momentum, different excitation energy."""
        return Particle(self.mass, excitation, self.px, self.py, self.pz, name=self.name)

    def __repr__(self):
        label = f"{self.name}, " if self.name else ""
        return (
            f"Particle({label}mass={self.mass:.3f} MeV/c², "
            f"Ex={self.excitation:+.4f} MeV, fv={self.fourvec})"
        )
