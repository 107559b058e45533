"""
Two-body evaporation kinematics.

Every decay model in :mod:`neutron_decay.decays` is assembled from one or
more of these break-ups: a parent of mass ``m0`` emits a "neutron" of mass
``mn`` and is left as a "fragment" of mass ``mf``. The second particle does
not have to be a neutron (the dineutron model evaporates a 2n cluster).

Units: MeV (natural units c = 1).
"""

from __future__ import annotations
import math
from typing import Tuple

from .errors import KinematicsError
from .kinematics import FourVector, breakup_momentum, isotropic_direction

# Parent masses within this of the threshold are treated as "at threshold"
THRESHOLD_TOLERANCE = 1e-9  # MeV


class NeutronEvaporation:
    """
    Break-up of a parent into fragment + neutron in the parent rest frame.

    Parameters
    ----------
    m0 : float
        Mass of the decaying state (ground state + excitation).
    mf : float
        Mass of the fragment left behind (ground state + excitation).
    mn : float
        Mass of the emitted particle.

    Raises
    ------
    KinematicsError
        If ``m0 < mf + mn``. This helper is not a feasibility gate: callers
        check the available energy before building it.
    """

    def __init__(self, m0: float, mf: float, mn: float):
        self.m0 = float(m0)
        self.mf = float(mf)
        self.mn = float(mn)
        if self.m0 + THRESHOLD_TOLERANCE < self.mf + self.mn:
            raise KinematicsError(
                f"Break-up kinematically forbidden: m0={self.m0:.6f} < "
                f"mf + mn = {self.mf + self.mn:.6f} MeV"
            )

    @property
    def momentum(self) -> float:
        """Common momentum magnitude of both daughters (MeV/c)."""
        if self.m0 <= self.mf + self.mn:
            return 0.0
        return breakup_momentum(self.m0, self.mf, self.mn)

    def __call__(self, rng) -> Tuple[FourVector, FourVector]:
        """Return ``(fragment, neutron)`` four-vectors in the centre of mass."""
        p_mag = self.momentum
        direction = isotropic_direction(rng)
        p_vec = p_mag * direction

        E_f = math.sqrt(self.mf * self.mf + p_mag * p_mag)
        E_n = math.sqrt(self.mn * self.mn + p_mag * p_mag)

        frag = FourVector(E_f, -p_vec[0], -p_vec[1], -p_vec[2])
        neut = FourVector(E_n, p_vec[0], p_vec[1], p_vec[2])
        return frag, neut


def evaporate_from(parent: FourVector, mf: float, mn: float, rng) -> Tuple[FourVector, FourVector]:
    """
    Break-up of a moving parent.

    The parent four-vector is taken as the input state; its invariant mass
    drives :class:`NeutronEvaporation` and both daughters are boosted back
    into the frame in which ``parent`` was given.
    """
    frag, neut = NeutronEvaporation(parent.mass, mf, mn)(rng)
    beta = parent.beta()
    return frag.boost(beta), neut.boost(beta)
