"""
Two-neutron phase-space decay with optional final-state interaction.

Three-body (fragment + n + n) phase space is generated the Raubold-Lynch
way: the nn invariant mass is drawn uniformly between its kinematic limits
and weighted by the product of the break-up momenta of the two sequential
two-body steps,

    w = p*(M -> f + nn) * p*(nn -> n + n),

which is proportional to the phase-space density at fixed m_nn. Events are
unweighted by accept/reject against the analytic ceiling of w (the maximum
of each factor taken separately). With FSI the weight is multiplied by the
nn correlation function C(k) and the ceiling by max C on the allowed range.

Units: MeV, c = 1.
"""

from __future__ import annotations
import math
from typing import Optional
import numpy as np

from ..constants import (
    NEUTRON_MASS,
    FSI_SCATTERING_LENGTH,
    FSI_EFFECTIVE_RANGE,
    FSI_SOURCE_RADIUS,
)
from ..errors import DecayConfigurationError
from ..evaporation import NeutronEvaporation
from ..kinematics import breakup_momentum
from ..unweighting import UnweightingController
from .base import NeutronDecayBase, ALL, FATAL
from .fsi import nn_correlation, momentum_to_wavenumber

# k grid used to bound C(k) from above
_FSI_SCAN_POINTS = 2001


class TwoNeutronPhaseSpace(NeutronDecayBase):
    """
    Two-neutron decay distributed according to three-body phase space.

    Args:
        fsi: Include the nn final-state interaction
        **params: radius (fm), scattering_length (fm), effective_range (fm);
            only used when ``fsi`` is True

    Public attribute ``last_nn_mass`` holds the nn invariant mass of the
    last successful decay.
    """

    name = "2n-phase-space"
    description = "Two-neutron three-body phase space (optional nn FSI)"
    number_of_neutrons = 2
    parameters = {
        "radius": FSI_SOURCE_RADIUS,
        "scattering_length": FSI_SCATTERING_LENGTH,
        "effective_range": FSI_EFFECTIVE_RANGE,
    }

    def __init__(self, fsi: bool = False, **params: float):
        self.fsi = bool(fsi)
        if self.fsi:
            self.name = "2n-fsi"
        super().__init__(**params)
        self.last_nn_mass = None

    def _validate_param(self, name: str, value: float) -> None:
        super()._validate_param(name, value)
        if name == "radius" and value <= 0.0:
            raise DecayConfigurationError(f"FSI source radius must be positive, got {value}")

    def _check_params(self, values) -> None:
        if not self.fsi:
            return
        # the finite-range correction factor of C(k) must stay positive
        radius, d0 = values["radius"], values["effective_range"]
        if 1.0 - d0 / (2.0 * math.sqrt(math.pi) * radius) <= 0.0:
            raise DecayConfigurationError(
                f"FSI source radius {radius} fm too small for effective range {d0} fm "
                f"(need radius > {d0 / (2.0 * math.sqrt(math.pi)):.3f} fm)"
            )

    def correlation(self, k):
        """nn correlation C(k) for the current parameters (k in fm^-1)."""
        return nn_correlation(
            k,
            self.get_decay_param("radius"),
            self.get_decay_param("scattering_length"),
            self.get_decay_param("effective_range"),
        )

    def weight(self, m0: float, mf: float, m_nn: float) -> float:
        """Event weight at fixed nn invariant mass."""
        p_frag = breakup_momentum(m0, mf, m_nn)
        p_n = breakup_momentum(m_nn, NEUTRON_MASS, NEUTRON_MASS)
        w = p_frag * p_n
        if self.fsi:
            w *= max(self.correlation(momentum_to_wavenumber(p_n)), 0.0)
        return w

    def max_weight(self, m0: float, mf: float) -> float:
        m_nn_min = 2.0 * NEUTRON_MASS
        m_nn_max = m0 - mf
        w_max = (breakup_momentum(m0, mf, m_nn_min)
                 * breakup_momentum(m_nn_max, NEUTRON_MASS, NEUTRON_MASS))
        if self.fsi:
            p_max = breakup_momentum(m_nn_max, NEUTRON_MASS, NEUTRON_MASS)
            k = momentum_to_wavenumber(np.linspace(0.0, p_max, _FSI_SCAN_POINTS))
            w_max *= float(np.max(self.correlation(k)))
        return w_max

    def sample_nn_mass(self, m0: float, mf: float) -> Optional[float]:
        """nn invariant mass drawn from the (FSI-weighted) phase-space density."""
        m_nn_min = 2.0 * NEUTRON_MASS
        m_nn_max = m0 - mf
        w_max = self.max_weight(m0, mf)
        if w_max <= 0.0:
            self._diagnose(FATAL, f"phase-space weight ceiling {w_max:.3e} is not positive "
                                  f"at m0 - mf = {m0 - mf:.6f} MeV; check the FSI parameters")
            return None
        controller = UnweightingController(w_max)
        while True:
            m_nn = self._rng.uniform(m_nn_min, m_nn_max)
            if controller.accept(self.weight(m0, mf, m_nn), self._rng):
                break
        self._report_unweighting(controller)
        return m_nn

    def _generate(self):
        energy = self.available_energy
        if energy <= 0.0:
            self._diagnose(ALL, f"excitation {energy:.4f} MeV below the 2n threshold")
            return None

        mf = self.final_fragment_mass
        m0 = mf + 2.0 * NEUTRON_MASS + energy
        m_nn = self.sample_nn_mass(m0, mf)
        if m_nn is None:
            return None

        fragment, pair = NeutronEvaporation(m0, mf, m_nn)(self._rng)
        n1, n2 = NeutronEvaporation(m_nn, NEUTRON_MASS, NEUTRON_MASS)(self._rng)
        beta = pair.beta()
        self.last_nn_mass = m_nn
        return energy, fragment, [n1.boost(beta), n2.boost(beta)]
