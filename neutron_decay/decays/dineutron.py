"""
Two-neutron "dineutron" decay.

The two neutrons leave the nucleus as one correlated cluster of mass
2 m_n + eps, where eps is the internal nn energy, and the cluster then
breaks up in its own rest frame. Following the energy-sharing picture of
A. Volya (PRC 76, 064314; EPJ Web Conf. 38, 03003 (2012)), eps is drawn from

    P(eps) ~ rho_nn(eps) * sqrt(E - eps),   0 < eps < E,

where rho_nn(eps) = k |f(k)|^2 is the nn spectral density built from the
effective-range amplitude (it peaks near the nn virtual state) and
sqrt(E - eps) is the s-wave phase space of the fragment-dineutron motion.
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from ..constants import NEUTRON_MASS, NN_SCATTERING_LENGTH, NN_EFFECTIVE_RANGE
from ..evaporation import NeutronEvaporation
from ..unweighting import UnweightingController
from .base import NeutronDecayBase, ALL
from .fsi import nn_amplitude, relative_energy_to_wavenumber

# Grid used to bound P(eps) from above; quadratic in eps to resolve the
# virtual-state peak close to zero
_SCAN_POINTS = 4001


class TwoNeutronDineutron(NeutronDecayBase):
    """
    Dineutron emission followed by dineutron break-up.

    Parameters:
        scattering_length: nn scattering length (fm)
        effective_range: nn effective range (fm)
    """

    name = "2n-dineutron"
    description = "Two-neutron decay through a correlated dineutron"
    number_of_neutrons = 2
    parameters = {
        "scattering_length": NN_SCATTERING_LENGTH,
        "effective_range": NN_EFFECTIVE_RANGE,
    }

    def __init__(self, **params: float):
        super().__init__(**params)
        self.dineutron_mass: Optional[float] = None

    def nn_density(self, eps):
        """Spectral density rho_nn at internal energy ``eps`` (MeV); unnormalised."""
        k = relative_energy_to_wavenumber(eps)
        f = nn_amplitude(k,
                         self.get_decay_param("scattering_length"),
                         self.get_decay_param("effective_range"))
        return k * np.abs(f)**2

    def density(self, eps, energy: float):
        eps = np.asarray(eps, dtype=float)
        return self.nn_density(eps) * np.sqrt(np.maximum(energy - eps, 0.0))

    def sample_internal_energy(self, energy: float) -> Optional[float]:
        t = np.linspace(0.0, 1.0, _SCAN_POINTS)
        p_max = float(np.max(self.density(energy * t * t, energy)))
        if p_max <= 0.0:
            return None
        controller = UnweightingController(p_max)
        while True:
            eps = self._rng.uniform(0.0, energy)
            if controller.accept(float(self.density(eps, energy)), self._rng):
                break
        self._report_unweighting(controller)
        return eps

    def _generate(self):
        energy = self.available_energy
        if energy <= 0.0:
            self._diagnose(ALL, f"excitation {energy:.4f} MeV below the 2n threshold")
            return None

        eps = self.sample_internal_energy(energy)
        if eps is None:
            self._diagnose(ALL, f"no dineutron phase space at excitation {energy:.3e} MeV")
            return None

        mf = self.final_fragment_mass
        m0 = mf + 2.0 * NEUTRON_MASS + energy
        m_dn = 2.0 * NEUTRON_MASS + eps
        self.dineutron_mass = m_dn

        # stage 1: fragment + dineutron
        fragment, dineutron = NeutronEvaporation(m0, mf, m_dn)(self._rng)
        # stage 2: dineutron -> n + n, boosted back to the decay frame
        n1, n2 = NeutronEvaporation(m_dn, NEUTRON_MASS, NEUTRON_MASS)(self._rng)
        beta = dineutron.beta()
        return energy, fragment, [n1.boost(beta), n2.boost(beta)]
