"""
Two-neutron sequential decay through a real intermediate state.

Step 1 evaporates a neutron from the initial nucleus and leaves the
intermediate fragment (fragment + n system) at energy eps above its own
one-neutron threshold. Step 2 takes that intermediate fragment, with its
own four-vector, as the input state and evaporates the second neutron,
leaving the final fragment in its ground state.

The energy sharing follows the sequential picture of A. Volya (PRC 76,
064314): for a total decay energy E the intermediate energy is drawn from

    P(eps) ~ BW(eps; E_i, G) * G1(E - eps) * G2(eps),   0 < eps < E,

    BW(eps; E_i, G) = 1 / ((eps - E_i)^2 + G^2 / 4),

with s-wave emission factors G1(e) = G2(e) = sqrt(e) for the first and
second neutron. eps is proposed from the Breit-Wigner restricted to (0, E)
and accepted with weight sqrt(eps (E - eps)), whose maximum E / 2 is exact.
A zero width fixes eps = E_i; the decay then fails when E_i is outside
[0, E].
"""

import math
from typing import Optional

from ..constants import NEUTRON_MASS
from ..errors import DecayConfigurationError
from ..evaporation import NeutronEvaporation, evaporate_from
from ..unweighting import UnweightingController
from .base import NeutronDecayBase, ALL


class TwoNeutronSequential(NeutronDecayBase):
    """
    Sequential emission of two neutrons.

    Parameters:
        intermediate_energy: energy of the intermediate state above the
            fragment + n threshold (MeV); required, there is no default
        intermediate_width: Breit-Wigner FWHM of the intermediate state
            (MeV); 0 fixes it at ``intermediate_energy``

    ``intermediate_fragment_mass`` is the rest mass of the intermediate
    fragment used by the last generate() attempt (None when no
    intermediate energy could be drawn).
    """

    name = "2n-sequential"
    description = "Two-neutron sequential decay via an intermediate state"
    number_of_neutrons = 2
    parameters = {"intermediate_energy": math.nan, "intermediate_width": 0.0}

    def __init__(self, **params: float):
        super().__init__(**params)
        self.intermediate_fragment_mass: Optional[float] = None

    def set_input_particle(self, particle):
        super().set_input_particle(particle)
        self.intermediate_fragment_mass = None

    def emission_weight(self, eps: float, energy: float) -> float:
        """s-wave penetrabilities of both steps, sqrt(E - eps) * sqrt(eps)."""
        return math.sqrt(max(eps * (energy - eps), 0.0))

    def sample_intermediate_energy(self, energy: float) -> Optional[float]:
        """Intermediate energy for a total decay energy ``energy``; None if none fits."""
        centroid = self.get_decay_param("intermediate_energy")
        if math.isnan(centroid):
            raise DecayConfigurationError(f"{self.name}: 'intermediate_energy' has not been set")
        width = self.get_decay_param("intermediate_width")
        if width == 0.0:
            return centroid
        if energy <= 0.0:
            return None

        controller = UnweightingController(0.5 * energy, safety_factor=1.0)
        while True:
            eps = self._rng.truncated_breit_wigner(centroid, width, 0.0, energy)
            if controller.accept(self.emission_weight(eps, energy), self._rng):
                break
        self._report_unweighting(controller)
        return eps

    def _generate(self):
        energy = self.available_energy
        eps = self.sample_intermediate_energy(energy)
        if eps is None:
            self._diagnose(ALL, f"excitation {energy:.4f} MeV below the 2n threshold")
            return None

        mf = self.final_fragment_mass
        self.intermediate_fragment_mass = mf + NEUTRON_MASS + eps
        if eps < 0.0:
            self._diagnose(ALL, f"intermediate energy {eps:.4f} MeV below the fragment + n threshold")
            return None
        if eps > energy:
            self._diagnose(ALL, f"intermediate energy {eps:.4f} MeV above the excitation {energy:.4f} MeV")
            return None

        m0 = mf + 2.0 * NEUTRON_MASS + energy

        # step 1: initial -> intermediate + n1
        intermediate, n1 = NeutronEvaporation(m0, self.intermediate_fragment_mass, NEUTRON_MASS)(self._rng)
        # step 2: the intermediate fragment is the new input state
        fragment, n2 = evaporate_from(intermediate, mf, NEUTRON_MASS, self._rng)
        return energy, fragment, [n1, n2]
