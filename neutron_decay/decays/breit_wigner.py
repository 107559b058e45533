from ..constants import NEUTRON_MASS
from ..evaporation import NeutronEvaporation
from .base import NeutronDecayBase, ALL


class OneNeutronBreitWigner(NeutronDecayBase):
    """
    Single neutron emission with a Breit-Wigner decay energy.

    Parameters:
        energy: centroid decay energy above the fragment + n threshold (MeV)
        width: Breit-Wigner FWHM (MeV); 0 gives a spike at ``energy``

    The excitation of the input particle is the energy available: decays
    that need more (or a negative decay energy) fail.
    """

    name = "1n"
    description = "One-neutron decay, Breit-Wigner decay energy"
    number_of_neutrons = 1
    parameters = {"energy": 0.0, "width": 0.0}

    def sample_decay_energy(self) -> float:
        return self._rng.breit_wigner(self.get_decay_param("energy"),
                                      self.get_decay_param("width"))

    def _generate(self):
        decay_energy = self.sample_decay_energy()
        available = self.available_energy
        if decay_energy < 0.0 or decay_energy > available:
            self._diagnose(ALL, f"decay energy {decay_energy:.4f} MeV outside [0, {available:.4f}] MeV")
            return None

        mf = self.final_fragment_mass
        m0 = mf + NEUTRON_MASS + decay_energy
        fragment, neutron = NeutronEvaporation(m0, mf, NEUTRON_MASS)(self._rng)
        return decay_energy, fragment, [neutron]
