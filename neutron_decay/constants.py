"""
Physical constants used by the decay generators.

Units: MeV, fm (natural units c = 1).
"""

NEUTRON_MASS = 939.56542052  # MeV
HBARC = 197.3269804  # MeV fm

# Neutron-neutron low-energy scattering (effective range expansion).
# Sign convention: a < 0 for the unbound nn virtual state.
NN_SCATTERING_LENGTH = -18.7  # fm
NN_EFFECTIVE_RANGE = 2.75  # fm

# Lednicky-Lyuboshitz FSI defaults (Marques et al., PLB 476 (2000) 219)
FSI_SCATTERING_LENGTH = -18.5  # fm
FSI_EFFECTIVE_RANGE = 2.8  # fm
FSI_SOURCE_RADIUS = 3.0  # fm, Gaussian r0
