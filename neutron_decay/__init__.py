"""
neutron_decay: kinematics of neutron decays of unbound nuclei.

Units: MeV, c = 1.
"""
from .constants import NEUTRON_MASS
from .errors import KinematicsError, DecayConfigurationError
from .kinematics import FourVector
from .particles import Particle
from .rng import (
    RandomSource,
    ExcitationFixed,
    ExcitationUniform,
    ExcitationGaussian,
    ExcitationBreitWigner,
)
from .evaporation import NeutronEvaporation
from .decays import DecayFactory, DecayProducts, create_decay, list_decay_types

__version__ = "0.1.0"

__all__ = [
    "NEUTRON_MASS",
    "KinematicsError",
    "DecayConfigurationError",
    "FourVector",
    "Particle",
    "RandomSource",
    "ExcitationFixed",
    "ExcitationUniform",
    "ExcitationGaussian",
    "ExcitationBreitWigner",
    "NeutronEvaporation",
    "DecayFactory",
    "DecayProducts",
    "create_decay",
    "list_decay_types",
]
