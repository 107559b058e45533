"""
Neutron decay generators.

Usage:
    from neutron_decay.decays import DecayFactory

    factory = DecayFactory("1n", {"energy": 0.5, "width": 0.1})
    decay = factory.create()
    decay.set_rng(rng)
    decay.set_input_particle(particle)
    products = decay.generate()
"""
from .base import NeutronDecay, NeutronDecayBase, DecayProducts
from .parameters import DecayParameters
from .breit_wigner import OneNeutronBreitWigner
from .phase_space import TwoNeutronPhaseSpace
from .dineutron import TwoNeutronDineutron
from .sequential import TwoNeutronSequential
from .registry import register, create_decay, list_decay_types, DecayFactory

__all__ = [
    "NeutronDecay",
    "NeutronDecayBase",
    "DecayProducts",
    "DecayParameters",
    "OneNeutronBreitWigner",
    "TwoNeutronPhaseSpace",
    "TwoNeutronDineutron",
    "TwoNeutronSequential",
    "register",
    "create_decay",
    "list_decay_types",
    "DecayFactory",
]
