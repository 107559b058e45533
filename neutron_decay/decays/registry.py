"""
Decay registry: maps decay type ids to generator classes.

Key format: short type id string, e.g. "1n", "2n-fsi".

Unknown type ids and unknown options fail with DecayConfigurationError.
"""
from typing import Callable, Dict, Mapping, Optional

from ..errors import DecayConfigurationError
from .base import NeutronDecay
from .breit_wigner import OneNeutronBreitWigner
from .dineutron import TwoNeutronDineutron
from .phase_space import TwoNeutronPhaseSpace
from .sequential import TwoNeutronSequential


# Global registry: decay type -> constructor(**options) -> NeutronDecay
_REGISTRY: Dict[str, Callable[..., NeutronDecay]] = {}


def register(decay_type: str, constructor: Callable[..., NeutronDecay]):
    """
    Register a decay generator under a type id.

    Args:
        decay_type: Type id used by the factory
        constructor: Callable taking the options as keyword arguments

    Example:
        >>> register("2n-fsi", lambda **opts: TwoNeutronPhaseSpace(fsi=True, **opts))
    """
    _REGISTRY[decay_type] = constructor


def list_decay_types():
    """Registered type ids, sorted."""
    return sorted(_REGISTRY)


def create_decay(decay_type: str, options: Optional[Mapping[str, float]] = None) -> NeutronDecay:
    """
    Build a decay generator.

    Args:
        decay_type: Registered type id
        options: Decay parameters copied into the new instance

    Returns:
        New NeutronDecay instance, owned by the caller
    """
    try:
        constructor = _REGISTRY[decay_type]
    except KeyError:
        raise DecayConfigurationError(
            f"Unknown decay type '{decay_type}' (known: {', '.join(list_decay_types())})"
        ) from None
    return constructor(**dict(options or {}))


class DecayFactory:
    """Collects a decay type and options, then creates decay instances."""

    def __init__(self, decay_type: str = "", options: Optional[Mapping[str, float]] = None):
        self._decay_type = decay_type
        self._options: Dict[str, float] = {}
        for name, value in (options or {}).items():
            self.set_decay_option(name, value)

    @property
    def decay_type(self) -> str:
        return self._decay_type

    def set_decay_type(self, decay_type: str) -> None:
        self._decay_type = decay_type

    def set_decay_option(self, option: str, value: float) -> None:
        self._options[option] = float(value)

    def get_decay_option(self, option: str) -> float:
        try:
            return self._options[option]
        except KeyError:
            raise DecayConfigurationError(f"Decay option '{option}' has not been set") from None

    @property
    def options(self) -> Dict[str, float]:
        return dict(self._options)

    def create(self) -> NeutronDecay:
        return create_decay(self._decay_type, self._options)


# ========== REGISTER KNOWN DECAYS ==========
register("1n", OneNeutronBreitWigner)
register("2n-phase-space", TwoNeutronPhaseSpace)
register("2n-fsi", lambda **opts: TwoNeutronPhaseSpace(fsi=True, **opts))
register("2n-dineutron", TwoNeutronDineutron)
register("2n-sequential", TwoNeutronSequential)
