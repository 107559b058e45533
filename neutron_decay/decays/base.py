from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional, Tuple

from ..constants import NEUTRON_MASS
from ..errors import DecayConfigurationError
from ..kinematics import FourVector
from ..particles import Particle
from .parameters import DecayParameters

logger = logging.getLogger(__name__)

# Verbosity levels
SILENT = 0
FATAL = 1
ALL = 2


@dataclass(frozen=True)
class DecayProducts:
    """
    Final state of one successful decay, in the frame the input was given in.

    ``initial`` is the decaying state as consumed (with the decay energy that
    was actually used); ``fragment`` + ``neutrons`` sum to it.
    """
    initial: FourVector
    fragment: FourVector
    neutrons: Tuple[FourVector, ...]
    decay_energy: float

    @property
    def vectors(self) -> List[FourVector]:
        """Ordered as ``[initial, fragment, n1, (n2)]``."""
        return [self.initial, self.fragment, *self.neutrons]


class NeutronDecay(ABC):
    """
    Contract shared by every neutron decay generator.

    Lifecycle: configure once (parameters, random source, verbosity), then
    per event call :meth:`set_input_particle` followed by :meth:`generate`.
    An instance is not safe to use from two threads at once.
    """

    name: str = "abstract"
    description: str = ""

    @abstractmethod
    def set_input_particle(self, particle: Particle) -> None:
        """Set the excited input state. Must be called before every generate()."""

    @abstractmethod
    def set_rng(self, rng) -> None:
        """Borrow the random source (not owned by the decay)."""

    @abstractmethod
    def set_verbose_level(self, level: int) -> None:
        """0: nothing, 1: fatal diagnostics only, 2: all diagnostics."""

    @abstractmethod
    def get_verbose_level(self) -> int:
        ...

    @abstractmethod
    def get_number_of_neutrons(self) -> int:
        ...

    @abstractmethod
    def set_decay_param(self, name: str, value: float) -> None:
        ...

    @abstractmethod
    def get_decay_param(self, name: str) -> float:
        ...

    @abstractmethod
    def generate(self) -> Optional[DecayProducts]:
        """
        Generate one decay.

        Returns:
            DecayProducts on success; None if the input state does not have
            enough energy for the decay (the stored final state is then cleared)
        """

    @abstractmethod
    def get_final(self, indx: int) -> FourVector:
        """0: initial state; 1: final fragment; 2, 3, ...: neutrons."""


class NeutronDecayBase(NeutronDecay):
    """
    Bookkeeping common to all decay types.

    Subclasses declare ``number_of_neutrons`` and ``parameters`` (allowed
    names with defaults) and implement :meth:`_generate`, which works in the
    rest frame of the decaying state and returns the fragment and neutron
    vectors (or None when the decay is energetically impossible).
    """

    number_of_neutrons: ClassVar[int] = 0
    parameters: ClassVar[Dict[str, float]] = {}

    def __init__(self, **params: float):
        self._params = DecayParameters(self.parameters, owner=self.name,
                                       validator=self._validate_param,
                                       check=self._check_params)
        self._params.update(params)
        self._initial: Optional[Particle] = None
        self._rng = None
        self._verbose = SILENT
        self._products: Optional[DecayProducts] = None
        self.final_fragment_mass: Optional[float] = None

    # -------------------- Configuration --------------------

    def set_input_particle(self, particle: Particle) -> None:
        fragment_mass = particle.mass - self.number_of_neutrons * NEUTRON_MASS
        if fragment_mass <= 0.0:
            raise ValueError(
                f"Input mass {particle.mass:.3f} MeV cannot hold a fragment and "
                f"{self.number_of_neutrons} neutron(s)"
            )
        self._initial = particle
        self.final_fragment_mass = fragment_mass
        self._products = None

    def set_rng(self, rng) -> None:
        self._rng = rng

    def set_verbose_level(self, level: int) -> None:
        if level not in (SILENT, FATAL, ALL):
            raise ValueError(f"Verbose level must be 0, 1 or 2, got {level}")
        self._verbose = level

    def get_verbose_level(self) -> int:
        return self._verbose

    def get_number_of_neutrons(self) -> int:
        return self.number_of_neutrons

    def set_decay_param(self, name: str, value: float) -> None:
        self._params.set(name, value)

    def get_decay_param(self, name: str) -> float:
        return self._params.get(name)

    def _validate_param(self, name: str, value: float) -> None:
        if name.endswith("width") and value < 0.0:
            raise DecayConfigurationError(f"'{name}' must be non-negative, got {value}")

    def _check_params(self, values: Dict[str, float]) -> None:
        """Constraints between parameters; ``values`` is the full candidate set."""

    @property
    def params(self) -> DecayParameters:
        return self._params

    @property
    def input_particle(self) -> Optional[Particle]:
        return self._initial

    # -------------------- Generation --------------------

    def generate(self) -> Optional[DecayProducts]:
        if self._initial is None:
            raise RuntimeError(f"{self.name}: set_input_particle() must be called before generate()")
        if self._rng is None:
            raise RuntimeError(f"{self.name}: set_rng() must be called before generate()")

        self._products = None
        result = self._generate()
        if result is None:
            return None

        decay_energy, fragment, neutrons = result
        consumed = self._initial.with_excitation(decay_energy).fourvec
        beta = consumed.beta()
        self._products = DecayProducts(
            initial=consumed,
            fragment=fragment.boost(beta),
            neutrons=tuple(n.boost(beta) for n in neutrons),
            decay_energy=decay_energy,
        )
        return self._products

    @abstractmethod
    def _generate(self) -> Optional[Tuple[float, FourVector, List[FourVector]]]:
        """
        Physics of one decay in the rest frame of the decaying state.

        Returns:
            (decay_energy, fragment, [neutrons]) or None if the decay is
            energetically impossible for the current input
        """

    @property
    def products(self) -> Optional[DecayProducts]:
        """Result of the last successful generate(), None after a failure."""
        return self._products

    def get_final(self, indx: int) -> FourVector:
        if not 0 <= indx <= self.number_of_neutrons + 1:
            raise IndexError(
                f"Final-state index {indx} out of range [0, {self.number_of_neutrons + 1}]"
            )
        if self._products is None:
            raise RuntimeError(f"{self.name}: no final state (generate() not called or failed)")
        return self._products.vectors[indx]

    # -------------------- Helpers --------------------

    @property
    def available_energy(self) -> float:
        """Excitation energy of the current input above the emission threshold."""
        return self._initial.excitation

    def _report_unweighting(self, controller) -> None:
        if controller.overflows:
            self._diagnose(FATAL, f"{controller.overflows} weight(s) above the unweighting ceiling "
                                  f"{controller.w_max:.6g} (largest {controller.max_weight_seen:.6g}); "
                                  f"sample is biased")

    def _diagnose(self, level: int, message: str) -> None:
        """Emit a diagnostic if the verbosity allows it; never affects control flow."""
        if self._verbose < level:
            return
        if level == FATAL:
            logger.error(f"{self.name}: {message}")
        else:
            logger.warning(f"{self.name}: {message}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._params.as_dict()})"
