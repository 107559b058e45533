import logging
from typing import Dict, List, Optional

from .conservation import check_energy_momentum
from .decays.base import DecayProducts, NeutronDecay
from .kinematics import invariant_mass, opening_angle
from .constants import NEUTRON_MASS
from .particles import Particle
from .rng import RandomSource


logger = logging.getLogger(__name__)


def validate_conservation(products: DecayProducts, tol: float = 1e-6) -> Dict[str, bool]:
    """
    Verify energy and momentum conservation of one decay (relative tolerance).
    """
    diag = check_energy_momentum([products.initial], [products.fragment, *products.neutrons], tol)
    return {
        "energy": diag["energy"],
        "momentum": diag["momentum"],
    }


def simulate_event(decay: NeutronDecay,
                   particle: Particle,
                   rng: RandomSource) -> Optional[DecayProducts]:
    """
    Generate one decay of ``particle``.

    If the random source carries an excitation distribution, the excitation
    of ``particle`` is replaced by a fresh draw before the decay.

    Args:
        decay: Configured decay generator
        particle: Input state (mass, momentum, excitation)
        rng: Random source, also handed to the decay

    Returns:
        DecayProducts, or None if the decay was energetically impossible
    """
    if rng.excitation_distribution is not None:
        particle = particle.with_excitation(rng.excitation())

    decay.set_rng(rng)
    decay.set_input_particle(particle)
    products = decay.generate()
    if products is None:
        logger.debug(f"No decay at Ex={particle.excitation:.4f} MeV")
        return None

    conserved = validate_conservation(products)
    if not all(conserved.values()):
        logger.error(f"Four-momentum not conserved: {conserved} for {products.vectors}")

    return products


def simulate_batch(decay: NeutronDecay,
                   particle: Particle,
                   n: int = 10,
                   rng: Optional[RandomSource] = None,
                   seed: Optional[int] = None) -> Dict[str, object]:
    """
    Generate ``n`` decay attempts with the same decay instance.

    Failed attempts are counted, not retried.
    """
    rng = rng or RandomSource(seed)
    events: List[DecayProducts] = []
    failed = 0

    for _ in range(n):
        products = simulate_event(decay, particle, rng)
        if products is None:
            failed += 1
        else:
            events.append(products)

    success = len(events)
    logger.info(f"✅ Batch complete: {success}/{n} decays generated, {failed} energetically forbidden")

    return {
        "success": success,
        "failed": failed,
        "total": n,
        "success_rate": success / n if n > 0 else 0.0,
        "events": events,
    }


def nn_relative_energy(products: DecayProducts) -> float:
    """Relative energy of the two neutrons (nn invariant mass above 2 m_n)."""
    if len(products.neutrons) != 2:
        raise ValueError("nn relative energy needs a two-neutron decay")
    return invariant_mass(*products.neutrons) - 2.0 * NEUTRON_MASS


def nn_opening_angle(products: DecayProducts) -> Optional[float]:
    """Cosine of the nn opening angle in the frame of the decaying nucleus."""
    if len(products.neutrons) != 2:
        raise ValueError("nn opening angle needs a two-neutron decay")
    beta = products.initial.beta()
    n1, n2 = (n.boost(-beta) for n in products.neutrons)
    return opening_angle(n1, n2)
