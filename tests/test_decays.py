"""Behaviour shared by all decay generators.

Covers:
  - Energy-momentum conservation (at rest and boosted)
  - Neutron multiplicity and final-state indexing
  - Breit-Wigner spike
  - Insufficient excitation energy
  - Determinism with a seeded random source
  - Lifecycle errors and verbosity
"""

import logging
import pytest

from neutron_decay.constants import NEUTRON_MASS
from neutron_decay.conservation import check_energy_momentum
from neutron_decay.decays import (
    DecayProducts,
    OneNeutronBreitWigner,
    TwoNeutronSequential,
    create_decay,
)
from neutron_decay.particles import Particle
from neutron_decay.rng import RandomSource

FRAGMENT_MASS = 22354.0  # ~24O

DECAYS = [
    ("1n", {"energy": 0.8, "width": 0.3}),
    ("2n-phase-space", {}),
    ("2n-fsi", {"radius": 4.0}),
    ("2n-dineutron", {}),
    ("2n-sequential", {"intermediate_energy": 0.9, "intermediate_width": 0.1}),
]


def _particle(n_neutrons, excitation=2.0, pz=0.0, px=0.0):
    return Particle(FRAGMENT_MASS + n_neutrons * NEUTRON_MASS, excitation=excitation, px=px, pz=pz)


def _assert_conserved(products, tol=1e-6):
    # absolute tolerance in MeV, independent of the beam energy
    diag = check_energy_momentum([products.initial], [products.fragment, *products.neutrons])
    for key in ("deltaE", "deltaPx", "deltaPy", "deltaPz"):
        assert abs(diag[key]) < tol, f"{key} = {diag[key]:.3e} MeV: {diag}"


def _setup(decay_type, options, seed=1, **particle_kw):
    decay = create_decay(decay_type, options)
    decay.set_rng(RandomSource(seed))
    decay.set_input_particle(_particle(decay.get_number_of_neutrons(), **particle_kw))
    return decay


# -------------------------- Conservation -----------------------------------
@pytest.mark.parametrize("decay_type,options", DECAYS)
@pytest.mark.parametrize("pz,px", [(0.0, 0.0), (6000.0, 300.0)])
def test_conservation(decay_type, options, pz, px):
    decay = _setup(decay_type, options, pz=pz, px=px)
    generated = 0
    for _ in range(300):
        products = decay.generate()
        if products is None:
            continue
        generated += 1
        _assert_conserved(products)
    assert generated > 0


@pytest.mark.parametrize("decay_type,options", DECAYS)
def test_final_masses_on_shell(decay_type, options):
    decay = _setup(decay_type, options, pz=3000.0)
    products = None
    while products is None:
        products = decay.generate()
    assert abs(products.fragment.mass - FRAGMENT_MASS) < 1e-3
    for n in products.neutrons:
        assert abs(n.mass - NEUTRON_MASS) < 1e-3
    # the consumed initial state keeps the input three-momentum
    assert products.initial.pz == 3000.0


# ----------------------- Multiplicity / indexing ---------------------------
@pytest.mark.parametrize("decay_type,options", DECAYS)
def test_multiplicity_and_get_final(decay_type, options):
    decay = _setup(decay_type, options)
    n = decay.get_number_of_neutrons()
    assert n == (1 if decay_type == "1n" else 2)

    products = None
    while products is None:
        products = decay.generate()
    assert isinstance(products, DecayProducts)
    assert len(products.neutrons) == n
    assert len(products.vectors) == n + 2

    assert decay.get_final(0) is products.initial
    assert decay.get_final(1) is products.fragment
    for i in range(n):
        assert decay.get_final(2 + i) is products.neutrons[i]

    with pytest.raises(IndexError):
        decay.get_final(n + 2)
    with pytest.raises(IndexError):
        decay.get_final(-1)


# ---------------------------- Breit-Wigner ---------------------------------
@pytest.mark.parametrize("seed", [0, 1, 2, 12345])
def test_breit_wigner_spike(seed):
    decay = OneNeutronBreitWigner(energy=0.65, width=0.0)
    decay.set_rng(RandomSource(seed))
    decay.set_input_particle(_particle(1, excitation=3.0))
    for _ in range(20):
        products = decay.generate()
        assert products.decay_energy == 0.65
        assert abs(products.initial.mass - (FRAGMENT_MASS + NEUTRON_MASS + 0.65)) < 1e-6


def test_breit_wigner_energy_above_available_fails():
    decay = OneNeutronBreitWigner(energy=1.0, width=0.0)
    decay.set_rng(RandomSource(0))
    decay.set_input_particle(_particle(1, excitation=0.5))
    assert decay.generate() is None


def test_breit_wigner_distribution_centred():
    decay = OneNeutronBreitWigner(energy=1.0, width=0.2)
    decay.set_rng(RandomSource(8))
    decay.set_input_particle(_particle(1, excitation=100.0))
    energies = sorted(decay.sample_decay_energy() for _ in range(4000))
    median = energies[len(energies) // 2]
    assert abs(median - 1.0) < 0.02
    # half of a Cauchy lies within +-FWHM/2
    inside = sum(1 for e in energies if abs(e - 1.0) < 0.1) / len(energies)
    assert abs(inside - 0.5) < 0.04


# -------------------------- Insufficient energy ----------------------------
@pytest.mark.parametrize("decay_type,options", DECAYS + [("1n", {"energy": 0.0, "width": 0.0})])
@pytest.mark.parametrize("excitation", [-0.5, -1e-6])
def test_below_threshold_always_fails(decay_type, options, excitation):
    decay = _setup(decay_type, options, excitation=excitation)
    for _ in range(200):
        assert decay.generate() is None
    assert decay.products is None


def test_sequential_intermediate_above_available_fails():
    decay = TwoNeutronSequential(intermediate_energy=1.5)
    decay.set_rng(RandomSource(0))
    decay.set_input_particle(_particle(2, excitation=1.0))
    assert decay.generate() is None
    # still reported for inspection
    assert abs(decay.intermediate_fragment_mass - (FRAGMENT_MASS + NEUTRON_MASS + 1.5)) < 1e-9


def test_failed_generate_clears_final_state():
    decay = OneNeutronBreitWigner(energy=0.5)
    decay.set_rng(RandomSource(0))
    decay.set_input_particle(_particle(1, excitation=1.0))
    assert decay.generate()
    decay.set_input_particle(_particle(1, excitation=0.1))
    assert decay.generate() is None
    with pytest.raises(RuntimeError):
        decay.get_final(1)


# ------------------------------ Determinism --------------------------------
@pytest.mark.parametrize("decay_type,options", DECAYS)
def test_same_seed_same_events(decay_type, options):
    def run():
        decay = _setup(decay_type, options, seed=2024, pz=1000.0)
        out = []
        for _ in range(50):
            products = decay.generate()
            out.append(None if products is None else [v.to_tuple() for v in products.vectors])
        return out

    assert run() == run()


# ------------------------------- Lifecycle ---------------------------------
def test_generate_requires_input_and_rng():
    decay = create_decay("2n-phase-space")
    with pytest.raises(RuntimeError):
        decay.generate()
    decay.set_input_particle(_particle(2))
    with pytest.raises(RuntimeError):
        decay.generate()


def test_input_mass_too_small_for_neutrons():
    decay = create_decay("2n-dineutron")
    with pytest.raises(ValueError):
        decay.set_input_particle(Particle(1.5 * NEUTRON_MASS, excitation=1.0))


def test_instance_reused_across_events():
    decay = create_decay("2n-sequential", {"intermediate_energy": 0.5})
    decay.set_rng(RandomSource(3))
    for ex in [0.6, 1.0, 0.2, 2.0]:
        decay.set_input_particle(_particle(2, excitation=ex))
        products = decay.generate()
        assert (products is not None) == (ex >= 0.5)
        if products is not None:
            assert abs(products.decay_energy - ex) < 1e-12


# ------------------------------- Verbosity ---------------------------------
def test_verbose_level_roundtrip_and_validation():
    decay = create_decay("1n")
    assert decay.get_verbose_level() == 0
    decay.set_verbose_level(2)
    assert decay.get_verbose_level() == 2
    with pytest.raises(ValueError):
        decay.set_verbose_level(3)


@pytest.mark.parametrize("level,expect_message", [(0, False), (1, False), (2, True)])
def test_verbosity_gates_diagnostics(caplog, level, expect_message):
    decay = OneNeutronBreitWigner(energy=2.0)
    decay.set_verbose_level(level)
    decay.set_rng(RandomSource(0))
    decay.set_input_particle(_particle(1, excitation=1.0))
    with caplog.at_level(logging.DEBUG, logger="neutron_decay"):
        assert decay.generate() is None
    assert any("outside" in r.getMessage() for r in caplog.records) is expect_message


@pytest.mark.parametrize("decay_type,options", DECAYS)
@pytest.mark.parametrize("excitation", [2.0, -0.5])
def test_silent_level_logs_nothing(caplog, decay_type, options, excitation):
    decay = _setup(decay_type, options, excitation=excitation)
    with caplog.at_level(logging.DEBUG, logger="neutron_decay"):
        for _ in range(50):
            decay.generate()
    assert caplog.records == []


def _phase_space_with_ceiling(ceiling, level):
    decay = create_decay("2n-fsi")
    decay.set_verbose_level(level)
    decay.set_rng(RandomSource(0))
    decay.set_input_particle(_particle(2, excitation=2.0))
    decay.max_weight = lambda m0, mf: ceiling
    return decay


@pytest.mark.parametrize("level,expect_message", [(0, False), (1, True), (2, True)])
def test_non_positive_ceiling_is_fatal(caplog, level, expect_message):
    decay = _phase_space_with_ceiling(0.0, level)
    with caplog.at_level(logging.DEBUG, logger="neutron_decay"):
        assert decay.generate() is None
    fatal = [r for r in caplog.records if r.levelno == logging.ERROR and "ceiling" in r.getMessage()]
    assert bool(fatal) is expect_message


@pytest.mark.parametrize("level,expect_message", [(0, False), (1, True)])
def test_ceiling_overflow_reported(caplog, level, expect_message):
    # a far too low ceiling lets every weight through and biases the sample
    decay = _phase_space_with_ceiling(1e-12, level)
    with caplog.at_level(logging.DEBUG, logger="neutron_decay"):
        assert decay.generate() is not None
    overflow = [r for r in caplog.records if "above the unweighting ceiling" in r.getMessage()]
    assert bool(overflow) is expect_message


# ---------------------------- Initial state --------------------------------
@pytest.mark.parametrize("decay_type,options", DECAYS)
def test_consumed_initial_state_carries_decay_energy(decay_type, options):
    decay = _setup(decay_type, options, pz=3000.0, px=-200.0)
    products = None
    while products is None:
        products = decay.generate()
    threshold_mass = FRAGMENT_MASS + decay.get_number_of_neutrons() * NEUTRON_MASS
    consumed = Particle.from_fourvector(threshold_mass, products.initial)
    assert abs(consumed.excitation - products.decay_energy) < 1e-6
    assert (consumed.px, consumed.pz) == (-200.0, 3000.0)
    assert abs(consumed.fourvec.E - products.initial.E) < 1e-6
