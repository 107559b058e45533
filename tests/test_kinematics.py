"""Four-vector algebra and two-body evaporation kinematics.

Covers:
  - FourVector mass / boost consistency
  - Kallen break-up momentum
  - NeutronEvaporation (rest frame, threshold, forbidden, isotropy)
  - evaporate_from for a moving parent
"""

import math
import numpy as np
import pytest

from neutron_decay.constants import NEUTRON_MASS
from neutron_decay.conservation import check_energy_momentum
from neutron_decay.errors import KinematicsError
from neutron_decay.evaporation import NeutronEvaporation, evaporate_from
from neutron_decay.kinematics import (
    FourVector,
    breakup_momentum,
    invariant_mass,
    isotropic_direction,
    opening_angle,
)
from neutron_decay.rng import RandomSource


# ----------------------------- Utility ------------------------------------
def _assert_close(a, b, tol=1e-9, msg=""):
    assert abs(a - b) < tol, msg or f"Values differ: {a} vs {b} (tol={tol})"


# ------------------------------ FourVector --------------------------------
def test_fourvector_mass_and_kinetic_energy():
    v = FourVector.from_momentum(NEUTRON_MASS, np.array([10.0, -20.0, 30.0]))
    _assert_close(v.mass, NEUTRON_MASS, tol=1e-9)
    _assert_close(v.kinetic_energy, v.E - NEUTRON_MASS)
    assert v.to_tuple() == (v.E, 10.0, -20.0, 30.0)


def test_boost_round_trip():
    v = FourVector(1000.0, 30.0, -40.0, 120.0)
    beta = np.array([0.1, -0.2, 0.3])
    back = v.boost(beta).boost(-beta)
    for a, b in zip(v.to_tuple(), back.to_tuple()):
        _assert_close(a, b, tol=1e-9)


def test_boost_to_rest_frame():
    v = FourVector.from_momentum(500.0, np.array([0.0, 0.0, 300.0]))
    rest = v.boost(-v.beta())
    _assert_close(rest.E, 500.0, tol=1e-9)
    _assert_close(rest.magnitude, 0.0, tol=1e-9)


def test_superluminal_boost_raises():
    with pytest.raises(ValueError):
        FourVector(1.0, 0, 0, 0).boost(np.array([0.0, 0.0, 1.0]))


def test_isotropic_direction_is_unit():
    rng = RandomSource(1)
    for _ in range(100):
        _assert_close(float(np.linalg.norm(isotropic_direction(rng))), 1.0, tol=1e-12)


def test_invariant_mass_and_opening_angle():
    a = FourVector.from_momentum(100.0, np.array([50.0, 0.0, 0.0]))
    b = FourVector.from_momentum(100.0, np.array([-50.0, 0.0, 0.0]))
    _assert_close(invariant_mass(a, b), a.E + b.E, tol=1e-9)
    _assert_close(opening_angle(a, b), -1.0)
    assert opening_angle(a, FourVector(100.0, 0.0, 0.0, 0.0)) is None


# ------------------------- Break-up momentum -------------------------------
@pytest.mark.parametrize("m0,m1,m2", [(1000.0, 200.0, 300.0), (2000.0, 939.6, 939.6), (500.0, 0.0, 100.0)])
def test_breakup_momentum_formula_match(m0, m1, m2):
    p_expected = math.sqrt((m0**2 - (m1 + m2)**2) * (m0**2 - (m1 - m2)**2)) / (2 * m0)
    _assert_close(breakup_momentum(m0, m1, m2), p_expected)


def test_breakup_momentum_below_threshold_is_zero():
    assert breakup_momentum(10.0, 6.0, 6.0) == 0.0


# --------------------------- Evaporation ----------------------------------
def test_evaporation_back_to_back():
    m0, mf = 22354.0 + NEUTRON_MASS + 1.5, 22354.0
    frag, neut = NeutronEvaporation(m0, mf, NEUTRON_MASS)(RandomSource(7))
    _assert_close(frag.magnitude, neut.magnitude)
    _assert_close(frag.px, -neut.px)
    _assert_close(frag.py, -neut.py)
    _assert_close(frag.pz, -neut.pz)
    _assert_close(frag.magnitude, breakup_momentum(m0, mf, NEUTRON_MASS))
    diag = check_energy_momentum([FourVector(m0, 0, 0, 0)], [frag, neut])
    for key in ("deltaE", "deltaPx", "deltaPy", "deltaPz"):
        _assert_close(diag[key], 0.0, tol=1e-6)


def test_evaporation_masses_on_shell():
    frag, neut = NeutronEvaporation(5000.0, 3000.0, NEUTRON_MASS)(RandomSource(3))
    _assert_close(frag.mass, 3000.0, tol=1e-6)
    _assert_close(neut.mass, NEUTRON_MASS, tol=1e-6)


def test_evaporation_threshold_at_rest():
    frag, neut = NeutronEvaporation(4.0 + 6.0, 4.0, 6.0)(RandomSource(0))
    _assert_close(frag.magnitude, 0.0)
    _assert_close(neut.magnitude, 0.0)
    _assert_close(frag.E, 4.0)
    _assert_close(neut.E, 6.0)


def test_evaporation_forbidden_raises():
    with pytest.raises(KinematicsError):
        NeutronEvaporation(5.0, 3.0, 3.0)
    # still a ValueError for callers that catch the generic type
    with pytest.raises(ValueError):
        NeutronEvaporation(5.0, 3.0, 3.0)


def test_evaporation_isotropic():
    rng = RandomSource(11)
    evap = NeutronEvaporation(3000.0, 2000.0, NEUTRON_MASS)
    cos_theta = [n.pz / n.magnitude for _, n in (evap(rng) for _ in range(20000))]
    # <cos> = 0 and <cos^2> = 1/3 for an isotropic distribution
    assert abs(np.mean(cos_theta)) < 0.02
    assert abs(np.mean(np.square(cos_theta)) - 1.0 / 3.0) < 0.02


def test_evaporate_from_moving_parent_conserves():
    parent = FourVector.from_momentum(5000.0, np.array([0.0, 100.0, 2000.0]))
    frag, neut = evaporate_from(parent, 4000.0, NEUTRON_MASS, RandomSource(5))
    diag = check_energy_momentum([parent], [frag, neut])
    for key in ("deltaE", "deltaPx", "deltaPy", "deltaPz"):
        _assert_close(diag[key], 0.0, tol=1e-6)
    _assert_close(frag.mass, 4000.0, tol=1e-6)
