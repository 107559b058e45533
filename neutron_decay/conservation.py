# conservation.py
# Four-momentum conservation checks for generated decays.
#
# Tolerances are relative to the largest energy involved so that the same
# default works for decays at rest and for fast beam-like nuclei.
from .kinematics import FourVector


def _total(vectors):
    total = FourVector(0.0, 0.0, 0.0, 0.0)
    for v in vectors:
        total = total + v
    return total


def check_energy_momentum(initial_vectors, final_vectors, tol=1e-6):
    """Return diagnostic dict for full 4-momentum conservation.

    Parameters
    ----------
    initial_vectors : list of FourVector
        Incoming (decaying) states.
    final_vectors : list of FourVector
        Outgoing fragment and neutrons.
    tol : float
        Relative tolerance, scaled by ``max(1, E_initial, E_final)`` MeV.

    Returns
    -------
    dict
        Deltas for energy and momentum components, the absolute tolerance
        actually applied and a boolean 'conserved' summarizing the result.

    Examples
    --------
    >>> from neutron_decay.kinematics import FourVector
    >>> p_initial = FourVector(12, 0, 0, 0)
    >>> p1 = FourVector(4, 2, 0, 0)
    >>> p2 = FourVector(4, -1, 1, 0)
    >>> p3 = FourVector(4, -1, -1, 0)
    >>> check_energy_momentum([p_initial], [p1, p2, p3])['conserved']
    True
    """
    ti = _total(initial_vectors)
    tf = _total(final_vectors)
    scale = max(1.0, abs(ti.E), abs(tf.E))
    abs_tol = tol * scale
    dE = ti.E - tf.E; dPx = ti.px - tf.px; dPy = ti.py - tf.py; dPz = ti.pz - tf.pz
    energy_ok = abs(dE) < abs_tol
    momentum_ok = abs(dPx) < abs_tol and abs(dPy) < abs_tol and abs(dPz) < abs_tol
    return {
        'conserved': energy_ok and momentum_ok,
        'energy': energy_ok,
        'momentum': momentum_ok,
        'deltaE': dE,
        'deltaPx': dPx,
        'deltaPy': dPy,
        'deltaPz': dPz,
        'E_initial': ti.E,
        'E_final': tf.E,
        'tolerance': abs_tol,
    }


def check_conservation(initial_vectors, final_vectors, tol=1e-6):
    """True if energy and all momentum components balance within ``tol`` (relative)."""
    return check_energy_momentum(initial_vectors, final_vectors, tol)['conserved']
