"""
Neutron-neutron final-state interaction.

The s-wave nn amplitude in the effective-range expansion,

    f(k) = 1 / (k cot(delta) - i k),   k cot(delta) = -1/a + r k^2 / 2,

and the Lednicky-Lyuboshitz correlation function of two identical neutrons
emitted from a Gaussian source of radius r0, as used by F. M. Marques et al.,
PLB 476 (2000) 219:

    C(k) = 1 - exp(-4 k^2 r0^2) / 2
             + 1/2 [ |f|^2 / (2 r0^2) (1 - r / (2 sqrt(pi) r0))
                     + 2 Re f / (sqrt(pi) r0) F1(2 k r0)
                     - Im f / r0 F2(2 k r0) ]

with F1(z) = dawsn(z) / z and F2(z) = (1 - exp(-z^2)) / z. The Lednicky
amplitude convention f0 = -a is absorbed by writing f in terms of a.

k is the momentum of either neutron in the pair rest frame, in fm^-1.
"""

import numpy as np
from scipy.special import dawsn

from ..constants import HBARC, NEUTRON_MASS


def nn_amplitude(k, scattering_length, effective_range):
    """Complex s-wave nn scattering amplitude (fm) for ``k`` in fm^-1."""
    k = np.asarray(k, dtype=float)
    k_cot_delta = -1.0 / scattering_length + 0.5 * effective_range * k**2
    return 1.0 / (k_cot_delta - 1j * k)


def _f1(z):
    z = np.asarray(z, dtype=float)
    safe = np.where(z > 1e-8, z, 1.0)
    return np.where(z > 1e-8, dawsn(safe) / safe, 1.0)


def _f2(z):
    z = np.asarray(z, dtype=float)
    safe = np.where(z > 1e-8, z, 1.0)
    return np.where(z > 1e-8, -np.expm1(-safe**2) / safe, 0.0)


def nn_correlation(k, radius, scattering_length, effective_range):
    """Correlation function C(k); accepts a scalar or an array of k (fm^-1)."""
    k = np.asarray(k, dtype=float)
    r0 = float(radius)
    f = nn_amplitude(k, scattering_length, effective_range)
    z = 2.0 * k * r0
    sqrt_pi = np.sqrt(np.pi)

    fsi = (np.abs(f)**2 / (2.0 * r0**2) * (1.0 - effective_range / (2.0 * sqrt_pi * r0))
           + 2.0 * f.real / (sqrt_pi * r0) * _f1(z)
           - f.imag / r0 * _f2(z))
    c = 1.0 - 0.5 * np.exp(-z**2) + 0.5 * fsi
    return float(c) if c.ndim == 0 else c


def momentum_to_wavenumber(p_mev):
    """MeV/c -> fm^-1."""
    return np.asarray(p_mev, dtype=float) / HBARC


def relative_energy_to_wavenumber(energy):
    """nn relative energy (MeV) -> k in fm^-1, with E = (hbar k)^2 / (2 mu), mu = m_n / 2."""
    energy = np.maximum(np.asarray(energy, dtype=float), 0.0)
    return np.sqrt(NEUTRON_MASS * energy) / HBARC
