import numpy as np
import matplotlib.pyplot as plt

from neutron_decay import NEUTRON_MASS, Particle, RandomSource, create_decay
from neutron_decay.event_generator import simulate_batch, nn_relative_energy, nn_opening_angle

# ---------- SETUP ----------
FRAGMENT_MASS = 22354.0  # MeV, ~24O
EXCITATION = 2.0  # MeV
N_EVENTS = 20000

MODELS = {
    "Phase space": ("2n-phase-space", {}),
    "Phase space + FSI": ("2n-fsi", {"radius": 3.0}),
    "Dineutron": ("2n-dineutron", {}),
    "Sequential": ("2n-sequential", {"intermediate_energy": 1.0, "intermediate_width": 0.2}),
}


def generate(decay_type, options, seed=42):
    decay = create_decay(decay_type, options)
    particle = Particle(FRAGMENT_MASS + 2 * NEUTRON_MASS, excitation=EXCITATION)
    results = simulate_batch(decay, particle, n=N_EVENTS, rng=RandomSource(seed))
    events = results["events"]
    e_nn = np.array([nn_relative_energy(p) for p in events])
    cos_nn = np.array([c for c in (nn_opening_angle(p) for p in events) if c is not None])
    print(f"[{decay_type}] accepted {results['success']}/{results['total']}, <E_nn> = {e_nn.mean():.3f} MeV")
    return e_nn, cos_nn


# ---------- MAIN ----------
def main():
    fig, (ax_e, ax_c) = plt.subplots(1, 2, figsize=(12, 5))

    for label, (decay_type, options) in MODELS.items():
        e_nn, cos_nn = generate(decay_type, options)
        ax_e.hist(e_nn / EXCITATION, bins=50, range=(0, 1), density=True, histtype="step", label=label)
        ax_c.hist(cos_nn, bins=40, range=(-1, 1), density=True, histtype="step", label=label)

    ax_e.set_xlabel(r"$E_{nn} / E_{decay}$", fontsize=12)
    ax_e.set_ylabel("Probability density", fontsize=12)
    ax_e.set_title("nn relative energy", fontsize=14)
    ax_c.set_xlabel(r"$\cos\theta_{nn}$", fontsize=12)
    ax_c.set_title("nn opening angle", fontsize=14)

    for ax in (ax_e, ax_c):
        ax.legend(fontsize=10)
        ax.grid(alpha=0.3)

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
