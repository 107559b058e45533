#!/usr/bin/env python3
"""
Monte Carlo driver script for neutron decays of unbound nuclei

Examples:
    python monte_carlo.py --decay 1n --option energy=0.5 --option width=0.2 --excitation 2.0
    python monte_carlo.py --decay 2n-sequential --option intermediate_energy=0.8 --excitation 2.0 --events 10000 --seed 42
"""

import argparse
import logging
import statistics

from neutron_decay import (
    NEUTRON_MASS,
    DecayConfigurationError,
    DecayFactory,
    ExcitationGaussian,
    Particle,
    RandomSource,
    list_decay_types,
)
from neutron_decay.event_generator import simulate_batch, nn_relative_energy, nn_opening_angle


def parse_option(text):
    """KEY=VALUE -> (key, float(value))."""
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    try:
        return key.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"option value must be a number: '{text}'")


def build_parser():
    return argparse.ArgumentParser(
        description="Neutron decay Monte Carlo event generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""Decay types: {', '.join(list_decay_types())}

Examples:
  python monte_carlo.py --decay 1n --option energy=0.5 --excitation 2.0
  python monte_carlo.py --decay 2n-fsi --option radius=4.0 --excitation 1.5 --seed 42
  python monte_carlo.py --decay 2n-dineutron --excitation 3.0 --beam-momentum 5000 --verbose

2n-sequential needs --option intermediate_energy=VALUE."""
    )


def print_summary(results, n_neutrons):
    events = results["events"]
    print("\n" + "=" * 60)
    print("✅ Generation Complete")
    print("=" * 60)
    print(f"Successful decays : {results['success']}/{results['total']}")
    print(f"Forbidden decays  : {results['failed']}")
    print(f"Success rate      : {results['success_rate']:.2%}")
    if events:
        t_frag = statistics.fmean(p.fragment.kinetic_energy for p in events)
        t_n = statistics.fmean(n.kinetic_energy for p in events for n in p.neutrons)
        e_decay = statistics.fmean(p.decay_energy for p in events)
        print(f"<E_decay>         : {e_decay:.4f} MeV")
        print(f"<T_fragment>      : {t_frag:.4f} MeV")
        print(f"<T_neutron>       : {t_n:.4f} MeV")
        if n_neutrons == 2:
            e_nn = statistics.fmean(nn_relative_energy(p) for p in events)
            cos_nn = [c for c in (nn_opening_angle(p) for p in events) if c is not None]
            print(f"<E_nn>            : {e_nn:.4f} MeV")
            if cos_nn:
                print(f"<cos theta_nn>    : {statistics.fmean(cos_nn):+.4f}")
    print("=" * 60 + "\n")


def main():
    parser = build_parser()
    parser.add_argument("--decay", required=True, help="Decay type id (see list below)")
    parser.add_argument("--option", type=parse_option, action="append", default=[],
                        metavar="KEY=VALUE", help="Decay parameter, repeatable")
    parser.add_argument("--fragment-mass", type=float, default=22354.0,
                        help="Final fragment ground-state mass in MeV (default ~24O)")
    parser.add_argument("--excitation", type=float, default=1.0,
                        help="Mean excitation above the emission threshold in MeV (default 1.0)")
    parser.add_argument("--excitation-width", type=float, default=0.0,
                        help="Gaussian sigma of the excitation in MeV (default 0: fixed)")
    parser.add_argument("--beam-momentum", type=float, default=0.0,
                        help="Momentum of the decaying nucleus along z in MeV/c (default 0)")
    parser.add_argument("--events", type=int, default=1000, help="Number of decays (default 1000)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (optional)")
    parser.add_argument("--decay-verbose", type=int, choices=(0, 1, 2), default=1,
                        help="Decay diagnostic level: 0 silent, 1 fatal, 2 all (default 1)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s - %(name)s - %(message)s")

    factory = DecayFactory(args.decay, dict(args.option))
    try:
        decay = factory.create()
    except DecayConfigurationError as e:
        parser.error(str(e))
    decay.set_verbose_level(args.decay_verbose)

    n_neutrons = decay.get_number_of_neutrons()
    particle = Particle(args.fragment_mass + n_neutrons * NEUTRON_MASS,
                        excitation=args.excitation, pz=args.beam_momentum)
    rng = RandomSource(args.seed, excitation=ExcitationGaussian(args.excitation, args.excitation_width))

    print("\n" + "=" * 60)
    print("🔥 Neutron Decay Monte Carlo")
    print("=" * 60)
    print(f"Decay type       : {args.decay} ({decay.description})")
    print(f"Parameters       : {decay.params.as_dict()}")
    print(f"Fragment mass    : {args.fragment_mass:.3f} MeV")
    print(f"Excitation       : {args.excitation:.4f} ± {args.excitation_width:.4f} MeV")
    print(f"Beam momentum    : {args.beam_momentum:.1f} MeV/c")
    print(f"Number of Events : {args.events}")
    print(f"Random Seed      : {args.seed if args.seed is not None else 'None'}")
    print("=" * 60 + "\n")

    try:
        results = simulate_batch(decay, particle, n=args.events, rng=rng)
    except DecayConfigurationError as e:
        parser.error(str(e))
    print_summary(results, n_neutrons)


if __name__ == "__main__":
    main()
