"""Exception types raised by the decay engine."""


class KinematicsError(ValueError):
    """A two-body break-up was requested with a parent lighter than its daughters."""


class DecayConfigurationError(ValueError):
    """Unknown decay type, unknown decay parameter or an invalid parameter value."""
