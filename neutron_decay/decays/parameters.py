"""
Named floating-point parameters of one decay instance.

Keys are fixed by the algorithm that owns the store: a whitelist of names
with default values. Unknown names fail loudly on both read and write.
"""
from typing import Callable, Dict, Iterator, Mapping, Optional

from ..errors import DecayConfigurationError


class DecayParameters:
    """
    Whitelisted string-keyed parameter store.

    Args:
        defaults: Allowed parameter names and their default values
        owner: Name used in error messages (e.g. the decay type id)
        validator: Optional ``validator(name, value)`` raising
            DecayConfigurationError on a bad value
        check: Optional ``check(values)`` over the whole candidate set,
            for constraints that tie several parameters together; a
            failed check leaves the stored values unchanged
    """

    def __init__(self, defaults: Mapping[str, float], owner: str = "decay",
                 validator: Optional[Callable[[str, float], None]] = None,
                 check: Optional[Callable[[Mapping[str, float]], None]] = None):
        self._owner = owner
        self._validator = validator
        self._check = check
        self._allowed = frozenset(defaults)
        self._values: Dict[str, float] = {}
        self.update(defaults)

    def _check_key(self, name: str) -> None:
        if name not in self._allowed:
            allowed = ", ".join(sorted(self._allowed)) or "none"
            raise DecayConfigurationError(
                f"Unknown parameter '{name}' for {self._owner} (allowed: {allowed})"
            )

    def _coerce(self, name: str, value) -> float:
        self._check_key(name)
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise DecayConfigurationError(
                f"Parameter '{name}' for {self._owner} must be a number, got {value!r}"
            ) from e
        if self._validator is not None:
            self._validator(name, value)
        return value

    def set(self, name: str, value: float) -> None:
        self.update({name: value})

    def get(self, name: str) -> float:
        self._check_key(name)
        return self._values[name]

    def update(self, values: Mapping[str, float]) -> None:
        """Set several parameters at once; all of them or none are stored."""
        candidate = dict(self._values)
        for name, value in values.items():
            candidate[name] = self._coerce(name, value)
        if self._check is not None:
            self._check(candidate)
        self._values = candidate

    def as_dict(self) -> Dict[str, float]:
        return dict(self._values)

    def __getitem__(self, name: str) -> float:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._allowed

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"DecayParameters({self._owner}: {self._values})"
