class UnweightingController:
    """
    Accept/reject against a fixed weight ceiling ``w_max * safety_factor``.

    A weight above the ceiling means the bound was wrong and the accepted
    sample is biased; such weights are counted in ``overflows`` and the
    largest one is kept in ``max_weight_seen`` for the caller to report.
    """

    def __init__(self, w_max: float, safety_factor: float = 1.2):
        if w_max <= 0.0:
            raise ValueError(f"w_max must be positive, got {w_max}")
        self.w_max = w_max * safety_factor
        self.accepted = 0
        self.rejected = 0
        self.overflows = 0
        self.max_weight_seen = 0.0

    def accept(self, weight: float, rng) -> bool:
        self.max_weight_seen = max(self.max_weight_seen, weight)
        if weight > self.w_max:
            self.overflows += 1
        if rng.uniform(0.0, self.w_max) < weight:
            self.accepted += 1
            return True
        self.rejected += 1
        return False

    @property
    def trials(self) -> int:
        return self.accepted + self.rejected

    @property
    def efficiency(self) -> float:
        return self.accepted / self.trials if self.trials > 0 else 0.0
