"""Evolvable groups of parameters shared by nodes and links."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

NUM_TRAIT_PARAMS = 8
"""Default number of parameters held by a trait."""


class TraitParametersMismatchError(ValueError):
    """Raised when two traits with different parameter counts are combined."""

    def __init__(self, message: str = "traits parameters number mismatch") -> None:
        super().__init__(message)


def _default_params() -> list[float]:
    return [0.0] * NUM_TRAIT_PARAMS


@dataclass
class Trait:
    """A group of parameters that nodes and links can point to and that evolves on its own."""

    id: int = 0
    params: list[float] = field(default_factory=_default_params)

    def copy(self) -> Trait:
        """Return an independent copy of this trait."""
        return Trait(id=self.id, params=list(self.params))

    def averaged(self, other: Trait) -> Trait:
        """Return a new trait whose parameters are the mean of this trait's and ``other``'s.

        The new trait takes the ID of this trait.
        """
        if len(self.params) != len(other.params):
            raise TraitParametersMismatchError()
        return Trait(
            id=self.id,
            params=[(a + b) / 2.0 for a, b in zip(self.params, other.params)],
        )

    def mutate(self, trait_mutation_power: float, trait_param_mut_prob: float) -> None:
        """Perturb the parameters slightly; parameters never drop below zero."""
        for i, value in enumerate(self.params):
            if random.random() > trait_param_mut_prob:
                sign = random.choice((-1, 1))
                value += sign * random.random() * trait_mutation_power
                self.params[i] = max(value, 0.0)

    def __str__(self) -> str:
        values = "".join(f" {p:f}" for p in self.params)
        return f"Trait #{self.id} ({values} )"