"""
Base generator class for NPE Claims Analytics.

Provides common functionality for all data generators.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Any

import numpy as np
from numpy.random import Generator as RNG

from npe_claims.statistics.distributions import sample_from_distribution

T = TypeVar("T")


class BaseGenerator(ABC, Generic[T]):
    """
    Abstract base class for data generators.

    Every generator draws from the RNG it is handed and never from global
    random state, so a run is reproducible from its seed as long as the
    generators are called in the same order.

    Usage:
        class MyGenerator(BaseGenerator[MyModel]):
            def generate(self, **kwargs) -> MyModel:
                ...
    """

    def __init__(self, rng: RNG):
        """
        Initialize the generator.

        Args:
            rng: NumPy random number generator shared by the whole run
        """
        self.rng = rng

    @abstractmethod
    def generate(self, **kwargs: Any) -> T:
        """
        Generate a single entity.

        Args:
            **kwargs: Generation parameters

        Returns:
            Generated entity
        """
        pass

    def choice(
        self,
        options: list[Any],
        weights: list[float] | None = None,
    ) -> Any:
        """
        Make a weighted random choice.

        Args:
            options: List of options to choose from
            weights: Optional weights (will be normalized)

        Returns:
            Chosen option
        """
        if not options:
            raise ValueError("Cannot choose from empty list")

        if weights:
            weights_arr = np.array(weights, dtype=float)
            weights_arr = weights_arr / weights_arr.sum()  # Normalize
            idx = self.rng.choice(len(options), p=weights_arr)
        else:
            idx = self.rng.integers(0, len(options))

        return options[int(idx)]

    def choice_from_dict(self, distribution: dict[str, float]) -> str:
        """
        Choose from a dictionary distribution.

        Args:
            distribution: Dict mapping options to weights

        Returns:
            Chosen option key
        """
        return sample_from_distribution(self.rng, distribution)

    def uniform_int(self, low: int, high: int) -> int:
        """
        Generate uniform random integer.

        Args:
            low: Lower bound (inclusive)
            high: Upper bound (exclusive)

        Returns:
            Random integer in [low, high)
        """
        return int(self.rng.integers(low, high))

    def bernoulli(self, p: float) -> bool:
        """
        Generate Bernoulli random variable.

        Args:
            p: Probability of True

        Returns:
            True with probability p
        """
        return bool(self.rng.random() < p)

    def sample(self, population: list[Any], k: int) -> list[Any]:
        """
        Sample k items without replacement.

        The order of the result is the draw order.

        Args:
            population: List to sample from
            k: Number of items to sample

        Returns:
            List of k sampled items

        Raises:
            ValueError: If k exceeds the population size
        """
        if k > len(population):
            raise ValueError(
                f"Cannot sample {k} items from a population of {len(population)}"
            )
        indices = self.rng.choice(len(population), size=k, replace=False)
        return [population[i] for i in indices]
