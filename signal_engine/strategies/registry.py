"""
Strategy registry - maps strategy keys to descriptors.
"""

from typing import Dict, Iterable, List

from .catalog import BUILTIN_STRATEGIES
from .descriptor import StrategyDescriptor


class StrategyRegistry:
    """
    Name-addressable collection of strategy descriptors.

    Example:
        >>> registry = StrategyRegistry(BUILTIN_STRATEGIES)
        >>> registry.get('warren_buffett').display_name
        'Warren Buffett'
    """

    def __init__(self, descriptors: Iterable[StrategyDescriptor] = ()):
        self._strategies: Dict[str, StrategyDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: StrategyDescriptor, replace: bool = False) -> None:
        """
        Add a strategy.

        Raises:
            ValueError: if the key is already registered and replace is False
        """
        key = descriptor.key.lower()
        if key in self._strategies and not replace:
            raise ValueError(f"Strategy '{descriptor.key}' is already registered")
        self._strategies[key] = descriptor

    def get(self, key: str) -> StrategyDescriptor:
        """
        Look up a strategy by key (case-insensitive).

        Raises:
            ValueError: for an unknown key
        """
        normalized = key.strip().lower()
        if normalized not in self._strategies:
            raise ValueError(
                f"Unknown strategy '{key}'. Available: {', '.join(self.names())}")
        return self._strategies[normalized]

    def names(self) -> List[str]:
        return list(self._strategies)

    def resolve(self, keys: Iterable[str]) -> List[StrategyDescriptor]:
        """Descriptors for the given keys, in order."""
        return [self.get(k) for k in keys]

    def __contains__(self, key: str) -> bool:
        return key.strip().lower() in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)


# Global registry with the built-in strategies
registry = StrategyRegistry(BUILTIN_STRATEGIES)
