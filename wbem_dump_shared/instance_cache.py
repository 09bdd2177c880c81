"""
Instance Cache — Per-namespace record of which instance paths were fetched.

Several classes in one namespace can enumerate the same instance (a subclass
instance shows up under every ancestor with deep enumeration). The cache maps
the canonical instance-path string to the outcome of the single fetch attempt:

    None       fetched and written successfully
    Exception  the error raised by the fetch

A key that is present is never fetched again, whatever its outcome. A fresh
cache is created for every namespace.
"""

from typing import Dict, Iterator, Optional, Tuple


class InstanceCache:
    """Tracks fetch outcomes keyed by canonical instance-path string."""

    def __init__(self):
        self._outcomes: Dict[str, Optional[Exception]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._outcomes

    def __len__(self) -> int:
        return len(self._outcomes)

    def record_success(self, key: str) -> None:
        self._outcomes[key] = None

    def record_failure(self, key: str, error: Exception) -> None:
        self._outcomes[key] = error

    def outcome(self, key: str) -> Optional[Exception]:
        """Return the recorded error for key, or None on success.

        Raises:
            KeyError: If the key was never attempted.
        """
        return self._outcomes[key]

    def failures(self) -> Iterator[Tuple[str, Exception]]:
        """Yield (key, error) for every failed fetch, in attempt order."""
        for key, error in self._outcomes.items():
            if error is not None:
                yield key, error

    @property
    def success_count(self) -> int:
        return sum(1 for error in self._outcomes.values() if error is None)

    @property
    def failure_count(self) -> int:
        return len(self._outcomes) - self.success_count
