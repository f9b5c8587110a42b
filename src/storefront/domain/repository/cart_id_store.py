"""Abstract client-side storage for the guest cart id.

The guest cart id is the only credential needed to address an anonymous
cart, so it has to outlive the process (a page reload, a CLI run).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CartIdStore(ABC):

    @abstractmethod
    def load(self) -> str | None:
        """Return the remembered guest cart id, or None."""

    @abstractmethod
    def save(self, cart_id: str) -> None:
        """Remember the guest cart id."""

    @abstractmethod
    def forget(self) -> None:
        """Drop the remembered id."""
