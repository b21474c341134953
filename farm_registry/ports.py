from __future__ import annotations
from typing import Protocol


class AuthorityOracle(Protocol):
    def is_verified_authority(self, principal: str) -> bool:
        """True if principal may register farms."""
        ...


class FeeSink(Protocol):
    def transfer(self, amount: int, sender: str, recipient: str) -> None:
        """Move amount from sender to recipient.

        Raises InsufficientFunds when sender cannot pay.
        """
        ...
