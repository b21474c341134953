# farm_registry/errors.py
from __future__ import annotations
from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Stable numeric codes returned by creation and configuration calls."""

    NOT_AUTHORIZED = 100
    INVALID_NAME = 101
    INVALID_LOCATION = 102
    INVALID_SIZE = 103
    INVALID_CROP_TYPES = 104
    INVALID_CERTIFICATIONS = 105
    FARM_ALREADY_EXISTS = 106
    FARM_NOT_FOUND = 107
    AUTHORITY_NOT_VERIFIED = 109
    INVALID_SUSTAINABILITY = 110
    INVALID_UPDATE_PARAM = 113
    MAX_FARMS_EXCEEDED = 114
    INVALID_FARM_TYPE = 115
    INVALID_CAPACITY = 116
    INVALID_CLIMATE = 117
    INVALID_SOIL = 118
    INVALID_CURRENCY = 119


class FarmRegistryError(Exception):
    def __init__(self, code: ErrorCode, detail: Optional[str] = None):
        self.code = ErrorCode(code)
        self.detail = detail or self.code.name.lower().replace("_", " ")
        super().__init__(f"[{int(self.code)}] {self.detail}")


class InvalidAuthorityContract(FarmRegistryError):
    """Authority contract is the burn address, empty, or already bound."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(ErrorCode.NOT_AUTHORIZED, detail or "invalid authority contract")


class InsufficientFunds(Exception):
    """Raised by a fee sink when the payer cannot cover a transfer."""

    def __init__(self, amount: int, sender: str, balance: Optional[int] = None):
        self.amount = amount
        self.sender = sender
        self.balance = balance
        msg = f"{sender} cannot pay {amount}"
        if balance is not None:
            msg += f" (balance {balance})"
        super().__init__(msg)
