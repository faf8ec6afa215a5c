"""
Emitter address normalization.

An emitter address is the canonical 32-byte identifier of a contract or
account, independent of how the source chain encodes addresses.
"""
from dataclasses import dataclass
from typing import Union

from .chains import ChainId
from .codecs import CANONICAL_LENGTH, get_codec


@dataclass(frozen=True)
class EmitterAddress:
    """A 32-byte, big-endian canonical address."""
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError(f"EmitterAddress value must be bytes, got {type(self.value).__name__}")
        if len(self.value) != CANONICAL_LENGTH:
            raise ValueError(f"EmitterAddress must be exactly {CANONICAL_LENGTH} bytes, got {len(self.value)}")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_hex(cls, hex_str: str) -> "EmitterAddress":
        if hex_str.startswith("0x"):
            hex_str = hex_str[2:]
        return cls(bytes.fromhex(hex_str))

    def hex(self) -> str:
        """64 lowercase hex characters, no prefix."""
        return self.value.hex()

    def __bytes__(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        return self.hex()


def to_emitter_address(chain: Union[ChainId, str], native_address: str) -> EmitterAddress:
    """
    Convert a native address into its canonical emitter address.

    Pure format transform, no network access.

    Args:
        chain: Chain the address belongs to
        native_address: Address in the chain's own encoding

    Returns:
        The 32-byte emitter address

    Raises:
        UnsupportedChainError: If the chain is not recognized
        InvalidAddressError: If the native address cannot be decoded
    """
    return EmitterAddress(get_codec(chain).normalize(native_address))
