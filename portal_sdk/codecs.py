"""
Native address codecs.

Each address family knows how to decode its chain's native representation
into raw bytes (``decode_native``) and how to lay those bytes out as a
canonical 32-byte value (``to_canonical``). Chain-specific knowledge lives
here and nowhere else.
"""
import hashlib
import re
from abc import ABC, abstractmethod
from typing import Dict, Union

import base58
import bech32
from cryptography.hazmat.primitives import hashes
from web3 import Web3

from .chains import AddressFamily, ChainId, ChainInfo, as_chain, get_chain_info
from .exceptions import InvalidAddressError

CANONICAL_LENGTH = 32

# Applied with fullmatch, never match.
_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_DECIMAL_RE = re.compile(r"[0-9]+")
_BASE58_RE = re.compile(r"[1-9A-HJ-NP-Za-km-z]+")
_NEAR_ACCOUNT_RE = re.compile(r"(([a-z0-9]+[\-_])*[a-z0-9]+\.)*([a-z0-9]+[\-_])*[a-z0-9]+")


class AddressCodec(ABC):
    """
    Base class for chain address codecs.

    Subclasses implement ``decode_native``; ``to_canonical`` right-aligns the
    raw bytes in a zero-filled 32-byte buffer.
    """

    def __init__(self, info: ChainInfo):
        self.info = info

    @property
    def chain(self) -> ChainId:
        return self.info.chain

    def invalid(self, address: str, reason: str) -> InvalidAddressError:
        return InvalidAddressError(self.chain.value, address, reason)

    @abstractmethod
    def decode_native(self, address: str) -> bytes:
        """
        Decode a native address string into raw bytes.

        Raises:
            InvalidAddressError: If the string is not a valid address for the chain
        """
        pass

    def to_canonical(self, raw: bytes) -> bytes:
        """
        Left-pad raw address bytes with zeros to 32 bytes.

        Raises:
            InvalidAddressError: If the raw value is empty or longer than 32 bytes
        """
        if not raw or len(raw) > CANONICAL_LENGTH:
            raise self.invalid(
                "0x" + raw.hex(),
                f"raw address must be 1..{CANONICAL_LENGTH} bytes, got {len(raw)}"
            )
        return raw.rjust(CANONICAL_LENGTH, b"\x00")

    def normalize(self, address: str) -> bytes:
        return self.to_canonical(self.decode_native(address))


class Base58AccountCodec(AddressCodec):
    """Fixed-width base58 public keys (e.g. Solana program ids)."""

    def decode_native(self, address: str) -> bytes:
        # b58decode strips trailing whitespace itself
        if not _BASE58_RE.fullmatch(address):
            raise self.invalid(address, "invalid base58: unexpected character")
        try:
            raw = base58.b58decode(address)
        except ValueError as e:
            raise self.invalid(address, f"invalid base58: {e}")
        if len(raw) != self.info.native_length:
            raise self.invalid(address, f"expected {self.info.native_length} bytes, got {len(raw)}")
        return raw


class HexAccountCodec(AddressCodec):
    """Hex encoded account addresses of up to 32 bytes; short forms like ``0x1`` are allowed."""

    def decode_native(self, address: str) -> bytes:
        body = address[2:] if address.lower().startswith("0x") else address
        if not _HEX_RE.fullmatch(body):
            raise self.invalid(address, "not a hex string")
        if len(body) > self.info.native_length * 2:
            raise self.invalid(address, f"longer than {self.info.native_length} bytes")
        if len(body) % 2:
            body = "0" + body
        return bytes.fromhex(body)


class CosmosCodec(AddressCodec):
    """Bech32 addresses of Cosmos-SDK chains (20-byte accounts, 32-byte contracts)."""

    ALLOWED_LENGTHS = (20, 32)

    def decode_native(self, address: str) -> bytes:
        decoded = bech32.bech32_decode(address)
        hrp, data = decoded[0], decoded[1]
        if hrp is None or data is None:
            raise self.invalid(address, "invalid bech32 encoding or checksum")
        if hrp != self.info.bech32_prefix:
            raise self.invalid(address, f"expected prefix '{self.info.bech32_prefix}', got '{hrp}'")
        raw = bech32.convertbits(data, 5, 8, False)
        if raw is None:
            raise self.invalid(address, "invalid bech32 payload padding")
        raw = bytes(raw)
        if len(raw) not in self.ALLOWED_LENGTHS:
            raise self.invalid(address, f"unexpected payload length {len(raw)}")
        return raw


class EvmCodec(AddressCodec):
    """20-byte hex addresses; mixed case must carry a valid EIP-55 checksum."""

    def decode_native(self, address: str) -> bytes:
        body = address[2:] if address.startswith(("0x", "0X")) else address
        if len(body) != self.info.native_length * 2 or not _HEX_RE.fullmatch(body):
            raise self.invalid(address, "expected 20 bytes of hex")
        mixed_case = body != body.lower() and body != body.upper()
        if mixed_case and not Web3.is_checksum_address("0x" + body):
            raise self.invalid(address, "bad EIP-55 checksum")
        return bytes.fromhex(body)


class AlgorandAppCodec(AddressCodec):
    """
    Algorand application ids.

    An application's account is SHA-512/256 over ``b"appID"`` followed by the
    id as a big-endian uint64.
    """

    APP_ID_PREFIX = b"appID"

    def decode_native(self, address: str) -> bytes:
        if not _DECIMAL_RE.fullmatch(address):
            raise self.invalid(address, "application id must be a decimal integer")
        app_id = int(address)
        if app_id <= 0 or app_id >= 2 ** 64:
            raise self.invalid(address, "application id out of uint64 range")
        digest = hashes.Hash(hashes.SHA512_256())
        digest.update(self.APP_ID_PREFIX + app_id.to_bytes(8, "big"))
        return digest.finalize()


class NearAccountCodec(AddressCodec):
    """NEAR account ids, hashed with SHA-256."""

    def decode_native(self, address: str) -> bytes:
        if not 2 <= len(address) <= 64 or not _NEAR_ACCOUNT_RE.fullmatch(address):
            raise self.invalid(address, "not a valid NEAR account id")
        return hashlib.sha256(address.encode("utf-8")).digest()


_FAMILY_CODECS = {
    AddressFamily.ACCOUNT_BASE58: Base58AccountCodec,
    AddressFamily.ACCOUNT_HEX: HexAccountCodec,
    AddressFamily.COSMOS: CosmosCodec,
    AddressFamily.EVM: EvmCodec,
    AddressFamily.ALGORAND: AlgorandAppCodec,
    AddressFamily.NEAR: NearAccountCodec,
}

_codec_cache: Dict[ChainId, AddressCodec] = {}


def get_codec(chain: Union[ChainId, str]) -> AddressCodec:
    """
    Get the address codec for a chain.

    Raises:
        UnsupportedChainError: If the chain is not recognized
    """
    chain = as_chain(chain)
    codec = _codec_cache.get(chain)
    if codec is None:
        info = get_chain_info(chain)
        codec = _FAMILY_CODECS[info.family](info)
        _codec_cache[chain] = codec
    return codec


def register_codec(family: AddressFamily, codec_cls: type) -> None:
    """Replace the codec used for an address family."""
    _FAMILY_CODECS[family] = codec_cls
    for chain in [c for c, codec in _codec_cache.items() if codec.info.family == family]:
        del _codec_cache[chain]

