"""
Tests for emitter address normalization and the per-chain address codecs.
"""
import hashlib

import base58
import pytest
from hypothesis import assume, given, settings, strategies as st

from portal_sdk.chains import AddressFamily, ChainId
from portal_sdk.codecs import (
    AlgorandAppCodec, CosmosCodec, EvmCodec, get_codec, register_codec
)
from portal_sdk.emitter import EmitterAddress, to_emitter_address
from portal_sdk.exceptions import InvalidAddressError, UnsupportedChainError

from conftest import TEST_EVM_ADDRESS, TEST_SOLANA_CORE, TEST_TERRA_RAW, terra_address

raw20 = st.binary(min_size=20, max_size=20)
raw32 = st.binary(min_size=32, max_size=32)


class TestAccountModel:
    """Fixed-width account chains keep their bytes unchanged."""

    def test_solana_core_unchanged(self):
        emitter = to_emitter_address("solana", TEST_SOLANA_CORE)
        assert emitter.value == base58.b58decode(TEST_SOLANA_CORE)
        assert len(emitter.hex()) == 64
        assert emitter.hex() == emitter.hex().lower()

    @given(raw=raw32)
    def test_solana_round_trip_bytes(self, raw):
        native = base58.b58encode(raw).decode("ascii")
        assert to_emitter_address(ChainId.SOLANA, native).value == raw

    def test_solana_wrong_length(self):
        short = base58.b58encode(b"\x01" * 20).decode("ascii")
        with pytest.raises(InvalidAddressError, match="expected 32 bytes"):
            to_emitter_address("solana", short)

    def test_solana_invalid_character(self):
        # '0' and 'O' are not in the base58 alphabet
        with pytest.raises(InvalidAddressError):
            to_emitter_address("solana", "0OIl" * 11)

    def test_aptos_short_hex_is_left_padded(self):
        emitter = to_emitter_address("aptos", "0x1")
        assert emitter.value == b"\x00" * 31 + b"\x01"

    def test_aptos_too_long(self):
        with pytest.raises(InvalidAddressError):
            to_emitter_address("aptos", "0x" + "ab" * 33)


class TestCosmos:
    """Bech32 addresses are decoded and zero-left-padded."""

    def test_standard_length_padding(self):
        emitter = to_emitter_address("terra", terra_address(TEST_TERRA_RAW))
        assert len(emitter.value) == 32
        assert emitter.value[:12] == b"\x00" * 12
        assert emitter.value[12:] == TEST_TERRA_RAW

    def test_contract_length_unchanged(self):
        raw = bytes(range(32))
        emitter = to_emitter_address("terra2", terra_address(raw))
        assert emitter.value == raw

    def test_wrong_prefix(self):
        with pytest.raises(InvalidAddressError, match="expected prefix 'inj'"):
            to_emitter_address("injective", terra_address(TEST_TERRA_RAW))

    def test_bad_checksum(self):
        address = terra_address(TEST_TERRA_RAW)
        last = "q" if address[-1] != "q" else "p"
        with pytest.raises(InvalidAddressError, match="checksum"):
            to_emitter_address("terra", address[:-1] + last)

    def test_unexpected_payload_length(self):
        with pytest.raises(InvalidAddressError, match="payload length"):
            to_emitter_address("terra", terra_address(b"\x01" * 10))

    @given(raw=raw20)
    def test_always_32_bytes(self, raw):
        assert len(to_emitter_address("terra", terra_address(raw)).value) == 32


class TestEvm:
    """20-byte hex addresses."""

    def test_checksummed_address(self):
        emitter = to_emitter_address("ethereum", TEST_EVM_ADDRESS)
        assert emitter.hex() == "0" * 24 + TEST_EVM_ADDRESS[2:].lower()

    def test_lowercase_and_unprefixed(self):
        lower = TEST_EVM_ADDRESS.lower()
        assert to_emitter_address("bsc", lower) == to_emitter_address("bsc", lower[2:])
        assert to_emitter_address("bsc", lower) == to_emitter_address("bsc", TEST_EVM_ADDRESS)

    def test_bad_checksum(self):
        # Flip the case of the final letter
        broken = TEST_EVM_ADDRESS[:-1] + TEST_EVM_ADDRESS[-1].upper()
        with pytest.raises(InvalidAddressError, match="checksum"):
            to_emitter_address("ethereum", broken)

    @pytest.mark.parametrize("address", ["0x1234", "0x" + "zz" * 20, "", "0x" + "12" * 21])
    def test_malformed(self, address):
        with pytest.raises(InvalidAddressError):
            to_emitter_address("polygon", address)


class TestHashedAccounts:
    """Chains whose emitter is a hash of the native identifier."""

    def test_algorand_app_id(self):
        emitter = to_emitter_address("algorand", "842125965")
        assert len(emitter.value) == 32
        assert emitter == to_emitter_address("algorand", "842125965")
        assert emitter != to_emitter_address("algorand", "842126029")

    @pytest.mark.parametrize("app_id", ["abc", "-1", "0", str(2 ** 64)])
    def test_algorand_invalid(self, app_id):
        with pytest.raises(InvalidAddressError):
            to_emitter_address("algorand", app_id)

    def test_near_account(self):
        account = "contract.portalbridge.near"
        emitter = to_emitter_address("near", account)
        assert emitter.value == hashlib.sha256(account.encode()).digest()

    @pytest.mark.parametrize("account", ["A", "UPPER.near", "bad..dots", "x" * 65])
    def test_near_invalid(self, account):
        with pytest.raises(InvalidAddressError):
            to_emitter_address("near", account)


class TestWhitespace:
    """Whitespace anywhere in a native address is rejected, never skipped."""

    @pytest.mark.parametrize("chain,address", [
        ("ethereum", "0x" + "ab" * 19 + "a\n"),
        ("ethereum", "0x" + "ab" * 20 + "\n"),
        ("ethereum", "0x" + "ab" * 9 + " " + "ab" * 10 + "a"),
        ("aptos", "0xabcd\n"),
        ("aptos", "0xab cd"),
        ("aptos", " 0xabcd"),
        ("sui", "0x\n"),
        ("algorand", "842125965\n"),
        ("algorand", " 842125965"),
        ("near", "portalbridge.near\n"),
        ("solana", TEST_SOLANA_CORE + "\n"),
        ("terra", terra_address(TEST_TERRA_RAW) + "\n"),
    ])
    def test_rejected(self, chain, address):
        with pytest.raises(InvalidAddressError):
            to_emitter_address(chain, address)

    def test_no_alias_of_valid_address(self):
        valid = to_emitter_address("aptos", "0xabcd")
        assert valid.value.endswith(b"\xab\xcd")
        with pytest.raises(InvalidAddressError, match="not a hex string"):
            to_emitter_address("aptos", "0xabcd\n")

    @pytest.mark.parametrize("app_id", ["²", "1٣"])
    def test_algorand_non_ascii_digits(self, app_id):
        with pytest.raises(InvalidAddressError):
            to_emitter_address("algorand", app_id)


class TestNormalizationProperties:
    """Properties that hold for every chain family."""

    @settings(max_examples=50)
    @given(raw=raw20)
    def test_evm_deterministic_and_32_bytes(self, raw):
        native = "0x" + raw.hex()
        first = to_emitter_address("ethereum", native)
        second = to_emitter_address("ethereum", native)
        assert first == second
        assert len(bytes(first)) == 32
        assert first.value.endswith(raw)

    @settings(max_examples=50)
    @given(a=raw20, b=raw20)
    def test_evm_injective(self, a, b):
        assume(a != b)
        assert to_emitter_address("ethereum", "0x" + a.hex()) != to_emitter_address("ethereum", "0x" + b.hex())

    @settings(max_examples=50)
    @given(a=raw20, b=raw20)
    def test_cosmos_injective(self, a, b):
        assume(a != b)
        assert to_emitter_address("terra", terra_address(a)) != to_emitter_address("terra", terra_address(b))

    @settings(max_examples=50)
    @given(a=st.integers(1, 2 ** 64 - 1), b=st.integers(1, 2 ** 64 - 1))
    def test_algorand_injective(self, a, b):
        assume(a != b)
        assert to_emitter_address("algorand", str(a)) != to_emitter_address("algorand", str(b))


class TestEmitterAddress:
    """Test the EmitterAddress value object."""

    def test_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="exactly 32 bytes"):
            EmitterAddress(b"\x00" * 31)

    def test_rejects_non_bytes(self):
        with pytest.raises(TypeError):
            EmitterAddress("00" * 32)

    def test_hex_and_str(self):
        emitter = EmitterAddress.from_hex("0x" + "AB" * 32)
        assert emitter.hex() == "ab" * 32
        assert str(emitter) == "ab" * 32

    def test_frozen(self):
        emitter = EmitterAddress(b"\x01" * 32)
        with pytest.raises(AttributeError):
            emitter.value = b"\x02" * 32


class TestCodecRegistry:
    """Test codec lookup and replacement."""

    def test_unsupported_chain(self):
        with pytest.raises(UnsupportedChainError):
            to_emitter_address("bitcoin", "1BoatSLRHtKNngkdXEeobR76b53LETtpyT")

    def test_codec_families(self):
        assert isinstance(get_codec("ethereum"), EvmCodec)
        assert isinstance(get_codec("xpla"), CosmosCodec)
        assert isinstance(get_codec(ChainId.ALGORAND), AlgorandAppCodec)

    def test_register_codec(self):
        class UpperHexEvmCodec(EvmCodec):
            def decode_native(self, address):
                return super().decode_native(address.lower())

        try:
            register_codec(AddressFamily.EVM, UpperHexEvmCodec)
            assert isinstance(get_codec("ethereum"), UpperHexEvmCodec)
        finally:
            register_codec(AddressFamily.EVM, EvmCodec)
        assert type(get_codec("ethereum")) is EvmCodec
