"""Zcash transparent address codec.

A transparent address is base58check over ``version (2 bytes) || hash160``.
The Ether deposit portal forwards ``execLayerData`` verbatim to the rollup,
which rebuilds the destination as a mainnet pay-to-public-key-hash address
from the raw 20-byte hash, so the version bytes are stripped before deposit.
"""

import logging
import re
from typing import Iterable, Optional

import base58

from cartezcash_bridge.errors import InvalidAddressError

logger = logging.getLogger(__name__)

# Version prefixes (Zcash protocol, section 5.6.1.1)
P2PKH_MAINNET = bytes.fromhex("1cb8")  # t1...
P2SH_MAINNET = bytes.fromhex("1cbd")   # t3...
P2PKH_TESTNET = bytes.fromhex("1d25")  # tm...
P2SH_TESTNET = bytes.fromhex("1cba")   # t2...

VERSION_LENGTH = 2
HASH_LENGTH = 20
CHECKSUM_LENGTH = 4
DECODED_LENGTH = VERSION_LENGTH + HASH_LENGTH + CHECKSUM_LENGTH

# Loose guard used while the user is still typing an address
T_ADDRESS_INPUT_PATTERN = re.compile(r"^t1[a-zA-Z0-9]{1,33}$")

# Full syntactic shape of a finished transparent address (t1, t3, tm, t2)
T_ADDRESS_PATTERN = re.compile(r"^t[123m][1-9A-HJ-NP-Za-km-z]{33}$")


class AddressCodec:
    """Converts transparent addresses to and from deposit payload bytes.

    Usage:
        codec = AddressCodec()
        payload = codec.decode("t1...")   # 20 bytes
        codec.encode(payload) == "t1..."
    """

    def __init__(self, versions: Optional[Iterable[bytes]] = None):
        """Initialize codec.

        Args:
            versions: Accepted 2-byte version prefixes (mainnet P2PKH if None)
        """
        accepted = tuple(versions) if versions else (P2PKH_MAINNET,)
        for version in accepted:
            if len(version) != VERSION_LENGTH:
                raise ValueError(f"Version prefix must be {VERSION_LENGTH} bytes: {version.hex()}")
        self.versions = accepted

    def decode(self, address: str) -> bytes:
        """Decode a transparent address into the 20-byte deposit payload.

        Args:
            address: Transparent address string

        Returns:
            The public key hash with version bytes stripped

        Raises:
            InvalidAddressError: On bad alphabet, checksum, length or version
        """
        if not address:
            raise InvalidAddressError("Destination address is required")

        try:
            raw = base58.b58decode(address)
        except ValueError:
            raise InvalidAddressError(f"Not a base58 string: {address}")

        if len(raw) != DECODED_LENGTH:
            raise InvalidAddressError(
                f"Invalid address length: {len(raw)} bytes, expected {DECODED_LENGTH}"
            )

        try:
            versioned = base58.b58decode_check(address)
        except ValueError:
            raise InvalidAddressError(f"Checksum mismatch for address {address}")

        version = versioned[:VERSION_LENGTH]
        if version not in self.versions:
            raise InvalidAddressError(
                f"Unsupported address version {version.hex()} for {address}"
            )

        return versioned[VERSION_LENGTH:]

    def encode(self, payload: bytes, version: Optional[bytes] = None) -> str:
        """Encode a 20-byte hash as a transparent address.

        Args:
            payload: Public key (or script) hash
            version: Version prefix (first accepted version if None)

        Returns:
            Base58check address string
        """
        if len(payload) != HASH_LENGTH:
            raise InvalidAddressError(
                f"Payload must be {HASH_LENGTH} bytes, got {len(payload)}"
            )
        prefix = version or self.versions[0]
        return base58.b58encode_check(prefix + payload).decode("ascii")

    def is_valid(self, address: str) -> bool:
        """Check whether an address decodes cleanly."""
        try:
            self.decode(address)
            return True
        except InvalidAddressError as e:
            logger.debug(f"Rejected transparent address: {e}")
            return False


def looks_like_transparent_address(value: str) -> bool:
    """Syntactic check only (no checksum), for config values and input guards."""
    return bool(T_ADDRESS_PATTERN.match(value or ""))
