import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Optional

from bip_utils import Bip32PathError, Bip32Slip10Secp256k1, EthAddrEncoder, Secp256k1PrivateKey
from mnemonic import Mnemonic
from mnemonic.mnemonic import ConfigurationError

from .errors import (
    AttestationError,
    InvalidDerivationSettings,
    InvalidMnemonicChecksum,
    InvalidMnemonicLength,
    InvalidMnemonicShape,
    InvalidPrivateKey,
)
from .manifest import DEFAULT_DERIVATION_PATH, MNEMONIC_STRENGTH, MNEMONIC_WORD_COUNT

logger = logging.getLogger(__name__)

_PRIVATE_KEY_RE = re.compile(r'^0x[0-9a-fA-F]{64}$')


@lru_cache(maxsize=None)
def _wordlist(language: str) -> Mnemonic:
    try:
        return Mnemonic(language)
    except (ConfigurationError, ValueError) as e:
        raise InvalidDerivationSettings(f"unsupported wordlist language '{language}': {e}") from e


@dataclass
class DerivationResult:
    value: Optional[str] = None
    error: Optional[AttestationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def generate_mnemonic(strength: int = MNEMONIC_STRENGTH, language: str = "english") -> List[str]:
    """
    Returns a fresh 12-word phrase (128 bits of entropy) as a list of words.
    """
    return _wordlist(language).generate(strength=strength).split(" ")


def key_from_mnemonic(
    mnemonic: Any,
    path: str = DEFAULT_DERIVATION_PATH,
    language: str = "english"
) -> str:
    """
    Derives the 0x-prefixed private key at `path` from a 12-word phrase.
    Raises the matching AttestationError on bad input.
    """
    if not isinstance(mnemonic, (list, tuple)) or not all(isinstance(w, str) for w in mnemonic):
        raise InvalidMnemonicShape("mnemonic must be a list of words")
    if len(mnemonic) != MNEMONIC_WORD_COUNT:
        raise InvalidMnemonicLength(
            f"mnemonic must be a {MNEMONIC_WORD_COUNT}-word phrase, got {len(mnemonic)}",
            details={"length": len(mnemonic)}
        )

    phrase = " ".join(mnemonic)
    if not _wordlist(language).check(phrase):
        raise InvalidMnemonicChecksum("mnemonic is not a valid BIP-39 phrase")

    seed = Mnemonic.to_seed(phrase, passphrase="")
    try:
        node = Bip32Slip10Secp256k1.FromSeed(seed).DerivePath(path)
    except (Bip32PathError, ValueError) as e:
        raise InvalidDerivationSettings(f"unusable derivation path '{path}': {e}") from e
    return "0x" + node.PrivateKey().Raw().ToHex()


def address_from_key(private_key: Any) -> str:
    """
    Derives the EIP-55 checksummed address of a secp256k1 private key.
    The 0x prefix is optional on input.
    """
    if not isinstance(private_key, str):
        raise InvalidPrivateKey("private key must be a hex string")
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    if not _PRIVATE_KEY_RE.match(private_key):
        raise InvalidPrivateKey("private key must be 32 bytes of hex")

    try:
        key = Secp256k1PrivateKey.FromBytes(bytes.fromhex(private_key[2:]))
    except ValueError as e:
        # zero or >= curve order
        raise InvalidPrivateKey(f"private key out of range: {e}") from e
    return EthAddrEncoder.EncodeKey(key.PublicKey())


def derive_key_from_mnemonic(
    mnemonic: Any,
    path: str = DEFAULT_DERIVATION_PATH,
    language: str = "english"
) -> DerivationResult:
    try:
        return DerivationResult(value=key_from_mnemonic(mnemonic, path, language))
    except AttestationError as e:
        logger.warning("derive_key_from_mnemonic: %s", e)
        return DerivationResult(error=e)


def derive_address_from_key(private_key: Any) -> DerivationResult:
    try:
        return DerivationResult(value=address_from_key(private_key))
    except AttestationError as e:
        logger.warning("derive_address_from_key: %s", e)
        return DerivationResult(error=e)
