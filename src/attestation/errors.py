"""
Exception hierarchy for identity derivation and schema handling.

All errors inherit from AttestationError so callers can catch broadly
or narrowly. Each carries a `details` dict for logging.
"""

from typing import Any, Dict, List, Optional


class AttestationError(Exception):
    """Base exception for the toolkit."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


class InvalidMnemonicShape(AttestationError):
    """Mnemonic input is not a list of words."""
    pass


class InvalidMnemonicLength(AttestationError):
    """Mnemonic does not contain exactly 12 words."""
    pass


class InvalidMnemonicChecksum(AttestationError):
    """Words are not a valid wordlist-encoded phrase."""
    pass


class InvalidPrivateKey(AttestationError):
    """Private key is not a well-formed secp256k1 scalar."""
    pass


class MalformedSchemaSegment(AttestationError):
    """A schema segment does not read as '<type> <name>'."""

    def __init__(self, segment: str, index: int):
        self.segment = segment
        self.index = index
        super().__init__(
            f"Schema segment {index} '{segment}' must be '<type> <name>'",
            details={"segment": segment, "index": index},
        )


class SchemaValidationFailed(AttestationError):
    """Data record is missing declared schema fields."""

    def __init__(self, missing_keys: List[str]):
        self.missing_keys = list(missing_keys)
        super().__init__(
            f"Missing schema fields: {', '.join(self.missing_keys)}",
            details={"missing_keys": self.missing_keys},
        )


class ManifestError(AttestationError):
    """Manifest could not be loaded or does not match MANIFEST_SCHEMA."""
    pass


class InvalidDerivationSettings(AttestationError):
    """Wordlist language or derivation path is not usable."""
    pass
