import hashlib
import jcs  # RFC 8785 implementation
from eth_utils import keccak
from typing import Dict, Any

from .manifest import ZERO_ADDRESS


class AttestationHasher:
    """
    Deterministic fingerprints for prepared attestations and schemas.
    """

    @staticmethod
    def canonicalize(data: Dict[str, Any]) -> bytes:
        """
        Returns the RFC 8785 canonical bytes of a dictionary.
        """
        try:
            return jcs.canonicalize(data)
        except Exception as e:
            raise ValueError(f"Canonicalization failed: {str(e)}")

    @staticmethod
    def compute_sha256(data: Dict[str, Any]) -> str:
        canonical_bytes = AttestationHasher.canonicalize(data)
        return hashlib.sha256(canonical_bytes).hexdigest()

    @staticmethod
    def compute_schema_uid(
        schema: str,
        resolver: str = ZERO_ADDRESS,
        revocable: bool = True
    ) -> str:
        """
        UID the schema registry assigns on registration:
        keccak256(abi.encodePacked(schema, resolver, revocable))
        """
        packed = (
            schema.encode('utf-8')
            + bytes.fromhex(resolver[2:] if resolver.startswith("0x") else resolver)
            + (b'\x01' if revocable else b'\x00')
        )
        return "0x" + keccak(packed).hex()
