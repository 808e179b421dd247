import copy
import logging
import math
import os
import time
from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from .errors import MalformedSchemaSegment
from .hashing import AttestationHasher
from .identity import (
    address_from_key,
    derive_address_from_key,
    derive_key_from_mnemonic,
    generate_mnemonic,
    key_from_mnemonic,
)
from .manifest import NO_EXPIRATION, ZERO_ADDRESS, load_manifest
from .pipeline import INT_ARRAY_TAG, INT_TAG, SchemaPipeline

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_PATH = os.path.join(os.path.dirname(__file__), 'manifest.json')


@dataclass
class Identity:
    mnemonic: List[str]
    private_key: str
    address: str

    @property
    def phrase(self) -> str:
        return " ".join(self.mnemonic)


def _has_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, (list, tuple)):
        return any(_has_nan(item) for item in value)
    return False


# ---------------------------------------------------------
# ATTESTATION ENGINE
# ---------------------------------------------------------

class AttestationEngine:
    """
    Offline front door for the toolkit.
    - Loads settings (Manifest)
    - Creates and restores identities
    - Prepares attestation requests for an external encoder/submitter
    """

    def __init__(self, manifest_path: str = DEFAULT_MANIFEST_PATH):
        self.manifest_path = manifest_path
        self.manifest = load_manifest(manifest_path)
        self.derivation_path = self.manifest["derivation_path"]
        self.language = self.manifest["mnemonic_language"]
        logger.info("Manifest loaded from %s (path %s)", manifest_path, self.derivation_path)

    def create_identity(self) -> Identity:
        """
        Generates a fresh mnemonic and derives its key and address.
        A freshly generated phrase always derives, so errors here raise.
        """
        words = generate_mnemonic(self.manifest["mnemonic_strength"], self.language)
        private_key = key_from_mnemonic(words, self.derivation_path, self.language)
        return Identity(mnemonic=words, private_key=private_key, address=address_from_key(private_key))

    def identity_from_mnemonic(self, words: Any) -> Optional[Identity]:
        key_result = derive_key_from_mnemonic(words, self.derivation_path, self.language)
        if not key_result.ok:
            return None
        address_result = derive_address_from_key(key_result.value)
        if not address_result.ok:
            return None
        return Identity(mnemonic=list(words), private_key=key_result.value, address=address_result.value)

    def schema_uid(self, schema: str) -> str:
        return AttestationHasher.compute_schema_uid(
            schema,
            self.manifest["resolver_address"],
            self.manifest["revocable"]
        )

    def _rejected(self, timestamp: int, status: str, **extra: Any) -> Dict[str, Any]:
        event = {
            "event_type": "ATTESTATION_REJECTED",
            "timestamp": timestamp,
            "status": status,
        }
        event.update(extra)
        logger.warning("Attestation rejected: %s %s", status, extra)
        return event

    def prepare_attestation(self, schema: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Input: schema string and a data record
        Output: ATTESTATION_PREPARED or ATTESTATION_REJECTED event.
        The caller's record is not modified.
        """
        timestamp = int(time.time())

        # 1. Parse
        try:
            pipeline = SchemaPipeline(schema)
        except MalformedSchemaSegment as e:
            return self._rejected(timestamp, "MALFORMED_SCHEMA", message=str(e), details=e.details)

        # 2. Validate
        result = pipeline.validate(data)
        if not result.status:
            return self._rejected(timestamp, "MISSING_FIELDS", missing_keys=result.missing_keys)

        # 3. Cast on a copy
        record = copy.deepcopy(data)
        pipeline.cast_types(record)
        unparsed = [
            key for key, type_tag in pipeline.descriptor.fields()
            if type_tag in (INT_TAG, INT_ARRAY_TAG) and _has_nan(record[key])
        ]
        if unparsed:
            return self._rejected(timestamp, "INVALID_INTEGER", fields=unparsed)

        # 4. Assemble
        items = [item.as_dict() for item in pipeline.build_items(record)]
        schema_uid = self.schema_uid(schema)
        request = {
            "schema": schema_uid,
            "data": {
                "recipient": ZERO_ADDRESS,
                "expirationTime": NO_EXPIRATION,
                "revocable": self.manifest["revocable"],
            },
        }

        try:
            payload_hash = AttestationHasher.compute_sha256({"schema": schema_uid, "items": items})
        except ValueError as e:
            return self._rejected(timestamp, "UNSERIALIZABLE_VALUE", message=str(e))

        return {
            "event_type": "ATTESTATION_PREPARED",
            "timestamp": timestamp,
            "status": "READY",
            "attestation_address": self.manifest["attestation_address"],
            "schema_registry_address": self.manifest["schema_registry_address"],
            "schema": schema,
            "schema_uid": schema_uid,
            "items": items,
            "request": request,
            "payload_hash": payload_hash,
        }
