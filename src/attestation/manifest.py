import json
from typing import Any, Dict, List

import jsonschema
from mnemonic import Mnemonic

from .errors import ManifestError

# ---------------------------------------------------------
# CONSTANTS: PROTOCOL DEFAULTS
# ---------------------------------------------------------

# Standard Ethereum account path, also used on OP Mainnet.
DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"

MNEMONIC_WORD_COUNT = 12
MNEMONIC_STRENGTH = 128

# Predeploys, identical on OP Mainnet and OP Sepolia.
SCHEMA_REGISTRY_CONTRACT_ADDRESS = "0x4200000000000000000000000000000000000020"
ATTESTATION_CONTRACT_ADDRESS = "0x4200000000000000000000000000000000000021"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NO_EXPIRATION = 0

REQUIRED_MANIFEST_KEYS: List[str] = [
    "derivation_path",
    "mnemonic_strength",
    "mnemonic_language",
    "schema_registry_address",
    "attestation_address",
    "resolver_address",
    "revocable",
]

_ADDRESS = {"type": "string", "pattern": "^0x[a-fA-F0-9]{40}$"}

# ---------------------------------------------------------
# THE MANIFEST SCHEMA
# ---------------------------------------------------------

MANIFEST_SCHEMA = {
    "type": "object",
    "required": REQUIRED_MANIFEST_KEYS,
    "additionalProperties": False,
    "properties": {
        "derivation_path": {
            "type": "string",
            "pattern": "^m(/[0-9]+'?)+$"
        },
        "mnemonic_strength": {"enum": [128]},
        "mnemonic_language": {"enum": Mnemonic.list_languages()},
        "schema_registry_address": _ADDRESS,
        "attestation_address": _ADDRESS,
        "resolver_address": _ADDRESS,
        "revocable": {"type": "boolean"}
    }
}

DEFAULT_MANIFEST: Dict[str, Any] = {
    "derivation_path": DEFAULT_DERIVATION_PATH,
    "mnemonic_strength": MNEMONIC_STRENGTH,
    "mnemonic_language": "english",
    "schema_registry_address": SCHEMA_REGISTRY_CONTRACT_ADDRESS,
    "attestation_address": ATTESTATION_CONTRACT_ADDRESS,
    "resolver_address": ZERO_ADDRESS,
    "revocable": True,
}


def validate_manifest(manifest: Dict[str, Any]) -> Dict[str, Any]:
    """
    Checks a manifest against MANIFEST_SCHEMA and returns it unchanged.
    All violations are reported together.
    """
    validator = jsonschema.Draft7Validator(MANIFEST_SCHEMA)
    messages = [
        f"{'.'.join(str(p) for p in err.path) or '<root>'}: {err.message}"
        for err in validator.iter_errors(manifest)
    ]
    if messages:
        raise ManifestError(
            f"Manifest invalid: {'; '.join(messages)}",
            details={"errors": messages},
        )
    return manifest


def load_manifest(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            manifest = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"Could not load manifest {path}: {e}") from e
    return validate_manifest(manifest)
