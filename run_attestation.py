import json
import logging
import sys
from src.attestation.engine import AttestationEngine
from src.attestation.errors import AttestationError
from src.attestation.identity import derive_address_from_key

USAGE = """
[Usage] python run_attestation.py <command> [args]
  keys                              create a new mnemonic, key and address
  address <private_key>             derive the address of a private key
  uid <schema_file>                 compute the registry UID of a schema
  prepare <schema_file> <data.json> validate, cast and assemble an attestation
"""


def _read_schema(path):
    with open(path, 'r') as f:
        return f.read().strip()


def main():
    """
    CLI Entry Point.
    Usage: python run_attestation.py <command> [args]
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(0)

    command, args = sys.argv[1], sys.argv[2:]

    try:
        engine = AttestationEngine()
    except AttestationError as e:
        print(f"[!] FATAL: Engine Initialization Failed: {e}")
        sys.exit(1)

    if command == "keys":
        identity = engine.create_identity()
        print("12-words:", identity.phrase)
        print("Private key:", identity.private_key)
        print("Address:", identity.address)
        sys.exit(0)

    if command == "address" and len(args) == 1:
        result = derive_address_from_key(args[0])
        if not result.ok:
            print(f"[!] {result.error}")
            sys.exit(1)
        print("Address:", result.value)
        sys.exit(0)

    if command == "uid" and len(args) == 1:
        try:
            print("Schema UID:", engine.schema_uid(_read_schema(args[0])))
        except OSError as e:
            print(f"[!] FATAL: Could not read schema: {e}")
            sys.exit(1)
        sys.exit(0)

    if command == "prepare" and len(args) == 2:
        try:
            schema = _read_schema(args[0])
            with open(args[1], 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"[!] FATAL: Could not load input: {e}")
            sys.exit(1)

        event = engine.prepare_attestation(schema, data)
        print(json.dumps(event, indent=2))
        sys.exit(0 if event["event_type"] == "ATTESTATION_PREPARED" else 1)

    print(USAGE)
    sys.exit(1)


if __name__ == "__main__":
    main()
