"""Compute a schema UID as the SchemaRegistry would.

Usage: python scripts/compute_schema_uid.py "<schema>" [resolver] [revocable]
Prints the 0x-prefixed schema UID to stdout.
"""

from __future__ import annotations

import sys

from eas.sdk.hashing import ZERO_ADDRESS, get_schema_uid


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: compute_schema_uid.py <schema> [resolver] [true|false]", file=sys.stderr)
        return 2
    schema = sys.argv[1]
    resolver = sys.argv[2] if len(sys.argv) > 2 else ZERO_ADDRESS
    revocable = sys.argv[3].lower() != "false" if len(sys.argv) > 3 else True
    try:
        print(get_schema_uid(schema, resolver, revocable))
        return 0
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
