"""Sign an off-chain EAS attestation and compute its UID.

Args (positional):
  1) eas_address: verifying EAS contract address
  2) chain_id: chain ID of the signing domain
  3) attestation_json_path: JSON with schema, recipient, time, expirationTime,
     revocable, refUID, data
  4) private_key_hex: attester secp256k1 key (hex)

Prints two space-separated values: <signature_hex> <uid_hex>
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

from eas.sdk.offchain import Offchain
from eas.sdk.typed_data import LocalTypedDataSigner, join_signature


def main() -> int:
    if len(sys.argv) < 5:
        print(
            "Usage: sign_attestation.py <eas_address> <chain_id> <attestation.json> <private_key_hex>",
            file=sys.stderr,
        )
        return 2

    eas_address, chain_id, attestation_path, private_key = sys.argv[1:5]

    params = json.loads(Path(attestation_path).read_text())
    handler = Offchain(eas_address, int(chain_id))
    signed = handler.sign_offchain_attestation(params, LocalTypedDataSigner.from_key(private_key))

    sig_hex = "0x" + join_signature(signed.signature).hex()
    print(f"{sig_hex} {signed.uid}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
