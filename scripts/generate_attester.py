"""Generate a secp256k1 attester keypair.

Prints two space-separated values: <private_key_hex> <address>
"""

from __future__ import annotations

from eth_account import Account


def main() -> int:
    account = Account.create()
    print(f"0x{bytes(account.key).hex()} {account.address}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
