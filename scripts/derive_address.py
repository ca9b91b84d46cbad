"""Derive the Ethereum address for env EAS_PRIVATE_KEY and print it."""

from __future__ import annotations

import os

from eth_account import Account


def main() -> int:
    print(Account.from_key(os.environ["EAS_PRIVATE_KEY"]).address)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
