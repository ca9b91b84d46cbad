"""Ethereum Attestation Service SDK.

UID derivation, EIP-712 typed-data signing and thin contract bindings.
"""

__version__ = "0.1.0"
