"""
Wallet management for Solana transactions.
"""

import json
from pathlib import Path

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey


class Wallet:
    """Wraps a signing keypair for the payer or a freshly generated mint."""

    def __init__(self, keypair: Keypair):
        """Initialize wallet from a keypair.

        Args:
            keypair: Signing keypair
        """
        self._keypair = keypair

    @classmethod
    def from_private_key(cls, private_key: str) -> "Wallet":
        """Create a wallet from a base58 encoded private key."""
        return cls(cls._load_keypair(private_key))

    @classmethod
    def from_keypair_file(cls, path: str | Path) -> "Wallet":
        """Create a wallet from a Solana CLI keypair file (JSON byte array).

        Args:
            path: Path to the keypair JSON file

        Returns:
            Wallet holding the stored keypair

        Raises:
            ValueError: If the file does not hold a 64-byte keypair
        """
        with open(path) as f:
            raw = json.load(f)
        if not isinstance(raw, list) or len(raw) != 64:
            raise ValueError(f"Keypair file {path} must contain a 64-byte array")
        return cls(Keypair.from_bytes(bytes(raw)))

    @classmethod
    def generate(cls) -> "Wallet":
        """Create a wallet around a new random keypair."""
        return cls(Keypair())

    @property
    def pubkey(self) -> Pubkey:
        """Get the public key of the wallet."""
        return self._keypair.pubkey()

    @property
    def keypair(self) -> Keypair:
        """Get the keypair for signing transactions."""
        return self._keypair

    @staticmethod
    def _load_keypair(private_key: str) -> Keypair:
        """Load keypair from private key.

        Args:
            private_key: Base58 encoded private key

        Returns:
            Solana keypair
        """
        private_key_bytes = base58.b58decode(private_key)
        return Keypair.from_bytes(private_key_bytes)
