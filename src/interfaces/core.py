"""
Core interfaces for the minter client.

NetworkConnection is the capability contract the transaction-building core
consumes. The production implementation lives in core.client; tests supply
AsyncMock doubles with the same shape.
"""

from abc import ABC, abstractmethod
from typing import Any

from solders.account import Account
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction


class NetworkConnection(ABC):
    """Abstract interface for the RPC operations the minter relies on."""

    @abstractmethod
    async def get_version(self) -> Any:
        """Get the node software version."""
        pass

    @abstractmethod
    async def get_latest_blockhash(self) -> Hash:
        """Get the most recent blockhash."""
        pass

    @abstractmethod
    async def get_fee_per_signature(self, fee_payer: Pubkey) -> int:
        """Get the fee in lamports charged per transaction signature.

        Args:
            fee_payer: Account that would pay the fee

        Returns:
            Lamports per signature
        """
        pass

    @abstractmethod
    async def get_balance(self, pubkey: Pubkey) -> int:
        """Get an account balance in lamports."""
        pass

    @abstractmethod
    async def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        """Get the rent-exempt minimum for an account of the given size.

        Args:
            size: Serialized account size in bytes

        Returns:
            Minimum balance in lamports
        """
        pass

    @abstractmethod
    async def get_account_info(self, pubkey: Pubkey) -> Account | None:
        """Get account info, or None if the account does not exist."""
        pass

    @abstractmethod
    async def request_airdrop(self, pubkey: Pubkey, lamports: int) -> Signature:
        """Request an airdrop of lamports to pubkey."""
        pass

    @abstractmethod
    async def confirm_transaction(self, signature: Signature) -> bool:
        """Wait for a signature to be confirmed."""
        pass

    @abstractmethod
    async def send_transaction(
        self, transaction: Transaction, skip_preflight: bool = False
    ) -> Signature:
        """Send a signed transaction.

        Args:
            transaction: Fully signed transaction
            skip_preflight: Whether to skip simulation before broadcasting

        Returns:
            Transaction signature
        """
        pass

    @abstractmethod
    async def get_signature_status(self, signature: Signature) -> Any | None:
        """Get the status of a signature, or None if the cluster has not seen it."""
        pass

    @abstractmethod
    async def is_blockhash_valid(self, blockhash: Hash) -> bool:
        """Check whether a blockhash is still inside the expiry window."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        pass
