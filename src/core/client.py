"""
Solana client abstraction for blockchain operations.
"""

import json
from typing import Any

import aiohttp
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.types import TxOpts
from solders.account import Account
from solders.hash import Hash
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from interfaces.core import NetworkConnection
from utils.logger import get_logger

logger = get_logger(__name__)


class SolanaClient(NetworkConnection):
    """Abstraction for Solana RPC client operations."""

    def __init__(self, rpc_endpoint: str, commitment: Commitment = Confirmed):
        """Initialize Solana client with RPC endpoint.

        Args:
            rpc_endpoint: URL of the Solana RPC endpoint
            commitment: Commitment level used for queries and preflight
        """
        self.rpc_endpoint = rpc_endpoint
        self.commitment = commitment
        self._client = None

    async def get_client(self) -> AsyncClient:
        """Get or create the AsyncClient instance.

        Returns:
            AsyncClient instance
        """
        if self._client is None:
            self._client = AsyncClient(self.rpc_endpoint, commitment=self.commitment)
        return self._client

    async def close(self):
        """Close the client connection."""
        if self._client:
            await self._client.close()
            self._client = None

    async def get_version(self) -> Any:
        client = await self.get_client()
        response = await client.get_version()
        return response.value

    async def get_health(self) -> str | None:
        body = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getHealth",
        }
        result = await self.post_rpc(body)
        if result and "result" in result:
            return result["result"]
        return None

    async def get_account_info(self, pubkey: Pubkey) -> Account | None:
        """Get account info from the blockchain.

        Args:
            pubkey: Public key of the account

        Returns:
            Account info, or None if the account doesn't exist
        """
        client = await self.get_client()
        response = await client.get_account_info(pubkey, encoding="base64")
        return response.value

    async def get_balance(self, pubkey: Pubkey) -> int:
        client = await self.get_client()
        response = await client.get_balance(pubkey)
        return response.value

    async def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        client = await self.get_client()
        response = await client.get_minimum_balance_for_rent_exemption(size)
        return response.value

    async def get_latest_blockhash(self) -> Hash:
        """Get the latest blockhash.

        Returns:
            Recent blockhash
        """
        client = await self.get_client()
        response = await client.get_latest_blockhash(commitment=self.commitment)
        return response.value.blockhash

    async def get_fee_per_signature(self, fee_payer: Pubkey) -> int:
        """Price a single-signature message to learn the per-signature fee.

        Args:
            fee_payer: Account that would pay the fee

        Returns:
            Lamports per signature
        """
        client = await self.get_client()
        blockhash = await self.get_latest_blockhash()
        probe = transfer(
            TransferParams(from_pubkey=fee_payer, to_pubkey=fee_payer, lamports=0)
        )
        message = Message.new_with_blockhash([probe], fee_payer, blockhash)
        response = await client.get_fee_for_message(message)
        if response.value is None:
            raise ValueError("Node returned no fee for probe message")
        return response.value

    async def request_airdrop(self, pubkey: Pubkey, lamports: int) -> Signature:
        client = await self.get_client()
        response = await client.request_airdrop(pubkey, lamports)
        return response.value

    async def send_transaction(
        self, transaction: Transaction, skip_preflight: bool = False
    ) -> Signature:
        """Send a signed transaction.

        Args:
            transaction: Fully signed transaction
            skip_preflight: Whether to skip preflight checks

        Returns:
            Transaction signature
        """
        client = await self.get_client()
        tx_opts = TxOpts(
            skip_preflight=skip_preflight, preflight_commitment=self.commitment
        )
        response = await client.send_transaction(transaction, opts=tx_opts)
        return response.value

    async def get_signature_status(self, signature: Signature) -> Any | None:
        client = await self.get_client()
        response = await client.get_signature_statuses([signature])
        return response.value[0]

    async def is_blockhash_valid(self, blockhash: Hash) -> bool:
        client = await self.get_client()
        response = await client.is_blockhash_valid(blockhash, commitment=self.commitment)
        return response.value

    async def confirm_transaction(
        self, signature: Signature, commitment: Commitment = Confirmed
    ) -> bool:
        """Wait for transaction confirmation.

        Args:
            signature: Transaction signature
            commitment: Confirmation commitment level

        Returns:
            Whether transaction was confirmed
        """
        client = await self.get_client()
        try:
            await client.confirm_transaction(signature, commitment=commitment, sleep_seconds=1)
            return True
        except Exception as e:
            logger.error(f"Failed to confirm transaction {signature}: {e!s}")
            return False

    async def post_rpc(self, body: dict[str, Any]) -> dict[str, Any] | None:
        """
        Send a raw RPC request to the Solana node.

        Args:
            body: JSON-RPC request body.

        Returns:
            Optional[Dict[str, Any]]: Parsed JSON response, or None if the request fails.
        """
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.rpc_endpoint,
                    json=body,
                    timeout=aiohttp.ClientTimeout(10),  # 10-second timeout
                ) as response:
                    response.raise_for_status()
                    return await response.json()
        except aiohttp.ClientError as e:
            logger.error(f"RPC request failed: {e!s}", exc_info=True)
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Failed to decode RPC response: {e!s}", exc_info=True)
            return None
