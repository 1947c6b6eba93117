"""
Rent-exempt balance lookups for accounts created by the mint transaction.
"""

from core.errors import BalanceQueryFailure
from core.pubkeys import ACCOUNT_LEN, MINT_LEN
from interfaces.core import NetworkConnection
from utils.logger import get_logger

logger = get_logger(__name__)


class RentCalculator:
    """Fetches rent-exempt minimums from the cluster, one query per call."""

    def __init__(self, client: NetworkConnection):
        """Initialize rent calculator.

        Args:
            client: Network connection used for rent queries
        """
        self.client = client

    async def minimum_balance(self, byte_size: int) -> int:
        """Get the minimum balance for an account of byte_size bytes.

        Args:
            byte_size: Serialized account size

        Returns:
            Rent-exempt minimum in lamports

        Raises:
            BalanceQueryFailure: If the query fails or the answer is not a lamport amount
        """
        if byte_size < 0:
            raise ValueError(f"Account size must be non-negative, got {byte_size}")

        try:
            lamports = await self.client.get_minimum_balance_for_rent_exemption(byte_size)
        except Exception as e:
            logger.error(f"Rent query for {byte_size} bytes failed: {e!s}")
            raise BalanceQueryFailure(f"Rent query for {byte_size} bytes failed: {e!s}") from e

        if not isinstance(lamports, int) or isinstance(lamports, bool) or lamports < 0:
            raise BalanceQueryFailure(
                f"Malformed rent response for {byte_size} bytes: {lamports!r}"
            )
        return lamports

    async def mint_balance(self) -> int:
        """Rent-exempt minimum for an SPL mint account."""
        return await self.minimum_balance(MINT_LEN)

    async def token_account_balance(self) -> int:
        """Rent-exempt minimum for an SPL token account."""
        return await self.minimum_balance(ACCOUNT_LEN)
