"""
Makes sure the payer can cover fees before anything is built.
"""

from solders.pubkey import Pubkey

from core.errors import BalanceQueryFailure, InsufficientFunds
from core.pubkeys import LAMPORTS_PER_SOL
from interfaces.core import NetworkConnection
from utils.logger import get_logger

logger = get_logger(__name__)

# Budget of signatures reserved for fees
DEFAULT_FEE_MULTIPLIER = 100


async def fee_requirement(
    client: NetworkConnection, payer: Pubkey, fee_multiplier: int = DEFAULT_FEE_MULTIPLIER
) -> int:
    """Lamports the payer should hold to cover fees.

    Args:
        client: Network connection
        payer: Fee payer address
        fee_multiplier: Number of signature fees to budget for

    Returns:
        Required lamports
    """
    try:
        per_signature = await client.get_fee_per_signature(payer)
    except Exception as e:
        raise BalanceQueryFailure(f"Fee query failed: {e!s}") from e
    return per_signature * fee_multiplier


async def _balance(client: NetworkConnection, payer: Pubkey) -> int:
    try:
        balance = await client.get_balance(payer)
    except Exception as e:
        raise BalanceQueryFailure(f"Balance query for {payer} failed: {e!s}") from e
    if not isinstance(balance, int) or balance < 0:
        raise BalanceQueryFailure(f"Malformed balance for {payer}: {balance!r}")
    return balance


async def ensure_payer_funded(
    client: NetworkConnection, payer: Pubkey, required: int, airdrop: bool = True
) -> int:
    """Top up the payer by airdrop when its balance is below required.

    The airdrop asks for exactly the shortfall, then the balance is read again.

    Args:
        client: Network connection
        payer: Fee payer address
        required: Lamports the payer must hold
        airdrop: Whether an airdrop may be requested (devnet/testnet/localnet only)

    Returns:
        Payer balance after any airdrop

    Raises:
        InsufficientFunds: If the balance is still below required
    """
    balance = await _balance(client, payer)

    if balance < required:
        if not airdrop:
            raise InsufficientFunds(payer, balance, required)

        shortfall = required - balance
        logger.info(f"Payer {payer} has {balance} lamports, requesting airdrop of {shortfall}")
        signature = await client.request_airdrop(payer, shortfall)
        await client.confirm_transaction(signature)
        balance = await _balance(client, payer)

        if balance < required:
            logger.error(f"Payer {payer} still short after airdrop: {balance} < {required}")
            raise InsufficientFunds(payer, balance, required)

    logger.info(
        f"Using account {payer} containing {balance / LAMPORTS_PER_SOL} SOL to pay for fees"
    )
    return balance
