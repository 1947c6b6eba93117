"""
Locates the deployed minter program and checks that it can be invoked.
"""

from pathlib import Path

from solders.pubkey import Pubkey

from core.errors import ProgramNotDeployed
from core.wallet import Wallet
from interfaces.core import NetworkConnection
from utils.logger import get_logger

logger = get_logger(__name__)


def load_program_id(keypair_path: str | Path) -> Pubkey:
    """Read the program id from the program's deploy keypair file."""
    return Wallet.from_keypair_file(keypair_path).pubkey


async def check_program_deployed(
    client: NetworkConnection, program_id: Pubkey, binary_path: str | Path | None = None
) -> None:
    """Make sure program_id is deployed and executable.

    Args:
        client: Network connection
        program_id: Minter program id
        binary_path: Local build artifact, used only to word the error

    Raises:
        ProgramNotDeployed: If the account is missing or not executable
    """
    info = await client.get_account_info(program_id)
    if info is None:
        if binary_path and Path(binary_path).exists():
            raise ProgramNotDeployed(
                f"Program needs to be deployed with `solana program deploy {binary_path}`"
            )
        raise ProgramNotDeployed("Program needs to be built and deployed")
    if not info.executable:
        raise ProgramNotDeployed(f"Program {program_id} is not executable")

    logger.info(f"Using program {program_id}")
