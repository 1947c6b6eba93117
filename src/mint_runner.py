import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

import uvloop
import yaml
from solders.pubkey import Pubkey

from config_loader import load_minter_config, print_config_summary
from core.client import SolanaClient
from core.errors import MinterError
from core.wallet import Wallet
from minting.context import MintContext, MinterSettings
from minting.minter import MintResult, NftMinter
from minting.program import check_program_deployed, load_program_id
from minting.submitter import SubmitOptions
from utils.logger import get_logger, set_log_level, setup_file_logging

logger = get_logger(__name__)


def setup_logging(minter_name: str):
    """Set up logging to file for a specific minter run."""
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = log_dir / f"{minter_name}_{timestamp}.log"

    setup_file_logging(str(log_filename))


def load_payer(cfg: dict) -> Wallet:
    payer_cfg = cfg.get("payer", {})
    if payer_cfg.get("private_key"):
        return Wallet.from_private_key(payer_cfg["private_key"])
    return Wallet.from_keypair_file(Path(payer_cfg["keypair_path"]).expanduser())


def load_program(cfg: dict) -> Pubkey:
    program_cfg = cfg.get("program", {})
    if program_cfg.get("program_id"):
        return Pubkey.from_string(program_cfg["program_id"])
    return load_program_id(Path(program_cfg["keypair_path"]).expanduser())


def minter_settings_from_config(cfg: dict) -> MinterSettings:
    """Build MinterSettings, keeping defaults for anything not configured."""
    minter_cfg = cfg.get("minter") or {}
    overrides = {}
    if minter_cfg.get("authority_seed"):
        overrides["authority_seed"] = str(minter_cfg["authority_seed"]).encode()
    if minter_cfg.get("secondary_mint"):
        overrides["secondary_mint"] = Pubkey.from_string(minter_cfg["secondary_mint"])
    if minter_cfg.get("update_authority"):
        overrides["update_authority"] = Pubkey.from_string(minter_cfg["update_authority"])
    return MinterSettings(**overrides)


def submit_options_from_config(cfg: dict) -> SubmitOptions:
    submit_cfg = cfg["submit"]
    return SubmitOptions(
        skip_preflight=submit_cfg["skip_preflight"],
        timeout=float(submit_cfg["timeout"]),
        poll_interval=float(submit_cfg["poll_interval"]),
        commitment=submit_cfg["commitment"],
    )


async def connect(client: SolanaClient) -> None:
    """Log the cluster version and health, failing early if unreachable."""
    version = await client.get_version()
    health = await client.get_health()
    logger.info(f"Connection to cluster established: {client.rpc_endpoint} {version} (health: {health})")


async def start_minter(cfg: dict) -> MintResult:
    """Run one mint with the given configuration."""
    client = SolanaClient(cfg["rpc_endpoint"], commitment=cfg["submit"]["commitment"])
    try:
        await connect(client)

        context = MintContext(
            client=client,
            payer=load_payer(cfg),
            program_id=load_program(cfg),
            settings=minter_settings_from_config(cfg),
        )
        await check_program_deployed(
            client, context.program_id, cfg.get("program", {}).get("binary_path")
        )

        minter = NftMinter(
            context,
            submit_options=submit_options_from_config(cfg),
            fee_multiplier=cfg["funding"]["fee_multiplier"],
            airdrop=cfg["funding"]["airdrop"],
            verify_mint=cfg["verify_mint"],
        )
        result = await minter.mint()
        logger.info(
            f"Minted {result.mint} into {result.associated_token}: "
            f"{result.receipt.signature} ({result.receipt.confirmation_status})"
        )
        return result
    finally:
        await client.close()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Mint an NFT through the minter program.")
    parser.add_argument("config", help="Path to the minter YAML configuration")
    preflight = parser.add_mutually_exclusive_group()
    preflight.add_argument(
        "--skip-preflight", dest="skip_preflight", action="store_true", default=None,
        help="Send without simulating first",
    )
    preflight.add_argument(
        "--preflight", dest="skip_preflight", action="store_false",
        help="Simulate before sending",
    )
    parser.add_argument(
        "--no-airdrop", action="store_true", help="Fail instead of requesting an airdrop"
    )
    parser.add_argument(
        "--verify", action="store_true", help="Read back the mint after confirmation"
    )
    return parser.parse_args(argv)


def apply_cli_overrides(cfg: dict, args: argparse.Namespace) -> None:
    if args.skip_preflight is not None:
        cfg["submit"]["skip_preflight"] = args.skip_preflight
    if args.no_airdrop:
        cfg["funding"]["airdrop"] = False
    if args.verify:
        cfg["verify_mint"] = True


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    try:
        cfg = load_minter_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)

    apply_cli_overrides(cfg, args)
    set_log_level(cfg["log_level"])
    setup_logging(cfg["name"])
    print_config_summary(cfg)

    asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
    try:
        asyncio.run(start_minter(cfg))
    except KeyboardInterrupt:
        logger.info("Minting stopped by user")
        sys.exit(130)
    except MinterError as e:
        logger.error(f"Minting failed: {e!s}")
        sys.exit(1)
    except Exception as e:
        logging.exception(f"Unexpected failure: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
