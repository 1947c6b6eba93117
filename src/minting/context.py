"""
Explicit context passed through every minting component.
"""

from dataclasses import dataclass, field

from solders.pubkey import Pubkey

from core.pubkeys import (
    DEFAULT_AUTHORITY_SEED,
    DEFAULT_SECONDARY_MINT,
    DEFAULT_UPDATE_AUTHORITY,
)
from core.wallet import Wallet
from interfaces.core import NetworkConnection


@dataclass(frozen=True)
class MinterSettings:
    """Per-invocation values the minter program expects."""

    authority_seed: bytes = DEFAULT_AUTHORITY_SEED
    secondary_mint: Pubkey = DEFAULT_SECONDARY_MINT
    update_authority: Pubkey = DEFAULT_UPDATE_AUTHORITY


@dataclass
class MintContext:
    """Connection, payer and program id for one minting session."""

    client: NetworkConnection
    payer: Wallet
    program_id: Pubkey
    settings: MinterSettings = field(default_factory=MinterSettings)
