"""
System addresses and constants for Solana blockchain operations.
This module contains the program and sysvar addresses shared by every
instruction in the mint transaction, plus the SPL account layout sizes.
"""

from typing import Final

from solders.pubkey import Pubkey

# Constants
LAMPORTS_PER_SOL: Final[int] = 1_000_000_000
NFT_DECIMALS: Final[int] = 0
NFT_SUPPLY: Final[int] = 1

# Serialized SPL layout sizes
MINT_LEN: Final[int] = 82
ACCOUNT_LEN: Final[int] = 165

# Core system programs
SYSTEM_PROGRAM: Final[Pubkey] = Pubkey.from_string("11111111111111111111111111111111")
TOKEN_PROGRAM: Final[Pubkey] = Pubkey.from_string(
    "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
)
ASSOCIATED_TOKEN_PROGRAM: Final[Pubkey] = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)
METADATA_PROGRAM: Final[Pubkey] = Pubkey.from_string(
    "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
)

# System accounts
RENT: Final[Pubkey] = Pubkey.from_string(
    "SysvarRent111111111111111111111111111111111"
)

# Seed literals
METADATA_SEED: Final[bytes] = b"metadata"
DEFAULT_AUTHORITY_SEED: Final[bytes] = b"amoebit_minter"

# Defaults for the injectable minter settings
DEFAULT_SECONDARY_MINT: Final[Pubkey] = Pubkey.from_string(
    "GQFdQvFMjkq5x1Ny4nsEqRgcwdedJWpq3Fsy5KqjGKSm"
)
DEFAULT_UPDATE_AUTHORITY: Final[Pubkey] = Pubkey.from_string(
    "VLawmZTgLAbdeqrU579ohsdey9H1h3Mi1UeUJpg2mQB"
)


class SystemAddresses:
    """System-level Solana addresses used by the mint recipe."""

    # Reference the module-level constants
    SYSTEM_PROGRAM = SYSTEM_PROGRAM
    TOKEN_PROGRAM = TOKEN_PROGRAM
    ASSOCIATED_TOKEN_PROGRAM = ASSOCIATED_TOKEN_PROGRAM
    METADATA_PROGRAM = METADATA_PROGRAM
    RENT = RENT

