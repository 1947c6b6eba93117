"""
Decoders for SPL mint and token account data.
"""

from dataclasses import dataclass

from construct import Bytes, Flag, Int8ul, Int32ul, Int64ul, Struct
from solders.pubkey import Pubkey

from core.pubkeys import ACCOUNT_LEN, MINT_LEN

MINT_LAYOUT = Struct(
    "mint_authority_option" / Int32ul,
    "mint_authority" / Bytes(32),
    "supply" / Int64ul,
    "decimals" / Int8ul,
    "is_initialized" / Flag,
    "freeze_authority_option" / Int32ul,
    "freeze_authority" / Bytes(32),
)

TOKEN_ACCOUNT_LAYOUT = Struct(
    "mint" / Bytes(32),
    "owner" / Bytes(32),
    "amount" / Int64ul,
    "delegate_option" / Int32ul,
    "delegate" / Bytes(32),
    "state" / Int8ul,
    "is_native_option" / Int32ul,
    "is_native" / Int64ul,
    "delegated_amount" / Int64ul,
    "close_authority_option" / Int32ul,
    "close_authority" / Bytes(32),
)


def _optional_pubkey(flag: int, raw: bytes) -> Pubkey | None:
    return Pubkey(raw) if flag else None


@dataclass
class MintAccountState:
    """Decoded SPL mint account."""

    mint_authority: Pubkey | None
    supply: int
    decimals: int
    is_initialized: bool
    freeze_authority: Pubkey | None

    @classmethod
    def from_bytes(cls, data: bytes) -> "MintAccountState":
        """Decode raw mint account data.

        Raises:
            ValueError: If data is shorter than the mint layout
        """
        if len(data) < MINT_LEN:
            raise ValueError(f"Mint data too short: {len(data)} bytes")
        parsed = MINT_LAYOUT.parse(data[:MINT_LEN])
        return cls(
            mint_authority=_optional_pubkey(
                parsed.mint_authority_option, parsed.mint_authority
            ),
            supply=parsed.supply,
            decimals=parsed.decimals,
            is_initialized=parsed.is_initialized,
            freeze_authority=_optional_pubkey(
                parsed.freeze_authority_option, parsed.freeze_authority
            ),
        )

    @property
    def is_nft(self) -> bool:
        """A single indivisible unit with no freeze authority."""
        return (
            self.is_initialized
            and self.decimals == 0
            and self.supply == 1
            and self.freeze_authority is None
        )


@dataclass
class TokenAccountState:
    """Decoded SPL token account (only the fields the minter cares about)."""

    mint: Pubkey
    owner: Pubkey
    amount: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "TokenAccountState":
        if len(data) < ACCOUNT_LEN:
            raise ValueError(f"Token account data too short: {len(data)} bytes")
        parsed = TOKEN_ACCOUNT_LAYOUT.parse(data[:ACCOUNT_LEN])
        return cls(
            mint=Pubkey(parsed.mint),
            owner=Pubkey(parsed.owner),
            amount=parsed.amount,
        )
