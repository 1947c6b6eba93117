"""
Account layout of the minter program's single instruction.

The program walks its accounts positionally, so the order and the
signer/writable flags below are part of its interface. Nothing here may
reorder, deduplicate or change the permissions of an entry.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import NamedTuple

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from core.errors import AccountLayoutMismatch, InstructionBuildError
from core.pubkeys import SystemAddresses
from minting.addresses import MinterAddresses
from minting.context import MinterSettings


class AccountRole(Enum):
    """Logical roles in the minter instruction's account list."""

    PAYER = "payer"
    SECONDARY_MINT = "secondary_mint"
    SYSTEM_PROGRAM = "system_program"
    ASSOCIATED_TOKEN = "associated_token"
    MINT = "mint"
    METADATA = "metadata"
    METADATA_PROGRAM = "metadata_program"
    RENT = "rent"
    AUTHORITY = "authority"
    TOKEN_PROGRAM = "token_program"
    SECONDARY_METADATA = "secondary_metadata"
    SECONDARY_ASSOCIATED_TOKEN = "secondary_associated_token"
    UPDATE_AUTHORITY = "update_authority"


class AccountSlot(NamedTuple):
    role: AccountRole
    is_signer: bool
    is_writable: bool


MINTER_ACCOUNT_LAYOUT: tuple[AccountSlot, ...] = (
    AccountSlot(AccountRole.PAYER, True, True),
    AccountSlot(AccountRole.SECONDARY_MINT, False, True),
    AccountSlot(AccountRole.SYSTEM_PROGRAM, False, False),
    AccountSlot(AccountRole.ASSOCIATED_TOKEN, False, True),
    AccountSlot(AccountRole.MINT, False, True),
    AccountSlot(AccountRole.METADATA, False, True),
    AccountSlot(AccountRole.METADATA_PROGRAM, False, False),
    AccountSlot(AccountRole.RENT, False, False),
    AccountSlot(AccountRole.AUTHORITY, False, True),
    AccountSlot(AccountRole.TOKEN_PROGRAM, False, False),
    AccountSlot(AccountRole.SECONDARY_METADATA, False, True),
    AccountSlot(AccountRole.SECONDARY_ASSOCIATED_TOKEN, False, True),
    AccountSlot(AccountRole.UPDATE_AUTHORITY, False, True),
)

# Roles whose address never changes between invocations
FIXED_ADDRESSES: dict[AccountRole, Pubkey] = {
    AccountRole.SYSTEM_PROGRAM: SystemAddresses.SYSTEM_PROGRAM,
    AccountRole.METADATA_PROGRAM: SystemAddresses.METADATA_PROGRAM,
    AccountRole.RENT: SystemAddresses.RENT,
    AccountRole.TOKEN_PROGRAM: SystemAddresses.TOKEN_PROGRAM,
}


def resolve_roles(
    payer: Pubkey,
    mint: Pubkey,
    addresses: MinterAddresses,
    settings: MinterSettings,
) -> dict[AccountRole, Pubkey]:
    """Map every variable role to its address for one transaction.

    Args:
        payer: Payer wallet address
        mint: New mint address
        addresses: Derived addresses for this build
        settings: Injectable minter settings

    Returns:
        Role to address mapping (fixed program roles are filled in by the builder)
    """
    return {
        AccountRole.PAYER: payer,
        AccountRole.SECONDARY_MINT: settings.secondary_mint,
        AccountRole.ASSOCIATED_TOKEN: addresses.associated_token.address,
        AccountRole.MINT: mint,
        AccountRole.METADATA: addresses.metadata.address,
        AccountRole.AUTHORITY: addresses.authority.address,
        AccountRole.SECONDARY_METADATA: addresses.secondary_metadata.address,
        AccountRole.SECONDARY_ASSOCIATED_TOKEN: addresses.secondary_associated_token.address,
        AccountRole.UPDATE_AUTHORITY: settings.update_authority,
    }


class AccountMetadataBuilder:
    """Turns resolved role addresses into the program's ordered account list."""

    def __init__(self, layout: Sequence[AccountSlot] = MINTER_ACCOUNT_LAYOUT):
        self.layout = tuple(layout)

    def build(self, resolved: Mapping[AccountRole, Pubkey | None]) -> list[AccountMeta]:
        """Build the account list in layout order.

        Args:
            resolved: Address for each role; fixed program roles may be omitted

        Returns:
            Ordered AccountMeta list

        Raises:
            InstructionBuildError: If a role has no address
        """
        addresses = {**FIXED_ADDRESSES, **resolved}
        accounts = []
        for index, slot in enumerate(self.layout):
            pubkey = addresses.get(slot.role)
            if pubkey is None:
                raise InstructionBuildError(
                    f"Account #{index} ({slot.role.value}) is unresolved"
                )
            accounts.append(
                AccountMeta(
                    pubkey=pubkey,
                    is_signer=slot.is_signer,
                    is_writable=slot.is_writable,
                )
            )
        return accounts

    def validate(self, accounts: Sequence[AccountMeta]) -> None:
        """Check an account list against the layout.

        Raises:
            AccountLayoutMismatch: On a length, permission or fixed-address mismatch
        """
        if len(accounts) != len(self.layout):
            raise AccountLayoutMismatch(
                min(len(accounts), len(self.layout)),
                f"expected {len(self.layout)} accounts, got {len(accounts)}",
            )

        for index, (meta, slot) in enumerate(zip(accounts, self.layout)):
            if meta.is_signer != slot.is_signer:
                raise AccountLayoutMismatch(
                    index,
                    f"{slot.role.value} must have is_signer={slot.is_signer}",
                )
            if meta.is_writable != slot.is_writable:
                raise AccountLayoutMismatch(
                    index,
                    f"{slot.role.value} must have is_writable={slot.is_writable}",
                )
            expected = FIXED_ADDRESSES.get(slot.role)
            if expected is not None and meta.pubkey != expected:
                raise AccountLayoutMismatch(
                    index, f"{slot.role.value} must be {expected}, got {meta.pubkey}"
                )
