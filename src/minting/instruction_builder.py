"""
Builds the five instructions of the NFT mint transaction.

Order within the transaction:
    1. create the mint account
    2. initialize it as a zero-decimal mint
    3. create the payer's associated token account
    4. mint one token into it
    5. invoke the minter program
"""

from collections.abc import Sequence

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.instructions import (
    InitializeMintParams,
    MintToParams,
    create_associated_token_account,
    initialize_mint,
    mint_to,
)

from core.errors import InstructionBuildError
from core.pubkeys import MINT_LEN, NFT_DECIMALS, NFT_SUPPLY, SystemAddresses
from minting.accounts import AccountMetadataBuilder, resolve_roles
from minting.addresses import MinterAddresses
from minting.context import MinterSettings
from utils.logger import get_logger

logger = get_logger(__name__)


def _require(**values) -> None:
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise InstructionBuildError(f"Unresolved inputs: {', '.join(missing)}")


class InstructionFactory:
    """Creates the mint recipe's instructions for a given payer and mint."""

    def __init__(
        self,
        program_id: Pubkey,
        settings: MinterSettings,
        account_builder: AccountMetadataBuilder | None = None,
    ):
        """Initialize the factory.

        Args:
            program_id: Deployed minter program id
            settings: Injectable minter settings
            account_builder: Layout builder for the minter instruction
        """
        self.program_id = program_id
        self.settings = settings
        self.account_builder = account_builder or AccountMetadataBuilder()

    def create_mint_account(
        self, payer: Pubkey, mint: Pubkey, lamports: int | None
    ) -> Instruction:
        """Allocate a rent-exempt mint-sized account owned by the token program."""
        _require(payer=payer, mint=mint, lamports=lamports)
        return create_account(
            CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=mint,
                lamports=lamports,
                space=MINT_LEN,
                owner=SystemAddresses.TOKEN_PROGRAM,
            )
        )

    def initialize_mint(self, payer: Pubkey, mint: Pubkey) -> Instruction:
        """Initialize a zero-decimal mint with payer as authority and no freeze authority."""
        _require(payer=payer, mint=mint)
        return initialize_mint(
            InitializeMintParams(
                decimals=NFT_DECIMALS,
                program_id=SystemAddresses.TOKEN_PROGRAM,
                mint=mint,
                mint_authority=payer,
                freeze_authority=None,
            )
        )

    def create_associated_account(
        self, payer: Pubkey, mint: Pubkey, associated_token: Pubkey | None
    ) -> Instruction:
        """Create payer's associated token account for mint.

        Raises:
            InstructionBuildError: If the token library addresses a different
                account than the derived associated token address
        """
        _require(payer=payer, mint=mint, associated_token=associated_token)
        instruction = create_associated_token_account(payer, payer, mint)
        created = instruction.accounts[1].pubkey
        if created != associated_token:
            raise InstructionBuildError(
                f"Associated token mismatch: derived {associated_token}, instruction creates {created}"
            )
        return instruction

    def mint_to(
        self, payer: Pubkey, mint: Pubkey, associated_token: Pubkey | None
    ) -> Instruction:
        """Mint exactly one token into the associated account, signed by payer."""
        _require(payer=payer, mint=mint, associated_token=associated_token)
        return mint_to(
            MintToParams(
                program_id=SystemAddresses.TOKEN_PROGRAM,
                mint=mint,
                dest=associated_token,
                mint_authority=payer,
                amount=NFT_SUPPLY,
            )
        )

    def custom_invoke(self, accounts: Sequence[AccountMeta]) -> Instruction:
        """Call the minter program with an empty payload.

        Args:
            accounts: Ordered account list; checked against the program layout

        Raises:
            AccountLayoutMismatch: If the list deviates from the layout
        """
        self.account_builder.validate(accounts)
        return Instruction(
            program_id=self.program_id,
            data=b"",
            accounts=list(accounts),
        )

    def build_all(
        self,
        payer: Pubkey,
        mint: Pubkey,
        mint_rent: int | None,
        addresses: MinterAddresses | None,
    ) -> list[Instruction]:
        """Build the full recipe in execution order.

        Args:
            payer: Payer wallet address
            mint: New mint address
            mint_rent: Rent-exempt lamports for the mint account
            addresses: Derived addresses for this build

        Returns:
            The five instructions, in order

        Raises:
            InstructionBuildError: If an address or balance is unresolved
        """
        _require(payer=payer, mint=mint, mint_rent=mint_rent, addresses=addresses)
        associated_token = addresses.associated_token.address

        accounts = self.account_builder.build(
            resolve_roles(payer, mint, addresses, self.settings)
        )

        instructions = [
            self.create_mint_account(payer, mint, mint_rent),
            self.initialize_mint(payer, mint),
            self.create_associated_account(payer, mint, associated_token),
            self.mint_to(payer, mint, associated_token),
            self.custom_invoke(accounts),
        ]
        logger.info(f"Built {len(instructions)} instructions for mint {mint}")
        return instructions
