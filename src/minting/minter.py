"""
End-to-end flow: fund the payer, build the mint transaction, submit it.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey
from solders.transaction import Transaction

from core.derivation import SeedDeriver
from core.mint_state import MintAccountState, TokenAccountState
from core.rent import RentCalculator
from core.wallet import Wallet
from minting.addresses import MinterAddresses, MinterAddressProvider
from minting.context import MintContext
from minting.funding import DEFAULT_FEE_MULTIPLIER, ensure_payer_funded, fee_requirement
from minting.instruction_builder import InstructionFactory
from minting.submitter import Submitter, SubmitOptions, TransactionReceipt
from minting.transaction import TransactionAssembler
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class MintResult:
    """Outcome of one mint."""

    receipt: TransactionReceipt
    mint: Pubkey
    associated_token: Pubkey
    verified: bool | None = None


class NftMinter:
    """Runs the mint recipe for one payer against one minter program."""

    def __init__(
        self,
        context: MintContext,
        submit_options: SubmitOptions | None = None,
        fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
        airdrop: bool = True,
        verify_mint: bool = False,
    ):
        """Initialize the minter.

        Args:
            context: Connection, payer, program id and settings
            submit_options: Send/confirm options
            fee_multiplier: Signature fees to budget when funding the payer
            airdrop: Whether a low payer balance may be topped up by airdrop
            verify_mint: Read back the new mint and token account after confirmation
        """
        self.context = context
        self.submit_options = submit_options or SubmitOptions()
        self.fee_multiplier = fee_multiplier
        self.airdrop = airdrop
        self.verify_mint = verify_mint
        self.rent = RentCalculator(context.client)
        self.submitter = Submitter(context.client)

    async def fund_payer(self) -> int:
        """Make sure the payer covers fees plus the rent of the new accounts."""
        client = self.context.client
        payer = self.context.payer.pubkey

        fees = await fee_requirement(client, payer, self.fee_multiplier)
        rent = await self.rent.mint_balance() + await self.rent.token_account_balance()
        return await ensure_payer_funded(client, payer, fees + rent, airdrop=self.airdrop)

    async def build(self, mint: Wallet) -> tuple[Transaction, MinterAddresses]:
        """Build the unsigned mint transaction for a fresh mint keypair.

        Args:
            mint: Keypair wallet for the new mint account

        Returns:
            Unsigned transaction and the addresses it references
        """
        ctx = self.context
        payer = ctx.payer.pubkey

        provider = MinterAddressProvider(ctx.program_id, ctx.settings, SeedDeriver())
        addresses = provider.resolve(payer, mint.pubkey)
        mint_rent = await self.rent.mint_balance()

        factory = InstructionFactory(ctx.program_id, ctx.settings)
        assembler = TransactionAssembler(payer)
        assembler.extend(factory.build_all(payer, mint.pubkey, mint_rent, addresses))

        blockhash = await ctx.client.get_latest_blockhash()
        return assembler.finalize(blockhash), addresses

    async def verify(self, mint: Pubkey, associated_token: Pubkey) -> bool:
        """Check the new mint holds a single unit owned by the payer."""
        client = self.context.client
        mint_info = await client.get_account_info(mint)
        token_info = await client.get_account_info(associated_token)
        if mint_info is None or token_info is None:
            logger.warning(f"Mint {mint} or token account {associated_token} not found")
            return False

        mint_state = MintAccountState.from_bytes(bytes(mint_info.data))
        token_state = TokenAccountState.from_bytes(bytes(token_info.data))
        verified = (
            mint_state.is_nft
            and token_state.mint == mint
            and token_state.owner == self.context.payer.pubkey
            and token_state.amount == 1
        )
        if verified:
            logger.info(f"Verified mint {mint}: supply 1, decimals 0, held by payer")
        else:
            logger.warning(f"Mint {mint} state unexpected: {mint_state}, {token_state}")
        return verified

    async def mint(self) -> MintResult:
        """Fund, build, sign, submit and confirm one NFT mint.

        Returns:
            MintResult with the receipt and new addresses
        """
        await self.fund_payer()

        mint = Wallet.generate()
        logger.info(f"New mint: {mint.pubkey}")
        transaction, addresses = await self.build(mint)

        receipt = await self.submitter.submit(
            transaction,
            [self.context.payer.keypair, mint.keypair],
            self.submit_options,
        )

        associated_token = addresses.associated_token.address
        result = MintResult(
            receipt=receipt, mint=mint.pubkey, associated_token=associated_token
        )
        if self.verify_mint:
            result.verified = await self.verify(mint.pubkey, associated_token)
        return result
