"""
Program-derived addresses used by the mint transaction.

Each logical role gets its own derivation method and its own named field in
MinterAddresses, so every derivation can be checked on its own.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey

from core.derivation import DerivedAddress, SeedDeriver
from core.pubkeys import METADATA_SEED, SystemAddresses
from minting.context import MinterSettings


@dataclass(frozen=True)
class MinterAddresses:
    """Every derived address the mint transaction references."""

    associated_token: DerivedAddress
    metadata: DerivedAddress
    authority: DerivedAddress
    secondary_metadata: DerivedAddress
    secondary_associated_token: DerivedAddress


class MinterAddressProvider:
    """Derives the minter's PDAs for one transaction build."""

    def __init__(
        self,
        program_id: Pubkey,
        settings: MinterSettings,
        deriver: SeedDeriver | None = None,
    ):
        """Initialize the provider.

        Args:
            program_id: Deployed minter program id
            settings: Authority seed and secondary mint for this invocation
            deriver: Memoizing deriver; a fresh one is created when omitted
        """
        self.program_id = program_id
        self.settings = settings
        self.deriver = deriver or SeedDeriver()

    def derive_metadata(self, mint: Pubkey) -> DerivedAddress:
        """Derive the token-metadata record for a mint.

        Args:
            mint: Token mint address

        Returns:
            Metadata PDA owned by the metadata program
        """
        return self.deriver.derive(
            [
                METADATA_SEED,
                bytes(SystemAddresses.METADATA_PROGRAM),
                bytes(mint),
            ],
            SystemAddresses.METADATA_PROGRAM,
        )

    def derive_authority(self) -> DerivedAddress:
        """Derive the minter program's signing authority.

        Returns:
            Authority PDA owned by the minter program
        """
        seed = self.settings.authority_seed
        return self.deriver.derive(
            [seed, bytes(self.program_id), seed],
            self.program_id,
        )

    def derive_associated_token(self, owner: Pubkey, mint: Pubkey) -> DerivedAddress:
        """Derive the associated token account of owner for mint.

        Args:
            owner: Wallet that owns the token account
            mint: Token mint address

        Returns:
            Associated token account PDA
        """
        return self.deriver.derive(
            [
                bytes(owner),
                bytes(SystemAddresses.TOKEN_PROGRAM),
                bytes(mint),
            ],
            SystemAddresses.ASSOCIATED_TOKEN_PROGRAM,
        )

    def resolve(self, payer: Pubkey, mint: Pubkey) -> MinterAddresses:
        """Derive every PDA the transaction needs.

        Args:
            payer: Payer wallet address
            mint: Freshly generated mint address

        Returns:
            MinterAddresses with one entry per role
        """
        secondary_mint = self.settings.secondary_mint
        return MinterAddresses(
            associated_token=self.derive_associated_token(payer, mint),
            metadata=self.derive_metadata(mint),
            authority=self.derive_authority(),
            secondary_metadata=self.derive_metadata(secondary_mint),
            secondary_associated_token=self.derive_associated_token(
                payer, secondary_mint
            ),
        )
