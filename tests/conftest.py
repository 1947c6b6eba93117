"""
Pytest configuration and shared fixtures for the test suite.
"""

from unittest.mock import AsyncMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus, TransactionStatus

from core.wallet import Wallet
from interfaces.core import NetworkConnection
from minting.addresses import MinterAddressProvider
from minting.context import MintContext, MinterSettings
from minting.instruction_builder import InstructionFactory


# ============================================================================
# Key Fixtures
# ============================================================================

@pytest.fixture
def payer() -> Keypair:
    """Deterministic payer keypair."""
    return Keypair.from_seed(bytes([1] * 32))


@pytest.fixture
def mint() -> Keypair:
    """Deterministic keypair for the new mint account."""
    return Keypair.from_seed(bytes([2] * 32))


@pytest.fixture
def program_id() -> Pubkey:
    """Stand-in for the deployed minter program id."""
    return Keypair.from_seed(bytes([3] * 32)).pubkey()


@pytest.fixture
def settings() -> MinterSettings:
    return MinterSettings()


@pytest.fixture
def blockhash() -> Hash:
    return Hash(bytes([7] * 32))


# ============================================================================
# Builder Fixtures
# ============================================================================

@pytest.fixture
def addresses(payer, mint, program_id, settings):
    """Resolved PDAs for the fixture payer and mint."""
    provider = MinterAddressProvider(program_id, settings)
    return provider.resolve(payer.pubkey(), mint.pubkey())


@pytest.fixture
def factory(program_id, settings) -> InstructionFactory:
    return InstructionFactory(program_id, settings)


@pytest.fixture
def instructions(factory, payer, mint, addresses):
    """The five recipe instructions, in order."""
    return factory.build_all(payer.pubkey(), mint.pubkey(), 1_461_600, addresses)


# ============================================================================
# Network Fixtures
# ============================================================================

CONFIRMATION_LEVELS = {
    "processed": TransactionConfirmationStatus.Processed,
    "confirmed": TransactionConfirmationStatus.Confirmed,
    "finalized": TransactionConfirmationStatus.Finalized,
}


def confirmed_status(slot: int = 42, level: str = "confirmed") -> TransactionStatus:
    """Signature status as returned by get_signature_status."""
    return TransactionStatus(
        slot=slot,
        confirmations=None if level == "finalized" else 1,
        confirmation_status=CONFIRMATION_LEVELS[level],
    )


@pytest.fixture
def mock_client(blockhash) -> AsyncMock:
    """NetworkConnection double with a well-funded payer and a confirming cluster."""
    client = AsyncMock(spec=NetworkConnection)
    client.get_version.return_value = {"solana-core": "1.18.0"}
    client.get_latest_blockhash.return_value = blockhash
    client.get_fee_per_signature.return_value = 5000
    client.get_balance.return_value = 10_000_000_000
    client.get_minimum_balance_for_rent_exemption.side_effect = (
        lambda size: {82: 1_461_600, 165: 2_039_280}[size]
    )
    client.get_account_info.return_value = None
    client.request_airdrop.return_value = Signature.default()
    client.confirm_transaction.return_value = True
    client.send_transaction.return_value = Signature.default()
    client.get_signature_status.return_value = confirmed_status()
    client.is_blockhash_valid.return_value = True
    return client


@pytest.fixture
def context(mock_client, payer, program_id, settings) -> MintContext:
    return MintContext(
        client=mock_client,
        payer=Wallet(payer),
        program_id=program_id,
        settings=settings,
    )
