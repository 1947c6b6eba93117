"""
End-to-end tests for the mint flow against a mocked cluster.
"""

from types import SimpleNamespace

import pytest
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from core.errors import ConfirmationTimeout, InsufficientFunds
from core.mint_state import MINT_LAYOUT, TOKEN_ACCOUNT_LAYOUT
from core.pubkeys import TOKEN_PROGRAM
from core.wallet import Wallet
from minting.minter import NftMinter
from minting.submitter import SubmitOptions

# 100 signature fees plus mint and token account rent
REQUIRED_LAMPORTS = 5000 * 100 + 1_461_600 + 2_039_280


@pytest.fixture
def fixed_mint(monkeypatch, mint):
    """Make Wallet.generate hand out the fixture mint keypair."""
    monkeypatch.setattr(Wallet, "generate", classmethod(lambda cls: cls(mint)))
    return mint


@pytest.fixture
def minter(context):
    return NftMinter(context, SubmitOptions(timeout=0.2, poll_interval=0.01))


def _mint_account(supply=1, freeze=None):
    return SimpleNamespace(
        data=MINT_LAYOUT.build(
            {
                "mint_authority_option": 0,
                "mint_authority": bytes(32),
                "supply": supply,
                "decimals": 0,
                "is_initialized": True,
                "freeze_authority_option": int(freeze is not None),
                "freeze_authority": bytes(freeze) if freeze is not None else bytes(32),
            }
        )
    )


def _token_account(mint: Pubkey, owner: Pubkey, amount=1):
    return SimpleNamespace(
        data=TOKEN_ACCOUNT_LAYOUT.build(
            {
                "mint": bytes(mint),
                "owner": bytes(owner),
                "amount": amount,
                "delegate_option": 0,
                "delegate": bytes(32),
                "state": 1,
                "is_native_option": 0,
                "is_native": 0,
                "delegated_amount": 0,
                "close_authority_option": 0,
                "close_authority": bytes(32),
            }
        )
    )


class TestFunding:
    @pytest.mark.asyncio
    async def test_funded_payer(self, minter, mock_client):
        await minter.fund_payer()

        mock_client.request_airdrop.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_airdrops_fees_and_rent(self, minter, mock_client, payer):
        mock_client.get_balance.side_effect = [0, REQUIRED_LAMPORTS]

        assert await minter.fund_payer() == REQUIRED_LAMPORTS
        mock_client.request_airdrop.assert_awaited_once_with(
            payer.pubkey(), REQUIRED_LAMPORTS
        )

    @pytest.mark.asyncio
    async def test_airdrop_disabled(self, context, mock_client):
        mock_client.get_balance.return_value = 0

        with pytest.raises(InsufficientFunds):
            await NftMinter(context, airdrop=False).fund_payer()


class TestBuild:
    @pytest.mark.asyncio
    async def test_transaction_shape(self, minter, mint, payer, program_id, blockhash):
        transaction, _ = await minter.build(Wallet(mint))
        message = transaction.message
        programs = [
            message.account_keys[ix.program_id_index] for ix in message.instructions
        ]

        assert len(message.instructions) == 5
        assert programs[1] == TOKEN_PROGRAM
        assert programs[3] == TOKEN_PROGRAM
        assert programs[4] == program_id
        assert message.account_keys[0] == payer.pubkey()
        assert message.recent_blockhash == blockhash
        assert not transaction.is_signed()

    @pytest.mark.asyncio
    async def test_associated_token_is_stable(self, minter, mint, payer):
        _, first = await minter.build(Wallet(mint))
        _, second = await minter.build(Wallet(mint))

        assert first.associated_token == second.associated_token
        assert first.associated_token.address == get_associated_token_address(
            payer.pubkey(), mint.pubkey()
        )


class TestMint:
    @pytest.mark.asyncio
    async def test_sends_once_and_confirms(self, minter, mock_client, fixed_mint):
        result = await minter.mint()

        mock_client.send_transaction.assert_awaited_once()
        transaction = mock_client.send_transaction.await_args.args[0]
        assert len(transaction.message.instructions) == 5
        assert transaction.is_signed()
        transaction.verify()

        assert result.mint == fixed_mint.pubkey()
        assert result.receipt.slot == 42
        assert result.verified is None

    @pytest.mark.asyncio
    async def test_timeout_propagates(self, minter, mock_client, fixed_mint):
        mock_client.get_signature_status.return_value = None

        with pytest.raises(ConfirmationTimeout):
            await minter.mint()
        assert mock_client.send_transaction.await_count == 1

    @pytest.mark.asyncio
    async def test_verifies_when_asked(self, context, mock_client, payer, fixed_mint):
        minter = NftMinter(context, SubmitOptions(timeout=0.2, poll_interval=0.01), verify_mint=True)
        ata = get_associated_token_address(payer.pubkey(), fixed_mint.pubkey())
        mock_client.get_account_info.side_effect = [
            _mint_account(),
            _token_account(fixed_mint.pubkey(), payer.pubkey()),
        ]

        result = await minter.mint()

        assert result.associated_token == ata
        assert result.verified is True


class TestVerify:
    @pytest.mark.asyncio
    async def test_missing_accounts(self, minter, mint, payer):
        assert await minter.verify(mint.pubkey(), payer.pubkey()) is False

    @pytest.mark.asyncio
    async def test_wrong_owner(self, minter, mock_client, mint, program_id):
        mock_client.get_account_info.side_effect = [
            _mint_account(),
            _token_account(mint.pubkey(), program_id),
        ]

        assert await minter.verify(mint.pubkey(), program_id) is False

    @pytest.mark.asyncio
    async def test_freezable_mint(self, minter, mock_client, mint, payer):
        mock_client.get_account_info.side_effect = [
            _mint_account(freeze=payer.pubkey()),
            _token_account(mint.pubkey(), payer.pubkey()),
        ]

        assert await minter.verify(mint.pubkey(), payer.pubkey()) is False
