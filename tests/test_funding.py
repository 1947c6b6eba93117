"""
Tests for payer funding.
"""

import pytest

from core.errors import BalanceQueryFailure, InsufficientFunds
from minting.funding import ensure_payer_funded, fee_requirement


@pytest.mark.asyncio
async def test_airdrops_exact_shortfall(mock_client, payer):
    mock_client.get_balance.side_effect = [0, 5000]

    balance = await ensure_payer_funded(mock_client, payer.pubkey(), 5000)

    assert balance == 5000
    mock_client.request_airdrop.assert_awaited_once_with(payer.pubkey(), 5000)
    mock_client.confirm_transaction.assert_awaited_once_with(
        mock_client.request_airdrop.return_value
    )
    assert mock_client.get_balance.await_count == 2


@pytest.mark.asyncio
async def test_airdrop_tops_up_partial_balance(mock_client, payer):
    mock_client.get_balance.side_effect = [1200, 5000]

    await ensure_payer_funded(mock_client, payer.pubkey(), 5000)

    mock_client.request_airdrop.assert_awaited_once_with(payer.pubkey(), 3800)


@pytest.mark.asyncio
async def test_still_short_after_airdrop(mock_client, payer):
    mock_client.get_balance.side_effect = [0, 4999]

    with pytest.raises(InsufficientFunds) as exc_info:
        await ensure_payer_funded(mock_client, payer.pubkey(), 5000)

    assert exc_info.value.balance == 4999
    assert exc_info.value.required == 5000


@pytest.mark.asyncio
async def test_funded_payer_skips_airdrop(mock_client, payer):
    mock_client.get_balance.return_value = 10_000

    assert await ensure_payer_funded(mock_client, payer.pubkey(), 5000) == 10_000
    mock_client.request_airdrop.assert_not_awaited()


@pytest.mark.asyncio
async def test_airdrop_disabled(mock_client, payer):
    mock_client.get_balance.return_value = 0

    with pytest.raises(InsufficientFunds):
        await ensure_payer_funded(mock_client, payer.pubkey(), 5000, airdrop=False)
    mock_client.request_airdrop.assert_not_awaited()


@pytest.mark.asyncio
async def test_balance_query_failure(mock_client, payer):
    mock_client.get_balance.side_effect = ConnectionError("unreachable")

    with pytest.raises(BalanceQueryFailure, match="unreachable"):
        await ensure_payer_funded(mock_client, payer.pubkey(), 5000)


@pytest.mark.asyncio
async def test_fee_requirement(mock_client, payer):
    assert await fee_requirement(mock_client, payer.pubkey()) == 500_000
    assert await fee_requirement(mock_client, payer.pubkey(), fee_multiplier=1) == 5000


@pytest.mark.asyncio
async def test_fee_query_failure(mock_client, payer):
    mock_client.get_fee_per_signature.side_effect = ValueError("no fee")

    with pytest.raises(BalanceQueryFailure):
        await fee_requirement(mock_client, payer.pubkey())
