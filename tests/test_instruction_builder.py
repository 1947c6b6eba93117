"""
Tests for the mint recipe's instruction factory.
"""

import struct

import pytest
from solders.instruction import AccountMeta
from solders.keypair import Keypair

from core.errors import AccountLayoutMismatch, InstructionBuildError
from core.pubkeys import MINT_LEN, SystemAddresses
from minting.accounts import AccountMetadataBuilder, resolve_roles


def test_recipe_order(instructions, program_id):
    assert [ix.program_id for ix in instructions] == [
        SystemAddresses.SYSTEM_PROGRAM,
        SystemAddresses.TOKEN_PROGRAM,
        SystemAddresses.ASSOCIATED_TOKEN_PROGRAM,
        SystemAddresses.TOKEN_PROGRAM,
        program_id,
    ]


def test_create_mint_account(factory, payer, mint):
    ix = factory.create_mint_account(payer.pubkey(), mint.pubkey(), 1_461_600)

    # SystemInstruction::CreateAccount = 0, lamports u64, space u64, owner
    index, lamports, space = struct.unpack_from("<IQQ", bytes(ix.data))
    assert (index, lamports, space) == (0, 1_461_600, MINT_LEN)
    assert bytes(ix.data)[20:] == bytes(SystemAddresses.TOKEN_PROGRAM)
    assert ix.accounts[0].pubkey == payer.pubkey()
    assert ix.accounts[1].pubkey == mint.pubkey()
    assert ix.accounts[1].is_signer


def test_initialize_mint(factory, payer, mint):
    ix = factory.initialize_mint(payer.pubkey(), mint.pubkey())
    data = bytes(ix.data)

    assert data[0] == 0  # InitializeMint
    assert data[1] == 0  # decimals
    assert data[2:34] == bytes(payer.pubkey())
    assert data[34] == 0  # no freeze authority
    assert ix.accounts[0].pubkey == mint.pubkey()


def test_create_associated_account(factory, payer, mint, addresses):
    ix = factory.create_associated_account(
        payer.pubkey(), mint.pubkey(), addresses.associated_token.address
    )

    assert ix.accounts[0].pubkey == payer.pubkey()
    assert ix.accounts[0].is_signer
    assert ix.accounts[1].pubkey == addresses.associated_token.address


def test_create_associated_account_mismatch(factory, payer, mint):
    wrong = Keypair.from_seed(bytes([8] * 32)).pubkey()

    with pytest.raises(InstructionBuildError, match="mismatch"):
        factory.create_associated_account(payer.pubkey(), mint.pubkey(), wrong)


def test_mint_to_one_unit(factory, payer, mint, addresses):
    ix = factory.mint_to(payer.pubkey(), mint.pubkey(), addresses.associated_token.address)

    assert bytes(ix.data) == bytes([7]) + (1).to_bytes(8, "little")
    assert [a.pubkey for a in ix.accounts] == [
        mint.pubkey(),
        addresses.associated_token.address,
        payer.pubkey(),
    ]
    assert ix.accounts[2].is_signer


def test_custom_invoke(instructions, program_id):
    ix = instructions[-1]

    assert ix.program_id == program_id
    assert bytes(ix.data) == b""
    assert len(ix.accounts) == 13


def test_custom_invoke_rejects_flipped_flag(factory, payer, mint, addresses, settings):
    accounts = AccountMetadataBuilder().build(
        resolve_roles(payer.pubkey(), mint.pubkey(), addresses, settings)
    )
    meta = accounts[8]
    accounts[8] = AccountMeta(meta.pubkey, is_signer=False, is_writable=False)

    with pytest.raises(AccountLayoutMismatch) as exc_info:
        factory.custom_invoke(accounts)
    assert exc_info.value.index == 8


def test_missing_rent(factory, payer, mint, addresses):
    with pytest.raises(InstructionBuildError, match="mint_rent"):
        factory.build_all(payer.pubkey(), mint.pubkey(), None, addresses)


def test_missing_addresses(factory, payer, mint):
    with pytest.raises(InstructionBuildError, match="addresses"):
        factory.build_all(payer.pubkey(), mint.pubkey(), 1_461_600, None)


def test_build_is_repeatable(factory, payer, mint, addresses):
    first = factory.build_all(payer.pubkey(), mint.pubkey(), 1_461_600, addresses)
    second = factory.build_all(payer.pubkey(), mint.pubkey(), 1_461_600, addresses)

    assert first == second
