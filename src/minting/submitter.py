"""
Signs, sends and confirms the mint transaction.

The only retry here is the status poll. A transaction is never resent; a
caller that wants another attempt has to rebuild it with a fresh blockhash.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from time import monotonic
from typing import Any

from solana.rpc.core import RPCException
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import Transaction

from core.errors import (
    ConfirmationTimeout,
    InstructionBuildError,
    RejectedByNetwork,
    RejectedBySimulation,
    StaleBlockhash,
)
from interfaces.core import NetworkConnection
from minting.transaction import required_signers
from utils.logger import get_logger

logger = get_logger(__name__)

COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}
STALE_BLOCKHASH_MARKERS = ("BlockhashNotFound", "Blockhash not found")


@dataclass
class SubmitOptions:
    """How to send and how long to wait."""

    skip_preflight: bool = False
    timeout: float = 60.0
    poll_interval: float = 1.0
    commitment: str = "confirmed"

    def __post_init__(self):
        if self.commitment not in COMMITMENT_RANK:
            raise ValueError(
                f"commitment must be one of {list(COMMITMENT_RANK)}, got {self.commitment!r}"
            )
        if self.timeout <= 0 or self.poll_interval <= 0:
            raise ValueError("timeout and poll_interval must be positive")


@dataclass
class TransactionReceipt:
    """Terminal outcome of a successful submission."""

    signature: Signature
    slot: int
    confirmation_status: str


def _status_name(status: Any) -> str:
    # solders enums render as "TransactionConfirmationStatus.Confirmed"
    if status.confirmation_status is None:
        # rooted transactions report no confirmation count
        return "finalized" if status.confirmations is None else "processed"
    return str(status.confirmation_status).rsplit(".", 1)[-1].lower()


def _is_stale(detail: str) -> bool:
    return any(marker in detail for marker in STALE_BLOCKHASH_MARKERS)


def _simulation_logs(error: RPCException) -> list[str]:
    payload = error.args[0] if error.args else None
    data = getattr(payload, "data", None)
    return list(getattr(data, "logs", None) or [])


def _instruction_failure(err: Any) -> tuple[int | None, int | None]:
    """Pull (instruction index, custom program error code) out of a transaction error."""
    index = getattr(err, "index", None)
    code = getattr(getattr(err, "err", None), "code", None)
    return index, code


class Submitter:
    """Sends a finalized transaction and waits for a terminal status."""

    def __init__(self, client: NetworkConnection):
        """Initialize submitter.

        Args:
            client: Network connection used to send and poll
        """
        self.client = client

    def sign(self, transaction: Transaction, signers: Sequence[Keypair]) -> Transaction:
        """Sign with every keypair the message requires.

        Raises:
            InstructionBuildError: If a required signer has no keypair
        """
        by_pubkey = {signer.pubkey(): signer for signer in signers}
        required = required_signers(transaction)
        missing = [str(pubkey) for pubkey in required if pubkey not in by_pubkey]
        if missing:
            raise InstructionBuildError(f"Missing signers: {', '.join(missing)}")

        transaction.sign(
            [by_pubkey[pubkey] for pubkey in required],
            transaction.message.recent_blockhash,
        )
        return transaction

    async def send(self, transaction: Transaction, options: SubmitOptions) -> Signature:
        """Broadcast a signed transaction once.

        Raises:
            StaleBlockhash: If the node no longer knows the blockhash
            RejectedBySimulation: If preflight simulation fails
            RejectedByNetwork: If the node refuses a transaction sent without preflight
        """
        try:
            return await self.client.send_transaction(
                transaction, skip_preflight=options.skip_preflight
            )
        except RPCException as e:
            detail = str(e)
            logger.error(f"Send rejected: {detail}")
            if _is_stale(detail):
                raise StaleBlockhash(f"Blockhash expired before send: {detail}") from e
            if not options.skip_preflight:
                raise RejectedBySimulation(detail, logs=_simulation_logs(e)) from e
            raise RejectedByNetwork(None, detail=detail) from e

    async def wait_for_confirmation(
        self, transaction: Transaction, signature: Signature, options: SubmitOptions
    ) -> TransactionReceipt:
        """Poll the signature status until it is terminal or the timeout passes.

        Raises:
            StaleBlockhash: If the blockhash expired while the signature is unknown
            RejectedByNetwork: If the ledger reports a failure
            ConfirmationTimeout: If no terminal status arrives in time
        """
        blockhash = transaction.message.recent_blockhash
        target = COMMITMENT_RANK[options.commitment]
        deadline = monotonic() + options.timeout

        while True:
            status = await self.client.get_signature_status(signature)

            if status is None and not await self.client.is_blockhash_valid(blockhash):
                # the transaction may have landed between the two queries
                status = await self.client.get_signature_status(signature)
                if status is None:
                    logger.error(f"Blockhash {blockhash} expired before {signature} landed")
                    raise StaleBlockhash(
                        f"Blockhash {blockhash} expired before the transaction landed",
                        signature=signature,
                    )

            if status is not None and status.err is not None:
                detail = str(status.err)
                if _is_stale(detail):
                    raise StaleBlockhash(detail, signature=signature)
                index, code = _instruction_failure(status.err)
                logger.error(f"Transaction {signature} failed: {detail}")
                raise RejectedByNetwork(
                    signature, instruction_index=index, error_code=code, detail=detail
                )

            if status is not None:
                reached = _status_name(status)
                if COMMITMENT_RANK.get(reached, 0) >= target:
                    logger.info(f"Transaction {signature} reached {reached} at slot {status.slot}")
                    return TransactionReceipt(
                        signature=signature,
                        slot=status.slot,
                        confirmation_status=reached,
                    )

            if monotonic() >= deadline:
                logger.warning(f"Gave up waiting for {signature} after {options.timeout}s")
                raise ConfirmationTimeout(signature, options.timeout)
            await asyncio.sleep(options.poll_interval)

    async def submit(
        self,
        transaction: Transaction,
        signers: Sequence[Keypair],
        options: SubmitOptions | None = None,
    ) -> TransactionReceipt:
        """Sign, send and confirm a transaction.

        Args:
            transaction: Finalized unsigned transaction
            signers: Keypairs covering every required signer
            options: Send and confirmation options

        Returns:
            TransactionReceipt once the target commitment is reached
        """
        options = options or SubmitOptions()
        self.sign(transaction, signers)

        logger.info(f"Sending transaction (skip_preflight={options.skip_preflight})")
        signature = await self.send(transaction, options)
        logger.info(f"Transaction sent: {signature}")

        return await self.wait_for_confirmation(transaction, signature, options)
