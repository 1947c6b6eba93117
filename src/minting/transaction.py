"""
Assembles the mint instructions into one unsigned transaction.
"""

from solders.hash import Hash
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from core.errors import InstructionBuildError
from utils.logger import get_logger

logger = get_logger(__name__)


class TransactionAssembler:
    """Collects instructions in append order and finalizes them once.

    The cluster runs instructions strictly in list order and later ones rely
    on accounts created by earlier ones, so append order is never changed.
    """

    def __init__(self, fee_payer: Pubkey):
        """Initialize an empty assembler.

        Args:
            fee_payer: Account paying the transaction fee (first signer)
        """
        self.fee_payer = fee_payer
        self._instructions: list[Instruction] = []
        self._finalized = False

    def append(self, instruction: Instruction) -> "TransactionAssembler":
        if self._finalized:
            raise InstructionBuildError("Cannot append to a finalized transaction")
        self._instructions.append(instruction)
        return self

    def extend(self, instructions: list[Instruction]) -> "TransactionAssembler":
        for instruction in instructions:
            self.append(instruction)
        return self

    @property
    def instructions(self) -> list[Instruction]:
        return list(self._instructions)

    def finalize(self, recent_blockhash: Hash) -> Transaction:
        """Attach the blockhash and produce the unsigned transaction.

        Args:
            recent_blockhash: Blockhash fetched just before finalizing

        Returns:
            Unsigned transaction

        Raises:
            InstructionBuildError: If empty or already finalized
        """
        if self._finalized:
            raise InstructionBuildError("Transaction already finalized")
        if not self._instructions:
            raise InstructionBuildError("Transaction has no instructions")

        message = Message.new_with_blockhash(
            self._instructions, self.fee_payer, recent_blockhash
        )
        self._finalized = True
        logger.info(
            f"Assembled transaction with {len(self._instructions)} instructions, "
            f"blockhash {recent_blockhash}"
        )
        return Transaction.new_unsigned(message)


def required_signers(transaction: Transaction) -> list[Pubkey]:
    """Accounts whose signatures the transaction requires, fee payer first."""
    message = transaction.message
    return list(message.account_keys[: message.header.num_required_signatures])
