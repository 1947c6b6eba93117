"""
Error taxonomy for the minter client.

Every failure raised by the transaction-building core derives from
MinterError so callers can catch the whole family at once.
"""


class MinterError(Exception):
    """Base class for all minter client errors."""


class DerivationFailure(MinterError):
    """Raised when a program-derived address cannot be computed."""


class NoValidBumpFound(DerivationFailure):
    """Raised when every bump candidate lands on the ed25519 curve."""

    def __init__(self, seeds, owner_program):
        self.seeds = list(seeds)
        self.owner_program = owner_program
        super().__init__(
            f"No off-curve bump found for {len(self.seeds)} seeds under {owner_program}"
        )


class BalanceQueryFailure(MinterError):
    """Raised when a balance or rent query fails or returns garbage."""


class InsufficientFunds(MinterError):
    """Raised when the payer cannot cover fees even after an airdrop."""

    def __init__(self, payer, balance: int, required: int):
        self.payer = payer
        self.balance = balance
        self.required = required
        super().__init__(
            f"Payer {payer} holds {balance} lamports, {required} required"
        )


class InstructionBuildError(MinterError):
    """Raised when an instruction references an unresolved account or balance."""


class AccountLayoutMismatch(InstructionBuildError):
    """Raised when an account list deviates from the program's fixed layout."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Account #{index}: {reason}")


class ProgramNotDeployed(MinterError):
    """Raised when the minter program is missing or not executable."""


class SubmissionError(MinterError):
    """Base class for failures while sending or confirming a transaction."""

    def __init__(self, message: str, signature=None):
        self.signature = signature
        super().__init__(message)


class StaleBlockhash(SubmissionError):
    """Raised when the transaction's blockhash has expired."""


class RejectedBySimulation(SubmissionError):
    """Raised when preflight simulation rejects the transaction."""

    def __init__(self, message: str, logs: list[str] | None = None):
        self.logs = logs or []
        super().__init__(message)


class RejectedByNetwork(SubmissionError):
    """Raised when the ledger reports an instruction-level failure."""

    def __init__(
        self,
        signature,
        instruction_index: int | None = None,
        error_code: int | None = None,
        detail: str | None = None,
    ):
        self.instruction_index = instruction_index
        self.error_code = error_code
        self.detail = detail
        super().__init__(
            f"Transaction {signature} failed at instruction {instruction_index} "
            f"(code {error_code}): {detail}",
            signature=signature,
        )


class ConfirmationTimeout(SubmissionError):
    """Raised when the transaction status is still unknown after the wait window."""

    def __init__(self, signature, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"Transaction {signature} not confirmed within {timeout}s, re-query its status",
            signature=signature,
        )
