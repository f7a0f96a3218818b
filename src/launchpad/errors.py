"""Launchpad error taxonomy.

Every error aborts the instruction before any state is committed.
``code`` is stable and matches the program's on-chain error names.
"""


class LaunchpadError(Exception):
    code = "LaunchpadError"
    message = "Launchpad error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        text = f"{self.message}: {detail}" if detail else self.message
        super().__init__(text)


# Math


class MathError(LaunchpadError):
    pass


class MathOverflowError(MathError):
    code = "Overflow"
    message = "Math overflow"


class DivisionByZeroError(MathError):
    code = "DivisionByZero"
    message = "Division by zero"


# Trade


class TradeError(LaunchpadError):
    pass


class SlippageExceededError(TradeError):
    code = "SlippageExceeded"
    message = "Slippage exceeded"


class CurveCompletedError(TradeError):
    code = "CurveCompleted"
    message = "Bonding curve already completed"


class ZeroAmountError(TradeError):
    code = "ZeroAmount"
    message = "Amount must be greater than zero"


class TradePausedError(TradeError):
    code = "ProgramPaused"
    message = "Program paused"


class NotEnoughTokensError(TradeError):
    code = "NotEnoughTokens"
    message = "Not enough tokens available"


class InsufficientReservesError(TradeError):
    code = "InsufficientReserves"
    message = "Not enough SOL in curve reserves"


class CurveNotCompletedError(TradeError):
    code = "CurveNotCompleted"
    message = "Bonding curve has not completed"


class AlreadyMigratedError(TradeError):
    code = "AlreadyMigrated"
    message = "Bonding curve already migrated"


# Admin


class AdminError(LaunchpadError):
    pass


class NotEnoughLamportsError(AdminError):
    code = "NotEnoughLamports"
    message = "Not enough lamports to withdraw"


class AdminPausedError(AdminError):
    code = "ProgramPaused"
    message = "Program paused"


class UnauthorizedError(AdminError):
    code = "Unauthorized"
    message = "Signer is not allowed to perform this action"


class InvalidConfigError(AdminError):
    code = "InvalidConfig"
    message = "Invalid configuration"


# Accounts (storage collaborator)


class AccountError(LaunchpadError):
    pass


class AccountAlreadyExistsError(AccountError):
    code = "AccountAlreadyInUse"
    message = "Account already in use"


class AccountNotFoundError(AccountError):
    code = "AccountNotFound"
    message = "Account not found"
