"""Decode raw program log lines into per-instruction log groups."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

STYLE_MUTED = "muted"
STYLE_INFO = "info"
STYLE_SUCCESS = "success"
STYLE_ERROR = "error"

INDENT = "\u00a0\u00a0"

_INVOKE_RE = re.compile(r"^Program (\w*) invoke \[(\d+)\]")
_CONSUMED_RE = re.compile(r"Program \w* consumed (\d*) (.*)")
_PROGRAM_LOG_PREFIX = "Program log:"
_TRUNCATED_PREFIX = "Log truncated"

INSTRUCTION_ERROR_MESSAGES = {
    "GenericError": "generic instruction error",
    "InvalidArgument": "invalid program argument",
    "InvalidInstructionData": "invalid instruction data",
    "InvalidAccountData": "invalid account data for instruction",
    "AccountDataTooSmall": "account data too small for instruction",
    "InsufficientFunds": "insufficient funds for instruction",
    "IncorrectProgramId": "incorrect program id for instruction",
    "MissingRequiredSignature": "missing required signature for instruction",
    "AccountAlreadyInitialized": "instruction requires an uninitialized account",
    "UninitializedAccount": "instruction requires an initialized account",
    "UnbalancedInstruction": "sum of account balances before and after instruction do not match",
    "ModifiedProgramId": "instruction modified the program id of an account",
    "ExternalAccountLamportSpend": "instruction spent from the balance of an account it does not own",
    "ExternalAccountDataModified": "instruction modified data of an account it does not own",
    "ReadonlyLamportChange": "instruction changed the balance of a read-only account",
    "ReadonlyDataModified": "instruction modified data of a read-only account",
    "DuplicateAccountIndex": "instruction contains duplicate accounts",
    "ExecutableModified": "instruction changed executable bit of an account",
    "RentEpochModified": "instruction modified rent epoch of an account",
    "NotEnoughAccountKeys": "insufficient account keys for instruction",
    "AccountDataSizeChanged": "non-system instruction changed account size",
    "AccountNotExecutable": "instruction expected an executable account",
    "AccountBorrowFailed": "instruction tries to borrow reference for an account which is already borrowed",
    "AccountBorrowOutstanding": "instruction left account with an outstanding borrowed reference",
    "DuplicateAccountOutOfSync": "instruction modifications of multiply-passed account differ",
    "InvalidError": "program returned invalid error code",
    "ExecutableDataModified": "instruction changed executable accounts data",
    "ExecutableLamportChange": "instruction changed the balance of a executable account",
    "ExecutableAccountNotRentExempt": "executable accounts must be rent exempt",
    "UnsupportedProgramId": "Unsupported program id",
    "CallDepth": "Cross-program invocation call depth too deep",
    "MissingAccount": "An account required by the instruction is missing",
    "ReentrancyNotAllowed": "Cross-program invocation reentrancy not allowed for this instruction",
    "MaxSeedLengthExceeded": "Length of the seed is too long for address generation",
    "InvalidSeeds": "Provided seeds do not result in a valid address",
    "InvalidRealloc": "Failed to reallocate account data of this length",
    "ComputationalBudgetExceeded": "Computational budget exceeded",
    "PrivilegeEscalation": "Cross-program invocation with unauthorized signer or writable account",
    "ProgramEnvironmentSetupFailure": "Failed to create program execution environment",
    "ProgramFailedToComplete": "Program failed to complete",
    "ProgramFailedToCompile": "Program failed to compile",
    "Immutable": "Account is immutable",
    "IncorrectAuthority": "Incorrect authority provided",
    "BorshIoError": "Failed to serialize or deserialize account data",
    "AccountNotRentExempt": "An account does not have enough lamports to be rent-exempt",
    "InvalidAccountOwner": "Invalid account owner",
    "ArithmeticOverflow": "Program arithmetic overflowed",
    "UnsupportedSysvar": "Unsupported sysvar",
    "IllegalOwner": "Provided owner is not allowed",
    "MaxAccountsDataAllocationsExceeded": "Accounts data allocations exceeded the maximum allowed per transaction",
    "MaxAccountsDataSizeExceeded": "Max accounts data size exceeded",
    "MaxInstructionTraceLengthExceeded": "Max instruction trace length exceeded",
    "BuiltinProgramsMustConsumeComputeUnits": "Builtin programs must consume compute units",
}


@dataclass
class LogLine:
    text: str
    prefix: str
    style: str


@dataclass
class InstructionLogs:
    invoked_program: Optional[str]
    logs: List[LogLine] = field(default_factory=list)
    compute_units: int = 0
    truncated: bool = False
    failed: bool = False


@dataclass(frozen=True)
class InstructionError:
    index: int
    message: str


def _prefix(depth: int) -> str:
    return INDENT * max(depth - 1, 0) + "> "


def instruction_error_message(kind: Any) -> str:
    """Render the error part of an `InstructionError` tuple."""
    if isinstance(kind, dict):
        if "Custom" in kind:
            return f"custom program error: {kind['Custom']}"
        if "BorshIoError" in kind:
            return f"{INSTRUCTION_ERROR_MESSAGES['BorshIoError']}: {kind['BorshIoError']}"
        name = next(iter(kind), None)
        return INSTRUCTION_ERROR_MESSAGES.get(name, "Unknown instruction error")
    if isinstance(kind, str):
        return INSTRUCTION_ERROR_MESSAGES.get(kind, "Unknown instruction error")
    return "Unknown instruction error"


def decode_instruction_error(err: Any) -> Optional[InstructionError]:
    """Extract the failing instruction index and message from a transaction error."""
    if not isinstance(err, dict):
        return None
    detail = err.get("InstructionError")
    if not isinstance(detail, (list, tuple)) or len(detail) != 2:
        return None
    index, kind = detail
    if not isinstance(index, int):
        return None
    return InstructionError(index=index, message=instruction_error_message(kind))


def describe_transaction_error(err: Any) -> str:
    decoded = decode_instruction_error(err)
    if decoded is not None:
        return f"Instruction #{decoded.index + 1} failed: {decoded.message}"
    if isinstance(err, str):
        return err
    if isinstance(err, dict) and len(err) == 1:
        name, value = next(iter(err.items()))
        return f"{name}: {value}"
    return str(err)


def parse_program_logs(logs: Iterable[str], error: Any = None) -> List[InstructionLogs]:
    depth = 0
    groups: List[InstructionLogs] = []

    def current() -> InstructionLogs:
        if not groups:
            groups.append(InstructionLogs(invoked_program=None))
        return groups[-1]

    for log in logs:
        if log.startswith(_PROGRAM_LOG_PREFIX):
            message = log[len(_PROGRAM_LOG_PREFIX):].lstrip(" ")
            current().logs.append(LogLine(f'Program logged: "{message}"', _prefix(depth), STYLE_MUTED))
            continue
        if log.startswith(_TRUNCATED_PREFIX):
            current().truncated = True
            continue

        invoke = _INVOKE_RE.match(log)
        if invoke:
            program = invoke.group(1)
            if depth == 0:
                groups.append(InstructionLogs(invoked_program=program))
            else:
                current().logs.append(LogLine(f"Program invoked: {program}", _prefix(depth), STYLE_INFO))
            depth += 1
        elif "success" in log:
            current().logs.append(LogLine("Program returned success", _prefix(depth), STYLE_SUCCESS))
            depth -= 1
        elif "failed" in log:
            group = current()
            group.failed = True
            if log.startswith("failed"):
                # verification failure of the previous program
                depth += 1
                text = log[0].upper() + log[1:]
            else:
                text = f'Program returned error: "{log[log.find(": ") + 2:]}"'
            group.logs.append(LogLine(text, _prefix(depth), STYLE_ERROR))
            depth -= 1
        else:
            if depth == 0:
                groups.append(InstructionLogs(invoked_program=None))
                depth += 1
            group = groups[-1]
            consumed = _CONSUMED_RE.search(log)
            if consumed:
                if depth == 1:
                    group.compute_units += int(consumed.group(1) or 0)
                log = _CONSUMED_RE.sub(lambda m: f"Program consumed: {m.group(1)} {m.group(2)}", log)
            group.logs.append(LogLine(log, _prefix(depth), STYLE_MUTED))

    decoded = decode_instruction_error(error)
    if error is not None and not groups:
        groups.append(InstructionLogs(invoked_program=None, failed=True))
    if decoded is not None and decoded.index == len(groups) - 1:
        failed_ix = groups[decoded.index]
        if not failed_ix.failed:
            failed_ix.failed = True
            failed_ix.logs.append(LogLine(f"Runtime error: {decoded.message}", _prefix(1), STYLE_ERROR))
    return groups
