"""
Error Taxonomy
==============

All errors raised by the package derive from ``PairingAuthError`` so callers
can catch the whole family at once. Errors raised by the pairing engine
(charm-crypto) are not wrapped and propagate unchanged.
"""


class PairingAuthError(Exception):
    """Base class for all pairing-auth errors."""


class MessageTooLong(PairingAuthError, ValueError):
    """The plaintext does not fit into the scalar field."""

    def __init__(self, length_bits: int, capacity_bits: int):
        self.length_bits = length_bits
        self.capacity_bits = capacity_bits
        super().__init__(
            f"message of {length_bits} bits exceeds field capacity of {capacity_bits} bits"
        )


class ParameterSearchExhausted(PairingAuthError):
    """The Solinas search did not converge within the iteration bound."""

    def __init__(self, iterations: int, message: str = None):
        self.iterations = iterations
        super().__init__(message or f"no Solinas parameters found after {iterations} iterations")


class ParameterSearchTimeout(ParameterSearchExhausted):
    """The Solinas search ran past its wall-clock bound."""

    def __init__(self, iterations: int, elapsed: float):
        self.elapsed = elapsed
        super().__init__(
            iterations,
            f"Solinas search timed out after {elapsed:.2f}s ({iterations} iterations)",
        )


class MalformedParameterBlock(PairingAuthError, ValueError):
    """A parameter block could not be parsed."""


class ProtocolVerificationFailure(PairingAuthError):
    """
    A terminal check of the authentication protocol failed.

    ``check`` names the first failing check; ``report`` carries the outcome
    of every check so the caller can see all broken invariants.
    """

    def __init__(self, check: str, report=None):
        self.check = check
        self.report = report
        failed = report.failures() if report is not None else [check]
        super().__init__(f"protocol verification failed: {', '.join(failed)}")
