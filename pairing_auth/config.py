"""
Pairing-auth configuration
==========================

Defaults for parameter generation, persistence and logging, read from the
environment. Every operation in the package takes explicit arguments; this
module only supplies the values used when a caller leaves them out.
"""

import logging
import os

# Parameter generation
DEFAULT_RBITS = int(os.getenv('PAIRING_RBITS', 512))
DEFAULT_QBITS = int(os.getenv('PAIRING_QBITS', 1024))
DEFAULT_SEED = int(os.getenv('PAIRING_SEED', 1))

# Error probability of each primality test is at most 4^-rounds
DEFAULT_PRIMALITY_ROUNDS = int(os.getenv('PRIMALITY_ROUNDS', 50))
DEFAULT_COFACTOR_ATTEMPTS = int(os.getenv('COFACTOR_ATTEMPTS', 10))

# 0 disables the guard (unbounded search)
DEFAULT_MAX_ITERATIONS = int(os.getenv('SOLINAS_MAX_ITERATIONS', 100000))
DEFAULT_TIMEOUT = float(os.getenv('SOLINAS_TIMEOUT', 0))

# Persistence
DEFAULT_PARAM_DIR = os.getenv('PARAM_DIR', '.')

# Field codec padding byte, as hex
DEFAULT_PAD_BYTE = bytes.fromhex(os.getenv('PAD_BYTE', '00'))

DEFAULT_LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING').upper()


class Config:
    """Configuration holder."""

    def __init__(self):
        self.rbits = DEFAULT_RBITS
        self.qbits = DEFAULT_QBITS
        self.seed = DEFAULT_SEED
        self.primality_rounds = DEFAULT_PRIMALITY_ROUNDS
        self.cofactor_attempts = DEFAULT_COFACTOR_ATTEMPTS
        self.max_iterations = DEFAULT_MAX_ITERATIONS
        self.timeout = DEFAULT_TIMEOUT
        self.param_dir = DEFAULT_PARAM_DIR
        self.pad_byte = DEFAULT_PAD_BYTE
        self.log_level = DEFAULT_LOG_LEVEL

        if len(self.pad_byte) != 1:
            raise ValueError(f"PAD_BYTE must be exactly one byte, got {self.pad_byte!r}")

    @property
    def max_iterations_or_none(self):
        return self.max_iterations if self.max_iterations > 0 else None

    @property
    def timeout_or_none(self):
        return self.timeout if self.timeout > 0 else None


def configure_logging(level: str = None):
    """Attach a basic handler to the package logger."""
    logger = logging.getLogger('pairing_auth')
    logger.setLevel(level or config.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(name)s %(levelname)s %(message)s'))
        logger.addHandler(handler)
    return logger


# Global configuration instance
config = Config()
