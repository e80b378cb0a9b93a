"""
Shared utilities: error taxonomy, amount codec, logging and metrics
"""
from .amounts import format_token_amount, from_hex, parse_token_amount, to_hex
from .errors import (
    ActivationError,
    DecryptionError,
    EncryptionError,
    ErrorKind,
    FhevmError,
    InstanceCreationError,
    NotReadyError,
    ProviderRequiredError,
    ProviderUnavailableError,
    RuntimeUnavailableError,
    SignatureRejectedError,
    UnknownNetworkError,
    WalletUnavailableError,
)

__all__ = [
    'format_token_amount',
    'from_hex',
    'parse_token_amount',
    'to_hex',
    'ActivationError',
    'DecryptionError',
    'EncryptionError',
    'ErrorKind',
    'FhevmError',
    'InstanceCreationError',
    'NotReadyError',
    'ProviderRequiredError',
    'ProviderUnavailableError',
    'RuntimeUnavailableError',
    'SignatureRejectedError',
    'UnknownNetworkError',
    'WalletUnavailableError',
]
