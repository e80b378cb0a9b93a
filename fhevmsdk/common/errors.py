"""
Typed error taxonomy for the FHEVM client
Every failure surfaced by the core carries a closed ErrorKind so callers can
branch on the category instead of parsing messages
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories"""
    RUNTIME_UNAVAILABLE = "runtime_unavailable"
    ACTIVATION_FAILED = "activation_failed"
    UNKNOWN_NETWORK = "unknown_network"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    PROVIDER_REQUIRED = "provider_required"
    INSTANCE_CREATION_FAILED = "instance_creation_failed"
    ENCRYPTION_FAILED = "encryption_failed"
    NOT_READY = "not_ready"
    WALLET_UNAVAILABLE = "wallet_unavailable"
    SIGNATURE_REJECTED = "signature_rejected"
    DECRYPTION_FAILED = "decryption_failed"


class FhevmError(Exception):
    """Base exception for FHEVM client operations"""
    kind: ErrorKind

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class RuntimeUnavailableError(FhevmError):
    """Raised when the FHE engine module cannot be located"""
    kind = ErrorKind.RUNTIME_UNAVAILABLE


class ActivationError(FhevmError):
    """Raised when the explicit engine activation call fails"""
    kind = ErrorKind.ACTIVATION_FAILED


class UnknownNetworkError(FhevmError):
    """Raised for symbolic network names with no built-in configuration"""
    kind = ErrorKind.UNKNOWN_NETWORK


class ProviderUnavailableError(FhevmError):
    """Raised when no injected wallet provider is found in an interactive environment"""
    kind = ErrorKind.PROVIDER_UNAVAILABLE


class ProviderRequiredError(FhevmError):
    """Raised when a headless environment is not given an explicit provider"""
    kind = ErrorKind.PROVIDER_REQUIRED


class InstanceCreationError(FhevmError):
    """Raised when the engine fails to build a live instance"""
    kind = ErrorKind.INSTANCE_CREATION_FAILED


class EncryptionError(FhevmError):
    """Raised when the engine rejects or fails an encryption"""
    kind = ErrorKind.ENCRYPTION_FAILED


class NotReadyError(FhevmError):
    """Raised when an operation needs a client that is not constructed"""
    kind = ErrorKind.NOT_READY


class WalletUnavailableError(FhevmError):
    """Raised when no signer is available for an authorization"""
    kind = ErrorKind.WALLET_UNAVAILABLE


class SignatureRejectedError(FhevmError):
    """Raised when the signer declines or fails the typed-data request"""
    kind = ErrorKind.SIGNATURE_REJECTED


class DecryptionError(FhevmError):
    """Raised when the engine or gateway rejects a user-decrypt request"""
    kind = ErrorKind.DECRYPTION_FAILED
