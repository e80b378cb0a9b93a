"""
FHEVM client: factory, lifecycle, encryption and decryption
"""
from .decrypt import decrypt_for_user
from .encrypt import (
    encrypt_uint8,
    encrypt_uint16,
    encrypt_uint32,
    encrypt_uint64,
    encrypt_uint128,
    encrypt_uint256,
    encrypt_value,
)
from .factory import ClientFacade, ClientFactory, ClientOptions, EncryptNamespace, create_client, get_factory
from .lifecycle import ClientLifecycle, LifecycleSnapshot, LifecycleState, get_lifecycle, set_lifecycle
from .signers import Eip1193Signer, LocalAccountSigner
from .types import (
    DEFAULT_DURATION_DAYS,
    SUPPORTED_WIDTHS,
    USER_DECRYPT_PRIMARY_TYPE,
    AuthorizationWindow,
    EncryptedValue,
    FhevmInstance,
    Keypair,
    Signer,
)

__all__ = [
    'decrypt_for_user',
    'encrypt_uint8',
    'encrypt_uint16',
    'encrypt_uint32',
    'encrypt_uint64',
    'encrypt_uint128',
    'encrypt_uint256',
    'encrypt_value',
    'ClientFacade',
    'ClientFactory',
    'ClientOptions',
    'EncryptNamespace',
    'create_client',
    'get_factory',
    'ClientLifecycle',
    'LifecycleSnapshot',
    'LifecycleState',
    'get_lifecycle',
    'set_lifecycle',
    'Eip1193Signer',
    'LocalAccountSigner',
    'DEFAULT_DURATION_DAYS',
    'SUPPORTED_WIDTHS',
    'USER_DECRYPT_PRIMARY_TYPE',
    'AuthorizationWindow',
    'EncryptedValue',
    'FhevmInstance',
    'Keypair',
    'Signer',
]
