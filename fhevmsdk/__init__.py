"""
fhevmsdk - client toolkit for confidential smart contracts

Loads the external FHE engine for the current environment, encrypts typed
unsigned integers into handle/proof pairs, and decrypts handles for their
owner through a signed EIP-712 authorization.
"""
from fhevmsdk.client import (
    AuthorizationWindow,
    ClientFacade,
    ClientFactory,
    ClientLifecycle,
    ClientOptions,
    Eip1193Signer,
    EncryptedValue,
    Keypair,
    LifecycleSnapshot,
    LifecycleState,
    LocalAccountSigner,
    create_client,
    decrypt_for_user,
    encrypt_uint8,
    encrypt_uint16,
    encrypt_uint32,
    encrypt_uint64,
    encrypt_uint128,
    encrypt_uint256,
    get_lifecycle,
)
from fhevmsdk.common import ErrorKind, FhevmError, format_token_amount, parse_token_amount, to_hex
from fhevmsdk.runtime import NetworkConfig, init_runtime, is_browser, resolve_network

__version__ = "0.1.0"

__all__ = [
    'AuthorizationWindow',
    'ClientFacade',
    'ClientFactory',
    'ClientLifecycle',
    'ClientOptions',
    'Eip1193Signer',
    'EncryptedValue',
    'Keypair',
    'LifecycleSnapshot',
    'LifecycleState',
    'LocalAccountSigner',
    'create_client',
    'decrypt_for_user',
    'encrypt_uint8',
    'encrypt_uint16',
    'encrypt_uint32',
    'encrypt_uint64',
    'encrypt_uint128',
    'encrypt_uint256',
    'get_lifecycle',
    'ErrorKind',
    'FhevmError',
    'format_token_amount',
    'parse_token_amount',
    'to_hex',
    'NetworkConfig',
    'init_runtime',
    'is_browser',
    'resolve_network',
]
