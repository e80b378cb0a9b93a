"""
Typed encryption pipeline

Each call builds an encrypted input scoped to one (contract, user) pair,
attaches exactly one value, and finalizes it into a handle and a proof.
Range checks belong to the engine; values are passed through unmodified.
"""
import logging
from typing import Optional

from fhevmsdk.common.errors import EncryptionError
from fhevmsdk.common.logging_config import LoggedOperation, MetricsCollector
from fhevmsdk.client.types import SUPPORTED_WIDTHS, EncryptedValue, FhevmInstance
from fhevmsdk.runtime.loader import maybe_await

logger = logging.getLogger(__name__)


async def encrypt_value(
    instance: FhevmInstance,
    width: int,
    value: int,
    contract_address: str,
    user_address: str,
    metrics: Optional[MetricsCollector] = None
) -> EncryptedValue:
    """Encrypt one unsigned integer of the given bit width

    Args:
        instance: Live engine instance
        width: Bit width, one of 8, 16, 32, 64, 128, 256
        value: Plain value
        contract_address: Contract the ciphertext is bound to
        user_address: Account allowed to use the ciphertext

    Returns:
        EncryptedValue with the first (and only) handle and the input proof

    Raises:
        ValueError: For an unsupported width
        EncryptionError: If the engine fails at any step
    """
    if width not in SUPPORTED_WIDTHS:
        raise ValueError(f"Unsupported width {width}; expected one of {SUPPORTED_WIDTHS}")

    with LoggedOperation(
        logger,
        f"encrypt_uint{width}",
        metrics=metrics,
        contract=str(contract_address)[:10] + "...",
        user=str(user_address)[:10] + "..."
    ):
        try:
            encrypted_input = await maybe_await(
                instance.create_encrypted_input(contract_address, user_address)
            )
            getattr(encrypted_input, f"add{width}")(value)
            result = await maybe_await(encrypted_input.encrypt())
            return EncryptedValue.from_engine(result)
        except Exception as e:
            raise EncryptionError(
                str(e) or f"Failed to encrypt uint{width}",
                details={"width": width, "contract_address": contract_address}
            ) from e


async def encrypt_uint8(instance: FhevmInstance, value: int, contract_address: str,
                        user_address: str) -> EncryptedValue:
    """Encrypt an 8-bit unsigned integer"""
    return await encrypt_value(instance, 8, value, contract_address, user_address)


async def encrypt_uint16(instance: FhevmInstance, value: int, contract_address: str,
                         user_address: str) -> EncryptedValue:
    """Encrypt a 16-bit unsigned integer"""
    return await encrypt_value(instance, 16, value, contract_address, user_address)


async def encrypt_uint32(instance: FhevmInstance, value: int, contract_address: str,
                         user_address: str) -> EncryptedValue:
    """Encrypt a 32-bit unsigned integer"""
    return await encrypt_value(instance, 32, value, contract_address, user_address)


async def encrypt_uint64(instance: FhevmInstance, value: int, contract_address: str,
                         user_address: str) -> EncryptedValue:
    """Encrypt a 64-bit unsigned integer"""
    return await encrypt_value(instance, 64, value, contract_address, user_address)


async def encrypt_uint128(instance: FhevmInstance, value: int, contract_address: str,
                          user_address: str) -> EncryptedValue:
    """Encrypt a 128-bit unsigned integer"""
    return await encrypt_value(instance, 128, value, contract_address, user_address)


async def encrypt_uint256(instance: FhevmInstance, value: int, contract_address: str,
                          user_address: str) -> EncryptedValue:
    """Encrypt a 256-bit unsigned integer"""
    return await encrypt_value(instance, 256, value, contract_address, user_address)
