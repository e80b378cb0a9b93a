"""
Decryption authorization protocol

Revealing a ciphertext to its owner takes four engine/wallet round trips:

1. generate a fresh ephemeral keypair,
2. have the engine build an EIP-712 authorization binding that keypair to a
   validity window and a contract set,
3. have the user's wallet sign the authorization,
4. submit the signed request to the engine's user-decrypt operation.

The start timestamp and duration are captured once in an AuthorizationWindow
and the same values go to both the EIP-712 construction and the submission;
the gateway rejects any mismatch. Keypairs live only inside one call.
"""
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

from web3 import Web3

from fhevmsdk.common.amounts import to_hex
from fhevmsdk.common.errors import DecryptionError, NotReadyError, SignatureRejectedError, WalletUnavailableError
from fhevmsdk.common.logging_config import LoggedOperation, MetricsCollector
from fhevmsdk.client.types import (
    DEFAULT_DURATION_DAYS,
    USER_DECRYPT_PRIMARY_TYPE,
    AuthorizationWindow,
    FhevmInstance,
    Keypair,
    Signer,
)
from fhevmsdk.runtime.loader import maybe_await

logger = logging.getLogger(__name__)


def build_signing_domain(domain: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy the engine's EIP-712 domain, checksumming verifyingContract"""
    return {
        "name": domain["name"],
        "version": domain["version"],
        "chainId": domain["chainId"],
        "verifyingContract": Web3.to_checksum_address(domain["verifyingContract"]),
    }


def strip_signature_prefix(signature: Any) -> str:
    """Bare hex payload of a wallet signature"""
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature).hex()
    if signature.startswith(("0x", "0X")):
        return signature[2:]
    return signature


def _plaintext_for(result: Any, handle: str) -> int:
    """Pick the decrypted value for a handle out of the engine result"""
    if not isinstance(result, Mapping):
        return int(result)
    if handle in result:
        return int(result[handle])
    wanted = handle.lower()
    for key, value in result.items():
        if isinstance(key, str) and key.lower() == wanted:
            return int(value)
    raise KeyError(f"handle {handle} missing from user-decrypt result")


async def decrypt_for_user(
    instance: Optional[FhevmInstance],
    ciphertext_handle: Union[str, bytes],
    contract_address: str,
    signer: Optional[Signer],
    clock: Callable[[], float] = time.time,
    duration_days: int = DEFAULT_DURATION_DAYS,
    metrics: Optional[MetricsCollector] = None
) -> int:
    """Decrypt a ciphertext handle for the signer's account

    Args:
        instance: Live engine instance
        ciphertext_handle: Handle of the encrypted value, as a 0x hex string
            or raw bytes (e.g. EncryptedValue.handle or a bytes32 read from chain)
        contract_address: Contract holding the ciphertext
        signer: Wallet signer of the user requesting the plaintext
        clock: Source of the authorization start time (seconds)
        duration_days: Validity of the signed authorization

    Returns:
        The decrypted value

    Raises:
        NotReadyError: No engine instance
        WalletUnavailableError: No signer, or a signer without an address
        SignatureRejectedError: The wallet declined or failed to sign
        DecryptionError: The engine or gateway rejected the request
    """
    if instance is None:
        raise NotReadyError("FHEVM client is not ready")
    if signer is None:
        raise WalletUnavailableError("Wallet signer not available")

    user_address = getattr(signer, "address", None)
    if not user_address:
        raise WalletUnavailableError("Wallet signer has no account address")

    if isinstance(ciphertext_handle, (bytes, bytearray)):
        ciphertext_handle = to_hex(ciphertext_handle)

    with LoggedOperation(
        logger,
        "user_decrypt",
        metrics=metrics,
        handle=str(ciphertext_handle)[:10] + "...",
        contract=str(contract_address)[:10] + "...",
        user=user_address[:10] + "..."
    ):
        try:
            keypair = Keypair.from_engine(await maybe_await(instance.generate_keypair()))
        except Exception as e:
            raise DecryptionError(f"Keypair generation failed: {e}") from e

        handle_contract_pairs = [
            {"handle": ciphertext_handle, "contractAddress": contract_address},
        ]
        window = AuthorizationWindow(
            start_timestamp=int(clock()),
            duration_days=duration_days,
            contract_addresses=(contract_address,),
        )
        contract_addresses = list(window.contract_addresses)

        try:
            eip712 = await maybe_await(instance.create_eip712(
                keypair.public_key,
                contract_addresses,
                window.start_timestamp,
                window.duration_days,
            ))
            domain = build_signing_domain(eip712["domain"])
        except Exception as e:
            raise DecryptionError(f"EIP-712 construction failed: {e}") from e

        try:
            signature = await signer.sign_typed_data(
                domain=domain,
                types=eip712["types"],
                primary_type=USER_DECRYPT_PRIMARY_TYPE,
                message=eip712["message"],
                account=user_address,
            )
        except Exception as e:
            raise SignatureRejectedError(
                f"Signature request rejected: {e}",
                details={"user_address": user_address}
            ) from e

        try:
            result = await maybe_await(instance.user_decrypt(
                handle_contract_pairs,
                keypair.private_key,
                keypair.public_key,
                strip_signature_prefix(signature),
                contract_addresses,
                user_address,
                window.start_timestamp,
                window.duration_days,
            ))
            return _plaintext_for(result, ciphertext_handle)
        except Exception as e:
            raise DecryptionError(
                str(e) or "User decrypt failed",
                details={"contract_address": contract_address}
            ) from e
