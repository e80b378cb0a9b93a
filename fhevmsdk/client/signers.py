"""
Wallet signer adapters

LocalAccountSigner signs with a private key held in process (headless use).
Eip1193Signer forwards to an injected browser wallet.
"""
import json
import logging
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

logger = logging.getLogger(__name__)


def build_typed_data(
    domain: Dict[str, Any],
    types: Dict[str, Any],
    primary_type: str,
    message: Dict[str, Any]
) -> Dict[str, Any]:
    """Assemble the full EIP-712 payload"""
    return {
        "domain": domain,
        "types": types,
        "primaryType": primary_type,
        "message": message,
    }


class LocalAccountSigner:
    """Signer backed by an eth_account LocalAccount"""

    def __init__(self, account: LocalAccount):
        self.account = account
        self.address = account.address

    @classmethod
    def from_key(cls, private_key: str) -> "LocalAccountSigner":
        """Create a signer from a hex private key (0x prefix optional)"""
        try:
            if private_key.startswith("0x"):
                private_key = private_key[2:]
            account = Account.from_key(private_key)
        except Exception as e:
            raise ValueError(f"Invalid private key: {str(e)}") from e
        logger.info(f"Account configured: {account.address}")
        return cls(account)

    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, Any],
        primary_type: str,
        message: Dict[str, Any],
        account: Optional[str] = None
    ) -> str:
        if account is not None and account.lower() != self.address.lower():
            raise ValueError(f"Signer {self.address} cannot sign for {account}")

        signed = self.account.sign_typed_data(
            full_message=build_typed_data(domain, types, primary_type, message)
        )
        return Web3.to_hex(signed.signature)


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class Eip1193Signer:
    """Signer that forwards eth_signTypedData_v4 to an EIP-1193 provider

    The provider only needs an awaitable ``request({"method", "params"})``.
    """

    def __init__(self, provider: Any, address: str):
        self.provider = provider
        self.address = Web3.to_checksum_address(address)

    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, Any],
        primary_type: str,
        message: Dict[str, Any],
        account: Optional[str] = None
    ) -> str:
        payload = json.dumps(
            build_typed_data(domain, types, primary_type, message),
            default=_json_default
        )
        return await self.provider.request({
            "method": "eth_signTypedData_v4",
            "params": [account or self.address, payload],
        })
