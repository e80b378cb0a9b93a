"""
Data types and structural interfaces at the engine and wallet boundaries

The engine and the signer are external collaborators. Only the members the
client actually calls are declared here; everything else they carry is passed
through untouched.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from fhevmsdk.common.amounts import from_hex, to_hex

SUPPORTED_WIDTHS: Tuple[int, ...] = (8, 16, 32, 64, 128, 256)

# Policy constant: a signed decrypt authorization stays valid this long
DEFAULT_DURATION_DAYS = 10

USER_DECRYPT_PRIMARY_TYPE = "UserDecryptRequestVerification"


class EncryptedInput(Protocol):
    """Builder returned by FhevmInstance.create_encrypted_input"""

    def encrypt(self) -> Any: ...


class FhevmInstance(Protocol):
    """Live engine instance (the runtime handle)"""

    def create_encrypted_input(self, contract_address: str, user_address: str) -> EncryptedInput: ...

    def generate_keypair(self) -> Any: ...

    def create_eip712(
        self,
        public_key: Any,
        contract_addresses: List[str],
        start_timestamp: int,
        duration_days: int
    ) -> Mapping[str, Any]: ...

    def user_decrypt(
        self,
        handle_contract_pairs: List[Dict[str, Any]],
        private_key: Any,
        public_key: Any,
        signature: str,
        contract_addresses: List[str],
        user_address: str,
        start_timestamp: int,
        duration_days: int
    ) -> Any: ...


@runtime_checkable
class Signer(Protocol):
    """Wallet collaborator able to sign EIP-712 typed data"""

    address: str

    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, Any],
        primary_type: str,
        message: Dict[str, Any],
        account: Optional[str] = None
    ) -> str: ...


def _pick(raw: Any, *names: str) -> Any:
    """Read the first present key or attribute among names"""
    for name in names:
        if isinstance(raw, Mapping):
            if name in raw:
                return raw[name]
        elif hasattr(raw, name):
            return getattr(raw, name)
    raise KeyError(f"none of {names} present in engine result")


@dataclass(frozen=True)
class EncryptedValue:
    """Ciphertext handle plus its proof of well-formedness"""
    handle: bytes
    proof: bytes

    @classmethod
    def from_engine(cls, raw: Any) -> "EncryptedValue":
        handles = _pick(raw, "handles")
        if not handles:
            raise ValueError("engine returned no ciphertext handles")
        proof = _pick(raw, "inputProof", "input_proof")
        return cls(handle=from_hex(handles[0]), proof=from_hex(proof))

    @property
    def handle_hex(self) -> str:
        return to_hex(self.handle)

    @property
    def proof_hex(self) -> str:
        return to_hex(self.proof)


@dataclass(frozen=True)
class Keypair:
    """Ephemeral keypair scoping a single decrypt authorization"""
    public_key: Any
    private_key: Any = field(repr=False)

    @classmethod
    def from_engine(cls, raw: Any) -> "Keypair":
        return cls(
            public_key=_pick(raw, "publicKey", "public_key"),
            private_key=_pick(raw, "privateKey", "private_key"),
        )


@dataclass(frozen=True)
class AuthorizationWindow:
    """Time span and contract scope of one decrypt authorization"""
    start_timestamp: int
    duration_days: int
    contract_addresses: Tuple[str, ...]

    def __post_init__(self):
        if not self.contract_addresses:
            raise ValueError("authorization window needs at least one contract address")
        if self.duration_days <= 0:
            raise ValueError(f"duration_days must be positive, got {self.duration_days}")

    @property
    def expires_at(self) -> int:
        return self.start_timestamp + self.duration_days * 86400
