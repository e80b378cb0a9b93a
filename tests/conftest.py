"""
Shared fixtures: an in-memory stand-in for the FHE engine and wallet signers
"""

import hashlib
import os
import sys
import types
from typing import Any, Dict, List, Optional

import pytest
from web3 import Web3

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fhevmsdk.client import ClientFacade, EncryptNamespace
from fhevmsdk.common.logging_config import MetricsCollector
from fhevmsdk.config import reset_settings


CONTRACT_ADDRESS = Web3.to_checksum_address("0x" + "12" * 20)
USER_ADDRESS = Web3.to_checksum_address("0x" + "34" * 20)

SEPOLIA_CONFIG = {
    "aclContractAddress": "0x687820221192C5B662b25367F70076A37bc79b6c",
    "kmsContractAddress": "0x1364cBBf2cDF5032C47d8226a6f6FBD2AFCDacAC",
    "inputVerifierContractAddress": "0xbc91f3daD1A5F19F8390c400196e58073B6a0BC4",
    "verifyingContractAddressDecryption": "0xb6E160B1ff80D67Bfe90A85eE06Ce0A2613607D1",
    "verifyingContractAddressInputVerification": "0x7048C39f048125eDa9d678AEbaDfB22F7900a29F",
    "chainId": 11155111,
    "gatewayChainId": 55815,
    "relayerUrl": "https://relayer.testnet.zama.cloud",
}


class FakeEncryptedInput:
    """Records the values attached and produces deterministic handles"""

    def __init__(self, contract_address: str, user_address: str, fail: bool = False,
                 owner: Optional["FakeInstance"] = None):
        self.contract_address = contract_address
        self.user_address = user_address
        self.values: List[tuple] = []
        self.fail = fail
        self.owner = owner

    def _add(self, width: int, value: int):
        self.values.append((width, value))
        return self

    def add8(self, value): return self._add(8, value)
    def add16(self, value): return self._add(16, value)
    def add32(self, value): return self._add(32, value)
    def add64(self, value): return self._add(64, value)
    def add128(self, value): return self._add(128, value)
    def add256(self, value): return self._add(256, value)

    async def encrypt(self):
        if self.fail:
            raise RuntimeError("Invalid contract address")
        handles = []
        for width, value in self.values:
            seed = f"{self.contract_address}:{self.user_address}:{width}:{value}".encode()
            handle = hashlib.sha256(seed).digest()
            handles.append(handle)
            if self.owner is not None:
                # Engine results key plaintexts by 0x hex handle
                self.owner.plaintexts["0x" + handle.hex()] = value
        proof = b"\x01" + b"".join(handles) + hashlib.sha256(b"proof" + handles[0]).digest()
        return {"handles": handles, "inputProof": proof}


class FakeInstance:
    """In-memory engine instance that records every call"""

    def __init__(self, plaintexts: Optional[Dict[str, int]] = None):
        self.plaintexts = plaintexts or {}
        self.inputs: List[FakeEncryptedInput] = []
        self.keypairs: List[Dict[str, bytes]] = []
        self.eip712_calls: List[tuple] = []
        self.user_decrypt_calls: List[tuple] = []
        self.fail_encrypt = False
        self.fail_user_decrypt = False

    def create_encrypted_input(self, contract_address, user_address):
        encrypted_input = FakeEncryptedInput(
            contract_address, user_address, fail=self.fail_encrypt, owner=self
        )
        self.inputs.append(encrypted_input)
        return encrypted_input

    def generate_keypair(self):
        keypair = {"publicKey": os.urandom(32), "privateKey": os.urandom(32)}
        self.keypairs.append(keypair)
        return keypair

    def create_eip712(self, public_key, contract_addresses, start_timestamp, duration_days):
        self.eip712_calls.append((public_key, list(contract_addresses), start_timestamp, duration_days))
        return {
            "domain": {
                "name": "Decryption",
                "version": "1",
                "chainId": SEPOLIA_CONFIG["gatewayChainId"],
                "verifyingContract": SEPOLIA_CONFIG["verifyingContractAddressDecryption"].lower(),
            },
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                    {"name": "verifyingContract", "type": "address"},
                ],
                "UserDecryptRequestVerification": [
                    {"name": "publicKey", "type": "bytes"},
                    {"name": "contractAddresses", "type": "address[]"},
                    {"name": "startTimestamp", "type": "uint256"},
                    {"name": "durationDays", "type": "uint256"},
                    {"name": "extraData", "type": "bytes"},
                ],
            },
            "primaryType": "UserDecryptRequestVerification",
            "message": {
                "publicKey": public_key,
                "contractAddresses": list(contract_addresses),
                "startTimestamp": start_timestamp,
                "durationDays": duration_days,
                "extraData": b"",
            },
        }

    async def user_decrypt(self, pairs, private_key, public_key, signature,
                           contract_addresses, user_address, start_timestamp, duration_days):
        self.user_decrypt_calls.append((
            pairs, private_key, public_key, signature,
            contract_addresses, user_address, start_timestamp, duration_days
        ))
        if self.fail_user_decrypt:
            raise RuntimeError("Invalid EIP-712 signature")
        return {pair["handle"]: self.plaintexts.get(pair["handle"], 0) for pair in pairs}


class FakeSigner:
    """Wallet signer double; optionally rejects every request"""

    def __init__(self, address: str = USER_ADDRESS, reject: bool = False):
        self.address = address
        self.reject = reject
        self.requests: List[Dict[str, Any]] = []
        self._counter = 0

    async def sign_typed_data(self, domain, types, primary_type, message, account=None):
        self.requests.append({
            "domain": domain,
            "types": types,
            "primary_type": primary_type,
            "message": message,
            "account": account,
        })
        if self.reject:
            raise RuntimeError("User rejected the request.")
        self._counter += 1
        return "0x" + f"{self._counter:02x}" * 65


def make_runtime_module(name: str, instance: Optional[FakeInstance] = None,
                        with_init: bool = False, init_error: Optional[Exception] = None,
                        create_error: Optional[Exception] = None):
    """Build a module object shaped like an engine build"""
    module = types.ModuleType(name)
    module.SepoliaConfig = dict(SEPOLIA_CONFIG)
    module.instance = instance or FakeInstance()
    module.created_with = []
    module.init_calls = 0

    async def create_instance(config):
        module.created_with.append(config)
        if create_error is not None:
            raise create_error
        return module.instance

    module.create_instance = create_instance

    if with_init:
        async def init_sdk():
            module.init_calls += 1
            if init_error is not None:
                raise init_error

        module.init_sdk = init_sdk

    return module


def make_importer(*modules):
    """import_module replacement serving the given fake modules"""
    registry = {module.__name__: module for module in modules}

    def import_module(name):
        if name not in registry:
            raise ModuleNotFoundError(f"No module named '{name}'")
        return registry[name]

    return import_module


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from FHEVM_* variables of the host environment"""
    for key in list(os.environ):
        if key.startswith("FHEVM_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def metrics():
    return MetricsCollector(service_name="test_fhevmsdk")


@pytest.fixture
def fake_instance():
    return FakeInstance()


@pytest.fixture
def facade(fake_instance, metrics):
    return ClientFacade(
        instance=fake_instance,
        encrypt=EncryptNamespace(fake_instance, metrics),
        metrics=metrics,
    )


@pytest.fixture
def signer():
    return FakeSigner()
