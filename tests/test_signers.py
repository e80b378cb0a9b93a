"""Tests for the wallet signer adapters"""

import json
from unittest.mock import AsyncMock, Mock

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data

from fhevmsdk.client import Eip1193Signer, LocalAccountSigner, Signer, decrypt_for_user
from fhevmsdk.client.decrypt import build_signing_domain
from fhevmsdk.client.signers import build_typed_data

from conftest import CONTRACT_ADDRESS, USER_ADDRESS, FakeInstance

TEST_KEY = "0x" + "11" * 32


def _authorization():
    instance = FakeInstance()
    eip712 = instance.create_eip712(b"\x02" * 32, [CONTRACT_ADDRESS], 1_700_000_000, 10)
    return build_signing_domain(eip712["domain"]), eip712["types"], eip712["message"]


class TestLocalAccountSigner:

    def test_from_key_with_and_without_prefix(self):
        expected = Account.from_key(TEST_KEY).address
        assert LocalAccountSigner.from_key(TEST_KEY).address == expected
        assert LocalAccountSigner.from_key(TEST_KEY[2:]).address == expected

    def test_invalid_key(self):
        with pytest.raises(ValueError):
            LocalAccountSigner.from_key("0xnot-a-key")

    def test_satisfies_signer_protocol(self):
        assert isinstance(LocalAccountSigner.from_key(TEST_KEY), Signer)

    @pytest.mark.asyncio
    async def test_signature_recovers_to_account(self):
        signer = LocalAccountSigner.from_key(TEST_KEY)
        domain, types, message = _authorization()

        signature = await signer.sign_typed_data(
            domain=domain,
            types=types,
            primary_type="UserDecryptRequestVerification",
            message=message,
            account=signer.address,
        )

        assert signature.startswith("0x")
        assert len(signature) == 132
        typed_data = build_typed_data(domain, types, "UserDecryptRequestVerification", message)
        recovered = Account.recover_message(encode_typed_data(full_message=typed_data), signature=signature)
        assert recovered == signer.address

    @pytest.mark.asyncio
    async def test_refuses_other_account(self):
        signer = LocalAccountSigner.from_key(TEST_KEY)
        domain, types, message = _authorization()

        with pytest.raises(ValueError):
            await signer.sign_typed_data(domain, types, "UserDecryptRequestVerification", message,
                                         account=USER_ADDRESS)

    @pytest.mark.asyncio
    async def test_decrypt_with_local_signer(self):
        signer = LocalAccountSigner.from_key(TEST_KEY)
        handle = "0x" + "ef" * 32
        instance = FakeInstance(plaintexts={handle: 123})

        assert await decrypt_for_user(instance, handle, CONTRACT_ADDRESS, signer) == 123

        submitted_signature = instance.user_decrypt_calls[0][3]
        assert len(submitted_signature) == 130
        assert instance.user_decrypt_calls[0][5] == signer.address


class TestEip1193Signer:

    @pytest.mark.asyncio
    async def test_forwards_sign_typed_data_v4(self):
        provider = Mock()
        provider.request = AsyncMock(return_value="0x" + "aa" * 65)
        signer = Eip1193Signer(provider, USER_ADDRESS.lower())
        domain, types, message = _authorization()

        signature = await signer.sign_typed_data(domain, types, "UserDecryptRequestVerification", message)

        assert signature == "0x" + "aa" * 65
        assert signer.address == USER_ADDRESS
        request = provider.request.await_args.args[0]
        assert request["method"] == "eth_signTypedData_v4"
        assert request["params"][0] == USER_ADDRESS

        payload = json.loads(request["params"][1])
        assert payload["primaryType"] == "UserDecryptRequestVerification"
        assert payload["domain"]["chainId"] == 55815
        assert payload["message"]["publicKey"] == "0x" + "02" * 32
        assert payload["message"]["extraData"] == "0x"

    @pytest.mark.asyncio
    async def test_explicit_account_is_used(self):
        provider = Mock()
        provider.request = AsyncMock(return_value="0x00")
        signer = Eip1193Signer(provider, USER_ADDRESS)
        domain, types, message = _authorization()

        await signer.sign_typed_data(domain, types, "UserDecryptRequestVerification", message,
                                     account=CONTRACT_ADDRESS)

        assert provider.request.await_args.args[0]["params"][0] == CONTRACT_ADDRESS

    @pytest.mark.asyncio
    async def test_wallet_rejection_propagates(self):
        provider = Mock()
        provider.request = AsyncMock(side_effect=RuntimeError("User rejected the request."))
        signer = Eip1193Signer(provider, USER_ADDRESS)
        domain, types, message = _authorization()

        with pytest.raises(RuntimeError):
            await signer.sign_typed_data(domain, types, "UserDecryptRequestVerification", message)
