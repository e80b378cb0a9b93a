"""
Client factory

Combines a resolved network configuration and a provider into a live engine
instance and wraps it in a read-only ClientFacade.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from fhevmsdk.common.errors import (
    FhevmError,
    InstanceCreationError,
    ProviderRequiredError,
    ProviderUnavailableError,
    RuntimeUnavailableError,
)
from fhevmsdk.common.logging_config import LoggedOperation, MetricsCollector, get_metrics
from fhevmsdk.config import get_settings
from fhevmsdk.client.decrypt import decrypt_for_user
from fhevmsdk.client.encrypt import encrypt_value
from fhevmsdk.client.types import DEFAULT_DURATION_DAYS, SUPPORTED_WIDTHS, EncryptedValue, FhevmInstance, Signer
from fhevmsdk.runtime.environment import EnvironmentDetector, default_detector
from fhevmsdk.runtime.loader import RuntimeLoader, get_loader, maybe_await
from fhevmsdk.runtime.networks import NetworkLike, resolve_network

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientOptions:
    """Options for creating a client"""
    network: NetworkLike = "sepolia"
    provider: Any = None

    @classmethod
    def from_settings(cls) -> "ClientOptions":
        settings = get_settings()
        return cls(network=settings.network, provider=settings.rpc_url)


class EncryptNamespace:
    """Width-specific encrypt operations bound to one instance

    Reachable as ``client.encrypt.uint64(...)`` or ``client.encrypt[64](...)``.
    """

    def __init__(self, instance: FhevmInstance, metrics: Optional[MetricsCollector] = None):
        self._instance = instance
        self._metrics = metrics

    @property
    def widths(self):
        return SUPPORTED_WIDTHS

    def __getitem__(self, width: int) -> Callable[..., Awaitable[EncryptedValue]]:
        if width not in SUPPORTED_WIDTHS:
            raise KeyError(width)
        return getattr(self, f"uint{width}")

    async def _encrypt(self, width: int, value: int, contract_address: str,
                       user_address: str) -> EncryptedValue:
        return await encrypt_value(
            self._instance, width, value, contract_address, user_address, metrics=self._metrics
        )

    async def uint8(self, value: int, contract_address: str, user_address: str) -> EncryptedValue:
        return await self._encrypt(8, value, contract_address, user_address)

    async def uint16(self, value: int, contract_address: str, user_address: str) -> EncryptedValue:
        return await self._encrypt(16, value, contract_address, user_address)

    async def uint32(self, value: int, contract_address: str, user_address: str) -> EncryptedValue:
        return await self._encrypt(32, value, contract_address, user_address)

    async def uint64(self, value: int, contract_address: str, user_address: str) -> EncryptedValue:
        return await self._encrypt(64, value, contract_address, user_address)

    async def uint128(self, value: int, contract_address: str, user_address: str) -> EncryptedValue:
        return await self._encrypt(128, value, contract_address, user_address)

    async def uint256(self, value: int, contract_address: str, user_address: str) -> EncryptedValue:
        return await self._encrypt(256, value, contract_address, user_address)


@dataclass(frozen=True)
class ClientFacade:
    """Read-only handle to a fully constructed engine instance"""
    instance: FhevmInstance
    encrypt: EncryptNamespace
    is_ready: bool = True
    duration_days: int = DEFAULT_DURATION_DAYS
    metrics: Optional[MetricsCollector] = field(default=None, repr=False, compare=False)

    async def decrypt(
        self,
        ciphertext_handle: Union[str, bytes],
        contract_address: str,
        signer: Optional[Signer]
    ) -> int:
        """Decrypt a handle for the signer's account (see decrypt_for_user)"""
        return await decrypt_for_user(
            self.instance if self.is_ready else None,
            ciphertext_handle,
            contract_address,
            signer,
            duration_days=self.duration_days,
            metrics=self.metrics,
        )


class ClientFactory:
    """Builds ClientFacades for the detected environment"""

    def __init__(
        self,
        detector: Optional[EnvironmentDetector] = None,
        loader: Optional[RuntimeLoader] = None,
        metrics: Optional[MetricsCollector] = None,
        duration_days: Optional[int] = None
    ):
        self.detector = detector or default_detector()
        self.loader = loader or RuntimeLoader(detector=self.detector)
        self.metrics = metrics or get_metrics()
        self.duration_days = duration_days or get_settings().authorization_duration_days

    def resolve_provider(self, provider: Any = None) -> Any:
        """Pick the provider for the current environment

        Raises:
            ProviderUnavailableError: Browser window without a wallet, and no provider given
            ProviderRequiredError: Headless environment without an explicit provider
        """
        if self.detector.is_interactive():
            return provider or self.detector.injected_provider()

        if provider is None:
            if self.detector.has_window():
                raise ProviderUnavailableError(
                    "Ethereum provider not available. Pass a provider or install a wallet extension."
                )
            raise ProviderRequiredError(
                "Headless environment requires an explicit provider (RPC URL or provider object)."
            )
        return provider

    async def create(self, options: Optional[ClientOptions] = None) -> ClientFacade:
        """Create a ready client

        Raises:
            ProviderUnavailableError, ProviderRequiredError: No usable provider
            RuntimeUnavailableError, ActivationError: Engine could not be loaded
            UnknownNetworkError: Unrecognized network name
            InstanceCreationError: The engine failed to build an instance
        """
        options = options or ClientOptions()
        provider = self.resolve_provider(options.provider)

        with LoggedOperation(logger, "create_client", metrics=self.metrics):
            module = await self.loader.load()

            create_instance = getattr(module, "create_instance", None)
            if create_instance is None:
                raise RuntimeUnavailableError(
                    f"create_instance not available from {module.__name__}"
                )

            network_config = await resolve_network(options.network, self.loader)
            config: Dict[str, Any] = network_config.with_provider(provider).to_engine_config()

            start = time.monotonic()
            try:
                instance = await maybe_await(create_instance(config))
            except FhevmError:
                raise
            except Exception as e:
                raise InstanceCreationError(
                    str(e) or "Failed to create FHEVM instance",
                    details={"chain_id": network_config.chain_id}
                ) from e

            logger.info(
                "FHEVM instance created",
                extra={
                    "chain_id": network_config.chain_id,
                    "duration_ms": round((time.monotonic() - start) * 1000, 2)
                }
            )

        return ClientFacade(
            instance=instance,
            encrypt=EncryptNamespace(instance, self.metrics),
            is_ready=True,
            duration_days=self.duration_days,
            metrics=self.metrics,
        )


_default_factory: Optional[ClientFactory] = None


def get_factory() -> ClientFactory:
    """Get or create the process-wide factory (shares the default loader)"""
    global _default_factory
    if _default_factory is None:
        _default_factory = ClientFactory(loader=get_loader())
    return _default_factory


async def create_client(network: NetworkLike = "sepolia", provider: Any = None) -> ClientFacade:
    """Create a client with the default factory"""
    return await get_factory().create(ClientOptions(network=network, provider=provider))
