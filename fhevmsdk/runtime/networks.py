"""Network configuration resolution"""
import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from fhevmsdk.common.errors import UnknownNetworkError
from fhevmsdk.runtime.loader import RuntimeLoader, get_loader

logger = logging.getLogger(__name__)

# Symbolic name -> attribute exported by the engine module
BUILTIN_NETWORKS: Dict[str, str] = {
    "sepolia": "SepoliaConfig",
    "mainnet": "MainnetConfig",
}


class NetworkConfig(BaseModel):
    """Parameter set the engine needs to build an instance

    Field names follow Python conventions; the engine receives the camelCase
    aliases. Keys the engine adds beyond these are kept as extras.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="allow",
        arbitrary_types_allowed=True,
    )

    chain_id: int = Field(alias="chainId")
    gateway_chain_id: Optional[int] = Field(default=None, alias="gatewayChainId")
    acl_contract_address: Optional[str] = Field(default=None, alias="aclContractAddress")
    kms_contract_address: Optional[str] = Field(default=None, alias="kmsContractAddress")
    input_verifier_contract_address: Optional[str] = Field(
        default=None, alias="inputVerifierContractAddress"
    )
    verifying_contract_address_decryption: Optional[str] = Field(
        default=None, alias="verifyingContractAddressDecryption"
    )
    verifying_contract_address_input_verification: Optional[str] = Field(
        default=None, alias="verifyingContractAddressInputVerification"
    )
    relayer_url: Optional[str] = Field(default=None, alias="relayerUrl")
    network: Optional[Any] = None

    def with_provider(self, provider: Any) -> "NetworkConfig":
        """Copy of this configuration bound to a provider"""
        return self.model_copy(update={"network": provider})

    def to_engine_config(self) -> Dict[str, Any]:
        """Mapping in the shape the engine's create_instance expects"""
        return self.model_dump(by_alias=True, exclude_none=True)


NetworkLike = Union[str, NetworkConfig, Mapping[str, Any]]


async def resolve_network(
    name_or_config: NetworkLike,
    loader: Optional[RuntimeLoader] = None
) -> NetworkConfig:
    """Map a symbolic network name to its configuration

    Args:
        name_or_config: Symbolic name ("sepolia"), a prebuilt NetworkConfig
            (returned as is), or a raw mapping of engine parameters
        loader: Loader whose engine build provides the built-in configs

    Raises:
        UnknownNetworkError: For names with no built-in configuration
    """
    if isinstance(name_or_config, NetworkConfig):
        return name_or_config
    if isinstance(name_or_config, Mapping):
        return NetworkConfig.model_validate(dict(name_or_config))

    name = name_or_config.strip().lower()
    attribute = BUILTIN_NETWORKS.get(name)
    if attribute is None:
        raise UnknownNetworkError(
            f"Unknown network: {name_or_config}",
            details={"network": name_or_config, "supported": sorted(BUILTIN_NETWORKS)}
        )

    module = await (loader or get_loader()).load()
    raw = getattr(module, attribute, None)
    if raw is None:
        raise UnknownNetworkError(
            f"Network {name!r} is not shipped by runtime {module.__name__}",
            details={"network": name, "attribute": attribute}
        )

    config = raw if isinstance(raw, NetworkConfig) else NetworkConfig.model_validate(dict(raw))
    logger.debug("Network resolved", extra={"network": name, "chain_id": config.chain_id})
    return config
