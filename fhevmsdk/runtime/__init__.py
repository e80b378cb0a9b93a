"""
Environment detection, engine loading and network configuration
"""
from .environment import EnvironmentDetector, StaticEnvironment, is_browser
from .loader import RuntimeBuild, RuntimeLoader, get_loader, init_runtime
from .networks import BUILTIN_NETWORKS, NetworkConfig, resolve_network

__all__ = [
    'EnvironmentDetector',
    'StaticEnvironment',
    'is_browser',
    'RuntimeBuild',
    'RuntimeLoader',
    'get_loader',
    'init_runtime',
    'BUILTIN_NETWORKS',
    'NetworkConfig',
    'resolve_network',
]
