"""
Runtime loader for the external FHE engine

Two builds of the engine exist. The interactive build runs inside a browser
interpreter and must be activated once with ``init_sdk()`` before any other
call. The headless build activates itself on import.
"""
import asyncio
import importlib
import inspect
import logging
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Callable, Optional

from fhevmsdk.common.errors import ActivationError, RuntimeUnavailableError
from fhevmsdk.config import get_settings
from fhevmsdk.runtime.environment import EnvironmentDetector, default_detector

logger = logging.getLogger(__name__)


async def maybe_await(value: Any) -> Any:
    """Await engine results that are awaitable, pass plain values through"""
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True)
class RuntimeBuild:
    """One build of the engine"""
    name: str
    module_name: str
    requires_activation: bool


class RuntimeLoader:
    """Locates and activates the engine build matching the environment"""

    def __init__(
        self,
        detector: Optional[EnvironmentDetector] = None,
        interactive_module: Optional[str] = None,
        headless_module: Optional[str] = None,
        import_module: Callable[[str], ModuleType] = importlib.import_module
    ):
        settings = get_settings()
        self.detector = detector or default_detector()
        self.interactive_module = interactive_module or settings.interactive_runtime_module
        self.headless_module = headless_module or settings.headless_runtime_module
        self._import_module = import_module
        self._build: Optional[RuntimeBuild] = None
        self._module: Optional[ModuleType] = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._module is not None

    def select_build(self) -> RuntimeBuild:
        """Pick the build once; the choice is fixed for the loader's lifetime"""
        if self._build is None:
            if self.detector.has_window():
                self._build = RuntimeBuild("interactive", self.interactive_module, True)
            else:
                self._build = RuntimeBuild("headless", self.headless_module, False)
            logger.debug(
                "Runtime build selected",
                extra={"build": self._build.name, "runtime_module": self._build.module_name}
            )
        return self._build

    async def load(self) -> ModuleType:
        """Import and activate the engine, once

        Raises:
            RuntimeUnavailableError: If the build module cannot be imported
            ActivationError: If explicit activation fails
        """
        if self._module is not None:
            return self._module

        async with self._lock:
            # Another caller may have finished while we waited
            if self._module is not None:
                return self._module

            build = self.select_build()
            module = self._import(build)

            if build.requires_activation:
                init_sdk = getattr(module, "init_sdk", None)
                if init_sdk is None:
                    raise RuntimeUnavailableError(
                        f"init_sdk not available from {build.module_name}",
                        details={"build": build.name, "module": build.module_name}
                    )
                try:
                    await maybe_await(init_sdk())
                except Exception as e:
                    logger.error(f"Runtime activation failed: {e}")
                    raise ActivationError(
                        f"Failed to activate {build.module_name}: {e}",
                        details={"build": build.name, "module": build.module_name}
                    ) from e

            # Only a fully activated module is ever published
            self._module = module
            logger.info(
                "FHE runtime loaded",
                extra={"build": build.name, "runtime_module": build.module_name}
            )
            return module

    def _import(self, build: RuntimeBuild) -> ModuleType:
        try:
            return self._import_module(build.module_name)
        except ImportError as e:
            raise RuntimeUnavailableError(
                f"FHE runtime module {build.module_name!r} not found: {e}",
                details={"build": build.name, "module": build.module_name}
            ) from e


_default_loader: Optional[RuntimeLoader] = None


def get_loader() -> RuntimeLoader:
    """Get or create the process-wide loader"""
    global _default_loader
    if _default_loader is None:
        _default_loader = RuntimeLoader()
    return _default_loader


async def init_runtime() -> ModuleType:
    """Load and activate the engine for the current environment"""
    return await get_loader().load()
