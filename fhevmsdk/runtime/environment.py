"""
Environment detection

An interactive environment is a browser-embedded interpreter (Pyodide) that
exposes both a ``window`` object and an injected EIP-1193 wallet provider at
``window.ethereum``. Anything else is headless.
"""
import importlib
import sys
from typing import Any, Optional


class EnvironmentDetector:
    """Capability probe for the current process"""

    def has_window(self) -> bool:
        """Whether a windowing context (browser global scope) is present"""
        return self._window() is not None

    def injected_provider(self) -> Optional[Any]:
        """The wallet provider injected into the window, if any"""
        window = self._window()
        if window is None:
            return None
        return getattr(window, "ethereum", None)

    def is_interactive(self) -> bool:
        """Windowing context and injected wallet provider are both present"""
        return self.has_window() and self.injected_provider() is not None

    def _window(self) -> Optional[Any]:
        if sys.platform != "emscripten":
            return None
        try:
            js = importlib.import_module("js")
        except ImportError:
            return None
        return getattr(js, "window", None)


class StaticEnvironment(EnvironmentDetector):
    """Detector with fixed answers, for overrides and tests"""

    def __init__(self, window: bool = False, provider: Optional[Any] = None):
        self._has_window = window
        self._provider = provider

    def has_window(self) -> bool:
        return self._has_window

    def injected_provider(self) -> Optional[Any]:
        return self._provider if self._has_window else None


_default_detector = EnvironmentDetector()


def default_detector() -> EnvironmentDetector:
    return _default_detector


def is_browser() -> bool:
    """Check whether the process runs in a wallet-capable browser environment"""
    return _default_detector.is_interactive()
