import importlib
import logging
from typing import Any, Callable, Dict, List, Optional

from .client_base import LLMClient

logger = logging.getLogger(__name__)

_REGISTRY: Dict[str, Callable[..., LLMClient]] = {}

# Built-in backends, imported only when first requested so that one
# backend's SDK is never needed to use another.
_BUILTIN_MODULES: Dict[str, str] = {
    "azure": ".azure_client",
    "gemini": ".gemini_client",
    "mock": ".mock_client",
}


def register_client(name: str):
    """Decorator to register an LLM client class under a backend name."""
    def decorator(cls):
        _REGISTRY[name] = cls
        return cls
    return decorator


def _load_builtin(name: str) -> None:
    module_name = _BUILTIN_MODULES.get(name)
    if module_name is None or name in _REGISTRY:
        return
    logger.debug("Loading built-in backend %r from %s", name, module_name)
    importlib.import_module(module_name, package=__package__)


def get_client(name: str) -> Optional[Callable[..., LLMClient]]:
    """Return the client class for a given backend name."""
    _load_builtin(name)
    return _REGISTRY.get(name)


def list_clients() -> List[str]:
    """Return registered and built-in backend names, without importing any."""
    return sorted(set(_REGISTRY) | set(_BUILTIN_MODULES))


def create_client(name: str, **kwargs: Any) -> LLMClient:
    cls = get_client(name)
    if cls is None:
        raise ValueError(
            f"Unsupported llm_backend: {name} (available: {', '.join(list_clients())})"
        )
    logger.debug("Creating LLM client %r", name)
    return cls(**kwargs)
