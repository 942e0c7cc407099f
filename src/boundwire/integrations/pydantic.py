from typing import Any

BaseSettings: type[Any] | None = None
try:
    from pydantic_settings import BaseSettings
except ImportError:  # pragma: no cover - pydantic-settings extra not installed
    pass


def settings_bases() -> set[type[Any]]:
    """Return the installed pydantic settings base classes."""
    return {BaseSettings} if BaseSettings is not None else set()


__all__ = ["BaseSettings", "settings_bases"]
