from typing import Any

from boundwire.integrations.pydantic import settings_bases

DEFAULT_BUILTIN_TYPES: frozenset[Any] = frozenset(
    {
        int,
        str,
        float,
        bool,
        bytes,
        complex,
        list,
        dict,
        set,
        frozenset,
        tuple,
        object,
        Any,
    },
)
"""Parameter annotations that are never auto-built and need an override or a default."""

DEFAULT_SHARED_BASES: frozenset[type[Any]] = frozenset(settings_bases())
"""Subclasses of these bases are cached as singletons even without a binding."""
