"""Lookup of weighting schemes by name, for configuration and remote evaluation."""

from __future__ import annotations

import logging

from ranking_tfidf.tfidf import TfIdfWeight
from ranking_tfidf.weight import Weight

logger = logging.getLogger(__name__)

_SCHEMES: dict[str, type[Weight]] = {}


def register_scheme(cls: type[Weight]) -> type[Weight]:
    """
    Register a scheme class under its ``name`` and ``short_name``.

    Usable as a class decorator. Re-registering the same class is a no-op.

    Raises:
        ValueError: If the class has no name, or a name is taken by another class.
    """
    names = [n for n in (cls.name, cls.short_name) if n]
    if not names:
        raise ValueError(f"{cls.__name__} has no name to register under")
    for n in names:
        existing = _SCHEMES.get(n)
        if existing is not None and existing is not cls:
            raise ValueError(f"Scheme name {n!r} already registered by {existing.__name__}")
    for n in names:
        _SCHEMES[n] = cls
    logger.debug("Registered weighting scheme %s as %s", cls.__name__, names)
    return cls


def get_scheme(name: str) -> type[Weight]:
    try:
        return _SCHEMES[name]
    except KeyError:
        raise KeyError(f"Unknown weighting scheme: {name!r}") from None


def available_schemes() -> list[str]:
    return sorted(_SCHEMES)


def create_scheme(name: str, params: str = "") -> Weight:
    """Build a scheme from its name and a parameter string, e.g. ``("tfidf", "Ptn")``."""
    return get_scheme(name).create_from_parameters(params)


def deserialize_scheme(name: str, data: bytes) -> Weight:
    """Rebuild a scheme shipped by a coordinator as ``(name, serialize())``."""
    return get_scheme(name).deserialize(data)


register_scheme(TfIdfWeight)


__all__ = [
    "register_scheme",
    "get_scheme",
    "available_schemes",
    "create_scheme",
    "deserialize_scheme",
]
