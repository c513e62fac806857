"""
Import helpers for configured identifiers ('package.module:Attribute').
"""
from __future__ import annotations
import importlib
from typing import Any

from sitebridge.exceptions import ConfigurationError


def import_string(identifier: str) -> Any:
    """Import the object named by ``identifier``.

    Both ``package.module:Attribute`` and ``package.module.Attribute`` are
    accepted.
    """
    if ":" in identifier:
        module_name, _, attribute = identifier.partition(":")
    else:
        module_name, _, attribute = identifier.rpartition(".")

    if not module_name or not attribute:
        raise ConfigurationError(f"Invalid import path: {identifier}", details={"identifier": identifier})

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(
            f"Could not import module [{module_name}] for {identifier}",
            details={"identifier": identifier},
        ) from exc

    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise ConfigurationError(
            f"Module [{module_name}] has no attribute [{attribute}]",
            details={"identifier": identifier},
        ) from exc
