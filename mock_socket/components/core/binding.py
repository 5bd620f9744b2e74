"""
Global constructor binding.

A running server swaps the ambient `WebSocket` name for the mock class so
unmodified code under test picks it up. install() hands back an opaque
token; uninstall() restores exactly what was there before.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["Binding", "install", "uninstall"]


class _Missing:
    """Marker for an attribute that did not exist before install()."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class Binding:
    """
    Token describing one install().

    Attributes:
        target: Namespace the value was installed on (module, class, builtins).
        attribute: Attribute name that was replaced.
        previous: Value before install(), or MISSING.
    """

    target: Any
    attribute: str
    previous: Any = MISSING

    @property
    def had_previous(self) -> bool:
        return self.previous is not MISSING


def install(target: Any, attribute: str, value: Any) -> Binding:
    """Store value under attribute on target and return the restore token."""
    token = Binding(target=target, attribute=attribute, previous=getattr(target, attribute, MISSING))
    setattr(target, attribute, value)
    return token


def uninstall(token: Binding) -> None:
    """Restore the binding captured by install()."""
    if token.had_previous:
        setattr(token.target, token.attribute, token.previous)
    elif hasattr(token.target, token.attribute):
        delattr(token.target, token.attribute)
