"""
Unbound Python SDK - Runtime Environment

Helpers for deciding whether the SDK runs in a server process or inside a
browser page, and for deriving the API origin for each case.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import Optional, Union


DEFAULT_DOMAIN = "api.unbound.cx"
FALLBACK_NAMESPACE = "login"


class Environment(str, Enum):
    """Deployment context of the SDK."""
    SERVER = "server"
    BROWSER = "browser"


def detect_environment() -> Environment:
    """
    Guess the deployment context from the interpreter.

    A WebAssembly build of CPython (Pyodide and friends) runs inside a
    browser page; anything else is treated as a server process.
    """
    if sys.platform == "emscripten":
        return Environment.BROWSER
    return Environment.SERVER


def resolve_environment(value: Optional[Union[str, Environment]]) -> Environment:
    if value is None:
        return detect_environment()
    if isinstance(value, Environment):
        return value
    # "node" is what older configurations call the server context
    if value == "node":
        return Environment.SERVER
    return Environment(value)


def normalize_domain(domain: str, environment: Environment) -> str:
    """Browser pages talk to the ``api.`` subdomain."""
    if environment is Environment.BROWSER and not domain.startswith("api."):
        return f"api.{domain}"
    return domain


def build_base_url(namespace: Optional[str], domain: str, environment: Environment) -> str:
    """
    Compose the fully qualified origin for a namespace.

    Example:
        >>> build_base_url("acme", "api.unbound.cx", Environment.SERVER)
        'https://acme.api.unbound.cx'
    """
    host = namespace or FALLBACK_NAMESPACE
    return f"https://{host}.{normalize_domain(domain, environment)}"
