"""Port expressions such as ``80``, ``443`` or ``tcp:3000``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_VALID_PROTOCOL = re.compile(r"\ATCP|HTTPS?\Z", re.IGNORECASE)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Port:
    """A port number together with its protocol."""

    number: int = 0
    protocol: str = ""

    def empty(self) -> bool:
        return self.number == 0 or self.protocol == ""

    def __str__(self) -> str:
        if self.empty():
            return ""
        return f"{self.protocol}:{self.number}"


def build_port(number: str, protocol: str) -> Port:
    """Build a port from a decimal number string and a protocol."""
    if not _INTEGER.fullmatch(number):
        raise ValueError(f"could not parse port number from {number}")
    value = int(number)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"could not parse port number from {number}")
    return Port(value, protocol)


def inflate_port(port_expr: str) -> Port:
    """Turn a port expression into a port, inferring the protocol where it is omitted."""
    if port_expr == "80":
        return build_port(port_expr, "HTTP")
    if port_expr == "443":
        return build_port(port_expr, "HTTPS")
    if port_expr.find(":") > 1:
        parts = port_expr.split(":")
        return build_port(parts[1], parts[0].upper())
    return build_port(port_expr, "TCP")


def inflate_ports(port_exprs: Iterable[str]) -> tuple[list[Port], list[ValueError]]:
    """Inflate every expression, returning the ports and the errors found."""
    ports: list[Port] = []
    errors: list[ValueError] = []
    for expr in port_exprs:
        try:
            ports.append(inflate_port(expr))
        except ValueError as error:
            errors.append(error)
    return ports, errors


def validate_port(port: Port) -> list[ValueError]:
    """Return the problems with a port's protocol and number; empty when valid."""
    errors: list[ValueError] = []
    if not _VALID_PROTOCOL.search(port.protocol):
        errors.append(
            ValueError(f"invalid protocol {port.protocol} (specify TCP, HTTP, or HTTPS)")
        )
    if port.number < 1 or port.number > 65535:
        errors.append(ValueError(f"invalid port {port.number} (specify within 1 - 65535)"))
    return errors