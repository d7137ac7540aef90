"""Environment variables and secrets given as KEY=value strings or files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

_IDENTIFIER = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


@dataclass(frozen=True)
class EnvVar:
    """A plain environment variable of a container."""

    key: str
    value: str


@dataclass(frozen=True)
class Secret:
    """An environment variable whose value is fetched from a secret store."""

    key: str
    value_from: str


class InvalidEnvVarError(ValueError):
    """A KEY=value string is malformed or its key is not a legal identifier."""


def extract_env_vars(input_env_vars: Iterable[str]) -> list[EnvVar]:
    """Turn strings of the form KEY=value into environment variables."""
    env_vars: list[EnvVar] = []
    for entry in input_env_vars:
        key, sep, value = entry.partition("=")
        if not sep:
            raise InvalidEnvVarError(f"{entry} must be in the form of KEY=value")
        if not _IDENTIFIER.fullmatch(key):
            raise InvalidEnvVarError(
                f"Environment variable name {key} must contain only letters, "
                "underscores, and digits"
            )
        env_vars.append(EnvVar(key, value))
    return env_vars


def read_var_file(filename: str) -> list[str]:
    """Return the lines of a file, or an empty list if it cannot be opened."""
    try:
        with open(filename, encoding="utf-8", newline="\n") as handle:
            lines = []
            for line in handle:
                line = line[:-1] if line.endswith("\n") else line
                if line.endswith("\r"):
                    line = line[:-1]
                lines.append(line)
            return lines
    except OSError:
        return []


def process_env_var_args(input_env_vars: Iterable[str], env_var_file: str) -> list[EnvVar]:
    """Combine KEY=value arguments with the lines of an optional file."""
    entries = list(input_env_vars)
    if env_var_file:
        entries.extend(read_var_file(env_var_file))
    return extract_env_vars(entries)


def process_secret_var_args(
    input_secret_vars: Iterable[str], secret_var_file: str
) -> list[Secret]:
    """Combine KEY=valueFrom arguments with the lines of an optional file."""
    return [
        Secret(env_var.key, env_var.value)
        for env_var in process_env_var_args(input_secret_vars, secret_var_file)
    ]


@dataclass
class ServiceEnvSetOperation:
    """Setting environment variables and secrets on a service."""

    service_name: str
    env_vars: list[EnvVar] = field(default_factory=list)
    secret_vars: list[Secret] = field(default_factory=list)

    def validate(self) -> None:
        if not self.env_vars and not self.secret_vars:
            raise InvalidEnvVarError("No environment variables or secrets specified")


@dataclass
class ServiceEnvUnsetOperation:
    """Removing environment variables from a service."""

    service_name: str
    keys: list[str] = field(default_factory=list)

    def validate(self) -> None:
        if not self.keys:
            raise InvalidEnvVarError("No keys specified")