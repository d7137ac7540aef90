"""Settings from flags, environment and fargate.yml, and validation of CPU, memory and region."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_CLUSTER_NAME = "fargate"
DEFAULT_REGION = "us-east-1"
MEBIBYTES_IN_GIBIBYTE = 1024

KEY_CLUSTER = "cluster"
KEY_SERVICE = "service"
KEY_VERBOSE = "verbose"
KEY_NOCOLOR = "nocolor"
KEY_TASK = "task"
KEY_RULE = "rule"

ENVIRONMENT_KEYS = {
    KEY_CLUSTER: "FARGATE_CLUSTER",
    KEY_SERVICE: "FARGATE_SERVICE",
    KEY_VERBOSE: "FARGATE_VERBOSE",
    KEY_NOCOLOR: "FARGATE_NOCOLOR",
    KEY_TASK: "FARGATE_TASK",
    KEY_RULE: "FARGATE_RULE",
}

CONFIG_FILE_NAMES = ("fargate.yaml", "fargate.yml")

VALID_REGIONS = (
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
    "ca-central-1",
    "eu-west-1",
    "eu-west-2",
    "eu-central-1",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-northeast-1",
    "ap-northheast-2",
    "ap-south-1",
)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT16_MIN = -(2**15)
_INT16_MAX = 2**15 - 1

_CPU_AND_MEMORY_MESSAGE = """Invalid CPU and Memory settings

CPU (CPU Units)    Memory (MiB)
---------------    ------------
256                512, 1024, or 2048
512                1024 through 4096 in 1GiB increments
1024               2048 through 8192 in 1GiB increments
2048               4096 through 16384 in 1GiB increments
4096               8192 through 30720 in 1GiB increments
"""

_MEMORY_RANGES = {
    512: (1024, 4096),
    1024: (2048, 8192),
    2048: (4096, 16384),
    4096: (8192, 30720),
}


class InvalidCpuAndMemoryCombination(ValueError):
    """The CPU and memory settings are not a combination Fargate supports."""

    def __init__(self, message: str = _CPU_AND_MEMORY_MESSAGE) -> None:
        super().__init__(message)


class ConfigurationError(Exception):
    """A required setting was not given."""


def _parse_int16(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    value = int(text)
    if not _INT16_MIN <= value <= _INT16_MAX:
        raise ValueError(f'parsing "{text}": value out of range')
    return value


def validate_mebibytes(mebibytes: int, minimum: int, maximum: int) -> bool:
    """True if the memory lies within the bounds and is a whole number of GiB."""
    return minimum <= mebibytes <= maximum and mebibytes % MEBIBYTES_IN_GIBIBYTE == 0


def validate_cpu_and_memory(cpu_units: str, mebibytes: str) -> None:
    """Raise unless the CPU units and memory form a supported combination.

    Numbers that cannot be parsed raise ValueError; unsupported combinations
    raise InvalidCpuAndMemoryCombination.
    """
    cpu = _parse_int16(cpu_units)
    memory = _parse_int16(mebibytes)

    if cpu == 256 and (memory == 512 or validate_mebibytes(memory, 1024, 2048)):
        return
    bounds = _MEMORY_RANGES.get(cpu)
    if bounds is not None and validate_mebibytes(memory, *bounds):
        return
    raise InvalidCpuAndMemoryCombination()


def validate_region(region: str) -> None:
    """Raise ValueError if the region is not one of the supported regions."""
    if region not in VALID_REGIONS:
        raise ValueError(
            f"Invalid region: {region} [valid regions: {', '.join(VALID_REGIONS)}]"
        )


def resolve_region(region: str | None = None, environ: Mapping[str, str] | None = None) -> str:
    """Pick the region from the argument, AWS_DEFAULT_REGION, AWS_REGION or the default."""
    environ = os.environ if environ is None else environ
    if not region:
        region = (
            environ.get("AWS_DEFAULT_REGION")
            or environ.get("AWS_REGION")
            or DEFAULT_REGION
        )
    validate_region(region)
    return region


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value in {"1", "t", "T", "TRUE", "true", "True"}
    return False


def _read_config(config_path: str | os.PathLike | None) -> dict[str, Any]:
    if config_path is None:
        candidates = [Path(name) for name in CONFIG_FILE_NAMES]
    else:
        candidates = [Path(config_path)]
    for path in candidates:
        if not path.is_file():
            continue
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError):
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key).lower(): value for key, value in data.items()}
    return {}


@dataclass(frozen=True)
class Settings:
    """Resolved settings; the name accessors raise when a required one is empty."""

    cluster: str = ""
    service: str = ""
    task: str = ""
    rule: str = ""
    verbose: bool = False
    nocolor: bool = False

    def cluster_name(self) -> str:
        if not self.cluster:
            raise ConfigurationError(
                "please specify cluster using: fargate.yml, FARGATE_SERVICE envvar, or --cluster"
            )
        return self.cluster

    def service_name(self) -> str:
        if not self.service:
            raise ConfigurationError(
                "please specify service using: fargate.yml, FARGATE_SERVICE envvar, or --service"
            )
        return self.service

    def task_name(self) -> str:
        if not self.task:
            raise ConfigurationError(
                "please specify task family using: fargate.yml, FARGATE_TASK envvar, or --task"
            )
        return self.task

    def rule_name(self) -> str:
        if not self.rule:
            raise ConfigurationError(
                "please specify rule using: fargate.yml, FARGATE_RULE envvar, or --task"
            )
        return self.rule


def load_settings(
    flags: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | os.PathLike | None = None,
) -> Settings:
    """Resolve settings with command-line flags first, then environment, then fargate.yml.

    ``flags`` holds only the flags the user gave; a value of None counts as not given.
    Without ``config_path``, fargate.yaml or fargate.yml in the working directory is read.
    """
    flags = flags or {}
    environ = os.environ if environ is None else environ
    config = _read_config(config_path)

    def lookup(key: str) -> Any:
        if flags.get(key) is not None:
            return flags[key]
        env_value = environ.get(ENVIRONMENT_KEYS[key])
        if env_value:
            return env_value
        return config.get(key)

    return Settings(
        cluster=_to_str(lookup(KEY_CLUSTER)),
        service=_to_str(lookup(KEY_SERVICE)),
        task=_to_str(lookup(KEY_TASK)),
        rule=_to_str(lookup(KEY_RULE)),
        verbose=_to_bool(lookup(KEY_VERBOSE)),
        nocolor=_to_bool(lookup(KEY_NOCOLOR)),
    )