"""Choosing what to deploy: compose services, revision flags, scale and CPU/memory changes."""

from __future__ import annotations

import re
from typing import Any, Mapping

import yaml

from .envvars import EnvVar, Secret
from .settings import validate_cpu_and_memory

DEPLOY_DOCKER_COMPOSE_LABEL = "aws.ecs.fargate.deploy"

_SCALE = re.compile(r"[-+]?[0-9]+")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class DeployError(Exception):
    """A deployment, scale or update request is invalid."""


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _string_map(value: Any, what: str) -> dict[str, str]:
    """Normalise a compose mapping or a list of ``key=value`` strings."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return {str(key): _scalar(item) for key, item in value.items()}
    if isinstance(value, list):
        result: dict[str, str] = {}
        for item in value:
            key, _, item_value = _scalar(item).partition("=")
            result[key] = item_value
        return result
    raise DeployError(f"invalid {what} in docker compose file")


def load_compose(text: str | bytes) -> dict[str, Any]:
    """Parse docker-compose YAML, normalising each service's environment, labels and secrets."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DeployError(f"error unmarshalling docker compose file: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise DeployError("docker compose file must hold a mapping")

    services = data.get("services") or {}
    if not isinstance(services, Mapping):
        raise DeployError("services in docker compose file must be a mapping")

    normalized: dict[str, dict[str, Any]] = {}
    for name, service in services.items():
        service = dict(service) if isinstance(service, Mapping) else {}
        service["image"] = _scalar(service.get("image"))
        service["environment"] = _string_map(service.get("environment"), "environment")
        service["labels"] = _string_map(service.get("labels"), "labels")
        service["secrets"] = _string_map(service.get("secrets"), "secrets")
        normalized[str(name)] = service

    result = dict(data)
    result["services"] = normalized
    return result


def get_docker_service_to_deploy(
    compose: Mapping[str, Any],
) -> tuple[str, dict[str, Any] | None]:
    """Return the name and service to deploy, or ``("", None)`` if none is chosen.

    A single service is always chosen; among several, the first carrying the
    deploy label set to 1 is.
    """
    services = compose.get("services") or {}
    for name, service in services.items():
        if len(services) == 1:
            return name, service
        labels = _string_map((service or {}).get("labels"), "labels")
        if labels.get(DEPLOY_DOCKER_COMPOSE_LABEL) == "1":
            return name, service
    return "", None


def validate_flags(image: str, compose_file: str, revision: str) -> bool:
    """True when exactly one of image, compose file and revision is given."""
    return sum(1 for flag in (image, compose_file, revision) if flag) == 1


def convert_env_vars(service: Mapping[str, Any]) -> list[EnvVar]:
    """Return the service's environment as environment variables."""
    environment = _string_map(service.get("environment"), "environment")
    return [EnvVar(key, value) for key, value in environment.items()]


def convert_secrets(service: Mapping[str, Any]) -> list[Secret]:
    """Return the service's secrets as secret variables."""
    secrets = _string_map(service.get("secrets"), "secrets")
    return [Secret(key, value_from) for key, value_from in secrets.items()]


def _parse_int64(text: str) -> int | None:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def parse_scale_expression(expression: str, current_desired_count: int) -> int:
    """Resolve an absolute count (``5``) or a delta (``+2``, ``-1``) to a desired count."""
    invalid = DeployError(f"Invalid scale expression {expression}")
    if not _SCALE.search(expression):
        raise invalid

    if expression[0] in "+-":
        delta = _parse_int64(expression[1:])
        if delta is None:
            raise invalid
        if expression[0] == "+":
            desired = current_desired_count + delta
        else:
            desired = current_desired_count - delta
    else:
        value = _parse_int64(expression)
        if value is None:
            raise invalid
        desired = value

    if desired < 0:
        raise DeployError(f"requested scale {desired} < 0")
    return desired


def resolve_cpu_and_memory(
    cpu: str, memory: str, current_cpu: str, current_memory: str
) -> tuple[str, str]:
    """Fill an omitted CPU or memory setting from the current one and validate the pair."""
    if not cpu and not memory:
        raise DeployError("--cpu and/or --memory must be supplied")
    cpu = cpu or current_cpu
    memory = memory or current_memory
    try:
        validate_cpu_and_memory(cpu, memory)
    except ValueError as exc:
        raise DeployError(
            f"Invalid settings: {cpu} CPU units / {memory} MiB\n{exc}"
        ) from exc
    return cpu, memory