"""Certificates hosted in AWS Certificate Manager and a client for managing them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

CERTIFICATE_STATUS_ISSUED = "ISSUED"
CERTIFICATE_STATUS_PENDING_VALIDATION = "PENDING_VALIDATION"

DOMAIN_STATUS_FAILED = "FAILED"
DOMAIN_STATUS_PENDING_VALIDATION = "PENDING_VALIDATION"
DOMAIN_STATUS_SUCCESS = "SUCCESS"

VALIDATION_METHOD_DNS = "DNS"


@dataclass
class CertificateResourceRecord:
    """The DNS record used to validate a certificate."""

    type: str = ""
    name: str = ""
    value: str = ""


@dataclass
class CertificateValidation:
    """Details about how to validate a certificate for one domain."""

    status: str = ""
    domain_name: str = ""
    resource_record: CertificateResourceRecord = field(
        default_factory=CertificateResourceRecord
    )

    def is_failed(self) -> bool:
        return self.status == DOMAIN_STATUS_FAILED

    def is_pending_validation(self) -> bool:
        return self.status == DOMAIN_STATUS_PENDING_VALIDATION

    def is_success(self) -> bool:
        return self.status == DOMAIN_STATUS_SUCCESS

    def resource_record_string(self) -> str:
        """Return the resource record for display, or an empty string if there is none."""
        record = self.resource_record
        if not record.type:
            return ""
        return f"{record.type} {record.name} -> {record.value}"


@dataclass
class Certificate:
    """A certificate hosted in AWS Certificate Manager."""

    arn: str = ""
    status: str = ""
    subject_alternative_names: list[str] = field(default_factory=list)
    domain_name: str = ""
    validations: list[CertificateValidation] = field(default_factory=list)
    type: str = ""

    def add_validation(self, validation: CertificateValidation) -> None:
        self.validations.append(validation)

    def is_issued(self) -> bool:
        return self.status == CERTIFICATE_STATUS_ISSUED

    def is_pending_validation(self) -> bool:
        return self.status == CERTIFICATE_STATUS_PENDING_VALIDATION


class Certificates(list):
    """A collection of certificates."""

    def get_certificates(self, domain_name: str) -> "Certificates":
        """Return the certificates issued for the given domain name."""
        return Certificates(c for c in self if c.domain_name == domain_name)


def validate_alias(alias: str) -> None:
    """Raise ValueError if the alias has an invalid length or number of octets."""
    length = len(alias.encode("utf-8"))
    if length < 1 or length > 253:
        raise ValueError(
            f"{alias}: An alias must be between 1 and 253 characters in length"
        )
    dots = alias.count(".")
    if dots > 252:
        raise ValueError(f"{alias}: An alias cannot exceed 253 octets")
    if dots == 0:
        raise ValueError(f"{alias}: An alias requires at least 2 octets")


def validate_domain_name(domain_name: str) -> None:
    """Raise ValueError if the domain name has an invalid length or number of octets."""
    length = len(domain_name.encode("utf-8"))
    if length < 1 or length > 253:
        raise ValueError(
            f"{domain_name}: The domain name must be between 1 and 253 characters in length"
        )
    dots = domain_name.count(".")
    if dots > 62:
        raise ValueError(f"{domain_name}: The domain name cannot exceed 63 octets")
    if dots == 0:
        raise ValueError(f"{domain_name}: The domain name requires at least 2 octets")


class SDKClient:
    """Access to AWS Certificate Manager through an SDK client object.

    The wrapped client follows the boto3 ACM interface: keyword arguments in,
    response dictionaries out, and exceptions raised on failure.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    def delete_certificate(self, arn: str) -> None:
        self._client.delete_certificate(CertificateArn=arn)

    def import_certificate(
        self, certificate: bytes, private_key: bytes, certificate_chain: bytes
    ) -> str:
        """Import a certificate and return its ARN."""
        request: dict[str, Any] = {
            "Certificate": certificate,
            "PrivateKey": private_key,
        }
        if certificate_chain:
            request["CertificateChain"] = certificate_chain
        response = self._client.import_certificate(**request)
        return response.get("CertificateArn") or ""

    def inflate_certificate(self, certificate: Certificate) -> None:
        """Fetch the remaining details of a partially filled certificate."""
        response = self._client.describe_certificate(CertificateArn=certificate.arn)
        detail = response.get("Certificate") or {}

        certificate.status = detail.get("Status") or ""
        certificate.subject_alternative_names = list(
            detail.get("SubjectAlternativeNames") or []
        )
        certificate.type = detail.get("Type") or ""

        for option in detail.get("DomainValidationOptions") or []:
            validation = CertificateValidation(
                status=option.get("ValidationStatus") or "",
                domain_name=option.get("DomainName") or "",
            )
            record = option.get("ResourceRecord")
            if record is not None:
                validation.resource_record = CertificateResourceRecord(
                    type=record.get("Type") or "",
                    name=record.get("Name") or "",
                    value=record.get("Value") or "",
                )
            certificate.add_validation(validation)

    def list_certificates(self) -> Certificates:
        """Return all certificates associated with the caller's account."""
        certificates = Certificates()
        paginator = self._client.get_paginator("list_certificates")
        for page in paginator.paginate():
            for summary in page.get("CertificateSummaryList") or []:
                certificates.append(
                    Certificate(
                        arn=summary.get("CertificateArn") or "",
                        domain_name=summary.get("DomainName") or "",
                    )
                )
        return certificates

    def request_certificate(self, domain_name: str, aliases: Iterable[str]) -> str:
        """Request a new DNS-validated certificate and return its ARN."""
        request: dict[str, Any] = {
            "DomainName": domain_name,
            "ValidationMethod": VALIDATION_METHOD_DNS,
        }
        aliases = list(aliases or [])
        if aliases:
            request["SubjectAlternativeNames"] = aliases
        response = self._client.request_certificate(**request)
        return response.get("CertificateArn") or ""

    def list_certificate_domain_names(self, certificate_arns: Iterable[str]) -> list[str]:
        """Return the domain names of the certificates with the given ARNs."""
        arns = list(certificate_arns)
        try:
            certificates = self.list_certificates()
        except Exception:
            # Lookup failures only mean there is nothing to display.
            certificates = Certificates()
        return [
            certificate.domain_name
            for certificate in certificates
            for arn in arns
            if certificate.arn == arn
        ]