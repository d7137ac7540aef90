import os

import pytest

from fargate_cli.acm import (
    Certificate,
    CertificateResourceRecord,
    Certificates,
    CertificateValidation,
    SDKClient,
    validate_alias,
    validate_domain_name,
)

CERT_ARN = (
    "arn:aws:acm:us-east-1:123456789012:certificate/"
    "12345678-1234-1234-1234-123456789012"
)


class _Paginator:
    def __init__(self, pages, error=None):
        self._pages = pages
        self._error = error

    def paginate(self):
        for page in self._pages:
            yield page
        if self._error is not None:
            raise self._error


class FakeACM:
    def __init__(self, responses=None, error=None, pages=None):
        self.calls = []
        self._responses = responses or {}
        self._error = error
        self._pages = pages or []

    def _call(self, name, kwargs):
        self.calls.append((name, kwargs))
        if self._error is not None:
            raise self._error
        return self._responses.get(name, {})

    def delete_certificate(self, **kwargs):
        return self._call("delete_certificate", kwargs)

    def import_certificate(self, **kwargs):
        return self._call("import_certificate", kwargs)

    def describe_certificate(self, **kwargs):
        return self._call("describe_certificate", kwargs)

    def request_certificate(self, **kwargs):
        return self._call("request_certificate", kwargs)

    def get_paginator(self, name):
        self.calls.append(("get_paginator", name))
        return _Paginator(self._pages, self._error)


@pytest.mark.parametrize(
    "alias,message",
    [
        ("invalid", "An alias requires at least 2 octets"),
        ("." * 253, "An alias cannot exceed 253 octets"),
        ("a" * 255, "An alias must be between 1 and 253 characters in length"),
        ("", "An alias must be between 1 and 253 characters in length"),
    ],
)
def test_validate_alias_errors(alias, message):
    with pytest.raises(ValueError) as info:
        validate_alias(alias)
    assert message in str(info.value)


def test_validate_alias_valid():
    assert validate_alias("valid.example.com") is None


@pytest.mark.parametrize(
    "domain,message",
    [
        ("invalid", "The domain name requires at least 2 octets"),
        ("." * 63, "The domain name cannot exceed 63 octets"),
        ("a" * 255, "The domain name must be between 1 and 253 characters in length"),
        ("", "The domain name must be between 1 and 253 characters in length"),
    ],
)
def test_validate_domain_name_errors(domain, message):
    with pytest.raises(ValueError) as info:
        validate_domain_name(domain)
    assert message in str(info.value)


def test_validate_domain_name_valid():
    assert validate_domain_name("valid.example.com") is None


@pytest.mark.parametrize(
    "status,expected", [("PENDING_VALIDATION", True), ("ISSUED", False), ("", False)]
)
def test_certificate_is_pending_validation(status, expected):
    assert Certificate(status=status).is_pending_validation() is expected


@pytest.mark.parametrize(
    "status,expected", [("ISSUED", True), ("PENDING_VALIDATION", False), ("", False)]
)
def test_certificate_is_issued(status, expected):
    assert Certificate(status=status).is_issued() is expected


@pytest.mark.parametrize(
    "status,expected", [("PENDING_VALIDATION", True), ("SUCCESS", False), ("", False)]
)
def test_validation_is_pending_validation(status, expected):
    assert CertificateValidation(status=status).is_pending_validation() is expected


@pytest.mark.parametrize(
    "status,expected", [("SUCCESS", True), ("PENDING_VALIDATION", False), ("", False)]
)
def test_validation_is_success(status, expected):
    assert CertificateValidation(status=status).is_success() is expected


@pytest.mark.parametrize(
    "status,expected", [("FAILED", True), ("PENDING_VALIDATION", False), ("", False)]
)
def test_validation_is_failed(status, expected):
    assert CertificateValidation(status=status).is_failed() is expected


def test_resource_record_string_empty():
    assert CertificateValidation().resource_record_string() == ""


def test_resource_record_string():
    validation = CertificateValidation(
        resource_record=CertificateResourceRecord(type="CNAME", name="name", value="value")
    )
    assert validation.resource_record_string() == "CNAME name -> value"


def test_add_validation():
    certificate = Certificate()
    validation = CertificateValidation(status="SUCCESS")
    certificate.add_validation(validation)
    assert certificate.validations == [validation]


def test_certificates_get_certificates():
    certificates = Certificates(
        [
            Certificate(domain_name="staging.example.com", arn="staging.example.com-1"),
            Certificate(domain_name="www.example.com", arn="www.example.com-1"),
            Certificate(domain_name="www.example.com", arn="www.example.com-2"),
        ]
    )
    assert certificates.get_certificates("staging.example.com") == [certificates[0]]
    assert certificates.get_certificates("www.example.com") == [
        certificates[1],
        certificates[2],
    ]
    assert certificates.get_certificates("www.amazon.com") == []


def test_request_certificate():
    fake = FakeACM(responses={"request_certificate": {"CertificateArn": CERT_ARN}})
    arn = SDKClient(fake).request_certificate("*.example.com", ["example-other.com"])
    assert arn == CERT_ARN
    assert fake.calls == [
        (
            "request_certificate",
            {
                "DomainName": "*.example.com",
                "ValidationMethod": "DNS",
                "SubjectAlternativeNames": ["example-other.com"],
            },
        )
    ]


def test_request_certificate_without_aliases():
    fake = FakeACM(responses={"request_certificate": {"CertificateArn": CERT_ARN}})
    SDKClient(fake).request_certificate("www.example.com", [])
    assert fake.calls[0][1] == {
        "DomainName": "www.example.com",
        "ValidationMethod": "DNS",
    }


def test_request_certificate_error():
    aliases = [f"example-{i}.com" for i in range(10)]
    fake = FakeACM(error=RuntimeError("certificate has too many domains"))
    with pytest.raises(RuntimeError, match="too many domains"):
        SDKClient(fake).request_certificate("*.example.com", aliases)
    assert fake.calls[0][1]["SubjectAlternativeNames"] == aliases


def test_list_certificates():
    pages = [
        {
            "CertificateSummaryList": [
                {"DomainName": "www.example.com", "CertificateArn": CERT_ARN}
            ]
        }
    ]
    certificates = SDKClient(FakeACM(pages=pages)).list_certificates()
    assert len(certificates) == 1
    assert certificates[0].domain_name == "www.example.com"
    assert certificates[0].arn == CERT_ARN


def test_list_certificates_error():
    fake = FakeACM(pages=[{}], error=RuntimeError(":-("))
    with pytest.raises(RuntimeError):
        SDKClient(fake).list_certificates()


def test_delete_certificate():
    fake = FakeACM()
    SDKClient(fake).delete_certificate(CERT_ARN)
    assert fake.calls == [("delete_certificate", {"CertificateArn": CERT_ARN})]


def test_delete_certificate_error():
    with pytest.raises(RuntimeError):
        SDKClient(FakeACM(error=RuntimeError(":-("))).delete_certificate(CERT_ARN)


def test_inflate_certificate():
    response = {
        "Certificate": {
            "Type": "AMAZON_ISSUED",
            "Status": "PENDING_VALIDATION",
            "SubjectAlternativeNames": ["staging.example.com"],
            "DomainValidationOptions": [
                {
                    "ValidationStatus": "SUCCESS",
                    "DomainName": "staging.example.com",
                    "ResourceRecord": {
                        "Name": "_beeed67ae3f2d83f6cd3e19a8064947b.staging.example.com",
                        "Type": "CNAME",
                        "Value": "_6ddc33cd42c3fe3d5eca4cb075013a0a.acm-validations.aws.",
                    },
                },
                {
                    "ValidationStatus": "PENDING_VALIDATION",
                    "DomainName": "www.example.com",
                    "ResourceRecord": {
                        "Name": "_beeed67ae3f2d83f6cd3e19a8064947b.www.example.com",
                        "Type": "CNAME",
                        "Value": "_6ddc33cd42c3fe3d5eca4cb075013a0a.acm-validations.aws.",
                    },
                },
            ],
        }
    }
    fake = FakeACM(responses={"describe_certificate": response})
    certificate = Certificate(domain_name="www.example.com", arn=CERT_ARN)
    SDKClient(fake).inflate_certificate(certificate)

    assert fake.calls == [("describe_certificate", {"CertificateArn": CERT_ARN})]
    assert certificate.domain_name == "www.example.com"
    assert certificate.arn == CERT_ARN
    assert certificate.type == "AMAZON_ISSUED"
    assert certificate.status == "PENDING_VALIDATION"
    assert certificate.subject_alternative_names == ["staging.example.com"]
    assert len(certificate.validations) == 2
    assert certificate.validations[0].is_success()
    assert certificate.validations[1].resource_record.name == (
        "_beeed67ae3f2d83f6cd3e19a8064947b.www.example.com"
    )


def test_inflate_certificate_without_resource_record():
    response = {
        "Certificate": {
            "Status": "ISSUED",
            "DomainValidationOptions": [
                {"ValidationStatus": "SUCCESS", "DomainName": "www.example.com"}
            ],
        }
    }
    certificate = Certificate(arn=CERT_ARN)
    SDKClient(FakeACM(responses={"describe_certificate": response})).inflate_certificate(
        certificate
    )
    assert certificate.validations[0].resource_record_string() == ""


def test_inflate_certificate_error():
    certificate = Certificate(arn=CERT_ARN, domain_name="www.example.com")
    with pytest.raises(RuntimeError):
        SDKClient(FakeACM(error=RuntimeError(":-("))).inflate_certificate(certificate)


def test_import_certificate():
    dummy = os.urandom(10)
    fake = FakeACM(responses={"import_certificate": {"CertificateArn": CERT_ARN}})
    arn = SDKClient(fake).import_certificate(dummy, dummy, dummy)
    assert arn == CERT_ARN
    assert fake.calls == [
        (
            "import_certificate",
            {"Certificate": dummy, "PrivateKey": dummy, "CertificateChain": dummy},
        )
    ]


def test_import_certificate_without_chain():
    fake = FakeACM(responses={"import_certificate": {"CertificateArn": CERT_ARN}})
    SDKClient(fake).import_certificate(b"cert", b"key", b"")
    assert "CertificateChain" not in fake.calls[0][1]


def test_import_certificate_error():
    with pytest.raises(RuntimeError):
        SDKClient(FakeACM(error=RuntimeError(":-("))).import_certificate(b"", b"", b"")


def test_list_certificate_domain_names():
    pages = [
        {
            "CertificateSummaryList": [
                {"DomainName": "www.example.com", "CertificateArn": "arn-1"},
                {"DomainName": "api.example.com", "CertificateArn": "arn-2"},
                {"DomainName": "old.example.com", "CertificateArn": "arn-3"},
            ]
        }
    ]
    client = SDKClient(FakeACM(pages=pages))
    assert client.list_certificate_domain_names(["arn-3", "arn-1"]) == [
        "www.example.com",
        "old.example.com",
    ]


def test_list_certificate_domain_names_on_error_is_empty():
    client = SDKClient(FakeACM(error=RuntimeError(":-(")))
    assert client.list_certificate_domain_names(["arn-1"]) == []