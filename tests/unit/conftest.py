# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import datetime
import ipaddress

import httpcore
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from pinwire.trust.spki import spki_pin


def make_certificate(common_name: str = "api.example.com") -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.DER)


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def make_ca_signed_chain(host: str = "127.0.0.1"):
    """Return (leaf key PEM, leaf+CA chain PEM, leaf DER, CA DER) for a server at `host`."""
    now = datetime.datetime.now(datetime.timezone.utc)
    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_cert = (
        x509.CertificateBuilder()
        .subject_name(_name("pinwire test CA"))
        .issuer_name(_name("pinwire test CA"))
        .public_key(ca_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(ca_key, hashes.SHA256())
    )
    leaf_key = ec.generate_private_key(ec.SECP256R1())
    leaf_cert = (
        x509.CertificateBuilder()
        .subject_name(_name(host))
        .issuer_name(ca_cert.subject)
        .public_key(leaf_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.SubjectAlternativeName([x509.IPAddress(ipaddress.ip_address(host))]), critical=False)
        .sign(ca_key, hashes.SHA256())
    )
    key_pem = leaf_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    chain_pem = leaf_cert.public_bytes(serialization.Encoding.PEM) + ca_cert.public_bytes(serialization.Encoding.PEM)
    return (
        key_pem,
        chain_pem,
        leaf_cert.public_bytes(serialization.Encoding.DER),
        ca_cert.public_bytes(serialization.Encoding.DER),
    )


@pytest.fixture(scope="session")
def leaf_cert() -> bytes:
    return make_certificate("api.example.com")


@pytest.fixture(scope="session")
def other_cert() -> bytes:
    return make_certificate("attacker.example.net")


@pytest.fixture(scope="session")
def leaf_pin(leaf_cert) -> str:
    return spki_pin(leaf_cert)


def http_response(status: int, body: bytes = b"", content_type: str = "application/json") -> bytes:
    reason = {200: b"OK", 201: b"Created", 404: b"Not Found", 500: b"Internal Server Error"}.get(status, b"Status")
    head = b"HTTP/1.1 %d %s\r\nContent-Type: %s\r\nContent-Length: %d\r\n\r\n" % (
        status,
        reason,
        content_type.encode("ascii"),
        len(body),
    )
    return head + body


class FakeSSLObject:
    def __init__(self, chain):
        self._chain = chain

    def selected_alpn_protocol(self):
        return "http/1.1"

    def get_verified_chain(self):
        return list(self._chain)


class FakeTLSStream(httpcore.AsyncNetworkStream):
    """In-memory stream that serves canned bytes and presents `chain` after start_tls."""

    def __init__(self, buffer: list[bytes], chain):
        self._buffer = buffer
        self._chain = chain
        self._tls = False
        self.closed = False

    async def read(self, max_bytes, timeout=None):  # noqa: ARG002
        return self._buffer.pop(0) if self._buffer else b""

    async def write(self, buffer, timeout=None):  # noqa: ARG002
        return None

    async def aclose(self):
        self.closed = True

    async def start_tls(self, ssl_context, server_hostname=None, timeout=None):  # noqa: ARG002
        self._tls = True
        return self

    def get_extra_info(self, info):
        if info == "ssl_object" and self._tls:
            return FakeSSLObject(self._chain)
        return None


class FakeTLSBackend(httpcore.AsyncNetworkBackend):
    def __init__(self, responses: list[bytes], chain):
        self.responses = list(responses)
        self.chain = chain
        self.streams: list[FakeTLSStream] = []

    async def connect_tcp(self, host, port, timeout=None, local_address=None, socket_options=None):  # noqa: ARG002
        stream = FakeTLSStream(self.responses, self.chain)
        self.streams.append(stream)
        return stream

    async def connect_unix_socket(self, path, timeout=None, socket_options=None):  # noqa: ARG002
        raise NotImplementedError

    async def sleep(self, seconds):  # noqa: ARG002
        return None
