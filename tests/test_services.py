"""Tests for SRV service classification."""

import pytest

from srv_portal.routing.services import ServiceKind, classify_service, local_scheme_link


class TestClassifyService:
    """Web detection and scheme selection."""

    @pytest.mark.parametrize("service,protocol,expected", [
        ("_https", "_tcp", ServiceKind.HTTPS),
        ("_http", "_tls", ServiceKind.HTTPS),     # tls wins without _https
        ("_http", "_tcp", ServiceKind.HTTP),
        ("_HTTP", "_TLS", ServiceKind.HTTPS),
        ("_http-alt", "_tcp", ServiceKind.HTTP),
        ("_http_tls", "_tcp", ServiceKind.HTTPS),
        ("_ssh", "_tcp", ServiceKind.SSH),
        ("_SFTP", "_tcp", ServiceKind.SFTP),
        ("_rdp", "_tcp", ServiceKind.RDP),
        ("_vnc", "_tcp", ServiceKind.VNC),
        ("_minecraft", "_tcp", ServiceKind.UNKNOWN),
        ("", "", ServiceKind.UNKNOWN),
    ])
    def test_classification(self, service, protocol, expected):
        assert classify_service(service, protocol) is expected

    def test_web_kinds(self):
        assert ServiceKind.HTTP.is_web and ServiceKind.HTTP.scheme == "http"
        assert ServiceKind.HTTPS.is_web and ServiceKind.HTTPS.scheme == "https"
        assert not ServiceKind.SSH.is_web and ServiceKind.SSH.scheme is None


class TestLocalSchemeLink:
    """Links for services opened by a local client."""

    def test_ssh_link(self):
        assert local_scheme_link(ServiceKind.SSH, "shell.lan", 22) == "ssh://shell.lan:22"

    @pytest.mark.parametrize("kind", [ServiceKind.SFTP, ServiceKind.RDP, ServiceKind.VNC])
    def test_other_local_schemes(self, kind):
        assert local_scheme_link(kind, "host.lan", 1234) == f"{kind.value}://host.lan:1234"

    @pytest.mark.parametrize("kind", [ServiceKind.UNKNOWN, ServiceKind.HTTP, ServiceKind.HTTPS])
    def test_no_link(self, kind):
        assert local_scheme_link(kind, "host.lan", 1234) is None
