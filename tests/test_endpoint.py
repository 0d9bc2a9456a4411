import pytest

from procwire import ConfigurationError, build_endpoint


@pytest.mark.parametrize(
    "host, port, path, expected",
    [
        ("http://localhost", None, None, "http://localhost"),
        ("http://localhost", 80, None, "http://localhost"),
        ("https://api.example.com", 443, None, "https://api.example.com"),
        ("http://localhost", 443, None, "http://localhost:443"),
        ("https://api.example.com", 80, None, "https://api.example.com:80"),
        ("http://localhost", 8081, None, "http://localhost:8081"),
        ("http://localhost", 8081, "_rpc", "http://localhost:8081/_rpc"),
        ("http://localhost", 8081, "/_rpc", "http://localhost:8081/_rpc"),
        ("http://localhost", None, "//api/rpc", "http://localhost/api/rpc"),
        ("http://localhost/", None, "/_rpc", "http://localhost/_rpc"),
        ("http://localhost", None, "", "http://localhost"),
        ("http://localhost", None, "/", "http://localhost"),
        ("HTTPS://Example.com", None, None, "https://Example.com"),
        ("http://127.0.0.1", 8060, None, "http://127.0.0.1:8060"),
    ],
)
def test_build_endpoint(host, port, path, expected):
    assert build_endpoint(host, port, path) == expected


@pytest.mark.parametrize("host", ["", "localhost", "ftp://files.example.com", "http://", "://x"])
def test_build_endpoint_rejects_bad_host(host):
    with pytest.raises(ConfigurationError):
        build_endpoint(host)


@pytest.mark.parametrize("port", [0, -1, 65536, True, "8080"])
def test_build_endpoint_rejects_bad_port(port):
    with pytest.raises(ConfigurationError):
        build_endpoint("http://localhost", port)


def test_build_endpoint_keeps_port_written_in_host():
    assert build_endpoint("http://localhost:9000", None, "_rpc") == "http://localhost:9000/_rpc"


@pytest.mark.parametrize(
    "host, port",
    [
        ("http://h/api", 8081),
        ("http://h/api", None),
        ("http://h:9000", 8081),
        ("http://h?x=1", None),
        ("http://h#top", None),
        ("http://h:port", None),
    ],
)
def test_build_endpoint_rejects_host_with_path_or_port(host, port):
    with pytest.raises(ConfigurationError):
        build_endpoint(host, port)
