"""Endpoint string: scheme+host, optional port, optional path. Built once per client."""
from __future__ import annotations

from urllib.parse import urlsplit

from procwire.errors import ConfigurationError

DEFAULT_PORTS = {"http": 80, "https": 443}


def build_endpoint(host: str, port: int | None = None, path: str | None = None) -> str:
    """
    host must carry the scheme (http:// or https://) and nothing after the
    authority; the path goes in path=, and a port in both host and port= is rejected.
    Default port for the scheme is omitted; path gets exactly one leading slash.
    """
    host = (host or "").strip()
    scheme, sep, rest = host.partition("://")
    scheme = scheme.lower()
    authority = rest.rstrip("/")
    if not sep or scheme not in DEFAULT_PORTS or not authority:
        raise ConfigurationError(f"host must look like http://<host> or https://<host>, got {host!r}")
    if any(c in authority for c in "/?#"):
        raise ConfigurationError(f"host must not carry a path, query or fragment (use path=), got {host!r}")
    try:
        host_port = urlsplit(f"{scheme}://{authority}").port
    except ValueError:
        raise ConfigurationError(f"host has an invalid port: {host!r}") from None

    endpoint = f"{scheme}://{authority}"

    if port is not None:
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigurationError(f"port must be an integer in 1..65535, got {port!r}")
        if host_port is not None:
            raise ConfigurationError(f"port given twice: {host!r} and port={port}")
        if port != DEFAULT_PORTS[scheme]:
            endpoint += f":{port}"

    if path:
        path = path.strip()
        if path.strip("/"):
            endpoint += "/" + path.lstrip("/")

    return endpoint
