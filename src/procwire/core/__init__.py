from procwire.core.config import CallMode, ClientConfig, Config
from procwire.core.endpoint import build_endpoint

__all__ = [
    "CallMode",
    "ClientConfig",
    "Config",
    "build_endpoint",
]
