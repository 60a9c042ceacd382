"""Contract-testing helpers built around the Specmatic stub server."""

from .stub_server import (
    SpecmaticStubServer,
    StubServerError,
    StubServerTimeoutError,
    docker_available,
)
from .stubs import StubDefinition, StubDefinitionBuilder, StubRequest, StubResponse

__all__ = [
    "SpecmaticStubServer",
    "StubServerError",
    "StubServerTimeoutError",
    "docker_available",
    "StubDefinition",
    "StubDefinitionBuilder",
    "StubRequest",
    "StubResponse",
]
