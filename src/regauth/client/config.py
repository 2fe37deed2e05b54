"""Registry connection settings."""

from __future__ import annotations

from dataclasses import dataclass

VERSION = "0.1.0"
DEFAULT_USER_AGENT = f"regauth/{VERSION}"


@dataclass(frozen=True)
class RegistryConfig:
    """Immutable settings for talking to one registry.

    Validated on construction; invalid settings raise ValueError.
    """

    registry: str  # host[:port], e.g. "registry-1.docker.io"
    insecure_registry: bool = False  # plain http instead of https
    username: str | None = None
    password: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    accept_invalid_certs: bool = False
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.registry:
            raise ValueError("registry must not be empty")
        if "://" in self.registry or "/" in self.registry:
            raise ValueError(
                f"registry must be a host[:port] without scheme or path, "
                f"got '{self.registry}'"
            )
        if (self.username is None) != (self.password is None):
            raise ValueError("username and password must be set together")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @property
    def base_url(self) -> str:
        scheme = "http" if self.insecure_registry else "https"
        return f"{scheme}://{self.registry}"

    @property
    def credentials(self) -> tuple[str, str] | None:
        if self.username is None or self.password is None:
            return None
        return self.username, self.password
