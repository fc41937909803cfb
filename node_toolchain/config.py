"""Tunables for probing, installing and npm runs.

Every field may be overridden from the environment as
``NODE_TOOLCHAIN_<FIELD>`` (e.g. ``NODE_TOOLCHAIN_PROBE_TIMEOUT=10``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from node_toolchain.errors import InvalidArgument
from node_toolchain.runtime.environment import Environment

ENV_PREFIX = "NODE_TOOLCHAIN_"


class ToolchainConfig(BaseModel):
    """Timeouts are in seconds."""

    model_config = ConfigDict(frozen=True)

    probe_timeout: float = Field(5.0, gt=0)
    exists_timeout: float = Field(3.0, gt=0)
    install_timeout_windows: float = Field(5 * 60.0, gt=0)
    install_timeout_macos: float = Field(10 * 60.0, gt=0)
    install_timeout_linux: float = Field(10 * 60.0, gt=0)
    npm_install_timeout_windows: float = Field(20 * 60.0, gt=0)
    npm_install_timeout_unix: float = Field(15 * 60.0, gt=0)
    marker_file_name: str = Field("npm-install.lockhash", min_length=1)
    hosted_tool_cache_default: str = "C:\\hostedtoolcache\\windows"

    @classmethod
    def from_env(cls, environment: Environment | None = None) -> ToolchainConfig:
        env = environment or Environment()
        overrides: dict[str, str] = {}
        for name in cls.model_fields:
            value = env.get(ENV_PREFIX + name.upper())
            if value is not None and value.strip():
                overrides[name] = value.strip()
        try:
            return cls.model_validate(overrides)
        except ValidationError as exc:
            raise InvalidArgument(f"Invalid {ENV_PREFIX}* configuration: {exc}") from exc
