"""Provider registry backed by a JSON file.

The file is re-read on every access to `providers`, so agents added,
removed or renamed by a deploy are seen by the next cleanup run without
a restart. Example:

    {
      "providers": [
        {
          "name": "aws",
          "agents": [
            {
              "agent_type": "prod/us-east-1/ClusterCachingAgent",
              "provided_data_types": [
                {"type_name": "serverGroups", "authority": "authoritative"},
                {"type_name": "applications", "authority": "informative"}
              ]
            },
            {"agent_type": "prod/us-east-1/ReservationReportAgent"}
          ]
        }
      ]
    }

Agents without "provided_data_types" do not write cache records.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cachesweep.domain.entities import AgentDataType
from cachesweep.domain.enums import Authority
from cachesweep.domain.exceptions import RegistryException


class DataTypeConfig(BaseModel):
    """One declared data type of a caching agent."""

    model_config = ConfigDict(extra="forbid")

    type_name: str = Field(..., min_length=1)
    authority: Authority = Authority.AUTHORITATIVE


class AgentConfig(BaseModel):
    """One agent; caching agents list their data types."""

    model_config = ConfigDict(extra="forbid")

    agent_type: str = Field(..., min_length=1)
    provided_data_types: list[DataTypeConfig] | None = None


class ProviderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    agents: list[AgentConfig] = Field(default_factory=list)


class RegistryConfig(BaseModel):
    providers: list[ProviderConfig] = Field(default_factory=list)


@dataclass(frozen=True)
class ScheduledAgent:
    """An agent that does not produce cache data."""

    agent_type: str


@dataclass(frozen=True)
class ConfiguredCachingAgent:
    """A caching agent (satisfies the CachingAgent protocol)."""

    agent_type: str
    provided_data_types: tuple[AgentDataType, ...]


@dataclass(frozen=True)
class ConfiguredProvider:
    provider_name: str
    agents: tuple[ScheduledAgent | ConfiguredCachingAgent, ...]


def _build_agent(config: AgentConfig) -> ScheduledAgent | ConfiguredCachingAgent:
    if config.provided_data_types is None:
        return ScheduledAgent(agent_type=config.agent_type)
    return ConfiguredCachingAgent(
        agent_type=config.agent_type,
        provided_data_types=tuple(
            AgentDataType(type_name=dt.type_name, authority=dt.authority)
            for dt in config.provided_data_types
        ),
    )


def build_providers(config: RegistryConfig) -> list[ConfiguredProvider]:
    """Turn validated registry config into provider objects."""
    return [
        ConfiguredProvider(
            provider_name=provider.name,
            agents=tuple(_build_agent(agent) for agent in provider.agents),
        )
        for provider in config.providers
    ]


class JsonProviderRegistry:
    """Implements IProviderRegistry from a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def providers(self) -> list[ConfiguredProvider]:
        """Load and validate the registry file.

        Raises:
            RegistryException: If the file is missing, unreadable, or invalid.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryException(str(self._path), str(e)) from e
        try:
            config = RegistryConfig.model_validate_json(raw)
        except ValidationError as e:
            raise RegistryException(str(self._path), str(e)) from e
        return build_providers(config)
