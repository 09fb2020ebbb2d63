from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from agent_start.constants import DEFAULT_ASSET_REPO


class CommandType(str, Enum):
    INTERACTIVE = "interactive"
    PROMPT = "prompt"
    TASK = "task"


class AssetKind(str, Enum):
    AGENTS = "agents"
    ROLES = "roles"
    CONTEXTS = "contexts"
    TASKS = "tasks"

    @property
    def table_name(self) -> str:
        """Top-level TOML table holding a single downloaded asset."""
        return self.value[:-1]


@dataclass(frozen=True)
class Settings:
    default_agent: str = ""
    default_role: str = ""
    log_level: str = ""
    shell: str = ""
    command_timeout: int = 0
    asset_download: Optional[bool] = None
    asset_repo: str = ""
    asset_path: str = ""

    @property
    def download_allowed(self) -> bool:
        return self.asset_download is not False

    @property
    def repo(self) -> str:
        return self.asset_repo or DEFAULT_ASSET_REPO


@dataclass(frozen=True)
class Agent:
    name: str
    bin: str = ""
    command: str = ""
    description: str = ""
    url: str = ""
    models_url: str = ""
    default_model: str = ""
    models: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UTDInput:
    file: str = ""
    command: str = ""
    prompt: str = ""
    shell: str = ""
    command_timeout: int = 0

    def is_empty(self) -> bool:
        return not (self.file or self.command or self.prompt)


@dataclass
class UTDResult:
    content: str = ""
    file_path: str = ""
    warnings: list[str] = field(default_factory=list)
    skipped: bool = False


@dataclass(frozen=True)
class Role:
    name: str
    description: str = ""
    file: str = ""
    command: str = ""
    prompt: str = ""
    shell: str = ""
    command_timeout: int = 0

    def utd_input(self) -> UTDInput:
        return UTDInput(
            file=self.file,
            command=self.command,
            prompt=self.prompt,
            shell=self.shell,
            command_timeout=self.command_timeout,
        )

    def is_simple(self) -> bool:
        return bool(self.file) and not self.command and not self.prompt


@dataclass(frozen=True)
class Context:
    name: str
    description: str = ""
    file: str = ""
    command: str = ""
    prompt: str = ""
    required: bool = False
    shell: str = ""
    command_timeout: int = 0

    def utd_input(self) -> UTDInput:
        return UTDInput(
            file=self.file,
            command=self.command,
            prompt=self.prompt,
            shell=self.shell,
            command_timeout=self.command_timeout,
        )


@dataclass(frozen=True)
class Task:
    name: str
    alias: str = ""
    description: str = ""
    role: str = ""
    agent: str = ""
    file: str = ""
    command: str = ""
    prompt: str = ""
    shell: str = ""
    command_timeout: int = 0

    def utd_input(self) -> UTDInput:
        return UTDInput(
            file=self.file,
            command=self.command,
            prompt=self.prompt,
            shell=self.shell,
            command_timeout=self.command_timeout,
        )


@dataclass
class Config:
    settings: Settings = field(default_factory=Settings)
    agents: dict[str, Agent] = field(default_factory=dict)
    roles: dict[str, Role] = field(default_factory=dict)
    contexts: dict[str, Context] = field(default_factory=dict)
    context_order: list[str] = field(default_factory=list)
    tasks: dict[str, Task] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Config":
        return cls()

    def entities(self, kind: AssetKind) -> dict:
        mapping = {
            AssetKind.AGENTS: self.agents,
            AssetKind.ROLES: self.roles,
            AssetKind.CONTEXTS: self.contexts,
            AssetKind.TASKS: self.tasks,
        }
        return mapping[kind]


@dataclass(frozen=True)
class AssetMeta:
    kind: str
    category: str
    name: str
    description: str = ""
    tags: str = ""
    bin: str = ""
    sha: str = ""
    size: int = 0
    created: Optional[datetime] = None
    updated: Optional[datetime] = None

    @property
    def tag_list(self) -> list[str]:
        return [tag.strip() for tag in self.tags.split(";") if tag.strip()]

    def as_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind,
            "category": self.category,
            "name": self.name,
            "description": self.description,
            "tags": ", ".join(self.tag_list),
            "bin": self.bin,
            "sha": self.sha,
            "size": str(self.size),
            "created": self.created.isoformat() if self.created else "",
            "updated": self.updated.isoformat() if self.updated else "",
        }


@dataclass(frozen=True)
class CachedAsset:
    kind: str
    category: str
    name: str
    path: Path
    meta: AssetMeta
