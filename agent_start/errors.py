from pathlib import Path


class StartError(Exception):
    """Base user-facing application error."""


class ConfigFileError(StartError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidTomlFormatError(ConfigFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid TOML format ({detail})")


class InvalidConfigSchemaError(ConfigFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class ConfigValidationError(StartError):
    def __init__(self, issues: list) -> None:
        self.issues = issues
        lines = ["configuration validation failed:"]
        lines.extend(f"  - {issue}" for issue in issues)
        super().__init__("\n".join(lines))


class EntityNotFoundError(StartError):
    kind = "entity"

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        message = f"{self.kind} {name!r} not found"
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class AgentNotFoundError(EntityNotFoundError):
    kind = "agent"


class RoleNotFoundError(EntityNotFoundError):
    kind = "role"


class TaskNotFoundError(EntityNotFoundError):
    kind = "task"


class AssetNotFoundError(EntityNotFoundError):
    kind = "asset"


class SelectionError(StartError):
    pass


class AgentSelectionError(SelectionError):
    pass


class RoleSelectionError(SelectionError):
    pass


class ModelSelectionError(SelectionError):
    pass


class ContentError(StartError):
    def __init__(self, message: str, warnings: list[str] | None = None) -> None:
        self.warnings = list(warnings or [])
        if self.warnings:
            message = f"{message}: {'; '.join(self.warnings)}"
        super().__init__(message)


class RoleLoadError(ContentError):
    pass


class TaskLoadError(ContentError):
    pass


class CommandError(StartError):
    pass


class CatalogError(StartError):
    pass


class CatalogFetchError(CatalogError):
    pass


class CatalogParseError(CatalogError):
    pass


class AssetParseError(CatalogError):
    pass


class CacheError(StartError):
    pass


class ExecutionError(StartError):
    pass
