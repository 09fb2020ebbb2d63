from typing import Final


CONFIG_DIRNAME: Final[str] = "start"
LOCAL_CONFIG_DIRNAME: Final[str] = ".start"
ASSETS_DIRNAME: Final[str] = "assets"

SETTINGS_FILENAME: Final[str] = "config.toml"
AGENTS_FILENAME: Final[str] = "agents.toml"
ROLES_FILENAME: Final[str] = "roles.toml"
CONTEXTS_FILENAME: Final[str] = "contexts.toml"
TASKS_FILENAME: Final[str] = "tasks.toml"

DEFAULT_ASSET_REPO: Final[str] = "grantcarthew/start"
DEFAULT_ASSET_BRANCH: Final[str] = "main"
CATALOG_INDEX_PATH: Final[str] = "assets/index.csv"
RAW_GITHUB_URL: Final[str] = "https://raw.githubusercontent.com"
HTTP_TIMEOUT_SECONDS: Final[int] = 30

DEFAULT_COMMAND_TIMEOUT: Final[int] = 30
DEFAULT_INSTRUCTIONS: Final[str] = "None"
ROLE_TEMP_PREFIX: Final[str] = "start-role-"
ROLE_TEMP_SUFFIX: Final[str] = ".md"

CATALOG_COLUMNS: Final[tuple[str, ...]] = (
    "type",
    "category",
    "name",
    "description",
    "tags",
    "bin",
    "sha",
    "size",
    "created",
    "updated",
)

LOG_LEVELS: Final[tuple[str, ...]] = ("quiet", "normal", "info", "verbose", "debug")
