"""Config file loading, validation, and persistence.

Schema on disk (~/.config/propfiles/config.json):

    {
        "project_root": "/home/me/work/petclinic",
        "sorted_keys": true,
        "paths": {
            "SPRING_CONFIG_ROOT": "src/main/resources/spring"
        }
    }

Every field is optional. Keys prefixed with "_" are reserved (e.g. "_example")
and are stripped on load.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ValidationError

from propfiles.models import LogicalPath

CONFIG_PATH = Path("~/.config/propfiles/config.json").expanduser()

_README_PATH = Path("~/.config/propfiles/README.md").expanduser()

_README_CONTENT = """\
# propfiles configuration

Edit `config.json` in this directory to set defaults for the `propfiles` command.

## Schema

```json
{
    "project_root": "<directory containing pom.xml>",
    "sorted_keys": false,
    "paths": {
        "<LOGICAL_PATH>": "<directory relative to project_root>"
    }
}
```

Logical paths: ROOT, SRC_MAIN_JAVA, SRC_MAIN_RESOURCES, SRC_TEST_JAVA,
SRC_TEST_RESOURCES, SRC_MAIN_WEBAPP, SPRING_CONFIG_ROOT.

Keys prefixed with `_` (e.g. `_example`) are ignored by propfiles.
"""


class PropfilesConfig(BaseModel):
    """Defaults for locating projects and writing property files."""

    project_root: Path = Path(".")
    sorted_keys: bool = False
    paths: dict[LogicalPath, str] = {}


class ConfigError(Exception):
    """Raised when config.json exists but cannot be parsed or validated."""


def load_config() -> PropfilesConfig:
    """Load and validate the config file.

    Creates the config directory, an empty config.json, and a README on first
    run, returning the defaults.  Raises ConfigError if the file exists but is
    malformed.
    """
    if not CONFIG_PATH.exists():
        _bootstrap()
        return PropfilesConfig()

    try:
        raw: object = json.loads(CONFIG_PATH.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"config.json is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("config.json must be a JSON object at the top level")

    # Strip reserved/comment keys.
    data = {k: v for k, v in raw.items() if not k.startswith("_")}
    paths = data.get("paths")
    if isinstance(paths, dict):
        data["paths"] = {k: v for k, v in paths.items() if not k.startswith("_")}

    try:
        return PropfilesConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config: {exc}") from exc


def save_config(config: PropfilesConfig) -> None:
    """Persist config to disk, creating directories as needed."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(config.model_dump(mode="json"), indent=2))


def _bootstrap() -> None:
    """Create the config directory, an empty config.json, and a README."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text("{}\n")
    if not _README_PATH.exists():
        _README_PATH.write_text(_README_CONTENT)
