"""
Stack configuration for the Prisma stack.

The execution mode is resolved exactly once per synthesis into an
ExecutionMode value, and everything else reads the resulting StackSettings.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from errors import ConfigurationError

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Defaults; load_settings() overrides them from the environment
DATABASE_NAME = "prismatestdb"
DATABASE_USER = "postgres"
DATABASE_PASSWORD_SECRET = "postgres-password"
POWERTOOLS_LAYER_VERSION = "7"

# Layer defaults
LAYER_SOURCES = (
    "node_modules/.prisma",
    "node_modules/@prisma/client",
    "node_modules/prisma/build",
)
LAYER_PATH = ".build/layers/prisma"
LAYER_NAMESPACE = "nodejs"
NATIVE_BINARY_SUFFIX = "so.node"
LAYER_PLATFORM_MARKERS = "rhel"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


class ExecutionMode(str, Enum):
    LOCAL = "local"
    DEPLOYED = "deployed"

    @property
    def is_local(self) -> bool:
        return self is ExecutionMode.LOCAL


class LayerSettings(BaseModel):
    """Where the layer comes from, where it goes and which binaries it keeps."""

    model_config = ConfigDict(frozen=True)

    source_root: Path = PROJECT_ROOT
    destination: Path = PROJECT_ROOT / LAYER_PATH
    sources: Tuple[str, ...] = LAYER_SOURCES
    namespace: str = LAYER_NAMESPACE
    binary_suffix: str = NATIVE_BINARY_SUFFIX
    platform_markers: Tuple[str, ...] = (LAYER_PLATFORM_MARKERS,)


class StackSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: ExecutionMode
    local_database_url: Optional[str] = None
    database_name: str = DATABASE_NAME
    database_user: str = DATABASE_USER
    database_password_secret: str = DATABASE_PASSWORD_SECRET
    handler_asset: Path = PROJECT_ROOT / "src"
    handler: str = "lambda_handler.handler"
    powertools_layer_version: str = POWERTOOLS_LAYER_VERSION
    layer: LayerSettings = LayerSettings()


def _parse_flag(value, source: str) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Cannot interpret {source}={value!r} as a boolean",
        details={"source": source, "value": value},
    )


def resolve_execution_mode(context_value=None, env: Optional[dict] = None) -> ExecutionMode:
    """
    Resolve local vs deployed mode.

    The CDK context flag (`-c local=true`) takes precedence over the
    IS_LOCAL environment variable. Neither set means deployed.
    """
    env = os.environ if env is None else env

    flag = _parse_flag(context_value, "context:local")
    if flag is None:
        flag = _parse_flag(env.get("IS_LOCAL"), "IS_LOCAL")

    return ExecutionMode.LOCAL if flag else ExecutionMode.DEPLOYED


def parse_markers(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated marker list, dropping blanks."""
    markers = tuple(m.strip() for m in raw.split(",") if m.strip())
    if not markers:
        raise ConfigurationError("LAYER_PLATFORM_MARKERS must name at least one marker")
    return markers


def load_settings(app, env: Optional[dict] = None) -> StackSettings:
    """
    Build the StackSettings for one synthesis.

    Args:
        app: the CDK app (anything with `node.try_get_context`)
        env: environment mapping, defaults to os.environ

    Raises:
        ConfigurationError: local mode without DATABASE_URL, or a bad flag value
    """
    env = os.environ if env is None else env
    mode = resolve_execution_mode(app.node.try_get_context("local"), env)

    local_database_url = None
    if mode.is_local:
        local_database_url = env.get("DATABASE_URL")
        if not local_database_url:
            raise ConfigurationError(
                "DATABASE_URL must be set when running in local mode",
                details={"mode": mode.value},
            )

    layer = LayerSettings(
        destination=PROJECT_ROOT / env.get("LAYER_PATH", LAYER_PATH),
        platform_markers=parse_markers(env.get("LAYER_PLATFORM_MARKERS", LAYER_PLATFORM_MARKERS)),
    )

    return StackSettings(
        mode=mode,
        local_database_url=local_database_url,
        database_name=env.get("DATABASE_NAME", DATABASE_NAME),
        database_user=env.get("DATABASE_USER", DATABASE_USER),
        database_password_secret=env.get("DATABASE_PASSWORD_SECRET", DATABASE_PASSWORD_SECRET),
        powertools_layer_version=env.get("POWERTOOLS_LAYER_VERSION", POWERTOOLS_LAYER_VERSION),
        layer=layer,
    )
