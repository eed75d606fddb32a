"""
Prisma Layer Builder — stage the database client as a shared Lambda layer.

The Prisma client ships one query-engine binary per platform. Packaging it
once as a layer (instead of once per function) and keeping only the binary
built for the Lambda OS keeps every function small.

Layout produced:
    <destination>/<namespace>/node_modules/.prisma/...
    <destination>/<namespace>/node_modules/@prisma/client/...
    <destination>/<namespace>/node_modules/prisma/build/...
"""

import os
import shutil
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, List, Sequence

from aws_lambda_powertools import Logger

from config import LayerSettings
from errors import LayerFilesystemError, MissingInputError

logger = Logger(service="prisma-stack")


def should_exclude(path, suffix: str = "so.node", markers: Sequence[str] = ("rhel",)) -> bool:
    """
    Decide whether a file is left out of the layer.

    Native binaries (names ending in `suffix`) are dropped unless the path
    mentions one of the platform `markers`. Everything else is kept.
    """
    text = path if isinstance(path, str) else Path(path).as_posix()
    if not text.endswith(suffix):
        return False
    return not any(marker in text for marker in markers)


@dataclass(frozen=True)
class LayerCopy:
    """One source directory and the place it lands in the layer."""

    relative: str
    source: Path
    destination: Path


@dataclass
class LayerStagingPlan:
    source_root: Path
    destination_root: Path
    copies: List[LayerCopy] = field(default_factory=list)
    exclude: Callable[[str], bool] = should_exclude

    def missing_sources(self) -> List[Path]:
        return [c.source for c in self.copies if not c.source.exists()]


def plan_layer(settings: LayerSettings) -> LayerStagingPlan:
    """Turn layer settings into an ordered staging plan."""
    source_root = Path(settings.source_root)
    destination_root = Path(settings.destination)
    copies = [
        LayerCopy(
            relative=rel,
            source=source_root / rel,
            destination=destination_root / settings.namespace / rel,
        )
        for rel in settings.sources
    ]
    exclude = partial(
        should_exclude,
        suffix=settings.binary_suffix,
        markers=settings.platform_markers,
    )
    return LayerStagingPlan(
        source_root=source_root,
        destination_root=destination_root,
        copies=copies,
        exclude=exclude,
    )


def _ignore_for(plan: LayerStagingPlan, skipped: List[str]):
    """Adapt the plan's predicate to shutil.copytree's ignore callback."""

    def ignore(directory, names):
        ignored = set()
        for name in names:
            full = os.path.join(directory, name)
            if os.path.isdir(full):
                continue
            relative = Path(os.path.relpath(full, plan.source_root)).as_posix()
            if plan.exclude(relative):
                ignored.add(name)
                skipped.append(relative)
        return ignored

    return ignore


def reset_destination(path: Path) -> None:
    """Remove the destination tree (if any) and recreate it empty."""
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LayerFilesystemError(
            f"Could not reset layer directory {path}: {e}",
            details={"path": str(path)},
        ) from e


def build_layer(plan: LayerStagingPlan) -> Path:
    """
    Stage every source of the plan into the layer directory.

    Sources are checked before anything is deleted, so a missing input
    leaves the previous layer directory untouched.

    Returns:
        The layer root, ready for `lambda.Code.from_asset`.

    Raises:
        MissingInputError: a source directory does not exist
        LayerFilesystemError: the destination could not be reset or written
    """
    missing = plan.missing_sources()
    if missing:
        logger.error("Layer sources missing", missing=[str(p) for p in missing])
        raise MissingInputError(missing, details={"source_root": str(plan.source_root)})

    reset_destination(plan.destination_root)
    logger.info("Layer directory reset", path=str(plan.destination_root))

    for copy in plan.copies:
        skipped: List[str] = []
        try:
            shutil.copytree(
                copy.source,
                copy.destination,
                ignore=_ignore_for(plan, skipped),
                dirs_exist_ok=True,
            )
        except OSError as e:
            raise LayerFilesystemError(
                f"Could not copy {copy.relative} into the layer: {e}",
                details={"source": str(copy.source), "destination": str(copy.destination)},
            ) from e
        logger.info("Copied layer source", source=copy.relative, skipped_binaries=len(skipped))

    logger.info("Layer staged", path=str(plan.destination_root))
    return plan.destination_root
