"""
Checkpoint persistence — atomic read/write for ScaffoldState.

The checkpoint lives at <project>/.scaffolder-state.json. Writes are
atomic (write to temp file in the same directory, fsync, then rename)
so a crash mid-write leaves either the previous checkpoint or none,
never a torn one.

Unlike a cache, a checkpoint that exists but can't be read is NOT
treated as absent: it's the only record of resumable progress, so
the caller must decide what to do with it.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from scaffolder.core.models.state import CHECKPOINT_VERSION, ScaffoldState

logger = logging.getLogger(__name__)

CHECKPOINT_FILENAME = ".scaffolder-state.json"


class CheckpointError(Exception):
    """Base class for checkpoint read/write failures."""


class CorruptCheckpointError(CheckpointError):
    """A checkpoint file exists but is not a valid ScaffoldState."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Checkpoint {path} is corrupted: {reason}")


class UnsupportedCheckpointVersionError(CorruptCheckpointError):
    """A checkpoint was written with a schema version this build can't read."""

    def __init__(self, path: Path, version: object):
        self.version = version
        super().__init__(
            path,
            f"unsupported version {version!r} (expected {CHECKPOINT_VERSION})",
        )


class CheckpointWriteError(CheckpointError):
    """A checkpoint could not be persisted."""


def checkpoint_path(project_path: Path) -> Path:
    """Get the checkpoint file path for a project directory."""
    return project_path / CHECKPOINT_FILENAME


def load_checkpoint(path: Path) -> ScaffoldState | None:
    """Load a checkpoint from disk.

    Args:
        path: Path to the checkpoint JSON file.

    Returns:
        The stored ScaffoldState, or None if the file doesn't exist.

    Raises:
        CorruptCheckpointError: The file exists but can't be parsed or validated.
        UnsupportedCheckpointVersionError: The file declares an unknown version.
    """
    if not path.exists():
        return None

    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, UnicodeDecodeError) as e:
        raise CorruptCheckpointError(path, f"unreadable ({e})") from e
    except json.JSONDecodeError as e:
        raise CorruptCheckpointError(path, f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise CorruptCheckpointError(path, f"expected an object, got {type(data).__name__}")

    version = data.get("version")
    if version != CHECKPOINT_VERSION:
        raise UnsupportedCheckpointVersionError(path, version)

    try:
        state = ScaffoldState.model_validate(data)
    except ValidationError as e:
        raise CorruptCheckpointError(path, f"schema mismatch ({e.error_count()} errors)") from e

    logger.debug("Loaded checkpoint from %s (updated_at=%s)", path, state.updated_at)
    return state


def save_checkpoint(state: ScaffoldState, path: Path) -> None:
    """Save a checkpoint (atomic write).

    Refreshes ``updated_at`` first. The parent directory must already
    exist: a checkpoint never creates the project directory.

    Raises:
        CheckpointWriteError: If the write or rename fails. The previous
            checkpoint (or its absence) is left untouched.
    """
    state.touch()
    content = json.dumps(state.to_document(), indent=2, ensure_ascii=False) + "\n"

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".scaffolder-state_",
            suffix=".tmp",
        )
    except OSError as e:
        logger.error("Failed to save checkpoint to %s: %s", path, e)
        raise CheckpointWriteError(f"Cannot write checkpoint {path}: {e}") from e

    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
        logger.debug("Checkpoint saved to %s", path)
    except BaseException as e:
        tmp.unlink(missing_ok=True)
        if not isinstance(e, OSError):
            raise
        logger.error("Failed to save checkpoint to %s: %s", path, e)
        raise CheckpointWriteError(f"Cannot write checkpoint {path}: {e}") from e


def remove_checkpoint(path: Path) -> None:
    """Delete a checkpoint. A missing file is not an error."""
    path.unlink(missing_ok=True)
    logger.debug("Checkpoint removed: %s", path)
