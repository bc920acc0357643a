"""
Cross-phase run state for ccachekit.

The restore phase and the save phase run as two separate processes at the
start and the end of a CI job. Everything the save phase needs (variant,
primary key, flags) is recorded here by the restore phase and read back
later. Each field is written once per run.

Example:
    >>> from pathlib import Path
    >>> from ccachekit.core.state import StateManager
    >>>
    >>> manager = StateManager(Path('/tmp/runner/ccachekit/state.json'))
    >>> manager.reset()
    >>> manager.record(variant='ccache', primary_key='ccache-abc')
    >>> manager.load().primary_key
    'ccache-abc'
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

from filelock import FileLock

from ccachekit.core.exceptions import StateError
from ccachekit.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """
    Values shared between the restore and save phases of one run.

    Attributes:
        start_timestamp: Start of the restore phase, epoch milliseconds
        variant: Compiler cache tool ('ccache' or 'sccache')
        evict_old_files: Eviction age passed to the save phase ('' disables)
        should_save: Whether the save phase stores the cache
        append_timestamp: Whether the save phase appends a timestamp to the key
        primary_key: Namespaced primary cache key
        restored_key: Key the cache was restored from, if any
        cache_hit: Restore outcome (None when restore was skipped)
    """

    start_timestamp: Optional[int] = None
    variant: Optional[str] = None
    evict_old_files: Optional[str] = None
    should_save: Optional[bool] = None
    append_timestamp: Optional[bool] = None
    primary_key: Optional[str] = None
    restored_key: Optional[str] = None
    cache_hit: Optional[bool] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RunState":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class StateManager:
    """
    Persists :class:`RunState` as JSON.

    Writes are atomic and serialized with a file lock. A field that already
    holds a value cannot be recorded again with a different value until
    :meth:`reset` starts a new run.

    Attributes:
        state_file: Path to the JSON state file
    """

    def __init__(self, state_file: Path):
        self.state_file = Path(state_file)
        self._lock = FileLock(str(self.state_file) + ".lock")

    def load(self) -> RunState:
        """
        Load state from disk.

        Returns:
            The recorded state (all fields None if nothing was recorded)

        Raises:
            StateError: If the state file exists but is not valid JSON
        """
        if not self.state_file.exists():
            logger.debug(f"No state file at {self.state_file}")
            return RunState()

        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StateError(
                f"Corrupted state file {self.state_file}: {e}. "
                "Delete it and re-run the restore phase."
            ) from e

        if not isinstance(data, dict):
            raise StateError(f"Invalid state file structure: {self.state_file}")

        return RunState.from_dict(data)

    def reset(self) -> None:
        """Start a new run by discarding previously recorded state."""
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            self.state_file.unlink(missing_ok=True)
        logger.debug(f"Reset state at {self.state_file}")

    def record(self, **values: Any) -> RunState:
        """
        Record one or more state fields.

        Args:
            **values: Field names and values

        Returns:
            The updated state

        Raises:
            StateError: If a name is unknown, or a field already holds a
                different value
        """
        known = {f.name for f in fields(RunState)}
        unknown = set(values) - known
        if unknown:
            raise StateError(f"Unknown state field(s): {', '.join(sorted(unknown))}")

        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            state = self.load()
            for name, value in values.items():
                current = getattr(state, name)
                if current is not None and current != value:
                    raise StateError(
                        f"State field '{name}' was already recorded as {current!r} "
                        f"for this run; refusing to overwrite with {value!r}"
                    )
                setattr(state, name, value)

            atomic_write(self.state_file, json.dumps(state.to_dict(), indent=2))

        logger.debug(f"Recorded state {sorted(values)} in {self.state_file}")
        return state


__all__ = ["RunState", "StateManager"]
