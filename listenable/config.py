"""Settings for an intercepted session.

Example::

    from listenable.config import InterceptionSettings

    settings = InterceptionSettings(log_events=True)
    driver = create_intercepted_root(raw_driver, [], settings=settings)

    # or, from a JSON file
    settings = InterceptionSettings.from_file("listenable.json")
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ENTRY_POINT_GROUP = "listenable.listeners"


class InterceptionSettings(BaseModel):
    """Validated options for ``create_intercepted_root``.

    Attributes:
        max_unwrap_depth: Maximum number of wrapper exceptions stripped
            when extracting a root cause.
        use_entry_points: Register the listeners advertised by installed
            packages under ``entry_point_group``.
        entry_point_group: Entry-point group scanned for listener classes.
        log_events: Register a ``LoggingListener`` ahead of all others.
        log_level: Level name the ``LoggingListener`` logs events at.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_unwrap_depth: int = Field(default=32, ge=1)
    use_entry_points: bool = False
    entry_point_group: str = Field(
        default=DEFAULT_ENTRY_POINT_GROUP, min_length=1
    )
    log_events: bool = False
    log_level: str = Field(
        default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"
    )

    @classmethod
    def from_file(cls, path: Path | str) -> InterceptionSettings:
        """Load settings from a JSON file.

        Raises:
            pydantic.ValidationError: If the file content is invalid.
        """
        return cls.model_validate_json(Path(path).read_text())
