"""
Interface to configuration as persisted in .yaml file, e.g.:

```yaml
token: 1A2B3C-...
footer:
  creation_date: true
  add_id: true
batch:
  pattern: "*.md"
  recursive: true
```
"""
from __future__ import annotations

from logging import Logger
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_serializer, field_validator

from ..core import FooterFlags, Mode, Session
from .yaml_model import BaseYamlModel

__all__ = [
    "BatchConfig",
    "Config",
    "FooterConfig",
]

CONFIG_FILENAME = "bear-notes.yaml"
"""
Default config file, looked up in the working directory.
"""


class FooterConfig(BaseModel):
    """
    Defaults for footer options not passed on the command line.
    """

    creation_date: bool = False
    add_id: bool = False

    def get_flags(
        self, *, creation_date: bool | None, add_id: bool | None
    ) -> FooterFlags:
        """
        Get footer flags, with explicit options taking precedence.
        """
        return FooterFlags(
            creation_date=self.creation_date
            if creation_date is None
            else creation_date,
            add_id=self.add_id if add_id is None else add_id,
        )


class BatchConfig(BaseModel):
    """
    Defaults for batch updates.
    """

    pattern: str = "*.md"
    recursive: bool = False
    write_back: bool = True
    mode: Mode = Mode.REPLACE_ALL


class Config(BaseYamlModel):
    """
    Encapsulates configuration for use in tools.
    """

    xcall: Path | None = None
    """
    Path to xcall executable; looked up if not provided.
    """

    token: str | None = None
    """
    Bear API token, needed for search.
    """

    show_window: bool = False
    """
    Whether to show Bear's window when invoking actions.
    """

    footer: FooterConfig = FooterConfig()
    batch: BatchConfig = BatchConfig()

    @field_validator("xcall", mode="before")
    def validate_xcall(cls, value: Any) -> Any:
        if not isinstance(value, (str, Path)):
            # let pydantic handle type error
            return value

        path = Path(value).expanduser()

        if not path.is_file():
            raise ValueError(f"xcall executable does not exist: '{path}'")

        return path

    @field_serializer("xcall")
    def serialize_xcall(self, value: Path | None) -> str | None:
        return str(value) if isinstance(value, Path) else value

    def create_session(
        self,
        *,
        xcall: Path | None = None,
        token: str | None = None,
        logger: Logger,
    ) -> Session:
        """
        Get session from this config, with explicit arguments taking
        precedence.
        """
        return Session(
            xcall=xcall or self.xcall,
            token=token or self.token,
            show_window=self.show_window,
            logger=logger,
        )
