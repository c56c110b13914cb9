"""
Pydantic models persisted as .yaml files.
"""

from pathlib import Path
from typing import Self

import yaml
from pydantic import BaseModel

__all__ = [
    "BaseYamlModel",
]


class BaseYamlModel(BaseModel):
    """
    Base model which can be loaded from and dumped to a .yaml file.
    """

    @classmethod
    def load_yaml(cls, file: Path) -> Self:
        """
        Load model from .yaml file. An empty file yields the model's
        defaults.
        """
        assert file.is_file()

        with file.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh)

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping, got: {data!r}")

        return cls.model_validate(data)

    def dump_yaml(self, file: Path):
        """
        Dump model to .yaml file, omitting unset values.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        file.write_text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
