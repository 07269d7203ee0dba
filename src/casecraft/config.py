"""Configuration management for Casecraft."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

CONFIG_NAMES = ["casecraft.json", ".casecraft.json"]


class RunnerSettings(BaseModel):
    """Settings for a command-line run."""

    module: Optional[str] = Field(default=None, description="Dotted name of the module holding the tests")
    custom_arguments: list[str] = Field(
        default_factory=list, description="Arguments handed to the module's convention factory"
    )
    assertion_modules: list[str] = Field(
        default_factory=list,
        description="Modules whose exceptions are reported as assertion failures",
    )
    show_output: bool = Field(default=True, description="Print captured output of failed cases")
    verbose: bool = Field(default=False, description="Enable debug logging")

    @field_validator("module")
    @classmethod
    def validate_module(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Module name cannot be empty")
        return v

    @field_validator("assertion_modules")
    @classmethod
    def validate_assertion_modules(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name.strip() or name.startswith(".") or name.endswith("."):
                raise ValueError(f"Invalid module name: {name!r}")
        return v

    @classmethod
    def from_file(cls, path: Path | str) -> "RunnerSettings":
        """Load settings from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "RunnerSettings":
        """Find and load a settings file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        current = start_dir.resolve()
        while True:
            for name in CONFIG_NAMES:
                config_path = current / name
                if config_path.exists():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Create casecraft.json or run 'casecraft init'"
        )

    def to_file(self, path: Path | str) -> None:
        """Save settings to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def create_example_config(output_path: Path | str) -> Path:
    """Create an example settings file."""
    output_path = Path(output_path)
    settings = RunnerSettings(module="tests.sample")
    settings.to_file(output_path)
    return output_path
