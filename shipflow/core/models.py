"""
Pydantic models for the run target and the YAML plan schema (target + steps).
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator


class SshOptions(BaseModel):
    """Where remote steps go: ``ssh <host> -p <port>``."""

    model_config = ConfigDict(frozen=True)

    host: str
    port: PositiveInt = 22

    @field_validator("host")
    @classmethod
    def host_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("host must not be empty")
        return v


class Config(BaseModel):
    """Read-only target configuration of a run. No ssh_options means local."""

    model_config = ConfigDict(frozen=True)

    ssh_options: Optional[SshOptions] = None

    @classmethod
    def local(cls) -> "Config":
        return cls()

    @classmethod
    def remote(cls, host: str, port: int = 22) -> "Config":
        return cls(ssh_options=SshOptions(host=host, port=port))

    @property
    def is_local(self) -> bool:
        return self.ssh_options is None

    @property
    def host_label(self) -> str:
        if self.ssh_options is None:
            return "localhost"
        return f"{self.ssh_options.host}:{self.ssh_options.port}"


# ----- plan file -----

class CopySpec(BaseModel):
    src: str
    dest: str

    @field_validator("src", "dest")
    @classmethod
    def must_be_abs(cls, v: str) -> str:
        if not Path(v).is_absolute():
            raise ValueError(f"path must be absolute: {v}")
        return v


class StepModel(BaseModel):
    run: Optional[str] = None
    cd: Optional[str] = None
    copy_file: Optional[CopySpec] = None
    copy_dir: Optional[CopySpec] = None

    @model_validator(mode="after")
    def exactly_one_action(self) -> "StepModel":
        actions = [a for a in (self.run, self.copy_file, self.copy_dir) if a is not None]
        if len(actions) != 1:
            raise ValueError("each step needs exactly one of run/copy_file/copy_dir")
        if self.cd is not None and self.run is None:
            raise ValueError("cd only applies to run steps")
        return self

    @property
    def kind(self) -> str:
        if self.run is not None:
            return "run"
        return "copy_file" if self.copy_file is not None else "copy_dir"


class PlanModel(BaseModel):
    target: Optional[SshOptions] = None
    steps: List[StepModel] = Field(default_factory=list)

    def to_config(self) -> Config:
        return Config(ssh_options=self.target)
