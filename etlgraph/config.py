"""Runtime settings, read from ETLGRAPH_* environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

_ENV_PREFIX = "ETLGRAPH_"


class Settings(BaseModel):
    data_dir: Path = Path("etlgraph_data")
    plugins_dir: Path | None = None       # defaults to <data_dir>/plugins
    graphs_dir: Path | None = None        # defaults to <data_dir>/graphs
    log_level: str = "INFO"
    log_dir: Path | None = None
    log_buffer_size: int = Field(default=1000, gt=0)
    command_timeout: float = Field(default=30.0, gt=0)
    http_timeout: float = Field(default=30.0, gt=0)
    script_sandbox: bool = False
    create_default_plugins: bool = True

    @property
    def plugins_path(self) -> Path:
        return self.plugins_dir or self.data_dir / "plugins"

    @property
    def graphs_path(self) -> Path:
        return self.graphs_dir or self.data_dir / "graphs"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from the environment; unset variables keep their defaults."""
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(_ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)
