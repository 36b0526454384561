"""Configuration management with TOML loading and defaults."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from meetdigest.summarization.base import Provider

CONFIG_DIR = Path("~/.config/meetdigest").expanduser()
CONFIG_PATH = CONFIG_DIR / "config.toml"

API_KEY_ENV_VARS: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.CLAUDE: "ANTHROPIC_API_KEY",
    Provider.GROQ: "GROQ_API_KEY",
    Provider.OPENROUTER: "OPENROUTER_API_KEY",
}

DEFAULT_CONFIG_TOML = """\
[summarization]
provider = "ollama"       # "ollama", "openai", "claude", "groq" or "openrouter"
model = "mistral"         # model name
host = ""                 # empty = provider default; ollama: http://localhost:11434, LM Studio: http://localhost:1234
api_key = ""              # or set OPENAI_API_KEY / ANTHROPIC_API_KEY / GROQ_API_KEY / OPENROUTER_API_KEY
template = "standard_meeting"  # built-in: "standard_meeting", "client_meeting", "lecture", "brief"
token_threshold = 4000    # transcripts above this are chunked (ollama only)
chunk_overlap = 100       # tokens shared between consecutive chunks
prompt_headroom = 300     # tokens reserved for the extraction prompt in each chunk
context = ""              # extra background passed to every report

# Custom templates (optional):
# [templates.standup]
# name = "Daily Standup"
# description = "Short daily sync."
#
# [[templates.standup.sections]]
# title = "Blockers"
# instruction = "List everything that blocks someone"
# format = "list"          # "paragraph", "list" or "string"
# item_format = "Name: blocker"

[output]
dir = "~/meetdigest"      # base output directory
"""


@dataclass
class SummarizationConfig:
    provider: str = "ollama"
    model: str = "mistral"
    host: str = ""
    api_key: str = ""
    template: str = "standard_meeting"
    token_threshold: int = 4000
    chunk_overlap: int = 100
    prompt_headroom: int = 300
    context: str = ""

    @property
    def resolved_provider(self) -> Provider:
        return Provider.parse(self.provider)

    @property
    def endpoint(self) -> str | None:
        """Configured host; OLLAMA_HOST applies when the provider is ollama."""
        if self.host:
            return self.host
        if self.resolved_provider is Provider.OLLAMA:
            return os.environ.get("OLLAMA_HOST") or None
        return None

    @property
    def resolved_api_key(self) -> str:
        """Configured key, else the provider's API key env var."""
        if self.api_key:
            return self.api_key
        env_var = API_KEY_ENV_VARS.get(self.resolved_provider)
        return os.environ.get(env_var, "") if env_var else ""


@dataclass
class OutputConfig:
    dir: str = "~/meetdigest"

    @property
    def resolved_dir(self) -> Path:
        return Path(self.dir).expanduser()


@dataclass
class Config:
    summarization: SummarizationConfig = field(default_factory=SummarizationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    templates: dict[str, dict] = field(default_factory=dict)

    @classmethod
    def load(cls) -> Config:
        """Load config from TOML file, falling back to defaults."""
        config = cls()

        if CONFIG_PATH.exists():
            with open(CONFIG_PATH, "rb") as f:
                data = tomllib.load(f)
            config = _merge_toml(config, data)

        return config


def _merge_toml(config: Config, data: dict) -> Config:
    """Merge TOML data into config dataclass."""
    if "summarization" in data:
        for k, v in data["summarization"].items():
            if hasattr(config.summarization, k):
                setattr(config.summarization, k, v)

    if "output" in data:
        for k, v in data["output"].items():
            if hasattr(config.output, k):
                setattr(config.output, k, v)

    if "templates" in data:
        for name, t_data in data["templates"].items():
            config.templates[name] = dict(t_data)

    return config


def ensure_config_file() -> Path:
    """Create default config file if it doesn't exist. Returns the path."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    if not CONFIG_PATH.exists():
        CONFIG_PATH.write_text(DEFAULT_CONFIG_TOML)
    return CONFIG_PATH
