# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Central configuration – configurable via:
1. Environment variables (PM_ prefix)
2. .env file
3. JSON override file (PM_CONFIG_FILE, default ./config.json)
"""
import json
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .chunker import CODE_WINDOW_LINES, CODE_WINDOW_STEP, TEXT_MAX_CHARS

CONFIG_FILE_ENV = "PM_CONFIG_FILE"
DEFAULT_CONFIG_FILE = "config.json"

_SECRET_FIELDS = ("gitlab_token", "jira_api_token", "figma_access_token")


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PM_", env_file=".env", extra="ignore",
        validate_assignment=True,
    )

    # ── Index ────────────────────────────────────
    index_path: str = ".pmcontext_index.json"
    docs_path: str = "."
    default_collection: str = "local"
    search_limit: int = Field(default=5, gt=0)

    # ── Chunking ─────────────────────────────────
    code_window_lines: int = Field(default=CODE_WINDOW_LINES, gt=0)
    code_window_step: int = Field(default=CODE_WINDOW_STEP, gt=0)
    text_max_chars: int = Field(default=TEXT_MAX_CHARS, gt=0)
    max_file_bytes: int = Field(default=1_000_000, gt=0)

    # ── Server / Transport ───────────────────────
    transport: Literal["stdio", "sse"] = "stdio"
    sse_port: int = 8081
    web_port: int = 8080
    web_enabled: bool = False

    # ── Remote services ──────────────────────────
    gitlab_url: str = "https://gitlab.com"
    gitlab_token: str = ""
    jira_domain: str = ""
    jira_email: str = ""
    jira_api_token: str = ""
    figma_access_token: str = ""

    @classmethod
    def load(cls, config_file: str | Path | None = None) -> "Config":
        """Load config: ENV -> .env -> JSON override file."""
        config = cls()

        path = Path(config_file or os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE))
        if path.exists():
            try:
                overrides = json.loads(path.read_text())
            except (OSError, ValueError) as e:
                print(f"Warning: Config file error: {e}", file=sys.stderr)
                overrides = {}
            if not isinstance(overrides, dict):
                print(f"Warning: Config file error: {path} is not a JSON object",
                      file=sys.stderr)
                overrides = {}
            for key, value in overrides.items():
                if key not in cls.model_fields or value == "":
                    continue
                try:
                    setattr(config, key, value)
                except ValidationError as e:
                    print(f"Warning: Config file error: ignoring {key}={value!r}: {e}",
                          file=sys.stderr)

        return config

    def chunking_options(self) -> dict:
        return {
            "code_window_lines": self.code_window_lines,
            "code_window_step": self.code_window_step,
            "text_max_chars": self.text_max_chars,
        }

    def missing_credentials(self) -> list[str]:
        missing = []
        if not self.gitlab_token:
            missing.append("PM_GITLAB_TOKEN")
        if not self.jira_api_token:
            missing.append("PM_JIRA_API_TOKEN")
        if not self.figma_access_token:
            missing.append("PM_FIGMA_ACCESS_TOKEN")
        return missing

    def to_safe_dict(self) -> dict:
        """Config without secrets (for stats/health display)."""
        d = self.model_dump()
        for key in _SECRET_FIELDS:
            if d.get(key):
                d[key] = "***set***"
        return d
