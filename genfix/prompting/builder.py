"""Builds escalation prompts for the remote fixer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader

from ..models import SourceFile
from .constants import FIX_SYSTEM_PROMPT


@dataclass(frozen=True)
class PromptMessage:
    """Represents a single chat message for LLM prompting."""

    role: str
    content: str


@dataclass
class PromptRequest:
    """System and user messages for one escalation batch."""

    messages: List[PromptMessage]
    paths: List[str] = field(default_factory=list)

    @property
    def system(self) -> str:
        return next((m.content for m in self.messages if m.role == "system"), "")

    @property
    def prompt(self) -> str:
        return next((m.content for m in self.messages if m.role == "user"), "")


class FixPromptBuilder:
    """Renders the fix request template for a batch of files."""

    TEMPLATE_NAME = "fix_request.j2"

    def __init__(self, templates_dir: Path | None = None, *, system_prompt: str | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).parent.parent / "templates" / "prompts"
        self.system_prompt = system_prompt or FIX_SYSTEM_PROMPT
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def build(
        self,
        files: Sequence[SourceFile],
        *,
        findings: Mapping[str, List[str]] | None = None,
        allowed_paths: Sequence[str] | None = None,
    ) -> PromptRequest:
        template = self._env.get_template(self.TEMPLATE_NAME)
        user = template.render(
            files=files,
            findings=dict(findings or {}),
            allowed_paths=list(allowed_paths or []),
        )
        return PromptRequest(
            messages=[
                PromptMessage(role="system", content=self.system_prompt),
                PromptMessage(role="user", content=user.strip() + "\n"),
            ],
            paths=[file.path for file in files],
        )


__all__ = ["FixPromptBuilder", "PromptMessage", "PromptRequest"]
