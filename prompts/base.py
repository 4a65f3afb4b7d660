"""Prompt loading utilities for ParkSettle AI summaries."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

__all__ = ["PROMPTS_DIR", "PromptTemplate", "get_prompt_text", "load_prompt", "render_prompt"]

PROMPTS_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class PromptTemplate:
    """A prompt file; ``{placeholders}`` are filled by :meth:`render`."""

    name: str
    content: str

    def render(self, **values: Any) -> str:
        try:
            return self.content.format_map(values)
        except KeyError as exc:
            raise KeyError(f"Prompt '{self.name}' is missing value for {exc}") from exc


@lru_cache(maxsize=16)
def load_prompt(name: str) -> PromptTemplate:
    path = PROMPTS_DIR / f"{name}.txt"
    if not path.is_file():
        raise FileNotFoundError(f"Prompt template not found: {path}")
    return PromptTemplate(name=name, content=path.read_text(encoding="utf-8").strip())


def get_prompt_text(name: str) -> str:
    return load_prompt(name).content


def render_prompt(name: str, **values: Any) -> str:
    """Load ``name`` and substitute ``values`` into it."""

    return load_prompt(name).render(**values)
