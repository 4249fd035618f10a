"""Prompt loading utilities."""

from __future__ import annotations

from pathlib import Path


PROMPTS_ROOT = Path(__file__).resolve().parent / "prompts"

PROMPT_KINDS: tuple[str, ...] = ("risk", "cluster")


def prompt_path(kind: str, prompt_version: str) -> Path:
    """Resolve a prompt file path from a prompt_version like 'risk_v001'."""
    if kind not in PROMPT_KINDS:
        raise ValueError(f"kind must be one of {PROMPT_KINDS}")

    prefix = f"{kind}_"
    if not prompt_version.startswith(prefix):
        raise ValueError(f"prompt_version must start with {prefix!r}")

    file_stub = prompt_version.removeprefix(prefix)
    return PROMPTS_ROOT / kind / f"{file_stub}.md"


def load_prompt(kind: str, prompt_version: str) -> str:
    """Load a prompt file as UTF-8 text."""
    path = prompt_path(kind=kind, prompt_version=prompt_version)
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    return path.read_text(encoding="utf-8").strip()
