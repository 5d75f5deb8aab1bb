"""Loads prompt templates and formats them with conversation and wearable context."""

import json
from importlib import resources
from pathlib import Path
from typing import Any

_PROMPT_DIR: Path | None = None

DEFAULT_USERNAME = "friend"


def _get_prompt_dir() -> Path:
    if _PROMPT_DIR is not None:
        return _PROMPT_DIR
    pkg = resources.files("ouracoach") / "prompts"
    return Path(str(pkg))


def set_prompt_dir(path: Path | None) -> None:
    """Override prompt directory (for testing). Pass None to restore the default."""
    global _PROMPT_DIR
    _PROMPT_DIR = path


def _load_template(name: str) -> str:
    return (_get_prompt_dir() / name).read_text()


def build_coach_system_prompt(username: str | None, oura_context: dict[str, Any] | None) -> str:
    template = _load_template("coach_system.txt")
    return template.format(
        username=username or DEFAULT_USERNAME,
        oura_context=json.dumps(oura_context or {}, indent=2),
    ).strip()


def build_coach_messages(
    transcript: str, history: list[dict[str, str]] | None = None
) -> list[dict[str, str]]:
    """Turn stored history plus the new transcript into Claude messages.

    System messages in the history are dropped; Claude only accepts
    user/assistant turns.
    """
    messages = [
        {"role": m["role"], "content": m["content"]}
        for m in history or []
        if m.get("role") in ("user", "assistant")
    ]
    messages.append({"role": "user", "content": transcript})
    return messages


def get_title_system_prompt() -> str:
    return _load_template("conversation_title.txt").strip()


def build_title_message(user_message: str, assistant_reply: str) -> str:
    return f'User said: "{user_message}"\n\nAssistant replied: "{assistant_reply}"\n\nTitle:'
