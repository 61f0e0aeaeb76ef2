"""Prompt management module.

Prompts live in text files next to this module and can be overridden by
placing a file of the same name in ``./prompts/`` in the working directory.
"""

from functools import lru_cache
from pathlib import Path

from ..itinerary.models import TransportMode

_PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: tripchat/prompts/{name}.txt

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8")

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_system_instruction() -> str:
    """System instruction with the transport modes filled in."""
    modes = ", ".join(TransportMode.values())
    return load_prompt("system").replace("{transport_modes}", modes)


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "get_system_instruction",
    "clear_cache",
]
