import time
from typing import Iterable, Iterator

from ...utils import extension_of

DEFAULT_EXTENSION = "jpg"
EXTENSION_ALIASES = {"jpeg": "jpg"}


def stored_extension(name_hint: str, allowed: Iterable[str]) -> str:
    ext = extension_of(name_hint)
    if ext not in allowed:
        return DEFAULT_EXTENSION
    return EXTENSION_ALIASES.get(ext, ext)


def candidate_names(prefix: str, extension: str, max_attempts: int = 100) -> Iterator[str]:
    """Yield ``<prefix><epoch_ms>.<ext>``, then counter-suffixed fallbacks.

    The caller publishes each candidate with an exclusive-create primitive and
    moves on to the next one when the name is already taken.
    """
    epoch_ms = int(time.time() * 1000)
    yield f"{prefix}{epoch_ms}.{extension}"
    for n in range(1, max_attempts):
        yield f"{prefix}{epoch_ms}_{n}.{extension}"


def is_safe_name(name: str) -> bool:
    if not name or name.startswith("."):
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name
