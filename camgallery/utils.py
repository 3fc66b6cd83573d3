import os


def extension_of(filename: str) -> str:
    """Lower-cased extension without the dot, '' when there is none."""
    return os.path.splitext(filename or "")[1].lstrip(".").lower()
