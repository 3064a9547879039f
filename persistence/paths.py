from __future__ import annotations

from pathlib import Path


def store_dir(raw: str) -> Path:
    # Relative directories resolve against the process working directory.
    return Path(raw).expanduser()


def collection_file(directory: Path, collection: str) -> Path:
    safe = (collection.strip() or "users").replace("/", "_")
    return directory / f"{safe}.json"
