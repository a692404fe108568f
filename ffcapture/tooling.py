import shutil
from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=None)
def has_tool(tool: str) -> bool:
    return shutil.which(tool) is not None


def path_exists(path: str | Path) -> bool:
    try:
        return Path(path).exists()
    except OSError:
        return False
