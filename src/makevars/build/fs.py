"""Filesystem access used by the make vars pass."""

from pathlib import Path
from typing import List, Union

PathLike = Union[str, Path]


class OsFileSystem:
    """Filesystem backed by the real operating system."""

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def read_bytes(self, path: PathLike) -> bytes:
        return Path(path).read_bytes()

    def write_bytes(self, path: PathLike, data: bytes) -> None:
        """Replace the file at path with data, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def glob(self, root: PathLike, pattern: str) -> List[Path]:
        """Return files under root matching pattern, sorted."""
        return sorted(p for p in Path(root).glob(pattern) if p.is_file())
