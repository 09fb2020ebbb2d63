import glob
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path


class IFileSystem(ABC):
    @abstractmethod
    def read_text(self, path: Path) -> str:
        raise NotImplementedError

    @abstractmethod
    def write_text(self, path: Path, content: str, mode: int | None = None) -> None:
        raise NotImplementedError

    @abstractmethod
    def exists(self, path: Path) -> bool:
        raise NotImplementedError

    @abstractmethod
    def glob(self, pattern: str) -> list[Path]:
        raise NotImplementedError

    @abstractmethod
    def temp_file(self, prefix: str, suffix: str) -> Path:
        raise NotImplementedError

    @abstractmethod
    def remove(self, path: Path) -> None:
        raise NotImplementedError


class LocalFileSystem(IFileSystem):
    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str, mode: int | None = None) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mode is not None:
            path.chmod(mode)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def glob(self, pattern: str) -> list[Path]:
        return [Path(match) for match in sorted(glob.glob(pattern))]

    def temp_file(self, prefix: str, suffix: str) -> Path:
        handle, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        os.close(handle)
        return Path(name)

    def remove(self, path: Path) -> None:
        path.unlink()
