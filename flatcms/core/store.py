from pathlib import Path
from typing import List, Optional, Union
import logging

from flatcms.core.errors import ConflictError, NotFoundError
from flatcms.core.filenames import name_in_use, split_base_ext

logger = logging.getLogger(__name__)


def is_plain_name(name: str) -> bool:
    """True when ``name`` is a bare filename that stays inside the store."""
    return bool(name) and Path(name).name == name and name not in ('.', '..')


class DocumentStore:
    """
    Flat directory of documents.

    Lookups are case-insensitive: a request for ``About.MD`` finds
    ``about.md``. Writes go straight to the target file, so two overlapping
    writes to the same name leave whichever finished last.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def list(self) -> List[str]:
        """Filenames of every regular file in the store."""
        return sorted(
            (p.name for p in self.data_dir.iterdir() if p.is_file()),
            key=str.lower,
        )

    def _resolve(self, name: str) -> Optional[Path]:
        """Map a requested name to the stored file, or None."""
        if not is_plain_name(name):
            logger.warning(f"Rejected path outside store: {name!r}")
            return None
        folded = name.casefold()
        for stored in self.list():
            if stored.casefold() == folded:
                return self.data_dir / stored
        return None

    def _path_for(self, name: str) -> Path:
        path = self._resolve(name)
        if path is None:
            raise NotFoundError(name)
        return path

    def exists(self, name: str) -> bool:
        return self._resolve(name) is not None

    def stored_name(self, name: str) -> str:
        """The on-disk spelling of ``name``."""
        return self._path_for(name).name

    def read(self, name: str) -> bytes:
        return self._path_for(name).read_bytes()

    def write(self, name: str, content: Union[bytes, str]) -> None:
        if isinstance(content, str):
            content = content.encode('utf-8')
        if not is_plain_name(name):
            raise NotFoundError(name)
        path = self._resolve(name) or self.data_dir / name
        path.write_bytes(content)
        logger.info(f"Document written: {path.name}, size: {len(content)} bytes")

    def create(self, name: str) -> None:
        self.write(name, b'')

    def delete(self, name: str) -> None:
        path = self._path_for(name)
        path.unlink()
        logger.info(f"Document deleted: {path.name}")

    def rename(self, old: str, new: str) -> None:
        old_path = self._path_for(old)
        if not is_plain_name(new):
            raise NotFoundError(new)
        others = [name for name in self.list() if name != old_path.name]
        if name_in_use(new, others):
            raise ConflictError('File name in use')
        old_path.rename(self.data_dir / new)
        logger.info(f"Document renamed: {old_path.name} -> {new}")

    def duplicate(self, name: str) -> str:
        """Copy ``name`` to ``<base>_copy<ext>`` and return the new name."""
        source = self._path_for(name)
        base, ext = split_base_ext(source.name)
        copy_name = f"{base}_copy{ext}"
        if self.exists(copy_name):
            raise ConflictError('File name in use')
        (self.data_dir / copy_name).write_bytes(source.read_bytes())
        logger.info(f"Document duplicated: {source.name} -> {copy_name}")
        return copy_name
