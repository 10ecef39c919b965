"""File writing utilities for generated artifacts.

This module writes rendered artifacts below an output root, creating parent
directories as needed and optionally clearing the root first.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from upath import UPath

from swaggergen.codegen.types import GeneratedArtifact
from swaggergen.exceptions import FileSystemError

logger = logging.getLogger(__name__)

__all__ = ['ArtifactWriter']


class ArtifactWriter:
    """Writes generated artifacts below an output root.

    Writes are not transactional: files written before a failure are left
    in place.

    Example:
        >>> writer = ArtifactWriter('./api_generate')
        >>> writer.write(artifacts, clean=True)
    """

    def __init__(self, root: UPath | Path | str):
        self.root = root if isinstance(root, UPath) else UPath(root)

    def clean(self) -> None:
        """Remove everything under the root, files first, then directories.

        The root itself is kept. A missing root is not an error.

        Raises:
            FileSystemError: If an entry cannot be removed.
        """
        if not self.root.exists():
            return

        logger.info(f'Cleaning output directory {self.root}')
        self._remove_children(self.root)

    def _remove_children(self, directory: UPath) -> None:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise FileSystemError(str(directory), cause=e) from e

        for entry in entries:
            # Links are removed, never followed
            if not entry.is_symlink() and entry.is_dir():
                self._remove_children(entry)
                remove = entry.rmdir
            else:
                remove = entry.unlink
            try:
                remove()
            except OSError as e:
                raise FileSystemError(str(entry), cause=e) from e

    def write(
        self, artifacts: Iterable[GeneratedArtifact], clean: bool = False
    ) -> list[UPath]:
        """Write every artifact as UTF-8 below the root.

        Args:
            artifacts: The artifacts to write, in order.
            clean: Clear the root before writing.

        Returns:
            The paths written, in write order.

        Raises:
            FileSystemError: If a directory or file cannot be written.
        """
        if clean:
            self.clean()

        written: list[UPath] = []
        for artifact in artifacts:
            path = self.root / artifact.relative_path
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(artifact.content, encoding='utf-8')
            except OSError as e:
                raise FileSystemError(str(path), cause=e) from e

            logger.debug(f'Wrote {path}')
            written.append(path)

        return written
