"""Writes rendered model modules to disk."""

import logging
from pathlib import Path
from typing import Dict, List, Mapping

from ..errors import WriteError
from ..synthesis.synthesizer import camel_case

logger = logging.getLogger(__name__)


def model_file_name(table: str, extension: str = ".js") -> str:
    """File name for a table, e.g. ``order_items`` -> ``Orderitems.js``."""
    name = camel_case(table)
    if not name:
        return ""
    return name[0].upper() + name[1:].lower() + extension


class ModelWriter:
    """Writes one file per table into an output directory."""

    def __init__(self, directory: str = "./models", extension: str = ".js"):
        self.directory = Path(directory)
        self.extension = extension

    def path_for(self, table: str) -> Path:
        return self.directory.resolve() / model_file_name(table, self.extension)

    def write(self, texts: Mapping[str, str]) -> List[str]:
        """Write rendered texts keyed by table name.

        Tables whose names only differ in case or separators share a file
        name; the later one is written last and a warning is logged.

        Returns:
            Paths of the written files
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(f"Cannot create output directory: {e}", path=str(self.directory)) from e

        written = []
        owners: Dict[Path, str] = {}
        for table, text in texts.items():
            if not model_file_name(table, self.extension):
                raise WriteError(f"Cannot derive a file name for table {table!r}", path=str(self.directory))
            path = self.path_for(table)
            if path in owners:
                logger.warning("Model for %s overwrites %s (written for %s)", table, path.name, owners[path])
            try:
                path.write_text(text, encoding="utf-8")
            except OSError as e:
                raise WriteError(f"Cannot write model for {table}: {e}", path=str(path)) from e
            logger.debug("Wrote %s", path)
            owners[path] = table
            if str(path) not in written:
                written.append(str(path))
        return written
