"""Local Directory Artifact Store - Infrastructure Layer"""

import asyncio
import logging
from pathlib import Path
from uuid import uuid4

from ...domain.entity.errors import StorageError
from ...domain.repository.artifact_store import RESULTS, ArtifactStore, extension_for

logger = logging.getLogger(__name__)


class LocalArtifactStore(ArtifactStore):
    """本地目录存储

    Files land in ``<root>/<category>/<uuid>.<ext>`` and are referenced as
    ``<public_base_url>/<category>/<uuid>.<ext>``; the HTTP server mounts the
    root directory at that URL.
    """

    def __init__(self, root_dir: Path, public_base_url: str = "/artifacts"):
        self._root_dir = Path(root_dir)
        self._public_base_url = public_base_url.rstrip("/")

    async def put(self, data: bytes, mime_type: str, category: str = RESULTS) -> str:
        filename = f"{uuid4().hex}.{extension_for(mime_type)}"
        target = self._root_dir / category / filename
        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as e:
            raise StorageError(f"Failed to write {category}/{filename}: {e}") from e

        logger.debug(f"Stored {len(data)} bytes at {target}")
        return f"{self._public_base_url}/{category}/{filename}"

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
