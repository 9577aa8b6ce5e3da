"""Resource namespaces that serve template source bytes by path."""

import io
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import BinaryIO

from mustache_views.exceptions import TemplateNotFoundException
from mustache_views.logging_config import get_logger, log_with_context
from mustache_views.protocols import ResourceNamespace

logger = get_logger(__name__)


def normalize_path(path: str) -> str:
    """Ensure ``path`` starts with ``/``. Idempotent."""
    if not path.startswith("/"):
        path = "/" + path
    return path


class DirectoryResourceNamespace:
    """Serve resources from a directory on disk.

    Paths that would escape ``root`` (``/../secret``) are reported as missing.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root).resolve()

    def get_resource_stream(self, path: str) -> BinaryIO | None:
        candidate = (self.root / path.lstrip("/")).resolve()
        if not candidate.is_relative_to(self.root):
            log_with_context(
                logger,
                "warning",
                "Rejected resource path outside template root",
                path=path,
                root=str(self.root),
                event_type="resource_path_rejected",
            )
            return None
        if not candidate.is_file():
            return None
        return candidate.open("rb")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.root)!r})"


class MappingResourceNamespace:
    """In-memory namespace, keyed by absolute path.

    ``str`` values are stored UTF-8 encoded.
    """

    def __init__(self, resources: Mapping[str, bytes | str] | None = None):
        self._resources: dict[str, bytes] = {}
        for path, content in (resources or {}).items():
            self.add(path, content)

    def add(self, path: str, content: bytes | str) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._resources[normalize_path(path)] = content

    def get_resource_stream(self, path: str) -> BinaryIO | None:
        content = self._resources.get(path)
        if content is None:
            return None
        return io.BytesIO(content)


class PackageResourceNamespace:
    """Serve resources bundled inside an installed Python package.

    Args:
        package: Importable package name (e.g. ``"myapp"``)
        directory: Subdirectory of the package holding the templates
    """

    def __init__(self, package: str, directory: str = "templates"):
        self.package = package
        self.directory = directory

    def get_resource_stream(self, path: str) -> BinaryIO | None:
        root = resources.files(self.package)
        if self.directory:
            root = root.joinpath(self.directory)
        resource = root
        for part in path.strip("/").split("/"):
            if part in ("", ".", ".."):
                return None
            resource = resource.joinpath(part)
        if not resource.is_file():
            return None
        return resource.open("rb")


class LazyResourceReader:
    """Character reader over a namespace resource, opened on first read.

    Construction never touches the namespace. A missing resource raises
    TemplateNotFoundException from the first ``read``/``readline`` call.
    """

    def __init__(self, namespace: ResourceNamespace, path: str, encoding: str):
        self.namespace = namespace
        self.path = path
        self.encoding = encoding
        self._stream: io.TextIOWrapper | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _open(self) -> io.TextIOWrapper:
        if self._closed:
            raise ValueError(f"I/O operation on closed reader for {self.path}")
        if self._stream is None:
            raw = self.namespace.get_resource_stream(self.path)
            if raw is None:
                raise TemplateNotFoundException(self.path)
            self._stream = io.TextIOWrapper(raw, encoding=self.encoding)
        return self._stream

    def read(self, size: int = -1) -> str:
        return self._open().read(size)

    def readline(self, size: int = -1) -> str:
        return self._open().readline(size)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> "LazyResourceReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, encoding={self.encoding!r})"
