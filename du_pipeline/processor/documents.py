from collections.abc import Iterator
from pathlib import Path

from du_pipeline.remote.exceptions import ConfigError

SUPPORTED_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "jpe", "tiff", "tif", "bmp", "pdf"})


def find_documents(folder: Path) -> Iterator[Path]:
    """Yield the image/PDF files directly inside ``folder``, in name order.

    Raises:
        ConfigError: if ``folder`` is not a directory.
    """
    if not folder.is_dir():
        raise ConfigError(f"Document folder not found: {folder}")
    for path in sorted(folder.iterdir()):
        if path.is_file() and path.suffix.lower().lstrip(".") in SUPPORTED_EXTENSIONS:
            yield path
