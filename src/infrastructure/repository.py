"""File-backed repository of API descriptions.

Document identifiers are paths relative to a base directory. YAML
(``.yml``/``.yaml``) and JSON (``.json``) documents are supported; anything
else is read as YAML, which also accepts JSON.

Loaded descriptions are immutable, so with caching enabled each document is
parsed once per repository and then shared by every request.
"""

from pathlib import Path

import orjson
import yaml
from loguru import logger

from src.core.exceptions import DocumentNotFoundError, InvalidDescriptionError
from src.descriptions.builder import build_description
from src.descriptions.model import Description


class DescriptionRepository:
    """Loads and caches descriptions by document identifier.

    Args:
        base_path: Directory that identifiers are resolved against.
        cache_enabled: Keep loaded descriptions for the repository lifetime.

    Example:
        repository = DescriptionRepository(Path("docs"))
        description = repository.get("petstore.yml")
    """

    def __init__(self, base_path: Path | str, *, cache_enabled: bool = True) -> None:
        self.base_path = Path(base_path)
        self.cache_enabled = cache_enabled
        self._cache: dict[str, Description] = {}
        logger.debug("Initialized description repository at {}", self.base_path)

    def get(self, uri: str) -> Description:
        """Return the description registered under ``uri``.

        Args:
            uri: The document identifier.

        Returns:
            Description: The loaded description.

        Raises:
            DocumentNotFoundError: If no document exists for the identifier.
            InvalidDescriptionError: If the document cannot be parsed.
        """
        cached = self._cache.get(uri)
        if cached is not None:
            return cached

        description = build_description(uri, self._read(uri))
        if self.cache_enabled:
            self._cache[uri] = description
        logger.info("Loaded API description {}", uri)
        return description

    def register(self, description: Description) -> None:
        """Make an already-built description available under its identifier.

        Registered descriptions are kept regardless of ``cache_enabled``.
        """
        self._cache[description.uri] = description
        logger.debug("Registered API description {}", description.uri)

    def clear(self) -> None:
        """Forget every cached and registered description."""
        self._cache.clear()

    def _resolve(self, uri: str) -> Path:
        base = self.base_path.resolve()
        file_path = (base / uri.lstrip("/")).resolve()
        if not file_path.is_relative_to(base) or not file_path.is_file():
            raise DocumentNotFoundError(uri)
        return file_path

    def _read(self, uri: str) -> object:
        file_path = self._resolve(uri)
        try:
            content = file_path.read_bytes()
            if file_path.suffix == ".json":
                return orjson.loads(content)
            return yaml.safe_load(content)
        except (orjson.JSONDecodeError, yaml.YAMLError) as e:
            msg = f"API description '{uri}' could not be parsed: {e}"
            raise InvalidDescriptionError(msg, {"uri": uri}, e) from e
        except OSError as e:
            raise DocumentNotFoundError(uri, e) from e
