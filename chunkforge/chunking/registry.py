"""
Chunker registry: maps file extensions to chunking strategies.

The map is built once from the classification tables and never mutated
afterwards, so any number of threads may call ``pick`` concurrently.
Unknown extensions resolve to a shared FallbackChunker; ``pick`` never
returns None.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from chunkforge.chunking.base import Chunker
from chunkforge.chunking.fallback import FallbackChunker
from chunkforge.chunking.generic import DEFAULT_CHECK_INTERVAL, GenericChunker
from chunkforge.chunking.legacy import LegacyGoChunker, LegacyPythonChunker
from chunkforge.core.cancellation import CancellationToken
from chunkforge.core.config import Config
from chunkforge.core.exceptions import ConfigurationError
from chunkforge.core.logging import get_logger
from chunkforge.core.models import ChunkResult, SourceFile
from chunkforge.languages.table import ClassificationTable, load_language_tables
from chunkforge.parsing.engine import ParseEngine

logger = get_logger(__name__)


def normalize_extension(ext: str) -> str:
    """Lower-case ``ext`` and make sure it starts with a dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def build_legacy_chunkers(engine: ParseEngine) -> Dict[str, Chunker]:
    """Reference chunkers keyed by language, for cross-validation."""
    return {
        "python": LegacyPythonChunker(engine),
        "go": LegacyGoChunker(engine),
    }


class ChunkerRegistry:
    """
    Extension -> chunker lookup.

    Example
    -------
        registry = ChunkerRegistry.from_config()
        chunker = registry.pick(".py")
        result = chunker.chunk(SourceFile("app.py", source_bytes))
    """

    def __init__(
        self,
        engine: ParseEngine,
        tables: Sequence[ClassificationTable],
        legacy: Optional[Dict[str, Chunker]] = None,
        check_interval: int = DEFAULT_CHECK_INTERVAL,
    ) -> None:
        self.engine = engine
        self.fallback = FallbackChunker()
        self._by_extension: Dict[str, GenericChunker] = {}
        self._languages: Dict[str, GenericChunker] = {}
        self._legacy: Dict[str, Chunker] = dict(legacy or {})

        for table in tables:
            try:
                chunker = GenericChunker(engine, table, check_interval=check_interval)
            except ConfigurationError as e:
                logger.warning(
                    "Skipping language table",
                    language=table.language,
                    grammar=table.grammar,
                    error=str(e),
                )
                continue

            self._languages[table.language] = chunker
            for ext in table.extensions:
                previous = self._by_extension.get(ext)
                if previous is not None:
                    logger.warning(
                        "Extension claimed by two languages",
                        extension=ext,
                        kept=previous.language,
                        ignored=table.language,
                    )
                    continue
                self._by_extension[ext] = chunker

    @classmethod
    def from_config(
        cls, config: Optional[Config] = None, engine: Optional[ParseEngine] = None
    ) -> "ChunkerRegistry":
        """Build a registry from configuration.

        Raises:
            ConfigurationError: If no language table could be loaded.
        """
        config = config or Config()
        engine = engine or ParseEngine()

        tables, errors = load_language_tables(config.languages_path)
        for error in errors:
            logger.warning("Invalid language table", path=error.path, error=str(error))
        if not tables:
            source = config.languages_path or "package data"
            raise ConfigurationError(f"No language tables loaded from {source}")

        legacy = None
        if config.chunking.legacy_enabled:
            legacy = build_legacy_chunkers(engine)
        registry = cls(
            engine,
            tables,
            legacy=legacy,
            check_interval=config.chunking.check_interval,
        )
        if not registry._languages:
            raise ConfigurationError("No language table has a loadable grammar")
        return registry

    def pick(self, ext: str) -> Chunker:
        """Strategy for ``ext``; the fallback chunker when none matches."""
        chunker, _ = self.lookup(ext)
        return chunker

    def lookup(self, ext: str) -> Tuple[Chunker, bool]:
        """Like ``pick`` but also reports whether a table matched."""
        chunker = self._by_extension.get(normalize_extension(ext))
        if chunker is None:
            return self.fallback, False
        return chunker, True

    def language_for(self, ext: str) -> Optional[str]:
        chunker = self._by_extension.get(normalize_extension(ext))
        return chunker.language if chunker is not None else None

    def chunk(
        self, file: SourceFile, token: Optional[CancellationToken] = None
    ) -> ChunkResult:
        """Route ``file`` by its extension and chunk it."""
        chunker, found = self.lookup(file.extension)
        if found:
            file = file.with_language(chunker.language)
        return chunker.chunk(file, token)

    def supported_languages(self) -> List[str]:
        return sorted(self._languages)

    def is_supported(self, language: str) -> bool:
        return language in self._languages

    def extensions(self) -> List[str]:
        return sorted(self._by_extension)

    def table_for(self, language: str) -> Optional[ClassificationTable]:
        chunker = self._languages.get(language)
        return chunker.table if chunker is not None else None

    def legacy_chunker(self, language: str) -> Optional[Chunker]:
        """Hand-written reference chunker for ``language``, if one exists."""
        return self._legacy.get(language)

    def __repr__(self) -> str:
        return (
            f"ChunkerRegistry(languages={len(self._languages)}, "
            f"extensions={len(self._by_extension)})"
        )
