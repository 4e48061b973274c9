"""
Centralized Exception Hierarchy for ChunkForge.

All exceptions inherit from ChunkForgeError so callers scanning many files
can catch one type and move on to the next file.

Each exception carries:
- error_code: Unique identifier for documentation lookup (e.g., "CF-CFG-001")
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue

Exception Hierarchy
-------------------
    ChunkForgeError (base)
    ├── ConfigurationError
    │   └── LanguageConfigError
    ├── CancellationError
    │   ├── CancelledError
    │   └── DeadlineExceededError
    └── ParseFatalError
        └── UnsupportedLanguageError

Soft anomalies (a declaration without a name, a node with a broken
position) are not exceptions at all: the extractor skips the node and keeps
walking.

Usage
-----
    from chunkforge.core.exceptions import ChunkForgeError, ParseFatalError

    try:
        result = registry.chunk(source_file)
    except ParseFatalError as e:
        logger.warning("Skipping file", path=source_file.path, error=str(e))
"""

from typing import List, Optional


class ChunkForgeError(Exception):
    """
    Base exception for all ChunkForge errors.

    Example
    -------
        try:
            registry.chunk(source_file)
        except ChunkForgeError as e:
            print(f"{e.error_code}: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    error_code: str = "CF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        """Initialize ChunkForgeError with helpful information.

        Args:
            message: Human-readable error message
            error_code: Unique identifier (e.g., "CF-CFG-001")
            why_it_happened: Explanation of root cause
            how_to_fix: List of actionable fix suggestions
        """
        super().__init__(message)

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(ChunkForgeError):
    """
    Raised when a chunker or registry is built without what it needs.

    This is fatal and happens before any file is touched: a missing
    classification table, a missing parse engine, or a language directory
    that yields no usable tables.
    """

    error_code = "CF-CFG-001"
    why_it_happened = (
        "A chunker was created without a parse engine or classification "
        "table, or no language tables could be loaded"
    )
    how_to_fix = [
        "Pass both a ParseEngine and a ClassificationTable to the chunker",
        "Check that languages_dir points at a directory of *.yaml tables",
        "Run 'chunkforge languages' to list the tables that load",
    ]


class LanguageConfigError(ConfigurationError):
    """
    Raised when a language classification table file is invalid.

    Attributes
    ----------
    path : str
        The table file that failed to load
    """

    error_code = "CF-CFG-002"
    why_it_happened = (
        "A language table is not valid YAML or is missing required fields "
        "(language, extensions, tree_sitter.grammar)"
    )
    how_to_fix = [
        "Validate the YAML syntax of the table file",
        "Make sure every extension starts with a '.'",
        "Declare at least one class or method node type",
    ]

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.path = path


# ============================================================================
# Cancellation Exceptions
# ============================================================================


class CancellationError(ChunkForgeError):
    """
    Base exception for calls stopped by a CancellationToken.

    No partial ChunkResult accompanies this error. Subclasses tell an
    explicit cancel apart from an expired deadline.
    """

    error_code = "CF-CAN-000"
    why_it_happened = "The operation was stopped before it finished"
    how_to_fix = ["Retry the operation with a fresh cancellation token"]


class CancelledError(CancellationError):
    """Raised when the token was cancelled explicitly."""

    error_code = "CF-CAN-001"
    why_it_happened = "The caller cancelled the operation"
    how_to_fix = ["Retry the operation if the cancellation was unintended"]


class DeadlineExceededError(CancellationError):
    """
    Raised when the token's deadline passed.

    Attributes
    ----------
    timeout : float
        The timeout in seconds the token was created with, when known
    """

    error_code = "CF-CAN-002"
    why_it_happened = "The operation did not finish before its deadline"
    how_to_fix = [
        "Increase the timeout passed to CancellationToken",
        "Skip very large or minified files before chunking",
    ]

    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.timeout = timeout


# ============================================================================
# Parse Exceptions
# ============================================================================


class ParseFatalError(ChunkForgeError):
    """
    Raised when the parse engine produced no tree at all.

    Aborts chunking of one file only. Syntax errors inside a recovered tree
    never raise this; the parser is error-tolerant.

    Attributes
    ----------
    language : str
        Language identifier the parse was requested for
    unsupported : bool
        True when the failure is because the grammar is unknown
    """

    error_code = "CF-PARSE-001"
    why_it_happened = "The parse engine could not produce a syntax tree"
    how_to_fix = [
        "Check that the file is text in the expected language",
        "Reinstall tree-sitter-language-pack if grammars fail to load",
    ]

    def __init__(
        self,
        message: str,
        language: Optional[str] = None,
        unsupported: bool = False,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.language = language
        self.unsupported = unsupported


class UnsupportedLanguageError(ParseFatalError):
    """Raised when no grammar is registered for the requested language."""

    error_code = "CF-PARSE-002"
    why_it_happened = "No tree-sitter grammar is available for this language"
    how_to_fix = [
        "Check the tree_sitter.grammar name in the language table",
        "Run 'chunkforge languages' to list supported languages",
    ]

    def __init__(self, message: str, language: Optional[str] = None) -> None:
        super().__init__(message, language=language, unsupported=True)


__all__ = [
    "ChunkForgeError",
    "ConfigurationError",
    "LanguageConfigError",
    "CancellationError",
    "CancelledError",
    "DeadlineExceededError",
    "ParseFatalError",
    "UnsupportedLanguageError",
]
