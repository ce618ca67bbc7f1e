"""Error types for Typing Arena.

Every failure in this package degrades to a visible, localized message.
The controller catches these at its boundaries and turns them into notices;
none of them is meant to terminate the process.
"""


class TypingArenaError(RuntimeError):
    """Base class for all Typing Arena errors."""


class PreconditionError(TypingArenaError):
    """Raised when an operation is attempted without its prerequisites.

    Examples: no participant name set, no passage target loaded.
    Raised before any state is mutated.
    """


class WriteError(TypingArenaError):
    """Raised when persisting a record fails."""


class IdentityNotReadyError(WriteError):
    """Raised when a write is attempted before the actor id is established."""


class ReadError(TypingArenaError):
    """Raised when a leaderboard or history fetch fails."""


class CorpusLoadError(TypingArenaError):
    """Raised when the passage corpus cannot be loaded.

    Corpus parsing is all-or-nothing: a partial corpus is never returned.
    """
