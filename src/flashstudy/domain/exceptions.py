"""Error hierarchy shared by every layer."""


class FlashstudyError(Exception):
    """Base class for all flashstudy errors."""


class InvalidArgumentError(FlashstudyError, ValueError):
    """A value outside its documented domain reached a pure component."""


class NotFoundError(FlashstudyError, LookupError):
    """A referenced card, folder or checklist item does not exist."""


class PersistenceError(FlashstudyError):
    """A read or write against a backing store failed."""


class InconsistentStateError(FlashstudyError):
    """The session state violated one of its own invariants."""
