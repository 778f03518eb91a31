"""
Systematics Errors

Exception taxonomy for the property graph.

- DecodeError: identifier could not be decoded (recoverable, reject the request)
- StoreError: construction-time store violations (never seen after seal)
- NotFoundError: well-formed identifier that names nothing in the graph
- BuildError: a system could not be built completely
- ConfigError: registry, vocabulary or settings are missing or invalid
- InternalConsistencyError: a sealed graph violates an invariant (fatal)
"""


class SystematicsError(Exception):
    """
    Base exception for all systematics errors

    Carries a message plus optional context that is appended to the
    rendered error text.
    """

    def __init__(self, message: str, identifier: str = None, **kwargs):
        """
        Initialize SystematicsError

        Args:
            message: Error message
            identifier: Optional identifier the error is about
            **kwargs: Additional error context
        """
        self.message = message
        self.identifier = identifier
        self.context = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context"""
        parts = [self.message]
        if self.identifier:
            parts.append(f"(id: {self.identifier})")
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"[{context_str}]")
        return " ".join(parts)


# ============================================
# Identifier decoding
# ============================================


class DecodeError(SystematicsError):
    """Raised when an identifier cannot be decoded"""
    pass


class MalformedIdentifierError(DecodeError):
    """Unknown prefix, bad separators or non-numeric fields"""
    pass


class InvalidStructureError(DecodeError):
    """
    Numeric fields parsed but violate the structural invariants

    Examples: order outside 1..12, position greater than order,
    a connective whose endpoints sit in different orders.
    """
    pass


# ============================================
# Store / construction
# ============================================


class StoreError(SystematicsError):
    """Base exception for entry/link store violations"""
    pass


class DuplicateError(StoreError):
    """An identifier (or a single-occupancy slot) is already taken"""
    pass


class DanglingReferenceError(StoreError):
    """A link endpoint, tag or anchor reference does not exist"""
    pass


class GraphStateError(StoreError):
    """
    Operation not allowed in the graph's current state

    Writes are only allowed while building; queries only once sealed.
    """

    def __init__(self, message: str, state: str = None, **kwargs):
        self.state = state
        if state:
            kwargs["state"] = state
        super().__init__(message, **kwargs)


class BuildError(SystematicsError):
    """A system could not be built; nothing was published"""

    def __init__(self, message: str, order: int = None, **kwargs):
        self.order = order
        if order is not None:
            kwargs["order"] = order
        super().__init__(message, **kwargs)


# ============================================
# Queries / configuration
# ============================================


class NotFoundError(SystematicsError):
    """A well-formed identifier names nothing in this graph"""
    pass


class ConfigError(SystematicsError):
    """Registry, vocabulary or settings are missing or invalid"""
    pass


class InternalConsistencyError(SystematicsError, RuntimeError):
    """
    A sealed graph violates one of its invariants

    This indicates a construction bug. Callers must not recover from it.
    """
    pass
