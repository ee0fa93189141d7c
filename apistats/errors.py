"""Error taxonomy for loading, resolving and reporting on API indexes."""


class ApiIndexError(Exception):
    """Base class for every failure raised by the engine."""

    stage = "analysis"

    def __init__(self, message: str, identifier: str | None = None) -> None:
        """Store the message along with the offending identifier, if any."""
        super().__init__(message)
        self.message = message
        self.identifier = identifier

    def __str__(self) -> str:
        """Render the message prefixed with the failing stage."""
        return f"[{self.stage}] {self.message}"


class FormatError(ApiIndexError):
    """The input is not parseable as an API index."""

    stage = "load"


class UnsupportedVersionError(ApiIndexError):
    """The index declares a format version outside the supported range."""

    stage = "load"

    def __init__(self, version: int, minimum: int, maximum: int) -> None:
        """Record the declared version and the supported range."""
        super().__init__(
            f"unsupported format version {version} "
            f"(supported: {minimum} to {maximum})"
        )
        self.version = version
        self.minimum = minimum
        self.maximum = maximum


class DanglingReferenceError(ApiIndexError):
    """An identifier is referenced but neither defined nor marked external."""

    stage = "load"

    def __init__(self, identifier: str, referrer: str, role: str) -> None:
        """Name the missing identifier, who referenced it, and how."""
        super().__init__(
            f"item {referrer!r} references unknown id {identifier!r} as {role}",
            identifier,
        )
        self.referrer = referrer
        self.role = role


class CyclicReExportError(ApiIndexError):
    """Following re-export or containment links revisited an identifier."""

    stage = "resolve"

    def __init__(self, identifier: str, chain: list[str]) -> None:
        """Keep the chain of identifiers that closes the cycle."""
        super().__init__(
            f"cycle while resolving {identifier!r}: {' -> '.join(chain)}",
            identifier,
        )
        self.chain = tuple(chain)


class UnsupportedPresentationError(ApiIndexError):
    """A caller asked for a report format the emitter does not implement."""

    stage = "emit"

    def __init__(self, presentation: str, supported: list[str]) -> None:
        """Name the requested presentation and the supported ones."""
        super().__init__(
            f"unsupported presentation {presentation!r} "
            f"(choose from: {', '.join(supported)})"
        )
        self.presentation = presentation
