class SpriteError(Exception):
    """Base sprite_stacker error"""


class ConfigError(SpriteError):
    """Missing or invalid build configuration"""


class SourceError(SpriteError):
    """A single source image could not be turned into a raster image."""

    kind = "source-error"

    def __init__(self, name: str, detail: str = ""):
        self.name = name
        self.detail = detail
        msg = f"{self.kind}: {name}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class SourceUnreadable(SourceError):
    """Bytes for the source could not be obtained"""

    kind = "unreadable"


class UnsupportedFormat(SourceError):
    """Extension does not map to a known decoder"""

    kind = "unsupported-format"


class DecodeFailure(SourceError):
    """Bytes were read but are malformed for the selected decoder"""

    kind = "decode-failure"


class CompositeFailure(SpriteError):
    """A copy task could not write its assigned rectangle"""


class PipelineAborted(SpriteError):
    """Strict run stopped because at least one source failed to decode"""

    def __init__(self, failures):
        self.failures = list(failures)
        names = ", ".join(f.name for f in self.failures)
        super().__init__(f"{len(self.failures)} source(s) failed: {names}")


class OutputError(SpriteError):
    """Output directory or files could not be written"""
