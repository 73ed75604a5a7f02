"""
Paint Matcher Error Types

Exception hierarchy shared by the extraction pipeline, the paint matcher
and the HTTP layer. The API maps each kind to its own status code so that
"could not read your photo" stays distinguishable from "no results".
"""


class PaintMatchError(Exception):
    """Base class for all paint matcher errors."""
    pass


class InvalidInputError(PaintMatchError, ValueError):
    """Input violates an upstream contract (empty buffer, bad upload)."""
    pass


class InvalidColorFormat(InvalidInputError):
    """A hex color string could not be parsed as #RRGGBB."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid hex color format: {value!r}")


class QuantizationFailure(PaintMatchError, RuntimeError):
    """The quantizer could not produce a dominant color and palette."""
    pass


class MalformedCatalogEntry(PaintMatchError, ValueError):
    """A single catalog entry carries an unparseable hex value."""

    def __init__(self, code: str, hex_value):
        self.code = code
        self.hex_value = hex_value
        super().__init__(f"Catalog entry {code!r} has malformed hex {hex_value!r}")


class ResultNotFound(PaintMatchError, KeyError):
    """No stored analysis exists for the requested ID."""

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(request_id)

    def __str__(self):
        return f"No analysis found for ID: {self.request_id}"
