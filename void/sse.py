"""Server-sent event formatting for the Datastar client.

The page loads Datastar 1.0.0-beta.11, which understands the
``datastar-merge-fragments`` event: every ``data: fragments`` line is joined
back into markup and morphed into the element with the matching id.
"""

MERGE_FRAGMENTS = "datastar-merge-fragments"


class TransportError(Exception):
    """Raised when an event cannot be handed to a viewer."""


def merge_fragments(fragment: str) -> str:
    """Format a markup fragment as one SSE event replacing its target element."""
    lines = [f"event: {MERGE_FRAGMENTS}"]
    for line in fragment.splitlines():
        lines.append(f"data: fragments {line}")
    return "\n".join(lines) + "\n\n"
