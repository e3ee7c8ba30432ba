"""Reference rewriting for command documents.

Command documents point at knowledge files with a bare marker such as
``@knowledge/layout.md``. Once deployed, the marker must address the
knowledge root of the chosen target instead.
"""

DEFAULT_MARKER = "@knowledge/"


def rewrite_references(text: str, addressing_prefix: str, marker: str = DEFAULT_MARKER) -> str:
    """Replace every occurrence of ``marker`` with ``@<addressing_prefix>/``.

    Literal substitution only: code blocks and examples are rewritten the same
    way as prose, and no other text changes.

    Args:
        text: Pristine source text of a command document
        addressing_prefix: Knowledge root as seen from the target
            (e.g. "~/.claude/fca/knowledge")
        marker: Reference marker used in source documents

    Returns:
        Rewritten text

    Example:
        >>> rewrite_references("See @knowledge/a.md", ".claude/fca/knowledge")
        'See @.claude/fca/knowledge/a.md'
    """
    return text.replace(marker, f"@{addressing_prefix}/")
