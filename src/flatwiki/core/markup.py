"""Markdown rendering of page bodies."""

from markdown import Markdown


def create_parser() -> Markdown:
    """Create a Markdown parser.

    The extension set covers the common dialect: tables, fenced code,
    header ids, autolinks and ~~strikethrough~~.

    Returns:
        Configured Markdown parser instance.
    """
    return Markdown(
        extensions=[
            "extra",  # abbreviations, attr_list, def_list, fenced_code, footnotes, md_in_html, tables
            "sane_lists",
            "smarty",
            "toc",  # header ids
            "pymdownx.magiclink",  # bare URLs become links
            "pymdownx.tilde",  # ~~strikethrough~~
        ]
    )


def render_markdown(body: bytes) -> str:
    """Convert a raw page body to HTML.

    No sanitization happens here; raw HTML in the body passes through.

    Args:
        body: Page body as stored, UTF-8 in practice.

    Returns:
        HTML string.
    """
    return create_parser().convert(body.decode("utf-8", errors="replace"))
