"""Post body rendering.

Learn: Post bodies are stored as authored and rendered on the way out,
like WordPress's `the_content` filter. This is a small `wpautop`:
blank lines separate paragraphs, single newlines become <br />, and
chunks that already start with a block-level tag are left alone.
"""

import re

_BLOCK_TAGS = (
    "address|article|aside|blockquote|details|div|dl|fieldset|figcaption|"
    "figure|footer|form|h[1-6]|header|hr|li|main|nav|ol|p|pre|section|"
    "table|ul"
)
_BLOCK_START = re.compile(rf"^<(?:{_BLOCK_TAGS})[\s/>]", re.IGNORECASE)
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")


def render_content(raw: str | None) -> str:
    """Render a raw post body to HTML."""
    if not raw or not raw.strip():
        return ""

    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    rendered = []
    for chunk in _PARAGRAPH_SPLIT.split(text.strip()):
        chunk = chunk.strip()
        if not chunk:
            continue
        if _BLOCK_START.match(chunk):
            rendered.append(chunk)
        else:
            rendered.append("<p>" + chunk.replace("\n", "<br />\n") + "</p>")
    return "\n".join(rendered) + "\n"
