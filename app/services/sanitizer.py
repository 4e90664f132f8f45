import re

from bs4 import BeautifulSoup, Comment

# Matches WordPress shortcode tags such as [et_pb_section ...] or [/et_pb_section]
_SHORTCODE_RE = re.compile(r"\[/?[a-z_\-]+(?:\s[^\]]*?)?\]", re.IGNORECASE)

# Tags whose text never reaches a reader and must not be spell-checked
_REMOVE_TAGS = {
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "svg",
    "canvas",
    "template",
}

# Elements that start a new line of text
_BLOCK_TAGS = {
    "p", "div", "section", "article", "header", "footer", "main", "aside", "nav",
    "h1", "h2", "h3", "h4", "h5", "h6", "li", "ul", "ol", "dt", "dd",
    "table", "tr", "td", "th", "blockquote", "pre", "figcaption",
}


def strip_shortcodes(html: str) -> str:
    """Remove WordPress shortcode tags (e.g. ``[et_pb_section ...]``) from ``html``.

    Page builders (Divi, WPBakery, …) can leave shortcode markup in raw post
    content; the model would otherwise report the tag names as misspellings.
    """
    return _SHORTCODE_RE.sub("", html)


def html_to_text(html: str) -> str:
    """Return the visible text of an HTML fragment, one block element per line.

    Inline elements (``<b>``, ``<a>``, …) stay on their line, so words are
    never glued together or split apart.
    """
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(strip_shortcodes(html), "lxml")

    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    lines = (" ".join(line.split()) for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line)
