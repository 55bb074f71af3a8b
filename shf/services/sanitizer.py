"""Strip executable content from user-supplied HTML and URLs before saving."""

import re

from bs4 import BeautifulSoup

# Elements removed together with their content
_DANGEROUS_TAGS = ("script", "style", "iframe", "object", "embed", "form")

# Anything that looks like a "...script:" scheme (javascript:, vbscript:, ...)
_SCRIPT_SCHEME_RE = re.compile(r"[a-z]*script\s*:", re.IGNORECASE)


def sanitize_url(url: str | None) -> str | None:
    if url is None:
        return None
    cleaned = _SCRIPT_SCHEME_RE.sub("", url)
    cleaned = re.sub(r"[<>\"']", "", cleaned)
    return cleaned.strip()


def sanitize_html(html: str | None) -> str | None:
    if html is None:
        return None
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(_DANGEROUS_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            if attr.lower().startswith("on"):
                del tag.attrs[attr]
            elif attr.lower() in ("href", "src") and _SCRIPT_SCHEME_RE.search(str(tag.attrs[attr])):
                del tag.attrs[attr]

    return str(soup)
