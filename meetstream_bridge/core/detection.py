"""HTML page detection primitives.

An API that does not know a path often answers 200 with its web app's
index page, or redirects to a login page. Neither is data.

Primitives:
    looks_like_html(text, content_type) - Cheap check on header and prefix
    has_login_form(html)                - DOM parsing, strict (requires <form>)
    page_title(html)                    - <title> text for diagnostics
    describe_html(html)                 - One-line description for outcomes
"""

from __future__ import annotations

from bs4 import BeautifulSoup

_HTML_PREFIXES = ("<!doctype html", "<html", "<head", "<body")


def looks_like_html(text: str | None, content_type: str | None = None) -> bool:
    """Return True if a response body is an HTML document.

    Args:
        text: Raw response body
        content_type: Content-Type header value (may be None)
    """
    if content_type and "html" in content_type.lower():
        return True
    if not text:
        return False
    return text.lstrip()[:20].lower().startswith(_HTML_PREFIXES)


def has_login_form(html: str | None) -> bool:
    """DOM-based check for a login form with a password field.

    Strict check - requires:
    1. A <form> element exists
    2. Form contains <input type="password">
    """
    if not html:
        return False

    soup = BeautifulSoup(html, "html.parser")
    form = soup.find("form")
    if not form:
        return False

    # Case-insensitive match for type="password"
    return form.find("input", {"type": lambda t: bool(t and t.lower() == "password")}) is not None


def page_title(html: str | None) -> str | None:
    """Return the stripped <title> text, if any."""
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    if soup.title is None or soup.title.string is None:
        return None
    title = soup.title.string.strip()
    return title or None


def describe_html(html: str | None) -> str:
    """Describe an HTML response for diagnostics."""
    kind = "login page" if has_login_form(html) else "HTML page"
    title = page_title(html)
    return f"{kind} ({title!r})" if title else kind
