"""Message formatting for the notification sink."""

import re
from typing import Iterable

# A bare "&" that does not already start an entity
_BARE_AMPERSAND = re.compile(r"&(?!(?:[a-zA-Z]+|#[0-9]+|#x[0-9a-fA-F]+);)")
_UNLINKABLE = re.compile(r"[|<>\s]")


def _escape(text: str) -> str:
    # Feed text is usually still XML-escaped; only fill in what Slack needs.
    text = _BARE_AMPERSAND.sub("&amp;", text)
    return text.replace("<", "&lt;").replace(">", "&gt;")


def format_entry_line(entry) -> str:
    """One bullet line: linked title followed by the publish date."""
    link = entry.link.value
    title = _escape(entry.title)
    if not link:
        line = f"• {title}"
    elif _UNLINKABLE.search(link):
        # mrkdwn has no escape for these inside <url|text>
        line = f"• {title} ({_escape(link)})" if title else f"• {_escape(link)}"
    else:
        line = f"• <{link}|{title or link}>"
    if entry.publish_date:
        line += f" ({entry.publish_date})"
    return line


def format_new_entries(entries: Iterable, heading: str) -> str:
    """Summary message listing every new entry."""
    lines = [f"{heading}: new release notes", ""]
    lines.extend(format_entry_line(entry) for entry in entries)
    return "\n".join(lines)


def format_failure(error: Exception, heading: str) -> str:
    """Message sent when a run fails before anything is stored."""
    return f"⚠️ {heading}: failed to retrieve release notes\n{error}"
