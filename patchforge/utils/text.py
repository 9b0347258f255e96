import re

SNIPPET_LIMIT = 120


def detect_eol(text: str) -> str:
    """
    Return the dominant line ending of *text*.

    Counts CRLF, lone LF and lone CR; falls back to LF when the text has no
    line breaks. Ties prefer LF, then CRLF.
    """
    crlf = text.count("\r\n")
    lf = text.count("\n") - crlf
    cr = text.count("\r") - crlf
    best = max((lf, 2, "\n"), (crlf, 1, "\r\n"), (cr, 0, "\r"))
    return best[2] if best[0] else "\n"


def normalize_eol(text: str) -> str:
    """Convert every line ending to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def restore_eol(text: str, eol: str) -> str:
    """Convert LF-only text back to *eol*."""
    if eol == "\n":
        return text
    return text.replace("\n", eol)


def cleanup_llm_output(content: str) -> str:
    """
    Removes common LLM artifacts like <think> blocks and a markdown fence
    wrapping the whole edit text. Returns the cleaned content string.
    """
    if not content:
        return ""

    content = re.sub(r"<think>.*?</think>\n?", "", content, flags=re.DOTALL)

    # Only unwrap when a single fence encloses everything: ```lang\n(body)\n```
    fence_match = re.match(
        r"\s*```[\w-]*[ \t]*\n(.*?)\n[ \t]*```\s*\Z", content, flags=re.DOTALL
    )
    if fence_match and "```" not in fence_match.group(1):
        content = fence_match.group(1) + "\n"

    return content


def snippet(text: str, limit: int = SNIPPET_LIMIT) -> str:
    """Bounded excerpt of *text* for diagnostics."""
    text = text.strip("\r\n")
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 3)] + "..."
