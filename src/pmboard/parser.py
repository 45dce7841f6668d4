"""Read and write markdown documents with YAML front-matter."""

import logging
import re

import yaml

logger = logging.getLogger(__name__)

_FRONT_MATTER = re.compile(r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)", re.DOTALL)


def decode(text: str) -> tuple[dict, str]:
    """Split a document into (meta, body).

    Never raises. A missing, unclosed or unparseable front-matter block
    yields an empty meta dict; the body is everything after the block.
    """
    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, text

    yaml_content = match.group(1) or ""
    body = text[match.end() :]

    try:
        meta = yaml.safe_load(yaml_content)
    except yaml.YAMLError as exc:
        logger.warning("ignoring unparseable front-matter: %s", exc)
        return {}, body

    if not isinstance(meta, dict):
        return {}, body
    return meta, body


def encode(body: str, meta: dict) -> str:
    """Serialize meta as front-matter followed by the body, verbatim.

    The front-matter block is always written, even for empty meta, so that
    a body starting with "---" can't be mistaken for one.
    """
    dumped = yaml.safe_dump(meta, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return f"---\n{dumped}---\n{body}"


def wrap_body(body: str) -> str:
    """Body text as stored on disk: one leading and one trailing newline."""
    return f"\n{body}\n" if body else "\n"


def read_document(path) -> tuple[dict, str]:
    """Decode the document at path.

    Bytes that are not valid UTF-8 decode as U+FFFD.
    """
    with open(path, encoding="utf-8", errors="replace") as f:
        return decode(f.read())


def write_document(path, body: str, meta: dict) -> None:
    """Encode and write a document to path."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(encode(body, meta))
