"""Markup (HTML) rules."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Dict, List

from qualitygate.config.schema import ThresholdsConfig
from qualitygate.findings.models import FileCategory
from qualitygate.rules.models import Rule

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
# Raw-text elements: their bodies are not markup
_RAW_TEXT_RE = re.compile(
    r"(<(script|style)\b[^>]*>).*?(</\2\s*>)", re.DOTALL | re.IGNORECASE
)
_OPEN_TAG_RE = re.compile(r"<([a-zA-Z][a-zA-Z0-9-]*)\b[^>]*>")
_CLOSE_TAG_RE = re.compile(r"</([a-zA-Z][a-zA-Z0-9-]*)\s*>")
_IMG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_ALT_RE = re.compile(r"\balt\s*=", re.IGNORECASE)
_LAZY_RE = re.compile(r"\bloading\s*=\s*['\"]?lazy", re.IGNORECASE)
_EXTERNAL_SCRIPT_RE = re.compile(r"<script\b[^>]*\bsrc\s*=[^>]*>", re.IGNORECASE)
_DEFER_RE = re.compile(r"\b(?:defer|async)\b", re.IGNORECASE)
_HEADING_RE = re.compile(r"<h([1-6])\b", re.IGNORECASE)


def _strip_non_markup(content: str) -> str:
    content = _COMMENT_RE.sub("", content)
    return _RAW_TEXT_RE.sub(r"\1\3", content)


def _unclosed_tags(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    text = _strip_non_markup(content)
    opened: Counter[str] = Counter()
    for m in _OPEN_TAG_RE.finditer(text):
        name = m.group(1).lower()
        if name in VOID_ELEMENTS or m.group(0).endswith("/>"):
            continue
        opened[name] += 1
    closed = Counter(m.group(1).lower() for m in _CLOSE_TAG_RE.finditer(text))
    return [
        {"tag": tag, "opened": count, "closed": closed[tag]}
        for tag, count in opened.items()
        if count > closed[tag]
    ]


def _images_without_alt(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = sum(1 for m in _IMG_RE.finditer(content) if not _ALT_RE.search(m.group(0)))
    return [{"count": count}] if count else []


def _images_without_lazy(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = sum(1 for m in _IMG_RE.finditer(content) if not _LAZY_RE.search(m.group(0)))
    return [{"count": count}] if count else []


def _blocking_scripts(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = sum(
        1 for m in _EXTERNAL_SCRIPT_RE.finditer(content)
        if not _DEFER_RE.search(m.group(0))
    )
    return [{"count": count}] if count else []


def _heading_jumps(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    """Level jumps between consecutive headings, in document order."""
    levels = [int(m.group(1)) for m in _HEADING_RE.finditer(_COMMENT_RE.sub("", content))]
    return [
        {"previous": prev, "current": cur}
        for prev, cur in zip(levels, levels[1:])
        if cur - prev > 1
    ]


def markup_metrics(content: str) -> Dict[str, float]:
    text = _strip_non_markup(content)
    return {
        "tags": len(_OPEN_TAG_RE.findall(text)),
        "images": len(_IMG_RE.findall(content)),
        "scripts": len(re.findall(r"<script\b", content, re.IGNORECASE)),
        "headings": len(_HEADING_RE.findall(content)),
    }


HTML_UNCLOSED_TAG = Rule(
    id="HTML_UNCLOSED_TAG",
    name="Unclosed Tag",
    category=FileCategory.MARKUP,
    kind="unclosed-tag",
    type="issue",
    level="high",
    message="Unclosed <{tag}> tag: {opened} opened, {closed} closed",
    suggestion="Close every non-void element explicitly.",
    detector=_unclosed_tags,
)

HTML_IMG_ALT = Rule(
    id="HTML_IMG_ALT",
    name="Image Without Alt Text",
    category=FileCategory.MARKUP,
    kind="missing-alt",
    type="issue",
    level="medium",
    message="{count} image(s) missing the alt attribute",
    suggestion="Add a descriptive alt attribute (alt=\"\" for decorative images).",
    detector=_images_without_alt,
)

HTML_IMG_LAZY = Rule(
    id="HTML_IMG_LAZY",
    name="Image Without Lazy Loading",
    category=FileCategory.MARKUP,
    kind="lazy-loading",
    type="suggestion",
    level="medium",
    message="{count} image(s) without loading=\"lazy\"",
    suggestion="Add loading=\"lazy\" to images below the fold.",
    detector=_images_without_lazy,
)

HTML_SCRIPT_DEFER = Rule(
    id="HTML_SCRIPT_DEFER",
    name="Render-Blocking Script",
    category=FileCategory.MARKUP,
    kind="blocking-script",
    type="suggestion",
    level="high",
    message="{count} external script(s) without defer or async",
    suggestion="Load external scripts with defer or async.",
    detector=_blocking_scripts,
)

HTML_HEADING_ORDER = Rule(
    id="HTML_HEADING_ORDER",
    name="Heading Level Jump",
    category=FileCategory.MARKUP,
    kind="heading-hierarchy",
    type="issue",
    level="low",
    message="Heading level jumps from h{previous} to h{current}",
    suggestion="Do not skip heading levels.",
    detector=_heading_jumps,
)

ALL_MARKUP_RULES = [
    HTML_UNCLOSED_TAG,
    HTML_IMG_ALT,
    HTML_IMG_LAZY,
    HTML_SCRIPT_DEFER,
    HTML_HEADING_ORDER,
]
