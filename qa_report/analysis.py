"""
analysis.py — Parser for the free-text QA analysis.

The analysis is a loosely structured Portuguese report (written by a QA
engineer or generated) with ALL-CAPS section markers on lines of their own,
optionally underlined with dashes::

    RESUMO EXECUTIVO
    ----------------
    ...
    ANÁLISE DOS BUGS            (or BUGS IDENTIFICADOS)
    ...
    PRIORIZAÇÃO
    ...
    PRÓXIMOS PASSOS
    1. ...

Each section is optional; the result is a ``ParsedAnalysis`` with one
optional field per section, so rendering never branches on raw strings.
"""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SECTION_PATTERNS = {
    "executive_summary": r"RESUMO\s+EXECUTIVO",
    "bug_analysis": r"AN[ÁA]LISE\s+DOS\s+BUGS|BUGS\s+IDENTIFICADOS",
    "prioritization": r"PRIORIZA[ÇC][ÃA]O",
    "next_steps": r"PR[ÓO]XIMOS\s+PASSOS",
}

_MARKER_RE = re.compile(
    r"^[ \t]*(?:"
    + "|".join(f"(?P<{name}>{pattern})" for name, pattern in SECTION_PATTERNS.items())
    + r")[ \t]*:?[ \t]*$(?:\n[ \t]*[-=]{3,}[ \t]*$)?",
    re.MULTILINE | re.IGNORECASE,
)

_GROUP_HEADER_RE = re.compile(r"^(?:Grupo\s+\d+\s*:\s*\S.*|\d+\.\s+\S.*)$", re.IGNORECASE)
_FIELD_RE = re.compile(r"^-\s*([^:]+?)\s*:\s*(.*)$")
_LABEL_RE = re.compile(r"^([A-ZÀ-Ý][\w ]{0,40}?)\s*:\s*(.*)$")
_STEP_PREFIX_RE = re.compile(r"^\s*(?:\d+[.)]|[-•*])\s*")


@dataclass
class BugGroup:
    """One bug (or group of related bugs) described in the analysis."""
    title: str
    fields: list[tuple[str, str]] = field(default_factory=list)

    def get(self, label: str) -> str | None:
        wanted = label.lower()
        for name, value in self.fields:
            if name.lower() == wanted:
                return value
        return None

    @property
    def severity(self) -> str | None:
        return self.get("Severidade")

    @property
    def quantity(self) -> int:
        """``- Quantidade:`` as an integer, 1 when absent or unparsable."""
        raw = self.get("Quantidade") or ""
        match = re.search(r"\d+", raw)
        return int(match.group()) if match else 1


@dataclass
class ParsedAnalysis:
    executive_summary: str | None = None
    bug_analysis: str | None = None
    prioritization: str | None = None
    next_steps: list[str] | None = None
    groups: list[BugGroup] = field(default_factory=list)


def split_sections(text: str) -> dict[str, str]:
    """Map each recognised section name to its body text.

    A body runs from its marker to the next recognised marker (or the end).
    When a marker repeats, the first occurrence wins.
    """
    markers = list(_MARKER_RE.finditer(text))
    sections: dict[str, str] = {}
    for i, match in enumerate(markers):
        name = match.lastgroup
        end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
        if name not in sections:
            sections[name] = text[match.end():end].strip()
    return sections


def parse_groups(text: str) -> list[BugGroup]:
    """Extract bug groups: an unindented header line followed by fields.

    Fields are ``- Label: value`` lines or indented ``Label: value`` lines.
    Other lines (e.g. numbered reproduction steps) are appended to the
    preceding field's value.
    """
    groups: list[BugGroup] = []
    current: BugGroup | None = None
    for raw in text.splitlines():
        if not raw.strip():
            continue
        stripped = raw.strip()
        is_indented = raw[:1] in (" ", "\t")

        if not is_indented and _GROUP_HEADER_RE.match(stripped):
            current = BugGroup(title=stripped)
            groups.append(current)
            continue
        if current is None:
            continue

        field_match = _FIELD_RE.match(stripped) or _LABEL_RE.match(stripped)
        if field_match:
            current.fields.append((field_match.group(1), field_match.group(2).strip()))
        elif current.fields:
            label, value = current.fields[-1]
            current.fields[-1] = (label, f"{value} {stripped}".strip())
    return groups


def parse_next_steps(text: str) -> list[str]:
    """One item per non-empty line, numbering and bullets removed."""
    items = []
    for line in text.splitlines():
        item = _STEP_PREFIX_RE.sub("", line).strip()
        if item:
            items.append(item)
    return items


def parse_analysis(text: str | None) -> ParsedAnalysis:
    """Parse the analysis text into optional sections and bug groups."""
    text = (text or "").replace("\r\n", "\n")
    sections = split_sections(text)

    bug_text = sections.get("bug_analysis")
    if bug_text is None:
        # Without a bug section, only text outside every known section can
        # hold groups (numbered next steps must not turn into bugs).
        first = _MARKER_RE.search(text)
        group_source = text[:first.start()] if first else text
    else:
        group_source = bug_text
    groups = parse_groups(group_source)

    next_steps = None
    if "next_steps" in sections:
        next_steps = parse_next_steps(sections["next_steps"])

    parsed = ParsedAnalysis(
        executive_summary=sections.get("executive_summary"),
        bug_analysis=bug_text,
        prioritization=sections.get("prioritization"),
        next_steps=next_steps,
        groups=groups,
    )
    logger.debug(
        "Analysis parsed: sections=%s, %d bug group(s)",
        sorted(sections), len(groups),
    )
    return parsed
