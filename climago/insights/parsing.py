"""
Turns loosely formatted generative text into structured card data.

The model is asked for a fixed layout (see ``climago.prompts``) but nothing
guarantees it follows it: labels may change case, gain markdown emphasis or
disappear entirely. Every function here degrades to emptier results instead
of raising.
"""
import re
from typing import Dict, Iterable, List, Optional

from climago.models import AdviceDocument, PlaceItem, Tip, VerdictDocument

ADVICE_LABELS = ("PLACES", "NEARBY", "WEAR", "EAT", "ALERT")
NO_ALERT_VALUES = {"none", "none."}

_LIST_ITEM = re.compile(r"^\d+\.\s*(.+?)\s*[-–]\s*(.+)$")
_NUMBER_PREFIX = re.compile(r"^\d+\.\s*")


def _label_pattern(labels: Iterable[str]) -> "re.Pattern[str]":
    names = "|".join(re.escape(label) for label in labels)
    # Tolerates "**WEAR:**", "## PLACES:" and "Wear :" alike.
    return re.compile(rf"^[#*\s]*({names})\**\s*:\s*(.*)$", re.IGNORECASE)


_ADVICE_LABEL = _label_pattern(ADVICE_LABELS)


def strip_emphasis(value: str) -> str:
    return value.replace("*", "").strip()


def scan_sections(text: Optional[str], labels: Iterable[str] = ADVICE_LABELS) -> Dict[str, List[str]]:
    """
    Split ``text`` into labelled sections with a single pass over its lines.

    Lines before the first label are dropped. A label line opens (or
    restarts) its section; any text after the colon is the section's first
    line. Keys come back upper-cased.
    """
    if not isinstance(text, str):
        return {}
    labels = tuple(labels)
    pattern = _ADVICE_LABEL if labels == ADVICE_LABELS else _label_pattern(labels)

    sections: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        match = pattern.match(trimmed)
        if match:
            current = match.group(1).upper()
            rest = match.group(2).strip()
            sections[current] = [rest] if strip_emphasis(rest) else []
        elif current is not None:
            sections[current].append(trimmed)
    return sections


def parse_list_items(lines: Iterable[str]) -> List[PlaceItem]:
    """Parse ``N. Name - Description`` lines; unmatched lines become name-only items."""
    items: List[PlaceItem] = []
    for line in lines:
        match = _LIST_ITEM.match(line)
        if match:
            name, description = strip_emphasis(match.group(1)), strip_emphasis(match.group(2))
        else:
            name, description = strip_emphasis(_NUMBER_PREFIX.sub("", line)), ""
        if name:
            items.append(PlaceItem(name=name, description=description))
    return items


def _join_free_text(lines: Optional[List[str]]) -> str:
    return strip_emphasis(" ".join(lines or []))


def parse_advice(text: Optional[str]) -> AdviceDocument:
    sections = scan_sections(text, ADVICE_LABELS)
    return AdviceDocument(
        places=parse_list_items(sections.get("PLACES", [])),
        nearby=parse_list_items(sections.get("NEARBY", [])),
        wear=_join_free_text(sections.get("WEAR")),
        eat=_join_free_text(sections.get("EAT")),
        alert=_join_free_text(sections.get("ALERT")),
    )


def is_no_alert(value: str) -> bool:
    return value.strip().lower() in NO_ALERT_VALUES


def advice_tips(document: AdviceDocument) -> List[Tip]:
    """Tip chips for display. An ALERT of "None" is not shown."""
    tips: List[Tip] = []
    if document.wear:
        tips.append(Tip(kind="wear", text=document.wear))
    if document.eat:
        tips.append(Tip(kind="eat", text=document.eat))
    if document.alert and not is_no_alert(document.alert):
        tips.append(Tip(kind="alert", text=document.alert))
    return tips


# ── Comparison verdict ───────────────────────────────────────────────────────

def _region(text: str, label: str, until: Optional[str]) -> str:
    # Upper-case only: prose such as "for this reason:" must not open a region.
    start = re.search(rf"{label}\s*:", text)
    if not start:
        return ""
    region = text[start.end():]
    if until:
        end = re.search(rf"{until}\s*:", region)
        if end:
            region = region[: end.start()]
    return strip_emphasis(region)


def parse_verdict(text: Optional[str]) -> VerdictDocument:
    """
    Extract COMPARISON / WINNER / REASON regions.

    Without a usable WINNER the document switches to raw mode and only
    ``raw`` should be displayed.
    """
    if not isinstance(text, str):
        return VerdictDocument(raw="", mode="raw")

    winner = _region(text, "WINNER", "REASON")
    if not winner:
        return VerdictDocument(raw=text, mode="raw")

    return VerdictDocument(
        comparison=_region(text, "COMPARISON", "WINNER") or None,
        winner=winner,
        reason=_region(text, "REASON", None) or None,
        raw=text,
        mode="structured",
    )
