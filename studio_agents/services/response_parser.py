"""
Response Parser - extracts named sections from Planner and Writer output.

The models are instructed to answer with literal markdown headers:

    **Checklist**                 (Planner)
    **Final One-Shot Prompt**     (Writer)
    **Assumptions**               (Writer)
    **Clarifying Questions**      (Writer)

Parsing is substring based, so these header strings are a versioned
contract with the persona instructions in ``personas.py``. A header that
starts a line wins over the same text echoed inside prose, and each header
is only searched for after the previous one.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging
import re

from studio_agents.models.content import SUPPORTED_ASPECT_RATIOS, GeneratedContent

logger = logging.getLogger(__name__)

CHECKLIST_HEADER = "**Checklist**"
PROMPT_HEADER = "**Final One-Shot Prompt**"
ASSUMPTIONS_HEADER = "**Assumptions**"
QUESTIONS_HEADER = "**Clarifying Questions**"

WRITER_HEADERS = (PROMPT_HEADER, ASSUMPTIONS_HEADER, QUESTIONS_HEADER)

# Returned in place of a final prompt when the section is missing.
# Callers must check ``is_parse_failure`` and raise instead of passing it on.
PARSE_FAILURE = "Error: Could not parse final prompt."

_BULLET_RE = re.compile(r"^(?:[-•]\s*|\*\s+|\d+[.)]\s+)")
_ASPECT_RATIO_RE = re.compile(r"\b(?:AR|Aspect Ratio)\s*[:=]\s*(\d{1,2}\s*:\s*\d{1,2})", re.IGNORECASE)


@dataclass
class PlannerSections:
    """Parsed Planner output."""
    checklist: List[str]
    checklist_text: str


def _find_header(text: str, header: str, start: int = 0) -> int:
    """
    Locate ``header`` at or after ``start``.

    Prefers an occurrence at the beginning of a line (optionally preceded by
    whitespace or markdown heading marks); falls back to the first plain
    substring match. Returns -1 when absent.
    """
    line_anchored = re.compile(r"(?m)^[ \t#>]*" + re.escape(header))
    match = line_anchored.search(text, start)
    if match:
        return match.end() - len(header)
    return text.find(header, start)


def extract_sections(text: str, headers: Sequence[str]) -> List[Optional[str]]:
    """
    Split ``text`` into the sections introduced by ``headers``.

    Each section runs from the end of its header to the start of the next
    header found (or the end of the text). Missing headers yield None.
    """
    positions: List[Tuple[int, int]] = []
    cursor = 0
    for header in headers:
        index = _find_header(text, header, cursor)
        if index == -1:
            positions.append((-1, -1))
            continue
        positions.append((index, index + len(header)))
        cursor = index + len(header)

    sections: List[Optional[str]] = []
    for i, (start, body_start) in enumerate(positions):
        if start == -1:
            sections.append(None)
            continue
        end = len(text)
        for next_start, _ in positions[i + 1:]:
            if next_start != -1:
                end = next_start
                break
        sections.append(text[body_start:end].strip())
    return sections


def split_list(section: Optional[str]) -> List[str]:
    """Split a list section into items, stripping bullet markers and blanks."""
    if not section:
        return []
    items = []
    for line in section.splitlines():
        item = _BULLET_RE.sub("", line.strip()).strip()
        if item:
            items.append(item)
    return items


def extract_aspect_ratio(prompt: str) -> Optional[str]:
    """Return the trailing ``AR: W:H`` tag if it names a supported ratio."""
    matches = _ASPECT_RATIO_RE.findall(prompt)
    if not matches:
        return None
    ratio = re.sub(r"\s+", "", matches[-1])
    if ratio not in SUPPORTED_ASPECT_RATIOS:
        logger.warning(f"response_parser.unsupported_aspect_ratio: ratio={ratio}")
        return None
    return ratio


def parse_planner_response(text: str) -> Optional[PlannerSections]:
    """
    Extract the checklist from Planner output.

    Returns None when the **Checklist** header is missing or has no items.
    """
    (checklist_text,) = extract_sections(text, (CHECKLIST_HEADER,))
    if not checklist_text:
        return None
    checklist = split_list(checklist_text)
    if not checklist:
        return None
    return PlannerSections(checklist=checklist, checklist_text=checklist_text)


def parse_writer_response(text: str, checklist: List[str]) -> GeneratedContent:
    """
    Structure Writer output into GeneratedContent.

    A missing final prompt section yields ``PARSE_FAILURE`` as the prompt;
    missing assumptions or questions degrade to empty lists.
    """
    prompt_part, assumptions_part, questions_part = extract_sections(text, WRITER_HEADERS)

    final_prompt = prompt_part or PARSE_FAILURE
    return GeneratedContent(
        checklist=list(checklist),
        final_prompt=final_prompt,
        assumptions=split_list(assumptions_part),
        questions=split_list(questions_part),
        aspect_ratio=extract_aspect_ratio(prompt_part) if prompt_part else None,
    )


def is_parse_failure(content: GeneratedContent) -> bool:
    """True when the Writer output had no usable final prompt."""
    return content.final_prompt == PARSE_FAILURE or not content.final_prompt.strip()
