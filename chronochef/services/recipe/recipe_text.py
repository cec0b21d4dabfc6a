"""
Parsing of recipes the user types or pastes in.

Everything here is pure: text in, lists/strings out.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_COOK_TIME = "Not specified"

_INGREDIENT_HEADINGS = ("ingredients", "ingredient list", "you will need", "what you need")
_INSTRUCTION_HEADINGS = ("instructions", "directions", "method", "steps", "preparation")

_TIME_LINE = re.compile(
    r"^(?:total|cook(?:ing)?|prep(?:aration)?)?\s*time\s*[:\-]\s*(?P<value>.+)$",
    re.IGNORECASE,
)
# "- ", "* ", "• ", "1. ", "2) "
_LIST_MARKER = re.compile(r"^(?:[-*•]\s+|\d+[.)]\s+)")


@dataclass
class ParsedRecipe:
    description: str = ""
    cook_time: Optional[str] = None
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)


def split_lines(text: Optional[str]) -> List[str]:
    """One element per non-blank line, stripped, in order."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def strip_list_marker(line: str) -> str:
    return _LIST_MARKER.sub("", line, count=1).strip()


def _heading(line: str) -> Optional[str]:
    normalized = line.strip().rstrip(":").strip().lower()
    if normalized in _INGREDIENT_HEADINGS:
        return "ingredients"
    if normalized in _INSTRUCTION_HEADINGS:
        return "instructions"
    return None


def parse_recipe_content(text: str) -> ParsedRecipe:
    """
    Split a pasted recipe into description, cook time, ingredients and steps.

    Headings such as "Ingredients:" and "Instructions:" switch sections; lines
    before the first heading form the description. A recipe without any
    heading is treated as a list of steps whose first line is the description.
    """
    parsed = ParsedRecipe()
    description_lines: List[str] = []
    section = "description"
    saw_heading = False

    for line in split_lines(text):
        heading = _heading(line)
        if heading:
            section = heading
            saw_heading = True
            continue

        time_match = _TIME_LINE.match(line)
        if time_match and parsed.cook_time is None:
            parsed.cook_time = time_match.group("value").strip()
            continue

        if section == "ingredients":
            item = strip_list_marker(line)
            if item:
                parsed.ingredients.append(item)
        elif section == "instructions":
            step = strip_list_marker(line)
            if step:
                parsed.instructions.append(step)
        else:
            description_lines.append(line)

    if not saw_heading:
        parsed.instructions = [strip_list_marker(line) for line in description_lines]
        parsed.instructions = [step for step in parsed.instructions if step]
        description_lines = description_lines[:1]

    parsed.description = " ".join(description_lines)
    return parsed

