"""Entry Linking Rules — pure validation of the mood-based link between entries.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - A link goes from an Unpleasant entry to a Pleasant entry, never the other way
    - Each entry has at most one outgoing link (linked_entry is singular)
    - A link target may not become Unpleasant while other entries point at it

Design Decisions:
    - Raise LinkRuleViolationError (400, business rule) rather than return error dicts:
      the shell never needs to inspect the violation, only surface it
    - Moods parsed once at the boundary into the Mood enum, rules compare enums only
"""

from app.core.domain_types import Mood
from app.core.errors import InvalidInputError, LinkRuleViolationError


def parse_mood(value: str | None, field: str = "mood") -> Mood:
    """Parse a mood literal. Empty or unknown values are validation failures."""
    if not value:
        raise InvalidInputError(f"{field} parameter empty. Must be supplied", field)
    mood = Mood.parse(value)
    if mood is None:
        allowed = ", ".join(f"'{m.value}'" for m in Mood)
        raise InvalidInputError(
            f"{field} '{value}' is invalid. Must be one of {allowed}", field,
        )
    return mood


def check_can_link_from(mood: Mood) -> None:
    """Only unpleasant entries may link out."""
    if mood.is_pleasant:
        raise LinkRuleViolationError(
            "Cannot link an entry when the current entry mood type is pleasant",
        )


def check_can_link_to(target_mood: Mood) -> None:
    """Only pleasant entries may be linked to."""
    if not target_mood.is_pleasant:
        raise LinkRuleViolationError(
            "Cannot link to an entry whose mood type is unpleasant",
        )


def validate_link(source_mood: Mood, target_mood: Mood) -> None:
    """Full rule: Unpleasant source -> Pleasant target."""
    check_can_link_from(source_mood)
    check_can_link_to(target_mood)


def check_mood_keeps_link_valid(new_mood: Mood, has_link: bool) -> None:
    """A linked entry may not be edited to a pleasant mood."""
    if has_link and new_mood.is_pleasant:
        raise LinkRuleViolationError(
            "Cannot change mood to pleasant while the entry links to another entry",
        )


def check_link_target_mood_change(new_mood: Mood, inbound_links: int) -> None:
    """An entry other entries link to must stay pleasant."""
    if inbound_links > 0 and not new_mood.is_pleasant:
        raise LinkRuleViolationError(
            f"Cannot change mood to unpleasant: {inbound_links} "
            f"entr{'y links' if inbound_links == 1 else 'ies link'} to this entry",
        )
