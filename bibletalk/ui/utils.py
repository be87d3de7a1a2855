"""Utility functions for the Streamlit UI."""

from collections.abc import Mapping

from bibletalk.generators.discussion import DiscussionOutline

FLAGGED_PREFIX = "Hint appears to be suggestive of "
FLAGGED_SUFFIX = " etc. Please contact support if you need more clarifications"

# Display label for each outline field, in reading order
DISCUSSION_SECTIONS = [
    ("icebreaker_question", "Ice breaker question"),
    ("first_scripture", "First scripture"),
    ("first_question", "First question"),
    ("second_scripture", "Second scripture"),
    ("second_question", "Second question"),
    ("last_scripture", "Last scripture"),
    ("last_question", "Last question"),
    ("concluding_statement", "In conclusion"),
]


def format_flagged_categories(categories: Mapping[str, bool] | None) -> str:
    """Describe the flagged moderation categories of a hint.

    Args:
        categories: Category name to flag.

    Returns:
        Sentence listing every flagged category, or "" if none are flagged.
    """
    if not categories:
        return ""

    flagged = [name for name, is_flagged in categories.items() if is_flagged]
    if not flagged:
        return ""
    return FLAGGED_PREFIX + ", ".join(flagged) + FLAGGED_SUFFIX


def create_download_markdown(discussion: DiscussionOutline) -> str:
    """Create markdown content for download.

    Args:
        discussion: The outline to render.

    Returns:
        Formatted markdown string.
    """
    lines = [f"# {discussion.bible_talk_topic}", "", discussion.introductory_statement, ""]

    for field, label in DISCUSSION_SECTIONS:
        lines.append(f"## {label}")
        lines.append("")
        lines.append(getattr(discussion, field))
        lines.append("")

    return "\n".join(lines)
