"""Model API generators for moderation, discussions and flyers."""

from bibletalk.generators.discussion import DiscussionGenerator, DiscussionOutline
from bibletalk.generators.flyer import FlyerGenerator, build_flyer_prompt
from bibletalk.generators.moderation import ModerationChecker, ModerationResult

__all__ = [
    "DiscussionGenerator",
    "DiscussionOutline",
    "FlyerGenerator",
    "ModerationChecker",
    "ModerationResult",
    "build_flyer_prompt",
]
