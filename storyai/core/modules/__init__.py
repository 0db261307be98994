from .story_writer import StoryWriter, StoryGenerationError
from .illustrator import Illustrator
from .narrator import Narrator

__all__ = [
    "StoryWriter",
    "StoryGenerationError",
    "Illustrator",
    "Narrator",
]
