"""StoryAI: children's storybook generator service."""
