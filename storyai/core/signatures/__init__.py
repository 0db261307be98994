from .storybook import StorybookPage, StorybookSignature

__all__ = [
    "StorybookPage",
    "StorybookSignature",
]
