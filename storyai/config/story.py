"""
Story wizard constants for the storybook generator.

These bound what the wizard accepts: age groups, languages and page count.
"""

STORY_CONSTANTS = {
    "age_groups": ["3-5", "6-8", "9-12"],
    "default_age": "3-5",
    "languages": ["Indonesia", "English", "Bilingual (Indo-Eng)"],
    "default_language": "Indonesia",
    "min_pages": 5,
    "max_pages": 15,
    "default_pages": 8,
    # Pause between successful illustrations in a batch run
    "batch_delay_seconds": 1.0,
}
