"""Enums for the API models."""

from enum import Enum


class AgeGroup(str, Enum):
    """Target reader age groups offered by the wizard."""

    TODDLER = "3-5"
    EARLY_READER = "6-8"
    MIDDLE_GRADE = "9-12"


class Language(str, Enum):
    """Languages a story can be written in."""

    INDONESIA = "Indonesia"
    ENGLISH = "English"
    BILINGUAL = "Bilingual (Indo-Eng)"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
