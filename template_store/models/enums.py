"""Enum types for template records and backend selection."""

import enum


class TemplateStatus(str, enum.Enum):
    """Template lifecycle status. No transition rules are enforced."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class TemplatesBackendKind(str, enum.Enum):
    """Persistence backend enumeration."""

    LOCAL = "local"
    REST = "rest"

    @classmethod
    def from_setting(cls, value: str) -> "TemplatesBackendKind":
        """Resolve a configuration value, falling back to LOCAL."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.LOCAL
