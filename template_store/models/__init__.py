"""Domain enumerations."""

from .enums import TemplateStatus, TemplatesBackendKind

__all__ = ["TemplateStatus", "TemplatesBackendKind"]
