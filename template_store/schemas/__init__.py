"""Pydantic schemas for template records and requests."""

from .template import (
    TemplateVersion,
    TemplateMeta,
    TemplateRecord,
    SaveTemplateInput,
    UpdateTemplateMetaInput,
    TemplateMetaPatch,
    SendTestRequest,
    SendTestResult,
)

__all__ = [
    "TemplateVersion",
    "TemplateMeta",
    "TemplateRecord",
    "SaveTemplateInput",
    "UpdateTemplateMetaInput",
    "TemplateMetaPatch",
    "SendTestRequest",
    "SendTestResult",
]
