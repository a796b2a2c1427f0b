"""FastAPI dependencies for the template service."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from template_store.services.local_backend import LocalTemplatesBackend


@lru_cache(maxsize=1)
def get_server_backend() -> LocalTemplatesBackend:
    """Store served by the API. Always local: the server owns versioning."""
    return LocalTemplatesBackend()


TemplateStore = Annotated[LocalTemplatesBackend, Depends(get_server_backend)]
