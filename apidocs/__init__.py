"""Generate API reference docs from documented TypeScript declarations."""

from .config import DocsConfig, load_config
from .logging import configure_logging
from .orchestrator import DocsGenerator, GenerationReport, generate_docs
from .type_index import TypeReferenceIndex

__all__ = [
    "DocsConfig",
    "DocsGenerator",
    "GenerationReport",
    "TypeReferenceIndex",
    "configure_logging",
    "generate_docs",
    "load_config",
]
