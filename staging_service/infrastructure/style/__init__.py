"""Style Catalog Infrastructure"""

from .catalog import DEFAULT_STYLES, InMemoryStyleCatalog, styles_from_config

__all__ = ["DEFAULT_STYLES", "InMemoryStyleCatalog", "styles_from_config"]
