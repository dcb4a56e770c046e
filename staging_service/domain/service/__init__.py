"""Domain Services"""

from .prompt_composer import DEFAULT_STYLE_PROMPT, compose
from .result_aggregator import assemble

__all__ = ["DEFAULT_STYLE_PROMPT", "assemble", "compose"]
