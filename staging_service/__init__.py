"""Room Staging Service

Batch AI virtual staging: each uploaded room photo is re-rendered in one or
more furnished variations by an external multimodal generation service.
"""

__version__ = "0.1.0"
