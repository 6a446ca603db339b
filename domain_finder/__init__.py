"""
Find the primary domain for a list of company names via web search.
"""

from domain_finder.batching import batch
from domain_finder.lookup import lookup
from domain_finder.models import Failed, NotFound, Outcome, Resolution, Resolved
from domain_finder.orchestrator import BatchRunner
from domain_finder.search import DUCKDUCKGO, SearchProvider, extract_resolution

__version__ = "0.1.0"

__all__ = [
    "batch",
    "lookup",
    "extract_resolution",
    "BatchRunner",
    "SearchProvider",
    "DUCKDUCKGO",
    "Outcome",
    "Resolution",
    "Resolved",
    "NotFound",
    "Failed",
]
