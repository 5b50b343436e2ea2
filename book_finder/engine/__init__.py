"""Engine components: fetch → extract → enrich → filter → aggregate."""

from .aggregator import ResultAggregator, ResultStream
from .dedup import Deduplicator
from .enricher import DetailEnricher
from .fetcher import FetchResponse, HttpFetcher, NetworkFetcher
from .filters import QualityFilter
from .parser import CandidateExtractor, DetailParser
from .thread_pool import WorkerPool

__all__ = [
    "CandidateExtractor",
    "Deduplicator",
    "DetailEnricher",
    "DetailParser",
    "FetchResponse",
    "HttpFetcher",
    "NetworkFetcher",
    "QualityFilter",
    "ResultAggregator",
    "ResultStream",
    "WorkerPool",
]
