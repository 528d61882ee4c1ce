"""Worker threads for background processing."""

from .fetch_worker import FetchWorker, QueryFetcher, ThreadedFetcher

__all__ = ["FetchWorker", "QueryFetcher", "ThreadedFetcher"]
