"""Commit input: data models, git extraction and the commit queue."""

from .git_extractor import GitExtractor
from .models import ChangedArtifact, Commit
from .commit_queue import CommitQueue, feed_queue

__all__ = [
    "ChangedArtifact",
    "Commit",
    "CommitQueue",
    "GitExtractor",
    "feed_queue",
]
