"""
In-memory store for anonymous papers.

Papers live for the lifetime of the process only and the store is capped;
once full, the least recently used paper is evicted. Nothing here is
durable, so callers must treat a missing id as normal.
"""

import uuid
from collections import OrderedDict
from typing import Optional

from tebpaper.utils.config import DigestConfig
from tebpaper.utils.constants import DigestConstants
from tebpaper.utils.models import AnonymousPaper


class PaperStore:
    """Size-capped LRU map of paper id to AnonymousPaper."""

    def __init__(self, maxsize: int = DigestConstants.PAPER_STORE_SIZE):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._papers: "OrderedDict[str, AnonymousPaper]" = OrderedDict()

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    def save(self, paper: AnonymousPaper) -> str:
        self._papers[paper.id] = paper
        self._papers.move_to_end(paper.id)
        while len(self._papers) > self.maxsize:
            self._papers.popitem(last=False)
        return paper.id

    def get(self, paper_id: str) -> Optional[AnonymousPaper]:
        paper = self._papers.get(paper_id)
        if paper is not None:
            self._papers.move_to_end(paper_id)
        return paper

    def clear(self) -> None:
        self._papers.clear()

    def __len__(self) -> int:
        return len(self._papers)

    def __contains__(self, paper_id: str) -> bool:
        return paper_id in self._papers


# Global store instance
paper_store = PaperStore(DigestConfig().paper_store_size)
