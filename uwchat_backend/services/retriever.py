import logging
from dataclasses import dataclass, field

from uwchat_backend.schemas.chat import Citation
from uwchat_backend.utils.citations import citation_from_match

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


@dataclass(frozen=True)
class ScoredCitation:
    citation: Citation
    score: float


@dataclass(frozen=True)
class RetrievalResult:
    matches: list[ScoredCitation] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.matches

    @property
    def citations(self) -> list[Citation]:
        return [m.citation for m in self.matches]


class VectorRetriever:
    """
    Nearest-neighbour lookup over the vector store.

    An empty index answer is reported as an empty RetrievalResult; transport
    failures propagate from the store as VectorStoreError.
    """

    def __init__(self, store, top_k: int = DEFAULT_TOP_K):
        self.store = store
        self.top_k = top_k

    def retrieve(self, embedding: list[float]) -> RetrievalResult:
        raw = self.store.query(embedding, top_k=self.top_k)

        scored = [
            ScoredCitation(citation=citation_from_match(m), score=float(m.get("score") or 0.0))
            for m in raw
        ]
        # stable, so equal scores keep index order
        scored.sort(key=lambda s: s.score, reverse=True)
        result = RetrievalResult(matches=scored[: self.top_k])

        logger.info("Vector retrieval finished", extra={"matches": len(result.matches)})
        return result
