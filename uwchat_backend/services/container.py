from dataclasses import dataclass
from typing import Any

from uwchat_backend.core.config import Settings
from uwchat_backend.services.embeddings import build_embedder
from uwchat_backend.services.human_verification import build_verifier
from uwchat_backend.services.pinecone_store import PineconeVectorStore
from uwchat_backend.services.rag import build_completer
from uwchat_backend.services.rate_limiter import build_rate_limiter
from uwchat_backend.services.retriever import VectorRetriever


@dataclass
class Services:
    """External collaborators for one configuration. Handles are safe to share across requests."""

    verifier: Any
    rate_limiter: Any
    embedder: Any
    vector_store: Any
    retriever: VectorRetriever
    completer: Any


def build_services(settings: Settings) -> Services:
    vector_store = PineconeVectorStore(settings)
    return Services(
        verifier=build_verifier(settings),
        rate_limiter=build_rate_limiter(settings),
        embedder=build_embedder(settings),
        vector_store=vector_store,
        retriever=VectorRetriever(vector_store, top_k=settings.TOP_K),
        completer=build_completer(settings),
    )
