import logging
from typing import Any

from pinecone import Pinecone, ServerlessSpec

from uwchat_backend.core.config import Settings
from uwchat_backend.core.exceptions import VectorStoreError
from uwchat_backend.utils.pinecone_meta import clean_metadata

logger = logging.getLogger(__name__)


class PineconeVectorStore:
    """Thin wrapper over one Pinecone index. The index handle is opened on first use."""

    def __init__(self, settings: Settings, client: Pinecone | None = None):
        self.settings = settings
        self._client = client
        self._index = None

    @property
    def client(self) -> Pinecone:
        if self._client is None:
            self._client = Pinecone(api_key=self.settings.PINECONE_API_KEY)
        return self._client

    def get_or_create_index(self):
        if self._index is not None:
            return self._index

        name = self.settings.PINECONE_INDEX_NAME
        existing = {i["name"] for i in self.client.list_indexes()}
        if name not in existing:
            logger.info("Creating Pinecone index", extra={"index": name, "dimension": self.settings.PINECONE_DIM})
            self.client.create_index(
                name=name,
                dimension=self.settings.PINECONE_DIM,
                metric="cosine",
                spec=ServerlessSpec(cloud=self.settings.PINECONE_CLOUD, region=self.settings.PINECONE_REGION),
            )
        self._index = self.client.Index(name)
        return self._index

    def upsert(self, vectors: list[tuple[str, list[float], dict]]) -> None:
        """
        vectors: [(id, embedding, metadata)]
        """
        cleaned_vectors = [(vec_id, values, clean_metadata(md)) for vec_id, values, md in vectors]
        if not cleaned_vectors:
            return
        try:
            index = self.get_or_create_index()
            index.upsert(vectors=cleaned_vectors, namespace=self.settings.PINECONE_NAMESPACE)
        except Exception as exc:
            raise VectorStoreError(f"Pinecone upsert failed: {exc}") from exc

    def query(self, embedding: list[float], top_k: int) -> list[dict[str, Any]]:
        try:
            index = self.get_or_create_index()
            res = index.query(
                vector=embedding,
                top_k=top_k,
                include_metadata=True,
                namespace=self.settings.PINECONE_NAMESPACE,
            )
        except Exception as exc:
            raise VectorStoreError(f"Pinecone query failed: {exc}") from exc

        matches = res.get("matches") if isinstance(res, dict) else getattr(res, "matches", None)
        return [_as_dict(m) for m in (matches or [])]


def _as_dict(match) -> dict[str, Any]:
    if isinstance(match, dict):
        return match
    # SDK ScoredVector objects
    return {
        "id": getattr(match, "id", None),
        "score": getattr(match, "score", None),
        "metadata": getattr(match, "metadata", None),
    }
