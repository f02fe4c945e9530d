import logging

from openai import OpenAI, OpenAIError

from uwchat_backend.core.config import Settings
from uwchat_backend.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class OpenAIEmbedder:
    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            response = self.client.embeddings.create(model=self.model, input=texts)
        except OpenAIError as exc:
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc

        # the API echoes an index per input; keep input order regardless of response order
        data = sorted(response.data, key=lambda item: item.index)
        if len(data) != len(texts):
            raise EmbeddingError(f"Expected {len(texts)} embeddings, got {len(data)}")
        return [list(item.embedding) for item in data]

    def embed(self, text: str) -> list[float]:
        try:
            response = self.client.embeddings.create(model=self.model, input=text)
        except OpenAIError as exc:
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc

        if not response.data:
            raise EmbeddingError("Embedding response contained no vectors")
        return list(response.data[0].embedding)


class LocalEmbedder:
    def __init__(self, model_name: str):
        from sentence_transformers import SentenceTransformer

        logger.info("Loading local embedding model", extra={"model": model_name})
        self._model = SentenceTransformer(model_name)

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            # normalize_embeddings True improves cosine similarity
            embs = self._model.encode(
                texts,
                normalize_embeddings=True,
                batch_size=32,
                show_progress_bar=False,
            )
        except Exception as exc:
            raise EmbeddingError(f"Local embedding failed: {exc}") from exc
        return embs.tolist()

    def embed(self, text: str) -> list[float]:
        return self.embed_many([text])[0]


def build_embedder(settings: Settings):
    if settings.EMBEDDING_PROVIDER == "local":
        return LocalEmbedder(settings.LOCAL_EMBEDDING_MODEL)
    if settings.EMBEDDING_PROVIDER == "openai":
        return OpenAIEmbedder(OpenAI(api_key=settings.OPENAI_API_KEY), settings.EMBEDDING_MODEL)
    raise ValueError(f"Unknown EMBEDDING_PROVIDER: {settings.EMBEDDING_PROVIDER}")
