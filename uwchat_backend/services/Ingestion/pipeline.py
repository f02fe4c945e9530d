import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from uwchat_backend.core.exceptions import InfrastructureError
from uwchat_backend.services.chunker import chunk_text

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    file_name: str
    chunks: int = 0
    stored: int = 0
    failed: int = 0


def make_chunk_id(file_name: str, index: int, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"chunk-{now_ms}-{index}-{file_name}"


def _chunk_metadata(text: str, file_name: str, chunk_id: str, ingested_at: datetime) -> dict:
    return {
        "text": text,
        "fileName": file_name,
        "ingestedAt": ingested_at,
        "chunkId": chunk_id,
    }


def ingest_document(content: str, file_name: str, *, embedder, store, chunk_size: int | None = None) -> IngestReport:
    """
    Chunk, embed in one batch and upsert in one call.
    Any failure propagates; nothing is partially reported as success.
    """
    chunks = chunk_text(content, chunk_size)
    report = IngestReport(file_name=file_name, chunks=len(chunks))
    logger.info("Document split into chunks", extra={"file_name": file_name, "chunks": len(chunks)})
    if not chunks:
        return report

    embeddings = embedder.embed_many(chunks)
    now = datetime.now(timezone.utc)
    now_ms = int(now.timestamp() * 1000)

    vectors = []
    for i, (text, emb) in enumerate(zip(chunks, embeddings)):
        chunk_id = make_chunk_id(file_name, i, now_ms)
        vectors.append((chunk_id, emb, _chunk_metadata(text, file_name, chunk_id, now)))

    store.upsert(vectors)
    report.stored = len(vectors)
    return report


def ingest_document_per_chunk(content: str, file_name: str, *, embedder, store, chunk_size: int | None = None) -> IngestReport:
    """
    One embed + upsert per chunk. A failing chunk is logged and skipped.
    Used by the offline seeder where one bad chunk must not sink the batch.
    """
    chunks = chunk_text(content, chunk_size)
    report = IngestReport(file_name=file_name, chunks=len(chunks))
    logger.info("Document split into chunks", extra={"file_name": file_name, "chunks": len(chunks)})

    for i, text in enumerate(chunks):
        now = datetime.now(timezone.utc)
        chunk_id = make_chunk_id(file_name, i, int(now.timestamp() * 1000))
        try:
            emb = embedder.embed(text)
            store.upsert([(chunk_id, emb, _chunk_metadata(text, file_name, chunk_id, now))])
        except InfrastructureError:
            logger.exception(
                "Skipping chunk after failure",
                extra={"file_name": file_name, "chunk_index": i},
            )
            report.failed += 1
            continue
        report.stored += 1

    return report
