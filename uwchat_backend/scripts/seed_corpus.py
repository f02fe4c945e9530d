import logging
import sys
from pathlib import Path

from uwchat_backend.core.config import settings
from uwchat_backend.core.logging import setup_logging
from uwchat_backend.services.embeddings import build_embedder
from uwchat_backend.services.Ingestion.pipeline import IngestReport, ingest_document_per_chunk
from uwchat_backend.services.pinecone_store import PineconeVectorStore

logger = logging.getLogger(__name__)


def seed_directory(corpus_dir: Path, *, embedder, store) -> list[IngestReport]:
    """Ingest every .txt file in corpus_dir, one chunk at a time."""
    files = sorted(p for p in corpus_dir.iterdir() if p.is_file() and p.suffix == ".txt")
    logger.info("Seeding corpus", extra={"corpus_dir": str(corpus_dir), "files": len(files)})

    reports = []
    for n, path in enumerate(files, start=1):
        try:
            content = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError):
            logger.exception("Skipping unreadable file", extra={"file_name": path.name})
            continue
        report = ingest_document_per_chunk(content, path.name, embedder=embedder, store=store)
        reports.append(report)
        logger.info(
            "Completed file",
            extra={"file_name": path.name, "stored": report.stored, "failed": report.failed, "progress": f"{n}/{len(files)}"},
        )
    return reports


def main():
    setup_logging(settings.LOG_LEVEL)

    corpus_dir = Path(sys.argv[1] if len(sys.argv) > 1 else settings.CORPUS_DIR)
    if not corpus_dir.is_dir():
        print(f"Corpus directory not found: {corpus_dir}")
        sys.exit(1)

    reports = seed_directory(corpus_dir, embedder=build_embedder(settings), store=PineconeVectorStore(settings))

    stored = sum(r.stored for r in reports)
    failed = sum(r.failed for r in reports)
    print(f"Processed {len(reports)} files: {stored} chunks stored, {failed} failed")


if __name__ == "__main__":
    main()
