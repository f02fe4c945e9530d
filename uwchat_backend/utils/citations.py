from typing import Any

from uwchat_backend.schemas.chat import Citation, CitationMetadata

def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

def citation_from_match(match: dict[str, Any]) -> Citation:
    """
    Builds a Citation from a raw Pinecone match.
    Missing fields never fail:
    - text: "" when absent
    - chunkId: metadata chunkId, else the vector id
    - ingestedAt: metadata ingestedAt, else the older timestamp field
    - sourceFileName / ingestedAt: omitted when absent
    """
    md = match.get("metadata") or {}

    return Citation(
        text=str(md.get("text") or ""),
        chunk_id=str(md.get("chunkId") or match.get("id") or ""),
        metadata=CitationMetadata(
            source_file_name=_str_or_none(md.get("fileName")),
            ingested_at=_str_or_none(md.get("ingestedAt") or md.get("timestamp")),
        ),
    )

def context_from_citations(citations: list[Citation]) -> str:
    return "\n".join(c.text for c in citations)
