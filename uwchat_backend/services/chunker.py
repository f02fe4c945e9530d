from uwchat_backend.core.config import settings

def chunk_text(text: str, chunk_size: int | None = None) -> list[str]:
    """
    Fixed-width slicing, no overlap and no sentence awareness.
    "".join(chunk_text(s)) == s for every s; empty input gives [].
    """
    chunk_size = chunk_size or settings.CHUNK_SIZE
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    return [text[start:start + chunk_size] for start in range(0, len(text), chunk_size)]
