import logging
from dataclasses import dataclass

from uwchat_backend.core.exceptions import (
    HumanVerificationUnavailable,
    QuotaExceeded,
    RateLimitStoreError,
)
from uwchat_backend.schemas.chat import ChatMessage, ChatRequest, ChatResponse
from uwchat_backend.services.container import Services
from uwchat_backend.services.contextualizer import HOME_REGION, contextualize_query
from uwchat_backend.services.rag import build_messages
from uwchat_backend.utils.citations import context_from_citations

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "I'm unable to search my knowledge base at the moment, but I can still try to help "
    "with general information about the University of Waterloo."
)
NO_MATCHES_MESSAGE = (
    "I couldn't find specific information to answer your question. "
    "Please try asking something else about UWaterloo."
)
QUOTA_MESSAGE = "You've reached your daily message limit. Please try again tomorrow."
VERIFICATION_MESSAGE = "Human verification failed. Please try again."
ERROR_MESSAGE = "An error occurred while processing your request."


def _assistant(content: str, citations=None) -> ChatMessage:
    return ChatMessage(role="assistant", content=content, citations=citations)


def _preview(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


@dataclass
class ChatOutcome:
    status_code: int
    body: ChatResponse


class ChatOrchestrator:
    """
    Runs one chat request: verify -> quota -> contextualize -> embed ->
    retrieve -> assemble -> complete.

    Verification and quota failures short-circuit before any AI call. Any
    failure inside the retrieval/completion pipeline becomes a 200 carrying
    FALLBACK_MESSAGE. Quota is never rolled back once counted.
    """

    def __init__(self, services: Services, home_region: str = HOME_REGION):
        self.services = services
        self.home_region = home_region

    def handle(self, request: ChatRequest, client_key: str, remote_ip: str | None = None) -> ChatOutcome:
        try:
            return self._handle(request, client_key, remote_ip)
        except Exception as exc:
            logger.exception("Chat request failed")
            return ChatOutcome(
                status_code=500,
                body=ChatResponse(
                    success=False,
                    message=_assistant(ERROR_MESSAGE),
                    error=str(exc) or type(exc).__name__,
                ),
            )

    def _handle(self, request: ChatRequest, client_key: str, remote_ip: str | None) -> ChatOutcome:
        logger.info("Processing chat request", extra={"query": _preview(request.query), "client_key": client_key})

        try:
            verified = self.services.verifier.verify(request.human_verification_token, remote_ip)
        except HumanVerificationUnavailable as exc:
            logger.error("Human verification unavailable", extra={"error": exc.message})
            return ChatOutcome(
                status_code=exc.status_code,
                body=ChatResponse(success=False, message=_assistant(VERIFICATION_MESSAGE), error=exc.message),
            )
        if not verified:
            return ChatOutcome(
                status_code=400,
                body=ChatResponse(
                    success=False,
                    message=_assistant(VERIFICATION_MESSAGE),
                    error="Human verification failed",
                ),
            )

        remaining = None
        try:
            remaining = self.services.rate_limiter.check_and_increment(client_key).remaining
        except QuotaExceeded as exc:
            logger.info("Quota exceeded", extra={"client_key": client_key})
            return ChatOutcome(
                status_code=exc.status_code,
                body=ChatResponse(
                    success=False,
                    message=_assistant(QUOTA_MESSAGE),
                    rate_limit_remaining=0,
                    error=exc.message,
                ),
            )
        except RateLimitStoreError:
            logger.warning("Rate limit store unavailable, continuing without quota accounting", exc_info=True)

        try:
            return self._answer(request, remaining)
        except Exception:
            logger.exception("Retrieval pipeline failed, returning fallback answer")
            return ChatOutcome(
                status_code=200,
                body=ChatResponse(success=True, message=_assistant(FALLBACK_MESSAGE), rate_limit_remaining=remaining),
            )

    def _answer(self, request: ChatRequest, remaining: int | None) -> ChatOutcome:
        query = contextualize_query(request.query, self.home_region)
        logger.info("Contextualized query", extra={"query": _preview(query)})

        embedding = self.services.embedder.embed(query)
        result = self.services.retriever.retrieve(embedding)

        if result.is_empty:
            logger.info("No matches found in vector index")
            return ChatOutcome(
                status_code=200,
                body=ChatResponse(success=True, message=_assistant(NO_MATCHES_MESSAGE), rate_limit_remaining=remaining),
            )

        citations = result.citations
        messages = build_messages(request.messages, context_from_citations(citations))
        content = self.services.completer.complete(messages)

        logger.info("Generated answer", extra={"citations": len(citations)})
        return ChatOutcome(
            status_code=200,
            body=ChatResponse(
                success=True,
                message=_assistant(content, citations=citations),
                rate_limit_remaining=remaining,
            ),
        )
