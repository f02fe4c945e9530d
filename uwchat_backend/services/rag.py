import logging

import requests
from openai import OpenAI, OpenAIError

from uwchat_backend.core.config import Settings
from uwchat_backend.core.exceptions import CompletionError
from uwchat_backend.schemas.chat import ChatMessage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are a helpful assistant for University of Waterloo students. Answer based on the provided context.

If the user asks about a specific non-Waterloo location (like San Francisco, NYC, Toronto, etc.) by name, you can provide information about that location if it appears in the context.

If the user doesn't specify a location when asking about places to eat, restaurants, cafes, or other location-based queries, always assume they are asking about places in Waterloo or near the University of Waterloo campus.

If the context doesn't contain relevant information to answer the user's question, inform them that you don't have that specific information and offer to help with something else.
""".strip()


def build_messages(history: list[ChatMessage], context: str) -> list[dict]:
    """
    System instruction first, then every earlier turn, then the last user turn
    rewritten to carry the retrieved context.
    """
    if not history:
        raise ValueError("history must contain at least the new user turn")
    last = history[-1]
    if last.role != "user":
        raise ValueError("the last history entry must be a user turn")

    messages = [{"role": "system", "content": SYSTEM_PROMPT}]
    messages.extend({"role": m.role, "content": m.content} for m in history[:-1])
    messages.append({
        "role": "user",
        "content": f"Context: {context}\n\nQuestion: {last.content}",
    })
    return messages


class OpenAICompleter:
    def __init__(self, client: OpenAI, model: str, temperature: float, max_tokens: int):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def complete(self, messages: list[dict]) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as exc:
            raise CompletionError(f"Chat completion failed: {exc}") from exc

        if not completion.choices:
            raise CompletionError("Chat completion returned no choices")
        return completion.choices[0].message.content or ""


class OllamaCompleter:
    def __init__(self, base_url: str, model: str, temperature: float, max_tokens: int, timeout: int = 300):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def complete(self, messages: list[dict]) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {"temperature": self.temperature, "num_predict": self.max_tokens},
        }

        try:
            r = requests.post(f"{self.base_url}/api/chat", json=payload, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as exc:
            raise CompletionError(f"Ollama chat failed: {exc}") from exc

        return (data.get("message") or {}).get("content", "")


def build_completer(settings: Settings):
    if settings.LLM_PROVIDER == "ollama":
        return OllamaCompleter(
            settings.OLLAMA_BASE_URL,
            settings.OLLAMA_MODEL,
            temperature=settings.CHAT_TEMPERATURE,
            max_tokens=settings.CHAT_MAX_TOKENS,
            timeout=settings.OLLAMA_TIMEOUT,
        )
    if settings.LLM_PROVIDER == "openai":
        return OpenAICompleter(
            OpenAI(api_key=settings.OPENAI_API_KEY),
            settings.CHAT_MODEL,
            temperature=settings.CHAT_TEMPERATURE,
            max_tokens=settings.CHAT_MAX_TOKENS,
        )
    raise ValueError(f"Unknown LLM_PROVIDER: {settings.LLM_PROVIDER}")
