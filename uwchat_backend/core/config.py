from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "uwchat-backend"
    ENV: str = "dev"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    OPENAI_API_KEY: str = ""

    EMBEDDING_PROVIDER: str = "openai"  # openai | local
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    LOCAL_EMBEDDING_MODEL: str = "BAAI/bge-small-en-v1.5"

    LLM_PROVIDER: str = "openai"  # openai | ollama
    CHAT_MODEL: str = "gpt-4o-mini"
    CHAT_TEMPERATURE: float = 0.7
    CHAT_MAX_TOKENS: int = 500
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "qwen2.5:7b-instruct"
    OLLAMA_TIMEOUT: int = 300

    PINECONE_API_KEY: str = ""
    PINECONE_INDEX_NAME: str = "uwchat"
    PINECONE_NAMESPACE: str = ""
    PINECONE_CLOUD: str = "aws"
    PINECONE_REGION: str = "us-east-1"
    PINECONE_DIM: int = 1536

    CHUNK_SIZE: int = 1000
    TOP_K: int = 5

    REDIS_URL: str = "redis://localhost:6379/0"
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60 * 60 * 24  # 24 hours
    RATE_LIMIT_KEY_PREFIX: str = "rate_limit:"

    RECAPTCHA_ENABLED: bool = True
    RECAPTCHA_SECRET_KEY: str = ""
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    RECAPTCHA_TIMEOUT: int = 10

    CORPUS_DIR: str = "../corpus"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
