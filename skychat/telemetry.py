import os

from .config import AppConfig


def enable_langsmith(config: AppConfig) -> bool:
    """Export LangSmith settings; tracing only switches on when a key is present.

    Run tags and metadata travel with each graph invocation instead of the
    environment (see ``ChatSession.submit``).
    """
    if config.langsmith_api_key:
        os.environ["LANGSMITH_API_KEY"] = config.langsmith_api_key
    if config.langsmith_project:
        os.environ["LANGSMITH_PROJECT"] = config.langsmith_project
    tracing = config.langchain_tracing_v2 and bool(config.langsmith_api_key)
    os.environ["LANGCHAIN_TRACING_V2"] = "true" if tracing else "false"
    return tracing
