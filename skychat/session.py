import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import AppConfig
from .graph import build_turn_graph
from .llm import CompletionClient
from .memory import ConversationContext
from .models import Message, TurnStatus
from .weather import WeatherClient

logger = logging.getLogger("skychat.session")


@dataclass
class TurnResult:
    status: TurnStatus
    weather_status: TurnStatus
    location: Optional[str]
    prompt: str
    reply: str


class ChatSession:
    """Runs one utterance at a time against a single conversation.

    A submit that arrives while another is in flight is dropped rather than
    queued.
    """

    def __init__(
        self,
        context: ConversationContext,
        weather_client: WeatherClient,
        completion_client: CompletionClient,
        fallback_location: Optional[str] = None,
        run_tags: Optional[List[str]] = None,
        run_metadata: Optional[Dict[str, Any]] = None,
    ):
        self.context = context
        self.fallback_location = fallback_location
        self.run_tags = run_tags or ["skychat"]
        self.run_metadata = run_metadata or {}
        self._graph = build_turn_graph(
            context, weather_client, completion_client, fallback_location, on_status=self._set_status
        )
        self._busy = False
        self._status = TurnStatus.IDLE

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        context: Optional[ConversationContext] = None,
        fallback_location: Optional[str] = None,
    ) -> "ChatSession":
        return cls(
            context or ConversationContext(),
            WeatherClient(config),
            CompletionClient.from_config(config),
            fallback_location=fallback_location,
            run_metadata={"model": config.gemini_model},
        )

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def status(self) -> TurnStatus:
        return self._status

    def _set_status(self, status: TurnStatus) -> None:
        logger.debug("Turn stage: %s", status.value)
        self._status = status

    def submit(self, utterance: str) -> Optional[TurnResult]:
        question = (utterance or "").strip()
        if not question or self._busy:
            if question:
                logger.info("Submit ignored while a turn is in flight")
            return None
        self._busy = True
        self._set_status(TurnStatus.SUBMITTING)
        try:
            logger.info("User message: %s", question)
            self.context.append(Message.user(question))
            final = self._graph.invoke(
                {"question": question, "status": TurnStatus.SUBMITTING},
                config={
                    "run_name": "skychat_turn",
                    "tags": list(self.run_tags),
                    "metadata": {**self.run_metadata, "fallback_location": self.fallback_location},
                },
            )
        finally:
            self._busy = False
            self._set_status(TurnStatus.IDLE)
        logger.info("Turn finished: %s (weather=%s)", final.get("status"), final.get("weather_status"))
        return TurnResult(
            status=final.get("status", TurnStatus.FAILED),
            weather_status=final.get("weather_status", TurnStatus.WEATHER_SKIPPED),
            location=final.get("location"),
            prompt=final.get("prompt", ""),
            reply=final.get("reply", ""),
        )
