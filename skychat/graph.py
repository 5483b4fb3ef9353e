import logging
from typing import Callable, Optional, TypedDict

from langgraph.graph import StateGraph, START, END
from langchain_core.runnables import RunnableLambda

from .llm import CompletionClient
from .memory import ConversationContext
from .models import Message, TurnStatus
from .prompts import compose
from .resolver import resolve
from .weather import WeatherClient, WeatherFetchError, format_weather_summary

NO_RESPONSE_TEXT = "No response from AI"
APOLOGY_TEXT = "Sorry, I encountered an error fetching weather data. Please try again."


class TurnState(TypedDict, total=False):
    question: str
    location: Optional[str]
    status: TurnStatus
    weather_status: TurnStatus
    weather_summary: str
    prompt: str
    reply: str


def build_turn_graph(
    context: ConversationContext,
    weather_client: WeatherClient,
    completion_client: CompletionClient,
    fallback_location: Optional[str] = None,
    on_status: Optional[Callable[[TurnStatus], None]] = None,
):
    """Compile the per-utterance pipeline: resolve -> [weather] -> compose -> complete.

    Nodes mutate ``context`` directly; the graph state only carries what later
    nodes and the caller need to see.

    ``on_status`` is told about every stage as the turn enters it.
    """
    logger = logging.getLogger("skychat.graph")

    def report(status: TurnStatus) -> TurnStatus:
        if on_status is not None:
            on_status(status)
        return status

    def do_resolve(state: TurnState) -> TurnState:
        question = state.get("question") or ""
        location = resolve(question, context.location, context.transcript, fallback_location)
        if location:
            logger.info("Resolved location: %s", location)
            return {"location": location, "status": report(TurnStatus.LOCATION_RESOLVED)}
        logger.info("No location resolved for: %s", question)
        return {
            "location": None,
            "status": report(TurnStatus.NO_LOCATION),
            "weather_status": report(TurnStatus.WEATHER_SKIPPED),
            "weather_summary": "",
        }

    def do_weather(state: TurnState) -> TurnState:
        location = state["location"]
        try:
            record = weather_client.fetch_current_weather(location)
        except WeatherFetchError as e:
            # Non-fatal: the turn carries on without weather data
            logger.warning("Weather fetch failed for %s: %s", location, e, exc_info=True)
            return {"weather_status": report(TurnStatus.WEATHER_FAILED), "weather_summary": ""}
        context.append(Message.weather_report(location, record))
        context.record_weather(location, record)
        return {
            "weather_status": report(TurnStatus.WEATHER_FETCHED),
            "weather_summary": format_weather_summary(location, record),
        }

    def do_compose(state: TurnState) -> TurnState:
        report(TurnStatus.COMPOSING)
        prompt = compose(
            context.location,
            context.weather,
            context.transcript,
            state.get("weather_summary") or "",
            state.get("question") or "",
        )
        logger.debug("Composed prompt (chars=%s)", len(prompt))
        return {"prompt": prompt, "status": report(TurnStatus.AWAITING_COMPLETION)}

    def do_complete(state: TurnState) -> TurnState:
        logger.debug("Awaiting completion")
        try:
            reply = completion_client.complete(state["prompt"]).raise_for_error()
            text = reply.response or NO_RESPONSE_TEXT
            status = TurnStatus.DONE
        except Exception:
            logger.exception("Completion failed")
            text = APOLOGY_TEXT
            status = TurnStatus.FAILED
        context.append(Message.assistant(text))
        return {"reply": text, "status": report(status)}

    def route_after_resolve(state: TurnState) -> str:
        return "weather" if state.get("location") else "compose"

    graph = StateGraph(TurnState)
    graph.add_node("resolve", RunnableLambda(do_resolve).with_config(run_name="resolve_location", tags=["resolver"]))
    graph.add_node("weather", RunnableLambda(do_weather).with_config(run_name="weather_node", tags=["tool:weather"]))
    graph.add_node("compose", RunnableLambda(do_compose).with_config(run_name="compose_prompt", tags=["prompt"]))
    graph.add_node("complete", RunnableLambda(do_complete).with_config(run_name="completion", tags=["llm"]))

    graph.add_edge(START, "resolve")
    graph.add_conditional_edges("resolve", route_after_resolve, {"weather": "weather", "compose": "compose"})
    graph.add_edge("weather", "compose")
    graph.add_edge("compose", "complete")
    graph.add_edge("complete", END)

    return graph.compile()
