import os
import logging

import streamlit as st

from skychat.config import ConfigurationError, load_config, validate_config
from skychat.geolocation import fallback_location
from skychat.memory import ConversationContext
from skychat.models import Message
from skychat.session import ChatSession
from skychat.telemetry import enable_langsmith
from skychat.weather import icon_url

EXAMPLE_QUESTIONS = [
    "What's the weather in Tokyo?",
    "How about Paris?",
    "Is it cold over there?",
    "Tell me the weather in New York",
    "Is it warmer than the previous place?",
]


def init_state():
    if "context" not in st.session_state:
        st.session_state.context = ConversationContext()
    if "chat" not in st.session_state:
        st.session_state.chat = None
    if "chat_key" not in st.session_state:
        st.session_state.chat_key = None
    if "pending" not in st.session_state:
        st.session_state.pending = None
    if "client_location" not in st.session_state:
        st.session_state.client_location = None
    if "client_location_source" not in st.session_state:
        st.session_state.client_location_source = None


def render_message(m: Message) -> None:
    if m.kind == "weather" and m.weather:
        w = m.weather
        with st.chat_message("assistant", avatar="🌤️"):
            icon_col, body_col = st.columns([1, 5])
            with icon_col:
                if w.icon:
                    st.image(icon_url(w), width=64)
            with body_col:
                st.metric(label=m.location or "", value=f"{w.temperature}°F", help=w.condition)
                st.caption(
                    f"{w.condition} | Feels like {w.feels_like}°F | Humidity {w.humidity}% | Wind {w.wind_speed} mph"
                )
        return
    role = "user" if m.kind == "user" else "assistant"
    with st.chat_message(role):
        st.markdown(m.text or "")


def main():
    st.set_page_config(page_title="SkyChat - Weather Assistant", layout="centered")
    init_state()

    # Configure terminal logging (idempotent across Streamlit reruns)
    def _configure_logging():
        level_name = os.getenv("LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)
        logger = logging.getLogger("skychat")
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(level)
        return logger

    logger = _configure_logging()

    cfg = load_config()
    context: ConversationContext = st.session_state.context

    with st.sidebar:
        st.header("Settings")
        st.caption("Provide keys in .env or here (session only)")
        google_key = st.text_input("Google API Key", value=cfg.google_api_key or "", type="password")
        owm_key = st.text_input("OpenWeatherMap API Key", value=cfg.openweather_api_key or "", type="password")
        langsmith_key = st.text_input("LangSmith API Key", value=cfg.langsmith_api_key or "", type="password")
        default_location = st.text_input("Default location (optional)", value=cfg.default_location or "")

        os.environ["GOOGLE_API_KEY"] = google_key or ""
        os.environ["OPENWEATHER_API_KEY"] = owm_key or ""
        os.environ["LANGSMITH_API_KEY"] = langsmith_key or ""
        os.environ["DEFAULT_LOCATION"] = default_location or ""

        # Reload config after user updates environment values
        cfg = load_config()
        enable_langsmith(cfg)

        st.divider()
        with st.expander("How to use"):
            st.markdown(
                "Ask about the weather anywhere. Follow-ups like *\"what about over there?\"* or "
                "*\"is it cold there?\"* reuse the place you talked about last."
            )
            for q in EXAMPLE_QUESTIONS:
                st.markdown(f"- {q}")

        st.subheader("Context")
        st.write(f"Current location: {context.location.current or 'Unknown'}")
        st.write(f"Previous location: {context.location.previous or 'None'}")
        recent = context.recent_locations()
        st.write(f"Recent locations: {', '.join(recent) if recent else '-'}")
        if st.button("Reset conversation", disabled=bool(st.session_state.pending)):
            context.reset()
            logger.info("Conversation reset")
            st.rerun()

    try:
        validate_config(cfg)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        st.error(str(e))
        st.stop()

    # Redo the lookup when the sidebar default changes; empty string means "looked up, nothing found"
    source = cfg.default_location or ""
    if st.session_state.client_location is None or st.session_state.client_location_source != source:
        st.session_state.client_location = fallback_location(cfg) or ""
        st.session_state.client_location_source = source
        logger.info("Client location: %s", st.session_state.client_location or "unknown")

    chat_key = (cfg.google_api_key, cfg.openweather_api_key, cfg.gemini_model, st.session_state.client_location)
    if st.session_state.chat is None or st.session_state.chat_key != chat_key:
        st.session_state.chat = ChatSession.from_config(
            cfg, context=context, fallback_location=st.session_state.client_location or None
        )
        st.session_state.chat_key = chat_key
    chat: ChatSession = st.session_state.chat

    st.title("SkyChat")
    if st.session_state.client_location:
        st.caption(f"Your location: {st.session_state.client_location}")

    for m in context.transcript:
        render_message(m)

    pending = st.session_state.pending
    user_input = st.chat_input("Ask about the weather...", disabled=bool(pending) or chat.busy)
    if user_input and not pending:
        st.session_state.pending = user_input
        st.rerun()

    if pending:
        with st.chat_message("user"):
            st.markdown(pending)
        with st.chat_message("assistant"):
            try:
                with st.spinner("Checking the weather..."):
                    result = chat.submit(pending)
                if result is not None:
                    logger.debug("Turn status=%s location=%s", result.status, result.location)
            finally:
                st.session_state.pending = None
        st.rerun()


if __name__ == "__main__":
    main()
