import logging

import streamlit as st

from src.application.ports import NotifierPort


logger = logging.getLogger(__name__)

ICONS = {
    "Error": "❌",
    "Doctors Nearby": "📍",
}


class StreamlitToastNotifier(NotifierPort):
    def notify(self, title: str, message: str) -> None:
        logger.debug("Toast %s: %s", title, message)
        st.toast(f"**{title}**\n\n{message}", icon=ICONS.get(title, "✅"))
