"""
Streamlit UI for the Wiki Chatbot

A chat interface over the /ask endpoint, with sources under each answer.

Run with: streamlit run src/ui/chat_ui.py
"""

import streamlit as st
import httpx
import os
import time
import uuid
from typing import Optional, List, Dict, Any

# Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")
COMPANY_NAME = os.getenv("COMPANY_NAME", "Amsterdam Standard")
TIMEOUT = 120.0  # Retrieval plus generation can be slow on cold start


def new_session_id() -> str:
    """Session id in the same shape the API generates"""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"


def ask_api(
    question: str,
    session_id: Optional[str] = None,
    base_url: str = API_BASE_URL,
    client: Optional[httpx.Client] = None
) -> Dict[str, Any]:
    """Send a question to the chat API"""
    payload = {"question": question}
    if session_id:
        payload["sessionId"] = session_id

    try:
        if client is None:
            response = httpx.post(f"{base_url}/ask", json=payload, timeout=TIMEOUT)
        else:
            response = client.post(f"{base_url}/ask", json=payload)
        response.raise_for_status()
        return response.json()
    except httpx.TimeoutException:
        return {
            "status": "error",
            "error": "Request timed out. The assistant is taking too long to answer."
        }
    except Exception as e:
        return {
            "status": "error",
            "error": f"Failed to send question: {str(e)}"
        }


def format_sources(sources: Optional[List[str]]) -> str:
    """Markdown list of source titles (empty string when there are none)"""
    if not sources:
        return ""
    lines = ["**Sources:**"]
    lines.extend(f"{i}. {source}" for i, source in enumerate(sources, 1))
    return "\n".join(lines)


def render_message(message: Dict[str, Any]):
    with st.chat_message(message["role"]):
        st.markdown(message["content"])
        if message.get("sources"):
            st.caption(format_sources(message["sources"]))


def main():
    st.set_page_config(
        page_title=f"{COMPANY_NAME} Wiki Assistant",
        page_icon="💬",
        layout="centered"
    )

    st.title(f"💬 {COMPANY_NAME} Wiki Assistant")
    st.caption("Ask about holidays, tools, benefits, offices and more.")

    if "session_id" not in st.session_state:
        st.session_state.session_id = new_session_id()

    if "messages" not in st.session_state:
        st.session_state.messages = [
            {
                "role": "assistant",
                "content": f"Hello! Ask me anything about the {COMPANY_NAME} wiki."
            }
        ]

    with st.sidebar:
        st.markdown(f"**Session:** `{st.session_state.session_id}`")
        if st.button("New conversation"):
            st.session_state.session_id = new_session_id()
            st.session_state.messages = st.session_state.messages[:1]
            st.rerun()

    for message in st.session_state.messages:
        render_message(message)

    if prompt := st.chat_input("Type your question..."):
        user_message = {"role": "user", "content": prompt}
        st.session_state.messages.append(user_message)
        render_message(user_message)

        with st.spinner("Thinking..."):
            response = ask_api(prompt, session_id=st.session_state.session_id)

        if response.get("status") == "success":
            # The API may have generated the id
            st.session_state.session_id = response.get("sessionId") or st.session_state.session_id
            assistant_message = {
                "role": "assistant",
                "content": response.get("answer", ""),
                "sources": response.get("sources", [])
            }
        else:
            error_msg = response.get("error", "Unknown error occurred")
            st.error(error_msg)
            assistant_message = {"role": "assistant", "content": f"⚠️ {error_msg}"}

        st.session_state.messages.append(assistant_message)
        render_message(assistant_message)


if __name__ == "__main__":
    main()
