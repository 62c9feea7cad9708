"""
Aide - Streamlit Frontend

A chat interface for the Aide assistant.
Connects to the FastAPI backend for processing.

Run with: streamlit run streamlit_app.py
"""
import json
import os
import uuid

import requests
import streamlit as st

# ============================================================
# Configuration
# ============================================================

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")

st.set_page_config(
    page_title="Aide",
    page_icon="🧰",
    layout="wide",
    initial_sidebar_state="expanded"
)

# ============================================================
# Custom CSS
# ============================================================

st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap');

    html, body, [class*="css"], .stMarkdown, .stText, p {
        font-family: 'Inter', sans-serif;
        color: #334155 !important;
    }

    .stApp {
        background-color: #fdfbf7;
    }

    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 3rem;
        max-width: 1000px;
    }

    .stChatMessage {
        background-color: #ffffff;
        padding: 1.5rem;
        margin-bottom: 1rem;
        border-radius: 12px;
        border: 1px solid #f3f4f6;
    }

    [data-testid="stSidebar"] {
        background-color: #f9f8f4;
        border-right: 1px solid #e5e7eb;
    }

    .stButton > button {
        border-radius: 8px;
        font-weight: 600;
        border: 1px solid #e5e7eb;
        background-color: #ffffff;
    }
    .stButton > button:hover {
        border-color: #d97706;
        color: #d97706;
    }
</style>
""", unsafe_allow_html=True)


# ============================================================
# Session State Initialization
# ============================================================

def init_session_state():
    """Initialize session state variables."""
    if "session_id" not in st.session_state:
        st.session_state.session_id = str(uuid.uuid4())
    if "messages" not in st.session_state:
        st.session_state.messages = []
    if "backend_connected" not in st.session_state:
        st.session_state.backend_connected = False


def check_backend() -> bool:
    """Check if backend is available."""
    try:
        response = requests.get(f"{API_BASE_URL}/health", timeout=10)
        st.session_state.backend_connected = response.status_code == 200
    except requests.exceptions.RequestException:
        st.session_state.backend_connected = False
    return st.session_state.backend_connected


# ============================================================
# API Functions
# ============================================================

def _error_text(response: requests.Response) -> str:
    """Pull a readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if "message" in body:
        return body["message"]
    detail = body.get("detail", "Unknown error")
    return detail if isinstance(detail, str) else json.dumps(detail)


def send_message(message: str) -> dict:
    """Send a message to the chat API."""
    try:
        response = requests.post(
            f"{API_BASE_URL}/chat",
            json={"message": message, "session_id": st.session_state.session_id},
            timeout=120
        )
        if response.status_code == 200:
            return response.json()
        return {"error": _error_text(response)}
    except requests.exceptions.Timeout:
        return {"error": "Request timed out. Try a simpler question."}
    except requests.exceptions.ConnectionError:
        return {"error": "Cannot connect to backend server."}


def get_history(session_id: str) -> list:
    """Full message history, tool calls included."""
    try:
        response = requests.get(f"{API_BASE_URL}/chat/sessions/{session_id}/history", timeout=10)
        if response.status_code == 200:
            return response.json().get("messages", [])
    except requests.exceptions.RequestException:
        pass
    return []


def get_message_count(session_id: str) -> int:
    try:
        response = requests.get(f"{API_BASE_URL}/chat/sessions/{session_id}/count", timeout=5)
        if response.status_code == 200:
            return response.json().get("message_count", 0)
    except requests.exceptions.RequestException:
        pass
    return 0


def clear_session(session_id: str) -> bool:
    try:
        response = requests.delete(f"{API_BASE_URL}/chat/sessions/{session_id}", timeout=10)
        return response.status_code == 204
    except requests.exceptions.RequestException:
        return False


def get_capabilities() -> list:
    """Get list of registered capabilities."""
    try:
        response = requests.get(f"{API_BASE_URL}/capabilities", timeout=10)
        if response.status_code == 200:
            return response.json().get("capabilities", [])
    except requests.exceptions.RequestException:
        pass
    return []


def execute_capability(name: str, input_text: str, parameters: dict) -> dict:
    """Run a capability directly, bypassing the model."""
    try:
        response = requests.post(
            f"{API_BASE_URL}/capabilities/{name}/execute",
            json={"input": input_text, "parameters": parameters},
            timeout=30
        )
        if response.status_code == 200:
            return response.json()
        return {"success": False, "error_message": _error_text(response)}
    except requests.exceptions.RequestException as e:
        return {"success": False, "error_message": str(e)}


# ============================================================
# UI Components
# ============================================================

def render_sidebar():
    """Render the sidebar."""
    with st.sidebar:
        st.title("🧰 Aide")
        st.markdown("*Assistant with tools*")

        if st.session_state.backend_connected:
            st.success("🟢 System Online")
        else:
            st.error("🔴 System Offline")
            if st.button("🔄 Reconnect", use_container_width=True):
                if check_backend():
                    st.rerun()
            st.warning("Server is unreachable. Please check backend console.")
            return

        st.divider()

        st.subheader("💬 Active Session")
        st.caption(f"{get_message_count(st.session_state.session_id)} messages on the server")

        col1, col2 = st.columns(2)
        with col1:
            if st.button("➕ New", help="Start a new conversation", use_container_width=True):
                clear_session(st.session_state.session_id)
                st.session_state.session_id = str(uuid.uuid4())
                st.session_state.messages = []
                st.rerun()
        with col2:
            if st.button("🗑️ Clear", help="Delete this conversation on the server", use_container_width=True):
                clear_session(st.session_state.session_id)
                st.session_state.messages = []
                st.rerun()

        with st.expander("🔍 Tool activity", expanded=False):
            tool_messages = [m for m in get_history(st.session_state.session_id) if m.get("tool_calls") or m["role"] == "tool"]
            if not tool_messages:
                st.caption("No tools called yet.")
            for msg in tool_messages:
                if msg.get("tool_calls"):
                    for call in msg["tool_calls"]:
                        st.markdown(f"**→ {call['name']}** `{call['id']}`")
                        st.code(json.dumps(call["input"], indent=2), language="json")
                else:
                    st.markdown(f"**← result** `{msg['tool_call_id']}`")
                    st.text(msg["content"])

        st.divider()

        st.subheader("🧩 Capabilities")
        for capability in get_capabilities():
            with st.expander(capability["name"], expanded=False):
                st.caption(capability["description"])
                properties = capability["input_schema"].get("properties", {})
                values = {}
                for prop_name, prop in properties.items():
                    key = f"{capability['name']}_{prop_name}"
                    if prop.get("enum"):
                        values[prop_name] = st.selectbox(prop_name, prop["enum"], key=key)
                    elif prop.get("type") == "number":
                        values[prop_name] = st.number_input(prop_name, key=key)
                    else:
                        values[prop_name] = st.text_input(prop_name, key=key)
                if st.button("▶️ Run", key=f"run_{capability['name']}", use_container_width=True):
                    parameters = {k: v for k, v in values.items() if v != ""}
                    result = execute_capability(capability["name"], "", parameters)
                    if result.get("success"):
                        st.text(result.get("output") or json.dumps(result.get("data"), indent=2))
                    else:
                        st.error(result.get("error_message", "Failed"))

        st.divider()
        st.caption(f"Session: ...{st.session_state.session_id[-6:]}")


def render_chat():
    """Render the main chat interface."""
    st.markdown("## 💬 Ask Aide")
    st.markdown("Aide can greet you, do arithmetic and describe the machine it runs on.")

    for msg in st.session_state.messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    if prompt := st.chat_input("Ask anything..."):
        st.session_state.messages.append({"role": "user", "content": prompt})
        with st.chat_message("user"):
            st.markdown(prompt)

        with st.chat_message("assistant"):
            with st.spinner("Thinking..."):
                response = send_message(prompt)

            if "error" in response:
                st.error(f"❌ {response['error']}")
                content = f"Error: {response['error']}"
            else:
                content = response.get("message", "No response")
                st.markdown(content)

            st.session_state.messages.append({"role": "assistant", "content": content})


def main():
    init_session_state()
    if not st.session_state.backend_connected:
        check_backend()
    render_sidebar()
    render_chat()


if __name__ == "__main__":
    main()
