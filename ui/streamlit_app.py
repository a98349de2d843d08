import os
import uuid
from datetime import datetime, timezone

import httpx
import streamlit as st

API_URL = os.getenv("CLICKBUS_API", "http://localhost:8000")
FRONTEND_POD = os.getenv("POD_NAME", "frontend-pod")

TILES = [
    ("leaf", "Leaf", "🍃", [
        "Leaves produce oxygen through photosynthesis",
        "A single tree can have up to 100,000 leaves",
        "Leaves change color due to chlorophyll breakdown",
    ]),
    ("sky", "Sky", "🌤️", [
        "The sky appears blue due to light scattering",
        "Sunsets are red because of longer light wavelengths",
        "The atmosphere extends up to 10,000 km above Earth",
    ]),
    ("ocean", "Ocean", "🌊", [
        "Oceans cover 71% of Earth's surface",
        "The deepest ocean point is 36,000 feet down",
        "Oceans contain 99% of Earth's living space",
    ]),
    ("lightning", "Lightning", "⚡", [
        "Lightning is 5x hotter than the sun's surface",
        "Thunder is the sound of lightning expanding air",
        "Lightning strikes Earth 100 times per second",
    ]),
    ("mountain", "Mountain", "⛰️", [
        "Mountains cover 25% of Earth's land surface",
        "The tallest mountain is Mount Everest at 29,032 feet",
        "Mountains create their own weather patterns",
    ]),
    ("stars", "Stars", "⭐", [
        "There are more stars than grains of sand on Earth",
        "Our sun is a medium-sized yellow dwarf star",
        "Stars are born in nebulae from gas and dust",
    ]),
]


def log_action(action: str, guid: str, details: str):
    try:
        httpx.post(f"{API_URL}/api/log", json={
            "action": action,
            "guid": guid,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "podName": FRONTEND_POD,
        }, timeout=3.0)
    except httpx.HTTPError as e:
        st.toast(f"Failed to log action: {e}")


def start_session():
    try:
        resp = httpx.get(f"{API_URL}/api/pod-guid", timeout=3.0)
        resp.raise_for_status()
        info = resp.json()
        st.session_state.pod_guid = info["podGuid"]
        st.session_state.pod_info = info
        log_action("session_start", info["podGuid"], f"Session started - Pod: {info['podName']}")
    except httpx.HTTPError:
        # backend unreachable; keep the UI usable with a local GUID
        st.session_state.pod_guid = str(uuid.uuid4())
        st.session_state.pod_info = None
        log_action("session_start", st.session_state.pod_guid, "Session started - Fallback mode")


st.set_page_config(page_title="ClickBus", layout="wide")

if "pod_guid" not in st.session_state:
    st.session_state.facts = {}
    start_session()

st.title("ClickBus Application")
st.caption("Interactive knowledge tiles. Every click is logged by whichever backend pod serves it.")

pod_guid = st.session_state.pod_guid
info = st.session_state.pod_info
st.markdown(f"Pod GUID: `{pod_guid}`")
if info:
    c1, c2, c3 = st.columns(3)
    c1.metric("Pod", info["podName"])
    c2.metric("Requests Handled", info["requestsHandled"])
    c3.metric("Uptime", info["uptime"])

cols = st.columns(3)
for i, (tile_id, name, icon, facts) in enumerate(TILES):
    with cols[i % 3]:
        idx = st.session_state.facts.get(tile_id, 0)
        if st.button(f"{icon} {name}", key=tile_id, use_container_width=True):
            idx = (idx + 1) % len(facts)
            st.session_state.facts[tile_id] = idx
            log_action("tile_click", pod_guid, f"Clicked {name} tile - Fact {idx + 1}")
        st.info(facts[idx])
        st.caption(" ".join("●" if j == idx else "○" for j in range(len(facts))))

st.divider()
l1, l2, l3 = st.columns(3)
l1.link_button("View Pod GUID Logs", f"{API_URL}/api/logs/guid")
l2.link_button("View Pod Activity", f"{API_URL}/api/logs/data")
l3.link_button("Pod Deployment Status", f"{API_URL}/api/pod-status")
