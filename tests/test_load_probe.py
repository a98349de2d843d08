import asyncio
from collections import Counter

import httpx

from clickbus.main import create_app
from clients.load_probe import probe, render


def test_probe_counts_single_pod(settings, sink):
    app = create_app(settings, sink=sink)
    hits = asyncio.run(probe("http://testserver", 20, 5, transport=httpx.ASGITransport(app=app)))
    assert sum(hits.values()) == 20
    ((pod, guid), count), = hits.items()
    assert pod == "test-pod"
    assert guid == app.state.pod.guid
    assert count == 20


def test_render():
    out = render(Counter({("pod-a", "aaaaaaaa-1111"): 3, ("pod-b", "bbbbbbbb-2222"): 1}))
    lines = out.splitlines()
    assert lines[0] == "=== Pod distribution ==="
    assert lines[1].startswith("pod-a")
    assert "aaaaaaaa" in lines[1]
    assert "( 75.0%)" in lines[1]
    assert "( 25.0%)" in lines[2]


def test_render_empty():
    assert render(Counter()) == "no responses"
