from pathlib import Path

import requests
from streamlit.testing.v1 import AppTest

APP = str(Path(__file__).resolve().parents[1] / "streamlit_app.py")


class FakeResponse:
    status_code = 200

    def __init__(self, data):
        self.data = data

    def json(self):
        return self.data


def test_answer_is_not_rendered_as_html(monkeypatch):
    answer = "<img src=x onerror=alert(1)> 42 users."
    monkeypatch.setattr(
        requests,
        "post",
        lambda url, json, timeout: FakeResponse(
            {"answer": answer, "query": "SELECT 1", "prompt": "p", "result": '[{"count": 42}]'}
        ),
    )

    at = AppTest.from_file(APP).run()
    next(w for w in at.text_input if w.label == "Question").input("How many users?")
    at.button[0].click()
    at.run()

    assert not at.exception
    shown = [m for m in at.markdown if answer in m.value]
    assert shown
    assert not any(m.proto.allow_html for m in shown)
