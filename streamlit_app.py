# streamlit_app.py
import time
import json
import requests
import pandas as pd
import streamlit as st

# ---------- Page setup ----------
st.set_page_config(page_title="Ask Database", layout="wide")

st.markdown("""
    <style>
    .main .block-container {padding-top: 2rem; padding-bottom: 3rem; max-width: 1200px;}
    .stTextInput>div>div>input {font-size: 16px; height: 46px;}
    .small-muted {color:#6b7280; font-size:13px;}
    .section-title {font-weight:600; font-size: 18px; margin-top: 1rem;}
    .hr {border-top:1px solid #e5e7eb; margin: 20px 0;}
    </style>
""", unsafe_allow_html=True)

# ---------- Sidebar ----------
with st.sidebar:
    st.header("Settings")
    api_url = st.text_input("API base URL", value="http://127.0.0.1:8000")
    show_sql = st.checkbox("Show generated SQL", value=True)
    show_rows = st.checkbox("Show query result", value=True)
    show_prompt = st.checkbox("Show answer prompt", value=False)
    st.markdown("<div class='small-muted'>The API should be running via <code>uvicorn askdb.main:app --reload</code>.</div>", unsafe_allow_html=True)

# ---------- Session state ----------
if "history" not in st.session_state:
    st.session_state.history = []  # {question, answer, sql, prompt, df, ms, ok, error}

# ---------- Header ----------
st.title("Ask your database")
st.markdown("<div class='small-muted'>Ask a question in plain English. The system writes SQL for it, runs the query and answers from the result.</div>", unsafe_allow_html=True)

# ---------- Input row ----------
col_q, col_btn = st.columns([4, 1])
with col_q:
    question = st.text_input("Question", value="", placeholder="e.g., How many users signed up this month?")
with col_btn:
    run_clicked = st.button("Ask", type="primary", use_container_width=True)


def rows_frame(result: str) -> pd.DataFrame:
    # The API encodes "no rows" as {} rather than [].
    rows = json.loads(result) if result else {}
    return pd.DataFrame(rows) if isinstance(rows, list) and rows else pd.DataFrame()


def call_backend(api: str, q: str):
    t0 = time.perf_counter()
    url = api.rstrip("/") + "/ask"
    try:
        r = requests.post(url, json={"question": q.strip()}, timeout=120)
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        if r.status_code == 200:
            data = r.json()
            return {
                "ok": True,
                "answer": data.get("answer", ""),
                "sql": data.get("query", ""),
                "prompt": data.get("prompt", ""),
                "df": rows_frame(data.get("result", "")),
                "ms": elapsed_ms,
                "error": None,
            }
        try:
            detail = r.json().get("detail")
        except ValueError:
            detail = r.text
        return {"ok": False, "answer": "", "sql": "", "prompt": "", "df": pd.DataFrame(), "ms": elapsed_ms, "error": detail}
    except requests.exceptions.RequestException as e:
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        return {"ok": False, "answer": "", "sql": "", "prompt": "", "df": pd.DataFrame(), "ms": elapsed_ms, "error": str(e)}


def show_error(error):
    if isinstance(error, (dict, list)):
        st.code(json.dumps(error, indent=2))
    else:
        st.code(str(error))


# ---------- Execute ----------
if run_clicked and question.strip():
    with st.spinner("Thinking…"):
        outcome = call_backend(api_url, question)
    st.session_state.history.insert(0, {"question": question, **outcome})

# ---------- Latest result ----------
if st.session_state.history:
    latest = st.session_state.history[0]
    st.subheader("Answer")
    st.markdown(f"<div class='small-muted'>Request finished in {latest['ms']} ms</div>", unsafe_allow_html=True)

    if latest["ok"]:
        st.markdown(latest["answer"])
        if show_sql:
            st.markdown("<div class='section-title'>Generated SQL</div>", unsafe_allow_html=True)
            st.code(latest["sql"], language="sql")
        if show_rows:
            if latest["df"].empty:
                st.info("No rows returned.")
            else:
                st.dataframe(latest["df"], use_container_width=True, height=320)
        if show_prompt:
            st.markdown("<div class='section-title'>Prompt</div>", unsafe_allow_html=True)
            st.code(latest["prompt"])
    else:
        st.error("The request did not succeed.")
        st.markdown("<div class='section-title'>Details</div>", unsafe_allow_html=True)
        show_error(latest["error"])

    st.markdown("<div class='hr'></div>", unsafe_allow_html=True)

# ---------- History ----------
st.subheader("History")
if not st.session_state.history:
    st.markdown("<div class='small-muted'>Your recent questions will appear here.</div>", unsafe_allow_html=True)
else:
    for i, item in enumerate(st.session_state.history):
        with st.expander(f"{i+1}. {item['question']}  •  {item['ms']} ms"):
            if item["ok"]:
                st.markdown(item["answer"])
                if show_sql:
                    st.code(item["sql"], language="sql")
                if show_rows and not item["df"].empty:
                    st.dataframe(item["df"], use_container_width=True, height=220)
            else:
                st.markdown("<div class='section-title'>Error</div>", unsafe_allow_html=True)
                show_error(item["error"])
