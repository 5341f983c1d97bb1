# ABOUTME: Streamlit UI: six-step questionnaire, streamed strategy view with goals, and Saved strategies tab.
# ABOUTME: API URL configurable via API_URL env; optional bearer token in the sidebar enables saving.

import math
import os
import re
from datetime import datetime

import requests
import streamlit as st
from pydantic import ValidationError

try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

from core.config import DEFAULT_STRATEGIES_PAGE_SIZE, RATE_LIMIT_REQUESTS
from core.schemas import Goal
from life_strategy.goals import extract_goals, narrative_text
from life_strategy.markdown import blocks_to_html, render_markdown
from life_strategy.strategist import stream_error_message, stream_failed

API_URL = os.environ.get("API_URL", "http://localhost:8000")
SESSION_ACCESS_TOKEN = "access_token"
SESSION_ANSWERS = "strategy_answers"
SESSION_STEP = "questionnaire_step"
SESSION_RESULT = "strategy_result"
SAVED_STRATEGY_SUMMARY_MAX_CHARS = 80

RATE_LIMITED_MESSAGE = (
    f"You've reached the limit of {RATE_LIMIT_REQUESTS} strategies per hour. Please try again later."
)

# Each step is (label, fields); each field is (answer key, label, widget, options or placeholder).
QUESTIONNAIRE_STEPS = [
    ("About You", [
        ("name", "Your name", "text", "e.g. Alex"),
        ("age", "Age", "text", "e.g. 30"),
        ("weight", "Weight", "text", "e.g. 180"),
        ("weightUnit", "Weight unit", "select", ["lbs", "kg"]),
        ("heightFt", "Height (ft)", "text", "ft"),
        ("heightIn", "Height (in)", "text", "in"),
    ]),
    ("Health", [
        ("fitnessLevel", "Current fitness level", "select", [
            "", "sedentary", "lightly active", "moderately active", "very active", "extremely active",
        ]),
        ("sleepHours", "Average sleep (hours/night)", "text", "e.g. 7"),
        ("targetWeight", "Target weight", "text", "e.g. 160"),
        ("dailySteps", "Current daily steps", "text", "e.g. 5000"),
        ("healthGoals", "Health goals", "area", "e.g. Lose 20 lbs, manage stress, improve energy levels..."),
        ("dietDescription", "Describe your diet", "area", "e.g. I mostly eat fast food, rarely cook at home..."),
    ]),
    ("Interests", [
        ("hobbies", "Hobbies", "area", "e.g. Photography, hiking, reading sci-fi..."),
        ("joyActivities", "What brings you joy?", "area", "e.g. Spending time with family, creating things..."),
        ("skills", "Skills", "area", "e.g. Programming, public speaking, design..."),
    ]),
    ("Career", [
        ("currentOccupation", "Current occupation", "text", "e.g. Software engineer, nurse..."),
        ("yearsExperience", "Years of experience", "text", "e.g. 5"),
        ("careerSatisfaction", "Career satisfaction (1-10)", "slider", None),
        ("careerGoals", "Career goals", "area", "e.g. Get promoted, change careers to UX design..."),
    ]),
    ("Finances", [
        ("annualIncome", "Annual income", "select", [
            "", "under $30k", "$30k–$60k", "$60k–$100k", "$100k–$150k", "$150k–$250k", "$250k–$500k", "$500k+",
        ]),
        ("netWorth", "Net worth", "select", [
            "", "negative (debt)", "$0–$10k", "$10k–$50k", "$50k–$200k", "$200k–$500k", "$500k–$1M", "$1M–$5M", "$5M+",
        ]),
        ("monthlySavings", "Monthly savings capacity ($)", "text", "e.g. 300"),
        ("financialGoals", "Financial goals", "area", "e.g. Pay off debt, save an emergency fund..."),
        ("financialChallenges", "Financial challenges", "area", "e.g. Living paycheck to paycheck..."),
    ]),
    ("Goals", [
        ("happinessDefinition", "What does happiness mean to you?", "area", "e.g. Financial freedom, meaningful work..."),
        ("shortTermGoals", "Goals for the next year", "area", "e.g. Lose 30 lbs, save $10k..."),
        ("longTermGoals", "Goals for 5+ years", "area", "e.g. Own a business, retire early..."),
        ("biggestObstacle", "Biggest obstacle", "area", "e.g. Lack of motivation, time constraints..."),
    ]),
]

INITIAL_ANSWERS = {"weightUnit": "lbs", "careerSatisfaction": "5"}


def _saved_strategy_expander_label(
    strategy: dict, max_chars: int = SAVED_STRATEGY_SUMMARY_MAX_CHARS
) -> str:
    """Build expander label: first narrative line and creation date."""
    text = narrative_text(strategy.get("strategy_text") or "").strip()
    first_line = text.splitlines()[0].lstrip("# ").strip() if text else "Untitled strategy"
    summary = (first_line[:max_chars] + "…") if len(first_line) > max_chars else first_line
    date_str = ""
    if strategy.get("created_at"):
        try:
            dt = datetime.fromisoformat(strategy["created_at"].replace("Z", "+00:00"))
            date_str = dt.strftime("%b %d, %Y")
        except (ValueError, TypeError):
            pass
    if date_str:
        return f"{summary}  ·  Created on {date_str}"
    return summary


def goal_progress_pct(goal: dict) -> int:
    """Progress toward the target, capped at 100. Works for goals that go down (e.g. weight) too."""
    current = float(goal.get("currentValue") or 0)
    target = float(goal.get("targetValue") or 0)
    if target > current:
        ratio = current / target
    elif current:
        ratio = target / current
    else:
        ratio = 1.0
    return min(100, math.floor(ratio * 100 + 0.5))


def _number(value) -> str:
    value = float(value)
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def format_goal_value(goal: dict, value) -> str:
    """Format a goal value; dollar units get a $ prefix."""
    if goal.get("unit") in ("USD", "USD/month"):
        return f"${_number(value)}"
    return _number(value)


def tracking_sources_label(goal: dict) -> str:
    sources = goal.get("trackingSources") or []
    if not sources:
        return ""
    return "Connect via: " + ", ".join(s.replace("_", " ", 1) for s in sources)


def _deadline_label(goal: dict) -> str:
    deadline = goal.get("deadline")
    if not deadline:
        return ""
    try:
        return datetime.fromisoformat(deadline).strftime("%b %Y")
    except ValueError:
        return deadline


def displayable_goals(goals: list) -> list[dict]:
    """Keep only goals that fit the Goal shape, so cards render and saving does not 422."""
    kept = []
    for raw in goals:
        try:
            kept.append(Goal.model_validate(raw).model_dump(exclude_none=True))
        except ValidationError:
            continue
    return kept


def accumulate_stream(chunks, on_update=None) -> str:
    """Concatenate decoded chunks into a fresh buffer, calling on_update with the text so far."""
    text = ""
    for chunk in chunks:
        if not chunk:
            continue
        text += chunk
        if on_update is not None:
            on_update(text)
    return text


def strategy_file_name(name: str | None) -> str:
    """Markdown file name for a downloaded strategy, e.g. alice-smith-life-strategy.md."""
    slug = re.sub(r"[^a-z0-9]+", "-", (name or "").lower()).strip("-")
    return f"{slug}-life-strategy.md" if slug else "life-strategy.md"


def _safe_json(response: requests.Response):
    """Parse response body as JSON; return dict or empty dict on failure."""
    try:
        return response.json()
    except Exception:
        return {}


def _auth_headers():
    """Return headers with Bearer token for authenticated API calls, or empty dict if not signed in."""
    token = st.session_state.get(SESSION_ACCESS_TOKEN)
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def _render_goal(goal: dict):
    pct = goal_progress_pct(goal)
    deadline = _deadline_label(goal)
    header = f"**{goal.get('category', '').upper()}** · {goal.get('title', '')}"
    if deadline:
        header += f"  ·  {deadline}"
    st.markdown(header)
    unit = goal.get("unit", "")
    st.caption(
        f"{format_goal_value(goal, goal.get('currentValue', 0))} {unit} → "
        f"{format_goal_value(goal, goal.get('targetValue', 0))} {unit}"
    )
    st.progress(pct / 100)
    label = tracking_sources_label(goal)
    if label:
        st.caption(label)


def _render_strategy(text: str, goals: list[dict]):
    st.markdown(blocks_to_html(render_markdown(narrative_text(text))), unsafe_allow_html=True)
    if goals:
        st.subheader("Your trackable goals")
        for goal in goals:
            _render_goal(goal)


def _render_download(text: str, name: str | None, key: str):
    st.download_button(
        "Download strategy",
        data=narrative_text(text).strip(),
        file_name=strategy_file_name(name),
        mime="text/markdown",
        disabled=stream_failed(text),
        key=key,
    )


def _render_questionnaire():
    answers = st.session_state.setdefault(SESSION_ANSWERS, dict(INITIAL_ANSWERS))
    step = st.session_state.setdefault(SESSION_STEP, 0)
    label, fields = QUESTIONNAIRE_STEPS[step]
    st.progress((step + 1) / len(QUESTIONNAIRE_STEPS), text=f"Step {step + 1} of {len(QUESTIONNAIRE_STEPS)}: {label}")

    for key, field_label, widget, extra in fields:
        current = answers.get(key, "")
        if widget == "select":
            index = extra.index(current) if current in extra else 0
            answers[key] = st.selectbox(field_label, extra, index=index, key=f"q_{key}")
        elif widget == "area":
            answers[key] = st.text_area(field_label, value=current, placeholder=extra, key=f"q_{key}")
        elif widget == "slider":
            answers[key] = str(st.slider(field_label, 1, 10, int(current or 5), key=f"q_{key}"))
        else:
            answers[key] = st.text_input(field_label, value=current, placeholder=extra, key=f"q_{key}")

    col_back, col_next = st.columns(2)
    with col_back:
        if st.button("Back", disabled=step == 0, key="nav_back"):
            st.session_state[SESSION_STEP] = step - 1
            st.rerun()
    with col_next:
        if step < len(QUESTIONNAIRE_STEPS) - 1:
            if st.button("Next", key="nav_next"):
                st.session_state[SESSION_STEP] = step + 1
                st.rerun()
        elif st.button("Generate my strategy", key="nav_generate"):
            _generate({k: v for k, v in answers.items() if v})


def _generate(answers: dict):
    """Stream a strategy for answers into the page and keep the result in session state."""
    st.session_state.pop(SESSION_RESULT, None)
    placeholder = st.empty()
    try:
        with requests.post(
            f"{API_URL}/api/strategy",
            json=answers,
            headers=_auth_headers(),
            stream=True,
            timeout=(10, 300),
        ) as r:
            if r.status_code == 429:
                st.error(RATE_LIMITED_MESSAGE)
                return
            if r.status_code != 200:
                body = _safe_json(r)
                st.error(body.get("error", r.text or f"Server error {r.status_code}"))
                return
            text = accumulate_stream(
                r.iter_content(chunk_size=None, decode_unicode=True),
                on_update=lambda so_far: placeholder.markdown(narrative_text(so_far)),
            )
    except requests.RequestException as e:
        st.error(f"Could not reach the API: {e}")
        return
    placeholder.empty()
    st.session_state[SESSION_RESULT] = {
        "answers": answers,
        "text": text,
        "goals": displayable_goals(extract_goals(text)),
    }
    st.rerun()


def _render_result():
    result = st.session_state.get(SESSION_RESULT)
    if not result:
        return
    text = result["text"]
    if stream_failed(text):
        st.error(stream_error_message(text).strip() or "Strategy generation failed.")
    _render_strategy(text, result["goals"])

    col_save, col_download, col_restart = st.columns(3)
    with col_save:
        if st.button("Save strategy", disabled=stream_failed(text), key="save_strategy"):
            if not st.session_state.get(SESSION_ACCESS_TOKEN):
                st.warning("Add an access token in the sidebar to save strategies.")
                return
            try:
                r = requests.post(
                    f"{API_URL}/strategies/complete",
                    json={
                        "answers": result["answers"],
                        "strategy_text": text,
                        "goals": result["goals"],
                    },
                    headers=_auth_headers(),
                    timeout=10,
                )
                if r.status_code == 201:
                    st.success("Strategy saved. Check the Saved strategies tab.")
                else:
                    body = _safe_json(r)
                    st.error(f"Save failed: {r.status_code} – {body.get('error', r.text or 'Save failed.')}")
            except requests.RequestException as e:
                st.error(f"Could not reach the API: {e}")
    with col_download:
        _render_download(text, result["answers"].get("name"), key="download_result")
    with col_restart:
        if st.button("Start over", key="restart"):
            for key in list(st.session_state.keys()):
                if key in (SESSION_RESULT, SESSION_ANSWERS, SESSION_STEP) or key.startswith("q_"):
                    del st.session_state[key]
            st.rerun()


def _render_saved():
    if not st.session_state.get(SESSION_ACCESS_TOKEN):
        st.info("Add an access token in the sidebar to see saved strategies.")
        return
    page_size = DEFAULT_STRATEGIES_PAGE_SIZE
    page = st.session_state.setdefault("saved_strategies_page", 1)
    offset = (page - 1) * page_size
    try:
        r = requests.get(
            f"{API_URL}/strategies",
            params={"limit": page_size, "offset": offset},
            headers=_auth_headers(),
            timeout=10,
        )
    except requests.RequestException as e:
        st.error(f"Could not load saved strategies. Try again. Error: {e}")
        return
    if r.status_code == 401:
        st.error("Your access token is invalid or expired.")
        return
    if r.status_code != 200:
        st.error(_safe_json(r).get("error", "Could not load saved strategies. Try again."))
        return
    data = _safe_json(r)
    strategies = data.get("strategies", [])
    total = data.get("total", 0)
    if not strategies:
        st.info("No saved strategies yet. Complete the questionnaire to create one.")
        return
    st.caption(f"Showing {offset + 1}–{offset + len(strategies)} of {total}")
    for s in strategies:
        with st.expander(_saved_strategy_expander_label(s), expanded=False):
            _render_strategy(s.get("strategy_text") or "", s.get("goals") or [])
            _render_download(
                s.get("strategy_text") or "",
                (s.get("answers") or {}).get("name"),
                key=f"download_{s.get('id')}",
            )
    col_prev, col_next = st.columns(2)
    with col_prev:
        if st.button("Previous", disabled=(page <= 1), key="prev_strategies"):
            st.session_state["saved_strategies_page"] = page - 1
            st.rerun()
    with col_next:
        if st.button("Next", disabled=(offset + len(strategies) >= total), key="next_strategies"):
            st.session_state["saved_strategies_page"] = page + 1
            st.rerun()


def main():
    token = st.sidebar.text_input(
        "Access token (optional)",
        value=st.session_state.get(SESSION_ACCESS_TOKEN, ""),
        type="password",
        help="Bearer token from your identity provider. Needed only to save strategies.",
    )
    st.session_state[SESSION_ACCESS_TOKEN] = token.strip()

    st.title("AI Life Strategist")
    st.write("Answer a few questions and get a personalized plan to be happy, healthy, and wealthy.")

    tab_strategy, tab_saved = st.tabs(["Questionnaire", "Saved strategies"])
    with tab_strategy:
        if st.session_state.get(SESSION_RESULT):
            _render_result()
        else:
            _render_questionnaire()
    with tab_saved:
        _render_saved()


if __name__ == "__main__":
    main()
