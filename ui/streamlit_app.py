"""
Streamlit UI for NeuroNote
"""
import html
import streamlit as st
import requests
from datetime import datetime

from config import settings
from neuronote.models.study_pack import StudyPack
from neuronote.models.quiz import QuizAnswers
from neuronote.study.grading import grade_quiz, is_complete
from neuronote.views.render import (
    FlashcardDeck, render_summary, render_mind_map, render_diagram,
    render_mnemonics, render_quiz_result, flashcards_to_anki
)

# Page configuration
st.set_page_config(
    page_title="NeuroNote - Turn Material into Memory",
    page_icon="🧠",
    layout="wide",
    initial_sidebar_state="expanded"
)

# API configuration
API_BASE_URL = settings.API_BASE_URL

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 3rem;
        color: #6366F1;
        text-align: center;
        margin-bottom: 2rem;
    }
    .flashcard {
        padding: 2rem;
        border: 2px solid #475569;
        border-radius: 1rem;
        text-align: center;
        font-size: 1.3rem;
        min-height: 10rem;
    }
</style>
""", unsafe_allow_html=True)

# Session state
for key, default in {
    "study_pack": None,
    "busy": False,
    "deck": None,
    "deck_rewarded": False,
    "quiz_answers": {},
    "quiz_result": None,
    "quiz_attempt": 0,
    "error": "",
}.items():
    if key not in st.session_state:
        st.session_state[key] = default


def _headers():
    token = st.session_state.get("access_token")
    return {"Authorization": f"Bearer {token}"} if token else {}


def _error_text(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"API Error: {response.status_code}"
    return body.get("error") or body.get("detail") or f"API Error: {response.status_code}"


def _reset_pack_state(pack):
    st.session_state.study_pack = pack
    st.session_state.deck = FlashcardDeck(pack.flashcards) if pack else None
    st.session_state.deck_rewarded = False
    st.session_state.quiz_answers = {}
    st.session_state.quiz_result = None


def _post_study_event(path: str, payload: dict):
    """Send a gamification event; failures never block studying"""
    try:
        response = requests.post(f"{API_BASE_URL}/study/{path}", json=payload, headers=_headers(), timeout=15)
        if response.status_code == 200:
            return response.json()
        st.warning(f"Progress not saved: {_error_text(response)}")
    except requests.exceptions.RequestException as e:
        st.warning(f"Progress not saved: {e}")
    return None


# Header
st.markdown('<h1 class="main-header">🧠 NeuroNote</h1>', unsafe_allow_html=True)

# Sidebar
with st.sidebar:
    st.header("⚙️ Settings")

    # API Status Check
    try:
        response = requests.get(f"{API_BASE_URL}/health", timeout=2)
        if response.status_code == 200:
            st.success("✅ API Connected")
            if not response.json().get("gemini_configured"):
                st.warning("⚠️ Gemini API key missing on the server")
        else:
            st.error("❌ API Error")
    except requests.exceptions.RequestException:
        st.error("❌ API Offline")

    st.text_input("Access token", type="password", key="access_token",
                  help="Supabase session token (not needed when the server runs with AUTH_DISABLED)")

    st.divider()

    # Profile (re-read on every run)
    st.header("🏆 Progress")
    try:
        response = requests.get(f"{API_BASE_URL}/study/profile", headers=_headers(), timeout=5)
        if response.status_code == 200:
            data = response.json()
            profile = data["profile"]
            col1, col2 = st.columns(2)
            col1.metric("XP", profile["xp"])
            col2.metric("Streak", f"{profile['streak']} 🔥")
            analytics = profile["analytics"]
            st.caption(
                f"Cards learned: {analytics['flashcards_learned']} · "
                f"Quizzes: {analytics['quiz_attempts']}"
            )
            if data.get("badge_labels"):
                st.markdown(" ".join(f"`{label}`" for label in data["badge_labels"]))
        else:
            st.caption("Sign in to track XP and streaks.")
    except requests.exceptions.RequestException:
        st.caption("Progress unavailable.")

pack = st.session_state.study_pack

# =============================================================================
# INPUT VIEW
# =============================================================================
if pack is None:
    st.markdown("#### Upload notes, book pages, or paste text. NeuroNote turns them into summaries, mind maps, flashcards, mnemonics and quizzes.")

    uploads = st.file_uploader(
        "Source material (images or PDFs)",
        type=["png", "jpg", "jpeg", "webp", "gif", "pdf"],
        accept_multiple_files=True
    )
    text_input = st.text_area(
        "Or paste your lecture notes, article, or topic summary here:",
        height=200
    )

    if st.button("✨ Generate Study Pack", type="primary", disabled=st.session_state.busy):
        if not text_input.strip() and not uploads:
            st.warning("⚠️ Please provide text or a file to analyze.")
        else:
            st.session_state.busy = True
            try:
                with st.spinner("🧠 Synthesizing knowledge... creating mnemonics, maps and tests"):
                    files = [("files", (f.name, f.getvalue(), f.type)) for f in uploads or []]
                    response = requests.post(
                        f"{API_BASE_URL}/study-packs/generate",
                        data={"text": text_input},
                        files=files or None,
                        headers=_headers(),
                        timeout=300
                    )
                if response.status_code == 200:
                    _reset_pack_state(StudyPack.model_validate(response.json()))
                    st.session_state.error = ""
                else:
                    st.session_state.error = _error_text(response)
            except requests.exceptions.Timeout:
                st.session_state.error = "⏱️ Request timed out. Please try again."
            except requests.exceptions.RequestException as e:
                st.session_state.error = f"Connection error: {e}"
            finally:
                st.session_state.busy = False
            st.rerun()

    if st.session_state.error:
        st.error(f"❌ {st.session_state.error}")
        if st.button("Dismiss"):
            st.session_state.error = ""
            st.rerun()

# =============================================================================
# STUDY DASHBOARD
# =============================================================================
else:
    col1, col2 = st.columns([4, 1])
    with col1:
        st.caption("STUDY PACK")
        st.title(pack.title)
    with col2:
        if st.button("🔄 Start Over"):
            _reset_pack_state(None)
            st.rerun()

    tab_summary, tab_map, tab_cards, tab_hacks, tab_quiz = st.tabs(
        ["📝 Synthesize", "🗺️ Visualize", "📚 Recall", "⚡ Memory Hacks", "▶️ Test Me"]
    )

    with tab_summary:
        st.markdown(render_summary(pack))
        if st.button("🔊 Listen", disabled=st.session_state.busy):
            st.session_state.busy = True
            try:
                with st.spinner("Generating audio..."):
                    speech_text = f"{pack.summary.core_concept} {' '.join(pack.summary.key_points)}"
                    response = requests.post(
                        f"{API_BASE_URL}/speech",
                        json={"text": speech_text},
                        headers=_headers(),
                        timeout=120
                    )
                if response.status_code == 200:
                    st.audio(response.content, format="audio/wav")
                else:
                    st.error(f"❌ {_error_text(response)}")
            except requests.exceptions.RequestException as e:
                st.error(f"❌ Error: {e}")
            finally:
                st.session_state.busy = False
        if pack.summary.long_notes:
            with st.expander("Detailed notes"):
                st.markdown(pack.summary.long_notes)

    with tab_map:
        st.caption("A hierarchical breakdown of the topic.")
        st.markdown(render_mind_map(pack.mind_map))
        st.divider()
        st.markdown(render_diagram(pack.diagram))

    with tab_cards:
        deck = st.session_state.deck
        if not deck or not len(deck):
            st.info("No flashcards for this content.")
        else:
            card = deck.current
            side = "Answer" if deck.flipped else "Question"
            text = card.back if deck.flipped else card.front
            st.caption(side.upper())
            st.markdown(f'<div class="flashcard">{html.escape(text)}</div>', unsafe_allow_html=True)

            col1, col2, col3, col4 = st.columns(4)
            if col1.button("⬅️ Prev"):
                deck.prev()
                st.rerun()
            if col2.button("🔁 Flip"):
                deck.flip()
                st.rerun()
            if col3.button("Next ➡️"):
                deck.next()
                st.rerun()
            col4.markdown(f"**{deck.position()}**")

            if deck.completed and not st.session_state.deck_rewarded:
                result = _post_study_event("flashcards/complete", {"deck_size": len(deck), "topic": pack.title})
                st.session_state.deck_rewarded = True
                if result:
                    st.success(f"🎉 Deck complete! +{result['reward']['xp_awarded']} XP")

            st.download_button(
                label="📥 Export to Anki",
                data=flashcards_to_anki(pack.flashcards),
                file_name=f"flashcards_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt",
                mime="text/plain"
            )

    with tab_hacks:
        st.markdown(render_mnemonics(pack.mnemonics))

    with tab_quiz:
        quiz = pack.quiz
        attempt = st.session_state.quiz_attempt
        graded = st.session_state.quiz_result is not None
        answers = {"multiple_choice": {}, "true_false": {}, "fill_in_blank": {}}

        if quiz.multiple_choice:
            st.subheader("Multiple choice")
        for i, q in enumerate(quiz.multiple_choice):
            choice = st.radio(
                f"{i + 1}. {q.question}", options=list(range(len(q.options))),
                format_func=lambda idx, q=q: q.options[idx],
                index=None, key=f"mc_{attempt}_{i}", disabled=graded
            )
            answers["multiple_choice"][i] = choice

        if quiz.true_false:
            st.subheader("True or false")
        for i, q in enumerate(quiz.true_false):
            choice = st.radio(
                q.statement, options=[True, False],
                format_func=lambda v: "True" if v else "False",
                index=None, key=f"tf_{attempt}_{i}", disabled=graded, horizontal=True
            )
            answers["true_false"][i] = choice

        if quiz.fill_in_blank:
            st.subheader("Fill in the blank")
        for i, q in enumerate(quiz.fill_in_blank):
            typed = st.text_input(q.sentence, key=f"fib_{attempt}_{i}", disabled=graded)
            answers["fill_in_blank"][i] = typed or None

        answer_map = QuizAnswers.model_validate(answers)

        if not graded:
            if st.button("✅ Check My Answers", disabled=not is_complete(quiz, answer_map)):
                payload = {"quiz": quiz.model_dump(), "answers": answer_map.model_dump(), "topic": pack.title}
                result = _post_study_event("quiz/grade", payload)
                # Score locally as well so a failed progress write still shows the result
                st.session_state.quiz_result = grade_quiz(quiz, answer_map)
                if result:
                    st.session_state.quiz_xp = result["reward"]["xp_awarded"]
                st.rerun()
        else:
            st.markdown(render_quiz_result(st.session_state.quiz_result))
            if st.session_state.get("quiz_xp"):
                st.success(f"+{st.session_state.quiz_xp} XP")
            for item in st.session_state.quiz_result.per_question:
                if not item.is_correct and item.explanation:
                    st.caption(f"{item.question_type.value} #{item.index + 1}: {item.explanation}")
            if st.button("🔁 Retake Quiz"):
                st.session_state.quiz_result = None
                st.session_state.quiz_xp = 0
                st.session_state.quiz_attempt += 1
                st.rerun()

# Footer
st.divider()
st.markdown("""
<div style='text-align: center; color: #666;'>
    <p>NeuroNote v1.0 | Turn Material into Memory</p>
    <p>Powered by Gemini, FastAPI and Supabase</p>
</div>
""", unsafe_allow_html=True)
