"""
Markdown renderers for the study dashboard

Pure functions so the Streamlit front-end stays thin and the output can be
checked without a browser.
"""
from typing import List, Optional

from neuronote.models.study_pack import (
    StudyPack, MindMapNode, Diagram, Mnemonic, Flashcard
)
from neuronote.models.quiz import QuizResult
from neuronote.study.grading import result_message

EMPTY_MNEMONICS = "No specific mnemonics generated for this content."
EMPTY_DIAGRAM = "No process diagram for this content."
EMPTY_MIND_MAP = "No mind map for this content."


def render_summary(pack: StudyPack) -> str:
    """Feynman summary, numbered key points, then short notes"""
    summary = pack.summary
    lines = [
        "### 💡 The Feynman Summary",
        "",
        summary.core_concept,
        "",
    ]
    if summary.key_points:
        lines.append("#### Key Concepts Breakdown")
        lines.append("")
        lines.extend(f"{i}. {point}" for i, point in enumerate(summary.key_points, 1))
        lines.append("")
    if summary.short_notes:
        lines.extend(["#### Quick Revision", "", summary.short_notes, ""])
    return "\n".join(lines).rstrip() + "\n"


def render_mind_map(node: Optional[MindMapNode], depth: int = 0) -> str:
    """Nested bullet list; the root label is bold"""
    if node is None:
        return EMPTY_MIND_MAP
    if depth == 0:
        line = f"**{node.label}**"
    else:
        line = f"{'  ' * (depth - 1)}- {node.label}"
    children = [render_mind_map(child, depth + 1) for child in node.children]
    return "\n".join([line] + children)


def render_diagram(diagram: Optional[Diagram]) -> str:
    if diagram is None or not diagram.steps:
        return EMPTY_DIAGRAM
    numbered = "\n".join(f"{i}. {step}" for i, step in enumerate(diagram.steps, 1))
    chain = " → ".join(diagram.steps)
    if diagram.type.lower() == "cycle":
        chain += f" → {diagram.steps[0]}"
    return f"**{diagram.type.title()}**\n\n{numbered}\n\n`{chain}`"


def render_mnemonics(mnemonics: List[Mnemonic]) -> str:
    """One block per memory hack, or an explicit empty state"""
    if not mnemonics:
        return EMPTY_MNEMONICS
    blocks = []
    for hack in mnemonics:
        header = f"{hack.emoji} " if hack.emoji else ""
        block = f"{header}**{hack.type.upper()}**\n\n`{hack.content}`"
        if hack.explanation:
            block += f"\n\n{hack.explanation}"
        blocks.append(block)
    return "\n\n---\n\n".join(blocks)


def render_quiz_result(result: QuizResult) -> str:
    return f"### You scored {result.percent}%\n\n{result.correct} / {result.total} correct. {result_message(result)}"


def flashcards_to_anki(cards: List[Flashcard]) -> str:
    """Tab-separated front/back lines, importable into Anki"""
    def clean(value: str) -> str:
        return value.replace("\t", " ").replace("\r", "").replace("\n", "<br>")

    return "\n".join(f"{clean(card.front)}\t{clean(card.back)}" for card in cards)


class FlashcardDeck:
    """
    Flip-and-step state for one flashcard deck.

    Navigation wraps around and always shows the front of the next card.
    The deck counts as completed once the back of every card has been
    revealed, so merely displaying a deck never completes it.
    """

    def __init__(self, cards: List[Flashcard]):
        self.cards = list(cards)
        self.index = 0
        self.flipped = False
        self._revealed = set()

    def __len__(self):
        return len(self.cards)

    @property
    def current(self) -> Optional[Flashcard]:
        if not self.cards:
            return None
        return self.cards[self.index]

    @property
    def completed(self) -> bool:
        return bool(self.cards) and len(self._revealed) == len(self.cards)

    def flip(self):
        if not self.cards:
            return
        self.flipped = not self.flipped
        if self.flipped:
            self._revealed.add(self.index)

    def _move(self, step: int):
        if not self.cards:
            return
        self.flipped = False
        self.index = (self.index + step) % len(self.cards)

    def next(self):
        self._move(1)

    def prev(self):
        self._move(-1)

    def position(self) -> str:
        if not self.cards:
            return "0 / 0"
        return f"{self.index + 1} / {len(self.cards)}"
