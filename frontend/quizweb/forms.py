"""Create-quiz form state: parsing, editing actions and validation.

The create page is a plain HTML form, so every edit (adding a question,
adding an option, switching a question's type) is a round trip. The
form is posted with an `action` field and re-rendered from the draft
produced here.

Field names:
- `title`, `question_count`
- `questions-<i>-text`, `questions-<i>-type`, `questions-<i>-prev_type`
- `questions-<i>-options`: one option per line
- `questions-<i>-correct`: radio value for BOOLEAN, one answer per line otherwise
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from quizstore.models import QuestionType

QUESTION_TYPE_LABELS = {
    QuestionType.BOOLEAN: "True/False",
    QuestionType.INPUT: "Short Answer",
    QuestionType.CHECKBOX: "Multiple Choice",
}

BOOLEAN_OPTIONS = ["True", "False"]
MAX_QUESTIONS = 100


def question_type_label(question_type) -> str:
    try:
        return QUESTION_TYPE_LABELS[QuestionType(question_type)]
    except ValueError:
        return str(question_type)


def default_options(question_type: QuestionType) -> List[str]:
    if question_type is QuestionType.BOOLEAN:
        return list(BOOLEAN_OPTIONS)
    if question_type is QuestionType.CHECKBOX:
        return ["Option 1", "Option 2"]
    return []


def next_option_name(options: List[str]) -> str:
    """Return the first free `Option <n>` label, starting after the current count."""
    number = len(options) + 1
    name = f"Option {number}"
    while name in options:
        number += 1
        name = f"Option {number}"
    return name


@dataclass
class QuestionDraft:
    text: str = ""
    type: QuestionType = QuestionType.BOOLEAN
    options: List[str] = field(default_factory=lambda: list(BOOLEAN_OPTIONS))
    correct_answers: List[str] = field(default_factory=list)

    def change_type(self, question_type: QuestionType) -> None:
        """Switch type, resetting options to that type's defaults and clearing answers."""
        self.type = question_type
        self.options = default_options(question_type)
        self.correct_answers = []

    def add_option(self) -> None:
        self.options = self.options + [next_option_name(self.options)]

    def remove_option(self, index: int) -> None:
        if 0 <= index < len(self.options):
            removed = self.options[index]
            self.options = [o for i, o in enumerate(self.options) if i != index]
            self.correct_answers = [a for a in self.correct_answers if a != removed]


@dataclass
class QuizDraft:
    title: str = ""
    questions: List[QuestionDraft] = field(default_factory=lambda: [QuestionDraft()])


def _lines(values: List[str]) -> List[str]:
    out = []
    for value in values:
        for line in str(value).splitlines():
            line = line.strip()
            if line:
                out.append(line)
    return out


def _parse_type(raw) -> QuestionType:
    try:
        return QuestionType(raw)
    except ValueError:
        return QuestionType.BOOLEAN


def parse_quiz_form(form) -> Tuple[QuizDraft, str]:
    """Build a `QuizDraft` from posted form data and return it with the action.

    `form` is any multi-dict exposing `get` and `getlist` (Starlette's
    `FormData`). A question whose type differs from its `prev_type` gets
    the new type's default options and no correct answers.
    """
    try:
        count = int(form.get("question_count") or 1)
    except ValueError:
        count = 1
    count = max(1, min(count, MAX_QUESTIONS))
    questions = []
    for i in range(count):
        prefix = f"questions-{i}-"
        question_type = _parse_type(form.get(prefix + "type"))
        question = QuestionDraft(
            text=(form.get(prefix + "text") or "").strip(),
            type=question_type,
            options=_lines(form.getlist(prefix + "options")),
            correct_answers=_lines(form.getlist(prefix + "correct")),
        )
        previous = form.get(prefix + "prev_type")
        if previous and previous != question_type.value:
            question.change_type(question_type)
        elif question_type is QuestionType.BOOLEAN:
            question.options = list(BOOLEAN_OPTIONS)
        elif question_type is QuestionType.INPUT:
            question.options = []
        questions.append(question)
    draft = QuizDraft(title=(form.get("title") or "").strip(), questions=questions)
    return draft, form.get("action") or "submit"


def apply_action(draft: QuizDraft, action: str) -> QuizDraft:
    """Apply an editing action to the draft in place and return it.

    Actions: `add_question`, `remove_question:<i>`, `add_option:<i>` and
    `remove_option:<i>:<j>`. Unknown or out-of-range actions are ignored;
    the last remaining question is never removed.
    """
    name, _, arg = action.partition(":")
    if name == "add_question":
        if len(draft.questions) < MAX_QUESTIONS:
            draft.questions.append(QuestionDraft())
        return draft
    parts = arg.split(":")
    try:
        index = int(parts[0])
        option_index = int(parts[1]) if len(parts) > 1 else None
    except ValueError:
        return draft
    if not 0 <= index < len(draft.questions):
        return draft
    question = draft.questions[index]
    if name == "remove_question" and len(draft.questions) > 1:
        del draft.questions[index]
    elif name == "add_option" and question.type is QuestionType.CHECKBOX:
        question.add_option()
    elif name == "remove_option" and option_index is not None:
        question.remove_option(option_index)
    return draft


def validate_quiz_form(draft: QuizDraft) -> Dict[str, str]:
    """Return field errors keyed like `title` or `questions.0.correctAnswers`."""
    errors = {}
    if not draft.title:
        errors["title"] = "Quiz title is required"
    if not draft.questions:
        errors["questions"] = "At least one question is required"
    for i, q in enumerate(draft.questions):
        key = f"questions.{i}"
        if not q.text:
            errors[f"{key}.text"] = "Question text is required"
        answers = [a for a in q.correct_answers if a.strip()]
        if not answers:
            errors[f"{key}.correctAnswers"] = "At least one correct answer is required"
        elif q.type is QuestionType.BOOLEAN:
            if len(answers) != 1 or answers[0] not in BOOLEAN_OPTIONS:
                errors[f"{key}.correctAnswers"] = "Boolean questions must have exactly one correct answer"
        elif q.type is QuestionType.CHECKBOX:
            if any(a not in q.options for a in answers):
                errors[f"{key}.correctAnswers"] = "Correct answers must be chosen from the options"
        if q.type is QuestionType.CHECKBOX and len(q.options) < 2:
            errors[f"{key}.options"] = "Multiple choice questions need at least 2 options"
    return errors


def to_create_payload(draft: QuizDraft) -> dict:
    """Convert a validated draft into the store's camelCase create body."""
    return {
        "title": draft.title,
        "questions": [
            {
                "text": q.text,
                "type": q.type.value,
                "options": list(q.options),
                "correctAnswers": list(q.correct_answers),
                "order": index,
            }
            for index, q in enumerate(draft.questions)
        ],
    }
