"""HTML rendering for the frontend pages.

Pages are small inline templates; every user-supplied string goes
through `html.escape` before it is interpolated.
"""

from html import escape
from typing import Dict, Optional

from quizstore.models import QuestionType

from .cache import QueryState
from .forms import QuizDraft, question_type_label

STYLE = """
body { font-family: Arial, sans-serif; margin: 0; background: #fafafa; color: #222; }
header { background: #fff; border-bottom: 1px solid #ddd; padding: 12px 32px; }
header a { margin-right: 16px; color: #0a6; text-decoration: none; font-weight: bold; }
main { max-width: 760px; margin: 24px auto; padding: 0 16px; }
.card { background: #fff; padding: 16px; border: 1px solid #ddd; border-radius: 8px; margin-bottom: 16px; }
.error { color: #b00020; }
.correct { color: #0a6; font-weight: bold; }
.muted { color: #777; font-size: 0.9em; }
label { display: block; margin-top: 8px; font-weight: bold; }
input[type=text], textarea, select { width: 100%; padding: 6px; box-sizing: border-box; }
"""


def page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8" />
  <title>{escape(title)} | Quiz Builder</title>
  <style>{STYLE}</style>
</head>
<body>
  <header>
    <a href="/">Quiz Builder</a>
    <a href="/quizzes">Quizzes</a>
    <a href="/create">Create Quiz</a>
  </header>
  <main>
{body}
  </main>
</body>
</html>
"""


def render_error(message: Optional[str], retry_url: str) -> str:
    """Error state with a manual retry link."""
    return f"""<div class="card error" role="alert">
  <p>{escape(message or "An error occurred")}</p>
  <a href="{escape(retry_url)}">Try again</a>
</div>"""


def render_home() -> str:
    return page("Home", """<div class="card">
  <h1>Quiz Builder</h1>
  <p>Create quizzes with true/false, short answer and multiple choice questions.</p>
  <p><a href="/create">Create a quiz</a> or <a href="/quizzes">browse existing quizzes</a>.</p>
</div>""")


def render_quiz_list(state: QueryState, notice: Optional[str] = None) -> str:
    parts = ['<h1>Quizzes</h1>']
    if notice:
        parts.append(f'<div class="card error" role="alert">{escape(notice)}</div>')
    if state.is_error:
        parts.append(render_error(state.error_message, "/quizzes"))
        return page("Quizzes", "\n".join(parts))
    quizzes = state.data or []
    if not quizzes:
        parts.append('<div class="card"><p>No quizzes yet.</p><a href="/create">Create your first quiz</a></div>')
        return page("Quizzes", "\n".join(parts))
    for quiz in quizzes:
        count = quiz.question_count
        noun = "question" if count == 1 else "questions"
        parts.append(f"""<div class="card">
  <h2><a href="/quizzes/{escape(quiz.id)}">{escape(quiz.title)}</a></h2>
  <p class="muted">{count} {noun} &middot; created {quiz.created_at.strftime("%b %d, %Y")}</p>
  <form method="post" action="/quizzes/{escape(quiz.id)}/delete">
    <button type="submit">Delete</button>
  </form>
</div>""")
    return page("Quizzes", "\n".join(parts))


def render_quiz_detail(state: QueryState, quiz_id: str) -> str:
    if state.is_error:
        return page("Quiz", render_error(state.error_message, f"/quizzes/{quiz_id}"))
    quiz = state.data
    count = len(quiz.questions)
    noun = "question" if count == 1 else "questions"
    parts = [
        f"<h1>{escape(quiz.title)}</h1>",
        f'<p class="muted">{count} {noun} &middot; created {quiz.created_at.strftime("%b %d, %Y")}</p>',
    ]
    for position, question in enumerate(quiz.questions, start=1):
        items = []
        if question.type is QuestionType.INPUT:
            answers = ", ".join(escape(a) for a in question.correct_answers) or "&mdash;"
            items.append(f"<li>Accepted answers: <span class=\"correct\">{answers}</span></li>")
        else:
            for option in question.options:
                if option in question.correct_answers:
                    items.append(f'<li class="correct">{escape(option)} &#10003;</li>')
                else:
                    items.append(f"<li>{escape(option)}</li>")
        parts.append(f"""<div class="card">
  <h3>{position}. {escape(question.text)}</h3>
  <p class="muted">{escape(question_type_label(question.type))}</p>
  <ul>{"".join(items)}</ul>
</div>""")
    parts.append('<a href="/quizzes">Back to quizzes</a>')
    return page(quiz.title, "\n".join(parts))


def _field_error(errors: Dict[str, str], key: str) -> str:
    if key not in errors:
        return ""
    return f'<p class="error">{escape(errors[key])}</p>'


def _type_select(index: int, current: QuestionType) -> str:
    options = []
    for question_type in QuestionType:
        selected = " selected" if question_type is current else ""
        options.append(
            f'<option value="{question_type.value}"{selected}>{escape(question_type_label(question_type))}</option>'
        )
    return f'<select name="questions-{index}-type">{"".join(options)}</select>'


def _answer_inputs(index: int, question) -> str:
    name = f"questions-{index}-correct"
    if question.type is QuestionType.BOOLEAN:
        radios = []
        for option in question.options:
            checked = " checked" if option in question.correct_answers else ""
            radios.append(
                f'<label><input type="radio" name="{name}" value="{escape(option)}"{checked} /> {escape(option)}</label>'
            )
        return "".join(radios)
    return (
        f'<label>Correct answers (one per line)</label>'
        f'<textarea name="{name}" rows="3">{escape(chr(10).join(question.correct_answers))}</textarea>'
    )


def _options_input(index: int, question) -> str:
    if question.type is not QuestionType.CHECKBOX:
        return ""
    remove_buttons = "".join(
        f'<button type="submit" name="action" value="remove_option:{index}:{j}">Remove {escape(option)}</button>'
        for j, option in enumerate(question.options)
    )
    return (
        f'<label>Options (one per line)</label>'
        f'<textarea name="questions-{index}-options" rows="4">{escape(chr(10).join(question.options))}</textarea>'
        f'<div><button type="submit" name="action" value="add_option:{index}">Add Option</button>{remove_buttons}</div>'
    )


def render_create_form(draft: QuizDraft, errors: Optional[Dict[str, str]] = None, submit_error: Optional[str] = None) -> str:
    """Render the create form from a draft, with field errors and the submit error."""
    errors = errors or {}
    parts = ["<h1>Create New Quiz</h1>"]
    if submit_error:
        parts.append(f'<div class="card error" role="alert">{escape(submit_error)}</div>')
    parts.append('<form method="post" action="/create">')
    parts.append(f'<input type="hidden" name="question_count" value="{len(draft.questions)}" />')
    parts.append(f"""<div class="card">
  <label for="title">Quiz Title</label>
  <input type="text" id="title" name="title" placeholder="Enter quiz title..." value="{escape(draft.title)}" />
  {_field_error(errors, "title")}
</div>""")
    parts.append(_field_error(errors, "questions"))
    for i, question in enumerate(draft.questions):
        remove = ""
        if len(draft.questions) > 1:
            remove = f'<button type="submit" name="action" value="remove_question:{i}">Remove</button>'
        parts.append(f"""<div class="card">
  <h3>Question {i + 1} {remove}</h3>
  <input type="hidden" name="questions-{i}-prev_type" value="{question.type.value}" />
  <label>Question Text</label>
  <input type="text" name="questions-{i}-text" placeholder="Enter your question..." value="{escape(question.text)}" />
  {_field_error(errors, f"questions.{i}.text")}
  <label>Question Type</label>
  {_type_select(i, question.type)}
  {_options_input(i, question)}
  {_field_error(errors, f"questions.{i}.options")}
  {_answer_inputs(i, question)}
  {_field_error(errors, f"questions.{i}.correctAnswers")}
</div>""")
    parts.append("""<div>
  <button type="submit" name="action" value="add_question">Add Question</button>
  <button type="submit" name="action" value="refresh">Update Form</button>
  <button type="submit" name="action" value="submit">Create Quiz</button>
</div>
</form>""")
    return page("Create Quiz", "\n".join(parts))
