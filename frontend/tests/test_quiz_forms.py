from starlette.datastructures import FormData
from quizstore.models import QuestionType
from quizweb.forms import (
    QuestionDraft,
    QuizDraft,
    apply_action,
    next_option_name,
    parse_quiz_form,
    question_type_label,
    to_create_payload,
    validate_quiz_form,
)


def test_question_type_labels():
    assert question_type_label(QuestionType.BOOLEAN) == 'True/False'
    assert question_type_label('INPUT') == 'Short Answer'
    assert question_type_label(QuestionType.CHECKBOX) == 'Multiple Choice'
    assert question_type_label('OTHER') == 'OTHER'


def test_next_option_name_skips_taken_labels():
    assert next_option_name([]) == 'Option 1'
    assert next_option_name(['Option 1', 'Option 2']) == 'Option 3'
    assert next_option_name(['Option 3', 'x']) == 'Option 4'


def test_parse_form_reads_questions():
    form = FormData([
        ('title', ' Geography '),
        ('question_count', '2'),
        ('questions-0-text', 'Is water wet?'),
        ('questions-0-type', 'BOOLEAN'),
        ('questions-0-prev_type', 'BOOLEAN'),
        ('questions-0-correct', 'True'),
        ('questions-1-text', 'Pick colours'),
        ('questions-1-type', 'CHECKBOX'),
        ('questions-1-prev_type', 'CHECKBOX'),
        ('questions-1-options', 'Red\nBlue\n\nGreen'),
        ('questions-1-correct', 'Red\nGreen'),
        ('action', 'submit'),
    ])
    draft, action = parse_quiz_form(form)
    assert action == 'submit'
    assert draft.title == 'Geography'
    assert draft.questions[0].options == ['True', 'False']
    assert draft.questions[0].correct_answers == ['True']
    assert draft.questions[1].options == ['Red', 'Blue', 'Green']
    assert draft.questions[1].correct_answers == ['Red', 'Green']
    assert validate_quiz_form(draft) == {}


def test_type_change_resets_options_and_answers():
    form = FormData([
        ('title', 'T'),
        ('question_count', '1'),
        ('questions-0-text', 'Q'),
        ('questions-0-type', 'CHECKBOX'),
        ('questions-0-prev_type', 'BOOLEAN'),
        ('questions-0-correct', 'True'),
    ])
    draft, _ = parse_quiz_form(form)
    question = draft.questions[0]
    assert question.type is QuestionType.CHECKBOX
    assert question.options == ['Option 1', 'Option 2']
    assert question.correct_answers == []


def test_validation_messages():
    draft = QuizDraft(title='', questions=[
        QuestionDraft(text='', type=QuestionType.BOOLEAN, correct_answers=[]),
        QuestionDraft(text='Pick', type=QuestionType.CHECKBOX, options=['only'], correct_answers=['missing']),
        QuestionDraft(text='Say', type=QuestionType.INPUT, options=[], correct_answers=['  ']),
    ])
    errors = validate_quiz_form(draft)
    assert errors['title'] == 'Quiz title is required'
    assert errors['questions.0.text'] == 'Question text is required'
    assert errors['questions.0.correctAnswers'] == 'At least one correct answer is required'
    assert errors['questions.1.options'] == 'Multiple choice questions need at least 2 options'
    assert errors['questions.1.correctAnswers'] == 'Correct answers must be chosen from the options'
    assert errors['questions.2.correctAnswers'] == 'At least one correct answer is required'


def test_boolean_needs_exactly_one_answer():
    draft = QuizDraft(title='T', questions=[QuestionDraft(text='Q', correct_answers=['True', 'False'])])
    assert validate_quiz_form(draft) == {
        'questions.0.correctAnswers': 'Boolean questions must have exactly one correct answer',
    }


def test_actions_edit_the_draft():
    draft = QuizDraft(title='T')
    apply_action(draft, 'add_question')
    assert len(draft.questions) == 2

    draft.questions[1].change_type(QuestionType.CHECKBOX)
    apply_action(draft, 'add_option:1')
    assert draft.questions[1].options == ['Option 1', 'Option 2', 'Option 3']

    draft.questions[1].correct_answers = ['Option 2']
    apply_action(draft, 'remove_option:1:1')
    assert draft.questions[1].options == ['Option 1', 'Option 3']
    assert draft.questions[1].correct_answers == []

    apply_action(draft, 'remove_question:0')
    assert len(draft.questions) == 1
    apply_action(draft, 'remove_question:0')
    assert len(draft.questions) == 1

    apply_action(draft, 'remove_question:bogus')
    apply_action(draft, 'refresh')
    assert len(draft.questions) == 1


def test_payload_assigns_order_by_position():
    draft = QuizDraft(title='T', questions=[
        QuestionDraft(text='a', correct_answers=['True']),
        QuestionDraft(text='b', type=QuestionType.INPUT, options=[], correct_answers=['x']),
    ])
    payload = to_create_payload(draft)
    assert payload['title'] == 'T'
    assert [q['order'] for q in payload['questions']] == [0, 1]
    assert payload['questions'][0] == {
        'text': 'a', 'type': 'BOOLEAN', 'options': ['True', 'False'], 'correctAnswers': ['True'], 'order': 0,
    }
