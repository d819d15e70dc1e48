"""CLI script to load quizzes from a JSON file into the store database.

Usage: python scripts/seed_quizzes.py quizzes.json [--dry-run]

The file holds either one create payload or a list of them, in the same
shape the POST /quizzes endpoint accepts.
"""
import sys
import argparse
import json
import pathlib
# Ensure `backend/` is on sys.path so `quizstore` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from quizstore.database import engine, create_db_and_tables
from quizstore import services
from quizstore.schemas import validate_quiz_payload


def main(path: pathlib.Path, dry_run: bool = False) -> int:
    """Create every quiz found in `path` and print a line per quiz.

    Returns the number of payloads that failed validation. With
    `dry_run` the payloads are only validated.
    """
    data = json.loads(path.read_text(encoding='utf-8'))
    payloads = data if isinstance(data, list) else [data]
    create_db_and_tables()
    failures = 0
    with Session(engine) as session:
        svc = services.QuizService(session)
        for idx, payload in enumerate(payloads):
            if dry_run:
                result = validate_quiz_payload(payload)
                if not result.ok:
                    failures += 1
                    print(f'#{idx}: invalid: {result.errors}')
                else:
                    print(f'#{idx}: ok ({len(result.value.questions)} questions)')
                continue
            try:
                quiz = svc.create(payload)
            except services.QuizValidationError as e:
                failures += 1
                print(f'#{idx}: skipped: {e}')
                continue
            print(f'#{idx}: created {quiz.id} "{quiz.title}" with {len(quiz.questions)} questions')
    print(f'Processed {len(payloads)} quizzes, {failures} invalid')
    return failures


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('path', type=pathlib.Path, help='JSON file with one quiz or a list of quizzes')
    parser.add_argument('--dry-run', action='store_true', help='Validate only, do not write')
    args = parser.parse_args()
    sys.exit(1 if main(args.path, dry_run=args.dry_run) else 0)
