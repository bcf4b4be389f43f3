"""Load question banks from JSON or from a human-friendly text file.

JSON format: an array of objects (or ``{"questions": [...]}``) with the keys
``id``, ``question``, ``choices`` and ``answer`` (zero-based index).

Text format (repeat blocks separated by blank lines or '---'):

    ID: 7            (optional; defaults to the block's position, starting at 1)
    Q: Question text. Additional lines until the next marker are treated as
       part of the question.
    A: First choice
    B: Second choice
    C: ...           (two or more choices, lettered in order)
    CORRECT: B

Example:

    Q: What is $2 + 2$?
    A: 3
    B: 4
    C: 5
    CORRECT: B
"""

from __future__ import annotations

import json
import logging
import string
from pathlib import Path

from quizrank.core.errors import QuestionBankError
from quizrank.core.models import Question
from quizrank.core.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)

_OPTION_LETTERS = string.ascii_uppercase


def load_question_bank(file_path: Path) -> QuestionBank:
    """Read ``file_path`` (``.json`` or text) into a validated bank."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionBankError(f"Cannot read question bank {file_path}: {exc}") from exc

    if file_path.suffix.lower() == ".json":
        questions = parse_questions_json(text)
    else:
        questions = parse_questions_text(text)
    if not questions:
        raise QuestionBankError("Question bank file did not contain any questions.")
    bank = QuestionBank(questions)
    logger.info("Loaded %d questions from %s", len(bank), file_path)
    return bank


def parse_questions_json(text: str) -> list[Question]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionBankError(f"Question bank is not valid JSON: {exc}") from exc
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise QuestionBankError("Question bank JSON must be an array of questions.")

    questions: list[Question] = []
    for position, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise QuestionBankError(f"Question #{position} must be an object.")
        try:
            question_id = item["id"]
            text_value = item["question"]
            choices = item["choices"]
            answer = item["answer"]
        except KeyError as exc:
            raise QuestionBankError(f"Question #{position} is missing {exc.args[0]!r}.") from exc
        if not isinstance(question_id, int) or not isinstance(answer, int):
            raise QuestionBankError(f"Question #{position} id and answer must be integers.")
        if not isinstance(choices, list) or not all(isinstance(c, str) for c in choices):
            raise QuestionBankError(f"Question #{position} choices must be a list of strings.")
        questions.append(
            Question(id=question_id, text=str(text_value), choices=tuple(choices), answer=answer)
        )
    return questions


def parse_questions_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block, position) for position, block in enumerate(blocks, start=1) if block]


def _parse_block(block: str, position: int) -> Question:
    question_id = position
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("ID:"):
            raw_value = line.split(":", 1)[1].strip()
            try:
                question_id = int(raw_value)
            except ValueError as exc:
                raise QuestionBankError(f"ID must be an integer, got '{raw_value}'.") from exc
            current_section = None
            continue

        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in options:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuestionBankError(f"Encountered text outside of a known section: '{line}'.")

    if not question_lines:
        raise QuestionBankError(f"Question text missing (Q: ...) in block {position}.")

    letters = _OPTION_LETTERS[: len(options)]
    if sorted(options) != list(letters):
        raise QuestionBankError(
            f"Choices in block {position} must be lettered consecutively from A."
        )
    if correct_letter is None:
        raise QuestionBankError(f"CORRECT is missing in block {position}.")
    if correct_letter not in letters:
        raise QuestionBankError(f"CORRECT must be one of {', '.join(letters)} in block {position}.")

    return Question(
        id=question_id,
        text="\n".join(question_lines).strip(),
        choices=tuple(options[letter].strip() for letter in letters),
        answer=letters.index(correct_letter),
    )
