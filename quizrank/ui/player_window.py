"""Qt main window that lets a player take a quiz and see the leaderboard."""

from __future__ import annotations

import logging
from enum import Enum, auto

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QSpinBox,
    QStackedWidget,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from quizrank.client.api_client import ApiError, QuizApiClient
from quizrank.constants.quiz_constants import DEFAULT_QUESTION_COUNT, TIMER_TICK_INTERVAL_MS
from quizrank.constants.ui_constants import (
    FINISH_BUTTON,
    INTRO_HEADING,
    LEADERBOARD_COLUMNS,
    LEADERBOARD_EMPTY,
    LEADERBOARD_HEADING,
    NAME_PLACEHOLDER,
    NAME_REQUIRED_MESSAGE,
    NEXT_BUTTON,
    PREV_BUTTON,
    QUESTION_COUNT_LABEL,
    QUIZ_LOAD_FAILED_MESSAGE,
    REFRESH_BUTTON,
    RESUBMIT_BUTTON,
    RESULT_SCORE_TEMPLATE,
    RESULT_TIME_TEMPLATE,
    RETRY_BUTTON,
    START_BUTTON,
    SUBMIT_FAILED_TEMPLATE,
    WINDOW_TITLE,
)
from quizrank.core.display_format import (
    choice_roles,
    feedback_message,
    format_clock,
    format_total_time,
    leaderboard_rows,
)
from quizrank.core.markdown_renderer import renderer
from quizrank.core.models import LeaderboardEntry
from quizrank.core.services.quiz_session import (
    AdvanceResult,
    IncompleteSessionError,
    QuizSession,
    SessionState,
)
from quizrank.styling.styles import Styles

logger = logging.getLogger(__name__)


class PlayerPage(Enum):
    INTRO = auto()
    QUIZ = auto()
    RESULT = auto()


class PlayerWindow(QMainWindow):
    """Presents a ``QuizSession`` and forwards player input to it."""

    def __init__(self, client: QuizApiClient, session: QuizSession | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.client = client
        self.session = session or QuizSession()
        self._choice_buttons: list[QPushButton] = []

        self._build_ui()
        self._configure_timer()
        self.setStyleSheet(Styles.get_main_window_style())
        self._show_page(PlayerPage.INTRO)
        self._refresh_leaderboard()

    # --- Layout ---

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self.page_stack = QStackedWidget(self)
        self.page_stack.addWidget(self._build_intro_page())
        self.page_stack.addWidget(self._build_quiz_page())
        self.page_stack.addWidget(self._build_result_page())
        root_layout.addWidget(self.page_stack, stretch=2)

        heading_row = QHBoxLayout()
        heading = QLabel(LEADERBOARD_HEADING, self)
        heading.setStyleSheet(Styles.get_large_label_style())
        heading_row.addWidget(heading)
        heading_row.addStretch()
        self.refresh_button = QPushButton(REFRESH_BUTTON, self)
        self.refresh_button.clicked.connect(self._refresh_leaderboard)
        heading_row.addWidget(self.refresh_button)
        root_layout.addLayout(heading_row)

        self.leaderboard_table = QTableWidget(0, len(LEADERBOARD_COLUMNS), self)
        self.leaderboard_table.setHorizontalHeaderLabels(list(LEADERBOARD_COLUMNS))
        self.leaderboard_table.verticalHeader().setVisible(False)
        self.leaderboard_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.leaderboard_table.setEditTriggers(QTableWidget.NoEditTriggers)
        root_layout.addWidget(self.leaderboard_table, stretch=1)

        self.leaderboard_status = QLabel("", self)
        root_layout.addWidget(self.leaderboard_status)

    def _build_intro_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        heading = QLabel(INTRO_HEADING, page)
        heading.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(heading)

        self.name_input = QLineEdit(page)
        self.name_input.setPlaceholderText(NAME_PLACEHOLDER)
        self.name_input.returnPressed.connect(self._handle_start)
        layout.addWidget(self.name_input)

        count_row = QHBoxLayout()
        count_row.addWidget(QLabel(QUESTION_COUNT_LABEL, page))
        self.count_input = QSpinBox(page)
        self.count_input.setRange(1, 100)
        self.count_input.setValue(DEFAULT_QUESTION_COUNT)
        count_row.addWidget(self.count_input)
        count_row.addStretch()
        layout.addLayout(count_row)

        self.start_button = QPushButton(START_BUTTON, page)
        self.start_button.clicked.connect(self._handle_start)
        layout.addWidget(self.start_button)

        self.intro_status = QLabel("", page)
        self.intro_status.setWordWrap(True)
        layout.addWidget(self.intro_status)
        layout.addStretch()
        return page

    def _build_quiz_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        status_row = QHBoxLayout()
        self.counter_label = QLabel("0 / 0", page)
        status_row.addWidget(self.counter_label)
        status_row.addStretch()
        self.timer_label = QLabel(format_clock(0), page)
        status_row.addWidget(self.timer_label)
        layout.addLayout(status_row)

        self.progress_bar = QProgressBar(page)
        self.progress_bar.setRange(0, 1000)
        self.progress_bar.setTextVisible(False)
        layout.addWidget(self.progress_bar)

        self.question_label = QLabel("", page)
        self.question_label.setTextFormat(Qt.RichText)
        self.question_label.setWordWrap(True)
        layout.addWidget(self.question_label)

        self.choices_layout = QVBoxLayout()
        layout.addLayout(self.choices_layout)

        self.feedback_label = QLabel("", page)
        self.feedback_label.setWordWrap(True)
        layout.addWidget(self.feedback_label)

        nav_row = QHBoxLayout()
        self.prev_button = QPushButton(PREV_BUTTON, page)
        self.prev_button.clicked.connect(self._handle_prev)
        nav_row.addWidget(self.prev_button)
        nav_row.addStretch()
        self.next_button = QPushButton(NEXT_BUTTON, page)
        self.next_button.clicked.connect(self._handle_next)
        nav_row.addWidget(self.next_button)
        layout.addLayout(nav_row)
        layout.addStretch()
        return page

    def _build_result_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        self.result_score_label = QLabel("", page)
        self.result_score_label.setStyleSheet(Styles.get_large_label_style())
        self.result_score_label.setWordWrap(True)
        layout.addWidget(self.result_score_label)

        self.result_time_label = QLabel("", page)
        layout.addWidget(self.result_time_label)

        button_row = QHBoxLayout()
        self.resubmit_button = QPushButton(RESUBMIT_BUTTON, page)
        self.resubmit_button.clicked.connect(self._submit)
        button_row.addWidget(self.resubmit_button)
        self.retry_button = QPushButton(RETRY_BUTTON, page)
        self.retry_button.clicked.connect(self._handle_retry)
        button_row.addWidget(self.retry_button)
        button_row.addStretch()
        layout.addLayout(button_row)
        layout.addStretch()
        return page

    def _configure_timer(self) -> None:
        self.clock_timer = QTimer(self)
        self.clock_timer.setInterval(TIMER_TICK_INTERVAL_MS)
        self.clock_timer.timeout.connect(self._render_timer)

    def _show_page(self, page: PlayerPage) -> None:
        index = {PlayerPage.INTRO: 0, PlayerPage.QUIZ: 1, PlayerPage.RESULT: 2}[page]
        self.page_stack.setCurrentIndex(index)

    # --- Event handlers ---

    def _handle_start(self) -> None:
        if not self.name_input.text().strip():
            self.intro_status.setText(NAME_REQUIRED_MESSAGE)
            self.name_input.setFocus()
            return

        count = self.count_input.value()
        try:
            questions = self.client.fetch_quiz(limit=count)
        except ApiError as exc:
            logger.warning("Could not load quiz: %s", exc.message)
            self.intro_status.setText(QUIZ_LOAD_FAILED_MESSAGE)
            return

        self.intro_status.setText("")
        self.session.start(questions, count)
        self._begin_attempt()

    def _handle_choice(self, choice_index: int) -> None:
        try:
            self.session.select_choice(self.session.current_index, choice_index)
        except ValueError as exc:
            logger.warning("Ignored choice: %s", exc)
            return
        self._render_question()

    def _handle_next(self) -> None:
        result = self.session.advance()
        if result is AdvanceResult.DISABLED:
            return
        if result is AdvanceResult.FINISHED:
            self.clock_timer.stop()
            self._render_timer()
            self._submit()
            return
        self._render_question()

    def _handle_prev(self) -> None:
        if self.session.retreat():
            self._render_question()

    def _handle_retry(self) -> None:
        self.session.reset()
        self._begin_attempt()

    def _begin_attempt(self) -> None:
        self._show_page(PlayerPage.QUIZ)
        self._render_question()
        self._render_timer()
        self.clock_timer.start()

    def _submit(self) -> None:
        try:
            submission = self.session.build_submission(self.name_input.text())
        except IncompleteSessionError as exc:
            self._render_result_message(str(exc))
            return

        self.resubmit_button.setEnabled(False)
        try:
            result = self.client.submit(submission)
        except ApiError as exc:
            self.session.mark_submission_failed(exc.message)
            self._render_result_message(SUBMIT_FAILED_TEMPLATE.format(message=exc.message))
            return

        self.session.mark_submitted()
        self.result_score_label.setText(RESULT_SCORE_TEMPLATE.format(score=result.score, total=result.total))
        self.result_time_label.setText(
            RESULT_TIME_TEMPLATE.format(time=format_total_time(submission.total_time))
        )
        self.resubmit_button.setVisible(False)
        self._show_page(PlayerPage.RESULT)
        self._render_leaderboard(result.leaderboard)

    def _refresh_leaderboard(self) -> None:
        try:
            entries = self.client.fetch_leaderboard()
        except ApiError as exc:
            self.leaderboard_status.setText(exc.message)
            return
        self._render_leaderboard(entries)

    # --- Rendering ---

    def _render_question(self) -> None:
        question = self.session.current_question
        if question is None:
            return
        position = self.session.current_index

        self.question_label.setText(renderer.render_fragment(question.text))
        progress = self.session.progress()
        self.counter_label.setText(progress.counter)
        self.progress_bar.setValue(int(progress.fraction * 1000))

        selected = self.session.answer_at(position)
        feedback = self.session.feedback_for(position)
        self._rebuild_choice_buttons(len(question.choices))
        for index, (button, role) in enumerate(
            zip(self._choice_buttons, choice_roles(question, selected, feedback))
        ):
            button.setText(question.choices[index])
            button.setStyleSheet(Styles.get_choice_style(role))

        self.feedback_label.setText(feedback_message(question, feedback))
        if feedback is not None:
            self.feedback_label.setStyleSheet(Styles.get_feedback_style(feedback.is_correct))

        self.prev_button.setEnabled(self.session.can_retreat)
        self.next_button.setEnabled(self.session.can_advance)
        self.next_button.setText(FINISH_BUTTON if self.session.is_last_question else NEXT_BUTTON)

    def _rebuild_choice_buttons(self, count: int) -> None:
        if len(self._choice_buttons) == count:
            return
        for button in self._choice_buttons:
            self.choices_layout.removeWidget(button)
            button.deleteLater()
        self._choice_buttons = []
        for index in range(count):
            button = QPushButton("", self)
            button.clicked.connect(lambda _checked=False, i=index: self._handle_choice(i))
            self.choices_layout.addWidget(button)
            self._choice_buttons.append(button)

    def _render_timer(self) -> None:
        self.timer_label.setText(format_clock(self.session.elapsed_time()))

    def _render_result_message(self, message: str) -> None:
        self.result_score_label.setText(message)
        self.result_time_label.setText("")
        pending = self.session.state is SessionState.PENDING
        self.resubmit_button.setVisible(pending)
        self.resubmit_button.setEnabled(pending)
        self._show_page(PlayerPage.RESULT)

    def _render_leaderboard(self, entries: list[LeaderboardEntry]) -> None:
        self.leaderboard_status.setText("" if entries else LEADERBOARD_EMPTY)
        rows = leaderboard_rows(entries)
        self.leaderboard_table.setRowCount(len(rows))
        for row_index, row in enumerate(rows):
            for column, value in enumerate(row):
                item = QTableWidgetItem(value)
                if column in (0, 2, 3):
                    item.setTextAlignment(Qt.AlignCenter)
                self.leaderboard_table.setItem(row_index, column, item)

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        self.clock_timer.stop()
        self.client.close()
        super().closeEvent(event)
