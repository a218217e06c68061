"""
Conversation export and fine-tuning question import.

Both are pure formatting/parsing: no store access and no remote calls.

Export columns:
    Conversation ID, Customer Email, Subject, Status, Started At,
    Last Message, Total Messages, Sentiment, Bot

Import files (.csv or .xlsx) need the columns question, expected_answer,
category and difficulty (header match is case-insensitive). Optional
columns: tags, bot_ids (comma-joined).
"""

import csv
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from emailbots.application.dto.fine_tuning import FineTuningQuestionCreate
from emailbots.config.settings import Config
from emailbots.domain.entities.bot import Bot
from emailbots.domain.entities.conversation import Conversation
from emailbots.domain.exceptions import DomainValidationError

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    "Conversation ID",
    "Customer Email",
    "Subject",
    "Status",
    "Started At",
    "Last Message",
    "Total Messages",
    "Sentiment",
    "Bot",
)
REQUIRED_IMPORT_COLUMNS = ("question", "expected_answer", "category", "difficulty")

_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversationExport:
    filename: str
    content: str
    row_count: int


def export_filename(bots: Iterable[Bot], bot_id: str = "all") -> str:
    if bot_id == "all":
        return "all-conversations.csv"
    bot = next((b for b in bots if b.id == bot_id), None)
    slug = _WHITESPACE_RE.sub("-", bot.name.strip().lower()) if bot else bot_id
    return f"{slug}-conversations.csv"


def export_conversations_csv(
    conversations: Iterable[Conversation], bots: Iterable[Bot], bot_id: str = "all"
) -> ConversationExport:
    bots = list(bots)
    names = {bot.id: bot.name for bot in bots}
    selected = [c for c in conversations if bot_id == "all" or c.bot_id == bot_id]

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for conv in selected:
        writer.writerow(
            [
                conv.id,
                conv.customer_email,
                conv.subject,
                conv.status.value,
                conv.started_at.isoformat(),
                conv.last_message_at.isoformat(),
                conv.total_messages,
                conv.sentiment.value,
                names.get(conv.bot_id, "Unknown Bot"),
            ]
        )

    return ConversationExport(
        filename=export_filename(bots, bot_id),
        content=buffer.getvalue(),
        row_count=len(selected),
    )


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


class ImportFormatError(DomainValidationError):
    """The uploaded file cannot be read as a question sheet."""

    code = "invalid_import"


@dataclass(frozen=True)
class QuestionImportRow:
    line: int  # 1-based data row, header excluded
    question: str
    expected_answer: str
    category: str
    difficulty: str
    tags: tuple[str, ...] = ()
    bot_ids: tuple[str, ...] = ()

    def to_create(self) -> FineTuningQuestionCreate:
        """Raises pydantic.ValidationError for a row that cannot be created."""
        return FineTuningQuestionCreate(
            question=self.question,
            expected_answer=self.expected_answer,
            category=self.category,
            difficulty=self.difficulty,
            tags=list(self.tags),
            bot_ids=list(self.bot_ids),
        )


def _split_joined(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    return tuple(part.strip() for part in str(value).split(",") if part.strip())


def _cell(value: object) -> str:
    return "" if value is None else str(value).strip()


def _normalize_rows(
    header: list[object], rows: Iterable[Iterable[object]]
) -> Iterator[QuestionImportRow]:
    columns = {_cell(name).lower(): idx for idx, name in enumerate(header) if _cell(name)}
    missing = [col for col in REQUIRED_IMPORT_COLUMNS if col not in columns]
    if missing:
        raise ImportFormatError(f"Missing required columns: {', '.join(missing)}")

    def get(values: list[object], column: str) -> object:
        idx = columns.get(column)
        return values[idx] if idx is not None and idx < len(values) else None

    line = 0
    for raw in rows:
        values = list(raw)
        if not any(_cell(v) for v in values):
            continue
        line += 1
        yield QuestionImportRow(
            line=line,
            question=_cell(get(values, "question")),
            expected_answer=_cell(get(values, "expected_answer")),
            category=_cell(get(values, "category")),
            difficulty=(_cell(get(values, "difficulty")) or "medium").lower(),
            tags=_split_joined(get(values, "tags")),
            bot_ids=_split_joined(get(values, "bot_ids")),
        )


def _read_csv(stream: IO[str]) -> list[QuestionImportRow]:
    reader = csv.reader(stream)
    header = next(reader, None)
    if header is None:
        raise ImportFormatError("No data found in the file")
    return list(_normalize_rows(header, reader))


def _read_xlsx(source: Union[str, Path, IO[bytes]]) -> list[QuestionImportRow]:
    try:
        wb = openpyxl.load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile) as e:
        raise ImportFormatError("Failed to read Excel file") from e
    try:
        rows = wb.worksheets[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            raise ImportFormatError("No data found in the file")
        return list(_normalize_rows(list(header), rows))
    finally:
        wb.close()


def _extension(filename: str) -> str:
    ext = Path(filename).suffix.lower().lstrip(".")
    if ext not in Config.IMPORT_ALLOWED_EXTENSIONS:
        raise ImportFormatError(
            f"Unsupported file type '.{ext}'. Allowed: "
            + ", ".join(f".{e}" for e in Config.IMPORT_ALLOWED_EXTENSIONS)
        )
    return ext


def parse_question_rows(path: Union[str, Path]) -> list[QuestionImportRow]:
    """Read a .csv or .xlsx question sheet from disk."""
    ext = _extension(str(path))
    if ext == "csv":
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            rows = _read_csv(f)
    else:
        rows = _read_xlsx(path)
    logger.info(f"[IMPORT] Parsed {len(rows)} question rows from {Path(path).name}")
    return rows


def parse_question_upload(data: bytes, filename: Optional[str]) -> list[QuestionImportRow]:
    """Same as parse_question_rows, for an in-memory upload."""
    ext = _extension(filename or "")
    if ext == "csv":
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ImportFormatError("CSV files must be UTF-8 encoded") from e
        rows = _read_csv(io.StringIO(text, newline=""))
    else:
        rows = _read_xlsx(io.BytesIO(data))
    logger.info(f"[IMPORT] Parsed {len(rows)} question rows from upload {filename}")
    return rows
