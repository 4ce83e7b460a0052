"""
Keyword list loading and saving.

User keywords can come from:
- CSV files
- Excel workbooks (.xlsx, .xls)
- Plain text files, one keyword per line
- A comma-separated string typed on the command line or in a form

Keyword research results are written to CSV and can be read back to be
stored with a saved article.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd

from .errors import ValidationError
from .models import KEYWORD_TYPES, SEARCH_INTENTS, KeywordSuggestion

logger = logging.getLogger(__name__)


class KeywordLoadError(ValidationError):
    """Raised when a keyword file cannot be read or has the wrong layout."""
    pass


# Header names accepted for the keyword column, compared after normalization
KEYWORD_COLUMN_VARIANTS = ["keyword", "keywords", "term", "terms", "query", "queries", "phrase"]

RESEARCH_COLUMNS = ["keyword", "type", "intent", "relevance"]

PathLike = Union[str, Path]


def _column_key(name) -> str:
    return "_".join(str(name).strip().lower().replace("-", " ").split())


def _find_column(df: pd.DataFrame, variants: Sequence[str]) -> Optional[str]:
    """Return the first DataFrame column whose normalized header is in variants."""
    by_key = {_column_key(col): col for col in df.columns}
    return next((by_key[_column_key(v)] for v in variants if _column_key(v) in by_key), None)


def _existing_file(file_path: PathLike) -> Path:
    path = Path(file_path)
    if not path.is_file():
        raise KeywordLoadError(f"File not found: {file_path}")
    return path


def _read_csv(path: Path) -> pd.DataFrame:
    # Spreadsheet exports are often latin-1 rather than utf-8
    for encoding in ("utf-8", "latin-1"):
        try:
            return pd.read_csv(path, encoding=encoding)
        except UnicodeDecodeError:
            continue
        except Exception as e:
            raise KeywordLoadError(f"Failed to read CSV file: {e}") from e
    raise KeywordLoadError(f"Failed to read CSV file: unsupported encoding in {path.name}")


def parse_keyword_list(text: Optional[str]) -> list[str]:
    """
    Split a comma-separated keyword string.

    Entries are trimmed; blanks and case-insensitive duplicates are dropped.

    Args:
        text: String like "solar panels, battery storage".

    Returns:
        Keywords in input order.
    """
    if not text:
        return []
    return deduplicate_keywords(text.split(","))


def deduplicate_keywords(keywords: Sequence[str]) -> list[str]:
    """Trim keywords, dropping blanks and case-insensitive repeats (first one wins)."""
    unique: dict[str, str] = {}
    for raw in keywords:
        cleaned = str(raw).strip()
        if cleaned:
            unique.setdefault(cleaned.lower(), cleaned)
    return list(unique.values())


def _keywords_from_dataframe(df: pd.DataFrame) -> list[str]:
    if df.empty:
        raise KeywordLoadError("Keyword file is empty")

    column = _find_column(df, KEYWORD_COLUMN_VARIANTS)
    if column is None:
        raise KeywordLoadError(
            f"No keyword column found. Expected one of: {', '.join(KEYWORD_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(c) for c in df.columns)}"
        )

    return deduplicate_keywords([str(v) for v in df[column].dropna()])


def load_keywords_from_csv(file_path: PathLike) -> list[str]:
    """Load keywords from the keyword column of a CSV file."""
    return _keywords_from_dataframe(_read_csv(_existing_file(file_path)))


def load_keywords_from_excel(file_path: PathLike, sheet_name: Optional[str] = None) -> list[str]:
    """
    Load keywords from the keyword column of an Excel workbook.

    Args:
        file_path: Workbook path.
        sheet_name: Sheet to read; the first sheet when omitted.
    """
    path = _existing_file(file_path)
    try:
        df = pd.read_excel(path, sheet_name=sheet_name or 0)
    except Exception as e:
        raise KeywordLoadError(f"Failed to read Excel file: {e}") from e
    return _keywords_from_dataframe(df)


def load_keywords_from_text(file_path: PathLike) -> list[str]:
    """Load keywords from a text file, one per line."""
    path = _existing_file(file_path)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise KeywordLoadError(f"Failed to read text file: {e}") from e
    return deduplicate_keywords(lines)


_LOADERS = {
    ".csv": load_keywords_from_csv,
    ".txt": load_keywords_from_text,
}


def load_keywords(file_path: PathLike, sheet_name: Optional[str] = None) -> list[str]:
    """
    Load user keywords from a CSV, Excel or text file.

    The loader is picked from the file extension.

    Args:
        file_path: Keyword file.
        sheet_name: Sheet to read for Excel workbooks.

    Returns:
        Deduplicated keywords in file order.

    Raises:
        KeywordLoadError: For a missing, unreadable or unsupported file.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in (".xlsx", ".xls"):
        keywords = load_keywords_from_excel(path, sheet_name)
    elif suffix in _LOADERS:
        keywords = _LOADERS[suffix](path)
    else:
        raise KeywordLoadError(
            f"Unsupported file format: {suffix or '(none)'}. Supported formats: .csv, .xlsx, .xls, .txt"
        )

    logger.info(f"Loaded {len(keywords)} keyword(s) from {path.name}")
    return keywords


def save_keyword_research(suggestions: Sequence[KeywordSuggestion], file_path: PathLike) -> Path:
    """
    Write keyword research results to CSV.

    Columns are keyword, type, intent and relevance. Parent directories
    are created as needed.

    Returns:
        Path to the written file.
    """
    path = Path(file_path)
    df = pd.DataFrame([s.to_dict() for s in suggestions], columns=RESEARCH_COLUMNS)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False, encoding="utf-8")
    except OSError as e:
        raise KeywordLoadError(f"Failed to write CSV file: {e}") from e
    logger.info(f"Saved {len(suggestions)} keyword suggestion(s) to {path}")
    return path


def _suggestion_from_row(keyword, kw_type, intent, relevance) -> Optional[KeywordSuggestion]:
    if pd.isna(keyword) or not str(keyword).strip():
        return None
    kw_type, intent = str(kw_type).strip(), str(intent).strip()
    if kw_type not in KEYWORD_TYPES or intent not in SEARCH_INTENTS:
        return None
    try:
        score = int(float(relevance))
    except (ValueError, TypeError):
        return None
    if not 1 <= score <= 100:
        return None
    return KeywordSuggestion(str(keyword).strip(), kw_type, intent, score)


def load_keyword_research(file_path: PathLike) -> list[KeywordSuggestion]:
    """
    Read keyword research results written by save_keyword_research.

    Rows with a blank keyword, an unknown type or intent, or a relevance
    outside 1-100 are skipped.

    Raises:
        KeywordLoadError: If the file is missing or lacks the research columns.
    """
    df = _read_csv(_existing_file(file_path))

    columns = [_find_column(df, [name]) for name in RESEARCH_COLUMNS]
    missing = [name for name, col in zip(RESEARCH_COLUMNS, columns) if col is None]
    if missing:
        raise KeywordLoadError(f"Research file is missing columns: {', '.join(missing)}")

    rows = zip(*(df[col] for col in columns))
    suggestions = [s for s in (_suggestion_from_row(*row) for row in rows) if s is not None]

    skipped = len(df) - len(suggestions)
    if skipped:
        logger.warning(f"Skipped {skipped} invalid row(s) in {Path(file_path).name}")
    return suggestions
