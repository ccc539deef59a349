"""
CSV batch import of socks.

Checks run in order and stop at the first failure:
empty payload -> file extension -> header row -> every data row.
Rows are inserted as new records in one flush; nothing is merged with
existing stock and nothing is committed unless every row parses.
"""
import csv
import re
from io import StringIO
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.constants import (
    AMOUNT_CSV_HEADER_NAME,
    COLOR_CSV_HEADER_NAME,
    COTTON_PERCENTAGE_CSV_HEADER_NAME,
    CSV_FORMAT,
    CSV_HEADERS,
    HEADERS_AMOUNT,
    MAX_AMOUNT,
    MAX_COTTON_PERCENTAGE,
    MIN_COTTON_PERCENTAGE,
)
from core.exceptions import (
    DuplicateSockError,
    EmptyFileError,
    FileReadError,
    WrongFormatError,
    WrongHeadersError,
)
from core.logging import get_logger
from db.sock import Sock as SockModel
from schemas.socks import SockResponse, SocksList

logger = get_logger(__name__)

# optional sign then ASCII digits only; no spaces, underscores or decimals
INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


def check_format(filename: Optional[str]) -> bool:
    is_valid = bool(filename) and filename.lower().endswith(CSV_FORMAT)
    logger.debug("File format check result: {} for file: {}", is_valid, filename)
    return is_valid


def check_headers(headers: Optional[List[str]]) -> bool:
    names = [h.strip() for h in (headers or [])]
    is_valid = len(names) == HEADERS_AMOUNT and set(names) == CSV_HEADERS
    logger.debug("Headers check result: {} for headers: {}", is_valid, headers)
    return is_valid


def _as_int(value: Optional[str], column: str, line: int) -> int:
    text = (value or "").strip()
    if not INTEGER_PATTERN.fullmatch(text):
        raise FileReadError(f"Line {line}: {column} must be an integer, got {value!r}")
    return int(text)


def parse_record(row: dict, line: int) -> SockModel:
    """Build a Sock from one CSV row; ``line`` is the 1-based line number for messages."""
    logger.debug("Processing CSV record at line {}: {}", line, row)
    color = (row.get(COLOR_CSV_HEADER_NAME) or "").strip()
    if not color:
        raise FileReadError(f"Line {line}: {COLOR_CSV_HEADER_NAME} is required")

    cotton_percentage = _as_int(row.get(COTTON_PERCENTAGE_CSV_HEADER_NAME), COTTON_PERCENTAGE_CSV_HEADER_NAME, line)
    if not MIN_COTTON_PERCENTAGE <= cotton_percentage <= MAX_COTTON_PERCENTAGE:
        raise FileReadError(
            f"Line {line}: {COTTON_PERCENTAGE_CSV_HEADER_NAME} must be between "
            f"{MIN_COTTON_PERCENTAGE} and {MAX_COTTON_PERCENTAGE}, got {cotton_percentage}"
        )

    amount = _as_int(row.get(AMOUNT_CSV_HEADER_NAME), AMOUNT_CSV_HEADER_NAME, line)
    if amount < 0:
        raise FileReadError(f"Line {line}: {AMOUNT_CSV_HEADER_NAME} cannot be negative, got {amount}")
    if amount > MAX_AMOUNT:
        raise FileReadError(f"Line {line}: {AMOUNT_CSV_HEADER_NAME} cannot exceed {MAX_AMOUNT}, got {amount}")

    return SockModel(color=color, cotton_percentage=cotton_percentage, amount=amount)


def read_socks(content: bytes) -> List[SockModel]:
    """Validate the header row and parse every data row of ``content``."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileReadError(f"Error while reading file: {e.reason}") from e

    try:
        reader = csv.DictReader(StringIO(text))
        headers = reader.fieldnames
        if not check_headers(headers):
            logger.warning("File has wrong headers: {}", headers)
            raise WrongHeadersError(f"File has wrong headers: {headers}")
        # rows are keyed by the bare header names
        reader.fieldnames = [h.strip() for h in headers]

        socks = []
        for row in reader:
            if None in row:
                raise FileReadError(f"Line {reader.line_num}: too many values")
            socks.append(parse_record(row, reader.line_num))
        return socks
    except csv.Error as e:
        raise FileReadError(f"Error while reading file: {e}") from e


async def process_socks_batch(db: AsyncSession, filename: Optional[str], content: bytes) -> SocksList:
    """Import every row of an uploaded CSV file as a new sock record."""
    logger.info("Processing socks batch from file: {}", filename)

    if not content:
        logger.warning("File is empty: {}", filename)
        raise EmptyFileError("File is empty")
    if not check_format(filename):
        logger.warning("File has wrong format: {}", filename)
        raise WrongFormatError(f"Wrong file format, expected {CSV_FORMAT}")

    socks = read_socks(content)

    db.add_all(socks)
    try:
        await db.flush()
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Batch {} clashes with existing socks", filename)
        raise DuplicateSockError(
            "File contains socks whose color and cotton percentage already exist"
        )

    logger.info("Successfully processed and saved {} socks from file: {}", len(socks), filename)
    return SocksList(sock_list=[SockResponse(**s.to_schema) for s in socks])
