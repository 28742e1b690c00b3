"""
Record Source Service - Reads the support-issue CSV export into typed records
"""
import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional

import chardet

from app.models import IssueRecord

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_MAP = {
    'platform': 's_meta_other_platform',
    'version': 's_meta_application_version',
    'created_date': 'd_created_date',
    'title': 's_issue_title',
    'messages': 's_messages',
    'tags': 'a_tags',
    'os_version': 's_meta_other_os_version',
    'country': 's_meta_other_country_code',
}


class RecordSource:
    """
    Turns a delimited-text export into IssueRecords for one platform.
    Reading is line oriented: quoted fields may not span lines.
    """

    # A row may be short by up to this many trailing columns; shorter rows are dropped
    RAGGED_ROW_TOLERANCE = 5

    PROGRESS_EVERY = 1000

    def __init__(self, target_platform: str = 'ios', column_map: Optional[Dict[str, str]] = None):
        self.target_platform = target_platform
        self.column_map = dict(DEFAULT_COLUMN_MAP)
        if column_map:
            self.column_map.update(column_map)
        self.lines_read = 0
        self.rows_rejected = 0

    def detect_encoding(self, raw_data: bytes) -> str:
        """Detect encoding of a non UTF-8 export"""
        result = chardet.detect(raw_data[:10000])
        return result.get('encoding', 'utf-8') or 'utf-8'

    def decode(self, raw_data: bytes) -> str:
        try:
            return raw_data.decode('utf-8-sig')
        except UnicodeDecodeError:
            encoding = self.detect_encoding(raw_data)
            logger.warning(f"Input is not valid UTF-8, decoding as {encoding}")
            return raw_data.decode(encoding, errors='replace')

    def load(self, file_path) -> List[IssueRecord]:
        """Read and parse a CSV export. Raises FileNotFoundError if it is missing."""
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"CSV file not found: {path}")

        logger.info(f"Parsing CSV data from {path}")
        with open(path, 'rb') as f:
            raw_data = f.read()
        return self.parse_text(self.decode(raw_data))

    def parse_line(self, line: str) -> List[str]:
        """
        Split one CSV line into trimmed fields.
        Text after a closing quote is kept and an unclosed quote runs to the end of the line.
        Raises csv.Error only for a row the reader cannot split at all.
        """
        rows = list(csv.reader([line]))
        if not rows:
            return ['']
        return [value.strip() for value in rows[0]]

    def parse_text(self, text: str) -> List[IssueRecord]:
        """Parse the full export text, keeping only rows for the target platform"""
        self.lines_read = 0
        self.rows_rejected = 0

        lines = text.split('\n')
        if not lines or not lines[0].strip():
            logger.warning("CSV input has no header row")
            return []

        headers = self.parse_line(lines[0].rstrip('\r'))
        logger.info(f"Found {len(headers)} columns")
        min_fields = len(headers) - self.RAGGED_ROW_TOLERANCE

        records = []
        for i, line in enumerate(lines[1:], start=1):
            line = line.rstrip('\r')
            if not line.strip():
                continue
            self.lines_read += 1

            try:
                values = self.parse_line(line)
            except csv.Error as e:
                logger.debug(f"Skipping malformed line {i}: {e}")
                self.rows_rejected += 1
                continue

            if len(values) < min_fields:
                self.rows_rejected += 1
            else:
                row = {header: (values[index] if index < len(values) else '')
                       for index, header in enumerate(headers)}
                if row.get(self.column_map['platform'], '') == self.target_platform:
                    records.append(self.build_record(row))

            if i % self.PROGRESS_EVERY == 0:
                logger.debug(f"Processed {i} lines...")

        logger.info(f"Parsed {len(records)} {self.target_platform} issues from {self.lines_read} rows "
                    f"({self.rows_rejected} rejected)")
        return records

    def build_record(self, row: Dict[str, str]) -> IssueRecord:
        """Pick the semantic fields out of a header -> value row"""
        values = {name: row.get(column, '') for name, column in self.column_map.items()}
        return IssueRecord(raw=row, **values)
