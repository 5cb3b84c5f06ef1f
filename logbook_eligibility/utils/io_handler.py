"""Input/Output handling utilities.

This module handles file I/O operations including:
- Reading extraction payloads and student records from JSON
- Writing scan and eligibility results to JSON
- Writing validated rows to CSV
"""

import csv
import json
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def to_jsonable(obj: Any) -> Any:
    """Convert models, dates and enums into JSON-compatible values."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode='json')
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return obj


class IOHandler:
    """
    Handles all file I/O operations for the scanner and engine.
    """

    def __init__(self):
        """Initialize IO handler."""
        self.logger = logging.getLogger(self.__class__.__name__)

    def read_json(self, file_path: Path) -> Any:
        """
        Read a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If JSON is invalid
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self.logger.info(f"Loaded JSON from {file_path}")
            return data
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {file_path}: {e}")

    def write_json(self, data: Any, output_path: Path, indent: int = 2):
        """
        Write models or plain data to a JSON file.

        Args:
            data: Model, list of models, or JSON-compatible data
            output_path: Output file path
            indent: JSON indentation (default: 2)
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(to_jsonable(data), f, ensure_ascii=False, indent=indent)

        self.logger.info(f"Wrote results to {output_path}")

    def write_csv(
        self,
        data: Sequence[Dict[str, Any]],
        output_path: Path,
        fieldnames: Optional[List[str]] = None
    ):
        """
        Write flat records to a CSV file.

        Args:
            data: List of dictionaries to write
            output_path: Output file path
            fieldnames: List of field names (if None, inferred from first record)
        """
        if not data:
            self.logger.warning("No data to write to CSV")
            return

        output_path.parent.mkdir(parents=True, exist_ok=True)

        if fieldnames is None:
            fieldnames = list(data[0].keys())

        def convert_value(val):
            if val is None:
                return ''
            if isinstance(val, (list, dict)):
                return json.dumps(to_jsonable(val), ensure_ascii=False)
            return str(to_jsonable(val))

        with open(output_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction='ignore')
            writer.writeheader()
            for record in data:
                writer.writerow({k: convert_value(v) for k, v in record.items()})

        self.logger.info(f"Wrote {len(data)} records to {output_path}")

    def expand_inputs(self, specs: Sequence[str]) -> List[Path]:
        """
        Resolve file arguments, expanding glob patterns.

        Raises:
            FileNotFoundError: If a non-glob argument is not a file
        """
        paths: List[Path] = []
        for spec in specs:
            path = Path(spec)
            if path.is_file():
                paths.append(path)
            elif '*' in spec:
                paths.extend(sorted(path.parent.glob(path.name)))
            else:
                raise FileNotFoundError(f"Invalid input: {spec}")
        return paths
