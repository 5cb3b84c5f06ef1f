"""Logbook page scanning pipeline.

This module orchestrates the scan of a photographed logbook page:
1. Image preparation
2. Vision extraction (one external call per page)
3. Row validation
4. Page aggregation

Extraction failures are terminal for the page and propagate to the caller;
row-level problems are recorded on the result instead.
"""

import logging
from datetime import date
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple, Union

from .aggregation.cumulative import calculate_cumulative_totals
from .aggregation.page import PageAggregator
from .config import Config
from .exceptions import ExtractionError
from .extraction.client import ImageInput, VisionClient, encode_image
from .extraction.payload import parse_extraction_payload
from .models.schema import (
    CumulativeTotals,
    ExtractionPayload,
    PageScanResult,
    ValidationRules,
)
from .validation.validator import RowValidator


class ScanProgress(NamedTuple):
    """A named pipeline stage reported to the progress callback."""

    stage: str
    message: str


class LogbookScanner:
    """
    Main logbook scanning pipeline coordinator.

    Stages are reported as "preparing", "extracting", "validating" and
    "complete".
    """

    def __init__(
        self,
        client: Optional[VisionClient] = None,
        rules: Optional[ValidationRules] = None,
        on_progress: Optional[Callable[[ScanProgress], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        """
        Initialize the scanner with all components.

        Args:
            client: Vision client (created from the environment on first scan if None)
            rules: Row validation rules (default: Config.validation_rules())
            on_progress: Called with each ScanProgress
            on_error: Called once with a page's terminal error before it is raised
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.client = client
        self.rules = rules or Config.validation_rules()
        self.validator = RowValidator(self.rules)
        self.aggregator = PageAggregator(self.rules)
        self.on_progress = on_progress or (lambda progress: None)
        self.on_error = on_error or (lambda error: self.logger.error(f"Scan failed: {error}"))

    def _report(self, stage: str, message: str):
        self.logger.debug(f"[{stage}] {message}")
        self.on_progress(ScanProgress(stage, message))

    def scan_page(self, image: ImageInput, today: Optional[date] = None) -> PageScanResult:
        """
        Scan one logbook page image.

        Args:
            image: Raw bytes, file path, base64 string or data: URL
            today: Reference date for future-date checks (default: today)

        Returns:
            PageScanResult for the page

        Raises:
            ExtractionError: If the image cannot be read, the extraction call
                fails, or its response cannot be parsed
        """
        try:
            self._report('preparing', 'Preparing image...')
            try:
                image_data, media_type = encode_image(image)
            except OSError as e:
                raise ExtractionError(f"Could not read image: {e}", original_error=e)

            self._report('extracting', 'Extracting entries...')
            if self.client is None:
                self.client = VisionClient()
            response_text = self.client.extract_page(image_data, media_type)
            payload = parse_extraction_payload(response_text)

            result = self._validate_payload(payload, today)

            self._report('complete', 'Scan complete!')
            return result

        except ExtractionError as e:
            self.on_error(e)
            raise

    def process_payload(
        self,
        payload: Union[ExtractionPayload, dict],
        today: Optional[date] = None,
    ) -> PageScanResult:
        """
        Validate and aggregate an already extracted page payload.

        Args:
            payload: ExtractionPayload, or its JSON-shaped dict
            today: Reference date for future-date checks (default: today)
        """
        if not isinstance(payload, ExtractionPayload):
            payload = ExtractionPayload.model_validate(payload)
        result = self._validate_payload(payload, today)
        self._report('complete', 'Validation complete!')
        return result

    def _validate_payload(self, payload: ExtractionPayload, today: Optional[date]) -> PageScanResult:
        self._report('validating', 'Validating entries...')
        rows = self.validator.validate_rows(payload.entries, today)
        return self.aggregator.aggregate(
            page_type=payload.page_type,
            rows=rows,
            page_number=payload.page_number,
            declared_subtotal=payload.subtotal,
            page_notes=payload.page_notes,
        )

    def scan_pages(
        self,
        images: Iterable[ImageInput],
        today: Optional[date] = None,
    ) -> Tuple[List[PageScanResult], CumulativeTotals]:
        """
        Scan several pages in order and total them.

        A terminal failure on any page propagates immediately.
        """
        results = [self.scan_page(image, today) for image in images]
        self.logger.info(f"Scanned {len(results)} page(s)")
        return results, calculate_cumulative_totals(results)
