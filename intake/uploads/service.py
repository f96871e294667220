"""Upload processing service.

This module orchestrates the upload flow:
1. Parse the upload type from the file name
2. Fetch the reference set of known identifiers
3. Stream the CSV once, classifying and enriching every row
4. Write the accepted rows to the type's upload directory
5. Report accepted count and rejected rows
"""
import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import AbstractSet, BinaryIO, Mapping, Optional

from intake.auth.models import CallerIdentity
from intake.logging_config import get_logger
from intake.settings import Settings, get_settings

from . import storage
from .classifier import ColumnRef, RowClassifier, column_roles_from_settings
from .enricher import enrich, label_header
from .errors import MissingFile, NoAcceptableRows, UploadError
from .models import ClassifiedRow, PipelineBuffers, UploadReport, UploadType
from .reader import CsvRowStream
from .reference_gateway import ReferenceSetFetcher
from .writer import write_rows

logger = get_logger(name=__name__)

# Thread pool for the blocking CSV pass and file write
_pipeline_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="csv_pipeline")


def classify_stream(
    stream: BinaryIO,
    upload_type: Optional[UploadType],
    reference_set: AbstractSet[str],
    caller: CallerIdentity,
    roles: Mapping[UploadType, ColumnRef],
    encoding: str = "utf-8-sig",
) -> PipelineBuffers:
    """Single pass over the upload: every row ends up accepted or rejected."""
    buffers = PipelineBuffers()
    with CsvRowStream(stream, encoding=encoding) as rows:
        if not rows.columns:
            return buffers

        classifier = RowClassifier.for_header(upload_type, rows.columns, reference_set, roles)
        buffers.header = label_header(rows.columns)

        for row in rows:
            buffers.rows_read += 1
            outcome = classifier.classify(row)
            if outcome.accepted:
                buffers.accepted.append(enrich(row, caller))
            else:
                buffers.rejected.append(ClassifiedRow(row=row, outcome=outcome))

    logger.info(
        "Classified {} rows: {} accepted, {} rejected",
        buffers.rows_read, len(buffers.accepted), len(buffers.rejected),
    )
    return buffers


def build_report(
    file_name: str,
    upload_type: Optional[UploadType],
    buffers: PipelineBuffers,
    *,
    drop_first_rejected: bool = False,
    output_path=None,
) -> UploadReport:
    rejected_entries = [item.to_report_entry() for item in buffers.rejected]
    rejected = bool(rejected_entries)

    if rejected and drop_first_rejected:
        logger.warning(
            "Legacy report mode: omitting first rejected row (line {}) of {} from the report",
            buffers.rejected[0].row.line_number, file_name,
        )
        rejected_entries = rejected_entries[1:]

    return UploadReport(
        file_name=file_name,
        upload_type=upload_type,
        accepted_count=len(buffers.accepted),
        rejected=rejected,
        rejected_rows=rejected_entries,
        output_path=output_path,
    )


async def handle_upload(
    stream: Optional[BinaryIO],
    file_name: Optional[str],
    caller: CallerIdentity,
    *,
    fetcher: Optional[ReferenceSetFetcher] = None,
    settings: Optional[Settings] = None,
) -> UploadReport:
    """Process one uploaded CSV end to end.

    The upload type is only validated after the stream has been consumed:
    an upload with no accepted rows fails with ``NoAcceptableRows`` even
    when its type is invalid.

    Raises:
        UploadError: any pipeline failure, already logged.
    """
    if stream is None or not file_name:
        logger.warning("Upload request without a file")
        raise MissingFile("No file provided!")

    settings = settings or get_settings()
    fetcher = fetcher or ReferenceSetFetcher.from_settings(settings)
    upload_type = UploadType.from_file_name(file_name)
    loop = asyncio.get_event_loop()

    logger.info(
        "Processing upload {} (type={}) for provider {}",
        file_name, upload_type.value if upload_type else None, caller.provider_id,
    )

    try:
        reference_set = await fetcher.fetch_known_identifiers()

        buffers = await loop.run_in_executor(
            _pipeline_executor,
            contextvars.copy_context().run,
            partial(
                classify_stream,
                stream,
                upload_type,
                reference_set,
                caller,
                column_roles_from_settings(settings),
                settings.csv_encoding,
            ),
        )

        if not buffers.accepted:
            raise NoAcceptableRows(
                "All rows were rejected.",
                details={"rows_read": buffers.rows_read, "rejected": len(buffers.rejected)},
            )

        target_path = storage.get_target_path(upload_type, file_name, settings.uploads_root)
        await loop.run_in_executor(
            _pipeline_executor,
            contextvars.copy_context().run,
            write_rows,
            target_path,
            buffers.header,
            buffers.accepted,
        )
    except UploadError as exc:
        logger.error("Upload {} failed [{}]: {}", file_name, exc.code, exc.message)
        raise

    report = build_report(
        file_name,
        upload_type,
        buffers,
        drop_first_rejected=settings.drop_first_rejected_row,
        output_path=target_path,
    )
    logger.info(
        "Upload {} saved: {} accepted, {} rejected",
        file_name, report.accepted_count, len(buffers.rejected),
    )
    return report
