"""
JSON-lines snapshot codec for the employee store.

Every line is an independent envelope::

    {"Type": "Ant", "Data": {"Id": 1, "Name": "Anna", "HireDate": "...",
                             "LastReadTime": "...", "WorksNightShift": true}}

Lines that cannot be decoded are skipped on load; they never produce a
partially populated record.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models.employee import EMPLOYEE_TYPES, Employee, utcnow

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


class SnapshotEnvelope(BaseModel):
    """One snapshot line: a variant tag plus the variant's field object."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., alias="Type", description="Variant tag (Ant, Bee)")
    data: Dict[str, Any] = Field(..., alias="Data", description="Variant field object")


class SnapshotReadResult(BaseModel):
    """Outcome of reading a snapshot file."""

    path: str = Field(..., description="File that was read")
    found: bool = Field(..., description="False when the file did not exist")
    records: List[Any] = Field(default_factory=list, description="Decoded records in file order")
    skipped_lines: List[int] = Field(
        default_factory=list, description="1-based numbers of lines that were discarded"
    )


class SnapshotLoadResult(BaseModel):
    """Outcome of restoring a snapshot into a store."""

    path: str = Field(..., description="File that was read")
    found: bool = Field(..., description="False when the file did not exist")
    loaded: int = Field(default=0, description="Records inserted into the store")
    skipped: int = Field(default=0, description="Non-blank lines that were discarded")
    next_id: int = Field(..., description="Id counter after the load")


class SnapshotCodec:
    """Encodes employee records to JSON lines and decodes them back."""

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        """
        Initialize the codec.

        Args:
            clock: Source of the read timestamp given to decoded records
        """
        self.clock = clock

    def encode(self, employee: Employee) -> str:
        """
        Encode one record as a snapshot line (without the newline).

        Args:
            employee: Record to encode

        Returns:
            Compact JSON text
        """
        envelope = SnapshotEnvelope(
            type=employee.kind,
            data=employee.model_dump(mode="json", by_alias=True, exclude={"kind"}),
        )
        return envelope.model_dump_json(by_alias=True)

    def decode(self, line: str) -> Optional[Employee]:
        """
        Decode one snapshot line.

        Args:
            line: Text of a single line

        Returns:
            The record with ``last_read_time`` set to now, or None if the line
            is malformed, carries an unknown tag, lacks required fields, or has
            fields of the wrong JSON type
        """
        try:
            envelope = SnapshotEnvelope.model_validate_json(line)
        except ValidationError:
            return None

        model = EMPLOYEE_TYPES.get(envelope.type)
        if model is None or "Id" not in envelope.data:
            return None

        try:
            record = model.model_validate_json(json.dumps(envelope.data), strict=True)
        except ValidationError:
            return None

        if record.id <= 0:
            return None

        record.last_read_time = self.clock()
        return record

    def save(self, employees: Iterable[Employee], path: PathLike) -> int:
        """
        Write all records to ``path``, replacing any existing file.

        The file is written next to its destination and moved into place, so
        a failed write leaves the previous snapshot intact. I/O errors
        propagate to the caller.

        Args:
            employees: Records to write, in the order they should appear
            path: Destination file

        Returns:
            Number of records written
        """
        target = Path(path)
        tmp = target.with_name(target.name + ".tmp")

        count = 0
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                for employee in employees:
                    f.write(self.encode(employee))
                    f.write("\n")
                    count += 1
            tmp.replace(target)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

        logger.info("snapshot_saved", path=str(target), records=count)
        return count

    def load(self, path: PathLike) -> SnapshotReadResult:
        """
        Read every decodable record from ``path``.

        A missing file yields an empty result. Blank lines are ignored.

        Args:
            path: Snapshot file

        Returns:
            SnapshotReadResult with the decoded records and skipped line numbers
        """
        source = Path(path)
        if not source.exists():
            logger.info("snapshot_missing", path=str(source))
            return SnapshotReadResult(path=str(source), found=False)

        records: List[Employee] = []
        skipped: List[int] = []
        with open(source, "r", encoding="utf-8", errors="replace") as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                record = self.decode(line)
                if record is None:
                    skipped.append(line_number)
                    logger.debug("snapshot_line_skipped", path=str(source), line=line_number)
                    continue
                records.append(record)

        return SnapshotReadResult(
            path=str(source), found=True, records=records, skipped_lines=skipped
        )
