"""Audit sinks — append-only хранилища audit records.

- InMemoryAuditSink: список в памяти
- JsonlAuditSink: JSON Lines файл, одна запись на строку, fsync после append

Sink принимает записи строго по возрастанию seq. Ошибка append пробрасывается
вызывающему; LedgerEngine в этом случае не применяет новое состояние.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Protocol, Tuple, Union

from src.core.contracts import AuditRecordValidator
from src.core.domain.audit import AuditRecordBase, parse_record, record_to_dict
from src.core.errors import ReplayError

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    """Append-only sink с полным порядком записей."""

    def append(self, record: AuditRecordBase) -> None: ...

    def records(self) -> Tuple[AuditRecordBase, ...]: ...

    def __len__(self) -> int: ...


def _check_next_seq(record: AuditRecordBase, expected: int) -> None:
    if record.seq != expected:
        raise ReplayError(
            f"sink expects seq={expected}, got seq={record.seq}", seq=record.seq
        )


class InMemoryAuditSink:
    """Sink в памяти процесса."""

    def __init__(self):
        self._records: List[AuditRecordBase] = []

    def append(self, record: AuditRecordBase) -> None:
        _check_next_seq(record, len(self._records))
        self._records.append(record)

    def records(self) -> Tuple[AuditRecordBase, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)


class JsonlAuditSink:
    """Durable sink в JSON Lines файле.

    Каждая запись проверяется контрактом audit_record перед записью на диск.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._validator = AuditRecordValidator()
        self._count = len(self._read_all()) if self._path.exists() else 0
        logger.debug(f"JSONL sink opened: {self._path} ({self._count} records)")

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: AuditRecordBase) -> None:
        _check_next_seq(record, self._count)
        data = record_to_dict(record)
        self._validator.validate(data)
        line = json.dumps(data, sort_keys=True, ensure_ascii=False)
        with open(self._path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        self._count += 1

    def records(self) -> Tuple[AuditRecordBase, ...]:
        if not self._path.exists():
            return ()
        return tuple(self._read_all())

    def __len__(self) -> int:
        return self._count

    def _read_all(self) -> List[AuditRecordBase]:
        result: List[AuditRecordBase] = []
        with open(self._path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    result.append(parse_record(json.loads(line)))
        return result
