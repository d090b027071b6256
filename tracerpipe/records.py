"""Process and open-file snapshots written to the bronze tables."""

from __future__ import annotations

from dataclasses import dataclass

_PROCESS_HEADER = (
    "INSERT INTO bronze_process_list (pid, ppid, uid, lstart, pcpu, pmem, status, "
    "command, created_at, inserted_at, brz_ingestion_duration) VALUES "
)

_OPEN_FILE_HEADER = (
    "INSERT INTO bronze_open_files (command, pid, uid, fd, type, device, size, node, "
    "name, created_at, inserted_at, brz_ingestion_duration) VALUES "
)


def _unquote(text: str) -> str:
    """Replace single quotes so the text can sit inside a SQL string literal."""
    return text.replace("'", '"')


@dataclass(frozen=True)
class Process:
    """One row of the process list.

    ``lstart`` is the start time in epoch seconds, ``created_at`` the
    snapshot time in epoch milliseconds.
    """

    pid: int
    ppid: int
    uid: int
    lstart: int
    pcpu: float
    pmem: float
    status: str
    command: str
    created_at: int

    @classmethod
    def insert_header(cls) -> str:
        """The INSERT prefix for the bronze process table."""
        return _PROCESS_HEADER

    def to_insert_value(self) -> str:
        """The value tuple of this process."""
        created = self.created_at
        return (
            f"({self.pid}, {self.ppid}, {self.uid}, TO_TIMESTAMP({self.lstart}), "
            f"{self.pcpu}, {self.pmem}, '{self.status}', '{_unquote(self.command)}', "
            f"EPOCH_MS({created})::TIMESTAMP, CURRENT_TIMESTAMP, "
            f"AGE(EPOCH_MS({created})::TIMESTAMP))"
        )


@dataclass(frozen=True)
class OpenFile:
    """One open file reported for a process; ``created_at`` is in epoch milliseconds."""

    command: str
    pid: int
    uid: int
    fd: str
    type: str
    device: str
    size: int
    node: str
    name: str
    created_at: int

    @classmethod
    def insert_header(cls) -> str:
        """The INSERT prefix for the bronze open-files table."""
        return _OPEN_FILE_HEADER

    def to_insert_value(self) -> str:
        """The value tuple of this open file."""
        created = self.created_at
        return (
            f"('{_unquote(self.command)}', {self.pid}, {self.uid}, '{self.fd}', "
            f"'{self.type}', '{self.device}', {self.size}, '{self.node}', "
            f"'{_unquote(self.name)}', EPOCH_MS({created})::TIMESTAMP, "
            f"CURRENT_TIMESTAMP, AGE(EPOCH_MS({created})::TIMESTAMP))"
        )