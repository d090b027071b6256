import pytest

from tracerpipe.bronze import create_insert_batch_request
from tracerpipe.records import OpenFile, Process


def _process(pid: int = 42, command: str = "sleep 10") -> Process:
    return Process(
        pid=pid,
        ppid=1,
        uid=501,
        lstart=1700000000,
        pcpu=1.5,
        pmem=0.25,
        status="S",
        command=command,
        created_at=1700000000123,
    )


def _open_file(pid: int = 42, name: str = "/tmp/data.log") -> OpenFile:
    return OpenFile(
        command="python",
        pid=pid,
        uid=501,
        fd="3r",
        type="REG",
        device="1,4",
        size=2048,
        node="12345",
        name=name,
        created_at=1700000000123,
    )


def test_process_header():
    assert Process.insert_header() == (
        "INSERT INTO bronze_process_list (pid, ppid, uid, lstart, pcpu, pmem, status, "
        "command, created_at, inserted_at, brz_ingestion_duration) VALUES "
    )


def test_open_file_header():
    assert OpenFile.insert_header() == (
        "INSERT INTO bronze_open_files (command, pid, uid, fd, type, device, size, node, "
        "name, created_at, inserted_at, brz_ingestion_duration) VALUES "
    )


def test_process_value():
    assert _process().to_insert_value() == (
        "(42, 1, 501, TO_TIMESTAMP(1700000000), 1.5, 0.25, 'S', 'sleep 10', "
        "EPOCH_MS(1700000000123)::TIMESTAMP, CURRENT_TIMESTAMP, "
        "AGE(EPOCH_MS(1700000000123)::TIMESTAMP))"
    )


def test_open_file_value_fields_in_order():
    value = _open_file().to_insert_value()
    assert value.startswith("('python', 42, 501, '3r', 'REG', '1,4', 2048, '12345', '/tmp/data.log', ")
    assert value.count("EPOCH_MS(1700000000123)") == 2


def test_process_command_quotes_are_replaced():
    value = _process(command="sh -c 'echo hi'").to_insert_value()
    assert "'sh -c \"echo hi\"'" in value


def test_open_file_quotes_are_replaced():
    value = _open_file(name="it's here").to_insert_value()
    assert "'it\"s here'" in value
    assert "it's" not in value


@pytest.mark.parametrize("record_factory, header_source", [(_process, Process), (_open_file, OpenFile)])
def test_batch_request_uses_header(record_factory, header_source):
    batch = [record_factory(pid=pid) for pid in (1, 2, 3)]
    request = create_insert_batch_request(batch)
    assert request.startswith(header_source.insert_header())
    assert request.endswith(";")
    for record in batch:
        assert record.to_insert_value() in request
    assert request.count("CURRENT_TIMESTAMP") == 3