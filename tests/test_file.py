from tracerpipe.file import (
    Host,
    Service,
    User,
    insert_host_request,
    insert_service_request,
    insert_user_request,
    request,
)

SERVICES = [Service("ssh", 22, "tcp"), Service("domain", 53, "udp")]
HOSTS = [Host("localhost", "127.0.0.1"), Host("broadcasthost", "255.255.255.255")]
USERS = [User("root", 0), User("nobody", 65534)]


def test_service_request_is_transaction():
    result = insert_service_request(SERVICES)
    assert result.startswith("BEGIN; TRUNCATE gold_file_service;")
    assert result.endswith("; COMMIT;")
    assert "INSERT INTO gold_file_service (name, port, protocol, inserted_at) VALUES" in result


def test_service_request_rows():
    result = insert_service_request(SERVICES)
    assert "('ssh', 22, 'tcp', CURRENT_TIMESTAMP),('domain', 53, 'udp', CURRENT_TIMESTAMP)" in result


def test_host_request_rows():
    result = insert_host_request(HOSTS)
    assert result.startswith("BEGIN; TRUNCATE gold_file_host;")
    assert "('localhost', '127.0.0.1', CURRENT_TIMESTAMP)" in result
    assert result.count("CURRENT_TIMESTAMP") == len(HOSTS)


def test_user_request_quotes_uid():
    result = insert_user_request(USERS)
    assert result.startswith("BEGIN; TRUNCATE gold_file_user;")
    assert "('nobody', '65534', CURRENT_TIMESTAMP)" in result
    assert result.endswith("; COMMIT;")


def test_request_joins_all_three():
    result = request(SERVICES, HOSTS, USERS)
    assert result == " ".join(
        [insert_service_request(SERVICES), insert_host_request(HOSTS), insert_user_request(USERS)]
    )
    assert result.count("BEGIN;") == 3
    assert result.count("COMMIT;") == 3


def test_request_accepts_generators():
    result = request((s for s in SERVICES), iter(HOSTS), tuple(USERS))
    assert result.count("CURRENT_TIMESTAMP") == len(SERVICES) + len(HOSTS) + len(USERS)