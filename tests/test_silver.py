import re

from tracerpipe.silver import request

SILVER_TABLES = [
    "silver_process_list",
    "silver_open_files",
    "silver_network_packet",
    "silver_network_interface",
    "silver_network_ethernet",
    "silver_network_dns",
    "silver_network_ip",
    "silver_network_transport",
    "silver_network_arp",
]


def test_request_targets_every_silver_table_in_order():
    targets = re.findall(r"INSERT OR IGNORE INTO (\w+) BY NAME", request())
    assert targets == SILVER_TABLES


def test_request_only_inserts_with_ignore():
    sql = request()
    assert sql.count("INSERT") == len(SILVER_TABLES)
    assert sql.count("INSERT OR IGNORE INTO") == len(SILVER_TABLES)


def test_request_reads_from_bronze_only():
    sources = set(re.findall(r"(?:FROM|JOIN)\s+(\w+_\w+)", request()))
    assert sources
    assert all(name.startswith("bronze_") for name in sources)


def test_request_statements_are_terminated():
    statements = [part for part in request().split(");") if part.strip()]
    assert len(statements) == len(SILVER_TABLES)
    assert request().rstrip().endswith(");")


def test_open_files_regex_keeps_escapes():
    sql = request()
    assert r"REGEXP_MATCHES(ip_source_address, '[:\-]')" in sql
    assert r"'[\[\]]'" in sql