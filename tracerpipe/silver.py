"""SQL that refines bronze tables into silver tables."""

_INGESTION = (
    "CURRENT_TIMESTAMP AS inserted_at",
    "AGE(inserted_at) AS svr_ingestion_duration",
)

_PACKET_COLUMNS = (
    "packet.length AS packet_length",
    "packet.interface AS interface",
    "packet.created_at",
    "packet.brz_ingestion_duration",
    "CURRENT_TIMESTAMP AS inserted_at",
    "AGE(packet.inserted_at) AS svr_ingestion_duration",
)

_ENDPOINT = r"'^([a-zA-Z0-9\-\.\*\:\[\]]+):([a-zA-Z0-9\-\.\*\:\[\]]+)$'"
_BRACKETS = r"'[\[\]]'"

_LAYERS = (
    ("data_link", (("ethernet", "bronze_network_ethernet"),)),
    (
        "network",
        (
            ("ipv4", "bronze_network_ipv4"),
            ("ipv6", "bronze_network_ipv6"),
            ("arp", "bronze_network_arp"),
        ),
    ),
    (
        "transport",
        (
            ("tcp", "bronze_network_tcp"),
            ("udp", "bronze_network_udp"),
            ("icmp", "bronze_network_icmp"),
        ),
    ),
    (
        "application",
        (
            ("dns", "bronze_network_dns_header"),
            ("tls", "bronze_network_tls"),
            ("http", "bronze_network_http"),
        ),
    ),
)

_DNS_HEADER_FIELDS = (
    "packet_id",
    "id",
    "is_response",
    "opcode",
    "is_authoriative",
    "is_truncated",
    "is_recursion_desirable",
    "is_recursion_available",
    "zero_reserved",
    "is_answer_authenticated",
    "is_non_authenticated_data",
    "rcode",
    "query_count",
    "response_count",
    "authority_rr_count",
    "additional_rr_count",
)
_DNS_QUERY_FIELDS = ("qname", "qtype", "qclass")
_DNS_RESPONSE_FIELDS = ("origin", "name_tag", "rtype", "rclass", "ttl", "rdlength", "rdata")

_ARP_FIELDS = (
    "hardware_type",
    "protocol_type",
    "hw_addr_len",
    "proto_addr_len",
    "operation",
    "sender_hw_addr",
    "sender_proto_addr",
    "target_hw_addr",
    "target_proto_addr",
)


def _select(columns, source: str) -> str:
    return "SELECT\n    " + ",\n    ".join(columns) + f"\nFROM {source}"


def _statement(table: str, select: str) -> str:
    return f"\nINSERT OR IGNORE INTO {table} BY NAME\n(\n{select}\n);\n"


def _prefixed(alias: str, fields) -> list[str]:
    return [f"{alias}.{field}" for field in fields]


def _with_packet(table: str, alias: str, key: str) -> str:
    return f"{table} {alias} LEFT JOIN bronze_network_packet packet ON {alias}.{key} = packet._id"


def _subquery(*selects: str) -> str:
    return "(\n" + "\nUNION ALL\n".join(selects) + "\n)"


def _process_list() -> str:
    columns = [
        "_id", "pid", "ppid", "uid", "lstart", "pcpu", "pmem", "status",
        "command", "created_at", "brz_ingestion_duration",
        "AGE(created_at, lstart) AS duration",
        *_INGESTION,
    ]
    return _statement("silver_process_list", _select(columns, "bronze_process_list"))


def _open_files() -> str:
    extracts = [
        f"REGEXP_EXTRACT(SPLIT_PART(name, '->', {side}), {_ENDPOINT}, {group}) AS {prefix}_{field}"
        for side, prefix in ((1, "ip_source"), (2, "ip_destination"))
        for group, field in ((1, "address"), (2, "port"))
    ]
    inner = _select(["*", *extracts, *_INGESTION], "bronze_open_files")
    source_address = (
        r"CASE WHEN REGEXP_MATCHES(ip_source_address, '[:\-]') "
        f"THEN REGEXP_REPLACE(SPLIT_PART(ip_source_address, '.', 1), {_BRACKETS}, '', 'g') "
        "ELSE ip_source_address END AS ip_source_address"
    )
    columns = [
        "_id", "command", "pid", "uid", "fd", "type", "device", "size", "node",
        "name", "created_at", "brz_ingestion_duration",
        source_address,
        "ip_source_port",
        f"REGEXP_REPLACE(ip_destination_address, {_BRACKETS}, '', 'g') AS ip_destination_address",
        "ip_destination_port",
        "inserted_at",
        "svr_ingestion_duration",
    ]
    return _statement("silver_open_files", _select(columns, _subquery(inner)))


def _network_packet() -> str:
    cases = []
    joins = []
    for layer, protocols in _LAYERS:
        whens = " ".join(
            f"WHEN {alias}._id IS NOT NULL THEN '{alias}'" for alias, _ in protocols
        )
        cases.append(f"CASE {whens} ELSE NULL END AS {layer}")
        joins.extend(
            f"LEFT JOIN {table} {alias} ON packet._id = {alias}.packet_id"
            for alias, table in protocols
        )
    columns = [
        *_prefixed("packet", ("_id", "interface", "length", "created_at", "brz_ingestion_duration")),
        *cases,
        "CURRENT_TIMESTAMP AS inserted_at",
        "AGE(packet.inserted_at) AS svr_ingestion_duration",
    ]
    source = "bronze_network_packet packet\n" + "\n".join(joins)
    return _statement("silver_network_packet", _select(columns, source))


def _network_interface() -> str:
    columns = [
        "_id",
        "interface",
        "(address || netmask)::INET AS address",
        "broadcast_address::INET AS broadcast_address",
        "destination_address::INET AS destination_address",
        *_INGESTION,
    ]
    return _statement("silver_network_interface", _select(columns, "bronze_network_interface"))


def _network_ethernet() -> str:
    columns = [
        "ethernet.packet_id AS _id",
        *_prefixed("ethernet", ("source", "destination", "ether_type", "payload_length")),
        *_PACKET_COLUMNS,
    ]
    source = _with_packet("bronze_network_ethernet", "ethernet", "packet_id")
    return _statement("silver_network_ethernet", _select(columns, source))


def _readable(list_expr: str) -> str:
    """Turn a byte list into text, keeping name characters and dotting the rest."""
    return (
        f"ARRAY_TO_STRING(LIST_TRANSFORM({list_expr}, (c, i) -> CASE "
        "WHEN (c IN (45, 95, 32)) OR (c > 47 AND c < 58) OR (c > 64 AND c < 91) "
        "OR (c > 96 AND c < 123) THEN CHR(c) "
        "ELSE CASE WHEN i = 1 OR i = LENGTH(query.qname) THEN '' ELSE '.' END END), '')"
    )


def _network_dns() -> str:
    address = (
        "REPLACE(REPLACE(REPLACE(CAST(response.rdata AS TEXT), ', ', '.'), '[', ''), ']', '')"
    )
    response_parsed = (
        "CASE WHEN (response.rclass = 'IN') AND (response.rtype IN ('A', 'AAAA')) "
        f"THEN {address} ELSE {_readable('response.rdata')} END AS response_parsed"
    )
    columns = [
        "CONCAT_WS('-', CAST(header._id AS TEXT), CAST(query._id AS VARCHAR), "
        "CAST(response._id AS VARCHAR)) AS _id",
        *_prefixed("header", _DNS_HEADER_FIELDS),
        *_prefixed("query", _DNS_QUERY_FIELDS),
        *_prefixed("response", _DNS_RESPONSE_FIELDS),
        "packet.created_at",
        "packet.brz_ingestion_duration",
        f"{_readable('query.qname')} AS question_parsed",
        response_parsed,
        "CURRENT_TIMESTAMP AS inserted_at",
        "AGE(packet.inserted_at) AS svr_ingestion_duration",
    ]
    source = (
        "bronze_network_dns_header header\n"
        "LEFT JOIN bronze_network_dns_query query ON header.packet_id = query.packet_id\n"
        "LEFT JOIN bronze_network_dns_response response ON header.packet_id = response.packet_id\n"
        "LEFT JOIN bronze_network_packet packet ON header.packet_id = packet._id"
    )
    return _statement("silver_network_dns", _select(columns, source))


def _network_ip() -> str:
    ipv4 = _select(
        [
            "packet_id AS _id",
            "version",
            "total_length AS length",
            "ttl AS hop_limit",
            "next_level_protocol AS next_protocol",
            "source::INET AS source",
            "destination::INET AS destination",
        ],
        "bronze_network_ipv4",
    )
    ipv6 = _select(
        [
            "packet_id AS _id",
            "version",
            "payload_length AS length",
            "hop_limit",
            "next_header AS next_protocol",
            "source",
            "destination",
        ],
        "bronze_network_ipv6",
    )
    columns = [
        *_prefixed(
            "ip",
            ("_id", "version", "length", "hop_limit", "next_protocol", "source", "destination"),
        ),
        *_PACKET_COLUMNS,
    ]
    source = _with_packet(_subquery(ipv4, ipv6), "ip", "_id")
    return _statement("silver_network_ip", _select(columns, source))


def _network_transport() -> str:
    selects = [
        _select(
            ["packet_id AS _id", f"'{name}' AS protocol", "source", "destination"],
            f"bronze_network_{name.lower()}",
        )
        for name in ("TCP", "UDP")
    ]
    source = _with_packet(_subquery(*selects), "transport", "_id")
    return _statement(
        "silver_network_transport", _select(["transport.*", *_PACKET_COLUMNS], source)
    )


def _network_arp() -> str:
    columns = ["arp.packet_id AS _id", *_prefixed("arp", _ARP_FIELDS), *_PACKET_COLUMNS]
    source = _with_packet("bronze_network_arp", "arp", "packet_id")
    return _statement("silver_network_arp", _select(columns, source))


_BUILDERS = (
    _process_list,
    _open_files,
    _network_packet,
    _network_interface,
    _network_ethernet,
    _network_dns,
    _network_ip,
    _network_transport,
    _network_arp,
)


def request() -> str:
    """Return the batch of statements that fills every silver table."""
    return " ".join(build() for build in _BUILDERS)