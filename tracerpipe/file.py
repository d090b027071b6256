"""SQL that reloads service, host and user lookup tables."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    """A named network service and its port."""

    name: str
    port: int
    protocol: str


@dataclass(frozen=True)
class Host:
    """A host name and the address it resolves to."""

    name: str
    address: str


@dataclass(frozen=True)
class User:
    """A user name and its uid."""

    name: str
    uid: int


def _reload(table: str, columns: str, values: Iterable[str]) -> str:
    header = f"BEGIN; TRUNCATE {table};\n    INSERT INTO {table} ({columns}) VALUES "
    return f"{header} {','.join(values)}; COMMIT;"


def insert_service_request(services: Iterable[Service]) -> str:
    """Replace the content of ``gold_file_service`` with ``services``."""
    return _reload(
        "gold_file_service",
        "name, port, protocol, inserted_at",
        (
            f"('{service.name}', {service.port}, '{service.protocol}', CURRENT_TIMESTAMP)"
            for service in services
        ),
    )


def insert_host_request(hosts: Iterable[Host]) -> str:
    """Replace the content of ``gold_file_host`` with ``hosts``."""
    return _reload(
        "gold_file_host",
        "name, address, inserted_at",
        (f"('{host.name}', '{host.address}', CURRENT_TIMESTAMP)" for host in hosts),
    )


def insert_user_request(users: Iterable[User]) -> str:
    """Replace the content of ``gold_file_user`` with ``users``."""
    return _reload(
        "gold_file_user",
        "name, uid, inserted_at",
        (f"('{user.name}', '{user.uid}', CURRENT_TIMESTAMP)" for user in users),
    )


def request(
    services: Iterable[Service], hosts: Iterable[Host], users: Iterable[User]
) -> str:
    """Return the transactions reloading all three lookup tables."""
    return " ".join(
        (
            insert_service_request(services),
            insert_host_request(hosts),
            insert_user_request(users),
        )
    )