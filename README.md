# tracerpipe

tracerpipe builds SQL text for a layered telemetry store. Raw snapshots of
processes and open files land in *bronze* tables, and a fixed batch of
statements refines all bronze tables (processes, open files and network
packets) into *silver* tables. Every function returns plain SQL text; running
it is up to you, with any DuckDB-compatible connection.

The package uses only the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Configuration

`tracerpipe.config.read_config(path=None)` starts from built-in defaults and,
if the TOML file at `path` exists (by default `rstracer.toml` in the current
directory), merges its tables over them. The defaults are:

| Section          | Keys and defaults                                                                     |
|------------------|---------------------------------------------------------------------------------------|
| top level        | `in_memory = false`                                                                   |
| `[request]`      | `channel_size = 100`, `consumer_batch_size = 20`                                      |
| `[ps]`           | `producer_frequency = 3000`, `consumer_batch_size = 200`                              |
| `[lsof.regular]` | `producer_frequency = 20000`, `consumer_batch_size = 200`                             |
| `[lsof.network]` | `producer_frequency = 3000`, `consumer_batch_size = 200`                              |
| `[network]`      | `channel_size = 500`, `producer_frequency = 1000`, `consumer_batch_size = 200`        |
| `[vacuum]`       | `bronze = 15`, `silver = 15`, `gold = 600`                                            |
| `[schedule]`     | `silver = 10`, `gold = 10`, `vacuum = 15`, `file = 300`, `export = 60`                |
| `[export]`       | `directory = "export/"`, `format = "parquet"`                                         |
| `[logger]`       | `level = "INFO"`, optional `directory` and `rotation`                                 |

The result is a frozen `Config` dataclass made of `ChannelConfig`,
`LsofConfig`, `VacuumConfig`, `ExportConfig`, `ScheduleConfig` and
`LoggerConfig`. `VacuumConfig.to_list()` and `ScheduleConfig.to_list()` return
the `(name, seconds)` pairs in field order. A file that cannot be parsed, a
missing field or a value of the wrong type raises `ConfigError`.

`subscribe_logger(config.logger)` installs a root log handler and returns it.
Levels are `TRACE` (treated as `DEBUG`), `DEBUG`, `INFO`, `WARN` and `ERROR`.
With a `directory`, logs go to `rstracer.log` in it, rotated `MINUTELY`,
`HOURLY` (the default) or `DAILY`; without one, they go to standard error. An
unknown level or rotation raises `ConfigError`.

## Building requests

```python
from tracerpipe import bronze, file, silver
from tracerpipe.file import Host, Service, User
from tracerpipe.records import OpenFile, Process

processes = [
    Process(pid=1, ppid=0, uid=0, lstart=1700000000, pcpu=0.0, pmem=0.1,
            status="Ss", command="init", created_at=1700000000000),
]
insert = bronze.create_insert_batch_request(processes)

refine = silver.request()            # bronze -> silver, all tables

lookups = file.request(
    [Service("ssh", 22, "tcp")],
    [Host("localhost", "127.0.0.1")],
    [User("root", 0)],
)
```

- `bronze.create_insert_batch_request(batch)` turns a list of `Process` or
  `OpenFile` records into one multi-row `INSERT`, or `""` for an empty list.
  Single quotes in commands and file names are replaced by double quotes.
- `bronze.concat_requests(requests, batch_size)` splits the given text on
  `INSERT`, groups the value tuples by target table, sorts and deduplicates
  them, and re-emits statements of at most `batch_size` tuples. A
  `batch_size` of zero or less raises `ValueError`.
- `file.request(services, hosts, users)` returns three transactions that
  truncate and refill `gold_file_service`, `gold_file_host` and
  `gold_file_user`; `insert_service_request`, `insert_host_request` and
  `insert_user_request` build each one alone.

## What it does not do

- It does not create the tables; the statements assume they already exist.
- It builds no statements for aggregated gold tables, for deleting rows past
  their retention, or for exporting tables to files. The `vacuum`, `schedule`
  and `export` settings are read but nothing in the package acts on them.
- It does not collect data: there is no process lister, open-file scanner or
  packet capture, no scheduler, and no command to run. It never opens a
  database connection.