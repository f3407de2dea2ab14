# dnsbench

Find the fastest DNS server in your location. `dnsbench` sends repeated
lookups of one domain to a list of DNS servers, times every answer and
prints a ranking by average duration, fastest first. Servers where every
request failed come last.

Each server is measured in a worker thread; while a server is being
measured a progress bar is shown on the terminal. A new resolver is used
for every request so that no answer is served from a cache.

## Installation

```
pip install .
```

## Usage

Run a benchmark with the default settings (resolve `google.com`, 8 threads,
25 requests per server, 3 second timeout, UDP, IPv4 servers, IPv4 lookups,
rounded table, human-readable output):

```
dnsbench
```

The same entry point can also be started with `python -m dnsbench.app`.

Options:

| Option | Meaning | Allowed values |
| --- | --- | --- |
| `--domain` | Domain to resolve | any domain name |
| `--threads` | Number of worker threads | 1–255 |
| `--requests` | Requests sent to each server | 1–999 |
| `--timeout` | Timeout per request, in seconds | 1–59 |
| `--protocol` | Transport protocol | `tcp`, `udp` |
| `--name-servers-ip` | IP version of the servers to test | `v4`, `v6` |
| `--lookup-ip` | Record to look up: `A` for `v4`, `AAAA` for `v6` | `v4`, `v6` |
| `--style` | Table style | `empty`, `blank`, `ascii`, `psql`, `markdown`, `modern`, `sharp`, `rounded`, `modern-rounded`, `extended`, `dots`, `re-structured-text`, `ascii-rounded` |
| `--format` | Output format | `human-readable`, `json`, `xml`, `csv` |
| `--custom-servers-file` | File listing the servers to test instead of the built-in list | path |
| `--save-config` | Store the settings in effect as the new defaults | flag |
| `--version` | Print the version and exit | |

Example:

```
dnsbench --domain example.com --requests 10 --protocol tcp --format json
```

### Built-in servers

Without a custom servers file, the built-in list for the chosen
`--name-servers-ip` is used: 36 IPv4 servers or 22 IPv6 servers of public
resolvers (Google, Cloudflare, Quad9, OpenDNS, AdGuard DNS, NextDNS and
others), plus a `Router` entry for the usual local gateway address. They
are available from Python through `dnsbench.servers.default_entries`.

### Custom server lists

A custom servers file has one server per line, with a name and a socket
address separated by a semicolon:

```
Google;8.8.8.8:53
Cloudflare;1.1.1.1:53
```

For IPv6 servers (`--name-servers-ip v6`) put the address in brackets:

```
Google;[2001:4860:4860:0:0:0:0:8888]:53
```

Any line that does not parse is an error: the program prints a message and
exits with status 1. If the given path does not exist, the built-in list is
used instead.

### Saved configuration

With `--save-config` the settings in effect are written to
`~/.dns-bench/config.toml`. Later runs start from that file, and any option
given on the command line still takes precedence. If the file cannot be
read or parsed, a warning is printed and the built-in defaults are used.

### Output formats

- `human-readable`: a summary of the parameters, then a table with the
  server name, its IP address, the last resolved IP, the success rate, the
  first duration and the average duration, then the total time taken. The
  success rate is green at 100 %, yellow from 50 %, bright red from 20 % and
  red below; durations are green up to 30 ms, yellow up to 80 ms, bright red
  above and red when failed.
- `json`: a pretty-printed array of result objects. A duration is written
  as `{"succeeded": {"secs": ..., "nanos": ...}}` or `{"failed": "<error>"}`.
- `xml`: a `DnsBenchResultEntries` document with one `ResultEntry` per
  server.
- `csv`: a header row, then one row per server. Durations are in
  milliseconds with six decimals, and a failed duration goes in its own
  error column. With no results the output is empty.

## Using it from Python

```python
from dnsbench.app import DnsBenchApplication
from dnsbench.args import parse_args

app = DnsBenchApplication(parse_args(["--requests", "5", "--format", "csv"]))
app.run()
print(app.results)
```

`DnsBenchApplication` takes an optional `home` directory in which the
configuration file is looked up and saved, instead of the user's home.
The pieces are also usable on their own:

- `dnsbench.app.measure_server(entry, config)` benchmarks one `DnsEntry`
  and returns a `RawResultEntry`.
- `dnsbench.result.sort_result_entries` orders results as the ranking does.
- `dnsbench.output.to_json`, `to_xml`, `to_csv` and
  `render_table(entries, style)` render a list of results.
- `dnsbench.config.load_config`, `save_config` and `config_path` read and
  write the configuration file.
- `dnsbench.custom.read_custom_servers_list(filepath, ip)` reads a custom
  servers file.

## Limitations

Only plain DNS over UDP or TCP is measured; encrypted transports such as
DNS over TLS or HTTPS are not supported.

## Running the tests

```
pip install ".[test]"
pytest
```