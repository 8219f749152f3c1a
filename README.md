# toxiproxy-client

A small, synchronous client for a Toxiproxy server. It lets tests create
proxies in front of the services they talk to and then degrade those
connections on purpose, with added latency, reduced bandwidth, timeouts,
sliced packets, data limits or a fully disabled proxy, so you can check how
your code copes with network trouble.

## Installation

```
pip install toxiproxy-client
```

The client needs a running Toxiproxy server. `default_client()` talks to
`127.0.0.1:8474`; `Client` takes any `"host:port"` string or
`(host, port)` tuple. The address is resolved when the client is created.

## Setting up a test

```python
from toxiproxy_client.client import default_client
from toxiproxy_client.proxy import ProxyPack

toxiproxy = default_client()

toxiproxy.populate([ProxyPack("socket", "localhost:2001", "localhost:2000")])

proxy = toxiproxy.find_and_reset_proxy("socket")


def call_service():
    ...  # talk to localhost:2001 and assert on the failure


proxy.with_down(call_service)
```

`with_down` disables the proxy, runs your callable and returns its result,
and enables the proxy again afterwards, even if the callable raised.

`default_client()` returns the same shared `Client` on every call.

## Adding toxics

Each `with_*` method registers a toxic on the proxy and returns the proxy,
so calls can be chained. `apply` runs your callable, returns its result, and
then removes every toxic from the proxy, even if the callable raised.

```python
from toxiproxy_client.client import Client

with Client("127.0.0.1:8474") as client:
    proxy = client.find_and_reset_proxy("socket")
    (
        proxy
        .with_slicer("downstream", 2048, 128, 0, 0.8)
        .with_bandwidth("downstream", 32, 0.5)
        .apply(call_service)
    )
```

The available toxics are:

| Method            | Attributes                                   |
|-------------------|----------------------------------------------|
| `with_latency`    | `latency`, `jitter`                          |
| `with_bandwidth`  | `rate`                                       |
| `with_slow_close` | `delay`                                      |
| `with_timeout`    | `timeout`                                    |
| `with_slicer`     | `average_size`, `size_variation`, `delay`    |
| `with_limit_data` | `bytes`                                      |

Every method also takes the `stream` (`"upstream"` or `"downstream"`) and
the `toxicity`, a probability between 0 and 1. Attribute values must be
unsigned 32-bit integers; anything else raises `ValueError`. A toxic is
named `<type>_<stream>`, for example `latency_downstream`.

## Other server operations

```python
client.is_running()          # True if a TCP connection to the server opens
client.version()             # server version string
client.reset()               # enable all proxies, remove all toxics
client.all()                 # {name: Proxy} for every registered proxy
client.find_proxy("socket")  # fetch one proxy without touching its state
client.close()               # close the underlying HTTP connection pool

proxy.proxy_pack             # the ProxyPack: name, listen, upstream, enabled, toxics
proxy.toxics()               # list of ToxicPack on the proxy
proxy.delete_all_toxics()
proxy.disable()
proxy.enable()
proxy.delete()
```

`ProxyPack` and `ToxicPack` (from `toxiproxy_client.toxic`) are dataclasses
with `to_dict()` and `from_dict()` for their JSON form.

## Errors

Errors come from `toxiproxy_client.errors`:

- `ToxiproxyError` is raised when a request cannot be sent (connection
  refused, timeout and the like), when a toxic cannot be created, or when
  the server address does not resolve.
- `JsonDecodeError`, a subclass, is raised when a response is not the JSON
  structure the call expects.

The client does not look at HTTP status codes. An error reply from the
server shows up as a `JsonDecodeError` where the call decodes the response
(for example `find_proxy` on an unknown name), and goes unnoticed where it
does not (`reset`, `enable`, `disable`, `delete`).

## Testing against a fake server

`Client` accepts an optional `httpx` transport, so it can be pointed at an
`httpx.MockTransport` in unit tests instead of a real server.

## What this package does not do

It is a client library only: it does not run a Toxiproxy server, has no
command-line tool, and offers no asynchronous API.