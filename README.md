# primegrid

A small distributed prime search. A server splits the positive integers into
ranges and hands them out over TCP to any number of clients. Each client
searches its range for primes, sends back what it found, and receives the
next range.

## Installing

    pip install .

## Running

Start the server, then one or more clients:

    primegrid-server
    primegrid-client

The server listens on port `27015` on all interfaces; the client connects to
`127.0.0.1`, port `27015`. Press Enter in either window to shut that side
down: a client sends a close message before leaving, and the server stops
accepting connections and sends a close message to every connected client
before exiting.

Options of `primegrid-server`:

- `--host` - address to listen on (default: all interfaces)
- `--port` - TCP port (default `27015`)
- `--ranges-file` - file of searched ranges (default `../Ranges_Searched.txt`)
- `--primes-file` - file of primes found (default `../Primes_Found.txt`)
- `--search-size` - how many numbers each handed-out range covers (default `100`)

Options of `primegrid-client`:

- `--host` - server address (default `127.0.0.1`)
- `--port` - server port (default `27015`)

Both commands log their exchanges through the standard `logging` module at
INFO level.

## Files kept by the server

By default the server keeps its progress in two plain-text files in the
parent of the directory it is started from; both are created if missing.

- `Ranges_Searched.txt` - one `low high` pair per line, the ranges already
  searched. On start-up the ranges are merged where they overlap or touch,
  the gaps between them are queued for searching, and new ranges follow the
  highest number searched. With no saved ranges, the first range handed out
  is `2..101`. The file is rewritten, with merged ranges, on shutdown.
- `Primes_Found.txt` - the primes reported by clients, one per line,
  appended on shutdown.

## Using it as a library

- `primegrid.protocol` builds and reads messages: `encode_close`,
  `encode_range`, `encode_primes`, `decode_header`, `decode_range`,
  `decode_primes`, and `recv_exact` for reading a fixed number of bytes from
  a socket. Malformed messages raise `ProtocolError`.
- `primegrid.prime_search.find_primes(low, high)` returns the primes in an
  inclusive range; `PrimeSearch` holds a range and the primes found until
  `take_primes()` is called.
- `primegrid.server_logic.ServerLogic` keeps the work queue and results
  (`start`, `request_work`, `primes_received`, `work_failed`, `stop`);
  `merge_ranges` and `normalize_ranges` merge ranges and find their gaps.
- `primegrid.socket_manager.SocketManager` accepts clients for any
  `ServerInterface` and runs a `ClientHandler` thread for each one.
- `primegrid.client.Connection` connects to a server and exchanges work on a
  background thread; it can be used as a context manager.

## Wire format

Every message starts with a three-byte header: a one-byte message type
followed by a little-endian 16-bit count of 64-bit values in the payload.
Each value is a little-endian unsigned 64-bit integer.

| type | meaning          | payload                         |
|------|------------------|---------------------------------|
| 0x00 | close connection | none                            |
| 0x01 | range            | two values: low and high        |
| 0x02 | set of primes    | the primes found, one per value |

## What it does not do

- Progress is written only on a clean shutdown. Primes and finished ranges
  are held in memory until then, so a server that is killed loses them.
- A range given to a client that disconnects is queued again only in
  memory; ranges that were handed out but never returned are not recorded in
  the ranges file.
- Each client searches on a single thread, one range at a time.
- There is no authentication or encryption on the connection.

## Tests

    pip install .[test]
    pytest