"""

Denon receiver control

- Conduit: abstraction of a bi-directional byte stream. The input side supports peek() and
  read_exact(), the output side write(). SocketConduit is the live implementation, BufferConduit
  an in-memory one for tests.
- Connector: opens a conduit to a receiver endpoint (HOSTNAME[:PORT], port 23 by default).
- Discovery: finds a receiver's host name over mDNS when no address is given.
  ZeroconfDiscovery, AvahiBrowseDiscovery
- Protocol: the codec for carriage-return terminated status lines such as PWON, SICD, MV50, MVMAX 86,
  and the LineAssembler that reads them.
- Connection: get(kind) and set(kind, value) on top of a conduit.


## Threading

The receiver sends status lines whenever its state changes, as well as in answer to queries,
and there is nothing that ties an answer to the query that caused it.

A ReceiverLoop runs on a background daemon thread per connection. It is the only reader
of the conduit's input. Each line it decodes is published into the StatusTable, which
counts a generation per status kind.

The caller's thread writes queries and commands directly to the conduit. get() notes the generation
of the kind before writing the query, and waits on the table for a later generation. The wait ends
when the answer arrives, on timeout, or when the table is closed because the stream ended or failed.
The table's lock is never held while reading or writing the conduit.

Closing the connection shuts the conduit down, which unblocks the receiver loop.

"""
