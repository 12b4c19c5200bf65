"""UDP helpers and a hello/goodbye client and server built on them."""

import argparse
import socket
import sys

__all__ = [
    "BUFFER_SIZE",
    "udp_open",
    "fill_sock_addr",
    "udp_write",
    "udp_read",
    "run_client",
    "serve",
    "main",
]

BUFFER_SIZE = 1000


def udp_open(port):
    """Create a UDP socket bound to ``port`` on all local addresses."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind(("", port))
    except OSError:
        sock.close()
        raise
    return sock


def fill_sock_addr(hostname, port):
    """Resolve ``hostname`` to an IPv4 ``(address, port)`` pair.

    A hostname of None gives the cleared address ``("0.0.0.0", 0)``.
    """
    if hostname is None:
        return ("0.0.0.0", 0)
    return (socket.gethostbyname(hostname), port)


def udp_write(sock, addr, data):
    """Send ``data`` to ``addr``; return the number of bytes sent."""
    return sock.sendto(data, addr)


def udp_read(sock, size=BUFFER_SIZE):
    """Receive one datagram of at most ``size`` bytes; return ``(data, addr)``."""
    return sock.recvfrom(size)


def _pack(text):
    return text.encode("utf-8").ljust(BUFFER_SIZE, b"\0")


def _c_string(data):
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def run_client(host="localhost", server_port=10000, client_port=20000):
    """Send "hello world" to the server and return the text of its reply."""
    with udp_open(client_port) as sock:
        addr = fill_sock_addr(host, server_port)
        message = "hello world"
        print(f"client:: send message [{message}]")
        try:
            udp_write(sock, addr, _pack(message))
        except OSError:
            print("client:: failed to send")
            raise
        print("client:: wait for reply...")
        data, _ = udp_read(sock, BUFFER_SIZE)
        reply = _c_string(data)
        print(f"client:: got reply [size:{len(data)} contents:({reply})")
    return reply


def serve(port=10000, max_messages=None):
    """Answer each non-empty datagram with "goodbye world".

    Runs forever unless ``max_messages`` is given; returns the number read.
    """
    handled = 0
    with udp_open(port) as sock:
        while max_messages is None or handled < max_messages:
            print("server:: waiting...")
            data, addr = udp_read(sock, BUFFER_SIZE)
            print(f"server:: read message [size:{len(data)} contents:({_c_string(data)})]")
            handled += 1
            if data:
                udp_write(sock, addr, _pack("goodbye world"))
                print("server:: reply")
    return handled


def main(argv=None):
    parser = argparse.ArgumentParser(prog="udp")
    sub = parser.add_subparsers(dest="role", required=True)
    server = sub.add_parser("server")
    server.add_argument("--port", type=int, default=10000)
    client = sub.add_parser("client")
    client.add_argument("--host", default="localhost")
    client.add_argument("--port", type=int, default=10000)
    client.add_argument("--client-port", type=int, default=20000)
    args = parser.parse_args(argv)

    try:
        if args.role == "server":
            serve(args.port)
        else:
            run_client(args.host, args.port, args.client_port)
    except OSError as exc:
        print(f"{args.role}: {exc}", file=sys.stderr)
        return 1
    return 0