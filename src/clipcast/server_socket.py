#!/usr/bin/env python3
"""Listening socket utilities for clipcast.

This module provides:
- Binding the TCP listening socket before the web server starts, so a
  port already in use is reported as TransportBindFailure
- Printing the startup message
- Opening the client page in the default browser
"""

from __future__ import annotations

import socket
import sys

import click

from clipcast.errors import TransportBindFailure

# Pending connection queue length for the listening socket.
LISTEN_BACKLOG: int = 128


def bind_socket(host: str, port: int) -> socket.socket:
    """Create a TCP socket listening on host:port.

    Args:
        host: Interface address; IPv6 if it contains a colon.
        port: TCP port.

    Returns:
        The listening socket.

    Raises:
        TransportBindFailure: If the address cannot be bound.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
        sock.listen(LISTEN_BACKLOG)
    except OSError as e:
        sock.close()
        raise TransportBindFailure(f"Cannot listen on {host}:{port}: {e}") from e
    return sock


def client_url(port: int) -> str:
    """URL of the client page on this machine."""
    return f"http://localhost:{port}"


def print_startup_message(sock: socket.socket) -> None:
    """Print the bound address to stderr."""
    address, port = sock.getsockname()[:2]
    print(f"Listening on {address} port {port}", file=sys.stderr)
    print(f"Open {client_url(port)} to watch the clipboard", file=sys.stderr)


def open_client(port: int) -> None:
    """Open the client page in the system's default browser."""
    click.launch(client_url(port))
