"""Forwarding streaming messages to the nodes that host downstream tasks."""

from __future__ import annotations

import copy
from typing import Any, Callable, Iterable, Sequence, Union

Resolver = Callable[[Sequence[str]], Sequence[Any]]
Transport = Callable[[Any, int, Any], None]


class GlobalStreamingSupervisor:
    """Routes each message to every node running a task downstream of its sender.

    ``resolver`` turns a list of node paths into addresses; ``transport``
    delivers one message to an address and port.
    """

    def __init__(
        self, resolver: Resolver, transport: Transport, port: int = 1000
    ) -> None:
        self._resolver = resolver
        self._transport = transport
        self.port = port
        self._node_paths: dict[str, list[str]] = {}
        self._node_addresses: dict[str, list[Any]] = {}

    def add_downstream_nodes(
        self, sender_category: str, node_paths: Union[str, Iterable[str]]
    ) -> None:
        """Append node paths that receive output of ``sender_category``."""
        paths = [node_paths] if isinstance(node_paths, str) else list(node_paths)
        self._node_paths.setdefault(sender_category, []).extend(paths)

    @property
    def downstream_nodes(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._node_paths.items()}

    @property
    def downstream_addresses(self) -> dict[str, list[Any]]:
        return {k: list(v) for k, v in self._node_addresses.items()}

    def resolve_downstream_node_ips(self) -> None:
        """Resolve every recorded node path to an address."""
        for category, paths in self._node_paths.items():
            self._node_addresses[category] = list(self._resolver(list(paths)))

    def dispatch(self, message: Any) -> list[Any]:
        """Send a copy of ``message`` to each downstream address of its sender.

        Returns the addresses the message went to, in order.
        """
        addresses = self._node_addresses.get(message.sender, [])
        for address in addresses:
            self._transport(address, self.port, copy.copy(message))
        return list(addresses)