# application/services/execution_deps.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol

from application.ports.logger import LoggerPort


class EndpointResolverPort(Protocol):
    def resolve(self, selector: str) -> str:
        ...


@dataclass(frozen=True)
class ExecutionDeps:
    endpoint_resolver: EndpointResolverPort
    logger: LoggerPort
    timeout_sec: float = 120

    def resolve_endpoint(self, selector: str) -> str:
        return self.endpoint_resolver.resolve(selector)

    def with_logger(self, logger: LoggerPort) -> "ExecutionDeps":
        return replace(self, logger=logger)
