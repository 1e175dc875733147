"""Outbound ports: interfaces for external system adapters."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@dataclass
class PostResult:
    """Unified result type for status post operations."""

    success: bool
    post_id: Optional[str] = None
    text: Optional[str] = None
    error: Optional[str] = None


@runtime_checkable
class ProfileStoragePort(Protocol):
    """Interface for the shared membership list (rows of CSV fields)."""

    async def fetch_rows(self) -> List[List[str]]: ...
    async def persist_rows(self, rows: List[List[str]], message: str) -> None: ...


@runtime_checkable
class StatePort(Protocol):
    """Interface for namespaced JSON bot state with shallow-merge updates."""

    def load(self, namespace: str) -> Dict[str, Any]: ...
    def update(self, namespace: str, partial: Dict[str, Any]) -> None: ...


@runtime_checkable
class TemplatePort(Protocol):
    """Interface for rendering named text templates."""

    def render(self, name: str, variables: Dict[str, Any]) -> str: ...


@runtime_checkable
class StatusPort(Protocol):
    """Interface for publishing statuses on the social network."""

    async def post_status(
        self,
        text: str,
        visibility: str = "public",
        in_reply_to_id: Optional[str] = None,
    ) -> PostResult: ...
