"""Shareholder and transfer-agent record-keeping service."""

__all__: list[str] = []
