"""VaultWeaver: generate interlinked markdown knowledge vaults from seed topics."""

from __future__ import annotations

__version__ = "0.1.0"
