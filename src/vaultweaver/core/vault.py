"""In-memory vault store and path conventions."""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Literal, Mapping

from vaultweaver.models.vault import VaultFile

_UNSAFE_FILENAME_RE = re.compile(r'[\\/*?:"<>|\[\]]')


def sanitize_filename(name: str) -> str:
    """Replace characters that are unsafe in file names or wikilinks with `_`."""

    return _UNSAFE_FILENAME_RE.sub("_", name)


def article_path(theme: str, level: int, mode: Literal["single", "moc"]) -> str:
    """Vault-relative path of an article.

    Only the root of a single-seed vault sits at the top level; everything else is grouped in a
    directory named after its level.
    """

    filename = sanitize_filename(theme)
    if mode == "single" and level == 0:
        return f"{filename}.md"
    return f"{level}/{filename}.md"


def build_moc(title: str, seeds: Iterable[str]) -> VaultFile:
    """Index document linking every seed theme."""

    links = "\n".join(f"- [[{sanitize_filename(t)}]]" for t in seeds)
    return VaultFile(
        path=f"{sanitize_filename(title)}.md",
        content=f"# {title}\n\n## Topics\n\n{links}",
    )


class VaultAccumulator:
    """Path to content mapping holding the documents of one run.

    Writes are last-write-wins; two themes whose sanitized names collide at the same level
    overwrite each other.
    """

    def __init__(self) -> None:
        self._files: dict[str, str] = {}

    def write(self, path: str, content: str) -> None:
        self._files[path] = content

    def add(self, file: VaultFile) -> None:
        self.write(file.path, file.content)

    def snapshot(self) -> Mapping[str, str]:
        """Read-only copy of the current contents."""

        return MappingProxyType(dict(self._files))

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files


def write_vault_tree(files: Mapping[str, str], root: Path, vault_name: str) -> Path:
    """Materialize a vault on disk under `root / <sanitized vault_name>`.

    Returns:
        The vault directory.
    """

    name = sanitize_filename(vault_name)
    # "" / "." / ".." would resolve to root or its parent
    if not name.strip("."):
        name = "vault"
    vault_dir = root / name
    for rel_path, content in files.items():
        target = vault_dir / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    vault_dir.mkdir(parents=True, exist_ok=True)
    return vault_dir
