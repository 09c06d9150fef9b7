"""
List Store
Loads, saves and merges the working/inactive domain lists.
"""

import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .validator import DomainValidator


def read_entries(path: Path) -> List[str]:
    """Read raw entries from a text file, one per line (comments and blanks skipped)"""
    entries = []
    # Undecodable bytes become U+FFFD so the entry fails validation
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        for line in f:
            line = line.split('#', 1)[0].strip()
            if line:
                entries.append(line)
    return entries


def load_domains(path: Path, validator: Optional[DomainValidator] = None) -> List[str]:
    """
    Load a domain list file.

    Entries are normalized, validated and de-duplicated in first-seen order.

    Raises:
        FileNotFoundError: if the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Domain list not found: {path}")

    validator = validator or DomainValidator()
    return validator.clean_all(read_entries(path))


def load_known(path: Path) -> List[str]:
    """Load historical state; a missing file is an empty list"""
    path = Path(path)
    if not path.exists():
        return []
    return load_domains(path)


def save_domains(path: Path, domains: Iterable[str], sort: bool = True) -> Path:
    """Write one hostname per line with a trailing newline"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    items = sorted(set(domains)) if sort else list(dict.fromkeys(domains))

    with open(path, 'w', encoding='utf-8', newline='\n') as f:
        for domain in items:
            f.write(f"{domain}\n")

    return path


def merge_results(
    prev_active: Iterable[str],
    prev_inactive: Iterable[str],
    new_active: Iterable[str] = (),
    new_inactive: Iterable[str] = ()
) -> Tuple[Set[str], Set[str]]:
    """
    Merge two result sets. Inactive wins: any domain seen inactive on
    either side is dropped from the active set.

    Returns:
        (active, inactive) disjoint sets
    """
    inactive = set(prev_inactive) | set(new_inactive)
    active = (set(prev_active) | set(new_active)) - inactive
    return active, inactive


def prune(domains: Iterable[str], inactive: Iterable[str]) -> List[str]:
    """Remove inactive domains, preserving order"""
    inactive = set(inactive)
    return [d for d in domains if d not in inactive]


def prune_file(path: Path, inactive: Iterable[str], validator: Optional[DomainValidator] = None) -> Tuple[int, int]:
    """
    Rewrite a list file without its inactive domains.

    Only lines whose entry normalizes to an inactive domain are dropped;
    every other line is kept byte for byte.

    Returns:
        (removed, kept) entry counts
    """
    path = Path(path)
    inactive = set(inactive)
    validator = validator or DomainValidator()

    with open(path, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
        lines = f.readlines()

    output = []
    removed = 0
    kept = 0
    for line in lines:
        entry = line.split('#', 1)[0].strip()
        if entry and validator.normalize(entry) in inactive:
            removed += 1
            continue
        if entry:
            kept += 1
        output.append(line)

    with open(path, 'w', encoding='utf-8', errors='surrogateescape', newline='') as f:
        f.writelines(output)

    return removed, kept


def chunk_bounds(total: int, chunk_index: int, num_chunks: int) -> Tuple[int, int]:
    """
    Slice bounds of a 1-based chunk.

    Chunk size is ceil(total / num_chunks); trailing chunks may be short or empty.
    """
    if num_chunks < 1:
        raise ValueError(f"Number of chunks must be positive: {num_chunks}")
    if not 1 <= chunk_index <= num_chunks:
        raise ValueError(f"Chunk index {chunk_index} out of range 1..{num_chunks}")

    chunk_size = math.ceil(total / num_chunks)
    start = min((chunk_index - 1) * chunk_size, total)
    end = min(start + chunk_size, total)
    return start, end


def batched(items: List[str], size: int) -> List[List[str]]:
    """Partition items into consecutive batches of at most `size`"""
    if size < 1:
        raise ValueError(f"Batch size must be positive: {size}")
    return [items[i:i + size] for i in range(0, len(items), size)]


class DomainLists:
    """Resolves the canonical list files under a base directory"""

    def __init__(self, files_config: Optional[Dict] = None, base_path: Optional[Path] = None):
        files_config = files_config or {}

        if base_path:
            self.base_path = Path(base_path)
        else:
            self.base_path = Path(files_config.get('base_dir', '.'))

        self.active_file = self.base_path / files_config.get('active', 'working_domains.txt')
        self.inactive_file = self.base_path / files_config.get('inactive', 'inactive_domains.txt')
        self.allowlist_file = self.base_path / files_config.get('allowlist', 'allowlist.txt')

    @property
    def active_temp_file(self) -> Path:
        return self.active_file.with_name(f"{self.active_file.stem}_new{self.active_file.suffix}")

    @property
    def inactive_temp_file(self) -> Path:
        return self.inactive_file.with_name(f"{self.inactive_file.stem}_new{self.inactive_file.suffix}")

    def chunk_result_files(self, chunk_index: int) -> Tuple[Path, Path]:
        """Per-chunk (active, inactive) result files"""
        active = self.active_file
        inactive = self.inactive_file
        return (
            active.with_name(f"{active.stem}_chunk_{chunk_index}_result{active.suffix}"),
            inactive.with_name(f"{inactive.stem}_chunk_{chunk_index}_result{inactive.suffix}")
        )

    def load_active(self) -> List[str]:
        return load_known(self.active_file)

    def load_inactive(self) -> List[str]:
        return load_known(self.inactive_file)

    def load_allowlist(self) -> List[str]:
        """Raw allowlist entries (wildcards kept); missing file = empty"""
        if not self.allowlist_file.exists():
            return []
        return read_entries(self.allowlist_file)

    def save(self, active: Iterable[str], inactive: Iterable[str], temp: bool = False) -> Tuple[Path, Path]:
        """Write both lists (sorted), to the temp pair when `temp` is set"""
        if temp:
            targets = (self.active_temp_file, self.inactive_temp_file)
        else:
            targets = (self.active_file, self.inactive_file)

        save_domains(targets[0], active)
        save_domains(targets[1], inactive)
        return targets

    def promote_temp(self):
        """Replace the canonical files with the temp pair"""
        self.active_temp_file.replace(self.active_file)
        self.inactive_temp_file.replace(self.inactive_file)
