"""
Resolution Runner
Checks candidate and existing domains in batches and maintains the
working/inactive lists. Interim results are written after every batch
so an interrupted run resumes from the last written state.
"""

from pathlib import Path
from datetime import datetime
from typing import Dict, Iterable, Optional, Set

from termcolor import colored

from ..core.allowlist import AllowlistFilter
from ..core.config import ConfigManager
from ..core.lists import (
    DomainLists,
    batched,
    chunk_bounds,
    load_domains,
    merge_results,
    prune_file,
    save_domains,
)
from .dns_checker import DNSChecker


def _make_checker(config: ConfigManager, checker: Optional[DNSChecker]) -> DNSChecker:
    return checker or DNSChecker(config.get_dns_config())


def _drop_allowlisted(domains: Iterable[str], allowlist: AllowlistFilter) -> Set[str]:
    return {d for d in domains if not allowlist.is_allowed(d)}


def run_update(
    lists: DomainLists,
    config: ConfigManager,
    candidates_file: str,
    checker: Optional[DNSChecker] = None
) -> Dict:
    """
    Check new candidate domains and merge them into the lists.

    Candidates already present in either list and allowlisted domains
    are skipped. Inactive wins when merging.

    Args:
        lists: Canonical list files
        config: Loaded configuration
        candidates_file: Newline-delimited candidate domains
        checker: DNS checker (created from config if None)

    Returns:
        Result dict with success status, counts and output files
    """
    start_time = datetime.now()
    candidates_path = Path(candidates_file)

    if not candidates_path.exists():
        return {'success': False, 'error': f'Candidates file not found: {candidates_file}'}

    candidates = load_domains(candidates_path)
    print(f"[UPDATE] Loaded {len(candidates)} candidate domains from {candidates_path.name}")

    prev_active = lists.load_active()
    prev_inactive = lists.load_inactive()
    known = set(prev_active) | set(prev_inactive)

    new_domains = [d for d in candidates if d not in known]
    print(f"[UPDATE] Already known: {len(candidates) - len(new_domains)}")

    allowlist = AllowlistFilter(lists.load_allowlist())
    new_domains, allowlisted = allowlist.filter_and_report(new_domains)

    batch_size = config.get('batch', 'update_size', default=1000)
    batches = batched(new_domains, batch_size)
    print(f"[UPDATE] {len(new_domains)} new domains in {len(batches)} batches (batch size: {batch_size})")

    checker = _make_checker(config, checker)

    total_active, total_inactive = merge_results(prev_active, prev_inactive)
    total_active = _drop_allowlisted(total_active, allowlist)
    total_inactive = _drop_allowlisted(total_inactive, allowlist)

    new_active = 0
    new_inactive = 0

    for index, batch in enumerate(batches, 1):
        print(f"\n[UPDATE] Batch {index}/{len(batches)}: checking {len(batch)} domains...")

        batch_active, batch_inactive = checker.check(batch)
        new_active += len(batch_active)
        new_inactive += len(batch_inactive)

        print(f"[UPDATE] Batch {index} completed: {len(batch_active)} active, {len(batch_inactive)} inactive")

        total_active, total_inactive = merge_results(
            total_active, total_inactive, batch_active, batch_inactive
        )
        lists.save(total_active, total_inactive)
        print(f"[UPDATE] Saved progress up to {batch[-1]}")

    if not batches:
        # Nothing new: still rewrite so the lists stay sorted and disjoint
        lists.save(total_active, total_inactive)

    elapsed = (datetime.now() - start_time).total_seconds()

    return {
        'success': True,
        'candidates': len(candidates),
        'checked': len(new_domains),
        'allowlisted': len(allowlisted),
        'batches': len(batches),
        'new_active': new_active,
        'new_inactive': new_inactive,
        'active_count': len(total_active),
        'inactive_count': len(total_inactive),
        'active_file': str(lists.active_file),
        'inactive_file': str(lists.inactive_file),
        'elapsed_seconds': round(elapsed, 2)
    }


def run_retest(
    lists: DomainLists,
    config: ConfigManager,
    recent_files: Iterable[str] = (),
    checker: Optional[DNSChecker] = None
) -> Dict:
    """
    Re-check every domain of the working list. Allowlisted domains are
    neither checked nor carried over into either list.

    Progress goes to the *_new temp files after each batch; they replace
    the canonical files once all batches are done. Recent (dated) working
    files are then pruned of inactive domains.
    """
    start_time = datetime.now()

    if not lists.active_file.exists():
        return {'success': False, 'error': f'Working list not found: {lists.active_file}'}

    domains = load_domains(lists.active_file)
    print(f"[RETEST] Retesting {len(domains)} domains from {lists.active_file.name}")

    allowlist = AllowlistFilter(lists.load_allowlist())
    to_check, allowlisted = allowlist.filter_and_report(domains)
    prev_inactive = _drop_allowlisted(lists.load_inactive(), allowlist)

    final_working: Set[str] = set()
    final_inactive: Set[str] = set(prev_inactive)
    lists.save(final_working, final_inactive, temp=True)

    batch_size = config.get('batch', 'retest_size', default=2500)
    batches = batched(to_check, batch_size)
    print(f"[RETEST] Processing in {len(batches)} batches (up to {batch_size} each)")

    checker = _make_checker(config, checker)

    for index, batch in enumerate(batches, 1):
        print(f"\n[RETEST] Batch {index}/{len(batches)}: testing {len(batch)} domains...")

        batch_active, batch_inactive = checker.check(batch)
        print(f"[RETEST]   Active: {len(batch_active)}  Inactive: {len(batch_inactive)}")

        final_working, final_inactive = merge_results(
            final_working, final_inactive, batch_active, batch_inactive
        )
        lists.save(final_working, final_inactive, temp=True)

    lists.promote_temp()

    print(f"\n[RETEST] Final working count: {len(final_working)}")
    print(f"[RETEST] Final inactive count: {len(final_inactive)}")

    pruned_files = {}
    for recent in recent_files:
        recent_path = Path(recent)
        if not recent_path.exists():
            print(colored(f"[RETEST] Recent file not found, skipping: {recent_path}", "yellow"))
            continue
        removed, _ = prune_file(recent_path, final_inactive)
        pruned_files[str(recent_path)] = removed
        print(f"[RETEST] Pruned {removed} inactive domains from {recent_path.name}")

    elapsed = (datetime.now() - start_time).total_seconds()

    return {
        'success': True,
        'total': len(domains),
        'batches': len(batches),
        'active_count': len(final_working),
        'inactive_count': len(final_inactive),
        'allowlisted': len(allowlisted),
        'removed': len(domains) - len(final_working),
        'pruned_files': pruned_files,
        'active_file': str(lists.active_file),
        'inactive_file': str(lists.inactive_file),
        'elapsed_seconds': round(elapsed, 2)
    }


def run_chunk(
    lists: DomainLists,
    config: ConfigManager,
    chunk_index: int,
    num_chunks: int,
    checker: Optional[DNSChecker] = None
) -> Dict:
    """
    Check one 1-based chunk of the working list and write per-chunk
    result files for an external merge step. Allowlisted domains are
    dropped before slicing.
    """
    if not lists.active_file.exists():
        return {'success': False, 'error': f'Working list not found: {lists.active_file}'}

    domains = load_domains(lists.active_file)
    allowlist = AllowlistFilter(lists.load_allowlist())
    domains, allowlisted = allowlist.filter_and_report(domains)

    try:
        start, end = chunk_bounds(len(domains), chunk_index, num_chunks)
    except ValueError as e:
        return {'success': False, 'error': str(e)}

    chunk = domains[start:end]
    print(f"[CHUNK] Chunk {chunk_index}/{num_chunks}: {len(chunk)} domains (lines {start + 1}-{end})")

    checker = _make_checker(config, checker)
    active, inactive = checker.check(chunk)

    active_file, inactive_file = lists.chunk_result_files(chunk_index)
    save_domains(active_file, active)
    save_domains(inactive_file, inactive)

    print(f"[CHUNK] Active: {len(active)}  Inactive: {len(inactive)}")

    return {
        'success': True,
        'chunk_index': chunk_index,
        'num_chunks': num_chunks,
        'total': len(chunk),
        'allowlisted': len(allowlisted),
        'active_count': len(active),
        'inactive_count': len(inactive),
        'active_file': str(active_file),
        'inactive_file': str(inactive_file)
    }


def run_prune(lists: DomainLists, target_file: str) -> Dict:
    """
    Remove every domain of the inactive list from a working list file.

    Every other line of the file is left untouched.
    """
    target = Path(target_file)

    if not target.exists():
        return {'success': False, 'error': f'File not found: {target_file}'}

    inactive = lists.load_inactive()
    print(f"[PRUNE] Loaded {len(inactive)} inactive domains")

    removed, kept = prune_file(target, inactive)
    print(f"[PRUNE] Removed {removed} domains, {kept} remain in {target.name}")

    return {
        'success': True,
        'removed': removed,
        'remaining': kept,
        'output_file': str(target)
    }

