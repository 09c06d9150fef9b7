import pytest

from domainlists.core.lists import (
    DomainLists,
    batched,
    chunk_bounds,
    load_domains,
    load_known,
    merge_results,
    prune,
    save_domains,
)

from conftest import read_lines, write_lines


def test_merge_inactive_wins():
    active, inactive = merge_results(
        prev_active={"a.example.com", "b.example.com"},
        prev_inactive={"c.example.com"},
        new_active={"d.example.com"},
        new_inactive={"a.example.com"},
    )
    assert active == {"b.example.com", "d.example.com"}
    assert inactive == {"a.example.com", "c.example.com"}
    assert not active & inactive


def test_merge_inactive_wins_even_when_seen_active_later():
    active, inactive = merge_results([], ["a.example.com"], ["a.example.com"], [])
    assert active == set()
    assert inactive == {"a.example.com"}


def test_load_domains_normalizes_and_dedupes(tmp_path):
    path = write_lines(tmp_path / "candidates.txt", [
        "# header comment",
        "0.0.0.0 Ads.Example.com",
        "",
        "https://tracker.example.net/",
        "ads.example.com  # duplicate",
        "localhost",
    ])
    assert load_domains(path) == ["ads.example.com", "tracker.example.net"]


def test_load_domains_rejects_undecodable_bytes(tmp_path):
    path = tmp_path / "candidates.txt"
    path.write_bytes(b"exa\xffmple.com\nok.example.com\n")
    assert load_domains(path) == ["ok.example.com"]


def test_load_domains_missing_file_is_fatal(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_domains(tmp_path / "missing.txt")


def test_load_known_missing_file_is_empty(tmp_path):
    assert load_known(tmp_path / "missing.txt") == []


def test_save_domains_sorted_with_trailing_newline(tmp_path):
    path = save_domains(tmp_path / "sub" / "out.txt", ["b.example.com", "a.example.com", "b.example.com"])
    assert path.read_text(encoding='utf-8') == "a.example.com\nb.example.com\n"


def test_save_domains_unsorted_keeps_order(tmp_path):
    path = save_domains(tmp_path / "out.txt", ["b.example.com", "a.example.com"], sort=False)
    assert read_lines(path) == ["b.example.com", "a.example.com"]


def test_prune_preserves_order():
    assert prune(["c.com", "a.com", "b.com"], {"a.com"}) == ["c.com", "b.com"]


def test_chunk_bounds_cover_everything():
    total, chunks = 103, 10
    covered = []
    for index in range(1, chunks + 1):
        start, end = chunk_bounds(total, index, chunks)
        covered.extend(range(start, end))
    assert covered == list(range(total))
    assert chunk_bounds(total, 1, chunks) == (0, 11)
    assert chunk_bounds(total, 10, chunks) == (99, 103)


def test_chunk_bounds_more_chunks_than_items():
    assert chunk_bounds(3, 5, 5) == (3, 3)


@pytest.mark.parametrize("index, count", [(0, 5), (6, 5), (1, 0)])
def test_chunk_bounds_rejects_bad_index(index, count):
    with pytest.raises(ValueError):
        chunk_bounds(10, index, count)


def test_batched():
    assert batched(["a", "b", "c", "d", "e"], 2) == [["a", "b"], ["c", "d"], ["e"]]
    assert batched([], 2) == []
    with pytest.raises(ValueError):
        batched(["a"], 0)


def test_domain_lists_paths(tmp_path):
    lists = DomainLists({'base_dir': str(tmp_path)})
    assert lists.active_file == tmp_path / "working_domains.txt"
    assert lists.inactive_file == tmp_path / "inactive_domains.txt"
    assert lists.active_temp_file == tmp_path / "working_domains_new.txt"
    assert lists.inactive_temp_file == tmp_path / "inactive_domains_new.txt"
    assert lists.chunk_result_files(3) == (
        tmp_path / "working_domains_chunk_3_result.txt",
        tmp_path / "inactive_domains_chunk_3_result.txt",
    )


def test_domain_lists_save_and_promote(tmp_path):
    lists = DomainLists(base_path=tmp_path)
    lists.save(["a.example.com"], ["b.example.com"], temp=True)
    assert not lists.active_file.exists()

    lists.promote_temp()

    assert lists.load_active() == ["a.example.com"]
    assert lists.load_inactive() == ["b.example.com"]
    assert not lists.active_temp_file.exists()


def test_allowlist_keeps_wildcards(tmp_path):
    lists = DomainLists(base_path=tmp_path)
    write_lines(lists.allowlist_file, ["*.example.com", "# comment", "good.net"])
    assert lists.load_allowlist() == ["*.example.com", "good.net"]
