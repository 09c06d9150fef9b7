import pytest

import domaincheck
from domainlists.resolution import runner
from domainlists.resolution.dns_checker import DNSChecker

from conftest import SetResolver, read_lines, write_lines


@pytest.fixture
def fake_dns(monkeypatch):
    alive = set()

    def factory(config=None, resolver=None):
        return DNSChecker(dict(config or {}, progress_every=0), resolver=SetResolver(alive))

    monkeypatch.setattr(runner, 'DNSChecker', factory)
    monkeypatch.setattr(domaincheck, 'DNSChecker', factory)
    return alive


def test_no_command_prints_usage_and_fails(capsys):
    with pytest.raises(SystemExit) as exc:
        domaincheck.main([])
    assert exc.value.code != 0
    assert "usage" in capsys.readouterr().out.lower()


@pytest.mark.parametrize("argv", [["chunk"], ["chunk", "1"], ["update"], ["prune"]])
def test_missing_arguments_exit_with_usage(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        domaincheck.main(argv)
    assert exc.value.code == 2
    assert "usage" in capsys.readouterr().err.lower()


def test_chunk_index_out_of_range_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        domaincheck.main(["--base-dir", str(tmp_path), "chunk", "0", "3"])
    assert exc.value.code == 2


def test_update_command(tmp_path, fake_dns, capsys):
    fake_dns.add("live.example.com")
    candidates = write_lines(tmp_path / "candidates.txt", ["live.example.com", "dead.example.com"])

    domaincheck.main(["--base-dir", str(tmp_path), "update", str(candidates)])

    assert read_lines(tmp_path / "working_domains.txt") == ["live.example.com"]
    assert read_lines(tmp_path / "inactive_domains.txt") == ["dead.example.com"]
    assert "[OK]" in capsys.readouterr().out


def test_update_missing_candidates_exits_nonzero(tmp_path, fake_dns):
    with pytest.raises(SystemExit) as exc:
        domaincheck.main(["--base-dir", str(tmp_path), "update", str(tmp_path / "missing.txt")])
    assert exc.value.code == 1


def test_chunk_command(tmp_path, fake_dns):
    fake_dns.add("b.example.com")
    write_lines(tmp_path / "working_domains.txt", ["a.example.com", "b.example.com", "c.example.com"])

    domaincheck.main(["--base-dir", str(tmp_path), "chunk", "1", "2"])

    assert read_lines(tmp_path / "working_domains_chunk_1_result.txt") == ["b.example.com"]
    assert read_lines(tmp_path / "inactive_domains_chunk_1_result.txt") == ["a.example.com"]


def test_check_command_exit_code(tmp_path, fake_dns, capsys):
    fake_dns.add("live.example.com")

    domaincheck.main(["--base-dir", str(tmp_path), "check", "LIVE.example.com"])
    assert "ACTIVE" in capsys.readouterr().out

    with pytest.raises(SystemExit) as exc:
        domaincheck.main(["--base-dir", str(tmp_path), "check", "live.example.com", "dead.example.com"])
    assert exc.value.code == 1


def test_config_template_command(tmp_path):
    domaincheck.main(["config-template", str(tmp_path / "config.json")])
    assert (tmp_path / "config.json").exists()
