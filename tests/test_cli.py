from policypulse.__main__ import main


def _store(tmp_path):
    store = tmp_path / "store.json"
    (tmp_path / "policypulse_config.yaml").write_text(
        f"backend:\n  driver: json\n  path: '{store}'\n", encoding="utf-8"
    )
    return ["--config-dir", str(tmp_path)]


def test_create_vote_list(tmp_path, capsys):
    base = _store(tmp_path)
    assert main(base + ["create", "--address", "0xabc", "--category", "Economy", "--content", "cut fees"]) == 0
    out = capsys.readouterr().out.strip().splitlines()
    assert out[0] == "Encrypted proposal submitted anonymously!"
    pid = out[-1]

    assert main(base + ["vote", "--address", "0xdef", pid, "--up"]) == 0
    assert "1 up / 0 down" in capsys.readouterr().out

    assert main(base + ["list"]) == 0
    assert f"[{pid}] Economy by 0xabc" in capsys.readouterr().out


def test_vote_missing_fails(tmp_path, capsys):
    assert main(_store(tmp_path) + ["vote", "--address", "0xdef", "missing", "--down"]) == 1
    assert "Voting failed: Proposal not found: missing" in capsys.readouterr().err


def test_empty_list(tmp_path, capsys):
    assert main(_store(tmp_path) + ["list"]) == 0
    assert "No proposals." in capsys.readouterr().out
