from tools.check_determinism import main, scan


def test_engine_tree_is_clean(capsys):
    assert main([]) == 0
    assert "[OK]" in capsys.readouterr().out


def test_flags_randomness_and_clock(tmp_path):
    bad = tmp_path / "bad.py"
    bad.write_text("import random\nfrom datetime import datetime\nnow = datetime.now()\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("import random\n", encoding="utf-8")

    hits = scan([tmp_path])
    assert [(fp.name, ln) for fp, ln, _, _ in hits] == [("bad.py", 1), ("bad.py", 3)]
    assert main([str(tmp_path)]) == 1


def test_single_file_target(tmp_path):
    ok = tmp_path / "ok.py"
    ok.write_text("current_year = 2026\n", encoding="utf-8")
    assert main([str(ok)]) == 0
