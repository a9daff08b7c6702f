"""Tests for the generator CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import console_gen
from console_selectors import GenerationError
from console_templates import ARGS_FILE, OUTPUTS, SOL_FILE


class TestWrite:
    def test_writes_both_files(self, tmp_path: Path, rendered: dict) -> None:
        console_gen.main(["--out-dir", str(tmp_path), "--quiet"])
        for name in OUTPUTS:
            assert (tmp_path / name).read_text(encoding="utf-8") == rendered[name]

    def test_creates_out_dir(self, tmp_path: Path) -> None:
        out = tmp_path / "nested" / "console"
        console_gen.main(["--out-dir", str(out), "--quiet"])
        assert (out / SOL_FILE).exists()

    def test_rerun_is_byte_identical(self, tmp_path: Path) -> None:
        console_gen.main(["--out-dir", str(tmp_path), "--quiet"])
        first = {n: (tmp_path / n).read_bytes() for n in OUTPUTS}
        console_gen.main(["--out-dir", str(tmp_path), "--quiet"])
        assert {n: (tmp_path / n).read_bytes() for n in OUTPUTS} == first

    def test_logs_to_stderr(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        console_gen.main(["--out-dir", str(tmp_path)])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Signatures=375" in captured.err
        assert f"Wrote {tmp_path / ARGS_FILE}" in captured.err


class TestCheck:
    def test_up_to_date(self, tmp_path: Path) -> None:
        console_gen.main(["--out-dir", str(tmp_path), "--quiet"])
        console_gen.main(["--out-dir", str(tmp_path), "--quiet", "--check"])

    def test_stale_file_exits_2(self, tmp_path: Path) -> None:
        console_gen.main(["--out-dir", str(tmp_path), "--quiet"])
        (tmp_path / SOL_FILE).write_text("// edited\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            console_gen.main(["--out-dir", str(tmp_path), "--quiet", "--check"])
        assert exc.value.code == 2
        assert (tmp_path / SOL_FILE).read_text(encoding="utf-8") == "// edited\n"

    def test_missing_files_reported(self, tmp_path: Path, rendered: dict) -> None:
        assert console_gen.stale_outputs(tmp_path, rendered) == list(OUTPUTS)

    def test_out_dir_is_a_file_exits_1(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        target = tmp_path / "f"
        target.write_text("", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            console_gen.main(["--out-dir", str(target), "--quiet", "--check"])
        assert exc.value.code == 1
        assert "❌" in capsys.readouterr().err

    def test_undecodable_file_exits_1(self, tmp_path: Path) -> None:
        (tmp_path / ARGS_FILE).write_bytes(b"\xff\xfe\x00")
        with pytest.raises(SystemExit) as exc:
            console_gen.main(["--out-dir", str(tmp_path), "--quiet", "--check"])
        assert exc.value.code == 1


class TestErrors:
    def test_invalid_address_exits_2(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            console_gen.main(["--out-dir", str(tmp_path), "--address", "0xnope", "--quiet"])
        assert exc.value.code == 2
        assert list(tmp_path.iterdir()) == []

    def test_render_failure_writes_nothing(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def boom(model):
            raise GenerationError("failed to render console.sol: boom")

        monkeypatch.setattr(console_gen, "render_all", boom)
        with pytest.raises(SystemExit) as exc:
            console_gen.main(["--out-dir", str(tmp_path), "--quiet"])
        assert exc.value.code == 1
        assert list(tmp_path.iterdir()) == []

    def test_unwritable_destination_exits_1(self, tmp_path: Path) -> None:
        target = tmp_path / "not-a-dir"
        target.write_text("", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            console_gen.main(["--out-dir", str(target), "--quiet"])
        assert exc.value.code == 1

    def test_failed_write_leaves_no_partial_output(self, tmp_path: Path) -> None:
        (tmp_path / SOL_FILE).mkdir()
        with pytest.raises(SystemExit) as exc:
            console_gen.main(["--out-dir", str(tmp_path), "--quiet"])
        assert exc.value.code == 1
        assert not (tmp_path / ARGS_FILE).exists()
        assert sorted(p.name for p in tmp_path.iterdir()) == [SOL_FILE]

    def test_failed_replace_restores_previous_files(
        self, tmp_path: Path, rendered: dict, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / ARGS_FILE).write_text("# old\n", encoding="utf-8")
        real_replace = console_gen.os.replace

        def replace(src, dst):
            if Path(dst).name == SOL_FILE:
                raise PermissionError("read-only")
            real_replace(src, dst)

        monkeypatch.setattr(console_gen.os, "replace", replace)
        with pytest.raises(PermissionError):
            console_gen.write_outputs(tmp_path, rendered)
        assert (tmp_path / ARGS_FILE).read_text(encoding="utf-8") == "# old\n"
        assert sorted(p.name for p in tmp_path.iterdir()) == [ARGS_FILE]


class TestJson:
    def test_json_catalogue(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        console_gen.main(["--out-dir", str(tmp_path), "--quiet", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data["count"] == 375
        assert data["entries"][0]["sig"] == "log()"

    def test_raw_json_is_single_line(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        console_gen.main(["--out-dir", str(tmp_path), "--quiet", "--raw-json"])
        out = capsys.readouterr().out
        assert out.count("\n") == 1
        assert json.loads(out)["count"] == 375
