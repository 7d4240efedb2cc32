"""Tests for foxforge.patches discovery and apply engine."""

import math

import pytest

from foxforge.git import (
    GitNotFoundError,
    PatchApplyError,
    get_all_diff,
    has_changes,
    reset_changes,
)
from foxforge.patches import (
    PatchProbe,
    apply_patch_idempotent,
    apply_patches,
    count_patches,
    discover_patches,
    extract_order,
    get_next_patch_number,
    probe_patch,
)


def _touch(directory, *names):
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_text("")


def _readme_patch(old: str, new: str) -> str:
    return (
        "diff --git a/README.md b/README.md\n"
        "--- a/README.md\n"
        "+++ b/README.md\n"
        "@@ -1 +1 @@\n"
        f"-{old}\n"
        f"+{new}\n"
    )


def _export(engine, patches_dir, filename, edits):
    """Make edits in the engine, save them as a patch, then reset."""
    for rel_path, content in edits.items():
        path = engine / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    patches_dir.mkdir(parents=True, exist_ok=True)
    patch_path = patches_dir / filename
    patch_path.write_text(get_all_diff(engine))
    reset_changes(engine)
    return patch_path


def _snapshot(engine):
    """Map of every non-git file to its bytes."""
    return {
        p.relative_to(engine).as_posix(): p.read_bytes()
        for p in sorted(engine.rglob("*"))
        if p.is_file() and ".git" not in p.relative_to(engine).parts
    }


class TestExtractOrder:
    """Tests for extract_order function."""

    def test_numeric_prefix(self):
        """Test numeric prefixes are parsed."""
        assert extract_order("001-branding.patch") == 1
        assert extract_order("42-foo.patch") == 42

    def test_no_prefix(self):
        """Test unprefixed names sort last."""
        assert extract_order("branding.patch") == math.inf
        assert extract_order("001branding.patch") == math.inf


class TestDiscoverPatches:
    """Tests for discover_patches function."""

    def test_missing_directory(self, temp_dir):
        """Test a missing directory is an empty patch set."""
        assert discover_patches(temp_dir / "patches") == []
        assert count_patches(temp_dir / "patches") == 0

    def test_orders_by_prefix(self, temp_dir):
        """Test numeric ordering, not string ordering."""
        _touch(temp_dir, "10-c.patch", "2-b.patch", "001-a.patch")

        names = [p.filename for p in discover_patches(temp_dir)]

        assert names == ["001-a.patch", "2-b.patch", "10-c.patch"]

    def test_unprefixed_last(self, temp_dir):
        """Test unprefixed patches come after all prefixed ones."""
        _touch(temp_dir, "aaa.patch", "999-z.patch", "001-a.patch")

        names = [p.filename for p in discover_patches(temp_dir)]

        assert names == ["001-a.patch", "999-z.patch", "aaa.patch"]

    def test_same_prefix_tie_break(self, temp_dir):
        """Test patches sharing a prefix are ordered by filename."""
        _touch(temp_dir, "005-b.patch", "005-a.patch", "zeta.patch", "alpha.patch")

        names = [p.filename for p in discover_patches(temp_dir)]

        assert names == ["005-a.patch", "005-b.patch", "alpha.patch", "zeta.patch"]

    def test_filters_extension(self, temp_dir):
        """Test only .patch files are included."""
        _touch(temp_dir, "001-a.patch", "002-b.diff", "README.md")
        (temp_dir / "003-dir.patch").mkdir()

        assert [p.filename for p in discover_patches(temp_dir)] == ["001-a.patch"]
        assert count_patches(temp_dir) == 1


class TestGetNextPatchNumber:
    """Tests for get_next_patch_number function."""

    def test_empty(self, temp_dir):
        """Test the first patch is 001."""
        assert get_next_patch_number(temp_dir) == "001"

    def test_after_gaps(self, temp_dir):
        """Test the maximum order is used, not the count."""
        _touch(temp_dir, "001-a.patch", "003-b.patch", "007-c.patch")

        assert get_next_patch_number(temp_dir) == "008"

    def test_only_unprefixed(self, temp_dir):
        """Test unprefixed patches do not count."""
        _touch(temp_dir, "a.patch", "b.patch")

        assert get_next_patch_number(temp_dir) == "001"

    def test_above_three_digits(self, temp_dir):
        """Test numbers past 999 are not truncated."""
        _touch(temp_dir, "999-a.patch")

        assert get_next_patch_number(temp_dir) == "1000"


class TestProbePatch:
    """Tests for probe_patch function."""

    def test_three_states(self, engine_repo, tmp_path):
        """Test applies, already applied and conflicts."""
        patch = _export(engine_repo, tmp_path / "patches", "001-a.patch", {"README.md": "# A\n"})

        assert probe_patch(engine_repo, patch) is PatchProbe.APPLIES

        (engine_repo / "README.md").write_text("# A\n")
        assert probe_patch(engine_repo, patch) is PatchProbe.ALREADY_APPLIED

        (engine_repo / "README.md").write_text("# Something else\n")
        assert probe_patch(engine_repo, patch) is PatchProbe.CONFLICTS

    def test_idempotent_apply_on_applied_patch(self, engine_repo, tmp_path):
        """Test an already applied patch leaves content unchanged."""
        patch = _export(engine_repo, tmp_path / "patches", "001-a.patch", {"README.md": "# A\n"})
        (engine_repo / "README.md").write_text("# A\n")

        probe = apply_patch_idempotent(engine_repo, patch)

        assert probe is PatchProbe.ALREADY_APPLIED
        assert (engine_repo / "README.md").read_text() == "# A\n"


class TestApplyPatches:
    """Tests for apply_patches function."""

    def test_empty_patch_set(self, engine_repo, tmp_path):
        """Test no patches means no results and no changes."""
        (tmp_path / "patches").mkdir()

        assert apply_patches(tmp_path / "patches", engine_repo) == []
        assert not has_changes(engine_repo)

    def test_missing_directory_skips_git_check(self, mocker, engine_repo, tmp_path):
        """Test an empty set succeeds even without git."""
        mocker.patch("foxforge.git.runner.shutil.which", return_value=None)

        assert apply_patches(tmp_path / "missing", engine_repo) == []

    def test_git_missing(self, mocker, engine_repo, tmp_path):
        """Test a missing git binary is raised, not reported per patch."""
        _touch(tmp_path / "patches", "001-a.patch")
        mocker.patch("foxforge.git.runner.shutil.which", return_value=None)

        with pytest.raises(GitNotFoundError):
            apply_patches(tmp_path / "patches", engine_repo)

    def test_applies_in_order(self, engine_repo, tmp_path):
        """Test dependent patches apply in prefix order."""
        patches = tmp_path / "patches"
        patches.mkdir()
        (patches / "002-second.patch").write_text(_readme_patch("# Step one", "# Step two"))
        (patches / "001-first.patch").write_text(_readme_patch("# Firefox", "# Step one"))

        results = apply_patches(patches, engine_repo)

        assert [r.patch.filename for r in results] == ["001-first.patch", "002-second.patch"]
        assert all(r.success for r in results)
        assert (engine_repo / "README.md").read_text() == "# Step two\n"

    def test_idempotent(self, engine_repo, tmp_path):
        """Test importing twice gives identical trees."""
        patches = tmp_path / "patches"
        _export(engine_repo, patches, "001-readme.patch", {"README.md": "# Custom\n"})
        _export(engine_repo, patches, "002-new-file.patch", {"browser/custom/new.js": "x = 1;\n"})
        _export(
            engine_repo,
            patches,
            "003-lib.patch",
            {"toolkit/lib.js": "function a() {\n  return 2;\n}\n"},
        )

        first = apply_patches(patches, engine_repo)
        after_first = _snapshot(engine_repo)
        second = apply_patches(patches, engine_repo)
        after_second = _snapshot(engine_repo)

        assert all(r.success for r in first)
        assert all(r.success for r in second)
        assert after_first == after_second
        assert (engine_repo / "browser/custom/new.js").read_text() == "x = 1;\n"

    def test_halts_at_first_failure(self, engine_repo, tmp_path):
        """Test patches after a failure are not attempted."""
        patches = tmp_path / "patches"
        _export(engine_repo, patches, "001-lib.patch", {"toolkit/lib.js": "changed\n"})
        (patches / "002-bad.patch").write_text(_readme_patch("# Not Firefox", "# Broken"))
        _export(engine_repo, patches, "003-new.patch", {"new.txt": "new\n"})

        results = apply_patches(patches, engine_repo)

        assert len(results) == 2
        assert results[0].success
        assert not results[1].success
        assert results[1].patch.filename == "002-bad.patch"
        assert results[1].error
        assert isinstance(results[1].cause, PatchApplyError)
        assert results[0].cause is None
        assert (engine_repo / "toolkit/lib.js").read_text() == "changed\n"
        assert (engine_repo / "README.md").read_text() == "# Firefox\n"
        assert not (engine_repo / "new.txt").exists()

    def test_round_trip(self, engine_repo, tmp_path):
        """Test export-all, reset, re-apply reproduces the tree."""
        (engine_repo / "README.md").write_text("# Custom\n")
        (engine_repo / "toolkit/lib.js").unlink()
        (engine_repo / "newdir").mkdir()
        (engine_repo / "newdir" / "a.txt").write_text("a\nb")
        (engine_repo / "empty.txt").write_text("")
        before = _snapshot(engine_repo)

        patches = tmp_path / "patches"
        patches.mkdir()
        (patches / "001-all.patch").write_text(get_all_diff(engine_repo))
        reset_changes(engine_repo)

        results = apply_patches(patches, engine_repo)

        assert all(r.success for r in results)
        assert _snapshot(engine_repo) == before

    def test_round_trip_non_ascii_paths(self, engine_repo, tmp_path):
        """Test new files with non-ASCII names survive export, reset and apply."""
        (engine_repo / "café.txt").write_text("hello\n")
        (engine_repo / "données").mkdir()
        (engine_repo / "données" / "résumé.txt").write_text("r\n")
        before = _snapshot(engine_repo)

        diff = get_all_diff(engine_repo)
        assert "+++ b/café.txt" in diff
        assert "\\303" not in diff

        patches = tmp_path / "patches"
        patches.mkdir()
        (patches / "001-all.patch").write_text(diff, encoding="utf-8")
        reset_changes(engine_repo)
        assert not (engine_repo / "café.txt").exists()

        results = apply_patches(patches, engine_repo)

        assert all(r.success for r in results)
        assert _snapshot(engine_repo) == before
