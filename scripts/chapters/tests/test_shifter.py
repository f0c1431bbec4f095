"""Tests for the file shifter."""

import pytest

from scripts.chapters.errors import AlreadyExists
from scripts.chapters.shifter import Rename, ShiftPlan, apply_shift, plan_shift, shift_files


def _names(src):
    return sorted(p.name for p in src.glob("ch*.md"))


class TestPlanShift:
    """Tests for plan_shift."""

    def test_plans_highest_first(self, src_dir, config):
        plan = plan_shift(src_dir, 2, 3, config)
        assert [(r.source.name, r.target.name) for r in plan.renames] == [
            ("ch03-advanced.md", "ch04-advanced.md"),
            ("ch02-basics.md", "ch03-basics.md"),
        ]
        assert plan.warnings == []

    def test_append_plans_nothing(self, src_dir, config):
        plan = plan_shift(src_dir, 4, 3, config)
        assert plan.is_append
        assert plan.renames == []

    def test_plan_does_not_touch_disk(self, src_dir, config):
        before = _names(src_dir)
        plan_shift(src_dir, 1, 3, config)
        assert _names(src_dir) == before


class TestApplyShift:
    """Tests for apply_shift and shift_files."""

    def test_shift_from_first_position(self, src_dir, config):
        shift_files(src_dir, 1, 3, config)
        assert _names(src_dir) == [
            "ch02-getting-started.md",
            "ch03-basics.md",
            "ch04-advanced.md",
        ]

    def test_contents_move_with_files(self, src_dir, config):
        original = (src_dir / "ch02-basics.md").read_text()
        shift_files(src_dir, 2, 3, config)
        assert (src_dir / "ch03-basics.md").read_text() == original
        assert (src_dir / "ch01-getting-started.md").exists()

    def test_same_slug_chain_is_not_overwritten(self, tmp_path, config):
        """Neighbouring chapters sharing a slug survive a descending shift."""
        for i in (1, 2, 3):
            (tmp_path / f"ch0{i}-part.md").write_text(f"part {i}")
        shift_files(tmp_path, 1, 3, config)
        assert [(tmp_path / f"ch0{i}-part.md").read_text() for i in (2, 3, 4)] == [
            "part 1",
            "part 2",
            "part 3",
        ]
        assert not (tmp_path / "ch01-part.md").exists()

    def test_apply_returns_renames_in_order(self, src_dir, config):
        plan = plan_shift(src_dir, 2, 3, config)
        done = apply_shift(plan)
        assert [r.position for r in done] == [3, 2]


class TestGaps:
    """A pre-existing gap is skipped with a warning, not repaired."""

    def test_missing_file_is_warned_and_skipped(self, src_dir, config):
        (src_dir / "ch02-basics.md").unlink()
        (src_dir / "ch03-advanced.md").rename(src_dir / "ch04-advanced.md")
        (src_dir / "ch02-basics.md").write_text("# Basics\n")

        plan = shift_files(src_dir, 2, 4, config)

        assert [w.position for w in plan.warnings] == [3]
        assert "ch03" in str(plan.warnings[0])
        assert _names(src_dir) == [
            "ch01-getting-started.md",
            "ch03-basics.md",
            "ch05-advanced.md",
        ]


class TestCollisions:
    """A leftover duplicate on a rename target is never overwritten."""

    @pytest.fixture
    def duplicated(self, tmp_path):
        for name, body in [
            ("ch01-a.md", "one"),
            ("ch02-b.md", "two b"),
            ("ch03-a.md", "three a"),
            ("ch03-b.md", "leftover three b"),
        ]:
            (tmp_path / name).write_text(body)
        return tmp_path

    def _contents(self, src):
        return {p.name: p.read_text() for p in sorted(src.iterdir())}

    def test_plan_raises_before_anything_moves(self, duplicated, config):
        before = self._contents(duplicated)

        with pytest.raises(AlreadyExists) as exc_info:
            plan_shift(duplicated, 2, 3, config)

        assert exc_info.value.file == str(duplicated / "ch03-b.md")
        assert exc_info.value.position == 3
        assert self._contents(duplicated) == before

    def test_shift_files_raises_without_data_loss(self, duplicated, config):
        before = self._contents(duplicated)
        with pytest.raises(AlreadyExists):
            shift_files(duplicated, 2, 3, config)
        assert self._contents(duplicated) == before

    def test_apply_refuses_occupied_target(self, tmp_path):
        (tmp_path / "ch02-x.md").write_text("moving")
        (tmp_path / "ch03-x.md").write_text("occupant")
        plan = ShiftPlan(new_pos=2, highest=2, renames=[
            Rename(position=2, source=tmp_path / "ch02-x.md", target=tmp_path / "ch03-x.md"),
        ])

        with pytest.raises(AlreadyExists):
            apply_shift(plan)

        assert (tmp_path / "ch02-x.md").read_text() == "moving"
        assert (tmp_path / "ch03-x.md").read_text() == "occupant"
