"""
Tests for player administration: batch rename/merge/delete over stored matches.
"""

import pytest

from conftest import ball, play
from turf_api.admin import DELETED_PLAYER, delete_player, list_player_names, rename_player
from turf_api.match_state import create_match, undo_last_ball
from turf_api.scorecard import match_to_dict


class TestRenamePlayer:

    def test_renames_everywhere(self, stored_matches):
        out, summary = rename_player(stored_matches, "Asha", "Asha K")

        assert summary.matches_affected == 2
        # m1: batting + bowling row, m2: batting row
        assert summary.records == 3

        first = out[0]
        assert list(first.innings[0].batting)[0] == "Asha K"
        assert first.innings[0].batting["Asha K"].runs == 5
        assert "Asha" not in first.innings[0].batting
        assert first.innings[1].bowling["Asha K"].wickets == 2
        assert first.innings[0].ball_by_ball[0].striker == "Asha K"
        assert first.innings[1].ball_by_ball[0].bowler == "Asha K"
        # m1 innings 1 ended with Asha back on strike
        assert first.innings[0].striker == "Asha K"

    def test_inputs_are_not_mutated(self, stored_matches):
        before = [match_to_dict(m) for m in stored_matches]
        rename_player(stored_matches, "Asha", "Asha K")
        assert [match_to_dict(m) for m in stored_matches] == before

    def test_untouched_matches_are_returned_as_is(self, stored_matches):
        out, summary = rename_player(stored_matches, "Chris", "Chris P")

        assert summary.matches_affected == 1
        assert out[1] is stored_matches[1]
        assert out[0] is not stored_matches[0]

    def test_rename_onto_existing_name_merges_rows(self, stored_matches):
        out, summary = rename_player(stored_matches, "Dev", "Bala")
        inn = out[0].innings[0]

        assert "Dev" not in inn.batting
        merged = inn.batting["Bala"]
        # Bala 6 (2 balls, out) + Dev 2 (2 balls, not out)
        assert (merged.runs, merged.balls, merged.sixes, merged.is_out) == (8, 4, 1, True)
        assert list(inn.batting) == ["Asha", "Bala"]

    def test_merge_bowling_rolls_balls_into_overs(self):
        m = create_match(2, ["A", "B"], 11)
        m = play(
            m,
            ball(0, striker="X", non_striker="Y", bowler="P"),
            ball(0), ball(0), ball(0),
            ball(0, bowler="Q"), ball(0),
            ball(0, bowler="Q"), ball(0), ball(0),
        )
        out, _ = rename_player([m], "Q", "P")
        row = out[0].innings[0].bowling["P"]

        assert (row.overs, row.balls) == (1, 3)

    @pytest.mark.parametrize("old,new", [("", "X"), ("X", "  "), ("Same", "Same")])
    def test_bad_names(self, stored_matches, old, new):
        with pytest.raises(ValueError):
            rename_player(stored_matches, old, new)

    def test_undo_still_works_after_rename(self, stored_matches):
        out, _ = rename_player(stored_matches, "Dev", "Devan")
        m = undo_last_ball(out[1])  # steps back into innings 1, undoes Devan's dot

        assert m.innings[0].batting["Devan"].balls == 2

    def test_renames_incoming_batsman_on_wicket_balls(self, stored_matches):
        out, _ = rename_player(stored_matches, "Dev", "Devan")

        wicket = out[0].innings[0].ball_by_ball[3]
        assert wicket.is_wicket is True
        assert wicket.new_batsman == "Devan"

        out, _ = delete_player(stored_matches, "Dev")
        assert out[0].innings[0].ball_by_ball[3].new_batsman == DELETED_PLAYER


class TestDeletePlayer:

    def test_removes_rows_and_relabels_history(self, stored_matches):
        out, summary = delete_player(stored_matches, "Asha")

        assert summary.matches_affected == 2
        assert summary.records == 3
        first = out[0]
        assert "Asha" not in first.innings[0].batting
        assert "Asha" not in first.innings[1].bowling
        assert first.innings[0].ball_by_ball[0].striker == DELETED_PLAYER
        assert first.innings[1].ball_by_ball[0].bowler == DELETED_PLAYER
        assert first.innings[0].striker is None
        # team totals stay
        assert first.innings[0].runs == 13

    def test_unknown_player_touches_nothing(self, stored_matches):
        out, summary = delete_player(stored_matches, "Nobody")

        assert summary.matches_affected == 0
        assert summary.records == 0
        assert all(a is b for a, b in zip(out, stored_matches))

    def test_blank_name(self, stored_matches):
        with pytest.raises(ValueError):
            delete_player(stored_matches, "  ")

    def test_undo_skips_deleted_rows(self, stored_matches):
        out, _ = delete_player(stored_matches, "Gita")
        m = undo_last_ball(out[0])

        assert m.status == "in_progress"
        assert m.innings[1].runs == 0
        assert m.innings[1].wickets == 1
        assert "Gita" not in m.innings[1].batting
        assert m.innings[1].bowling["Asha"].wickets == 1


def test_list_player_names(stored_matches):
    assert list_player_names(stored_matches) == [
        "Asha", "Bala", "Chris", "Dev", "Esha", "Farid", "Gita",
    ]
