"""Tests for expanding lap sequences into movelaps."""

from __future__ import annotations

from plancore.services.movelap_generator import LapSequence, describe_sequences, generate_movelaps, validate_sequences


def _swim_sets():
    return [
        LapSequence(repetitions=4, distance=100, pause="20\"", end_pause="1'", speed="A2", style="Freestyle"),
        LapSequence(repetitions=2, distance=200, pause="30\"", speed="A1", style="Back"),
    ]


def test_generate_one_lap_per_repetition():
    laps = generate_movelaps(_swim_sets(), pace="1:45")
    assert [lap.index for lap in laps] == [1, 2, 3, 4, 5, 6]
    assert [lap.distance for lap in laps] == [100, 100, 100, 100, 200, 200]
    assert all(lap.origin == "NEW" for lap in laps)
    assert all(lap.pace == "1:45" for lap in laps)
    assert len({lap.id for lap in laps}) == 6


def test_last_repetition_takes_end_pause():
    laps = generate_movelaps(_swim_sets())
    assert [lap.pause for lap in laps[:4]] == ["20\"", "20\"", "20\"", "1'"]
    assert laps[5].pause == "30\""


def test_generate_empty():
    assert generate_movelaps([]) == ()


def test_describe_swim():
    text = describe_sequences("swim", _swim_sets())
    assert text == "100m x 4 A2 Freestyle pause 20\" + 1' + 200m x 2 A1 Back pause 30\""


def test_describe_body_building():
    seq = LapSequence(repetitions=1, reps=12, sets=3, exercise="Squat", pause="90\"")
    assert describe_sequences("BODY_BUILDING", [seq]) == "Squat 12 reps x 3 sets pause 90\""


def test_describe_empty():
    assert describe_sequences("RUN", []) == "Empty moveframe"


def test_validate_distance_sport():
    errors = validate_sequences("RUN", [LapSequence(repetitions=0)])
    assert errors == ["Sequence 1: Repetitions must be at least 1, Pause is required, Distance/meters is required, Speed is required, Style is required"]


def test_validate_bike_needs_no_style():
    seq = LapSequence(repetitions=3, distance=1000, pause="1'", speed="B3")
    assert validate_sequences("BIKE", [seq]) == []


def test_validate_body_building():
    errors = validate_sequences("BODY_BUILDING", [LapSequence(repetitions=1, pause="1'")])
    assert errors == ["Sequence 1: Exercise is required, Reps per set is required, Number of sets is required"]


def test_validate_ok():
    assert validate_sequences("SWIM", _swim_sets()) == []
