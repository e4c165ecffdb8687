"""
Tests for the gesture mapper.
"""

import random

import pytest

from handmap.config import FilteringConfig, MapperConfig
from handmap.core.mapper import GestureMapper
from handmap.core.mapping import (
    FilterType,
    GestureInput,
    GestureType,
    MappingCurve,
    MappingState,
    ParameterOutput,
    SmoothingConfig,
    create_mapping,
)
from handmap.types import Handedness, HandLandmark

FRAME_MS = 1000.0 / 60.0

PASSTHROUGH = SmoothingConfig(type=FilterType.NONE)


def wrist_x_mapping(mapping_id="wrist-x", hand="any", smoothing=PASSTHROUGH, target="synth"):
    return create_mapping(
        mapping_id,
        "Wrist X",
        GestureInput(type=GestureType.WRIST_POSITION_X, hand=hand, input_range=(0.0, 1.0)),
        ParameterOutput(target, "detune", output_range=(0.0, 100.0)),
        smoothing,
    )


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, target_id, parameter_name, value):
        self.calls.append((target_id, parameter_name, value))


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def mapper(recorder):
    return GestureMapper(on_output=recorder)


def at_x(make_hand, x, handedness=Handedness.RIGHT):
    return make_hand(handedness=handedness, shift=(x - 0.5, 0.0, 0.0))


class TestRegistry:
    def test_add_creates_zeroed_state(self, mapper):
        mapper.add_mapping(wrist_x_mapping())

        assert "wrist-x" in mapper
        assert len(mapper) == 1
        assert mapper.get_state("wrist-x") == MappingState(0.0, 0.0, 0.0, 0.0)

    def test_duplicate_id_rejected(self, mapper):
        mapper.add_mapping(wrist_x_mapping())
        with pytest.raises(ValueError):
            mapper.add_mapping(wrist_x_mapping())

    def test_unknown_id_rejected(self, mapper):
        with pytest.raises(KeyError):
            mapper.remove_mapping("missing")
        with pytest.raises(KeyError):
            mapper.update_mapping("missing", name="x")
        with pytest.raises(KeyError):
            mapper.set_mapping_enabled("missing", False)
        with pytest.raises(KeyError):
            mapper.get_state("missing")

    def test_remove_drops_state(self, mapper):
        mapper.add_mapping(wrist_x_mapping())
        mapper.remove_mapping("wrist-x")

        assert "wrist-x" not in mapper
        assert mapper.get_all_states() == {}

    def test_update_cannot_change_id(self, mapper):
        mapper.add_mapping(wrist_x_mapping())
        with pytest.raises(ValueError):
            mapper.update_mapping("wrist-x", id="other")

    def test_update_unknown_field(self, mapper):
        mapper.add_mapping(wrist_x_mapping())
        with pytest.raises(TypeError):
            mapper.update_mapping("wrist-x", colour="red")

    def test_registered_mapping_is_a_copy(self, mapper):
        mapping = wrist_x_mapping()
        mapper.add_mapping(mapping)
        mapping.enabled = False

        assert mapper.get_mapping("wrist-x").enabled is True

    def test_state_snapshots_are_read_only(self, mapper, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping())
        mapper.process(make_frame(0.0, at_x(make_hand, 0.3)))

        snapshot = mapper.get_state("wrist-x")
        snapshot.output_value = -1.0

        assert mapper.get_state("wrist-x").output_value == pytest.approx(30.0)


class TestProcess:
    def test_zero_bootstrap_fps_still_builds_filters(self, make_hand, make_frame):
        mapper = GestureMapper(MapperConfig(filtering=FilteringConfig(bootstrap_fps=0)))
        mapper.add_mapping(wrist_x_mapping(smoothing=SmoothingConfig(type=FilterType.ONE_EURO)))

        mapper.process(make_frame(0.0, at_x(make_hand, 0.4)))

        assert mapper.get_state("wrist-x").output_value == pytest.approx(40.0)

    def test_emits_output(self, mapper, recorder, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping())
        states = mapper.process(make_frame(100.0, at_x(make_hand, 0.25)))

        assert recorder.calls == [("synth", "detune", pytest.approx(25.0))]
        assert states["wrist-x"].raw_value == pytest.approx(0.25)
        assert states["wrist-x"].last_update == 100.0

    def test_pinch_to_filter_cutoff_converges(self, mapper, make_hand, make_frame):
        mapping = create_mapping(
            "pinch",
            "Pinch → Filter Cutoff",
            GestureInput(
                type=GestureType.PINCH_DISTANCE,
                hand=Handedness.RIGHT,
                input_range=(0.02, 0.15),
                curve=MappingCurve.SMOOTH_STEP,
            ),
            ParameterOutput("filter", "cutoff", output_range=(0.1, 1.0)),
            SmoothingConfig(type=FilterType.ONE_EURO, min_cutoff=1.5, beta=0.01),
        )
        mapper.add_mapping(mapping)
        hand = make_hand(overrides={HandLandmark.THUMB_TIP: (0.47, 0.42, 0.0)})

        for i in range(30):
            mapper.process(make_frame(i * FRAME_MS, hand))

        state = mapper.get_state("pinch")
        assert state.raw_value == pytest.approx(0.02)
        assert state.output_value == pytest.approx(0.10, abs=1e-3)

    def test_missing_hand_skips_mapping(self, mapper, recorder, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping(hand=Handedness.LEFT))
        mapper.process(make_frame(0.0, at_x(make_hand, 0.4, Handedness.LEFT)))
        before = mapper.get_state("wrist-x")

        mapper.process(make_frame(FRAME_MS, at_x(make_hand, 0.9, Handedness.RIGHT)))
        mapper.process(make_frame(2 * FRAME_MS))

        assert len(recorder.calls) == 1
        assert mapper.get_state("wrist-x") == before

    def test_any_uses_first_hand(self, mapper, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping())
        mapper.process(make_frame(
            0.0,
            at_x(make_hand, 0.7, Handedness.LEFT),
            at_x(make_hand, 0.2, Handedness.RIGHT),
        ))

        assert mapper.get_state("wrist-x").raw_value == pytest.approx(0.7)

    def test_handedness_match(self, mapper, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping(hand="Right"))
        mapper.process(make_frame(
            0.0,
            at_x(make_hand, 0.7, Handedness.LEFT),
            at_x(make_hand, 0.2, Handedness.RIGHT),
        ))

        assert mapper.get_state("wrist-x").raw_value == pytest.approx(0.2)

    def test_timestamp_units_are_equivalent(self, make_hand, make_frame):
        smoothing = SmoothingConfig(type=FilterType.ONE_EURO, min_cutoff=1.0, beta=0.5)
        in_ms = GestureMapper(MapperConfig(timestamp_unit="ms"))
        in_s = GestureMapper(MapperConfig(timestamp_unit="s"))
        in_ms.add_mapping(wrist_x_mapping(smoothing=smoothing))
        in_s.add_mapping(wrist_x_mapping(smoothing=smoothing))

        for i, x in enumerate([0.2, 0.5, 0.4, 0.8, 0.6]):
            in_ms.process(make_frame(i * FRAME_MS, at_x(make_hand, x)))
            in_s.process(make_frame(i / 60.0, at_x(make_hand, x)))

        assert in_ms.get_state("wrist-x").smoothed_value == pytest.approx(
            in_s.get_state("wrist-x").smoothed_value
        )

    def test_non_finite_value_skipped(self, mapper, recorder, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping())
        broken = make_hand(overrides={HandLandmark.WRIST: (float("nan"), 0.8, 0.0)})

        mapper.process(make_frame(0.0, broken))

        assert recorder.calls == []
        assert mapper.get_state("wrist-x").raw_value == 0.0

    def test_failing_callback_does_not_stop_frame(self, make_hand, make_frame):
        def explode(target_id, parameter_name, value):
            raise RuntimeError("consumer went away")

        mapper = GestureMapper(on_output=explode)
        mapper.add_mapping(wrist_x_mapping("a"))
        mapper.add_mapping(wrist_x_mapping("b"))

        mapper.process(make_frame(0.0, at_x(make_hand, 0.5)))

        assert mapper.get_state("a").output_value == pytest.approx(50.0)
        assert mapper.get_state("b").output_value == pytest.approx(50.0)

    def test_set_output_callback(self, make_hand, make_frame):
        mapper = GestureMapper()
        mapper.add_mapping(wrist_x_mapping())
        mapper.process(make_frame(0.0, at_x(make_hand, 0.5)))

        recorder = Recorder()
        mapper.set_output_callback(recorder)
        mapper.process(make_frame(FRAME_MS, at_x(make_hand, 0.5)))

        assert len(recorder.calls) == 1


class TestEnableDisable:
    def smoothed(self, mapper):
        return mapper.get_state("wrist-x").smoothed_value

    def test_disable_freezes_state_and_keeps_filter(self, mapper, recorder, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping(smoothing=SmoothingConfig(type="low-pass", factor=0.5)))
        mapper.process(make_frame(0.0, at_x(make_hand, 0.2)))
        mapper.process(make_frame(FRAME_MS, at_x(make_hand, 0.4)))
        assert self.smoothed(mapper) == pytest.approx(0.3)

        mapper.set_mapping_enabled("wrist-x", False)
        frozen = mapper.get_state("wrist-x")
        mapper.process(make_frame(2 * FRAME_MS, at_x(make_hand, 0.9)))

        assert len(recorder.calls) == 2
        assert mapper.get_state("wrist-x") == frozen

        mapper.set_mapping_enabled("wrist-x", True)
        mapper.process(make_frame(3 * FRAME_MS, at_x(make_hand, 0.8)))

        assert self.smoothed(mapper) == pytest.approx(0.55)

    def test_smoothing_change_while_disabled_resets_filter(self, mapper, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping(smoothing=SmoothingConfig(type="low-pass", factor=0.5)))
        mapper.process(make_frame(0.0, at_x(make_hand, 0.2)))

        mapper.set_mapping_enabled("wrist-x", False)
        mapper.update_mapping("wrist-x", smoothing=SmoothingConfig(type="low-pass", factor=0.9))
        mapper.set_mapping_enabled("wrist-x", True)
        mapper.process(make_frame(FRAME_MS, at_x(make_hand, 0.8)))

        assert self.smoothed(mapper) == pytest.approx(0.8)

    def test_other_updates_keep_filter_history(self, mapper, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping(smoothing=SmoothingConfig(type="low-pass", factor=0.5)))
        mapper.process(make_frame(0.0, at_x(make_hand, 0.2)))

        mapper.update_mapping("wrist-x", output=ParameterOutput("synth", "pan", output_range=(0.0, 1.0)))
        mapper.update_mapping("wrist-x", smoothing=SmoothingConfig(type="low-pass", factor=0.5))
        mapper.process(make_frame(FRAME_MS, at_x(make_hand, 0.8)))

        assert self.smoothed(mapper) == pytest.approx(0.5)
        assert mapper.get_state("wrist-x").output_value == pytest.approx(0.5)


class TestFilterIsolation:
    def test_same_gesture_different_smoothing_diverges(self, mapper, make_hand, make_frame):
        mapper.add_mapping(wrist_x_mapping("raw", smoothing=PASSTHROUGH))
        mapper.add_mapping(wrist_x_mapping("smooth", smoothing=SmoothingConfig(type="low-pass", factor=0.9)))
        mapper.add_mapping(wrist_x_mapping("smooth-too", smoothing=SmoothingConfig(type="low-pass", factor=0.9)))

        rng = random.Random(7)
        for i in range(20):
            x = 0.5 + rng.uniform(-0.1, 0.1)
            mapper.process(make_frame(i * FRAME_MS, at_x(make_hand, x)))

        states = mapper.get_all_states()
        assert states["raw"].smoothed_value != pytest.approx(states["smooth"].smoothed_value)
        assert states["smooth"].smoothed_value == pytest.approx(states["smooth-too"].smoothed_value)
        assert mapper._filters["smooth"] is not mapper._filters["smooth-too"]


class TestVelocity:
    def velocity_mapping(self, mapping_id, gesture_type=GestureType.VELOCITY_X):
        return create_mapping(
            mapping_id,
            "Velocity",
            GestureInput(type=gesture_type, hand=Handedness.RIGHT, input_range=(0.0, 0.01)),
            ParameterOutput("fx", mapping_id),
            PASSTHROUGH,
        )

    def test_first_frame_is_zero(self, mapper, make_hand, make_frame):
        mapper.add_mapping(self.velocity_mapping("vx"))
        mapper.process(make_frame(500.0, at_x(make_hand, 0.5)))

        assert mapper.get_state("vx").raw_value == 0.0

    def test_mappings_share_previous_landmarks(self, mapper, make_hand, make_frame):
        mapper.add_mapping(self.velocity_mapping("vx-a"))
        mapper.add_mapping(self.velocity_mapping("vx-b"))
        mapper.add_mapping(self.velocity_mapping("vy", GestureType.VELOCITY_Y))

        mapper.process(make_frame(0.0, at_x(make_hand, 0.5)))
        mapper.process(make_frame(100.0, make_hand(shift=(0.1, -0.05, 0.0))))

        states = mapper.get_all_states()
        assert states["vx-a"].raw_value == pytest.approx(0.001)
        assert states["vx-b"].raw_value == pytest.approx(0.001)
        assert states["vy"].raw_value == pytest.approx(0.0005)

    def test_history_is_per_handedness(self, mapper, make_hand, make_frame):
        mapper.add_mapping(self.velocity_mapping("vx"))
        mapper.add_mapping(wrist_x_mapping("left-x", hand=Handedness.LEFT))

        mapper.process(make_frame(0.0, at_x(make_hand, 0.1, Handedness.LEFT)))
        mapper.process(make_frame(100.0, at_x(make_hand, 0.9, Handedness.RIGHT)))

        assert mapper.get_state("vx").raw_value == 0.0

    def test_repeated_timestamp_is_zero(self, mapper, make_hand, make_frame):
        mapper.add_mapping(self.velocity_mapping("vx"))
        mapper.process(make_frame(100.0, at_x(make_hand, 0.5)))
        mapper.process(make_frame(100.0, at_x(make_hand, 0.7)))

        assert mapper.get_state("vx").raw_value == 0.0

    def test_reset_clears_history(self, mapper, make_hand, make_frame):
        mapper.add_mapping(self.velocity_mapping("vx"))
        mapper.process(make_frame(0.0, at_x(make_hand, 0.5)))
        mapper.process(make_frame(100.0, at_x(make_hand, 0.6)))

        mapper.reset()
        assert mapper.get_state("vx") == MappingState()

        mapper.process(make_frame(200.0, at_x(make_hand, 0.9)))
        assert mapper.get_state("vx").raw_value == 0.0


class TestExternalInput:
    def external_mapping(self):
        return create_mapping(
            "slider",
            "Slider",
            GestureInput(type=GestureType.EXTERNAL, external_key="fader", input_range=(0.0, 10.0)),
            ParameterOutput("mixer", "level", output_range=(0.0, 1.0)),
            PASSTHROUGH,
        )

    def test_value_supplied_without_hands(self, mapper, recorder, make_frame):
        mapper.add_mapping(self.external_mapping())
        mapper.process(make_frame(0.0, external_values={"fader": 2.5}))

        assert recorder.calls == [("mixer", "level", pytest.approx(0.25))]

    def test_absent_value_skips_mapping(self, mapper, recorder, make_hand, make_frame):
        mapper.add_mapping(self.external_mapping())
        mapper.process(make_frame(0.0, make_hand(), external_values={"other": 1.0}))

        assert recorder.calls == []

    def test_requires_key(self):
        with pytest.raises(ValueError):
            GestureInput(type=GestureType.EXTERNAL)
