"""
Gesture mapper.

Owns the mapping registry and drives per-frame processing:
extraction -> smoothing -> curve mapping -> output callback.
"""

import copy
import dataclasses
import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np
from numpy.typing import NDArray

from handmap.config import MapperConfig
from handmap.core.curves import apply_mapping
from handmap.core.geometry import extract_gesture_value
from handmap.core.mapping import GestureMapping, GestureType, MappingState, SmoothingConfig
from handmap.filters.base import TemporalFilter
from handmap.filters.smoothing import create_filter
from handmap.types import ANY_HAND, FrameObservation, HandObservation, Handedness, HandSelector

logger = logging.getLogger(__name__)

# (target_id, parameter_name, value)
OutputCallback = Callable[[str, str, float], None]


class GestureMapper:
    """
    Maps hand gesture values to named output parameters.

    Each registered mapping owns exactly one filter instance and one state
    record. The previous-frame landmark cache is shared by all mappings and
    keyed by handedness.

    A mapper is not thread-safe; drive each instance from a single thread.
    """

    def __init__(
        self,
        config: Optional[MapperConfig] = None,
        on_output: Optional[OutputCallback] = None,
    ):
        self.config = config or MapperConfig()

        self._mappings: Dict[str, GestureMapping] = {}
        self._filters: Dict[str, TemporalFilter] = {}
        self._states: Dict[str, MappingState] = {}

        self._previous_landmarks: Dict[Handedness, NDArray[np.float64]] = {}
        self._previous_timestamp: Optional[float] = None

        self._on_output = on_output

    def __len__(self) -> int:
        return len(self._mappings)

    def __contains__(self, mapping_id: str) -> bool:
        return mapping_id in self._mappings

    def set_output_callback(self, callback: Optional[OutputCallback]):
        """Set the callback receiving (target_id, parameter_name, value)."""
        self._on_output = callback

    def add_mapping(self, mapping: GestureMapping):
        """Register a mapping with a fresh filter and zeroed state."""
        if mapping.id in self._mappings:
            raise ValueError(f"Mapping already registered: {mapping.id}")

        self._mappings[mapping.id] = copy.deepcopy(mapping)
        self._filters[mapping.id] = self._create_filter(mapping.smoothing)
        self._states[mapping.id] = MappingState()

        logger.info(
            f"Added mapping '{mapping.id}': {mapping.input.type.value} -> "
            f"{mapping.output.target_id}.{mapping.output.parameter_name}"
        )

    def remove_mapping(self, mapping_id: str):
        """Remove a mapping together with its filter and state."""
        self._require(mapping_id)

        del self._mappings[mapping_id]
        del self._filters[mapping_id]
        del self._states[mapping_id]

        logger.info(f"Removed mapping '{mapping_id}'")

    def update_mapping(self, mapping_id: str, **updates):
        """
        Merge field updates into a registered mapping.

        The filter is rebuilt, losing its history, only when the smoothing
        configuration changes.

        Args:
            mapping_id: Mapping to update
            **updates: GestureMapping fields to replace
        """
        mapping = self._require(mapping_id)

        if "id" in updates and updates["id"] != mapping_id:
            raise ValueError(f"Cannot change id of mapping '{mapping_id}'")

        updated = copy.deepcopy(dataclasses.replace(mapping, **updates))
        self._mappings[mapping_id] = updated

        if updated.smoothing != mapping.smoothing:
            self._filters[mapping_id] = self._create_filter(updated.smoothing)
            logger.debug(f"Rebuilt {updated.smoothing.type.value} filter for '{mapping_id}'")

    def set_mapping_enabled(self, mapping_id: str, enabled: bool):
        """Enable or disable a mapping without touching its filter or state."""
        self._require(mapping_id).enabled = enabled

    def get_mapping(self, mapping_id: str) -> GestureMapping:
        """Get a copy of a registered mapping."""
        return copy.deepcopy(self._require(mapping_id))

    def get_mappings(self) -> List[GestureMapping]:
        """Get copies of all registered mappings in registration order."""
        return [copy.deepcopy(m) for m in self._mappings.values()]

    def get_state(self, mapping_id: str) -> MappingState:
        """Get a snapshot of a mapping's current state."""
        self._require(mapping_id)
        return dataclasses.replace(self._states[mapping_id])

    def get_all_states(self) -> Dict[str, MappingState]:
        """Get snapshots of all mapping states."""
        return {k: dataclasses.replace(v) for k, v in self._states.items()}

    def process(self, frame: FrameObservation) -> Dict[str, MappingState]:
        """
        Process one frame and update all enabled mappings.

        Mappings whose hand (or external value) is missing from the frame are
        skipped and keep their previous state.

        Args:
            frame: Hands observed in this frame

        Returns:
            Snapshots of all mapping states after the frame
        """
        if self._previous_timestamp is None:
            dt = 0.0
        else:
            dt = frame.timestamp - self._previous_timestamp
        self._previous_timestamp = frame.timestamp

        timestamp_s = frame.timestamp * self.config.seconds_per_unit

        # Velocity mappings all read the cache as it was at frame start
        previous_landmarks = dict(self._previous_landmarks)
        observed: Dict[Handedness, NDArray[np.float64]] = {}
        hand_arrays: Dict[int, NDArray[np.float64]] = {}
        emitted = 0

        for mapping_id, mapping in self._mappings.items():
            if not mapping.enabled:
                continue

            hand = None
            if mapping.input.type is GestureType.EXTERNAL:
                if mapping.input.external_key not in frame.external_values:
                    logger.debug(f"Skipping '{mapping_id}': no external value this frame")
                    continue
                raw_value = float(frame.external_values[mapping.input.external_key])
            else:
                hand = self._find_hand(frame.hands, mapping.input.hand)
                if hand is None:
                    logger.debug(f"Skipping '{mapping_id}': no {mapping.input.hand} hand this frame")
                    continue

                if id(hand) not in hand_arrays:
                    hand_arrays[id(hand)] = hand.as_array()
                landmarks = hand_arrays[id(hand)]

                raw_value = extract_gesture_value(
                    landmarks,
                    mapping.input,
                    previous_landmarks.get(hand.handedness),
                    dt,
                )
                observed[hand.handedness] = landmarks

            if not math.isfinite(raw_value):
                logger.debug(f"Skipping '{mapping_id}': non-finite gesture value")
                continue

            smoothed_value = float(self._filters[mapping_id].filter(raw_value, timestamp_s))
            output_value = apply_mapping(smoothed_value, mapping.input, mapping.output)

            self._states[mapping_id] = MappingState(
                raw_value=raw_value,
                smoothed_value=smoothed_value,
                output_value=output_value,
                last_update=frame.timestamp,
            )

            self._emit(mapping, output_value)
            emitted += 1

        self._previous_landmarks.update(observed)

        logger.debug(f"Frame at {frame.timestamp}: {emitted}/{len(self._mappings)} mappings updated")

        return self.get_all_states()

    def reset(self):
        """Reset all filters, zero all states and clear frame history."""
        for f in self._filters.values():
            f.reset()
        for mapping_id in self._states:
            self._states[mapping_id] = MappingState()
        self._previous_landmarks.clear()
        self._previous_timestamp = None

    def _emit(self, mapping: GestureMapping, value: float):
        if self._on_output is None:
            return
        try:
            self._on_output(mapping.output.target_id, mapping.output.parameter_name, value)
        except Exception:
            logger.exception(f"Output callback failed for mapping '{mapping.id}'")

    def _create_filter(self, smoothing: SmoothingConfig) -> TemporalFilter:
        return create_filter(smoothing, bootstrap_fps=self.config.filtering.bootstrap_fps)

    def _require(self, mapping_id: str) -> GestureMapping:
        mapping = self._mappings.get(mapping_id)
        if mapping is None:
            raise KeyError(f"Unknown mapping: {mapping_id}")
        return mapping

    @staticmethod
    def _find_hand(
        hands: List[HandObservation], target: HandSelector
    ) -> Optional[HandObservation]:
        """Find the hand matching a selector; 'any' takes the first hand."""
        if target == ANY_HAND:
            return hands[0] if hands else None
        for hand in hands:
            if hand.handedness == target:
                return hand
        return None
