from enum import Enum


class Tool(str, Enum):
    """Manipulation tools selectable from the toolbar."""
    NONE   = "NONE"
    MOVE   = "MOVE"
    ROTATE = "ROTATE"
    SCALE  = "SCALE"


class Mode(str, Enum):
    """What the hand or body stream currently edits."""
    HAND   = "HAND"
    BODY   = "BODY"
    DESIGN = "DESIGN"


class ScaleStrategy(str, Enum):
    """Input modality used by the SCALE tool."""
    DRAG     = "DRAG"
    TWO_HAND = "TWO_HAND"


class ManipulationEvent(str, Enum):
    """Effects emitted by the per-frame reducers."""
    TOOL_SELECTED    = "TOOL_SELECTED"
    TOOL_CLEARED     = "TOOL_CLEARED"
    GESTURE_LATCHED  = "GESTURE_LATCHED"
    GESTURE_RELEASED = "GESTURE_RELEASED"
    HAND_LOST        = "HAND_LOST"
    BODY_LOST        = "BODY_LOST"
    CALIBRATED       = "CALIBRATED"
    MODE_CHANGED     = "MODE_CHANGED"
    TRANSFORM_RESET  = "TRANSFORM_RESET"
    DESIGN_COMMITTED = "DESIGN_COMMITTED"
