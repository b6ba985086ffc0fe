from __future__ import annotations
from typing import Dict

import pytest

from domain.enums import Tool
from domain.models import ButtonRect


@pytest.fixture
def buttons() -> Dict[Tool, ButtonRect]:
    return {
        Tool.MOVE:   ButtonRect(100, 100, 200, 150),
        Tool.ROTATE: ButtonRect(220, 100, 320, 150),
        Tool.SCALE:  ButtonRect(340, 100, 440, 150),
    }
