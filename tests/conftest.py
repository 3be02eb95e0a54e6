import sys
import os
import random

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.bulletproofs.field import FR


@pytest.fixture
def rng():
    """재현 가능한 난수원."""
    return random.Random(20241019)


@pytest.fixture
def challenges():
    """고정된 챌린지 (y, z, x)."""
    return FR(3), FR(5), FR(7)
