"""
산술 회로 테스트 픽스처 생성기
==============================

증명 시스템을 시험하기 위한 무작위 회로 조각을 만든다.
프로토콜 로직이 아니므로 circuit 모듈과 분리해 두었다.
circuit 모듈의 레코드들은 난수에 의존하지 않는다.

모든 함수는 rng 인자(randrange, shuffle을 가진 객체)를 받는다.
재현 가능한 테스트에는 random.Random(seed)를 넘기고,
생략하면 secrets.SystemRandom()을 쓴다.

사용 예시:
    >>> rng = random.Random(7)
    >>> weights = generate_gate_weights(4, 4, rng)
    >>> assignment = generate_random_assignment(4, rng)
    >>> w_v = generate_wv(4, 4, rng)
"""

import logging
import secrets

from zkp.bulletproofs.field import FR
from zkp.bulletproofs.linalg import gen_iden_matrix, gen_zero_matrix, hadamard
from zkp.bulletproofs.circuit import GateWeights, Assignment, TooManyGates, NNotPowerOf2
from zkp.bulletproofs.inner_product import is_power_of_2

logger = logging.getLogger(__name__)

# generate_gate_weights가 허용하는 최대 제약 수 Q
MAX_CONSTRAINTS = 2 ** 10


def _default_rng(rng):
    return rng if rng is not None else secrets.SystemRandom()


def generate_gate_weights(l_constraints, n, rng=None):
    """W_L, W_R, W_O를 무작위로 만든다.

    각 행렬은 Q × n 이고, 무작위로 고른 한 행만 전부 1이며 나머지 행은 0이다.

    Args:
        l_constraints: 제약 수 Q
        n: 곱셈 게이트 수 (2의 거듭제곱)
        rng: 난수원

    Raises:
        TooManyGates: Q > MAX_CONSTRAINTS
        NNotPowerOf2: n이 2의 거듭제곱이 아닐 때
    """
    if l_constraints > MAX_CONSTRAINTS:
        raise TooManyGates(l_constraints)
    if not is_power_of_2(n):
        raise NNotPowerOf2(n)
    rng = _default_rng(rng)

    def one_hot_rows():
        i = rng.randrange(l_constraints)
        rows = [[FR(0)] * n for _ in range(l_constraints - 1)]
        rows.insert(i, [FR(1)] * n)
        return rows

    w_l, w_r, w_o = one_hot_rows(), one_hot_rows(), one_hot_rows()
    logger.debug("generated gate weights: Q=%d, n=%d", l_constraints, n)
    return GateWeights(w_l, w_r, w_o)


def generate_random_assignment(n, rng=None):
    """a_L, a_R을 [0, 2ⁿ) 범위의 무작위 값으로 채우고 a_O = a_L ∘ a_R 로 둔다.

    곱셈 게이트 제약이 구성상 항상 만족된다.
    """
    rng = _default_rng(rng)
    bound = 2 ** n
    a_l = [FR(rng.randrange(bound)) for _ in range(n)]
    a_r = [FR(rng.randrange(bound)) for _ in range(n)]
    logger.debug("generated random assignment: n=%d", n)
    return Assignment(a_l, a_r, hadamard(a_l, a_r))


def generate_wv(l_constraints, m, rng=None):
    """W_V ∈ F^(Q×m): [I_m; 0_((Q-m)×m)]의 행을 무작위로 섞는다.

    Raises:
        ValueError: Q < m (제약이 커밋된 값보다 적으면 v가 정해지지 않는다)
    """
    if l_constraints < m:
        raise ValueError(
            f"제약 수는 커밋된 값의 수 이상이어야 합니다: {l_constraints} < {m}"
        )
    rng = _default_rng(rng)
    rows = gen_iden_matrix(m) + gen_zero_matrix(l_constraints - m, m)
    rng.shuffle(rows)
    logger.debug("generated W_V: Q=%d, m=%d", l_constraints, m)
    return rows
