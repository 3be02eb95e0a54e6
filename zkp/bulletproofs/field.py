"""
Bulletproofs 기반 모듈: 유한체(Finite Field) 및 타원곡선 연산
==============================================================

Bulletproofs 코어 전체에서 사용하는 곡선(Curve) 협력자를 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드. 모든 벡터/행렬 연산, 비트 인코딩,
  챌린지 값이 이 필드 위에서 정확하게(반올림 없이) 계산된다.

**생성자(Generator)**:
  Bulletproofs는 신뢰 설정(trusted setup)이 없다. 대신 서로 간의
  이산로그 관계를 아무도 모르는 생성자들이 필요하다.
  - G: bn128 G1 생성자 (값 커밋용)
  - H: 블라인딩 생성자
  - GS, HS: 벡터 Pedersen 커밋먼트용 독립 생성자 벡터

  H, GS, HS는 "try-and-increment" 방식으로 해시에서 곡선 위의 점을
  결정론적으로 찾는다 (nothing-up-my-sleeve). 누구나 재현할 수 있으므로
  숨겨진 관계가 없음을 확인할 수 있다.

사용 예시:
    >>> from zkp.bulletproofs.field import FR, G, H, ec_mul, ec_add
    >>> C = ec_add(ec_mul(G, FR(5)), ec_mul(H, FR(7)))  # 5·G + 7·H
"""

import hashlib
import logging

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기). Fiat-Shamir 해시의 도메인 태그로도 쓰인다.
CURVE_ORDER = bn128.curve_order

# 생성자 벡터 GS, HS의 길이. n·m (비트 수 × 값 개수)이 이 값을 넘을 수 없다.
GENERATOR_COUNT = 64

# 생성자 유도용 시드 접두사
GENERATOR_SEED = b"bulletproofs"


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 연산
# ─────────────────────────────────────────────────────────────────────

# 영점 (point at infinity) - 항등원
Z1 = None  # py_ecc bn128에서 G1의 항등원은 None으로 표현


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    Args:
        point: G1 위의 점
        scalar: 정수 또는 FR 원소

    Returns:
        scalar · point
    """
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원 (negation): -point."""
    return bn128.neg(point)


def ec_sum(points):
    """점 리스트의 합 Σ pᵢ. 빈 리스트면 항등원 Z1."""
    acc = Z1
    for p in points:
        acc = ec_add(acc, p)
    return acc


def ec_multiexp(scalars, points):
    """다중 스칼라 곱 Σ scalarsᵢ · pointsᵢ.

    벡터 Pedersen 커밋먼트의 기본 연산이다.

    Raises:
        ValueError: 스칼라와 점의 개수가 다를 때
    """
    if len(scalars) != len(points):
        raise ValueError(
            f"스칼라와 점의 개수가 다릅니다: {len(scalars)} != {len(points)}"
        )
    return ec_sum(ec_mul(p, s) for s, p in zip(scalars, points))


def point_to_bytes(point):
    """점을 64바이트 (x ‖ y, 빅엔디안)로 직렬화한다.

    무한원점(None)은 64바이트의 0으로 표현한다.
    Fiat-Shamir 해시 입력으로만 사용된다.
    """
    if point is None:
        return b"\x00" * 64
    x, y = point
    return int(x).to_bytes(32, "big") + int(y).to_bytes(32, "big")


# ─────────────────────────────────────────────────────────────────────
# 생성자 (Nothing-up-my-sleeve generators)
# ─────────────────────────────────────────────────────────────────────

def hash_to_point(label, index=0):
    """label과 index로부터 G1 위의 점을 결정론적으로 유도한다.

    SHA-256(GENERATOR_SEED ‖ label ‖ index ‖ counter)를 x좌표 후보로 쓰고
    y² = x³ + 3 의 제곱근이 존재할 때까지 counter를 증가시킨다.
    bn128의 기저체 위수 p는 p ≡ 3 (mod 4)이므로
    제곱근은 (x³ + 3)^((p+1)/4)로 구한다.

    Args:
        label: 바이트열 레이블 (예: b"H", b"G")
        index: 같은 레이블 내 인덱스 (0 ≤ index < 2^32)

    Returns:
        G1 위의 점 (FQ 튜플)

    Raises:
        ValueError: index가 범위를 벗어났거나 점을 찾지 못한 경우
    """
    if index < 0 or index >= (1 << 32):
        raise ValueError(f"생성자 인덱스가 범위를 벗어났습니다: {index}")

    exponent = (FQ.field_modulus + 1) // 4
    for counter in range(256):
        seed = GENERATOR_SEED + label + index.to_bytes(4, "big") + bytes([counter])
        digest = hashlib.sha256(seed).digest()
        x = FQ(int.from_bytes(digest, "big"))
        rhs = x ** 3 + bn128.b
        y = rhs ** exponent
        if y * y == rhs:
            logger.debug("generator %r[%d] found after %d attempts", label, index, counter + 1)
            return (x, y)
    raise ValueError(f"곡선 위의 점을 찾지 못했습니다: {label!r}[{index}]")


def generators(label, count):
    """label에 대한 독립 생성자 count개의 리스트."""
    if count > GENERATOR_COUNT:
        raise ValueError(
            f"생성자는 최대 {GENERATOR_COUNT}개까지 지원합니다: {count}"
        )
    return [hash_to_point(label, i) for i in range(count)]


# 값 커밋 생성자
G = bn128.G1

# 블라인딩 생성자
H = hash_to_point(b"H")

# 벡터 커밋먼트 생성자
GS = generators(b"Gs", GENERATOR_COUNT)
HS = generators(b"Hs", GENERATOR_COUNT)


def pedersen_commit(value, blinding):
    """Pedersen 커밋먼트 value·G + blinding·H.

    blinding이 균일 랜덤이면 value를 완전히 숨기고(hiding),
    G와 H 사이의 이산로그를 모르는 한 다른 값으로 열 수 없다(binding).
    """
    return ec_add(ec_mul(G, value), ec_mul(H, blinding))
