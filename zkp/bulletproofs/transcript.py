"""
Bulletproofs Fiat-Shamir 오라클
================================

비대화식(non-interactive) 변환을 위한 Fiat-Shamir 해싱 구현.

**Bulletproofs의 챌린지**:
  Range proof      : A, S → y,  y → z,  T1, T2 → x,  (t̂, τₓ, μ) → U의 스칼라
  Arithmetic circuit: A_I, A_O, S → y,  y → z
  Inner product    : L, R → u (라운드마다)

모든 해시 입력은 필드 위수 q의 문자열 표현으로 시작한다 (도메인 태그).
라운드에 영향을 주는 모든 커밋먼트가 해시에 들어가야 한다.
하나라도 빠지면 Prover가 챌린지를 본 뒤 그 커밋먼트를 바꿀 수 있어
건전성(soundness)이 깨진다.

사용 예시:
    >>> y = shamir_gxgxg(ai_commit, ao_commit, s_commit)
    >>> z = shamir_z(y)
"""

import hashlib

from zkp.bulletproofs.field import FR, CURVE_ORDER, point_to_bytes


# 모든 오라클 호출의 도메인 태그
DOMAIN_TAG = str(CURVE_ORDER).encode()


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열
    """

    def __init__(self, label=DOMAIN_TAG):
        self.state = bytearray()
        self.state.extend(label)

    def append_scalar(self, label, scalar):
        """FR 스칼라 값을 32바이트 빅엔디안으로 추가한다.

        예시:
            >>> t.append_scalar(b"mu", FR(42))
        """
        self.state.extend(label)
        val = int(scalar) % CURVE_ORDER
        self.state.extend(val.to_bytes(32, "big"))

    def append_point(self, label, point):
        """G1 점을 추가한다. 무한원점(None)은 64바이트의 0."""
        self.state.extend(label)
        self.state.extend(point_to_bytes(point))

    def append_points(self, label, points):
        self.state.extend(label)
        for p in points:
            self.state.extend(point_to_bytes(p))

    def challenge_scalar(self, label):
        """현재 상태를 SHA-256으로 해싱하여 FR 챌린지를 도출한다.

        생성된 해시는 상태에 다시 추가된다 (체이닝).
        같은 트랜스크립트에서 연속으로 뽑은 챌린지는 서로 다르다.
        """
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        challenge = FR(int.from_bytes(h, "big") % CURVE_ORDER)
        self.state.extend(h)
        return challenge


# ─────────────────────────────────────────────────────────────────────
# 오라클 헬퍼
# ─────────────────────────────────────────────────────────────────────

def shamir_gxgxg(p1, p2, p3):
    """세 점에 대한 챌린지. 산술 회로 증명에서 y = H(A_I, A_O, S)."""
    t = Transcript()
    t.append_point(b"", p1)
    t.append_point(b"", p2)
    t.append_point(b"", p3)
    return t.challenge_scalar(b"")


def shamir_gxg(p1, p2):
    """두 점에 대한 챌린지. Range proof에서 y = H(A, S)."""
    t = Transcript()
    t.append_point(b"", p1)
    t.append_point(b"", p2)
    return t.challenge_scalar(b"")


def shamir_gs(points):
    """점 리스트에 대한 챌린지 (라운드 챌린지 x, inner product 챌린지 u)."""
    t = Transcript()
    t.append_points(b"", points)
    return t.challenge_scalar(b"")


def shamir_z(z):
    """스칼라 하나를 다시 해싱한다. z = H(y)."""
    t = Transcript()
    t.append_scalar(b"", z)
    return t.challenge_scalar(b"")


def shamir_u(t_blinding, mu, t_hat):
    """U = shamir_u(τₓ, μ, t̂) · G 의 스칼라."""
    t = Transcript()
    t.append_scalar(b"", t_blinding)
    t.append_scalar(b"", mu)
    t.append_scalar(b"", t_hat)
    return t.challenge_scalar(b"")
