"""
Bulletproofs Range Proof: 비트 인코딩과 다항식/커밋먼트 구성
=============================================================

커밋된 값 v가 [0, 2ⁿ) 안에 있음을 값을 드러내지 않고 증명하기 위한
대수적 재료를 만든다. m개의 값을 한 증명에 묶는 집계(aggregation)도 지원한다.

**비트 인코딩**:
  a_L: v의 이진 전개 (<a_L, 2ⁿ> = v 가 되도록 최하위 비트부터)
  a_R = a_L - 1ⁿ: "보수(complementary)" 벡터
  a_L의 모든 원소가 0 또는 1이면 a_L ∘ a_R = 0 이다.

**챌린지로 접기**:
  z²·<a_L, 2ⁿ> + z·<a_L - 1ⁿ - a_R, yⁿ> + <a_L ∘ a_R, yⁿ> = z²·v
  를 하나의 내적으로 바꾸면
  <a_L - z·1ⁿ, yⁿ ∘ (a_R + z·1ⁿ) + z²·2ⁿ> = z²·v + δ(y, z)
  δ(y, z)는 Verifier가 직접 계산할 수 있는 보정항이다.

**벡터 다항식**:
  l(X) = (a_L - z·1) + s_L·X
  r(X) = y^(nm) ∘ (a_R + z·1 + s_R·X) + Σⱼ z^(1+j)·(0 ‖ 2ⁿ ‖ 0)
  t(X) = <l(X), r(X)> = t₀ + t₁·X + t₂·X²

**Verifier의 커밋먼트 재구성**:
  P = A + x·S - z·ΣGs + Σ(z·y^(nm))·Hs' + Σⱼ (z^(j+1)·2ⁿ)·Hs'ⱼ - μ·H + t·U
  Prover가 만든 <l, Gs> + <r, Hs'> + <l, r>·U 와 점 단위로 같아야 한다.

사용 예시:
    >>> a_l = reversed_encode_bit(4, FR(5))     # [1, 0, 1, 0]
    >>> a_r = complementary_vector(a_l)         # [0, -1, 0, -1]
    >>> A, S = commit_bit_vectors(alpha, rho, a_l, a_r, s_l, s_r)
"""

from zkp.bulletproofs.field import (
    FR,
    CURVE_ORDER,
    GENERATOR_COUNT,
    G,
    H,
    GS,
    ec_add,
    ec_mul,
    ec_neg,
    ec_sum,
    ec_multiexp,
)
from zkp.bulletproofs.linalg import (
    dot,
    hadamard,
    power_vector,
    vector_add,
    vector_sub,
    vector_scale,
    evaluate_polynomial,
    multiply_poly,
)
from zkp.bulletproofs.circuit import commit_bit_vector
from zkp.bulletproofs.inner_product import is_power_of_2
from zkp.bulletproofs.transcript import shamir_gxg, shamir_z, shamir_u


# ─────────────────────────────────────────────────────────────────────
# 오류
# ─────────────────────────────────────────────────────────────────────

class RangeProofError(ValueError):
    """Range proof의 복구 가능한 오류."""


class UpperBoundTooLarge(RangeProofError):
    def __init__(self, value):
        super().__init__(f"범위 상한이 너무 큽니다: {value}")
        self.value = value


class ValueNotInRange(RangeProofError):
    def __init__(self, value):
        super().__init__(f"값이 범위 안에 있지 않습니다: {value}")
        self.value = value


class ValuesNotInRange(RangeProofError):
    def __init__(self, values):
        super().__init__(f"범위 안에 있지 않은 값이 있습니다: {values}")
        self.values = values


class NNotPowerOf2(RangeProofError):
    def __init__(self, value):
        super().__init__(f"n은 2의 거듭제곱이어야 합니다: {value}")
        self.value = value


# ─────────────────────────────────────────────────────────────────────
# 레코드
# ─────────────────────────────────────────────────────────────────────

class RangeProof:
    """Range proof.

    속성:
        t_blinding: T1, T2 블라인딩을 x-다항식 형태로 합친 값 τₓ
        mu: A, S의 블라인딩을 합친 값 μ = α + ρ·x
        t: t(x) = <l(x), r(x)>
        a_commit: A = α·H + <a_L, Gs> + <a_R, Hs>
        s_commit: 무작위 s_L, s_R 커밋먼트 S
        t1_commit: 계수 t₁의 Pedersen 커밋먼트
        t2_commit: 계수 t₂의 Pedersen 커밋먼트
        product_proof: P = <l, Gs> + <r, Hs'> + <l, r>·U 에 대한 InnerProductProof
    """

    def __init__(self, t_blinding, mu, t, a_commit, s_commit, t1_commit, t2_commit,
                 product_proof):
        self.t_blinding = t_blinding
        self.mu = mu
        self.t = t
        self.a_commit = a_commit
        self.s_commit = s_commit
        self.t1_commit = t1_commit
        self.t2_commit = t2_commit
        self.product_proof = product_proof


class LRPolys:
    """일차 벡터 다항식 l(X) = l0 + l1·X, r(X) = r0 + r1·X."""

    def __init__(self, l0, l1, r0, r1):
        self.l0 = l0
        self.l1 = l1
        self.r0 = r0
        self.r1 = r1

    def evaluate(self, x):
        """(l(x), r(x))"""
        n = len(self.l0)
        return (
            evaluate_polynomial(n, [self.l0, self.l1], x),
            evaluate_polynomial(n, [self.r0, self.r1], x),
        )


class TPoly:
    """t(X) = t0 + t1·X + t2·X²"""

    def __init__(self, t0, t1, t2):
        self.t0 = t0
        self.t1 = t1
        self.t2 = t2

    def evaluate(self, x):
        return self.t0 + self.t1 * x + self.t2 * x * x


# ─────────────────────────────────────────────────────────────────────
# 범위 검사
# ─────────────────────────────────────────────────────────────────────

def check_range(n, v):
    """0 ≤ v < 2ⁿ"""
    return 0 <= v < 2 ** n


def check_ranges(n, vs):
    return all(check_range(n, v) for v in vs)


def ensure_range(n, v):
    """인코딩 전에 호출한다. 범위 밖이면 ValueNotInRange."""
    if not check_range(n, v):
        raise ValueNotInRange(v)


def ensure_ranges(n, vs):
    if not check_ranges(n, vs):
        raise ValuesNotInRange([v for v in vs if not check_range(n, v)])


def validate_range_parameters(n, m=1):
    """비트 수 n과 값 개수 m이 증명 가능한 크기인지 확인한다.

    Raises:
        NNotPowerOf2: n 또는 m이 2의 거듭제곱이 아닐 때
        UpperBoundTooLarge: 2ⁿ ≥ 필드 위수이거나 n·m이 생성자 수를 넘을 때
    """
    if not is_power_of_2(n):
        raise NNotPowerOf2(n)
    if not is_power_of_2(m):
        raise NNotPowerOf2(m)
    upper_bound = 2 ** n
    # 2ⁿ이 필드 위수 이상이면 음수가 범위 안의 값으로 감싸진다
    if upper_bound >= CURVE_ORDER:
        raise UpperBoundTooLarge(upper_bound)
    if n * m > GENERATOR_COUNT:
        raise UpperBoundTooLarge(n * m)


# ─────────────────────────────────────────────────────────────────────
# 비트 인코딩
# ─────────────────────────────────────────────────────────────────────

def encode_bit(n, v):
    """v의 n비트 이진 전개 (최상위 비트 먼저, 앞을 0으로 채움).

    예시:
        >>> encode_bit(4, FR(5))  # [0, 1, 0, 1]

    Raises:
        ValueNotInRange: v가 [0, 2ⁿ) 밖일 때
    """
    v = int(v)
    ensure_range(n, v)
    return [FR((v >> i) & 1) for i in reversed(range(n))]


def reversed_encode_bit(n, v):
    """최하위 비트부터의 n비트 전개. <a, 2ⁿ> = v.

    예시:
        >>> reversed_encode_bit(4, FR(5))  # [1, 0, 1, 0]
    """
    return encode_bit(n, v)[::-1]


def reversed_encode_bit_multi(n, vs):
    """여러 값의 reversed_encode_bit를 이어 붙인다 (길이 n·m)."""
    bits = []
    for v in vs:
        bits.extend(reversed_encode_bit(n, v))
    return bits


def complementary_vector(a_l):
    """a_R = a_L - 1ⁿ"""
    return [vi - 1 for vi in a_l]


def obfuscate_encoded_bits(n, a_l, a_r, y, z):
    """z²·<a_L, 2ⁿ> + z·<a_L - 1ⁿ - a_R, yⁿ> + <a_L ∘ a_R, yⁿ>

    a_R = a_L - 1ⁿ 이고 a_L이 비트 벡터이면 가운데 항과 마지막 항이 0이 되어
    결과는 z²·v 이다.
    """
    y_n = power_vector(y, n)
    ones = power_vector(FR(1), n)
    return (
        z * z * dot(a_l, power_vector(FR(2), n))
        + z * dot(vector_sub(vector_sub(a_l, ones), a_r), y_n)
        + dot(hadamard(a_l, a_r), y_n)
    )


def obfuscate_encoded_bits_single(n, a_l, a_r, y, z):
    """위 식을 하나의 내적으로 바꾼 형태.

    <a_L - z·1ⁿ, yⁿ ∘ (a_R + z·1ⁿ) + z²·2ⁿ> = z²·v + δ(y, z)

    a_L, a_R은 Verifier와 공유할 수 없으므로 내적 안에 남긴다.
    """
    z1n = vector_scale(z, power_vector(FR(1), n))
    return dot(
        vector_sub(a_l, z1n),
        vector_add(
            hadamard(power_vector(y, n), vector_add(a_r, z1n)),
            vector_scale(z * z, power_vector(FR(2), n)),
        ),
    )


def delta(n, m, y, z):
    """δ(y, z) = (z - z²)·<1, y^(nm)> - Σⱼ₌₁..ₘ z^(j+2)·<1ⁿ, 2ⁿ>

    Prover와 Verifier가 똑같이 계산해야 한다.
    """
    nm = n * m
    ones_2n = dot(power_vector(FR(1), n), power_vector(FR(2), n))
    acc = (z - z * z) * dot(power_vector(FR(1), nm), power_vector(y, nm))
    for j in range(1, m + 1):
        acc = acc - (z ** (j + 2)) * ones_2n
    return acc


# ─────────────────────────────────────────────────────────────────────
# 커밋먼트
# ─────────────────────────────────────────────────────────────────────

def commit_bit_vectors(a_blinding, s_blinding, a_l, a_r, s_l, s_r):
    """첫 라운드 커밋먼트 (A, S).

    A = α·H + <a_L, Gs> + <a_R, Hs>
    S = ρ·H + <s_L, Gs> + <s_R, Hs>

    챌린지를 알기 전에 보내므로 α, ρ는 매번 새로운 난수여야 한다.
    """
    a_commit = commit_bit_vector(a_blinding, a_l, a_r)
    s_commit = commit_bit_vector(s_blinding, s_l, s_r)
    return a_commit, s_commit


def compute_challenges(a_commit, s_commit):
    """(y, z) = (H(A, S), H(y))"""
    y = shamir_gxg(a_commit, s_commit)
    z = shamir_z(y)
    return y, z


def slice_vector(n, j, xs):
    """xs의 j번째 (1부터 시작) 길이 n 블록."""
    return xs[(j - 1) * n:j * n]


def compute_hs_prime(y, hs):
    """Hs'ᵢ = y^(-i) · Hsᵢ

    이 기저에서는 r(X)의 yⁿ 인자가 상쇄되어 <r, Hs'>가 a_R, s_R을 그대로 커밋한다.
    """
    y_inv = power_vector(FR(1) / y, len(hs))
    return [ec_mul(h, yi) for h, yi in zip(hs, y_inv)]


def compute_lr_polys(n, m, a_l, a_r, s_l, s_r, y, z):
    """집계 range proof의 l(X), r(X) 계수를 만든다.

    Args:
        n: 값당 비트 수
        m: 값 개수
        a_l, a_r: 비트 벡터와 보수 벡터 (길이 n·m)
        s_l, s_r: 블라인딩 벡터 (길이 n·m)
        y, z: 챌린지

    Returns:
        LRPolys
    """
    nm = n * m
    y_nm = power_vector(y, nm)
    z1 = vector_scale(z, power_vector(FR(1), nm))
    two_n = power_vector(FR(2), n)

    # Σⱼ z^(1+j)·(0^((j-1)n) ‖ 2ⁿ ‖ 0^((m-j)n))
    z_two = []
    for j in range(1, m + 1):
        z_two.extend(vector_scale(z ** (1 + j), two_n))

    l0 = vector_sub(a_l, z1)
    l1 = list(s_l)
    r0 = vector_add(hadamard(y_nm, vector_add(a_r, z1)), z_two)
    r1 = hadamard(y_nm, s_r)
    return LRPolys(l0, l1, r0, r1)


def compute_t_poly(lr_polys):
    """t(X) = <l(X), r(X)>"""
    t0, t1, t2 = multiply_poly([lr_polys.l0, lr_polys.l1], [lr_polys.r0, lr_polys.r1])
    return TPoly(t0, t1, t2)


def compute_lr_commitment(n, m, a_commit, s_commit, t, t_blinding, mu, x, y, z, hs_prime):
    """공개 커밋먼트와 챌린지만으로 l, r에 대한 커밋먼트 P를 재구성한다.

    P = A + x·S - z·ΣGs + Σ(z·y^(nm))·Hs' + Σⱼ (z^(j+1)·2ⁿ)·Hs'ⱼ - μ·H + t·U
    U = shamir_u(τₓ, μ, t) · G

    Raises:
        ValueError: hs_prime의 길이가 n·m이 아닐 때
    """
    nm = n * m
    if len(hs_prime) != nm:
        raise ValueError(f"hs_prime의 길이는 n·m = {nm}이어야 합니다: {len(hs_prime)}")

    gs_sum = ec_sum(GS[:nm])
    h_exp = vector_scale(z, power_vector(y, nm))
    two_n = power_vector(FR(2), n)
    u = ec_mul(G, shamir_u(t_blinding, mu, t))

    aggregated = ec_sum(
        ec_multiexp(vector_scale(z ** (j + 1), two_n), slice_vector(n, j, hs_prime))
        for j in range(1, m + 1)
    )

    p = ec_add(a_commit, ec_mul(s_commit, x))
    p = ec_add(p, ec_neg(ec_mul(gs_sum, z)))
    p = ec_add(p, ec_multiexp(h_exp, hs_prime))
    p = ec_add(p, aggregated)
    p = ec_add(p, ec_neg(ec_mul(H, mu)))
    return ec_add(p, ec_mul(u, t))
