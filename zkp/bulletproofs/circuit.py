"""
Bulletproofs 산술 회로 (Arithmetic Circuit) 제약 시스템
=========================================================

n개의 곱셈 게이트와 Q개의 선형 제약으로 이루어진 회로를 표현한다.

**곱셈 게이트**:
    a_L ∘ a_R = a_O        (각 게이트 i에서 a_L[i] · a_R[i] = a_O[i])

**선형 제약** (Q개):
    W_L · a_L + W_R · a_R + W_O · a_O = W_V · v + c

  - W_L, W_R, W_O ∈ F^(Q×n): 배선 벡터에 대한 게이트 가중치
  - W_V ∈ F^(Q×m): 외부에서 커밋된 m개의 값 v에 대한 가중치
  - c ∈ F^Q: 상수 항

**한 번의 내적으로 접기**:
  챌린지 y, z로 z^Q = (z, z², ..., z^Q)를 만들어 Q개의 제약을 하나로 합치고,
  y로 n개의 곱셈 게이트를 하나로 합친다. 그러면 t(X) = <l(X), r(X)>의
  X² 계수가 <z^Q, W_V·v + c> + δ(y, z) 가 된다.
  δ(y, z) = <y^(-n) ∘ (z^Q·W_R), z^Q·W_L> 는 Verifier도 계산할 수 있는 교차항이다.

사용 예시:
    >>> weights = GateWeights(w_l, w_r, w_o)
    >>> v = compute_input_values(weights, w_v, assignment, cs)
    >>> is_circuit_satisfied(ArithCircuit(weights, w_v, cs), assignment, v)  # True
"""

from zkp.bulletproofs.field import FR, GS, HS, H, ec_add, ec_mul, ec_multiexp, pedersen_commit
from zkp.bulletproofs.linalg import (
    dot,
    hadamard,
    power_vector,
    vector_add,
    vector_sub,
    vector_matrix_product,
    vector_matrix_product_t,
    matrix_vector_product,
    multiply_poly,
    solve_linear_system,
)
from zkp.bulletproofs.transcript import shamir_gxgxg, shamir_z


# ─────────────────────────────────────────────────────────────────────
# 오류
# ─────────────────────────────────────────────────────────────────────

class ArithCircuitProofError(ValueError):
    """산술 회로 증명의 복구 가능한 오류. value에 문제가 된 값을 담는다."""

    def __init__(self, value, message):
        super().__init__(message)
        self.value = value


class TooManyGates(ArithCircuitProofError):
    def __init__(self, value):
        super().__init__(value, f"게이트(제약) 수가 너무 많습니다: {value}")


class NNotPowerOf2(ArithCircuitProofError):
    def __init__(self, value):
        super().__init__(value, f"게이트 수 n은 2의 거듭제곱이어야 합니다: {value}")


# ─────────────────────────────────────────────────────────────────────
# 레코드
# ─────────────────────────────────────────────────────────────────────

class GateWeights:
    """게이트 가중치 행렬 W_L, W_R, W_O (모두 Q × n)."""

    def __init__(self, w_l, w_r, w_o):
        shapes = [_shape(w) for w in (w_l, w_r, w_o)]
        if len(set(shapes)) != 1:
            raise ValueError(f"W_L, W_R, W_O의 크기가 다릅니다: {shapes}")
        self.w_l = w_l
        self.w_r = w_r
        self.w_o = w_o

    @property
    def shape(self):
        """(Q, n)"""
        return _shape(self.w_l)


def _shape(matrix):
    return (len(matrix), len(matrix[0]) if matrix else 0)


class Assignment:
    """n개 곱셈 게이트의 배선 값 a_L, a_R, a_O.

    속성:
        a_l: 각 곱셈 게이트의 왼쪽 입력
        a_r: 각 곱셈 게이트의 오른쪽 입력
        a_o: 각 곱셈 게이트의 출력
    """

    def __init__(self, a_l, a_r, a_o):
        if not len(a_l) == len(a_r) == len(a_o):
            raise ValueError(
                f"a_L, a_R, a_O의 길이가 다릅니다: {len(a_l)}, {len(a_r)}, {len(a_o)}"
            )
        self.a_l = list(a_l)
        self.a_r = list(a_r)
        self.a_o = list(a_o)

    def __len__(self):
        return len(self.a_l)

    def is_satisfied(self):
        """곱셈 게이트 제약 a_L ∘ a_R == a_O 만족 여부."""
        return hadamard(self.a_l, self.a_r) == self.a_o


class ArithCircuit:
    """회로 전체: 게이트 가중치, 커밋된 값의 가중치 W_V, 상수 항 c."""

    def __init__(self, weights, commitment_weights, cs):
        q, _ = weights.shape
        if len(commitment_weights) != q or len(cs) != q:
            raise ValueError(
                f"제약 수 Q가 일치하지 않습니다: weights={q}, "
                f"commitment_weights={len(commitment_weights)}, cs={len(cs)}"
            )
        self.weights = weights
        self.commitment_weights = commitment_weights
        self.cs = list(cs)


class ArithWitness:
    """Prover의 비밀 입력: 배선 할당과 커밋된 값들의 커밋먼트/블라인딩.

    commitments[i] == pedersen_commit(vᵢ, commit_blinders[i])
    """

    def __init__(self, inputs, commitments, commit_blinders):
        if len(commitments) != len(commit_blinders):
            raise ValueError(
                f"커밋먼트와 블라인딩의 개수가 다릅니다: "
                f"{len(commitments)} != {len(commit_blinders)}"
            )
        self.inputs = inputs
        self.commitments = list(commitments)
        self.commit_blinders = list(commit_blinders)

    @classmethod
    def from_values(cls, inputs, values, commit_blinders):
        """값 v와 블라인딩으로 커밋먼트를 만들어 witness를 구성한다."""
        if len(values) != len(commit_blinders):
            raise ValueError(
                f"값과 블라인딩의 개수가 다릅니다: {len(values)} != {len(commit_blinders)}"
            )
        commitments = [pedersen_commit(v, b) for v, b in zip(values, commit_blinders)]
        return cls(inputs, commitments, commit_blinders)

    def opens_to(self, values):
        """커밋먼트들이 values로 열리는지 확인한다."""
        if len(values) != len(self.commitments):
            return False
        return all(
            c == pedersen_commit(v, b)
            for c, v, b in zip(self.commitments, values, self.commit_blinders)
        )


class ArithCircuitProof:
    """산술 회로 증명.

    속성:
        t_blinding: T 커밋먼트들의 블라인딩을 x-다항식 형태로 합친 값 τₓ
        mu: A_I, A_O, S의 블라인딩을 합친 값 μ
        t: t(x) = <l(x), r(x)>
        ai_commit: a_L, a_R 커밋먼트 A_I
        ao_commit: a_O 커밋먼트 A_O
        s_commit: 블라인딩 벡터 s_L, s_R 커밋먼트 S
        t_commits: t(X) 계수 커밋먼트들 [T₁, T₃, T₄, T₅, T₆]
        product_proof: InnerProductProof
    """

    def __init__(self, t_blinding, mu, t, ai_commit, ao_commit, s_commit,
                 t_commits, product_proof):
        self.t_blinding = t_blinding
        self.mu = mu
        self.t = t
        self.ai_commit = ai_commit
        self.ao_commit = ao_commit
        self.s_commit = s_commit
        self.t_commits = tuple(t_commits)
        self.product_proof = product_proof


# ─────────────────────────────────────────────────────────────────────
# 제약 대수
# ─────────────────────────────────────────────────────────────────────

def compute_input_values(weights, commitment_weights, assignment, cs):
    """제약 관계가 성립하도록 하는 공개 입력 벡터 v를 유도한다.

    solutions = a_L·W_Lᵀ + a_R·W_Rᵀ + a_O·W_Oᵀ - c 를 만든 뒤
    W_V · v = solutions 를 가우스 소거로 푼다.

    Raises:
        ArithmeticError: 차원이 맞지 않을 때 (W_V의 행 수가 제약 수 Q와 다를 때 포함)
        SingularMatrixError: W_V가 특이 행렬일 때 (solve_linear_system에서 전파)
    """
    solutions = vector_sub(
        vector_add(
            vector_add(
                vector_matrix_product_t(assignment.a_l, weights.w_l),
                vector_matrix_product_t(assignment.a_r, weights.w_r),
            ),
            vector_matrix_product_t(assignment.a_o, weights.w_o),
        ),
        cs,
    )
    q, _ = weights.shape
    if len(commitment_weights) != q or len(solutions) != q:
        raise ArithmeticError(
            f"compute_input_values: 제약 수가 다릅니다: "
            f"W_V 행 수 {len(commitment_weights)}, Q = {q}, 해 벡터 길이 {len(solutions)}"
        )
    augmented = [list(row) + [s] for row, s in zip(commitment_weights, solutions)]
    return solve_linear_system(augmented)


def is_circuit_satisfied(circuit, assignment, values):
    """곱셈 게이트와 선형 제약을 모두 만족하는지 확인한다.

    a_L ∘ a_R == a_O  그리고  W_L·a_L + W_R·a_R + W_O·a_O == W_V·v + c
    """
    if not assignment.is_satisfied():
        return False
    w = circuit.weights
    lhs = vector_add(
        vector_add(
            matrix_vector_product(w.w_l, assignment.a_l),
            matrix_vector_product(w.w_r, assignment.a_r),
        ),
        matrix_vector_product(w.w_o, assignment.a_o),
    )
    rhs = vector_add(matrix_vector_product(circuit.commitment_weights, values), circuit.cs)
    return lhs == rhs


def delta(n, y, zw_l, zw_r):
    """교차항 δ(y, z) = <y^(-n) ∘ (z^Q·W_R), z^Q·W_L>."""
    return dot(hadamard(power_vector(FR(1) / y, n), zw_r), zw_l)


def commit_bit_vector(blinding, v_l, v_r):
    """벡터 Pedersen 커밋먼트 Σ v_L[i]·Gs[i] + Σ v_R[i]·Hs[i] + blinding·H."""
    n = len(v_l)
    return ec_add(
        ec_add(ec_multiexp(v_l, GS[:n]), ec_multiexp(v_r, HS[:len(v_r)])),
        ec_mul(H, blinding),
    )


def compute_challenges(ai_commit, ao_commit, s_commit):
    """(y, z) = (H(A_I, A_O, S), H(y))."""
    y = shamir_gxgxg(ai_commit, ao_commit, s_commit)
    z = shamir_z(y)
    return y, z


def compute_zw(weights, commitment_weights, z):
    """z^Q = (z, z², ..., z^Q)로 각 가중치 행렬의 제약들을 하나로 합친다.

    Returns:
        tuple: (z^Q·W_L, z^Q·W_R, z^Q·W_O, z^Q·W_V)
    """
    q, _ = weights.shape
    zs = power_vector(z, q + 1)[1:]
    return (
        vector_matrix_product(zs, weights.w_l),
        vector_matrix_product(zs, weights.w_r),
        vector_matrix_product(zs, weights.w_o),
        vector_matrix_product(zs, commitment_weights),
    )


def compute_circuit_lr_polys(n, assignment, s_l, s_r, y, zw_l, zw_r, zw_o):
    """회로 증명의 벡터 다항식 l(X), r(X)를 계수 리스트로 만든다.

        l(X) = (a_L + y^(-n) ∘ z^Q·W_R)·X + a_O·X² + s_L·X³
        r(X) = (z^Q·W_O - yⁿ) + (yⁿ ∘ a_R + z^Q·W_L)·X + (yⁿ ∘ s_R)·X³

    Returns:
        tuple: (l 계수 4개, r 계수 4개)
    """
    y_n = power_vector(y, n)
    y_inv_n = power_vector(FR(1) / y, n)
    zero = [FR(0)] * n

    l_poly = [
        zero,
        vector_add(assignment.a_l, hadamard(y_inv_n, zw_r)),
        list(assignment.a_o),
        list(s_l),
    ]
    r_poly = [
        vector_sub(zw_o, y_n),
        vector_add(hadamard(y_n, assignment.a_r), zw_l),
        zero,
        hadamard(y_n, s_r),
    ]
    return l_poly, r_poly


def compute_circuit_t_poly(l_poly, r_poly):
    """t(X) = <l(X), r(X)> 의 계수 (7개)."""
    return multiply_poly(l_poly, r_poly)
