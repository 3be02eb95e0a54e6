"""
Bulletproofs 선형대수 모듈: 벡터, 행렬, 벡터 계수 다항식
=========================================================

산술 회로 제약 검증과 입력값 유도, range proof 다항식 구성에 쓰이는
순수 함수들을 모아 둔다. 부작용도, 난수도 없다.

**표현**:
  - 벡터: 필드 원소의 리스트 [a₀, a₁, ..., aₙ₋₁]
  - 행렬: 행(row) 리스트의 리스트 (행 우선)
  - 벡터 계수 다항식: 계수 벡터의 리스트 [c₀, c₁, ...] → c₀ + c₁·X + c₂·X² + ...

**필드 일반성**:
  모든 함수는 +, -, *, /, == 만 사용한다. 기본 필드는 FR이지만
  같은 코드가 Fraction이나 다른 py_ecc 필드에서도 그대로 동작한다.
  가우스 소거는 나눗셈을 하므로 int 행렬을 넣으면 float가 나온다.
  정확한 해가 필요하면 FR이나 Fraction을 쓴다.
  영(0)이 필요하면 입력 원소의 타입에서 만든다.

**차원 검사**:
  길이가 맞지 않는 벡터/행렬 연산은 계산 전에 ArithmeticError를 던진다.

사용 예시:
    >>> dot([FR(1), FR(2)], [FR(3), FR(4)])   # FR(11)
    >>> multiply_poly([[1], [1]], [[1], [1]])  # [1, 2, 1]  (1+x)²
    >>> solve_linear_system([[FR(1), FR(1), FR(3)], [FR(1), FR(-1), FR(1)]])  # x=2, y=1
"""

from zkp.bulletproofs.field import FR


class SingularMatrixError(ArithmeticError):
    """가우스 소거 중 어떤 열에도 0이 아닌 피벗 후보가 없다."""

    def __init__(self, column):
        super().__init__(f"특이 행렬입니다: {column}번째 열에 피벗이 없습니다")
        self.column = column


class InconsistentSystemError(ArithmeticError):
    """미지수보다 많은 식 중 소거 후 0 = c (c ≠ 0) 꼴이 남았다."""

    def __init__(self, row):
        super().__init__(f"해가 없는 연립방정식입니다: {row}번째 행이 모순입니다")
        self.row = row


def _zero(vec, field=FR):
    """vec 원소 타입의 0. 빈 벡터면 field(0)."""
    return type(vec[0])(0) if vec else field(0)


def _check_same_length(a, b, op):
    if len(a) != len(b):
        raise ArithmeticError(f"{op}: 벡터 길이가 다릅니다: {len(a)} != {len(b)}")


# ─────────────────────────────────────────────────────────────────────
# 벡터 연산
# ─────────────────────────────────────────────────────────────────────

def dot(a, b):
    """내적 <a, b> = Σ aᵢ·bᵢ."""
    _check_same_length(a, b, "dot")
    acc = _zero(a)
    for x, y in zip(a, b):
        acc = acc + x * y
    return acc


def hadamard(a, b):
    """Hadamard 곱 (원소별 곱) a ∘ b."""
    _check_same_length(a, b, "hadamard")
    return [x * y for x, y in zip(a, b)]


def power_vector(x, n):
    """거듭제곱 벡터 xⁿ = [x⁰, x¹, ..., x^(n-1)].

    예시:
        >>> power_vector(FR(2), 4)  # [1, 2, 4, 8]
    """
    return [x ** i for i in range(n)]


def vector_add(a, b):
    _check_same_length(a, b, "vector_add")
    return [x + y for x, y in zip(a, b)]


def vector_sub(a, b):
    _check_same_length(a, b, "vector_sub")
    return [x - y for x, y in zip(a, b)]


def vector_scale(scalar, v):
    """스칼라배 scalar · v."""
    return [scalar * x for x in v]


# ─────────────────────────────────────────────────────────────────────
# 행렬 연산
# ─────────────────────────────────────────────────────────────────────

def transpose(matrix):
    return [list(col) for col in zip(*matrix)]


def vector_matrix_product(v, matrix):
    """행 벡터 × 행렬: 결과의 j번째 원소는 Σᵢ vᵢ · M[i][j].

    v의 길이는 M의 행 수와 같아야 한다 (v가 M의 열들과 곱해진다).
    회로에서 z^Q · W_L 처럼 제약별 가중치를 게이트별로 합칠 때 쓴다.
    """
    if len(v) != len(matrix):
        raise ArithmeticError(
            f"vector_matrix_product: 벡터 길이와 행 수가 다릅니다: {len(v)} != {len(matrix)}"
        )
    return [dot(v, col) for col in transpose(matrix)]


def vector_matrix_product_t(v, matrix):
    """전치 행렬과의 곱 v · Mᵀ: 결과의 q번째 원소는 <v, M[q]>.

    v의 길이는 M의 열 수와 같아야 한다 (v가 M의 행들과 곱해진다).
    게이트별 배선 벡터 a_L을 제약별 합 (W_L · a_L)로 바꿀 때 쓴다.
    vector_matrix_product와 혼동하면 회로 입력값 유도가 틀어진다.
    """
    return [dot(v, row) for row in matrix]


def matrix_vector_product(matrix, v):
    """행렬 × 열 벡터 M · v."""
    return vector_matrix_product_t(v, matrix)


def matrix_product(a, b):
    """행렬 곱 A · B."""
    if a and len(a[0]) != len(b):
        raise ArithmeticError(
            f"matrix_product: A의 열 수와 B의 행 수가 다릅니다: {len(a[0])} != {len(b)}"
        )
    cols = transpose(b)
    return [[dot(row, col) for col in cols] for row in a]


def power_matrix(matrix, k):
    """M을 k번 더 곱한 행렬 M^(k+1).

    관례상 power_matrix(M, 0)은 단위행렬이 아니라 M 자신이다.
    """
    if k < 0:
        raise ValueError(f"k는 0 이상이어야 합니다: {k}")
    result = [list(row) for row in matrix]
    for _ in range(k):
        result = matrix_product(matrix, result)
    return result


def gen_iden_matrix(size, field=FR):
    """size × size 단위행렬."""
    return [[field(1) if i == j else field(0) for j in range(size)] for i in range(size)]


def gen_zero_matrix(rows, cols, field=FR):
    """rows × cols 영행렬."""
    return [[field(0) for _ in range(cols)] for _ in range(rows)]


# ─────────────────────────────────────────────────────────────────────
# 벡터 계수 다항식
# ─────────────────────────────────────────────────────────────────────

def _add_padded(a, b):
    """원소별 덧셈. 길이가 다르면 긴 쪽의 꼬리를 그대로 둔다."""
    if len(a) < len(b):
        a, b = b, a
    return [x + y for x, y in zip(a, b)] + list(a[len(b):])


def evaluate_polynomial(degree_bound, coeffs, x):
    """벡터 계수 다항식 Σ coeffs[i] · xⁱ 을 평가한다.

    길이 degree_bound의 영벡터에 각 항을 위치별로 누적한다.
    degree_bound보다 긴 계수 벡터가 있으면 결과도 그 길이로 늘어나고,
    모든 계수가 짧으면 남는 자리는 0으로 채워진 채 남는다.

    Args:
        degree_bound: 결과 벡터의 최소 길이
        coeffs: 계수 벡터 리스트 (coeffs[i]는 xⁱ의 계수)
        x: 평가 점

    Returns:
        list: 길이 max(degree_bound, 가장 긴 계수 벡터)의 벡터

    예시:
        >>> evaluate_polynomial(2, [[FR(1), FR(2)], [FR(3), FR(4)]], FR(10))
        [FR(31), FR(42)]
    """
    zero = type(x)(0)
    acc = [zero] * degree_bound
    x_power = x ** 0
    for e in coeffs:
        acc = _add_padded(acc, [x_power * c for c in e])
        x_power = x_power * x
    return acc


def multiply_poly(left, right):
    """벡터 계수 다항식의 곱 (convolution).

    계수 쌍 (Lᵢ, Rⱼ)는 <Lᵢ, Rⱼ>를 i+j차 계수에 더한다.
    결과는 스칼라 계수 다항식이며 길이는 len(L) + len(R) - 1.

    Range proof에서 t(X) = <l(X), r(X)>를 계산하는 데 쓴다.

    예시:
        >>> multiply_poly([[1], [1]], [[1], [1]])  # (1+x)(1+x)
        [1, 2, 1]
    """
    if not left or not right:
        return []
    zero = _zero(left[0])
    result = [zero] * (len(left) + len(right) - 1)
    for i, li in enumerate(left):
        for j, rj in enumerate(right):
            result[i + j] = result[i + j] + dot(li, rj)
    return result


# ─────────────────────────────────────────────────────────────────────
# 연립방정식 (가우스 소거 + 후진 대입)
# ─────────────────────────────────────────────────────────────────────

def gaussian_reduce(matrix):
    """첨가 행렬 [M | b]를 행 사다리꼴(row echelon form)로 만든다.

    각 피벗 행 r에 대해:
      1. r행 이하에서 r열 원소가 0이 아닌 첫 행을 찾아 r행과 교환
      2. 피벗이 1이 되도록 정규화
      3. 아래 모든 행에서 r열을 소거: 새 행 = 대상 행 - 대상 행[r] · 피벗 행

    마지막 피벗 행도 같은 정규화를 거치므로, 정방 시스템에서 마지막 행의
    끝 두 원소는 끝에서 두 번째 원소의 역원으로 스케일된다.

    행이 미지수보다 많으면 (W_V가 Q×m, Q > m) 남는 행은 소거 후
    모두 0이어야 한다.

    Args:
        matrix: 행 리스트. 각 행은 미지수 계수 + 상수항 b

    Returns:
        list: 미지수 개수만큼의 정규화된 사다리꼴 행

    Raises:
        ArithmeticError: 행 길이가 서로 다를 때
        SingularMatrixError: 어떤 열에도 피벗이 없을 때
        InconsistentSystemError: 여분의 행이 0 = c (c ≠ 0)로 남을 때
    """
    rows = [list(row) for row in matrix]
    if not rows or len(rows[0]) < 2:
        raise ArithmeticError("첨가 행렬은 최소 한 개의 미지수와 상수 열이 필요합니다")
    width = len(rows[0])
    for row in rows:
        if len(row) != width:
            raise ArithmeticError(f"행 길이가 다릅니다: {len(row)} != {width}")

    num_unknowns = width - 1
    if len(rows) < num_unknowns:
        raise SingularMatrixError(len(rows))

    for r in range(num_unknowns):
        pivot = next((i for i in range(r, len(rows)) if rows[i][r] != 0), None)
        if pivot is None:
            raise SingularMatrixError(r)
        rows[r], rows[pivot] = rows[pivot], rows[r]

        pivot_value = rows[r][r]
        pivot_row = [e / pivot_value for e in rows[r]]
        rows[r] = pivot_row

        for i in range(r + 1, len(rows)):
            k = rows[i][r]
            if k != 0:
                rows[i] = [t - k * p for t, p in zip(rows[i], pivot_row)]

    for i in range(num_unknowns, len(rows)):
        if rows[i][-1] != 0:
            raise InconsistentSystemError(i)
    return rows[:num_unknowns]


def back_substitute(reduced):
    """정규화된 사다리꼴 행들에서 해를 구한다.

    마지막 행부터 위로 올라가며 xᵢ = bᵢ - <이미 구한 해, 행의 해당 계수>를
    구해 쌓고, 마지막에 뒤집어 x₀, x₁, ... 순서로 돌려준다.
    """
    n = len(reduced)
    found = []
    for i in reversed(range(n)):
        row = reduced[i]
        value = row[-1]
        if found:
            value = value - dot(found[::-1], row[i + 1:n])
        found.append(value)
    return found[::-1]


def solve_linear_system(matrix):
    """M·x = b 를 푼다. matrix는 M의 각 행 끝에 b를 붙인 첨가 행렬.

    Returns:
        list: 해 x (자연 변수 순서, matrix_vector_product(M, x) == b)

    Raises:
        SingularMatrixError: M이 특이 행렬일 때

    예시:
        >>> solve_linear_system([[FR(1), FR(1), FR(3)], [FR(1), FR(-1), FR(1)]])
        [FR(2), FR(1)]
    """
    return back_substitute(gaussian_reduce(matrix))
