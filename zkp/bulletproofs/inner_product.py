"""
Inner Product Argument 데이터 계약
===================================

재귀적 inner product argument가 주고받는 레코드들을 정의한다.
재귀 알고리즘 자체(벡터를 반씩 접으며 라운드마다 L, R을 보내는 과정)는
이 모듈 밖에서 수행된다.

**관계**:
  P = <l, G> + <r, H> + <l, r>·U   을 만족하는 l, r을 안다.

**불변식**:
  - 벡터 길이 n은 2의 거듭제곱 (매 라운드 정확히 반으로 줄어든다)
  - l_commits, r_commits의 길이는 log₂ n
  - 끝에 남는 스칼라 l, r은 길이 1까지 줄어든 벡터의 유일한 원소
"""

from zkp.bulletproofs.field import ec_add, ec_mul, ec_multiexp
from zkp.bulletproofs.linalg import dot


def is_power_of_2(n):
    return n >= 1 and (n & (n - 1)) == 0


def log2_exact(n):
    """2의 거듭제곱 n의 밑 2 로그. 아니면 ValueError."""
    if not is_power_of_2(n):
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    return n.bit_length() - 1


class InnerProductBase:
    """공개 생성자 묶음.

    속성:
        basis_g: 독립 생성자 G ∈ 𝔾ⁿ
        basis_h: 독립 생성자 H ∈ 𝔾ⁿ
        aux_h: 내적을 커밋하는 보조 생성자 U ∈ 𝔾

    세 생성자 사이의 이산로그 관계는 아무도 모른다.
    증명 크기마다 한 번 만들어 읽기 전용으로 공유한다.
    """

    def __init__(self, basis_g, basis_h, aux_h):
        if len(basis_g) != len(basis_h):
            raise ValueError(
                f"basis_g와 basis_h의 길이가 다릅니다: {len(basis_g)} != {len(basis_h)}"
            )
        self.basis_g = tuple(basis_g)
        self.basis_h = tuple(basis_h)
        self.aux_h = aux_h

    def __len__(self):
        return len(self.basis_g)

    def commit(self, witness):
        """재귀가 시작하는 커밋먼트 P = <l, G> + <r, H> + <l, r>·U."""
        if len(witness) != len(self):
            raise ValueError(
                f"witness 길이가 기저 길이와 다릅니다: {len(witness)} != {len(self)}"
            )
        return ec_add(
            ec_add(
                ec_multiexp(witness.l, list(self.basis_g)),
                ec_multiexp(witness.r, list(self.basis_h)),
            ),
            ec_mul(self.aux_h, witness.inner_product()),
        )


class InnerProductWitness:
    """Prover만 아는 벡터 l, r. 증명이 끝나면 버린다."""

    def __init__(self, l, r):
        if len(l) != len(r):
            raise ValueError(f"l과 r의 길이가 다릅니다: {len(l)} != {len(r)}")
        self.l = list(l)
        self.r = list(r)

    def __len__(self):
        return len(self.l)

    def inner_product(self):
        return dot(self.l, self.r)


class InnerProductProof:
    """재귀가 끝난 뒤 남는 검증 가능한 산출물.

    속성:
        l_commits: 라운드별 L 커밋먼트 (길이 log₂ n)
        r_commits: 라운드별 R 커밋먼트 (길이 log₂ n)
        l: 완전히 접힌 l 벡터의 마지막 원소
        r: 완전히 접힌 r 벡터의 마지막 원소
    """

    def __init__(self, l_commits, r_commits, l, r):
        if len(l_commits) != len(r_commits):
            raise ValueError(
                f"l_commits와 r_commits의 길이가 다릅니다: "
                f"{len(l_commits)} != {len(r_commits)}"
            )
        self.l_commits = tuple(l_commits)
        self.r_commits = tuple(r_commits)
        self.l = l
        self.r = r

    @property
    def rounds(self):
        """접기(halving) 라운드 수."""
        return len(self.l_commits)

    def validate(self, n):
        """원래 벡터 길이 n에 대해 라운드 수가 log₂ n인지 확인한다.

        Raises:
            ValueError: n이 2의 거듭제곱이 아니거나 라운드 수가 맞지 않을 때
        """
        expected = log2_exact(n)
        if self.rounds != expected:
            raise ValueError(
                f"라운드 수가 log2({n}) = {expected}와 다릅니다: {self.rounds}"
            )

    def __eq__(self, other):
        if not isinstance(other, InnerProductProof):
            return NotImplemented
        return (
            self.l_commits == other.l_commits
            and self.r_commits == other.r_commits
            and self.l == other.l
            and self.r == other.r
        )

    def __repr__(self):
        return f"InnerProductProof(rounds={self.rounds}, l={self.l}, r={self.r})"
