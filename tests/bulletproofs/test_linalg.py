"""
Linear algebra module tests: vectors, matrices, vector polynomials, solver.
"""
from fractions import Fraction

import pytest
from zkp.bulletproofs.field import FR, CURVE_ORDER
from zkp.bulletproofs.linalg import (
    SingularMatrixError,
    InconsistentSystemError,
    dot,
    hadamard,
    power_vector,
    vector_add,
    vector_sub,
    vector_scale,
    transpose,
    vector_matrix_product,
    vector_matrix_product_t,
    matrix_vector_product,
    matrix_product,
    power_matrix,
    gen_iden_matrix,
    gen_zero_matrix,
    evaluate_polynomial,
    multiply_poly,
    gaussian_reduce,
    back_substitute,
    solve_linear_system,
)


def frs(*values):
    return [FR(v) for v in values]


# =====================================================================
# Vector operations
# =====================================================================

class TestDot:
    def test_basic(self):
        assert dot(frs(1, 2, 3), frs(4, 5, 6)) == FR(32)

    def test_matches_sum_of_products(self):
        a = frs(7, 11, 13, 17)
        b = frs(19, 23, 29, 31)
        expected = FR(0)
        for x, y in zip(a, b):
            expected = expected + x * y
        assert dot(a, b) == expected

    def test_wraps_modulus(self):
        assert dot([FR(CURVE_ORDER - 1)], [FR(2)]) == FR(CURVE_ORDER - 2)

    def test_empty(self):
        assert dot([], []) == FR(0)

    def test_ints(self):
        assert dot([1, 2], [3, 4]) == 11

    def test_length_mismatch(self):
        with pytest.raises(ArithmeticError):
            dot(frs(1, 2), frs(1))


class TestHadamard:
    def test_basic(self):
        assert hadamard(frs(1, 2, 3), frs(4, 5, 6)) == frs(4, 10, 18)

    def test_elementwise(self):
        a = frs(3, 9, 27)
        b = frs(2, 4, 8)
        h = hadamard(a, b)
        for i in range(3):
            assert h[i] == a[i] * b[i]

    def test_length_mismatch(self):
        with pytest.raises(ArithmeticError):
            hadamard(frs(1), frs(1, 2))


class TestPowerVector:
    def test_powers_of_two(self):
        assert power_vector(FR(2), 5) == frs(1, 2, 4, 8, 16)

    def test_first_is_one(self):
        assert power_vector(FR(12345), 3)[0] == FR(1)

    def test_zero_length(self):
        assert power_vector(FR(3), 0) == []

    def test_inverse(self):
        y = FR(9)
        inv = power_vector(FR(1) / y, 4)
        assert hadamard(inv, power_vector(y, 4)) == frs(1, 1, 1, 1)


class TestVectorArithmetic:
    def test_add(self):
        assert vector_add(frs(1, 2), frs(3, 4)) == frs(4, 6)

    def test_sub(self):
        assert vector_sub(frs(5, 7), frs(2, 3)) == frs(3, 4)

    def test_sub_wrap(self):
        assert vector_sub(frs(0), frs(1)) == [FR(CURVE_ORDER - 1)]

    def test_scale(self):
        assert vector_scale(FR(3), frs(1, 2, 3)) == frs(3, 6, 9)

    def test_add_length_mismatch(self):
        with pytest.raises(ArithmeticError):
            vector_add(frs(1, 2), frs(1))

    def test_sub_length_mismatch(self):
        with pytest.raises(ArithmeticError):
            vector_sub(frs(1), frs(1, 2))


# =====================================================================
# Matrix operations
# =====================================================================

class TestMatrixBuilders:
    def test_identity_2(self):
        assert gen_iden_matrix(2) == [frs(1, 0), frs(0, 1)]

    def test_identity_3(self):
        I = gen_iden_matrix(3)
        for i in range(3):
            for j in range(3):
                assert I[i][j] == (FR(1) if i == j else FR(0))

    def test_zero_2x3(self):
        assert gen_zero_matrix(2, 3) == [frs(0, 0, 0), frs(0, 0, 0)]

    def test_zero_rows_are_distinct(self):
        Z = gen_zero_matrix(2, 2)
        Z[0][0] = FR(9)
        assert Z[1][0] == FR(0)

    def test_identity_other_field(self):
        assert gen_iden_matrix(2, field=Fraction) == [[1, 0], [0, 1]]


class TestTranspose:
    def test_2x3(self):
        assert transpose([[1, 2, 3], [4, 5, 6]]) == [[1, 4], [2, 5], [3, 6]]


class TestVectorMatrixProduct:
    M = [frs(1, 2, 3), frs(4, 5, 6)]  # 2 × 3

    def test_row_vector_times_matrix(self):
        # [1, 1] · M = 열 합
        assert vector_matrix_product(frs(1, 1), self.M) == frs(5, 7, 9)

    def test_weighted(self):
        assert vector_matrix_product(frs(2, 3), self.M) == frs(14, 19, 24)

    def test_length_must_match_rows(self):
        with pytest.raises(ArithmeticError):
            vector_matrix_product(frs(1, 1, 1), self.M)

    def test_transposed_form(self):
        # v · Mᵀ: 각 행과의 내적
        assert vector_matrix_product_t(frs(1, 1, 1), self.M) == frs(6, 15)

    def test_transposed_length_must_match_cols(self):
        with pytest.raises(ArithmeticError):
            vector_matrix_product_t(frs(1, 1), self.M)

    def test_forms_are_different(self):
        square = [frs(1, 2), frs(3, 4)]
        v = frs(1, 0)
        assert vector_matrix_product(v, square) == frs(1, 2)
        assert vector_matrix_product_t(v, square) == frs(1, 3)

    def test_transposed_equals_product_with_transpose(self):
        square = [frs(1, 2), frs(3, 4)]
        v = frs(5, 6)
        assert vector_matrix_product_t(v, square) == vector_matrix_product(v, transpose(square))

    def test_matrix_vector_product(self):
        assert matrix_vector_product(self.M, frs(1, 0, 1)) == frs(4, 10)


class TestMatrixProduct:
    def test_2x2(self):
        A = [frs(1, 2), frs(3, 4)]
        B = [frs(5, 6), frs(7, 8)]
        assert matrix_product(A, B) == [frs(19, 22), frs(43, 50)]

    def test_rectangular(self):
        A = [frs(1, 2, 3)]          # 1 × 3
        B = [frs(1), frs(2), frs(3)]  # 3 × 1
        assert matrix_product(A, B) == [frs(14)]

    def test_identity(self):
        A = [frs(1, 2), frs(3, 4)]
        assert matrix_product(A, gen_iden_matrix(2)) == A
        assert matrix_product(gen_iden_matrix(2), A) == A

    def test_dimension_mismatch(self):
        with pytest.raises(ArithmeticError):
            matrix_product([frs(1, 2)], [frs(1, 2)])


class TestPowerMatrix:
    A = [frs(1, 1), frs(0, 1)]

    def test_zero_returns_matrix_itself(self):
        # 0제곱은 단위행렬이 아니라 M 자신
        assert power_matrix(self.A, 0) == self.A
        assert power_matrix(self.A, 0) != gen_iden_matrix(2)

    def test_one_is_square(self):
        assert power_matrix(self.A, 1) == matrix_product(self.A, self.A)

    def test_k_multiplies_k_more_times(self):
        # [[1,1],[0,1]]^(k+1) = [[1,k+1],[0,1]]
        assert power_matrix(self.A, 3) == [frs(1, 4), frs(0, 1)]

    def test_negative(self):
        with pytest.raises(ValueError):
            power_matrix(self.A, -1)


# =====================================================================
# Vector polynomials
# =====================================================================

class TestEvaluatePolynomial:
    def test_linear(self):
        coeffs = [frs(1, 2), frs(3, 4)]
        assert evaluate_polynomial(2, coeffs, FR(10)) == frs(31, 42)

    def test_quadratic(self):
        coeffs = [frs(1), frs(0), frs(1)]  # 1 + x²
        assert evaluate_polynomial(1, coeffs, FR(3)) == frs(10)

    def test_no_coefficients_gives_zero_vector(self):
        assert evaluate_polynomial(3, [], FR(5)) == frs(0, 0, 0)

    def test_bound_larger_than_width_pads_with_zeros(self):
        coeffs = [frs(1, 1), frs(1, 1)]
        assert evaluate_polynomial(4, coeffs, FR(2)) == frs(3, 3, 0, 0)

    def test_bound_smaller_than_width_keeps_all_positions(self):
        coeffs = [frs(1, 2, 3), frs(1, 1, 1)]
        assert evaluate_polynomial(1, coeffs, FR(1)) == frs(2, 3, 4)

    def test_matches_scalar_evaluation(self):
        coeffs = [frs(2, 5), frs(7, 11), frs(13, 17)]
        x = FR(19)
        result = evaluate_polynomial(2, coeffs, x)
        for k in range(2):
            assert result[k] == coeffs[0][k] + coeffs[1][k] * x + coeffs[2][k] * x * x


class TestMultiplyPoly:
    def test_one_plus_x_squared(self):
        assert multiply_poly([[1], [1]], [[1], [1]]) == [1, 2, 1]

    def test_fr_coefficients(self):
        result = multiply_poly([frs(1), frs(1)], [frs(1), frs(1)])
        assert result == frs(1, 2, 1)

    def test_output_length(self):
        L = [frs(1, 2)] * 3
        R = [frs(3, 4)] * 4
        assert len(multiply_poly(L, R)) == 3 + 4 - 1

    def test_vector_coefficients_use_dot(self):
        L = [frs(1, 2), frs(3, 4)]
        R = [frs(5, 6), frs(7, 8)]
        # t0 = <L0,R0>, t1 = <L0,R1> + <L1,R0>, t2 = <L1,R1>
        assert multiply_poly(L, R) == frs(17, 23 + 39, 53)

    def test_inner_product_of_evaluations(self):
        L = [frs(1, 2, 3), frs(4, 5, 6)]
        R = [frs(7, 8, 9), frs(1, 0, 2)]
        t = multiply_poly(L, R)
        x = FR(23)
        lx = evaluate_polynomial(3, L, x)
        rx = evaluate_polynomial(3, R, x)
        assert dot(lx, rx) == t[0] + t[1] * x + t[2] * x * x

    def test_empty(self):
        assert multiply_poly([], [frs(1)]) == []


# =====================================================================
# Linear system solver
# =====================================================================

class TestSolveLinearSystem:
    def test_two_by_two(self):
        # x + y = 3, x - y = 1
        assert solve_linear_system([frs(1, 1, 3), [FR(1), FR(-1), FR(1)]]) == frs(2, 1)

    def test_requires_row_swap(self):
        # 0x + y = 4, 2x + y = 10
        assert solve_linear_system([frs(0, 1, 4), frs(2, 1, 10)]) == frs(3, 4)

    def test_three_by_three(self):
        M = [frs(2, 1, 1), frs(1, 3, 2), frs(1, 0, 0)]
        x = frs(4, 5, 6)
        b = matrix_vector_product(M, x)
        augmented = [row + [bi] for row, bi in zip(M, b)]
        assert solve_linear_system(augmented) == x

    def test_random_system(self, rng):
        n = 5
        M = [[FR(rng.randrange(CURVE_ORDER)) for _ in range(n)] for _ in range(n)]
        x = [FR(rng.randrange(CURVE_ORDER)) for _ in range(n)]
        b = matrix_vector_product(M, x)
        augmented = [row + [bi] for row, bi in zip(M, b)]
        assert matrix_vector_product(M, solve_linear_system(augmented)) == b

    def test_single_unknown(self):
        assert solve_linear_system([frs(4, 12)]) == frs(3)

    def test_fractions(self):
        aug = [[Fraction(2), Fraction(1), Fraction(5)], [Fraction(1), Fraction(3), Fraction(10)]]
        assert solve_linear_system(aug) == [Fraction(1), Fraction(3)]

    def test_non_integer_solution_stays_exact(self):
        x = solve_linear_system([[Fraction(3), Fraction(1)]])
        assert x == [Fraction(1, 3)]
        assert isinstance(x[0], Fraction)
        y = solve_linear_system([frs(3, 1)])
        assert y == [FR(1) / FR(3)]
        assert isinstance(y[0], FR)

    def test_singular(self):
        with pytest.raises(SingularMatrixError):
            solve_linear_system([frs(1, 2, 3), frs(2, 4, 6)])

    def test_singular_zero_column(self):
        with pytest.raises(SingularMatrixError) as exc:
            solve_linear_system([frs(0, 1, 1), frs(0, 2, 2)])
        assert exc.value.column == 0

    def test_singular_is_arithmetic_error(self):
        with pytest.raises(ArithmeticError):
            solve_linear_system([frs(0, 0, 1), frs(0, 0, 1)])

    def test_underdetermined(self):
        with pytest.raises(SingularMatrixError):
            solve_linear_system([frs(1, 1, 1, 3)])

    def test_overdetermined_consistent(self):
        # 여분의 0 행은 허용된다
        assert solve_linear_system([frs(1, 0, 2), frs(0, 0, 0), frs(0, 1, 5)]) == frs(2, 5)

    def test_overdetermined_inconsistent(self):
        with pytest.raises(InconsistentSystemError):
            solve_linear_system([frs(1, 0, 2), frs(0, 0, 1), frs(0, 1, 5)])

    def test_ragged_rows(self):
        with pytest.raises(ArithmeticError):
            solve_linear_system([frs(1, 1, 3), frs(1, 1)])


class TestGaussianReduce:
    def test_row_echelon_with_unit_pivots(self):
        R = gaussian_reduce([frs(2, 4, 6), frs(1, 3, 5)])
        assert R[0][0] == FR(1)
        assert R[1][0] == FR(0)
        assert R[1][1] == FR(1)

    def test_last_row_scaled_by_its_pivot(self):
        R = gaussian_reduce([frs(1, 0, 1), frs(0, 4, 8)])
        assert R[-1][-2:] == frs(1, 2)

    def test_back_substitute(self):
        assert back_substitute([frs(1, 2, 8), frs(0, 1, 3)]) == frs(2, 3)
