"""
Curve and Fiat-Shamir oracle tests: field.py, transcript.py
"""
import pytest
from py_ecc import bn128

from zkp.bulletproofs.field import (
    FR, CURVE_ORDER, GENERATOR_COUNT, G, H, GS, HS, Z1,
    ec_mul, ec_add, ec_neg, ec_sum, ec_multiexp,
    point_to_bytes, hash_to_point, generators, pedersen_commit,
)
from zkp.bulletproofs.transcript import (
    DOMAIN_TAG,
    Transcript,
    shamir_gxgxg,
    shamir_gxg,
    shamir_gs,
    shamir_z,
    shamir_u,
)


# =====================================================================
# FR
# =====================================================================

class TestFR:
    def test_field_modulus(self):
        assert FR.field_modulus == CURVE_ORDER

    def test_modular_reduction(self):
        assert FR(CURVE_ORDER + 7) == FR(7)

    def test_division_inverse(self):
        a = FR(3)
        assert a * (FR(1) / a) == FR(1)


# =====================================================================
# EC operations
# =====================================================================

class TestEC:
    def test_ec_mul_fr_and_int(self):
        assert ec_mul(G, FR(5)) == ec_mul(G, 5)

    def test_ec_mul_zero(self):
        assert ec_mul(G, 0) is Z1

    def test_ec_add_identity(self):
        assert ec_add(G, Z1) == G

    def test_ec_neg(self):
        P = ec_mul(G, 9)
        assert ec_add(P, ec_neg(P)) is Z1

    def test_ec_sum(self):
        assert ec_sum([G, G, G]) == ec_mul(G, 3)

    def test_ec_sum_empty(self):
        assert ec_sum([]) is Z1

    def test_multiexp(self):
        P = ec_multiexp([FR(2), FR(3)], [G, H])
        assert P == ec_add(ec_mul(G, 2), ec_mul(H, 3))

    def test_multiexp_length_mismatch(self):
        with pytest.raises(ValueError):
            ec_multiexp([FR(1)], [G, H])

    def test_point_to_bytes_length(self):
        assert len(point_to_bytes(G)) == 64

    def test_point_to_bytes_infinity(self):
        assert point_to_bytes(None) == b"\x00" * 64


# =====================================================================
# Generators
# =====================================================================

class TestGenerators:
    def test_on_curve(self):
        assert bn128.is_on_curve(H, bn128.b)
        for P in GS[:4] + HS[:4]:
            assert bn128.is_on_curve(P, bn128.b)

    def test_deterministic(self):
        assert hash_to_point(b"H") == H
        assert hash_to_point(b"Gs", 3) == GS[3]

    def test_lengths(self):
        assert len(GS) == GENERATOR_COUNT
        assert len(HS) == GENERATOR_COUNT

    def test_distinct(self):
        points = [G, H] + GS + HS
        assert len(set(point_to_bytes(p) for p in points)) == len(points)

    def test_too_many(self):
        with pytest.raises(ValueError):
            generators(b"Gs", GENERATOR_COUNT + 1)

    def test_negative_index(self):
        with pytest.raises(ValueError):
            hash_to_point(b"Gs", -1)


class TestPedersen:
    def test_formula(self):
        C = pedersen_commit(FR(5), FR(7))
        assert C == ec_add(ec_mul(G, 5), ec_mul(H, 7))

    def test_homomorphic(self):
        C1 = pedersen_commit(FR(2), FR(10))
        C2 = pedersen_commit(FR(3), FR(20))
        assert ec_add(C1, C2) == pedersen_commit(FR(5), FR(30))

    def test_blinding_hides(self):
        assert pedersen_commit(FR(5), FR(1)) != pedersen_commit(FR(5), FR(2))


# =====================================================================
# Fiat-Shamir
# =====================================================================

class TestTranscript:
    def test_starts_with_domain_tag(self):
        t = Transcript()
        assert bytes(t.state) == DOMAIN_TAG

    def test_domain_tag_is_field_order(self):
        assert DOMAIN_TAG == str(CURVE_ORDER).encode()

    def test_chained_challenges_differ(self):
        t = Transcript()
        t.append_scalar(b"v", FR(1))
        assert t.challenge_scalar(b"y") != t.challenge_scalar(b"y")

    def test_challenge_in_field(self):
        t = Transcript()
        t.append_point(b"A", G)
        c = t.challenge_scalar(b"y")
        assert isinstance(c, FR)
        assert 0 <= int(c) < CURVE_ORDER

    def test_label_comes_first(self):
        t = Transcript()
        t.append_scalar(b"mu", FR(7))
        assert bytes(t.state) == DOMAIN_TAG + b"mu" + (7).to_bytes(32, "big")

    def test_labels_are_hashed(self):
        a = Transcript()
        a.append_point(b"A", G)
        b = Transcript()
        b.append_point(b"S", G)
        assert a.challenge_scalar(b"y") != b.challenge_scalar(b"y")


class TestShamir:
    P1 = ec_mul(G, 2)
    P2 = ec_mul(G, 3)
    P3 = ec_mul(G, 4)

    def test_gxgxg_deterministic(self):
        assert shamir_gxgxg(self.P1, self.P2, self.P3) == shamir_gxgxg(self.P1, self.P2, self.P3)

    def test_gxgxg_binds_every_point(self):
        base = shamir_gxgxg(self.P1, self.P2, self.P3)
        assert shamir_gxgxg(H, self.P2, self.P3) != base
        assert shamir_gxgxg(self.P1, H, self.P3) != base
        assert shamir_gxgxg(self.P1, self.P2, H) != base

    def test_gxgxg_order_matters(self):
        assert shamir_gxgxg(self.P1, self.P2, self.P3) != shamir_gxgxg(self.P3, self.P2, self.P1)

    def test_gs_deterministic(self):
        assert shamir_gs([self.P1, self.P2]) == shamir_gs([self.P1, self.P2])

    def test_gs_binds_every_point(self):
        assert shamir_gs([self.P1, self.P2]) != shamir_gs([self.P1, self.P3])
        assert shamir_gs([self.P1, self.P2]) != shamir_gs([self.P1])

    def test_gs_matches_gxgxg_serialization(self):
        assert shamir_gs([self.P1, self.P2, self.P3]) == shamir_gxgxg(self.P1, self.P2, self.P3)

    def test_gxg(self):
        assert shamir_gxg(self.P1, self.P2) == shamir_gs([self.P1, self.P2])

    def test_z_deterministic(self):
        assert shamir_z(FR(42)) == shamir_z(FR(42))

    def test_z_avalanche(self):
        outputs = set(int(shamir_z(FR(i))) for i in range(32))
        assert len(outputs) == 32

    def test_u_binds_every_scalar(self):
        base = shamir_u(FR(1), FR(2), FR(3))
        assert shamir_u(FR(9), FR(2), FR(3)) != base
        assert shamir_u(FR(1), FR(9), FR(3)) != base
        assert shamir_u(FR(1), FR(2), FR(9)) != base

    def test_identity_point_hashes(self):
        assert shamir_gs([None]) != shamir_gs([G])
