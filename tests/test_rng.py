import pytest

from poshash.core.rng import Lcg48, MersenneSource, make_source


def test_lcg48_matches_java_random_next_int() -> None:
    # new java.util.Random(42).nextInt() / new Random(0).nextInt()
    assert Lcg48(42).next_bits(32) == -1170105035
    assert Lcg48(0).next_bits(32) == -1155484576


def test_lcg48_matches_java_random_next_long() -> None:
    # new java.util.Random(seed).nextLong(), as unsigned
    assert Lcg48(0).next_u64() == -4962768465676381896 & 0xFFFFFFFFFFFFFFFF
    assert Lcg48(42).next_u64() == -5025562857975149833 & 0xFFFFFFFFFFFFFFFF


def test_lcg48_values_are_unsigned_64_bit() -> None:
    src = Lcg48(24)
    for _ in range(1000):
        v = src.next_u64()
        assert 0 <= v < (1 << 64)


def test_negative_seed_uses_low_bits() -> None:
    a = Lcg48(-1)
    b = Lcg48((1 << 64) - 1)
    assert [a.next_u64() for _ in range(4)] == [b.next_u64() for _ in range(4)]


@pytest.mark.parametrize("bits", [0, 33])
def test_lcg48_rejects_bad_bit_count(bits: int) -> None:
    with pytest.raises(ValueError):
        Lcg48(1).next_bits(bits)


@pytest.mark.parametrize("name", ["lcg48", "mt19937"])
def test_sources_are_deterministic(name: str) -> None:
    a = make_source(name, 1234)
    b = make_source(name, 1234)
    assert [a.next_u64() for _ in range(50)] == [b.next_u64() for _ in range(50)]


def test_sources_differ_by_seed() -> None:
    assert MersenneSource(1).next_u64() != MersenneSource(2).next_u64()
    assert Lcg48(1).next_u64() != Lcg48(2).next_u64()


def test_unknown_source() -> None:
    with pytest.raises(ValueError, match="unknown random algorithm"):
        make_source("xorshift", 1)
