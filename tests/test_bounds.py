"""Tests for the endpoint model: role encodings, range order, coercion."""

import pytest

from unbounded_interval_tree.bounds import (
    Included, Excluded, Unbounded,
    lower_key, upper_key, cmp_ranges, cmp_upper, max_upper, flip, spans,
    to_range, closed, at_most, format_range,
)


class TestRoleEncoding:

    def test_lower_role_orders_included_before_excluded(self):
        assert lower_key(Included(5)) < lower_key(Excluded(5))
        assert lower_key(Excluded(4)) < lower_key(Included(5))

    def test_upper_role_orders_excluded_before_included(self):
        assert upper_key(Excluded(5)) < upper_key(Included(5))
        assert upper_key(Included(4)) < upper_key(Excluded(5))

    def test_unbounded_is_minus_infinity_as_lower(self):
        assert lower_key(Unbounded) < lower_key(Included(-10**9))
        assert lower_key(Unbounded) == lower_key(Unbounded)

    def test_unbounded_is_plus_infinity_as_upper(self):
        assert upper_key(Unbounded) > upper_key(Included(10**9))
        assert upper_key(Unbounded) == upper_key(Unbounded)

    def test_cross_role_comparison(self):
        # [x as upper meets x] as lower: touching, one shared point
        assert lower_key(Included(5)) <= upper_key(Included(5))
        # 5[ as upper never reaches ]5 as lower
        assert upper_key(Excluded(5)) < lower_key(Excluded(5))
        assert upper_key(Included(5)) < lower_key(Excluded(5))
        assert upper_key(Excluded(5)) < lower_key(Included(5))

    def test_rejects_non_bounds(self):
        with pytest.raises(TypeError):
            lower_key(5)
        with pytest.raises(TypeError):
            upper_key(None)


class TestRangeOrder:

    def test_cmp_works_as_expected(self):
        key0 = (Unbounded, Excluded(20))
        key1 = (Included(1), Included(5))
        key2 = (Included(1), Excluded(7))
        key3 = (Included(1), Included(7))
        key4 = (Excluded(5), Excluded(9))
        key5 = (Included(7), Included(8))

        assert cmp_ranges(key1, key1) == 0
        assert cmp_ranges(key1, key2) == -1
        assert cmp_ranges(key2, key3) == -1
        assert cmp_ranges(key0, key1) == -1
        assert cmp_ranges(key4, key5) == -1
        assert cmp_ranges(key5, key4) == 1

    def test_cmp_on_strings(self):
        key_str1 = (Included("abc"), Excluded("def"))
        key_str2 = (Included("bbc"), Included("bde"))
        key_str3 = (Included("bbc"), Unbounded)

        assert cmp_ranges(key_str1, key_str2) == -1
        assert cmp_ranges(key_str2, key_str3) == -1

    def test_cmp_upper_and_max_upper(self):
        assert cmp_upper(Included(3), Excluded(3)) == 1
        assert cmp_upper(Unbounded, Unbounded) == 0
        assert max_upper(Excluded(3), Included(3)) == Included(3)
        assert max_upper(Included(9), Unbounded) is Unbounded

    def test_max_upper_keeps_first_on_tie(self):
        first = Included(3)
        assert max_upper(first, Included(3)) is first


class TestHelpers:

    def test_flip_keeps_value_object(self):
        value = ("a", 1)
        flipped = flip(Included(value))
        assert flipped == Excluded(value)
        assert flipped.value is value
        assert flip(Excluded(2)) == Included(2)

    def test_flip_unbounded_raises(self):
        with pytest.raises(ValueError):
            flip(Unbounded)

    def test_spans(self):
        assert spans(Included(3), Included(3))
        assert not spans(Excluded(3), Included(3))
        assert spans(Excluded(3), Excluded(4))
        assert spans(Unbounded, Unbounded)

    def test_bounds_are_hashable_and_distinct(self):
        assert len({Included(1), Included(1), Excluded(1), Unbounded}) == 3


class TestToRange:

    def test_pair_of_bounds_is_returned_as_is(self):
        r = (Included(1), Unbounded)
        assert to_range(r) is r

    def test_builtin_range(self):
        assert to_range(range(0, 5)) == (Included(0), Excluded(5))

    def test_slices(self):
        assert to_range(slice(2, 8)) == (Included(2), Excluded(8))
        assert to_range(slice(None, 8)) == (Unbounded, Excluded(8))
        assert to_range(slice(2, None)) == (Included(2), Unbounded)
        assert to_range(slice(None)) == (Unbounded, Unbounded)

    def test_constructors(self):
        assert closed(1, 4) == (Included(1), Included(4))
        assert at_most(4) == (Unbounded, Included(4))

    def test_stepped_inputs_are_rejected(self):
        with pytest.raises(ValueError):
            to_range(range(0, 10, 2))
        with pytest.raises(ValueError):
            to_range(slice(0, 10, 3))

    def test_bad_inputs_are_rejected(self):
        with pytest.raises(TypeError):
            to_range([Included(1), Included(2)])
        with pytest.raises(TypeError):
            to_range((1, 2))
        with pytest.raises(ValueError):
            to_range((Included(1),))

    @pytest.mark.parametrize("r", [
        (Excluded(5), Excluded(5)),
        (Included(5), Excluded(5)),
        (Excluded(5), Included(5)),
        (Included(7), Included(3)),
        range(4, 4),
        slice(9, 2),
    ])
    def test_empty_ranges_are_rejected(self, r):
        with pytest.raises(ValueError):
            to_range(r)

    def test_single_point_is_not_empty(self):
        assert to_range(closed(5, 5)) == (Included(5), Included(5))


def test_format_range():
    assert format_range((Included(1), Excluded(3))) == "[1,3["
    assert format_range((Excluded(1), Included(3))) == "]1,3]"
    assert format_range((Unbounded, Unbounded)) == "]-∞,∞["
