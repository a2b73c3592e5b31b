"""Tests for datetime endpoint handling."""

from datetime import datetime

import pytest
import pytz

from unbounded_interval_tree import IntervalTree, Included, Excluded, Unbounded
from unbounded_interval_tree import codec, timezone_utils
from unbounded_interval_tree.timezone_utils import (
    to_utc_datetime, encode_datetime_key, decode_datetime_key,
)


@pytest.fixture(autouse=True)
def amsterdam():
    timezone_utils.set_timezone("Europe/Amsterdam")
    yield
    timezone_utils.set_timezone(None)


def test_naive_datetimes_are_local_time():
    utc = to_utc_datetime(datetime(2024, 7, 1, 12, 0))
    assert utc == pytz.UTC.localize(datetime(2024, 7, 1, 10, 0))


def test_aware_datetimes_keep_their_instant():
    tokyo = pytz.timezone("Asia/Tokyo").localize(datetime(2024, 1, 1, 9, 0))
    assert to_utc_datetime(tokyo) == pytz.UTC.localize(datetime(2024, 1, 1, 0, 0))


def test_unknown_timezone_falls_back():
    timezone_utils.set_timezone("Not/AZone")
    tz = timezone_utils.get_local_timezone()
    assert tz.localize(datetime(2024, 1, 1)).utcoffset() is not None


def test_key_round_trip():
    dt = pytz.UTC.localize(datetime(2024, 3, 31, 1, 30))
    text = encode_datetime_key(dt)
    assert text == "2024-03-31T01:30:00+00:00"
    assert decode_datetime_key(text) == dt


def test_key_codec_rejects_other_types():
    with pytest.raises(TypeError):
        encode_datetime_key("2024-01-01")
    with pytest.raises(ValueError):
        decode_datetime_key(20240101)


def test_datetime_tree_round_trip():
    start = pytz.UTC.localize(datetime(2024, 5, 1, 8, 0))
    end = pytz.UTC.localize(datetime(2024, 5, 1, 17, 0))
    tree = IntervalTree([(Included(start), Excluded(end)), (Included(end), Unbounded)])

    text = codec.dumps(tree, encode_key=encode_datetime_key)
    decoded = codec.loads(text, decode_key=decode_datetime_key)

    assert decoded == tree
    assert decoded.contains_point(pytz.UTC.localize(datetime(2024, 5, 2)))


def test_naive_keys_stay_naive():
    dt = datetime(2024, 5, 1, 8, 0)
    text = encode_datetime_key(dt)
    assert text == "2024-05-01T08:00:00"
    assert decode_datetime_key(text) == dt
    assert decode_datetime_key(text).tzinfo is None


def test_naive_tree_round_trip():
    tree = IntervalTree([(Included(datetime(2024, 5, 1, 8)), Excluded(datetime(2024, 5, 1, 17)))])

    text = codec.dumps(tree, encode_key=encode_datetime_key)
    decoded = codec.loads(text, decode_key=decode_datetime_key)

    assert decoded == tree
    assert decoded.contains_point(datetime(2024, 5, 1, 9))
    assert not decoded.contains_point(datetime(2024, 5, 1, 17))


def test_aware_keys_come_back_in_utc():
    tokyo = pytz.timezone("Asia/Tokyo").localize(datetime(2024, 1, 1, 9, 0))
    decoded = decode_datetime_key(encode_datetime_key(tokyo))
    assert decoded == tokyo
    assert decoded.utcoffset().total_seconds() == 0


def test_system_timezone_when_unset():
    timezone_utils.set_timezone(None)
    tz = timezone_utils.get_local_timezone()
    assert tz.localize(datetime(2024, 1, 1)).utcoffset() is not None
