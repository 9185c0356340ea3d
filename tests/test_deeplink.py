"""Tests for the deep-link fragment codec."""

import pytest

from corpus_forensics.deeplink import (
    DiffLayout,
    HashState,
    ViewTab,
    decode_hash_state,
    encode_hash_state,
)


class TestEncode:
    def test_defaults_encode_to_empty(self):
        assert encode_hash_state(HashState()) == ""

    def test_commit_only(self):
        assert encode_hash_state(HashState(commit_short="abc1234")) == "#c=abc1234"

    def test_full_state(self):
        state = HashState(
            commit_short="abc1234",
            tab=ViewTab.LEDGER,
            file="spec/core.md",
            diff_layout=DiffLayout.SIDE_BY_SIDE,
            query="frame budget",
            reviewed_only=True,
            bucket=3,
        )
        assert encode_hash_state(state) == (
            "#c=abc1234&tab=ledger&f=spec%2Fcore.md&d=sideBySide&q=frame+budget&ro=1&b=3"
        )

    def test_bucket_zero_is_kept(self):
        assert encode_hash_state(HashState(bucket=0)) == "#b=0"

    def test_all_files_token_is_omitted(self):
        assert encode_hash_state(HashState(file="__ALL__")) == ""


class TestDecode:
    def test_empty_fragment(self):
        assert decode_hash_state("") == HashState()
        assert decode_hash_state("#") == HashState()

    def test_without_leading_hash(self):
        assert decode_hash_state("c=abc1234").commit_short == "abc1234"

    def test_unknown_keys_ignored(self):
        assert decode_hash_state("#zz=1&c=abc1234") == HashState(commit_short="abc1234")

    def test_invalid_values_fall_back(self):
        state = decode_hash_state("#tab=charts&d=split&ro=yes&b=11")
        assert state == HashState()

    def test_non_numeric_bucket(self):
        assert decode_hash_state("#b=x").bucket is None

    def test_all_files_token(self):
        assert decode_hash_state("#f=__ALL__").file is None

    def test_garbage_never_raises(self):
        assert isinstance(decode_hash_state("#%%%&&==&b=&tab="), HashState)

    @pytest.mark.parametrize(
        "state",
        [
            HashState(commit_short="abc1234"),
            HashState(commit_short="abc1234", tab=ViewTab.FILES, bucket=10),
            HashState(file="docs/a b&c.md", query="a=b & c", reviewed_only=True),
            HashState(diff_layout=DiffLayout.SIDE_BY_SIDE, tab=ViewTab.RAW, bucket=0),
        ],
    )
    def test_round_trip(self, state):
        assert decode_hash_state(encode_hash_state(state)) == state
