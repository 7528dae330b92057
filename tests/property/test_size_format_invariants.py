"""Property-based tests for size formatting invariants using Hypothesis.

Formatting keeps at most two decimals of the scaled value, so parsing the
result must land within half a hundredth of the chosen unit.
"""

from __future__ import annotations

from hypothesis import given, strategies as st

from filekeeper.utils.formatting import format_size, parse_size

_UNIT_BYTES = {"bytes.": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3, "TB": 1024**4}

# Byte counts spread across all five tiers, up to the 64-bit range
byte_counts = st.one_of(
    st.integers(min_value=0, max_value=1023),
    st.integers(min_value=1024, max_value=1024**2 - 1),
    st.integers(min_value=1024**2, max_value=1024**3 - 1),
    st.integers(min_value=1024**3, max_value=1024**4 - 1),
    st.integers(min_value=1024**4, max_value=2**63 - 1),
)


class TestFormatParseInvariants:
    """Property-based tests for format/parse recovery."""

    @given(byte_counts)
    def test_parse_recovers_formatted_value(self, value: int) -> None:
        """Property: parse(format(v)) is within the 2-decimal rounding bound."""
        text = format_size(value)
        unit = text.rsplit(" ", 1)[1]

        recovered = parse_size(text)

        # Half a hundredth of the unit, plus float slack for huge values
        bound = 0.005 * _UNIT_BYTES[unit] + abs(value) * 1e-12 + 1e-9
        assert abs(recovered - value) <= bound

    @given(byte_counts)
    def test_scaled_value_is_at_least_one_above_bytes(self, value: int) -> None:
        """Property: the largest unit keeping the scaled value >= 1 is chosen."""
        text = format_size(value)
        number, unit = text.rsplit(" ", 1)

        if unit != "bytes.":
            assert float(number) >= 1
        if unit != "TB":
            # A larger unit would have scaled below one
            assert value < 1024 * _UNIT_BYTES[unit]

    @given(byte_counts)
    def test_format_is_deterministic(self, value: int) -> None:
        """Property: same input always produces same output."""
        assert format_size(value) == format_size(value)
