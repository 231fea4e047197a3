from histomap.formatting import format_range, format_year
from histomap.models import MIN_YEAR, TemporalRange


def test_bce_years_use_french_suffix():
    assert format_year(-250) == "250 av. J.-C."
    assert format_year(MIN_YEAR) == "300 av. J.-C."


def test_ce_years_are_plain_numbers():
    assert format_year(1789) == "1789"
    assert format_year(1) == "1"


def test_year_zero_is_labelled_bce():
    assert format_year(0) == "0 av. J.-C."


def test_format_range():
    assert format_range(TemporalRange(-52, 1889)) == "52 av. J.-C. – 1889"


def test_clamp_to_slider_bounds():
    assert TemporalRange.clamp(-1000, max_year=2024) == -300
    assert TemporalRange.clamp(3000, max_year=2024) == 2024
    assert TemporalRange.clamp(1515, max_year=2024) == 1515
