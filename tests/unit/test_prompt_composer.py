from staging_service.domain.service.prompt_composer import (
    BASE_STAGING_PROMPT,
    VARIATION_CLAUSES,
    compose,
)


def test_compose_starts_with_staging_rules_and_style():
    prompt = compose("Coastal style", None, 0)

    assert prompt.startswith(BASE_STAGING_PROMPT)
    assert prompt.endswith("Style: Coastal style")


def test_custom_text_is_appended_verbatim_after_style():
    prompt = compose("Luxury style", "  keep the piano  ", 0)

    style_at = prompt.index("Style: Luxury style")
    custom_at = prompt.index("Additional instructions from user:   keep the piano  ")
    assert style_at < custom_at


def test_empty_custom_text_is_ignored():
    assert compose("Farmhouse", "", 0) == compose("Farmhouse", None, 0)


def test_whitespace_custom_text_is_kept_verbatim():
    prompt = compose("Farmhouse", "   ", 0)

    assert prompt.endswith("Additional instructions from user:    ")


def test_variation_clauses_are_appended_last():
    base = compose("Scandinavian", "cozy", 0)
    alternate = compose("Scandinavian", "cozy", 1)
    bold = compose("Scandinavian", "cozy", 2)

    assert alternate == base + "\n\n" + VARIATION_CLAUSES[1]
    assert bold == base + "\n\n" + VARIATION_CLAUSES[2]


def test_out_of_range_variation_appends_nothing():
    base = compose("Industrial", None, 0)

    assert compose("Industrial", None, 3) == base
    assert compose("Industrial", None, 99) == base
    assert compose("Industrial", None, -1) == base


def test_compose_is_deterministic():
    first = compose("Mid-Century Modern", "add plants", 1)
    second = compose("Mid-Century Modern", "add plants", 1)

    assert first == second
