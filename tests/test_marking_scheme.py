import pytest

from errors import InvalidScore
from marking_scheme import (
    CRITERIA, MAX_TOTAL_SCORE, SCORE_FIELDS,
    calculate_total_score, get_marking_scheme, validate_scores,
)
from conftest import VALID_SCORES


def test_scheme_adds_up_to_100():
    assert MAX_TOTAL_SCORE == 100
    assert len(SCORE_FIELDS) == 9
    scheme = get_marking_scheme()
    assert sum(group['weight'] for group in scheme['groups']) == 100
    for group in scheme['groups']:
        assert group['weight'] == sum(c['max_score'] for c in group['criteria'])


def test_scenario_total_is_79():
    values = validate_scores(VALID_SCORES)
    assert calculate_total_score(values) == 79


def test_all_maximums_total_100_and_all_zeros_total_0():
    maximums = {c.field: c.max_score for c in CRITERIA}
    zeros = {c.field: 0 for c in CRITERIA}
    assert calculate_total_score(validate_scores(maximums)) == 100
    assert calculate_total_score(validate_scores(zeros)) == 0


def test_decimals_are_accepted():
    scores = dict(VALID_SCORES, concept_score=7.5, overall_material_score=4.25)
    values = validate_scores(scores)
    assert calculate_total_score(values) == pytest.approx(79 - 0.5 + 0.25)


def test_numeric_strings_are_accepted():
    scores = dict(VALID_SCORES, relevance_score='12')
    assert validate_scores(scores)['relevance_score'] == 12.0


@pytest.mark.parametrize('field, value, criterion, upper', [
    ('aesthetic_appeal_score', 25, 'Aesthetic Appeal', 20),
    ('relevance_score', 15.5, 'Relevance', 15),
    ('overall_material_score', 6, 'Overall Material', 5),
    ('concept_score', -1, 'Concept', 10),
])
def test_out_of_range_names_criterion_and_range(field, value, criterion, upper):
    with pytest.raises(InvalidScore) as excinfo:
        validate_scores(dict(VALID_SCORES, **{field: value}))
    error = excinfo.value
    assert error.criterion == criterion
    assert error.field == field
    assert error.min_score == 0
    assert error.max_score == upper
    assert error.message == f'{criterion} score must be between 0-{upper}'


def test_bounds_are_inclusive():
    scores = dict(VALID_SCORES, relevance_score=15, overall_material_score=0)
    assert validate_scores(scores)['relevance_score'] == 15


def test_missing_criterion_is_rejected():
    scores = dict(VALID_SCORES)
    del scores['colour_score']
    with pytest.raises(InvalidScore) as excinfo:
        validate_scores(scores)
    assert excinfo.value.criterion == 'Colour'
    assert 'required' in excinfo.value.message


@pytest.mark.parametrize('value', ['high', True, float('nan'), float('inf'), [3]])
def test_non_numeric_values_are_rejected(value):
    with pytest.raises(InvalidScore):
        validate_scores(dict(VALID_SCORES, balance_score=value))
