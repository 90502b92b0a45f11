# marking_scheme.py
# Fixed jury marking scheme: nine bounded criteria adding up to 100 points

import math
from collections import namedtuple

from errors import InvalidScore

ScoreCriterion = namedtuple('ScoreCriterion', ['field', 'name', 'label', 'min_score', 'max_score', 'description'])

MARKING_SCHEME = [
    {
        'name': 'Concept',
        'weight': 10,
        'criteria': [
            ScoreCriterion('concept_score', 'Concept', 'Concept strongness & its depth', 0, 10,
                           'Evaluate the strength and depth of the concept'),
        ],
    },
    {
        'name': 'Relevance to Competition Theme',
        'weight': 15,
        'criteria': [
            ScoreCriterion('relevance_score', 'Relevance', 'Futuristic approach / concept / look', 0, 15,
                           'How well does it align with a futuristic theme'),
        ],
    },
    {
        'name': 'Design & Aesthetics',
        'weight': 60,
        'criteria': [
            ScoreCriterion('composition_score', 'Composition', 'Composition', 0, 10,
                           'Overall composition and layout'),
            ScoreCriterion('balance_score', 'Balance', 'Balance', 0, 10,
                           'Visual balance and harmony'),
            ScoreCriterion('colour_score', 'Colour', 'Colour/Colours', 0, 10,
                           'Use of color and color palette'),
            ScoreCriterion('design_relativity_score', 'Design Relativity', 'Design Relativity to their concept', 0, 10,
                           'How well the design relates to the concept'),
            ScoreCriterion('aesthetic_appeal_score', 'Aesthetic Appeal', 'Aesthetic appeal', 0, 20,
                           'Overall aesthetic quality and appeal'),
        ],
    },
    {
        'name': 'Innovative Usage of Materials',
        'weight': 15,
        'criteria': [
            ScoreCriterion('unconventional_materials_score', 'Unconventional Materials',
                           'Usage of unconventional materials', 0, 10,
                           'Creativity in material selection'),
            ScoreCriterion('overall_material_score', 'Overall Material', 'Overall material usage', 0, 5,
                           'Overall material application and execution'),
        ],
    },
]

# Flat view in display order
CRITERIA = [c for group in MARKING_SCHEME for c in group['criteria']]
SCORE_FIELDS = [c.field for c in CRITERIA]
MAX_TOTAL_SCORE = sum(c.max_score for c in CRITERIA)


def validate_scores(scores):
    """
    Checks every criterion against its inclusive range and returns the
    values as floats, keyed by field. Stops at the first bad criterion.
    """
    validated = {}
    for c in CRITERIA:
        raw = scores.get(c.field)
        if raw is None:
            raise InvalidScore(c.name, c.field, c.min_score, c.max_score,
                               message=f'{c.name} score is required')
        # bool is an int subclass; a checkbox value is not a score
        if isinstance(raw, bool):
            raise InvalidScore(c.name, c.field, c.min_score, c.max_score, value=raw,
                               message=f'{c.name} score must be a number')
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidScore(c.name, c.field, c.min_score, c.max_score, value=raw,
                               message=f'{c.name} score must be a number')
        if not math.isfinite(value) or value < c.min_score or value > c.max_score:
            raise InvalidScore(c.name, c.field, c.min_score, c.max_score, value=raw)
        validated[c.field] = value
    return validated


def calculate_total_score(scores):
    return sum(scores[field] for field in SCORE_FIELDS)


def get_marking_scheme():
    return {
        'max_total_score': MAX_TOTAL_SCORE,
        'groups': [
            {
                'name': group['name'],
                'weight': group['weight'],
                'criteria': [c._asdict() for c in group['criteria']],
            }
            for group in MARKING_SCHEME
        ],
    }
