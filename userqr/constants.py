"""Option lists shared by the form, the country filter and bulk generation."""

COUNTRIES = (
    ('US', 'United States'),
    ('GB', 'United Kingdom'),
    ('CA', 'Canada'),
    ('AU', 'Australia'),
    ('DE', 'Germany'),
    ('FR', 'France'),
    ('IN', 'India'),
    ('JP', 'Japan'),
    ('BR', 'Brazil'),
    ('UA', 'Ukraine'),
)

COUNTRY_VALUES = tuple(value for value, _ in COUNTRIES)

INTERESTS = (
    'sports',
    'music',
    'reading',
    'travel',
    'cooking',
    'gaming',
    'art',
    'technology',
)

GENDERS = ('male', 'female', 'other')


def country_label(value):
    return dict(COUNTRIES).get(value, value)
