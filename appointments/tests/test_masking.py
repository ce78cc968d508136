import pytest

from appointments.masking import mask_ssn


@pytest.mark.parametrize('raw, masked', [
    ('123-45-6789', '***-**-6789'),
    ('123456789', '*****6789'),
    ('AB 12 34 56 C', '** ** ** 56 C'),
    ('1234', '****'),
    ('', ''),
    (None, ''),
])
def test_mask_ssn(raw, masked):
    assert mask_ssn(raw) == masked


def test_mask_never_leaks_head():
    ssn = '987-65-4321'
    assert '987' not in mask_ssn(ssn)
    assert mask_ssn(ssn).endswith('4321')
