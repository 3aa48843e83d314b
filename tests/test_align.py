import math

import pytest

from hapscore.align import (
    AlignmentContractError,
    AlignmentError,
    UngappedAligner,
    check_result,
)
from hapscore.models import AlignmentResult


def test_identical_sequences_have_no_variants() -> None:
    res = UngappedAligner().align("AAAA", "AAAA")
    e = 10 ** (-30 / 10)
    assert res.has_variants is False
    assert res.prior == 0.0
    assert res.likelihood == pytest.approx(4 * math.log10(1 - e))


def test_single_mismatch() -> None:
    aligner = UngappedAligner(snp_prior=1e-3)
    res = aligner.align("AAAA", "AAAT")
    assert res.has_variants is True
    assert res.prior == pytest.approx(-3.0)
    assert res.likelihood < UngappedAligner().align("AAAA", "AAAA").likelihood


def test_shorter_query_finds_best_offset() -> None:
    res = UngappedAligner().align("TTTACGTTT", "ACGT")
    assert res.has_variants is True  # lengths differ
    assert res.prior == pytest.approx(math.log10(1e-4))
    assert res.likelihood == pytest.approx(UngappedAligner().align("ACGT", "ACGT").likelihood)


def test_longer_query_slides_reference() -> None:
    aligner = UngappedAligner()
    long_q = aligner.align("ACGT", "GGACGTGG")
    assert long_q.prior == pytest.approx(math.log10(1e-4))
    assert long_q.likelihood == pytest.approx(aligner.align("ACGT", "ACGT").likelihood)


def test_n_bases_are_uninformative() -> None:
    res = UngappedAligner().align("ACGT", "ANGT")
    assert res.has_variants is False
    assert res.likelihood > UngappedAligner().align("ACGT", "ACGT").likelihood


def test_qualities_change_likelihood() -> None:
    aligner = UngappedAligner()
    high = aligner.align("ACGT", "ACTT", [40, 40, 40, 40])
    low = aligner.align("ACGT", "ACTT", [40, 40, 5, 40])
    assert low.likelihood > high.likelihood


def test_empty_reference() -> None:
    res = UngappedAligner().align("", "ACGT")
    assert res == AlignmentResult(likelihood=0.0, prior=0.0, has_variants=False)


@pytest.mark.parametrize(
    "reference,query,quals",
    [
        ("ACGT", "", None),
        ("ACGT", "AXGT", None),
        ("ACGT", "ACGT", [30, 30]),
    ],
)
def test_malformed_input_raises_alignment_error(reference, query, quals) -> None:
    with pytest.raises(AlignmentError):
        UngappedAligner().align(reference, query, quals)


def test_invalid_priors_rejected() -> None:
    with pytest.raises(ValueError):
        UngappedAligner(snp_prior=0.0)


def test_check_result_rejects_contract_violations() -> None:
    with pytest.raises(AlignmentContractError):
        check_result(None)
    with pytest.raises(AlignmentContractError):
        check_result(AlignmentResult(likelihood=math.nan, prior=0.0, has_variants=False))


def test_check_result_accepts_duck_typed_results() -> None:
    class Result:
        likelihood = -1.0
        prior = -0.5
        has_variants = 1

    assert check_result(Result()) == AlignmentResult(-1.0, -0.5, True)
